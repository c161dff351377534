"""
API listener - JSON responses for requests made with the .json extension
"""

from typing import Any, Dict

from flask import jsonify, request
from werkzeug.exceptions import BadRequest

from crud.errors import ValidationError
from crud.event import Event
from crud.listeners.base_listener import BaseListener, Handler
from logging_config import get_logger

logger = get_logger(__name__)


class ApiListener(BaseListener):
    """
    Turns an HTML action into a JSON endpoint.

    Only the methods listed under the action's ``api.methods`` are accepted.
    Flash messages are suppressed, and redirects and template rendering are
    replaced by a JSON body (success) or an HTTP error (failure).
    """

    def implemented_events(self) -> Dict[str, Handler]:
        if not self._component.is_api_request():
            return {}
        return {
            'before_handle': (self.check_request_method, 10),
            'set_flash': (self.suppress_flash, 5),
            'before_redirect': (self.respond, 100),
            'before_render': (self.respond, 100),
        }

    def check_request_method(self, event: Event) -> None:
        action = self._action(event.subject.action)
        allowed = [method.lower() for method in action.config['api']['methods']]
        method = request.method.lower()
        if method == 'head':
            method = 'get'
        if method not in allowed:
            logger.info("Rejected API request method",
                        action=action.name,
                        method=method,
                        allowed=allowed)
            raise BadRequest('Wrong request method')

    def suppress_flash(self, event: Event) -> None:
        event.stop()

    def respond(self, event: Event):
        subject = event.subject
        action = self._action(subject.action)
        if subject.get('success'):
            event.stop()
            return self.render(action, subject)

        entity = subject.get('entity')
        if entity is not None and entity.has_errors():
            raise ValidationError(entity)
        raise BadRequest(subject.get('text') or 'Bad request')

    def render(self, action, subject) -> Any:
        body: Dict[str, Any] = {'success': True}
        body.update(action.api_payload(subject))
        response = jsonify(body)
        response.status_code = action.config['api']['success']['code']
        return response
