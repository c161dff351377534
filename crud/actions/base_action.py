"""
Base class for CRUD actions
"""

from copy import deepcopy
from typing import Any, Dict, List, Optional

from flask import flash, redirect, render_template, request, url_for
from werkzeug.exceptions import MethodNotAllowed, NotFound

from crud.event import Event, Subject
from logging_config import get_logger, audit_logger

logger = get_logger(__name__)

HTTP_METHODS = ('get', 'post', 'put', 'patch', 'delete')


def merge_config(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge overrides into a copy of defaults"""
    merged = deepcopy(defaults)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


class BaseAction:
    """
    An action dispatches on the HTTP method to ``_get``, ``_post``, ``_put``,
    ``_patch`` or ``_delete``. Subclasses only implement the verbs they
    support; anything else is answered with 405.
    """

    #: URL shape: 'collection' (/blogs), 'new' (/blogs/add) or 'member' (/blogs/edit/1)
    route = 'member'
    #: Fallback template under templates/crud/
    template_kind = 'view'

    _defaults: Dict[str, Any] = {
        'enabled': True,
        'view': None,
        'messages': {
            'not_found': {'text': 'Not found'},
        },
        'api': {
            'methods': ['get'],
            'success': {'code': 200},
            'error': {},
        },
    }

    def __init__(self, component, name: str, config: Optional[Dict[str, Any]] = None):
        self._component = component
        self.name = name
        self.config = merge_config(merge_config(BaseAction._defaults, self._defaults), config or {})

    # Accessors

    @property
    def enabled(self) -> bool:
        return bool(self.config.get('enabled', True))

    @property
    def component(self):
        return self._component

    @property
    def repository(self):
        return self._component.repository

    @property
    def controller_name(self) -> str:
        return self._component.controller.name

    @property
    def resource_name(self) -> str:
        return self._component.controller.resource

    @property
    def resource_title(self) -> str:
        return self._component.controller.resource_title

    def supported_methods(self) -> List[str]:
        return [method.upper() for method in HTTP_METHODS if hasattr(self, f'_{method}')]

    def request_data(self) -> Dict[str, Any]:
        """Submitted payload: JSON body or form fields"""
        if request.is_json:
            data = request.get_json(silent=True)
            return dict(data) if isinstance(data, dict) else {}
        return request.form.to_dict()

    def url(self, action: str, **values) -> str:
        return url_for(f'{self.controller_name}.{action}', **values)

    # Dispatch

    def handle(self, args: Dict[str, Any]):
        subject = Subject(action=self.name, args=dict(args))
        event = self.trigger('before_handle', subject)
        if event.is_stopped and event.result is not None:
            return event.result

        method = request.method.lower()
        if method == 'head':
            method = 'get'

        handler = getattr(self, f'_{method}', None)
        if handler is None:
            raise MethodNotAllowed(valid_methods=self.supported_methods())
        return handler(**subject.args)

    def trigger(self, event_name: str, subject: Optional[Subject] = None) -> Event:
        return self._component.trigger(event_name, subject)

    def subject(self, **attributes) -> Subject:
        return Subject(action=self.name, **attributes)

    # Responses

    def set_flash(self, flash_type: str, subject: Subject) -> None:
        """
        Fire crud.set_flash and, unless a listener stopped it, flash the
        configured message for `flash_type` ('success' or 'error').
        """
        message = self.config['messages'].get(flash_type, {})
        subject.set(
            text=message.get('text', '').format(name=self.resource_name),
            category=message.get('category', flash_type),
            type=f'{self.name}.{flash_type}'
        )

        event = self.trigger('set_flash', subject)
        if event.is_stopped:
            return
        flash(subject.text, subject.category)

    def redirect_to(self, subject: Subject, url: str):
        """Fire crud.before_redirect, then redirect to subject.url"""
        subject.set(url=url, status=302)
        event = self.trigger('before_redirect', subject)
        if event.is_stopped and event.result is not None:
            return event.result
        return redirect(subject.url, code=subject.status)

    def render(self, subject: Subject):
        """Fire crud.before_render, then render the action's template"""
        event = self.trigger('before_render', subject)
        if event.is_stopped and event.result is not None:
            return event.result

        templates = [
            self.config.get('view') or f'{self.controller_name}/{self.name}.html',
            f'crud/{self.template_kind}.html'
        ]
        return render_template(templates, **self.view_vars(subject))

    def view_vars(self, subject: Subject) -> Dict[str, Any]:
        return {
            'subject': subject,
            'controller': self.controller_name,
            'action': self.name,
            'resource_name': self.resource_name,
            'resource_title': self.resource_title,
        }

    def api_payload(self, subject: Subject) -> Dict[str, Any]:
        """Body of a successful API response, minus the success flag"""
        spec = self.config['api']['success'].get('data')
        entity = subject.get('entity')
        if not spec or entity is None:
            return {'data': {}}
        fields = spec.get('entity') if isinstance(spec, dict) else None
        return {'data': entity.to_dict(fields)}

    # Shared steps

    def _find_entity(self, entity_id: int, subject: Subject):
        subject.set(id=entity_id)
        self.trigger('before_find', subject)

        entity = self.repository.find(entity_id)
        if entity is None:
            self.trigger('record_not_found', subject)
            raise NotFound(self.config['messages']['not_found']['text'])

        subject.set(entity=entity)
        self.trigger('after_find', subject)
        return entity

    def _audit(self, subject: Subject) -> None:
        entity = subject.get('entity')
        audit_logger.log_write(
            controller=self.controller_name,
            action=self.name,
            entity_id=getattr(entity, 'id', None),
            success=bool(subject.get('success'))
        )
