"""
Per-request CRUD component: wires listeners to events and runs an action
"""

from typing import Any, Dict, List, Optional, Tuple

from flask import current_app, has_request_context, request
from werkzeug.exceptions import NotFound

from crud.event import DEFAULT_PRIORITY, Event, EventManager, Subject
from logging_config import get_logger

logger = get_logger(__name__)

EVENT_PREFIX = 'crud.'


def qualify(event_name: str) -> str:
    """'before_save' -> 'crud.before_save'"""
    if event_name.startswith(EVENT_PREFIX):
        return event_name
    return EVENT_PREFIX + event_name


def is_api_request(ext: Optional[str] = None) -> bool:
    """
    True when the request asked for a machine-readable response: a URL
    extension such as ``.json`` or an Accept header preferring JSON.
    """
    if not has_request_context():
        return False
    if ext is None and request.view_args:
        ext = request.view_args.get('ext')
    if ext and ext in current_app.config.get('CRUD_API_EXTENSIONS', ['json']):
        return True
    return request.accept_mimetypes.best == 'application/json'


class CrudComponent:
    """
    Created for every request routed to a CRUD controller.

    Owns the event manager, instantiates the controller's listeners and
    lazily builds the requested action.
    """

    def __init__(self, controller, repository, ext: Optional[str] = None):
        self.controller = controller
        self.repository = repository
        self.ext = ext
        self.events = EventManager()
        self.event_logging = current_app.config.get('CRUD_EVENT_LOGGING', False)
        self.event_log: List[Tuple[str, Subject]] = []
        self._actions: Dict[str, Any] = {}
        self._listeners: Dict[str, Any] = {}
        self._action_name: Optional[str] = None
        self._load_listeners()

    def _load_listeners(self) -> None:
        for name, (listener_cls, config) in self.controller.listeners.items():
            listener = listener_cls(self, config)
            self._listeners[name] = listener
            for event_name, handler in listener.implemented_events().items():
                if isinstance(handler, tuple):
                    callback, priority = handler
                else:
                    callback, priority = handler, DEFAULT_PRIORITY
                self.events.on(qualify(event_name), callback, priority)

    @property
    def config(self):
        """The per-app controller configuration"""
        return self.controller

    @property
    def action_name(self) -> Optional[str]:
        return self._action_name

    def action(self, name: Optional[str] = None):
        """Action instance for `name` (defaults to the executing action)"""
        name = name or self._action_name
        if name is None or not self.controller.has_action(name):
            raise NotFound()
        if name not in self._actions:
            action_cls, config = self.controller.actions[name]
            self._actions[name] = action_cls(self, name, config)
        return self._actions[name]

    def listener(self, name: str):
        return self._listeners[name]

    def execute(self, action_name: str, args: Optional[Dict[str, Any]] = None):
        action = self.action(action_name)
        if not action.enabled:
            raise NotFound()

        self._action_name = action_name
        self.trigger('startup', Subject(action=action_name))
        return action.handle(args or {})

    def trigger(self, event_name: str, subject: Optional[Subject] = None) -> Event:
        """Dispatch crud.<event_name> to the attached listeners"""
        event = Event(qualify(event_name), subject)
        if self.event_logging:
            self.event_log.append((event.name, event.subject))
        logger.debug("Crud event",
                     event_name=event.name,
                     controller=self.controller.name,
                     action=self._action_name)
        return self.events.dispatch(event)

    def logged_events(self) -> List[str]:
        return [name for name, _ in self.event_log]

    def is_api_request(self) -> bool:
        return is_api_request(self.ext)
