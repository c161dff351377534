"""
Declarative CRUD controllers and the Flask extension that routes to them
"""

from copy import deepcopy
from typing import Any, Dict, Optional, Tuple, Type, Union

from flask import Blueprint, Flask, current_app, g
from werkzeug.utils import import_string

from crud.actions import ACTION_ALIASES
from crud.actions.base_action import BaseAction
from crud.component import CrudComponent
from crud.errors import MissingActionError, MissingListenerError, CrudConfigurationError
from crud.listeners import LISTENER_ALIASES
from crud.listeners.base_listener import BaseListener
from logging_config import get_logger

logger = get_logger(__name__)

ALL_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']

ActionSpec = Union[str, Type[BaseAction], Tuple[Union[str, Type[BaseAction]], Dict[str, Any]]]
ListenerSpec = Union[str, Type[BaseListener], Tuple[Union[str, Type[BaseListener]], Dict[str, Any]]]


def singularize(name: str) -> str:
    """'blogs' -> 'blog', 'categories' -> 'category'"""
    if name.endswith('ies'):
        return name[:-3] + 'y'
    if name.endswith('ses') or name.endswith('xes'):
        return name[:-2]
    if name.endswith('s') and not name.endswith('ss'):
        return name[:-1]
    return name


def _resolve(spec, aliases: Dict[str, type], base: type, error: Type[CrudConfigurationError]) -> type:
    if isinstance(spec, type):
        if not issubclass(spec, base):
            raise error(f"{spec.__name__} is not a {base.__name__}")
        return spec
    if isinstance(spec, str):
        if spec.lower() in aliases:
            return aliases[spec.lower()]
        if '.' in spec or ':' in spec:
            try:
                return _resolve(import_string(spec), aliases, base, error)
            except ImportError as e:
                raise error(f"Cannot import '{spec}': {e}") from e
    raise error(f"Unknown {base.__name__} '{spec}'")


def _split(spec) -> Tuple[Any, Dict[str, Any]]:
    if isinstance(spec, tuple):
        cls, config = spec
        return cls, deepcopy(config or {})
    return spec, {}


class CrudController:
    """
    Declarative description of a resource controller.

    Subclasses name the resource and map actions and listeners:

        class BlogsController(CrudController):
            name = 'blogs'
            repository = 'blog_repository'
            actions = {'index': IndexAction, 'add': AddAction}
            listeners = {'api': 'api'}

    Actions and listeners are given as classes, aliases or dotted import
    paths, optionally paired with a config dict: ``(AddAction, {...})``.
    """
    name: str = None
    repository: str = None
    resource: Optional[str] = None
    actions: Dict[str, ActionSpec] = {}
    listeners: Dict[str, ListenerSpec] = {}


class ControllerConfig:
    """Per-app, mutable copy of a controller declaration"""

    def __init__(self, name: str, repository: str, resource: Optional[str] = None):
        if not name or not repository:
            raise CrudConfigurationError("A controller needs both a name and a repository")
        self.name = name
        self.repository = repository
        self.resource = resource or singularize(name)
        self.actions: Dict[str, Tuple[Type[BaseAction], Dict[str, Any]]] = {}
        self.listeners: Dict[str, Tuple[Type[BaseListener], Dict[str, Any]]] = {}

    @classmethod
    def from_controller(cls, controller_cls: Type[CrudController]) -> 'ControllerConfig':
        config = cls(controller_cls.name, controller_cls.repository, controller_cls.resource)
        for action_name, spec in controller_cls.actions.items():
            action, action_config = _split(spec)
            config.map_action(action_name, action, action_config)
        for listener_name, spec in controller_cls.listeners.items():
            listener, listener_config = _split(spec)
            config.add_listener(listener_name, listener, listener_config)
        return config

    @property
    def resource_title(self) -> str:
        return self.resource.replace('_', ' ').title()

    def map_action(self, name: str, action, config: Optional[Dict[str, Any]] = None) -> 'ControllerConfig':
        action_cls = _resolve(action, ACTION_ALIASES, BaseAction, MissingActionError)
        self.actions[name] = (action_cls, dict(config or {}))
        return self

    def has_action(self, name: str) -> bool:
        return name in self.actions

    def action_config(self, name: str, **updates) -> Dict[str, Any]:
        """Read, and optionally update, the overrides of a mapped action"""
        if name not in self.actions:
            raise MissingActionError(f"Action '{name}' is not mapped on '{self.name}'")
        action_cls, config = self.actions[name]
        config.update(updates)
        return config

    def add_listener(self, name: str, listener, config: Optional[Dict[str, Any]] = None) -> 'ControllerConfig':
        listener_cls = _resolve(listener, LISTENER_ALIASES, BaseListener, MissingListenerError)
        self.listeners[name] = (listener_cls, dict(config or {}))
        return self

    def remove_listener(self, name: str) -> 'ControllerConfig':
        if name not in self.listeners:
            raise MissingListenerError(f"Listener '{name}' is not attached to '{self.name}'")
        del self.listeners[name]
        return self


class CrudState:
    """CRUD state stored on ``app.extensions['crud']``"""

    def __init__(self):
        self.controllers: Dict[str, ControllerConfig] = {}

    def controller(self, name: str) -> ControllerConfig:
        if name not in self.controllers:
            raise CrudConfigurationError(f"Controller '{name}' is not registered")
        return self.controllers[name]


def get_state(app: Optional[Flask] = None) -> CrudState:
    app = app or current_app
    if 'crud' not in app.extensions:
        raise CrudConfigurationError("The Crud extension is not initialized on this app")
    return app.extensions['crud']


class Crud:
    """
    Flask extension that turns CrudController declarations into blueprints.

    URL layout for a controller named ``blogs``:
        /blogs, /blogs/index[.json]        -> index
        /blogs/add[.json]                  -> add
        /blogs/<action>/<id>[.json]        -> edit, view, delete
    """

    def __init__(self, app: Optional[Flask] = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.config.setdefault('CRUD_EVENT_LOGGING', False)
        app.config.setdefault('CRUD_PAGINATION_LIMIT', 20)
        app.config.setdefault('CRUD_PAGINATION_MAX_LIMIT', 100)
        app.config.setdefault('CRUD_API_EXTENSIONS', ['json'])
        app.extensions['crud'] = CrudState()

    def register(self, app: Flask, controller_cls: Type[CrudController],
                 url_prefix: Optional[str] = None) -> Blueprint:
        """
        Register a controller's routes on the app.

        Returns:
            The blueprint created for the controller
        """
        state = get_state(app)
        config = ControllerConfig.from_controller(controller_cls)
        if config.name in state.controllers:
            raise CrudConfigurationError(f"Controller '{config.name}' is already registered")
        state.controllers[config.name] = config

        extensions = ','.join(app.config['CRUD_API_EXTENSIONS'])
        ext_rule = f'<any({extensions}):ext>'

        blueprint = Blueprint(config.name, __name__)
        for action_name, (action_cls, _) in config.actions.items():
            view = self._make_view(config.name, action_name)
            for rule in self._rules(action_name, action_cls.route, ext_rule):
                blueprint.add_url_rule(rule, endpoint=action_name, view_func=view, methods=ALL_METHODS)

        app.register_blueprint(blueprint, url_prefix=url_prefix or f'/{config.name}')
        logger.info("Registered CRUD controller",
                    controller=config.name,
                    actions=list(config.actions),
                    listeners=list(config.listeners))
        return blueprint

    def controller(self, name: str, app: Optional[Flask] = None) -> ControllerConfig:
        return get_state(app).controller(name)

    @staticmethod
    def _rules(action_name: str, route: str, ext_rule: str):
        if route == 'collection':
            return ['', f'/{action_name}', f'/{action_name}.{ext_rule}']
        if route == 'new':
            return [f'/{action_name}', f'/{action_name}.{ext_rule}']
        if route == 'member':
            return [f'/{action_name}/<int:id>', f'/{action_name}/<int:id>.{ext_rule}']
        raise CrudConfigurationError(f"Unknown route type '{route}' for action '{action_name}'")

    @staticmethod
    def _make_view(controller_name: str, action_name: str):
        def view(ext=None, **args):
            config = get_state().controller(controller_name)
            repository = current_app.services.get(config.repository)
            component = CrudComponent(config, repository, ext=ext)
            g.crud = component
            return component.execute(action_name, args)

        view.__name__ = f'{controller_name}_{action_name}'
        return view
