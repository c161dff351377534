"""
Base class for CRUD listeners
"""

from typing import Any, Callable, Dict, Optional, Tuple, Union

Handler = Union[Callable, Tuple[Callable, int]]


class BaseListener:
    """
    A listener hooks into the events fired while an action runs.

    Subclasses return the events they handle from ``implemented_events``,
    either as a bare callable (default priority) or as ``(callable, priority)``.
    """

    _defaults: Dict[str, Any] = {}

    def __init__(self, component, config: Optional[Dict[str, Any]] = None):
        self._component = component
        self.config = dict(self._defaults)
        self.config.update(config or {})

    def implemented_events(self) -> Dict[str, Handler]:
        return {}

    @property
    def component(self):
        return self._component

    def _action(self, name: Optional[str] = None):
        return self._component.action(name)
