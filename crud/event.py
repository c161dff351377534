"""
Events passed between CRUD actions and their listeners
"""

from typing import Any, Callable, Dict, List, Optional
import itertools

DEFAULT_PRIORITY = 10

# Events fired by the actions, without the 'crud.' prefix
EVENT_NAMES = (
    'startup',
    'before_handle',
    'before_find',
    'after_find',
    'record_not_found',
    'before_paginate',
    'after_paginate',
    'before_save',
    'after_save',
    'before_delete',
    'after_delete',
    'set_flash',
    'before_redirect',
    'before_render',
)


class Subject:
    """
    Attribute bag carried through every event of one action run.

    Listeners read and change it: ``subject.url`` before a redirect,
    ``subject.entity`` before a save, ``subject.success`` after it.
    """

    def __init__(self, **attributes):
        self.set(**attributes)

    def set(self, **attributes) -> 'Subject':
        for key, value in attributes.items():
            setattr(self, key, value)
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return getattr(self, name, default)

    def has(self, name: str) -> bool:
        return hasattr(self, name)

    def __repr__(self) -> str:
        return f"Subject({', '.join(sorted(vars(self)))})"


class Event:
    """A named occurrence dispatched to listeners"""

    def __init__(self, name: str, subject: Optional[Subject] = None):
        self.name = name
        self.subject = subject if subject is not None else Subject()
        self.result: Any = None
        self._stopped = False

    def stop(self) -> None:
        """Prevent remaining listeners from running"""
        self._stopped = True

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    def __repr__(self) -> str:
        return f"<Event {self.name}{' (stopped)' if self._stopped else ''}>"


class EventManager:
    """
    Priority-ordered callback dispatch.

    Lower priority numbers run first; callbacks with equal priority run in
    the order they were attached.
    """

    def __init__(self):
        self._listeners: Dict[str, List[tuple]] = {}
        self._sequence = itertools.count()

    def on(self, name: str, callback: Callable[[Event], Any],
           priority: int = DEFAULT_PRIORITY) -> None:
        entries = self._listeners.setdefault(name, [])
        entries.append((priority, next(self._sequence), callback))
        entries.sort(key=lambda entry: (entry[0], entry[1]))

    def off(self, name: str, callback: Optional[Callable] = None) -> None:
        if callback is None:
            self._listeners.pop(name, None)
            return
        self._listeners[name] = [
            entry for entry in self._listeners.get(name, []) if entry[2] != callback
        ]

    def listeners(self, name: str) -> List[Callable]:
        return [entry[2] for entry in self._listeners.get(name, [])]

    def dispatch(self, event: Event) -> Event:
        for callback in self.listeners(event.name):
            result = callback(event)
            if result is not None:
                event.result = result
            if event.is_stopped:
                break
        return event
