"""
Redirect listener - pick the post-save destination from request data
"""

from typing import Any, Dict, Optional

from flask import request, url_for

from crud.event import Event
from crud.listeners.base_listener import BaseListener, Handler
from logging_config import get_logger

logger = get_logger(__name__)

FALSE_VALUES = ('', '0', 'false')


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_VALUES
    return bool(value)


class RedirectListener(BaseListener):
    """
    Applies an action's ``redirect`` rules on crud.before_redirect.

    A rule reads ``key`` with one of the readers below and, when the value is
    truthy, replaces the redirect URL:

        'post_edit': {
            'reader': 'request.data',
            'key': '_edit',
            'url': {'action': 'edit', 'id': ('entity', 'id')},
        }

    Rules are tried in order; the first match wins.
    """

    def implemented_events(self) -> Dict[str, Handler]:
        return {'before_redirect': (self.before_redirect, 10)}

    def readers(self):
        return {
            'request.data': lambda subject, key: self._action(subject.action).request_data().get(key),
            'request.query': lambda subject, key: request.args.get(key),
            'entity.field': lambda subject, key: getattr(subject.get('entity'), key, None),
        }

    def before_redirect(self, event: Event) -> None:
        subject = event.subject
        action = self._action(subject.action)
        for name, rule in action.config.get('redirect', {}).items():
            url = self._match(rule, subject)
            if url is not None:
                logger.debug("Redirect rule matched", rule=name, url=url)
                subject.set(url=url)
                return

    def _match(self, rule: Dict[str, Any], subject) -> Optional[str]:
        reader = self.readers().get(rule.get('reader'))
        if reader is None:
            return None
        if not _truthy(reader(subject, rule['key'])):
            return None
        return self._build_url(rule['url'], subject)

    def _build_url(self, spec: Dict[str, Any], subject) -> str:
        if isinstance(spec, str):
            return spec
        controller = spec.get('controller', self._component.controller.name)
        values = {}
        for key, value in spec.items():
            if key in ('controller', 'action'):
                continue
            if isinstance(value, tuple) and value[0] == 'entity':
                value = getattr(subject.get('entity'), value[1], None)
            values[key] = value
        return url_for(f"{controller}.{spec['action']}", **values)
