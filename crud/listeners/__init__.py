"""
Listeners that customise CRUD actions through their events
"""

from crud.listeners.base_listener import BaseListener
from crud.listeners.api_listener import ApiListener
from crud.listeners.redirect_listener import RedirectListener

LISTENER_ALIASES = {
    'api': ApiListener,
    'redirect': RedirectListener,
}

__all__ = ['LISTENER_ALIASES', 'BaseListener', 'ApiListener', 'RedirectListener']
