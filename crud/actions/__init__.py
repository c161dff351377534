"""
CRUD actions. Controllers may refer to them by alias.
"""

from crud.actions.base_action import BaseAction
from crud.actions.index_action import IndexAction
from crud.actions.add_action import AddAction
from crud.actions.edit_action import EditAction
from crud.actions.view_action import ViewAction
from crud.actions.delete_action import DeleteAction

ACTION_ALIASES = {
    'index': IndexAction,
    'add': AddAction,
    'edit': EditAction,
    'view': ViewAction,
    'delete': DeleteAction,
}

__all__ = [
    'ACTION_ALIASES',
    'BaseAction',
    'IndexAction',
    'AddAction',
    'EditAction',
    'ViewAction',
    'DeleteAction',
]
