"""
Declarative CRUD controllers for Flask.

Controllers map URL actions (index, add, edit, view, delete) to action
classes; listeners hook into the events those actions fire.
"""

from crud.controller import Crud, CrudController, ControllerConfig, get_state
from crud.errors import ValidationError, MissingActionError, MissingListenerError

__all__ = [
    'Crud',
    'CrudController',
    'ControllerConfig',
    'get_state',
    'ValidationError',
    'MissingActionError',
    'MissingListenerError',
]
