"""
Exceptions raised by the CRUD layer
"""

from typing import Any, Dict, Mapping, Union
from werkzeug.exceptions import UnprocessableEntity


def count_errors(errors: Mapping[str, Any]) -> int:
    """Count leaf messages in a (possibly nested) errors mapping"""
    total = 0
    for value in errors.values():
        if isinstance(value, Mapping):
            total += count_errors(value)
        elif value:
            total += 1
    return total


class CrudConfigurationError(Exception):
    """Raised when a controller declaration cannot be resolved"""
    pass


class MissingActionError(CrudConfigurationError):
    pass


class MissingListenerError(CrudConfigurationError):
    pass


class ValidationError(UnprocessableEntity):
    """
    Submitted data failed validation.

    The message counts every failing rule across all fields:
    "A validation error occurred" or "N validation errors occurred".
    """

    def __init__(self, entity_or_errors: Union[Mapping[str, Any], Any]):
        if isinstance(entity_or_errors, Mapping):
            errors = entity_or_errors
        else:
            errors = entity_or_errors.errors
        self.validation_errors: Dict[str, Any] = {
            field: messages for field, messages in errors.items() if messages
        }
        self.error_count = count_errors(self.validation_errors)
        super().__init__(description=self.build_message(self.error_count))

    @staticmethod
    def build_message(error_count: int) -> str:
        if error_count == 1:
            return 'A validation error occurred'
        return f'{error_count} validation errors occurred'

    def __str__(self) -> str:
        return self.description
