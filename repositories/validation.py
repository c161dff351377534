"""
Validation rules applied by repositories before an entity is persisted
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

Rule = Callable[[Any, Dict[str, Any]], bool]

REQUIRED_MESSAGE = 'This field is required'
EMPTY_MESSAGE = 'This field cannot be left empty'
DEFAULT_MESSAGE = 'The provided value is invalid'


def min_length(length: int) -> Rule:
    """Value must be at least `length` characters long"""
    def rule(value, context):
        return len(str(value)) >= length
    return rule


def max_length(length: int) -> Rule:
    """Value must be at most `length` characters long"""
    def rule(value, context):
        return len(str(value)) <= length
    return rule


def length_between(low: int, high: int) -> Rule:
    def rule(value, context):
        return low <= len(str(value)) <= high
    return rule


def matches(pattern: str) -> Rule:
    """Value must fully match the regular expression"""
    compiled = re.compile(pattern)

    def rule(value, context):
        return compiled.fullmatch(str(value)) is not None
    return rule


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


@dataclass
class ValidationRule:
    name: str
    rule: Rule
    message: str = DEFAULT_MESSAGE
    on: Optional[str] = None
    last: bool = False

    def applies(self, new_record: bool) -> bool:
        if self.on is None:
            return True
        return self.on == ('create' if new_record else 'update')


@dataclass
class ValidationSet:
    """Rules for a single field"""
    presence: Union[bool, str] = False
    presence_message: str = REQUIRED_MESSAGE
    allow_empty: Union[bool, str] = True
    empty_message: str = EMPTY_MESSAGE
    rules: List[ValidationRule] = field(default_factory=list)


def _mode_applies(mode: Union[bool, str], new_record: bool) -> bool:
    if mode is True:
        return True
    if mode is False:
        return False
    return mode == ('create' if new_record else 'update')


class Validator:
    """
    Field-level validator.

    For every field the checks run in order: presence, emptiness, then the
    added rules. A missing or disallowed-empty value yields a single error and
    skips the remaining rules for that field. Errors are reported as
    ``{field: {rule_name: message}}``.

    Example:
        validator = Validator()
        validator.require_presence('name').add(
            'name', 'length', min_length(10),
            message='Name need to be at least 10 characters long'
        )
        errors = validator.errors({'name': 'Hello'})
    """

    def __init__(self):
        self._fields: Dict[str, ValidationSet] = {}

    def field(self, name: str) -> ValidationSet:
        if name not in self._fields:
            self._fields[name] = ValidationSet()
        return self._fields[name]

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def require_presence(self, name: str, mode: Union[bool, str] = 'create',
                         message: Optional[str] = None) -> 'Validator':
        """
        Require the field key to be present in the data.

        Args:
            name: Field name
            mode: 'create', 'update' or True for both
            message: Custom error message
        """
        validation_set = self.field(name)
        validation_set.presence = mode
        if message:
            validation_set.presence_message = message
        return self

    def allow_empty(self, name: str, mode: Union[bool, str] = True) -> 'Validator':
        self.field(name).allow_empty = mode
        return self

    def not_empty(self, name: str, message: Optional[str] = None,
                  mode: Union[bool, str] = True) -> 'Validator':
        """Disallow empty values ('create', 'update' or True for both)"""
        validation_set = self.field(name)
        if mode is True:
            validation_set.allow_empty = False
        else:
            # Empty stays allowed in the opposite mode only
            validation_set.allow_empty = 'update' if mode == 'create' else 'create'
        if message:
            validation_set.empty_message = message
        return self

    def add(self, name: str, rule_name: str, rule: Rule, message: Optional[str] = None,
            on: Optional[str] = None, last: bool = False) -> 'Validator':
        """
        Add a rule to a field.

        Args:
            name: Field name
            rule_name: Key the error is reported under
            rule: Callable receiving (value, context) and returning a bool
            message: Error message when the rule fails
            on: Restrict to 'create' or 'update'
            last: Stop checking the field when this rule fails
        """
        self.field(name).rules.append(ValidationRule(
            name=rule_name,
            rule=rule,
            message=message or DEFAULT_MESSAGE,
            on=on,
            last=last
        ))
        return self

    def remove(self, name: str, rule_name: Optional[str] = None) -> 'Validator':
        """Drop a single rule, or every check for the field"""
        if name not in self._fields:
            return self
        if rule_name is None:
            del self._fields[name]
        else:
            validation_set = self._fields[name]
            validation_set.rules = [r for r in validation_set.rules if r.name != rule_name]
        return self

    def errors(self, data: Mapping[str, Any], new_record: bool = True) -> Dict[str, Dict[str, str]]:
        """
        Validate data.

        Args:
            data: Submitted field values
            new_record: Whether the data is for a record being created

        Returns:
            Mapping of field name to {rule_name: message}; empty when valid
        """
        errors: Dict[str, Dict[str, str]] = {}
        context = {'data': data, 'new_record': new_record}

        for name, validation_set in self._fields.items():
            if name not in data:
                if _mode_applies(validation_set.presence, new_record):
                    errors[name] = {'_required': validation_set.presence_message}
                continue

            value = data[name]
            if is_empty(value):
                if not _mode_applies(validation_set.allow_empty, new_record):
                    errors[name] = {'_empty': validation_set.empty_message}
                continue

            field_errors = {}
            for rule in validation_set.rules:
                if not rule.applies(new_record):
                    continue
                if not rule.rule(value, context):
                    field_errors[rule.name] = rule.message
                    if rule.last:
                        break
            if field_errors:
                errors[name] = field_errors

        return errors
