"""
Unit tests for the repository Validator
"""

import pytest

from repositories.validation import (
    Validator, min_length, max_length, length_between, matches, is_empty
)


class TestRuleFactories:

    def test_min_length(self):
        assert min_length(3)('abc', {}) is True
        assert min_length(3)('ab', {}) is False

    def test_max_length(self):
        assert max_length(3)('abc', {}) is True
        assert max_length(3)('abcd', {}) is False

    def test_length_between(self):
        rule = length_between(2, 4)
        assert rule('ab', {}) is True
        assert rule('abcde', {}) is False

    def test_matches(self):
        rule = matches(r'[a-z]+')
        assert rule('hello', {}) is True
        assert rule('hello1', {}) is False

    @pytest.mark.parametrize('value', [None, '', '   ', [], {}])
    def test_is_empty(self, value):
        assert is_empty(value) is True

    @pytest.mark.parametrize('value', ['x', 0, False, [1]])
    def test_is_not_empty(self, value):
        assert is_empty(value) is False


class TestValidator:

    @pytest.fixture
    def validator(self):
        return Validator().require_presence('name').add(
            'name', 'length', min_length(10),
            message='Name need to be at least 10 characters long'
        )

    def test_valid_data(self, validator):
        assert validator.errors({'name': 'Long enough name'}) == {}

    def test_missing_field_on_create(self, validator):
        assert validator.errors({}) == {'name': {'_required': 'This field is required'}}

    def test_missing_field_on_update_is_allowed(self, validator):
        assert validator.errors({}, new_record=False) == {}

    def test_rule_failure(self, validator):
        assert validator.errors({'name': 'Hello'}) == {
            'name': {'length': 'Name need to be at least 10 characters long'}
        }

    def test_empty_value_skips_rules_by_default(self, validator):
        assert validator.errors({'name': ''}) == {}

    def test_not_empty(self, validator):
        validator.not_empty('name', message='Name cannot be empty')

        assert validator.errors({'name': '  '}) == {'name': {'_empty': 'Name cannot be empty'}}

    def test_not_empty_on_create_only(self):
        validator = Validator().not_empty('name', mode='create')

        assert validator.errors({'name': ''}) == {'name': {'_empty': 'This field cannot be left empty'}}
        assert validator.errors({'name': ''}, new_record=False) == {}

    def test_rule_limited_to_update(self):
        validator = Validator().add('name', 'upper', lambda value, context: value.isupper(), on='update')

        assert validator.errors({'name': 'lower'}) == {}
        assert validator.errors({'name': 'lower'}, new_record=False) == {
            'name': {'upper': 'The provided value is invalid'}
        }

    def test_last_stops_field_rules(self):
        validator = Validator()\
            .add('code', 'short', min_length(5), last=True)\
            .add('code', 'digits', matches(r'\d+'))

        assert validator.errors({'code': 'ab'}) == {'code': {'short': 'The provided value is invalid'}}

    def test_all_failing_rules_are_reported(self):
        validator = Validator()\
            .add('code', 'short', min_length(5))\
            .add('code', 'digits', matches(r'\d+'))

        assert set(validator.errors({'code': 'ab'})['code']) == {'short', 'digits'}

    def test_rules_receive_context(self):
        validator = Validator().add(
            'confirm', 'same', lambda value, context: value == context['data'].get('password')
        )

        assert validator.errors({'password': 'secret', 'confirm': 'secret'}) == {}
        assert 'confirm' in validator.errors({'password': 'secret', 'confirm': 'other'})

    def test_remove_rule(self, validator):
        validator.remove('name', 'length')

        assert validator.errors({'name': 'Hello'}) == {}
        assert validator.has_field('name')

    def test_remove_field(self, validator):
        validator.remove('name')

        assert validator.errors({}) == {}
        assert not validator.has_field('name')
