"""
Tests for BlogRepository against the test database
"""

import pytest
from unittest.mock import Mock
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from repositories.base_repository import PaginatedResult, SortOrder
from repositories.blog_repository import BlogRepository


@pytest.fixture
def repository(app):
    return BlogRepository(session=db.session)


class TestEntityWorkflow:

    def test_new_entity_ignores_inaccessible_keys(self, repository):
        entity = repository.new_entity({
            'id': 99,
            'name': 'A valid blog name',
            'created': 'yesterday',
            '_add': '1'
        })

        assert entity.id is None
        assert entity.name == 'A valid blog name'
        assert entity.errors == {}

    def test_new_entity_collects_errors(self, repository):
        entity = repository.new_entity({'name': ''})

        assert entity.errors == {'name': {'_empty': 'Name cannot be empty'}}
        assert entity.has_errors()

    def test_new_entity_without_validation(self, repository):
        entity = repository.new_entity({'name': 'x'}, validate=False)

        assert entity.errors == {}

    def test_save_assigns_id(self, repository):
        entity = repository.save(repository.new_entity({'name': '6th blog post'}))

        assert entity.id == 6
        assert repository.count() == 6

    def test_save_refuses_invalid_entity(self, repository):
        entity = repository.new_entity({'name': 'short'})

        assert repository.save(entity) is None
        assert repository.count() == 5

    def test_save_returns_none_on_database_error(self, app):
        session = Mock(spec=Session)
        session.commit.side_effect = SQLAlchemyError('boom')
        repository = BlogRepository(session=session)
        entity = repository.new_entity({'name': '6th blog post'})

        assert repository.save(entity) is None
        session.rollback.assert_called_once()

    def test_patch_entity_validates_as_update(self, repository):
        blog = repository.find(1)
        repository.patch_entity(blog, {'body': 'New body'})

        assert blog.errors == {}
        assert blog.body == 'New body'

    def test_patch_entity_detaches_invalid_entity(self, repository):
        blog = repository.find(1)
        repository.patch_entity(blog, {'name': 'short'})

        assert blog.has_errors()
        assert blog not in db.session
        assert blog.name == 'short'

        db.session.commit()
        db.session.remove()

        assert repository.find(1).name == 'Seeded blog post 1'

    def test_discard_drops_pending_changes(self, repository):
        blog = repository.find(2)
        blog.body = 'Never written'
        repository.discard(blog)

        db.session.commit()
        db.session.remove()

        assert repository.find(2).body != 'Never written'

    def test_discard_ignores_transient_entity(self, repository):
        entity = repository.new_entity({'name': 'A valid blog name'})

        repository.discard(entity)

        assert entity not in db.session

    def test_validator_is_built_once(self, repository):
        assert repository.validator() is repository.validator()
        assert repository.validator().has_field('name')


class TestQueries:

    def test_find_missing(self, repository):
        assert repository.find(42) is None

    def test_paginate(self, repository):
        result = repository.paginate(page=2, per_page=2, order_by='id')

        assert isinstance(result, PaginatedResult)
        assert [blog.id for blog in result.items] == [3, 4]
        assert result.total == 5
        assert result.to_dict()['pages'] == 3

    def test_paginate_clamps_page(self, repository):
        result = repository.paginate(page=0, per_page=10)

        assert result.page == 1
        assert len(result.items) == 5

    def test_get_all_ordered(self, repository):
        blogs = repository.get_all(order_by='id', order=SortOrder.DESC)

        assert [blog.id for blog in blogs] == [5, 4, 3, 2, 1]

    def test_search(self, repository):
        results = repository.search('post 3')

        assert [blog.id for blog in results] == [3]
        assert repository.search('') == []

    def test_delete(self, repository):
        assert repository.delete(repository.find(2)) is True
        assert repository.find(2) is None

    def test_form_fields(self, repository):
        assert repository.form_fields() == ['id', 'name', 'body']

    def test_to_dict(self, repository):
        data = repository.find(1).to_dict()

        assert data['id'] == 1
        assert data['name'] == 'Seeded blog post 1'
        assert data['created'].endswith('+00:00')
        assert repository.find(1).to_dict(['id']) == {'id': 1}
