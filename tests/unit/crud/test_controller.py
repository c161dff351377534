"""
Unit tests for controller declarations
"""

import pytest

from crud.actions import AddAction, IndexAction
from crud.controller import ControllerConfig, CrudController, singularize
from crud.errors import MissingActionError, MissingListenerError, CrudConfigurationError
from crud.listeners import ApiListener, RedirectListener


class PostsController(CrudController):
    name = 'posts'
    repository = 'post_repository'
    actions = {
        'index': 'index',
        'add': (AddAction, {'messages': {'success': {'text': 'Posted'}}}),
    }
    listeners = {'api': 'api'}


@pytest.mark.parametrize('plural, singular', [
    ('blogs', 'blog'),
    ('categories', 'category'),
    ('boxes', 'box'),
    ('news', 'new'),
    ('address', 'address'),
])
def test_singularize(plural, singular):
    assert singularize(plural) == singular


class TestControllerConfig:

    def test_from_controller(self):
        config = ControllerConfig.from_controller(PostsController)

        assert config.resource == 'post'
        assert config.resource_title == 'Post'
        assert config.actions['index'][0] is IndexAction
        assert config.actions['add'] == (AddAction, {'messages': {'success': {'text': 'Posted'}}})
        assert config.listeners['api'][0] is ApiListener

    def test_configs_do_not_share_state(self):
        first = ControllerConfig.from_controller(PostsController)
        second = ControllerConfig.from_controller(PostsController)

        first.action_config('add', enabled=False)

        assert 'enabled' not in second.action_config('add')

    def test_dotted_path(self):
        config = ControllerConfig('posts', 'post_repository')
        config.add_listener('redirect', 'crud.listeners.redirect_listener.RedirectListener')

        assert config.listeners['redirect'][0] is RedirectListener

    def test_unknown_action(self):
        config = ControllerConfig('posts', 'post_repository')

        with pytest.raises(MissingActionError):
            config.map_action('publish', 'publish')

    def test_wrong_base_class(self):
        config = ControllerConfig('posts', 'post_repository')

        with pytest.raises(MissingListenerError):
            config.add_listener('api', AddAction)

    def test_remove_missing_listener(self):
        config = ControllerConfig('posts', 'post_repository')

        with pytest.raises(MissingListenerError):
            config.remove_listener('api')

    def test_action_config_for_unmapped_action(self):
        config = ControllerConfig('posts', 'post_repository')

        with pytest.raises(MissingActionError):
            config.action_config('edit')

    def test_requires_name_and_repository(self):
        with pytest.raises(CrudConfigurationError):
            ControllerConfig('posts', None)


def test_registering_twice_fails(app):
    from extensions import crud
    from routes.blog_routes import BlogsController

    with pytest.raises(CrudConfigurationError):
        crud.register(app, BlogsController)
