"""
Integration tests for the blog add action (/blogs/add and /blogs/add.json)
"""

import pytest
from unittest.mock import patch
from urllib.parse import urlparse

from crud_database import Blog
from extensions import db
from repositories.blog_repository import BlogRepository


def last_subject(recorded_events):
    return recorded_events[-1][1]


class TestAddForm:
    """GET /blogs/add"""

    def test_renders_empty_form(self, client):
        response = client.get('/blogs/add')

        assert response.status_code == 200
        assert b'<legend>New Blog</legend>' in response.data
        assert b'id="id" value=""' in response.data
        assert b'id="name" value=""' in response.data
        assert b'id="body" value=""' in response.data

    def test_query_string_prefills_form(self, client):
        """Providing ?name=test fills out the name input"""
        response = client.get('/blogs/add?name=test')

        assert response.status_code == 200
        assert b'<legend>New Blog</legend>' in response.data
        assert b'id="id" value=""' in response.data
        assert b'id="name" value="test"' in response.data
        assert b'id="body" value=""' in response.data

    def test_get_does_not_validate(self, client, event_names):
        response = client.get('/blogs/add')

        assert response.status_code == 200
        assert b'error-message' not in response.data
        assert event_names() == ['before_render']

    def test_delete_method_is_not_allowed(self, client):
        response = client.delete('/blogs/add')

        assert response.status_code == 405
        assert 'GET' in response.headers['Allow']
        assert 'POST' in response.headers['Allow']


class TestAddPost:
    """POST /blogs/add"""

    @pytest.fixture
    def blog_data(self):
        return {'name': '6th blog post', 'body': 'Amazing blog post'}

    def test_creates_blog_and_redirects_to_index(self, app, client, blog_data,
                                                recorded_events, event_names):
        with patch('crud.actions.base_action.flash') as mock_flash:
            response = client.post('/blogs/add', data=blog_data)

        mock_flash.assert_called_once_with('Successfully created blog', 'success')
        assert event_names() == ['before_save', 'after_save', 'set_flash', 'before_redirect']
        assert last_subject(recorded_events).success is True
        assert last_subject(recorded_events).created is True

        assert response.status_code == 302
        assert urlparse(response.location).path == '/blogs'

        blog = db.session.get(Blog, 6)
        assert blog is not None
        assert blog.name == '6th blog post'
        assert blog.body == 'Amazing blog post'

    def test_add_flag_redirects_back_to_add_form(self, client, blog_data,
                                                 recorded_events, event_names):
        blog_data['_add'] = '1'
        with patch('crud.actions.base_action.flash') as mock_flash:
            response = client.post('/blogs/add', data=blog_data)

        mock_flash.assert_called_once_with('Successfully created blog', 'success')
        assert event_names() == ['before_save', 'after_save', 'set_flash', 'before_redirect']
        assert last_subject(recorded_events).success is True
        assert last_subject(recorded_events).created is True
        assert urlparse(response.location).path == '/blogs/add'

    def test_edit_flag_redirects_to_edit_form_of_new_blog(self, client, blog_data,
                                                          recorded_events, event_names):
        blog_data['_edit'] = '1'
        with patch('crud.actions.base_action.flash') as mock_flash:
            response = client.post('/blogs/add', data=blog_data)

        mock_flash.assert_called_once_with('Successfully created blog', 'success')
        assert event_names() == ['before_save', 'after_save', 'set_flash', 'before_redirect']
        assert last_subject(recorded_events).created is True
        assert urlparse(response.location).path == '/blogs/edit/6'

    def test_false_flag_values_keep_default_redirect(self, client, blog_data):
        blog_data['_edit'] = '0'
        response = client.post('/blogs/add', data=blog_data)

        assert urlparse(response.location).path == '/blogs'

    def test_save_failure_rerenders_form(self, client, recorded_events, event_names):
        with patch.object(BlogRepository, 'save', return_value=None), \
             patch('crud.actions.base_action.flash') as mock_flash:
            response = client.post('/blogs/add', data={
                'name': 'Hello World',
                'body': 'Pretty hot body'
            })

        mock_flash.assert_called_once_with('Could not create blog', 'error')
        assert event_names() == ['before_save', 'after_save', 'set_flash', 'before_render']
        assert last_subject(recorded_events).success is False
        assert last_subject(recorded_events).created is False

        assert response.status_code == 200
        assert b'id="name" value="Hello World"' in response.data
        assert Blog.query.count() == 5

    def test_validation_errors_are_shown_inline(self, client, recorded_events, event_names):
        with patch('crud.actions.base_action.flash') as mock_flash:
            response = client.post('/blogs/add', data={
                'name': 'Hello',
                'body': 'Pretty hot body'
            })

        mock_flash.assert_called_once_with('Could not create blog', 'error')
        assert event_names() == ['before_save', 'after_save', 'set_flash', 'before_render']
        assert last_subject(recorded_events).success is False
        assert last_subject(recorded_events).created is False

        assert response.status_code == 200
        assert (b'<div class="error-message">Name need to be at least 10 characters long</div>'
                in response.data)
        assert Blog.query.count() == 5

    def test_validator_changes_apply_to_requests(self, client, blog_repository):
        blog_repository.validator().require_presence('body')

        response = client.post('/blogs/add', data={'name': 'Long enough name'})

        assert response.status_code == 200
        assert b'<div class="error-message">This field is required</div>' in response.data

    def test_before_save_listener_can_abort_save(self, app, client, blogs_controller):
        from crud.listeners.base_listener import BaseListener

        class Veto(BaseListener):
            def implemented_events(self):
                return {'before_save': lambda event: event.stop()}

        blogs_controller.add_listener('veto', Veto)

        with patch('crud.actions.base_action.flash') as mock_flash:
            response = client.post('/blogs/add', data={
                'name': 'Perfectly valid name',
                'body': 'Body'
            })

        mock_flash.assert_called_once_with('Could not create blog', 'error')
        assert response.status_code == 200
        assert Blog.query.count() == 5

    def test_flash_message_is_shown_after_redirect(self, client, blog_data):
        response = client.post('/blogs/add', data=blog_data, follow_redirects=True)

        assert response.status_code == 200
        assert b'<div class="message success">Successfully created blog</div>' in response.data
        assert b'6th blog post' in response.data

    def test_put_behaves_like_post(self, client, blog_data):
        response = client.put('/blogs/add', data=blog_data)

        assert response.status_code == 302
        assert urlparse(response.location).path == '/blogs'
        assert Blog.query.count() == 6


class TestAddApi:
    """/blogs/add.json"""

    @pytest.mark.parametrize('method', ['GET', 'DELETE'])
    def test_wrong_request_method(self, client, method):
        response = client.open('/blogs/add.json', method=method)

        assert response.status_code == 400
        body = response.get_json()
        assert body['success'] is False
        assert body['data']['message'] == 'Wrong request method'
        assert body['data']['code'] == 400
        assert body['data']['url'] == '/blogs/add.json'

    @pytest.mark.parametrize('method', ['POST', 'PUT'])
    def test_create(self, client, method, recorded_events, event_names):
        with patch('crud.actions.base_action.flash') as mock_flash:
            response = client.open('/blogs/add.json', method=method, data={
                'name': '6th blog post',
                'body': 'Amazing blog post'
            })

        mock_flash.assert_not_called()
        assert event_names() == ['before_save', 'after_save', 'set_flash', 'before_redirect']
        assert last_subject(recorded_events).success is True
        assert last_subject(recorded_events).created is True

        assert response.status_code == 201
        assert response.get_json() == {'success': True, 'data': {'id': 6}}

    def test_create_with_json_body(self, client):
        response = client.post('/blogs/add.json', json={
            'name': '6th blog post',
            'body': 'Amazing blog post'
        })

        assert response.status_code == 201
        assert response.get_json() == {'success': True, 'data': {'id': 6}}
        assert db.session.get(Blog, 6).name == '6th blog post'

    @pytest.mark.parametrize('method', ['POST', 'PUT'])
    def test_create_with_validation_error(self, client, method):
        with patch('crud.actions.base_action.flash') as mock_flash:
            response = client.open('/blogs/add.json', method=method, data={
                'name': 'too short',
                'body': 'Amazing blog post'
            })

        mock_flash.assert_not_called()
        assert response.status_code == 422
        body = response.get_json()
        assert body['success'] is False
        assert body['data']['message'] == 'A validation error occurred'
        assert body['data']['error_count'] == 1
        assert body['data']['errors'] == {
            'name': {'length': 'Name need to be at least 10 characters long'}
        }

    @pytest.mark.parametrize('method', ['POST', 'PUT'])
    def test_create_with_validation_errors(self, client, blog_repository, method):
        blog_repository.validator().require_presence('body')

        with patch('crud.actions.base_action.flash') as mock_flash:
            response = client.open('/blogs/add.json', method=method, data={
                'name': 'too short'
            })

        mock_flash.assert_not_called()
        assert response.status_code == 422
        body = response.get_json()
        assert body['data']['message'] == '2 validation errors occurred'
        assert body['data']['error_count'] == 2
        assert set(body['data']['errors']) == {'name', 'body'}

    def test_save_failure_without_validation_errors_is_bad_request(self, client):
        with patch.object(BlogRepository, 'save', return_value=None):
            response = client.post('/blogs/add.json', data={
                'name': 'Hello World',
                'body': 'Pretty hot body'
            })

        assert response.status_code == 400
        assert response.get_json()['data']['message'] == 'Could not create blog'

    def test_accept_header_selects_api_mode(self, client):
        response = client.post('/blogs/add', data={
            'name': '6th blog post',
            'body': 'Amazing blog post'
        }, headers={'Accept': 'application/json'})

        assert response.status_code == 201
        assert response.get_json() == {'success': True, 'data': {'id': 6}}
