# tests/conftest.py
"""
Shared fixtures for the pytest test suite.

Every test function gets its own application with a fresh in-memory
database seeded with five blogs, so the next blog created gets id 6.
"""
import os
import pytest
from app import create_app
from extensions import db
from crud_database import Blog
from crud.event import EVENT_NAMES
from crud.listeners.base_listener import BaseListener


def create_test_blog(**kwargs):
    """
    Helper function to create test blogs with default values.
    Used across multiple test files.
    """
    defaults = {
        'name': 'A test blog post',
        'body': 'Test blog body'
    }
    defaults.update(kwargs)
    return Blog(**defaults)


class EventRecorder(BaseListener):
    """
    Records every crud event fired during a request.

    Attach it with a shared list:
        recorded = []
        crud.controller('blogs', app).add_listener('recorder', EventRecorder, {'events': recorded})
    """

    def implemented_events(self):
        return {name: (self.record, 1) for name in EVENT_NAMES}

    def record(self, event):
        self.config['events'].append((event.name[len('crud.'):], event.subject))


@pytest.fixture(scope='function')
def app():
    """
    A fixture that creates a new Flask application instance for each test.
    The in-memory database is created and seeded inside the app context.
    """
    # Ensure testing environment is set for proper session handling
    os.environ['FLASK_ENV'] = 'testing'
    
    app = create_app(config_name='testing')
    
    with app.app_context():
        db.create_all()
        
        # --- Seeding the database with test data ---
        for number in range(1, 6):
            db.session.add(create_test_blog(
                name=f'Seeded blog post {number}',
                body=f'Body of seeded post {number}'
            ))
        db.session.commit()
        db.session.remove()
        
        yield app
        
        # --- Teardown ---
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """A test client for the app"""
    return app.test_client()


@pytest.fixture(scope='function')
def blogs_controller(app):
    """Per-app configuration of the blogs controller, safe to modify in a test"""
    from extensions import crud
    return crud.controller('blogs', app)


@pytest.fixture(scope='function')
def recorded_events(blogs_controller):
    """
    List of (event_name, subject) tuples recorded during the test's requests
    """
    events = []
    blogs_controller.add_listener('recorder', EventRecorder, {'events': events})
    return events


@pytest.fixture(scope='function')
def event_names(recorded_events):
    """Callable returning the recorded event names, minus start-up noise"""
    def names(skip=('startup', 'before_handle')):
        return [name for name, _ in recorded_events if name not in skip]
    return names


@pytest.fixture(scope='function')
def blog_repository(app):
    """
    A BlogRepository registered as the app's blog_repository, so changes
    to its validator apply to the requests made in the test.
    """
    from repositories.blog_repository import BlogRepository
    repository = BlogRepository(session=db.session)
    app.services.register('blog_repository', service=repository)
    return repository
