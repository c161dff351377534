# app.py

from flask import Flask, g, jsonify, request
from config import get_config
from extensions import db, migrate, crud
import os
import uuid
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
from crud.component import is_api_request
from crud.errors import ValidationError
from logging_config import setup_logging, get_logger

# Configure logging as early as possible
setup_logging(app_name="crud-blogs", log_level="INFO")
logger = get_logger(__name__)

# Configure Sentry for production error tracking
def init_sentry():
    """Initialize Sentry error tracking in production."""
    sentry_dsn = os.environ.get('SENTRY_DSN')
    if sentry_dsn and os.environ.get('FLASK_ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
        
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FlaskIntegration(
                    transaction_style='endpoint'
                ),
                SqlalchemyIntegration()
            ],
            traces_sample_rate=0.1,
            environment=os.environ.get('FLASK_ENV', 'development'),
            release=os.environ.get('GIT_SHA', 'unknown')
        )
        logger.info("Sentry error tracking initialized")

init_sentry()

def create_app(config_name=None, test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__)
    
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    
    if test_config:
        app.config.update(test_config)
    
    # Initialize app with config
    config_class.init_app(app)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    db.init_app(app)
    migrate.init_app(app, db)
    crud.init_app(app)
    
    # Service registry: repositories are resolved by name from controllers
    from services.registry import ServiceRegistry
    registry = ServiceRegistry()
    
    # db.session is request scoped, so hand out the proxy on every lookup
    registry.register_transient('db_session', lambda: db.session)
    registry.register_transient(
        'blog_repository',
        lambda db_session: _create_blog_repository(db_session),
        dependencies=['db_session']
    )
    
    app.services = registry
    
    # Add request tracking middleware
    @app.before_request
    def before_request():
        g.request_id = str(uuid.uuid4())
        logger.info("Request started", 
                   request_id=g.request_id,
                   method=request.method,
                   path=request.path)
    
    @app.after_request
    def after_request(response):
        logger.info("Request completed",
                   request_id=getattr(g, 'request_id', None),
                   status_code=response.status_code)
        return response
    
    # Global error handlers
    @app.errorhandler(HTTPException)
    def http_error(error):
        if is_api_request():
            return _api_error_response(error)
        if error.code == 404:
            logger.warning("Page not found",
                          request_id=getattr(g, 'request_id', None),
                          path=request.path)
            return "Page not found", 404
        return error
    
    @app.errorhandler(500)
    def internal_error(error):
        logger.error("Internal server error",
                    request_id=getattr(g, 'request_id', None),
                    error=str(error))
        db.session.rollback()
        return "Internal server error", 500
    
    # Health check endpoint
    @app.route('/health')
    def health_check():
        """Health check endpoint for monitoring"""
        from sqlalchemy import text
        health_status = {
            'status': 'healthy',
            'service': 'crud-blogs'
        }
        
        try:
            # Quick database check
            db.session.execute(text('SELECT 1'))
            health_status['database'] = 'connected'
        except Exception as e:
            health_status['database'] = 'error'
            health_status['status'] = 'degraded'
            logger.error(f"Health check database error: {e}")
        
        return jsonify(health_status), 200 if health_status['status'] == 'healthy' else 503

    # Register CRUD controllers
    from routes.blog_routes import BlogsController
    crud.register(app, BlogsController)
    
    # Register CLI commands
    from scripts import commands
    commands.init_app(app)
    
    return app


def _api_error_response(error: HTTPException):
    """JSON error envelope for API requests"""
    data = {
        'code': error.code,
        'url': request.path,
        'message': error.description,
    }
    if isinstance(error, ValidationError):
        data['error_count'] = error.error_count
        data['errors'] = error.validation_errors
    
    logger.info("API request failed",
               request_id=getattr(g, 'request_id', None),
               code=error.code,
               message=error.description)
    
    response = jsonify({'success': False, 'data': data})
    response.status_code = error.code
    return response


# Repository creation functions
def _create_blog_repository(db_session):
    """Create BlogRepository instance"""
    from repositories.blog_repository import BlogRepository
    return BlogRepository(session=db_session)


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
