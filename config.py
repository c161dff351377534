import os
import secrets
from dotenv import load_dotenv
from typing import Optional

# Find the absolute path of the root directory
basedir = os.path.abspath(os.path.dirname(__file__))

# Load the .env file from the root directory
load_dotenv(os.path.join(basedir, '.env'))

class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid"""
    pass

class Config:
    """
    Base configuration class. Contains default configuration settings
    and settings applicable to all environments.
    """
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_hex(32)
    FLASK_ENV = os.environ.get('FLASK_ENV')
    
    @staticmethod
    def get_required_env(key: str) -> str:
        """Get required environment variable or raise error"""
        value = os.environ.get(key)
        if not value:
            raise ConfigurationError(f"Required environment variable {key} is not set")
        return value

    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'crud.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CRUD settings
    CRUD_EVENT_LOGGING = os.environ.get('CRUD_EVENT_LOGGING', 'false').lower() == 'true'
    CRUD_PAGINATION_LIMIT = int(os.environ.get('CRUD_PAGINATION_LIMIT') or 20)
    CRUD_PAGINATION_MAX_LIMIT = int(os.environ.get('CRUD_PAGINATION_MAX_LIMIT') or 100)
    CRUD_API_EXTENSIONS = ['json']
    
    # Application settings
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max request body
    
    # Session configuration - flash messages live in the session
    SESSION_TYPE = 'redis'
    SESSION_PERMANENT = False
    SESSION_KEY_PREFIX = 'crud:'
    SESSION_COOKIE_NAME = 'crud_session'
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours
    
    @classmethod
    def init_app(cls, app):
        """Initialize application with this config"""
        import redis
        import logging
        from flask_session import Session
        
        logger = logging.getLogger(__name__)
        redis_url = (
            os.environ.get('REDIS_URL') or
            app.config.get('REDIS_URL') or
            'redis://localhost:6379/0'
        )
        
        # Log the Redis URL being used (without password)
        logger.info(f"Using Redis URL: {redis_url.split('@')[1] if '@' in redis_url else redis_url}")
        
        try:
            if redis_url.startswith('rediss://'):
                # SSL connection for managed Redis
                app.config['SESSION_REDIS'] = redis.from_url(
                    redis_url,
                    ssl_cert_reqs=None,
                    decode_responses=False
                )
            else:
                app.config['SESSION_REDIS'] = redis.from_url(redis_url, decode_responses=False)
            
            app.config['SESSION_REDIS'].ping()
            logger.info("Redis connection successful for Flask-Session")
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis for sessions: {e}")
            # Fall back to filesystem sessions if Redis fails
            app.config['SESSION_TYPE'] = 'filesystem'
            app.config.pop('SESSION_REDIS', None)
            logger.warning("Falling back to filesystem sessions")
        
        Session(app)


class DevelopmentConfig(Config):
    """Development environment configuration"""
    DEBUG = True
    TESTING = False
    
    SQLALCHEMY_DATABASE_URI = os.environ.get('DEV_DATABASE_URL') or \
        Config.SQLALCHEMY_DATABASE_URI
    
    # Allow non-secure cookies in development
    SESSION_COOKIE_SECURE = False
    
    CRUD_EVENT_LOGGING = True
    
    @classmethod
    def init_app(cls, app):
        """Development-specific initialization"""
        Config.init_app(app)
        
        import logging
        from logging import StreamHandler
        stream_handler = StreamHandler()
        stream_handler.setLevel(logging.DEBUG)
        app.logger.addHandler(stream_handler)


class TestingConfig(Config):
    """Testing environment configuration"""
    TESTING = True
    DEBUG = True
    
    # Use in-memory SQLite for tests
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    
    SESSION_COOKIE_SECURE = False
    CRUD_EVENT_LOGGING = True
    
    @classmethod
    def init_app(cls, app):
        """Testing-specific initialization"""
        # Do NOT call Config.init_app for testing - it tries to connect to Redis
        import logging
        import tempfile
        from flask_session import Session
        from cachelib import FileSystemCache
        
        logger = logging.getLogger(__name__)
        
        app.config['SESSION_TYPE'] = 'cachelib'
        app.config['SESSION_PERMANENT'] = False
        app.config['SESSION_KEY_PREFIX'] = 'test_session:'
        
        temp_dir = os.path.join(tempfile.gettempdir(), 'crud_test_sessions')
        os.makedirs(temp_dir, exist_ok=True)
        app.config['SESSION_CACHELIB'] = FileSystemCache(temp_dir, threshold=500, default_timeout=300)
        
        Session(app)
        logger.info("Testing mode: Using cachelib filesystem sessions")


class ProductionConfig(Config):
    """Production environment configuration"""
    DEBUG = False
    TESTING = False
    
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', '')
    REDIS_URL = os.environ.get('REDIS_URL', '')
    
    @classmethod
    def init_app(cls, app):
        """Production-specific initialization"""
        if not app.config.get('SQLALCHEMY_DATABASE_URI'):
            app.config['SQLALCHEMY_DATABASE_URI'] = cls.get_required_env('DATABASE_URL')
        
        Config.init_app(app)
        
        # Log to syslog in production
        import logging
        from logging.handlers import SysLogHandler
        syslog_handler = SysLogHandler()
        syslog_handler.setLevel(logging.WARNING)
        app.logger.addHandler(syslog_handler)


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config(config_name: Optional[str] = None) -> type[Config]:
    """Get configuration class based on environment"""
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')
    
    return config.get(config_name, DevelopmentConfig)
