# logging_config.py

import logging
import structlog
import sys
from typing import Any, Dict
from flask import has_request_context, request, g


def add_request_context(logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add Flask request context to log entries"""
    if has_request_context():
        event_dict["request_id"] = getattr(g, 'request_id', None)
        event_dict["remote_addr"] = request.remote_addr
        event_dict["method"] = request.method
        event_dict["path"] = request.path
        event_dict["user_agent"] = request.headers.get('User-Agent', '')[:100]  # Truncate
    return event_dict


def setup_logging(app_name: str = "crud-blogs", log_level: str = "INFO") -> None:
    """
    Configure structured logging
    
    Args:
        app_name: Application name for log identification
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_request_context,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    
    # Standard logging for repositories and third-party libraries
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    
    logging.getLogger(app_name).setLevel(level)
    
    # Reduce noise from third-party libraries
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str = None) -> structlog.BoundLogger:
    """
    Get a structured logger instance
    
    Args:
        name: Logger name (usually __name__)
        
    Returns:
        Configured structlog instance
    """
    return structlog.get_logger(name or __name__)


class AuditLogger:
    """Record-level audit trail for create/update/delete operations"""
    
    def __init__(self):
        self.logger = get_logger("audit")
    
    def log_write(self, controller: str, action: str, entity_id, success: bool):
        """Log a write performed by a CRUD action"""
        self.logger.info(
            "Record write",
            controller=controller,
            action=action,
            entity_id=entity_id,
            success=success,
            event_type="crud_write"
        )
    
    def log_validation_failure(self, controller: str, action: str, error_count: int):
        """Log rejected input"""
        self.logger.info(
            "Validation failed",
            controller=controller,
            action=action,
            error_count=error_count,
            event_type="crud_validation"
        )


# Global logger instances
audit_logger = AuditLogger()
