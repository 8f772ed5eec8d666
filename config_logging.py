#!/usr/bin/env python3
"""
WriteRight Configuration & Logging Module
=========================================
Centralized server configuration, structured logging, and the error
taxonomy shared by the analysis core and the HTTP layer.

Version: reads from version.json
"""

import os
import sys
import json
import logging
import uuid
import time
import functools
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Callable
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5050
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                # Number of log backup files to keep

# =============================================================================
# VERSION - Read from version.json (Single Source of Truth)
# =============================================================================
def _load_version():
    """Load version from version.json file."""
    try:
        version_file = Path(__file__).parent / 'version.json'
        if version_file.exists():
            with open(version_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
                return data.get('version', '1.0.0')
    except (OSError, ValueError):
        pass
    return '1.0.0'  # Fallback version

__version__ = _load_version()
VERSION = __version__
APP_NAME = "WriteRight"


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ('true', '1', 'yes', 'on')


# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

@dataclass
class AppConfig:
    """Server configuration with local-only defaults."""

    # Server settings
    host: str = DEFAULT_HOST  # Localhost only by default
    port: int = DEFAULT_PORT
    debug: bool = False

    # Paths
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent)
    log_dir: Path = field(default_factory=lambda: Path(__file__).parent / 'logs')

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True

    def __post_init__(self):
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        # Force debug=False in production environment
        if os.environ.get('WR_ENV', 'development').lower() == 'production':
            self.debug = False
            self.log_level = "WARNING"

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load configuration from environment variables."""
        kwargs: Dict[str, Any] = {}
        if os.environ.get('WR_LOG_DIR'):
            kwargs['log_dir'] = Path(os.environ['WR_LOG_DIR'])
        return cls(
            host=os.environ.get('WR_HOST', DEFAULT_HOST),
            port=int(os.environ.get('WR_PORT', str(DEFAULT_PORT))),
            debug=_env_flag('WR_DEBUG', 'false'),
            log_level=os.environ.get('WR_LOG_LEVEL', 'INFO'),
            log_format=os.environ.get('WR_LOG_FORMAT', 'json'),
            log_to_file=_env_flag('WR_LOG_TO_FILE', 'false'),
            log_to_console=_env_flag('WR_LOG_TO_CONSOLE', 'true'),
            **kwargs
        )

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if self.debug and os.environ.get('WR_ENV') == 'production':
            errors.append("Debug mode cannot be enabled in production")

        if not 0 < self.port < 65536:
            errors.append(f"Invalid port: {self.port}")

        if self.log_format not in ('json', 'text'):
            errors.append(f"Invalid log_format: {self.log_format}. Must be 'json' or 'text'")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            errors.append(f"Invalid log_level: {self.log_level}")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[AppConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(f"writeright.{self.name}")
        level = logging.getLevelName(self.config.log_level.upper())
        self.logger.setLevel(level if isinstance(level, int) else logging.INFO)
        self.logger.propagate = False
        self.logger.handlers.clear()

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        # File handler with rotation
        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        correlation_id = getattr(cls._local, 'correlation_id', None)
        if not correlation_id:
            correlation_id = str(uuid.uuid4())[:8]
            cls._local.correlation_id = correlation_id
        return correlation_id

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _extra(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {'correlation_id': self.get_correlation_id(), 'fields': fields}

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self.logger.debug(message, extra=self._extra(kwargs))

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(message, extra=self._extra(kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(message, extra=self._extra(kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        self.logger.error(message, exc_info=exc_info, extra=self._extra(kwargs))

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message."""
        self.logger.critical(message, extra=self._extra(kwargs))

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
            duration_ms = (time.time() - start_time) * 1000
            self.debug(f"{operation} completed", operation=operation, status='completed',
                       duration_ms=round(duration_ms, 2), **context)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), exc_info=True, **context)
            raise


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'correlation_id': getattr(record, 'correlation_id', None),
            'message': record.getMessage(),
        }

        fields = getattr(record, 'fields', None)
        if isinstance(fields, dict):
            log_data.update(fields)

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


_loggers: Dict[str, StructuredLogger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance (one per name)."""
    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None:
            logger = StructuredLogger(name, get_config())
            _loggers[name] = logger
        return logger


# =============================================================================
# ERROR HANDLING UTILITIES
# =============================================================================

class WriteRightError(Exception):
    """Base exception for WriteRight."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'message': self.message,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(WriteRightError):
    """Caller passed invalid or missing input."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


class ServiceError(WriteRightError):
    """A dependency (remote API, dictionary) failed transiently."""

    category = 'unknown'

    def __init__(self, message: str, code: str = "SERVICE_ERROR", **kwargs):
        super().__init__(message, code=code, status_code=503,
                         details={'category': self.category, **kwargs})


class RemoteServiceError(ServiceError):
    """The remote completion service failed or returned garbage."""

    category = 'api'

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="REMOTE_SERVICE_ERROR", **kwargs)


class DictionaryError(ServiceError):
    """A spelling dictionary could not be loaded or queried."""

    category = 'dictionary'

    def __init__(self, message: str, language: Optional[str] = None, **kwargs):
        super().__init__(message, code="DICTIONARY_ERROR", language=language, **kwargs)


class DegradedServiceError(WriteRightError):
    """A service category is over its error threshold."""
    def __init__(self, category: str, error_count: int = 0, **kwargs):
        super().__init__(f"Service degraded: {category}", code="SERVICE_DEGRADED",
                         status_code=503,
                         details={'category': category, 'error_count': error_count, **kwargs})


class ProcessingError(WriteRightError):
    """Unexpected failure while handling a request."""
    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, code="PROCESSING_ERROR", status_code=500,
                         details={'stage': stage, **kwargs})


def handle_errors(logger: Optional[StructuredLogger] = None):
    """Decorator for standardized error handling."""
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            try:
                return func(*args, **kwargs)
            except WriteRightError:
                raise  # Re-raise our custom errors
            except (ValueError, TypeError) as e:
                _logger.warning(f"Validation error in {func.__name__}: {e}")
                raise ValidationError(str(e))
            except Exception as e:
                _logger.exception(f"Unexpected error in {func.__name__}: {e}")
                raise ProcessingError(f"An unexpected error occurred: {type(e).__name__}",
                                      stage=func.__name__)
        return wrapper
    return decorator
