"""Core utilities and shared components for s3-restore."""

from .config import settings
from .exceptions import ConfigurationError, S3RestoreError, ValidationError
from .observability import get_logger, get_tracer, log_context

__all__ = [
    "settings",
    "ConfigurationError",
    "S3RestoreError",
    "ValidationError",
    "get_logger",
    "get_tracer",
    "log_context",
]
