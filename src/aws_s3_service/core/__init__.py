"""Core utilities and shared components for aws-s3-service."""

from .config import settings
from .exceptions import AwsS3ServiceError, IllegalStateError, InvalidConfigError
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "AwsS3ServiceError",
    "IllegalStateError",
    "InvalidConfigError",
    "get_logger",
    "get_tracer",
]
