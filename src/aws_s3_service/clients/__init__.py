"""S3 client construction and lifecycle."""

from .options import ClientOptions, resolve_client_options
from .s3_client import S3ClientFactory

__all__ = ["ClientOptions", "S3ClientFactory", "resolve_client_options"]
