"""Lazily constructed, shared S3 client for plugin components.

This package turns a flat bag of plugin settings into a single boto3 S3
client: it selects the protocol, applies an optional proxy, resolves the
endpoint from an explicit override or a region table, and picks either the
configured key pair or a credential provider chain.

Usage:
    >>> from aws_s3_service import S3ClientFactory
    >>> factory = S3ClientFactory({"region": "eu-west", "protocol": "https"})
    >>> factory.start()
    >>> s3 = factory.get_client()
    >>> factory.close()
"""

__version__ = "0.1.0"

from .clients import ClientOptions, S3ClientFactory, resolve_client_options
from .core.exceptions import AwsS3ServiceError, IllegalStateError, InvalidConfigError
from .credentials import (
    CredentialsProviderChain,
    EnvironmentVariableCredentialsProvider,
    StaticCredentialsProvider,
    SystemPropertiesCredentialsProvider,
    system_properties,
)
from .lifecycle import LifecycleComponent, LifecycleState
from .regions import REGION_ENDPOINTS, resolve_endpoint
from .schemas import S3ServiceSettings

__all__ = [
    # Client factory
    "ClientOptions",
    "S3ClientFactory",
    "resolve_client_options",
    # Settings
    "S3ServiceSettings",
    "REGION_ENDPOINTS",
    "resolve_endpoint",
    # Credentials
    "CredentialsProviderChain",
    "EnvironmentVariableCredentialsProvider",
    "StaticCredentialsProvider",
    "SystemPropertiesCredentialsProvider",
    "system_properties",
    # Lifecycle
    "LifecycleComponent",
    "LifecycleState",
    # Errors
    "AwsS3ServiceError",
    "IllegalStateError",
    "InvalidConfigError",
]
