"""Credential providers and the provider chain used by the S3 client.

Providers follow the botocore ``CredentialProvider`` contract: ``load()``
returns a ``Credentials`` object, or ``None`` when the source has nothing to
offer. ``CredentialsProviderChain`` asks each provider in order and the first
non-empty result wins.

Two chains are built by the factory:
    1. Static: a single provider holding the configured key pair
    2. Default: environment variables, then system properties, then the
       EC2 instance profile

Nothing here performs I/O when a chain is built. The S3 client is handed
``DeferredRefreshableCredentials`` through ``DeferredCredentialResolver``, so
the chain is only walked when the first request is signed. A lookup that
finds nothing is retried on the next request, and found credentials are
re-resolved every ``credentials_refresh_interval`` seconds.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Mapping, MutableMapping, Optional, Sequence

from botocore.credentials import (
    CredentialProvider,
    CredentialResolver,
    Credentials,
    DeferredRefreshableCredentials,
    InstanceMetadataProvider,
)
from botocore.exceptions import NoCredentialsError
from botocore.utils import InstanceMetadataFetcher

from aws_s3_service.core import get_logger, settings

logger = get_logger(__name__)

# Process-wide properties, consulted by SystemPropertiesCredentialsProvider.
system_properties: MutableMapping[str, str] = {}

ACCESS_KEY_PROPERTY = "aws.accessKeyId"
SECRET_KEY_PROPERTY = "aws.secretKey"
SESSION_TOKEN_PROPERTY = "aws.sessionToken"

ACCESS_KEY_ENV_VARS = ("AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY")
SECRET_KEY_ENV_VARS = ("AWS_SECRET_ACCESS_KEY", "AWS_SECRET_KEY")
SESSION_TOKEN_ENV_VAR = "AWS_SESSION_TOKEN"


def _first_set(source: Mapping[str, str], names: Sequence[str]) -> Optional[str]:
    for name in names:
        value = source.get(name, "").strip()
        if value:
            return value
    return None


class StaticCredentialsProvider(CredentialProvider):
    """Provides a fixed, explicitly configured key pair."""

    METHOD = "explicit"
    CANONICAL_NAME = "Static"

    def __init__(self, access_key: Optional[str], secret_key: Optional[str]):
        super().__init__()
        self.access_key = access_key
        self.secret_key = secret_key

    def load(self) -> Optional[Credentials]:
        return Credentials(self.access_key, self.secret_key, method=self.METHOD)


class EnvironmentVariableCredentialsProvider(CredentialProvider):
    """Loads credentials from ``AWS_ACCESS_KEY_ID``/``AWS_SECRET_ACCESS_KEY``.

    ``AWS_ACCESS_KEY`` and ``AWS_SECRET_KEY`` are accepted as fallbacks, and
    ``AWS_SESSION_TOKEN`` is picked up when present.
    """

    METHOD = "env"
    CANONICAL_NAME = "Environment"

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        super().__init__()
        self.environ = os.environ if environ is None else environ

    def load(self) -> Optional[Credentials]:
        access_key = _first_set(self.environ, ACCESS_KEY_ENV_VARS)
        secret_key = _first_set(self.environ, SECRET_KEY_ENV_VARS)
        if not (access_key and secret_key):
            return None

        logger.debug("Credentials found in environment variables")
        token = self.environ.get(SESSION_TOKEN_ENV_VAR) or None
        return Credentials(access_key, secret_key, token, method=self.METHOD)


class SystemPropertiesCredentialsProvider(CredentialProvider):
    """Loads credentials from the process-wide ``system_properties`` mapping."""

    METHOD = "system-properties"
    CANONICAL_NAME = "SystemProperties"

    def __init__(self, properties: Optional[Mapping[str, str]] = None):
        super().__init__()
        self.properties = system_properties if properties is None else properties

    def load(self) -> Optional[Credentials]:
        access_key = _first_set(self.properties, (ACCESS_KEY_PROPERTY,))
        secret_key = _first_set(self.properties, (SECRET_KEY_PROPERTY,))
        if not (access_key and secret_key):
            return None

        logger.debug("Credentials found in system properties")
        token = self.properties.get(SESSION_TOKEN_PROPERTY) or None
        return Credentials(access_key, secret_key, token, method=self.METHOD)


def instance_profile_provider() -> InstanceMetadataProvider:
    """Create the EC2 instance profile provider."""
    fetcher = InstanceMetadataFetcher(
        timeout=settings.metadata_service_timeout,
        num_attempts=settings.metadata_service_num_attempts,
    )
    return InstanceMetadataProvider(iam_role_fetcher=fetcher)


class CredentialsProviderChain(CredentialResolver):
    """Ordered credential providers, the first one to return credentials wins."""

    def __init__(self, providers: Sequence[CredentialProvider]):
        super().__init__(list(providers))

    @property
    def provider_names(self) -> list[str]:
        return [provider.CANONICAL_NAME for provider in self.providers]

    def load_credentials(self) -> Optional[Credentials]:
        for provider in self.providers:
            credentials = provider.load()
            if credentials is not None:
                logger.info("Credentials resolved", provider=provider.CANONICAL_NAME)
                return credentials

        logger.warning("No credentials resolved", providers=self.provider_names)
        return None

    def fetch_metadata(self) -> dict[str, Optional[str]]:
        """Resolve credentials in the form botocore refreshable credentials expect.

        Raises:
            NoCredentialsError: If no provider returns credentials
        """
        credentials = self.load_credentials()
        if credentials is None:
            raise NoCredentialsError()

        frozen = credentials.get_frozen_credentials()
        expiry = datetime.now(timezone.utc) + timedelta(
            seconds=settings.credentials_refresh_interval
        )
        return {
            "access_key": frozen.access_key,
            "secret_key": frozen.secret_key,
            "token": frozen.token,
            "expiry_time": expiry.isoformat(),
        }

    def deferred_credentials(self) -> DeferredRefreshableCredentials:
        """Credentials that walk the chain on first use instead of now."""
        return DeferredRefreshableCredentials(
            refresh_using=self.fetch_metadata, method="chain"
        )


class DeferredCredentialResolver(CredentialResolver):
    """botocore ``credential_provider`` component backed by a provider chain.

    Registering this instead of the chain keeps client creation free of
    credential lookups.
    """

    def __init__(self, chain: CredentialsProviderChain):
        super().__init__(chain.providers)
        self.chain = chain

    def load_credentials(self) -> DeferredRefreshableCredentials:
        return self.chain.deferred_credentials()


def default_provider_chain() -> CredentialsProviderChain:
    """Chain used when no key pair is configured."""
    return CredentialsProviderChain(
        [
            EnvironmentVariableCredentialsProvider(),
            SystemPropertiesCredentialsProvider(),
            instance_profile_provider(),
        ]
    )


def static_provider_chain(
    access_key: Optional[str], secret_key: Optional[str]
) -> CredentialsProviderChain:
    """Chain holding only the configured key pair."""
    if not (access_key and secret_key):
        logger.warning("Only one half of the static key pair is configured")
    return CredentialsProviderChain([StaticCredentialsProvider(access_key, secret_key)])
