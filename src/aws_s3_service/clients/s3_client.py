"""Lazily constructed, shared S3 client.

``S3ClientFactory`` captures the plugin's S3 settings when it is created and
builds one boto3 S3 client the first time ``get_client()`` is called. Every
later call returns that same client until the factory is closed.

Client Construction:
    1. Protocol: ``http`` (default) or ``https``
    2. Proxy: ``proxy_host`` with ``proxy_port`` (default 80)
    3. Endpoint: ``s3_endpoint``, else the region table, else the SDK default
    4. Credentials: the configured key pair, else environment variables,
       system properties and the instance profile, in that order

Configuration errors surface from ``get_client()`` as ``InvalidConfigError``.
Nothing is cached when construction fails.
"""

import threading
from typing import Mapping, Union

import boto3
import botocore.session

from aws_s3_service.core import get_logger, get_tracer
from aws_s3_service.core.exceptions import IllegalStateError
from aws_s3_service.credentials import DeferredCredentialResolver
from aws_s3_service.lifecycle import LifecycleComponent
from aws_s3_service.schemas import S3ServiceSettings

from .options import ClientOptions, resolve_client_options

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class S3ClientFactory(LifecycleComponent):
    """Builds and owns the shared S3 client."""

    def __init__(self, settings: Union[S3ServiceSettings, Mapping[str, str]]):
        """Initialize the factory.

        Args:
            settings: S3 settings, or a flat key/value bag to read them from
        """
        super().__init__()
        if not isinstance(settings, S3ServiceSettings):
            settings = S3ServiceSettings.from_mapping(settings)
        self.settings = settings
        self._client = None
        self._client_lock = threading.Lock()
        self._released = False
        logger.info("S3 client factory initialized", settings=settings.filtered())

    @property
    def client(self):
        """Get or create the S3 client."""
        return self.get_client()

    def get_client(self):
        """Return the shared S3 client, creating it on first use.

        Raises:
            InvalidConfigError: If the settings cannot be resolved
            IllegalStateError: If the factory has been closed
        """
        client = self._client
        if client is not None:
            return client

        with self._client_lock:
            if self._released:
                raise IllegalStateError("S3 client factory is closed")
            if self._client is None:
                self._client = self._create_client(self.client_options())
            return self._client

    def client_options(self) -> ClientOptions:
        """Resolve the options the client is (or would be) built with."""
        return resolve_client_options(self.settings)

    def _create_client(self, options: ClientOptions):
        """Create the boto3 S3 client from resolved options."""
        with tracer.start_as_current_span("s3.client.create") as span:
            span.set_attribute("s3.protocol", options.protocol)
            if options.endpoint_url:
                span.set_attribute("s3.endpoint", options.endpoint_url)

            botocore_session = botocore.session.Session()
            botocore_session.register_component(
                "credential_provider", DeferredCredentialResolver(options.credentials)
            )
            session = boto3.Session(botocore_session=botocore_session)
            client = session.client("s3", **options.client_kwargs())

        logger.info(
            "S3 client created",
            protocol=options.protocol,
            endpoint=options.endpoint_url,
            region=options.region_name,
            credential_providers=options.credentials.provider_names,
        )
        return client

    def _do_start(self) -> None:
        pass

    def _do_stop(self) -> None:
        pass

    def _do_close(self) -> None:
        with self._client_lock:
            client = self._client
            self._client = None
            self._released = True
        if client is not None:
            client.close()
            logger.info("S3 client closed")
