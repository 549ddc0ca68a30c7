"""Resolution of raw settings into validated S3 client options."""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from botocore.config import Config

from aws_s3_service.core import get_logger
from aws_s3_service.core.exceptions import InvalidConfigError
from aws_s3_service.credentials import (
    CredentialsProviderChain,
    default_provider_chain,
    static_provider_chain,
)
from aws_s3_service.regions import REGION_ENDPOINTS, resolve_endpoint, signing_region
from aws_s3_service.schemas import S3ServiceSettings

logger = get_logger(__name__)

SUPPORTED_PROTOCOLS = ("http", "https")
DEFAULT_PROXY_PORT = 80
MIN_PORT = 1
MAX_PORT = 65535

_PORT_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class ClientOptions:
    """Fully resolved options for building the S3 client."""

    protocol: str
    credentials: CredentialsProviderChain
    endpoint_url: Optional[str] = None
    region_name: Optional[str] = None
    proxy_url: Optional[str] = None

    @property
    def use_ssl(self) -> bool:
        return self.protocol == "https"

    def client_config(self) -> Config:
        """botocore transport configuration."""
        if self.proxy_url is None:
            return Config()
        return Config(proxies={"http": self.proxy_url, "https": self.proxy_url})

    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``boto3.Session.client``."""
        kwargs: Dict[str, Any] = {
            "use_ssl": self.use_ssl,
            "config": self.client_config(),
        }
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        if self.region_name:
            kwargs["region_name"] = self.region_name
        return kwargs


def parse_protocol(value: str) -> str:
    protocol = value.lower()
    if protocol not in SUPPORTED_PROTOCOLS:
        raise InvalidConfigError(
            f"No protocol supported [{protocol}], can either be [http] or [https]"
        )
    return protocol


def parse_proxy_port(value: str) -> int:
    # Plain ASCII digits only: no sign, whitespace or underscores
    if not _PORT_DIGITS.fullmatch(value):
        raise InvalidConfigError(f"The configured proxy port value [{value}] is invalid")
    port = int(value)
    if not MIN_PORT <= port <= MAX_PORT:
        raise InvalidConfigError(
            f"The configured proxy port value [{value}] is out of range "
            f"[{MIN_PORT}-{MAX_PORT}]"
        )
    return port


def endpoint_url(endpoint: str, protocol: str) -> str:
    """Prefix a bare endpoint host with the protocol; full URLs pass through."""
    if urlparse(endpoint).scheme in SUPPORTED_PROTOCOLS:
        return endpoint
    return f"{protocol}://{endpoint}"


def resolve_client_options(settings: S3ServiceSettings) -> ClientOptions:
    """Validate settings and resolve protocol, proxy, endpoint and credentials.

    Args:
        settings: Raw S3 settings

    Returns:
        Resolved client options

    Raises:
        InvalidConfigError: If the protocol is not http/https, the proxy port
            is not a valid port number, or the region is not in the region table
    """
    protocol = parse_protocol(settings.protocol)

    proxy_port = None
    if settings.proxy_port is not None:
        proxy_port = parse_proxy_port(settings.proxy_port)

    proxy_url = None
    if settings.proxy_host:
        port = DEFAULT_PROXY_PORT if proxy_port is None else proxy_port
        proxy_url = f"http://{settings.proxy_host}:{port}"
        logger.debug("Using proxy", proxy_host=settings.proxy_host, proxy_port=port)

    url = None
    region_name = None
    if settings.s3_endpoint:
        url = endpoint_url(settings.s3_endpoint, protocol)
        if settings.region and settings.region.lower() in REGION_ENDPOINTS:
            region_name = signing_region(settings.region)
        logger.debug("Using explicit s3 endpoint", endpoint=url)
    elif settings.region:
        url = endpoint_url(resolve_endpoint(settings.region), protocol)
        region_name = signing_region(settings.region)
        logger.debug("Using s3 region", region=region_name, endpoint=url)

    if settings.has_credentials:
        secret_key = (
            settings.secret_key.get_secret_value() if settings.secret_key else None
        )
        credentials = static_provider_chain(settings.access_key, secret_key)
    else:
        credentials = default_provider_chain()

    return ClientOptions(
        protocol=protocol,
        credentials=credentials,
        endpoint_url=url,
        region_name=region_name,
        proxy_url=proxy_url,
    )
