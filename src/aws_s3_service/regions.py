"""Static region name to S3 endpoint host table."""

import re
from types import MappingProxyType

from aws_s3_service.core import get_logger
from aws_s3_service.core.exceptions import InvalidConfigError

logger = get_logger(__name__)

# Short names ("us-east") are kept as literal aliases of their "-1" region.
REGION_ENDPOINTS = MappingProxyType(
    {
        "us-east": "s3.amazonaws.com",
        "us-east-1": "s3.amazonaws.com",
        "us-west": "s3-us-west-1.amazonaws.com",
        "us-west-1": "s3-us-west-1.amazonaws.com",
        "us-west-2": "s3-us-west-2.amazonaws.com",
        "ap-southeast": "s3-ap-southeast-1.amazonaws.com",
        "ap-southeast-1": "s3-ap-southeast-1.amazonaws.com",
        "ap-southeast-2": "s3-ap-southeast-2.amazonaws.com",
        "ap-northeast": "s3-ap-northeast-1.amazonaws.com",
        "ap-northeast-1": "s3-ap-northeast-1.amazonaws.com",
        "eu-west": "s3-eu-west-1.amazonaws.com",
        "eu-west-1": "s3-eu-west-1.amazonaws.com",
        "sa-east": "s3-sa-east-1.amazonaws.com",
        "sa-east-1": "s3-sa-east-1.amazonaws.com",
    }
)

_NUMBERED_REGION = re.compile(r"-\d+$")


def resolve_endpoint(region: str) -> str:
    """Look up the endpoint host for a region name.

    Args:
        region: Region name, matched case-insensitively

    Returns:
        Endpoint hostname from the region table

    Raises:
        InvalidConfigError: If the region is not in the table
    """
    key = region.lower()
    try:
        endpoint = REGION_ENDPOINTS[key]
    except KeyError:
        raise InvalidConfigError(
            f"No automatic endpoint could be derived from region [{key}]"
        ) from None

    logger.debug("S3 region resolved", region=key, endpoint=endpoint)
    return endpoint


def signing_region(region: str) -> str:
    """Return the region name used for request signing.

    Short aliases sign as their first numbered region, e.g. ``us-west`` signs
    as ``us-west-1``.
    """
    key = region.lower()
    if _NUMBERED_REGION.search(key):
        return key
    return f"{key}-1"
