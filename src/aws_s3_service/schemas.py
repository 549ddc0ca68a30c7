"""Settings schema for the S3 client factory.

The factory is configured from a flat bag of string settings shared with the
rest of the plugin. ``S3ServiceSettings.from_mapping`` picks out the keys it
recognizes (including the ``s3.endpoint`` alias and the ``cloud.account`` /
``cloud.key`` credential fallbacks) and ignores everything else.

Values are kept as raw strings here. Interpreting them (protocol, proxy port,
region lookup) happens when the client is built, so a bad value surfaces from
``S3ClientFactory.get_client()`` rather than from construction.
"""

from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

MASK = "******"

FILTERED_KEYS = ("access_key", "secret_key", "cloud.account", "cloud.key")


class S3ServiceSettings(BaseModel):
    """Raw S3 client settings.

    Example:
        settings = S3ServiceSettings.from_mapping(
            {"protocol": "https", "region": "eu-west", "proxy_host": "proxy"}
        )
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    protocol: str = Field("http", description="Transport protocol, http or https")
    access_key: Optional[str] = Field(None, description="AWS access key ID")
    secret_key: Optional[SecretStr] = Field(None, description="AWS secret access key")
    proxy_host: Optional[str] = Field(None, description="HTTP proxy hostname")
    proxy_port: Optional[str] = Field(None, description="HTTP proxy port")
    s3_endpoint: Optional[str] = Field(
        None, description="Explicit S3 endpoint host or URL, overrides region"
    )
    region: Optional[str] = Field(None, description="Region name from the table")

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "S3ServiceSettings":
        """Build settings from a flat key/value bag."""
        data = {key: value for key, value in values.items() if value is not None}

        if "s3_endpoint" not in data and "s3.endpoint" in data:
            data["s3_endpoint"] = data["s3.endpoint"]
        if "access_key" not in data and "cloud.account" in data:
            data["access_key"] = data["cloud.account"]
        if "secret_key" not in data and "cloud.key" in data:
            data["secret_key"] = data["cloud.key"]

        return cls.model_validate(data)

    @property
    def has_credentials(self) -> bool:
        """True when either half of a static key pair was configured."""
        return self.access_key is not None or self.secret_key is not None

    def filtered(self) -> dict[str, Optional[str]]:
        """Return the settings as a flat dict with credentials masked."""
        dumped = self.model_dump(mode="json")
        for key in FILTERED_KEYS:
            if dumped.get(key) is not None:
                dumped[key] = MASK
        return dumped
