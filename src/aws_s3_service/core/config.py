"""Configuration management for aws-s3-service."""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library settings, read from AWS_S3_SERVICE_* environment variables."""

    log_level: str = "INFO"
    log_json: bool = True

    otel_enabled: bool = False
    otel_service_name: str = "aws-s3-service"
    otel_exporter: Literal["otlp", "console"] = "otlp"
    otel_exporter_endpoint: str = "http://localhost:4317"

    metadata_service_timeout: float = 1.0
    metadata_service_num_attempts: int = 1
    # Must stay above botocore's 15 minute advisory refresh window
    credentials_refresh_interval: int = 3600

    model_config = {
        "env_prefix": "AWS_S3_SERVICE_",
        "case_sensitive": False,
    }


settings = Settings()
