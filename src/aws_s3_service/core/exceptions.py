"""Exception hierarchy for aws-s3-service."""


class AwsS3ServiceError(Exception):
    """Base exception for all aws-s3-service errors."""

    pass


class InvalidConfigError(AwsS3ServiceError):
    """Raised when the client configuration cannot be resolved."""

    pass


class IllegalStateError(AwsS3ServiceError):
    """Raised when a lifecycle operation is not allowed in the current state."""

    pass
