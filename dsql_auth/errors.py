"""
Errors — DSQL Auth

Every failure raised while building a token derives from DsqlAuthError and
carries an error_code naming the underlying cause.
"""


class DsqlAuthError(Exception):
    """Base error for token generation."""

    default_code = "Unknown"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code or self.default_code


class InvalidArgumentError(DsqlAuthError, ValueError):
    """Missing or malformed configuration."""

    default_code = "InvalidArgument"


class ResolutionFailedError(DsqlAuthError):
    """The credentials source returned an error or no credentials."""

    default_code = "InvalidState"


class SigningFailedError(DsqlAuthError):
    default_code = "SigningFailed"


class ClockUnavailableError(DsqlAuthError):
    default_code = "ClockUnavailable"


class AllocationFailedError(DsqlAuthError):
    default_code = "AllocationFailed"


def error_code_of(error: BaseException) -> str:
    """Extract an AWS error code from a botocore error, else the class name."""
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        code = response.get("Error", {}).get("Code")
        if code:
            return code
    return type(error).__name__
