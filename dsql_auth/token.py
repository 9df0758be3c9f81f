"""
Token Generator — DSQL Auth

Generates the presigned URL that Aurora DSQL accepts as a database password:

    <hostname>/?Action=DbConnect&X-Amz-Algorithm=AWS4-HMAC-SHA256&...&X-Amz-Signature=...

Flow: validate config -> resolve credentials -> sign GET /?Action=... ->
prepend the hostname to the signed path and query.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from dsql_auth.config import TokenConfig
from dsql_auth.credentials import resolve_credentials
from dsql_auth.errors import AllocationFailedError, ClockUnavailableError, InvalidArgumentError
from dsql_auth.signing import BotocoreSigner, Signer, sign_request

logger = logging.getLogger(__name__)

ACTION_DB_CONNECT = "DbConnect"
ACTION_DB_CONNECT_ADMIN = "DbConnectAdmin"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class AuthToken:
    """A token usable as the password for a DSQL connection."""
    value: str | None = None

    def clean_up(self) -> None:
        self.value = None

    def __str__(self) -> str:
        return self.value or ""


def assemble_token(hostname: str, signed_path_and_query: str) -> str:
    """Hostname followed directly by the signed '/?...' path and query."""
    try:
        return hostname + signed_path_and_query
    except MemoryError as e:
        raise AllocationFailedError("Out of memory while building the token") from e


def _validate(config: TokenConfig) -> None:
    if not config.hostname:
        raise InvalidArgumentError("hostname is required")
    if config.credentials_source is None:
        raise InvalidArgumentError("credentials source is required")
    if not config.region:
        raise InvalidArgumentError("region is required (set it or infer it from the hostname)")


def _signing_time(config: TokenConfig) -> datetime:
    """Read the configured clock, truncated to milliseconds, as UTC."""
    try:
        now_ns = config.clock()
    except Exception as e:
        raise ClockUnavailableError(f"Failed to read the clock: {e}") from e
    if not isinstance(now_ns, int) or now_ns < 0:
        raise ClockUnavailableError(f"Clock returned an invalid time: {now_ns!r}")
    return EPOCH + timedelta(milliseconds=now_ns // 1_000_000)


class TokenGenerator:
    """Produces DSQL auth tokens. Holds no state between calls."""

    def __init__(self, signer: Signer | None = None):
        self.signer = signer if signer is not None else BotocoreSigner()

    def generate(
        self,
        config: TokenConfig,
        is_admin: bool = False,
        token: AuthToken | None = None,
    ) -> AuthToken:
        """
        Generate a token for config.

        When token is given its value is replaced and the same object is
        returned. Raises a DsqlAuthError subclass on failure; token is left
        untouched in that case.
        """
        _validate(config)

        action = ACTION_DB_CONNECT_ADMIN if is_admin else ACTION_DB_CONNECT
        signing_time = _signing_time(config)

        credentials = resolve_credentials(config.credentials_source)
        signed_path_and_query = sign_request(
            self.signer,
            config.hostname,
            action,
            config.region,
            credentials,
            config.expires_in,
            signing_time,
        )

        value = assemble_token(config.hostname, signed_path_and_query)

        if token is None:
            token = AuthToken()
        token.value = value

        logger.debug(
            f"Generated {action} token for {config.hostname} "
            f"(region={config.region}, expires_in={config.expires_in})"
        )
        return token


def generate_auth_token(config: TokenConfig, is_admin: bool = False) -> AuthToken:
    """Generate a token with the default botocore signer."""
    return TokenGenerator().generate(config, is_admin=is_admin)
