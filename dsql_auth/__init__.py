"""
DSQL Auth

Generates IAM authentication tokens for Aurora DSQL clusters.
"""

from dsql_auth.bridge import SyncBridge
from dsql_auth.config import DEFAULT_EXPIRES_IN, TokenConfig
from dsql_auth.credentials import (
    SessionCredentialsSource,
    StaticCredentialsSource,
    resolve_credentials,
)
from dsql_auth.errors import (
    AllocationFailedError,
    ClockUnavailableError,
    DsqlAuthError,
    InvalidArgumentError,
    ResolutionFailedError,
    SigningFailedError,
)
from dsql_auth.hostname import parse_region
from dsql_auth.signing import BotocoreSigner, SigningConfig, build_request, sign_request
from dsql_auth.token import (
    ACTION_DB_CONNECT,
    ACTION_DB_CONNECT_ADMIN,
    AuthToken,
    TokenGenerator,
    assemble_token,
    generate_auth_token,
)

__version__ = "0.1.0"

__all__ = [
    "ACTION_DB_CONNECT",
    "ACTION_DB_CONNECT_ADMIN",
    "DEFAULT_EXPIRES_IN",
    "AllocationFailedError",
    "AuthToken",
    "BotocoreSigner",
    "ClockUnavailableError",
    "DsqlAuthError",
    "InvalidArgumentError",
    "ResolutionFailedError",
    "SessionCredentialsSource",
    "SigningConfig",
    "SigningFailedError",
    "StaticCredentialsSource",
    "SyncBridge",
    "TokenConfig",
    "TokenGenerator",
    "assemble_token",
    "build_request",
    "generate_auth_token",
    "parse_region",
    "resolve_credentials",
    "sign_request",
]
