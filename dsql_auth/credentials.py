"""
Credentials — DSQL Auth

Credential sources and the blocking resolution step.

A credentials source exposes:

    get_credentials(on_complete) -> None

and must call on_complete(credentials, error) exactly once, either inline
or from another thread. Raising from get_credentials means the request
could not even be started.
"""

import logging
import threading
from concurrent.futures import Executor
from typing import Callable, Protocol

import boto3
from botocore.credentials import ReadOnlyCredentials

from dsql_auth.bridge import SyncBridge
from dsql_auth.errors import ResolutionFailedError, error_code_of

logger = logging.getLogger(__name__)

CredentialsCallback = Callable[[ReadOnlyCredentials | None, BaseException | None], None]


class CredentialsSource(Protocol):
    def get_credentials(self, on_complete: CredentialsCallback) -> None:
        ...


class StaticCredentialsSource:
    """Fixed credentials, delivered synchronously."""

    def __init__(self, access_key: str, secret_key: str, session_token: str | None = None):
        self.credentials = ReadOnlyCredentials(access_key, secret_key, session_token)

    def get_credentials(self, on_complete: CredentialsCallback) -> None:
        on_complete(self.credentials, None)


class SessionCredentialsSource:
    """
    Credentials from a boto3 session's default provider chain
    (environment, shared config/profile, container, instance metadata).

    Resolution runs on the given executor, or on a dedicated daemon thread.
    """

    def __init__(
        self,
        session: boto3.Session | None = None,
        profile: str | None = None,
        executor: Executor | None = None,
    ):
        if session is not None:
            self.session = session
        else:
            self.session = boto3.Session(profile_name=profile)
        self.executor = executor

    def get_credentials(self, on_complete: CredentialsCallback) -> None:
        if self.executor is not None:
            self.executor.submit(self._resolve, on_complete)
        else:
            threading.Thread(target=self._resolve, args=(on_complete,), daemon=True).start()

    def _resolve(self, on_complete: CredentialsCallback) -> None:
        try:
            credentials = self.session.get_credentials()
            frozen = credentials.get_frozen_credentials() if credentials is not None else None
        except Exception as e:
            # Forward to the waiting caller; it decides how to fail.
            on_complete(None, e)
            return
        on_complete(frozen, None)


def resolve_credentials(source: CredentialsSource) -> ReadOnlyCredentials:
    """Block until the source yields credentials."""
    bridge: SyncBridge[ReadOnlyCredentials] = SyncBridge()
    try:
        credentials, error = bridge.wait(source.get_credentials)
    except Exception as e:
        raise ResolutionFailedError(
            f"Failed to request credentials: {e}", error_code_of(e)
        ) from e

    if error is not None:
        raise ResolutionFailedError(
            f"Failed to resolve credentials: {error}", error_code_of(error)
        ) from error
    if credentials is None:
        raise ResolutionFailedError("Credentials source returned no credentials")

    logger.debug(f"Resolved credentials (session token: {credentials.token is not None})")
    return credentials
