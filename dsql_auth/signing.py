"""
Signing — DSQL Auth

Builds the request to presign and signs it with SigV4 query-string auth.

A signer exposes:

    sign_async(request, signing_config, on_complete) -> None

and must call on_complete(signed_request, error) exactly once. The signed
request is the same AWSRequest, with the signature query parameters
appended to its URL.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol
from urllib.parse import urlsplit, urlunsplit

from botocore.auth import SIGV4_TIMESTAMP, SigV4QueryAuth
from botocore.awsrequest import AWSRequest
from botocore.credentials import ReadOnlyCredentials
from botocore.exceptions import NoCredentialsError
from botocore.utils import percent_encode_sequence

from dsql_auth.bridge import SyncBridge
from dsql_auth.errors import SigningFailedError, error_code_of

logger = logging.getLogger(__name__)

SERVICE_NAME = "dsql"
ALGORITHM_SIGV4 = "SigV4"
SIGNATURE_QUERY_PARAMS = "query-params"
SIGNATURE_HEADERS = "headers"

SigningCallback = Callable[[AWSRequest | None, BaseException | None], None]


@dataclass(frozen=True)
class SigningConfig:
    region: str
    credentials: ReadOnlyCredentials
    expires_in: int
    timestamp: datetime
    service: str = SERVICE_NAME
    algorithm: str = ALGORITHM_SIGV4
    signature_type: str = SIGNATURE_QUERY_PARAMS
    use_double_uri_encode: bool = False
    should_normalize_uri_path: bool = True


class Signer(Protocol):
    def sign_async(
        self, request: AWSRequest, signing_config: SigningConfig, on_complete: SigningCallback
    ) -> None:
        ...


class _PinnedClockSigV4QueryAuth(SigV4QueryAuth):
    """
    SigV4QueryAuth that signs at a given timestamp instead of now, and emits
    the auth parameters in the order DSQL clients expect:
    Algorithm, Credential, Date, SignedHeaders, Expires, Security-Token.
    """

    def __init__(self, credentials, service_name, region_name, expires, timestamp: datetime):
        super().__init__(credentials, service_name, region_name, expires=expires)
        self._timestamp = timestamp

    def add_auth(self, request):
        if self.credentials is None:
            raise NoCredentialsError()
        request.context["timestamp"] = self._timestamp.strftime(SIGV4_TIMESTAMP)
        self._modify_request_before_signing(request)
        canonical_request = self.canonical_request(request)
        string_to_sign = self.string_to_sign(request, canonical_request)
        signature = self.signature(string_to_sign, request)
        self._inject_signature_to_request(request, signature)

    def _modify_request_before_signing(self, request):
        auth_params = {
            "X-Amz-Algorithm": "AWS4-HMAC-SHA256",
            "X-Amz-Credential": self.scope(request),
            "X-Amz-Date": request.context["timestamp"],
            "X-Amz-SignedHeaders": self.signed_headers(self.headers_to_sign(request)),
            "X-Amz-Expires": self._expires,
        }
        if self.credentials.token is not None:
            auth_params["X-Amz-Security-Token"] = self.credentials.token

        # Operation params (Action=...) stay first, untouched.
        url = urlsplit(request.url)
        query = percent_encode_sequence(auth_params)
        if url.query:
            query = f"{url.query}&{query}"
        request.url = urlunsplit((url.scheme, url.netloc, url.path, query, url.fragment))


class BotocoreSigner:
    """Signer backed by botocore's SigV4 query-string presigning."""

    def __init__(self, executor: Executor | None = None):
        self.executor = executor

    def sign_async(
        self, request: AWSRequest, signing_config: SigningConfig, on_complete: SigningCallback
    ) -> None:
        _check_supported(signing_config)
        if self.executor is not None:
            self.executor.submit(self._sign, request, signing_config, on_complete)
        else:
            self._sign(request, signing_config, on_complete)

    def _sign(self, request: AWSRequest, signing_config: SigningConfig, on_complete: SigningCallback) -> None:
        try:
            auth = _PinnedClockSigV4QueryAuth(
                signing_config.credentials,
                signing_config.service,
                signing_config.region,
                signing_config.expires_in,
                signing_config.timestamp,
            )
            auth.add_auth(request)
        except Exception as e:
            on_complete(None, e)
            return
        on_complete(request, None)


def _check_supported(signing_config: SigningConfig) -> None:
    # botocore normalizes the path and single-encodes it for non-S3 services.
    if signing_config.algorithm != ALGORITHM_SIGV4:
        raise ValueError(f"Unsupported signing algorithm: {signing_config.algorithm}")
    if signing_config.signature_type != SIGNATURE_QUERY_PARAMS:
        raise ValueError(f"Unsupported signature placement: {signing_config.signature_type}")
    if signing_config.use_double_uri_encode:
        raise ValueError("Double URI encoding is not supported")
    if not signing_config.should_normalize_uri_path:
        raise ValueError("URI path normalization cannot be disabled")


def build_request(hostname: str, action: str) -> AWSRequest:
    """Unsigned GET /?Action=<action> with a Host header."""
    return AWSRequest(
        method="GET",
        url=f"https://{hostname}/?Action={action}",
        headers={"Host": hostname},
    )


def sign_request(
    signer: Signer,
    hostname: str,
    action: str,
    region: str,
    credentials: ReadOnlyCredentials,
    expires_in: int,
    timestamp: datetime,
) -> str:
    """Presign the connect request and return its path and query string."""
    request = build_request(hostname, action)
    signing_config = SigningConfig(
        region=region,
        credentials=credentials,
        expires_in=expires_in,
        timestamp=timestamp,
    )

    bridge: SyncBridge[AWSRequest] = SyncBridge()
    try:
        signed, error = bridge.wait(
            lambda on_complete: signer.sign_async(request, signing_config, on_complete)
        )
    except Exception as e:
        raise SigningFailedError(f"Failed to start signing: {e}", error_code_of(e)) from e

    if error is not None:
        raise SigningFailedError(f"Failed to sign request: {error}", error_code_of(error)) from error
    if signed is None:
        raise SigningFailedError("Signer returned no request")

    url = urlsplit(signed.url)
    logger.debug(f"Signed {action} request for {hostname} in {region}")
    return f"{url.path}?{url.query}"
