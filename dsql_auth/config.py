"""
Token Config — DSQL Auth

Holds everything needed to generate a token: hostname, region, expiration,
credentials source and (for tests) a clock.
"""

import logging
import time
from typing import Callable

from dsql_auth.errors import InvalidArgumentError
from dsql_auth.hostname import parse_region

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = 900  # 15 minutes


class TokenConfig:
    """Mutable configuration for TokenGenerator.generate()."""

    def __init__(
        self,
        hostname: str | None = None,
        region: str | None = None,
        expires_in: int = 0,
        credentials_source=None,
        clock: Callable[[], int] | None = None,
    ):
        self.hostname = hostname
        self.region = region
        self.expires_in = expires_in
        self.credentials_source = credentials_source
        self.clock = clock

    @property
    def expires_in(self) -> int:
        return self._expires_in

    @expires_in.setter
    def expires_in(self, seconds: int | None) -> None:
        if seconds is None:
            seconds = 0
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            raise InvalidArgumentError(f"expires_in must be a whole number of seconds: {seconds!r}")
        if seconds == 0:
            seconds = DEFAULT_EXPIRES_IN
        if seconds < 0:
            raise InvalidArgumentError(f"expires_in must not be negative: {seconds}")
        self._expires_in = seconds

    @property
    def clock(self) -> Callable[[], int]:
        """Current time in nanoseconds since the epoch."""
        return self._clock or time.time_ns

    @clock.setter
    def clock(self, clock: Callable[[], int] | None) -> None:
        self._clock = clock

    @property
    def credentials_source(self):
        return self._credentials_source

    @credentials_source.setter
    def credentials_source(self, source) -> None:
        # Only one source is referenced at a time; the previous one is dropped.
        self._credentials_source = source

    def infer_region(self) -> str:
        """Infer the region from the hostname and store it on the config."""
        region = parse_region(self.hostname)
        logger.debug(f"Inferred region {region} from hostname {self.hostname}")
        self.region = region
        return region

    def clean_up(self) -> None:
        """Drop every reference and return to defaults."""
        self.hostname = None
        self.region = None
        self.expires_in = 0
        self.credentials_source = None
        self.clock = None
