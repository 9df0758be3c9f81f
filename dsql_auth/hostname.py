"""
Hostname Region Parser — DSQL Auth

Extracts the AWS region from an Aurora DSQL cluster endpoint.

Expected format:
    <cluster-id>.dsql.<region>.on.aws

where the cluster id is always 26 characters, e.g.
    24abtvxzzxzrrfaxyduobmpfea.dsql.us-east-1.on.aws -> us-east-1
"""

from dsql_auth.errors import InvalidArgumentError

DSQL_MARKER = ".dsql."
DSQL_SUFFIX = ".on.aws"
CLUSTER_ID_LENGTH = 26

# 26 (cluster id) + 6 (.dsql.) + 1 (shortest region) + 7 (.on.aws)
MIN_HOSTNAME_LENGTH = CLUSTER_ID_LENGTH + len(DSQL_MARKER) + 1 + len(DSQL_SUFFIX)


def parse_region(hostname: str | None) -> str:
    """Return the region embedded in a DSQL hostname or raise InvalidArgumentError."""
    if not hostname:
        raise InvalidArgumentError("hostname is required to infer the region")

    if len(hostname) < MIN_HOSTNAME_LENGTH:
        raise InvalidArgumentError(f"hostname too short to contain a region: {hostname}")

    if hostname.find(DSQL_MARKER) != CLUSTER_ID_LENGTH:
        raise InvalidArgumentError(
            f"hostname must start with a {CLUSTER_ID_LENGTH}-character cluster id "
            f"followed by '{DSQL_MARKER}': {hostname}"
        )

    if not hostname.endswith(DSQL_SUFFIX):
        raise InvalidArgumentError(f"hostname must end with '{DSQL_SUFFIX}': {hostname}")

    start = CLUSTER_ID_LENGTH + len(DSQL_MARKER)
    end = len(hostname) - len(DSQL_SUFFIX)
    if end <= start:
        raise InvalidArgumentError(f"no region found in hostname: {hostname}")

    return hostname[start:end]
