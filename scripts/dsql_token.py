"""
Token Generator CLI — DSQL Auth

Resolves AWS credentials through the default provider chain, signs a
DbConnect (or DbConnectAdmin) request, and prints the resulting token,
ready to be used as the database password.

Usage:
    python dsql_token.py --hostname <cluster-id>.dsql.us-east-1.on.aws
    python dsql_token.py --hostname my-cluster.example.com --region us-east-1 --expires-in 300
    python dsql_token.py --hostname <cluster-id>.dsql.us-east-1.on.aws --admin --profile admin
"""

import argparse
import logging
import sys

import boto3
from botocore.exceptions import BotoCoreError

from dsql_auth import (
    DEFAULT_EXPIRES_IN,
    DsqlAuthError,
    SessionCredentialsSource,
    TokenConfig,
    TokenGenerator,
)

logger = logging.getLogger("dsql_token")


class ArgumentParser(argparse.ArgumentParser):
    """argparse with exit code 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def expires_in_seconds(value: str) -> int:
    """Parse a non-negative number of seconds."""
    try:
        seconds = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expires-in must be an integer: {value}") from None
    if seconds < 0:
        raise argparse.ArgumentTypeError("expires-in must be a positive number")
    return seconds


def parse_args(argv=None) -> argparse.Namespace:
    parser = ArgumentParser(
        prog="dsql-token",
        description="Generate an IAM authentication token for an Aurora DSQL cluster",
    )
    parser.add_argument(
        "--hostname", required=True,
        help="Hostname of the Aurora DSQL cluster"
    )
    parser.add_argument(
        "--region", default=None,
        help="AWS region. If omitted, inferred from the hostname"
    )
    parser.add_argument(
        "--expires-in", type=expires_in_seconds, default=0,
        help=f"Token lifetime in seconds. Default: {DEFAULT_EXPIRES_IN}"
    )
    parser.add_argument(
        "--admin", action="store_true",
        help="Generate a DbConnectAdmin token instead of DbConnect"
    )
    parser.add_argument(
        "--profile", default=None,
        help="AWS CLI profile name"
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log debug output to stderr"
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace, session: boto3.Session) -> TokenConfig:
    """Build the token config; raises InvalidArgumentError if the region can't be inferred."""
    config = TokenConfig(hostname=args.hostname)

    # Explicit region wins, otherwise infer from the hostname
    if args.region:
        config.region = args.region
    else:
        config.infer_region()

    if args.expires_in > 0:
        config.expires_in = args.expires_in

    config.credentials_source = SessionCredentialsSource(session=session)
    return config


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        session = boto3.Session(profile_name=args.profile)
    except BotoCoreError as e:
        print(f"Error: Failed to create AWS session: {e}", file=sys.stderr)
        return 1

    try:
        config = build_config(args, session)
    except DsqlAuthError as e:
        logger.debug(f"Region inference failed: {e}")
        print(
            "Error: Failed to infer AWS region from hostname. "
            "Please provide region explicitly with --region.",
            file=sys.stderr,
        )
        return 1

    try:
        token = TokenGenerator().generate(config, is_admin=args.admin)
    except DsqlAuthError as e:
        print(f"Error: Failed to generate auth token: {e}", file=sys.stderr)
        return 1
    finally:
        config.clean_up()

    print(token.value)
    token.clean_up()
    return 0


if __name__ == "__main__":
    sys.exit(main())
