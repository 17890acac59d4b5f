# src/pkg_csrf/cli.py

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

import structlog

from .config import settings_from_env
from .domain.exceptions import ConfigurationError, InvalidIdentityError
from .integrations.common.authority_factory import create_csrf_authority

logger = structlog.get_logger("pkg_csrf")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-csrf",
        description="Issue and check stateless CSRF tokens "
                    "(secret and defaults come from CSRF_* env variables).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def _common(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--identity",
            "-i",
            action="append",
            default=[],
            help="Identity component; repeat for composite identities, in order.",
        )
        p.add_argument(
            "--algorithm",
            "-a",
            help="Override CSRF_ALGORITHM (e.g. sha256).",
        )

    issue = sub.add_parser("issue", help="Print a token for the given identity.")
    _common(issue)
    issue.add_argument(
        "--ttl",
        type=int,
        help="Override CSRF_TTL (seconds).",
    )

    verify = sub.add_parser("verify", help="Exit 0 if the token is valid, 1 otherwise.")
    _common(verify)
    verify.add_argument("--token", "-t", required=True, help="Token to check.")

    return parser.parse_args(args=argv)


def _run(args: argparse.Namespace) -> dict[str, Any]:
    settings = settings_from_env(
        algorithm=args.algorithm,
        ttl=getattr(args, "ttl", None),
    )
    identity = list(args.identity)
    authority = create_csrf_authority(
        settings=settings,
        identity_resolver=lambda request: identity,
    )

    if args.command == "issue":
        token = authority.issue_token(identity)
        return {"token": token, "algorithm": settings.algorithm.value}

    return {"valid": authority.verify_token(args.token, identity)}


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    # stdout carries the JSON result
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))
    try:
        result = _run(args)
    except (ConfigurationError, InvalidIdentityError) as exc:
        logger.error("pkg-csrf failed", error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 2

    json.dump(result, sys.stdout)
    sys.stdout.write("\n")
    if args.command == "verify" and not result["valid"]:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
