"""Mint or check gate tokens with the configured signing secret.

Useful for smoke-testing a deployment without solving a CAPTCHA:

    python -m download_gate.scripts.gate_token issue
    python -m download_gate.scripts.gate_token verify <token>
"""
from __future__ import annotations

import argparse
import sys

from download_gate.core.settings import settings
from download_gate.services.gate_token import (
    GATE_TOKEN_TTL_SECONDS,
    decode_payload,
    issue_gate_token,
    verify_gate_token,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Issue or verify download gate tokens")
    sub = parser.add_subparsers(dest="command", required=True)

    issue = sub.add_parser("issue", help="Print a freshly signed gate token")
    issue.add_argument(
        "--ttl",
        type=int,
        default=GATE_TOKEN_TTL_SECONDS,
        help="Token lifetime in seconds (default: %(default)s)",
    )

    verify = sub.add_parser("verify", help="Check a gate token and print its claims")
    verify.add_argument("token")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    secret = settings.download_gate_secret
    if not secret:
        print("DOWNLOAD_GATE_SECRET is not configured", file=sys.stderr)
        return 2

    if args.command == "issue":
        print(issue_gate_token(secret, ttl_seconds=args.ttl))
        return 0

    valid = verify_gate_token(args.token, secret)
    print("valid" if valid else "invalid")
    if valid:
        payload = decode_payload(args.token.split(".", 1)[0])
        print(f"issued_at={payload.issued_at} expires_at={payload.expires_at}")
    return 0 if valid else 1


if __name__ == "__main__":
    sys.exit(main())
