"""
Command line helper to issue a token from a directive file.

Example::

    jwt-signer issue --config signer.conf --var http.request.header.X-User=alice
"""

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from jwt_signer.errors import JwtSignerError
from jwt_signer.expander import expand_claims
from jwt_signer.replacer import Replacer
from jwt_signer.signer import JwtSigner, read_directive_file


def _parse_var(raw: str) -> Tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {raw!r}")
    return name, value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="jwt-signer", description="Issue signed tokens from a jwt_signer directive")
    subparsers = parser.add_subparsers(dest="command", required=True)

    issue = subparsers.add_parser("issue", help="Issue a token and print it")
    issue.add_argument("--config", required=True, type=Path, help="Path to the directive file")
    issue.add_argument(
        "--var",
        action="append",
        default=[],
        type=_parse_var,
        metavar="NAME=VALUE",
        help="Placeholder value, e.g. http.request.header.X-User=alice (repeatable)",
    )
    issue.add_argument("--now", type=int, help="Issue time as a Unix timestamp (default: now)")
    issue.add_argument("--claims", action="store_true", help="Print the expanded claims instead of the token")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    repl = Replacer(dict(args.var))
    now = datetime.fromtimestamp(args.now, tz=timezone.utc) if args.now is not None else None

    try:
        signer = JwtSigner.from_directive(read_directive_file(args.config))
        if args.claims:
            print(json.dumps(expand_claims(signer.claims, repl), indent=2, sort_keys=True))
        else:
            print(signer.sign(repl, now=now))
    except JwtSignerError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
