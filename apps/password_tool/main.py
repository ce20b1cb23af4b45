"""password-tool entrypoint for operators hashing and checking stored credentials."""

from __future__ import annotations

import argparse
import getpass
import sys
from collections.abc import Callable, Sequence
from dataclasses import asdict
from typing import TextIO

from pydantic import ValidationError

from password_security.config.settings import PasswordHashingSettings, load_settings
from password_security.domain.codecs.detection import detect_algorithm
from password_security.domain.errors import (
    HashDecodeError,
    InvalidArgumentError,
    InvalidConfigurationError,
)
from password_security.domain.outcome import VerificationOutcome
from password_security.infrastructure.logging import configure_logging
from password_security.infrastructure.security.hasher_factory import build_password_hasher
from password_security.infrastructure.security.upgrading_password_hasher import (
    UpgradingPasswordHasher,
)

EXIT_OK = 0
EXIT_VERIFY_FAILED = 1
EXIT_USAGE = 2
_DEFAULT_USER = "operator"

PasswordReader = Callable[[str], str]


def build_hasher_from_settings(settings: PasswordHashingSettings) -> UpgradingPasswordHasher:
    """Build the runtime hasher; raises InvalidConfigurationError on bad costs."""

    return UpgradingPasswordHasher(
        preferred=settings.algorithm,
        options=settings.to_algorithm_options(),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser for hash, verify and inspect commands."""

    parser = argparse.ArgumentParser(prog="password-tool")
    parser.add_argument("--user", default=_DEFAULT_USER, help="user identifier")
    parser.add_argument(
        "--password-stdin",
        action="store_true",
        help="read the password from the first line of stdin",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("hash", help="print an encoded hash for a password")
    verify = commands.add_parser("verify", help="check a password against a stored hash")
    verify.add_argument("password_hash")
    inspect = commands.add_parser("inspect", help="print family and cost parameters of a hash")
    inspect.add_argument("password_hash")
    return parser


def run(
    argv: Sequence[str] | None = None,
    *,
    settings: PasswordHashingSettings | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    read_password: PasswordReader = getpass.getpass,
) -> int:
    """Execute one password-tool command and return the process exit code."""

    args = build_parser().parse_args(argv)
    out = stdout if stdout is not None else sys.stdout

    if args.command == "inspect":
        return _inspect(args.password_hash, out=out)

    try:
        resolved_settings = settings if settings is not None else load_settings()
        configure_logging(level=resolved_settings.log_level)
        hasher = build_hasher_from_settings(resolved_settings)
    except (ValidationError, InvalidConfigurationError) as error:
        print(f"invalid password hashing configuration: {error}", file=sys.stderr)
        return EXIT_USAGE

    password = _read_password(
        from_stdin=args.password_stdin,
        stdin=stdin if stdin is not None else sys.stdin,
        read_password=read_password,
    )
    try:
        if args.command == "hash":
            print(hasher.hash_password(user=args.user, password=password), file=out)
            return EXIT_OK

        outcome = hasher.verify_password(
            user=args.user,
            password_hash=args.password_hash,
            password=password,
        )
    except InvalidArgumentError as error:
        print(f"invalid input: {error}", file=sys.stderr)
        return EXIT_USAGE

    print(outcome.value, file=out)
    return EXIT_VERIFY_FAILED if outcome is VerificationOutcome.FAILED else EXIT_OK


def main() -> None:
    """Run password-tool process."""

    raise SystemExit(run())


def _inspect(password_hash: str, *, out: TextIO) -> int:
    algorithm = detect_algorithm(password_hash)
    if algorithm is None:
        print("unknown hash family", file=sys.stderr)
        return EXIT_USAGE
    try:
        decoded = build_password_hasher(algorithm).decode(password_hash)
    except HashDecodeError as error:
        print(f"malformed {algorithm.value} hash: {error}", file=sys.stderr)
        return EXIT_USAGE

    print(f"algorithm={algorithm.value}", file=out)
    for name, value in asdict(decoded.parameters).items():
        print(f"{name}={value}", file=out)
    return EXIT_OK


def _read_password(*, from_stdin: bool, stdin: TextIO, read_password: PasswordReader) -> str:
    if from_stdin:
        return stdin.readline().rstrip("\r\n")
    return read_password("Password: ")


if __name__ == "__main__":
    main()
