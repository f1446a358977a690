"""nostrkit.cli

Command line interface entry point for nostrkit.

Design constraints:
- argparse-based.
- Events are read as NIP-01 JSON objects from a file or ``-`` (stdin).
- Exit codes: 0 ok, 1 rejected or failed, 2 usage.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from nostrkit.core.config import Config
from nostrkit.core.exceptions import ConfigError, NostrkitError
from nostrkit.security.redaction import redact_secrets

if TYPE_CHECKING:
    from nostrkit.core.events import Event

logger = logging.getLogger("nostrkit.cli")


@dataclass(frozen=True)
class CliContext:
    config: Config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nostrkit",
        description="Canonical serialization, ids and BIP-340 signatures for events.",
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit.")
    parser.add_argument("--config", type=Path, default=None, help="Path to a YAML config file.")

    sub = parser.add_subparsers(dest="command")

    p_keys = sub.add_parser("keys", help="Identity key management")
    keys_sub = p_keys.add_subparsers(dest="keys_command")
    p_gen = keys_sub.add_parser("generate", help="Create and store a new identity")
    p_gen.add_argument("--path", type=Path, default=None)
    p_gen.add_argument("--force", action="store_true", help="Overwrite an existing identity file.")
    p_gen.add_argument("--json", action="store_true")
    p_show = keys_sub.add_parser("show", help="Show the stored identity's public key")
    p_show.add_argument("--path", type=Path, default=None)
    p_show.add_argument("--json", action="store_true")

    p_event = sub.add_parser("event", help="Serialize, hash, sign and verify events")
    ev_sub = p_event.add_subparsers(dest="event_command")
    for name, help_text in (
        ("serialize", "Print the canonical serialization"),
        ("id", "Print the event id"),
        ("verify", "Check id and signature"),
    ):
        p = ev_sub.add_parser(name, help=help_text)
        p.add_argument("file", help="Event JSON file, or - for stdin")
    p_sign = ev_sub.add_parser("sign", help="Sign with the stored identity and print the event")
    p_sign.add_argument("file", help="Event JSON file, or - for stdin")
    p_sign.add_argument("--path", type=Path, default=None, help="Identity file.")
    p_sign.add_argument(
        "--private-key-env",
        default=None,
        metavar="VAR",
        help="Read the private key hex from this environment variable instead of the identity file.",
    )

    return parser


def _print_version() -> None:
    from nostrkit import __version__

    print(f"nostrkit v{__version__}")


def _identity_path(ctx: CliContext, args: argparse.Namespace) -> Path:
    return args.path if args.path is not None else ctx.config.identity.path


def _read_event(source: str) -> Event:
    from nostrkit.core.events import Event

    text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("event JSON must be an object")
    # Unsigned drafts may omit the author; `event sign` fills it from the key.
    data.setdefault("pubkey", "")
    return Event.from_json_object(data)


def _cmd_keys(ctx: CliContext, args: argparse.Namespace) -> int:
    from nostrkit.security.identity import generate_node_identity, identity_status

    if args.keys_command is None:
        print("usage: nostrkit keys {generate,show}", file=sys.stderr)
        return 2

    path = _identity_path(ctx, args)

    if args.keys_command == "generate":
        if path.exists() and not args.force:
            print(f"error: identity already exists at {path} (use --force)", file=sys.stderr)
            return 1
        ident = generate_node_identity()
        ident.save(path, iterations=ctx.config.identity.kdf_iterations)
        if args.json:
            print(json.dumps({"path": str(path), "public_key": ident.public_key}, indent=2, sort_keys=True))
        else:
            print(f"public key: {ident.public_key}")
            print(f"stored at:  {path}")
        return 0

    if args.keys_command == "show":
        status = identity_status(path)
        if args.json:
            print(json.dumps(status, indent=2, sort_keys=True))
        elif status["present"]:
            print(status["public_key"])
        else:
            print(f"no usable identity at {path}" + (f": {status['error']}" if "error" in status else ""))
        return 0 if status["present"] else 1

    raise ValueError(f"unknown keys command: {args.keys_command}")


def _cmd_event(ctx: CliContext, args: argparse.Namespace) -> int:
    if args.event_command is None:
        print("usage: nostrkit event {serialize,id,sign,verify} FILE", file=sys.stderr)
        return 2

    event = _read_event(args.file)

    if args.event_command == "serialize":
        sys.stdout.write(event.serialize().decode("utf-8") + "\n")
        return 0

    if args.event_command == "id":
        print(event.get_id())
        return 0

    if args.event_command == "sign":
        if args.private_key_env:
            private_key = os.environ.get(args.private_key_env, "")
            if not private_key:
                print(f"error: ${args.private_key_env} is empty", file=sys.stderr)
                return 1
        else:
            from nostrkit.security.identity import NodeIdentity

            private_key = NodeIdentity.load(_identity_path(ctx, args)).private_key
        if not event.pubkey:
            from nostrkit.security.schnorr import public_key_from_private

            event.pubkey = public_key_from_private(private_key)
        event.sign(private_key)
        print(json.dumps(event.to_json_object(), ensure_ascii=False))
        return 0

    # verify
    id_ok = event.check_id()
    sig_ok = event.check_signature()
    result = {"id": event.id, "id_valid": id_ok, "signature_valid": sig_ok}
    print(json.dumps(result, sort_keys=True))
    return 0 if (id_ok and sig_ok) else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    try:
        config = Config.load(args.config)
    except (ConfigError, ValidationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    from nostrkit.core.log import configure_logging

    configure_logging(config.logging)
    ctx = CliContext(config=config)

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "keys": _cmd_keys,
        "event": _cmd_event,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    try:
        return int(fn(ctx, args))
    except (NostrkitError, ValidationError, ValueError, OSError) as e:
        logger.debug("command_failed", extra={"command": args.command}, exc_info=True)
        print(f"error: {redact_secrets(str(e))}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
