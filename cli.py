#!/usr/bin/env python3
"""enmass CLI: pull the emails or phone numbers of a contact group."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from enmass.auth import AuthError
from enmass.cancel import CancelToken
from enmass.config import ConfigError, Settings, load_settings
from enmass.engine import ContactsEngine
from enmass.errors import Cancelled, EnmassError, render_error
from enmass.extract import ContactKind

__version__ = "0.1.0"

OUTPUT_SEPARATOR = ";"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="enmass",
        description="Collect contact details of a Google Contacts group for bulk messaging.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    credentials = parser.add_argument_group(
        "OAuth credentials",
        "Each flag falls back to the environment variable shown (a .env file is read too).",
    )
    credentials.add_argument("--auth-uri", help="OAuth authorization endpoint (AUTH_URI).")
    credentials.add_argument("--token-uri", help="OAuth token endpoint (TOKEN_URI).")
    credentials.add_argument(
        "--redirect-uris",
        help="Comma-separated redirect URIs (REDIRECT_URIS).",
    )
    credentials.add_argument("--client-id", help="OAuth client ID (CLIENT_ID).")
    credentials.add_argument(
        "--secret", dest="client_secret", help="OAuth client secret (CLIENT_SECRET)."
    )
    credentials.add_argument(
        "--token-path",
        help="Where the OAuth token is cached (ENMASS_TOKEN_PATH, default token.json).",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr."
    )
    parser.add_argument(
        "--backtrace",
        action="store_true",
        help="Print a stack trace on failure (or set ENMASS_BACKTRACE=1).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    kinds = [kind.value for kind in ContactKind]

    get_parser = subparsers.add_parser(
        "get",
        help="Print a group's email addresses or phone numbers, ';'-separated.",
    )
    get_parser.add_argument("contact_type", choices=kinds, help="What to collect.")
    get_parser.add_argument("group_name", help="Exact (case-sensitive) group name.")

    send_parser = subparsers.add_parser(
        "send",
        help="Send a message to every member of a group (not supported yet).",
    )
    send_parser.add_argument("contact_type", choices=kinds, help="Delivery method.")
    send_parser.add_argument("group_name", help="Exact (case-sensitive) group name.")

    return parser


def _configure_logging(settings_level: str, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _settings_from_args(args: argparse.Namespace) -> Settings:
    return load_settings(
        overrides={
            "auth_uri": args.auth_uri,
            "token_uri": args.token_uri,
            "redirect_uris": args.redirect_uris,
            "client_id": args.client_id,
            "client_secret": args.client_secret,
            "token_path": args.token_path,
        }
    )


def _cmd_get(engine: ContactsEngine, kind: ContactKind, group_name: str) -> int:
    values = engine.get_group_contacts(group_name, kind)
    print(OUTPUT_SEPARATOR.join(values))
    return EXIT_OK


def _cmd_send(kind: ContactKind, group_name: str) -> int:
    print(
        f"Sending by {kind.value} is not supported (group '{group_name}').",
        file=sys.stderr,
    )
    return EXIT_USAGE


def main(argv: Optional[list[str]] = None, engine: Optional[ContactsEngine] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    kind = ContactKind(args.contact_type)

    if args.command == "send":
        return _cmd_send(kind, args.group_name)

    try:
        settings = _settings_from_args(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    _configure_logging(settings.log_level, args.verbose)
    backtrace = args.backtrace or settings.backtrace
    cancel_token = CancelToken()

    try:
        if engine is None:
            engine = ContactsEngine.from_settings(settings, cancel_token=cancel_token)
        else:
            cancel_token = engine.cancel_token
        return _cmd_get(engine, kind, args.group_name)
    except KeyboardInterrupt:
        cancel_token.cancel()
        print(render_error(Cancelled(f"get {kind.value}")), file=sys.stderr)
        return EXIT_CANCELLED
    except Cancelled as exc:
        print(render_error(exc), file=sys.stderr)
        return EXIT_CANCELLED
    except (EnmassError, AuthError) as exc:
        print(render_error(exc, backtrace=backtrace), file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
