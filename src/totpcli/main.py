"""
totpcli: Terminal TOTP Authenticator

Command-line dispatcher for the account store, OTP engine and live display:

    totpcli add <name> [--secret TEXT | --generate] [--digits N] [--period S] [--algorithm ALG]
    totpcli delete <name>
    totpcli list [--once] [--skip-invalid]
    totpcli export <name> [--issuer NAME] [--qr] [--png PATH]

Exit status is 0 on success (including Ctrl+C out of the live list) and
non-zero for any error reported by the core.
"""

import sys
import time
import signal
import logging
import argparse
import getpass

from . import config
from .exceptions import TotpCliError, InvalidSecretEncoding
from .totp import codec
from .totp.engine import OtpParams, HashAlgorithm
from .security.account_store import AccountStore
from .security import exporters
from .display.refresh import RefreshLoop
from .display.renderer import PlainRenderer, TerminalRenderer
from .utils.logger import setup_logger, close_logging, get_log_file_path, debug, info
from .utils.colorprint import print_error, print_info, print_success, print_warning

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def build_parser():
    parser = argparse.ArgumentParser(prog=config.APP_NAME, description="Terminal TOTP authenticator (RFC 6238)")
    parser.add_argument("--version", action="version", version=f"{config.APP_NAME} {config.APP_VERSION}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--store", metavar="PATH", help="Account store file (default: %(prog)s data directory)")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    add = subparsers.add_parser("add", help="Add an account")
    add.add_argument("name", help="Unique account name")
    source = add.add_mutually_exclusive_group()
    source.add_argument("--secret", help="Base32 secret (prompted for if omitted)")
    source.add_argument("--generate", action="store_true", help="Generate a new random secret")
    add.add_argument("--digits", type=int, default=config.DEFAULT_DIGITS, help="Code length (default: %(default)s)")
    add.add_argument("--period", type=int, default=config.DEFAULT_PERIOD, help="Seconds per code (default: %(default)s)")
    add.add_argument("--algorithm", default=config.DEFAULT_ALGORITHM, type=str.upper,
                     choices=[algorithm.value for algorithm in HashAlgorithm],
                     help="HMAC hash (default: %(default)s)")

    delete = subparsers.add_parser("delete", help="Delete an account")
    delete.add_argument("name", help="Account to delete")

    listing = subparsers.add_parser("list", help="Show live codes for all accounts")
    listing.add_argument("--once", action="store_true", help="Print the current codes once and exit")
    listing.add_argument("--skip-invalid", action="store_true", help="Skip unreadable accounts instead of failing")
    listing.add_argument("--no-color", action="store_true", help="Disable colored output")

    export = subparsers.add_parser("export", help="Show an account's secret for backup")
    export.add_argument("name", help="Account to export")
    export.add_argument("--issuer", help="Issuer to put in the otpauth URI")
    export.add_argument("--qr", action="store_true", help="Draw the otpauth URI as a QR code")
    export.add_argument("--png", metavar="PATH", help="Save the otpauth URI as a QR code image")

    return parser


def read_secret():
    """Prompt for a secret without echoing it."""
    secret = getpass.getpass("Enter Base32 secret: ")
    if not secret.strip():
        raise InvalidSecretEncoding("secret is empty")
    return secret


def cmd_add(store, args):
    if args.generate:
        secret_text = exporters.generate_secret()
    elif args.secret is not None:
        secret_text = args.secret
    else:
        secret_text = read_secret()

    params = OtpParams(args.digits, args.period, args.algorithm)
    account = store.add(args.name, secret_text, params)
    print_success(f"Added account '{account.name}'")

    if account.is_weak:
        print_warning(f"Warning: this secret is only {len(account.secret)} bytes; "
                      f"at least {config.WEAK_SECRET_BYTES} is recommended")

    if args.generate:
        print_info("New secret (store a backup, it is only shown now and on export):")
        print(codec.group(codec.encode(account.secret)))
    return EXIT_OK


def cmd_delete(store, args):
    store.delete(args.name)
    print_success(f"Deleted account '{args.name}'")
    return EXIT_OK


def cmd_list(store, args):
    for problem in store.load_errors:
        print_warning(f"Skipped record {problem.record_index}: {problem}")

    color = not args.no_color
    loop = RefreshLoop(store.list())

    if args.once:
        renderer = PlainRenderer(color=color and sys.stdout.isatty())
        renderer.start()
        renderer.draw(loop.frame_at(time.time()))
        renderer.close()
        return EXIT_OK

    if sys.stdout.isatty():
        renderer = TerminalRenderer(color=color, title=f"{config.APP_NAME} {config.APP_VERSION}")
    else:
        renderer = PlainRenderer(color=False)

    # SIGTERM ends the session the same way Ctrl+C does. The handler must not
    # touch the stop event: the interrupted wait may hold its lock.
    def _stop(signum, frame):
        debug(f"Received signal {signum}, stopping display")
        raise KeyboardInterrupt

    previous = None
    try:
        previous = signal.signal(signal.SIGTERM, _stop)
    except (AttributeError, ValueError):
        # Not available on this platform or not on the main thread
        pass
    try:
        loop.run(renderer)
    finally:
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)
    return EXIT_OK


def cmd_export(store, args):
    account = store.get(args.name)
    uri = exporters.export_to_otpauth_uri(account, issuer=args.issuer)

    print_info(f"Secret for '{account.name}':")
    print(codec.group(codec.encode(account.secret)))
    print_info("otpauth URI:")
    print(uri)

    if args.qr:
        print(exporters.render_qr_ascii(uri))
    if args.png:
        path = exporters.save_qr_png(uri, args.png)
        print_success(f"QR code saved to {path}")
    return EXIT_OK


COMMANDS = {
    "add": cmd_add,
    "delete": cmd_delete,
    "list": cmd_list,
    "export": cmd_export,
}


def main(argv=None):
    """
    Main entry point for the application.

    Returns:
        int: 0 for successful execution, non-zero for errors
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logger(console_level=logging.DEBUG if args.debug else None)
    try:
        debug(f"Running command '{args.command}' (log file: {get_log_file_path()})")
        store = AccountStore.open(args.store, strict=not getattr(args, "skip_invalid", False))
        return COMMANDS[args.command](store, args)
    except TotpCliError as e:
        info(f"Command '{args.command}' failed: {e}")
        print_error(f"Error: {e}")
        return EXIT_ERROR
    except KeyboardInterrupt:
        print()
        return EXIT_INTERRUPTED
    finally:
        close_logging()


if __name__ == "__main__":
    sys.exit(main())
