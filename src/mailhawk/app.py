# =============================================================================
# mailhawk Command Line
# =============================================================================
# A thin command-line wrapper around the library:
#
#   mailhawk --to bob@example.com --subject "Report" \
#            --text-file body.txt --html-file body.html --attach report.pdf
#
# The account (SMTP server, envelope sender) comes from config.toml, the
# password from the system keyring. --dump prints the composed message
# instead of sending it, which is handy for checking the MIME output.
# =============================================================================

import argparse
import logging
import sys
from pathlib import Path

from mailhawk import __version__, __app_name__
from mailhawk.config import Config, ConfigError, print_paths
from mailhawk.core import Address, AttachmentReadError, Message
from mailhawk.smtp import SMTPError, SMTPSender, TransmissionError

logger = logging.getLogger(__name__)

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PARTIAL = 2        # Sent, but some recipients were refused


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="mailhawk: compose a MIME message and send it over SMTP",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: XDG config location)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    parser.add_argument("--account", help="Account to send from (default: default_account)")
    parser.add_argument("--from", dest="sender", help="From header (default: the account's address)")
    parser.add_argument("--to", action="append", default=[], metavar="ADDR", help="Recipient (repeatable)")
    parser.add_argument("--cc", action="append", default=[], metavar="ADDR", help="CC recipient (repeatable)")
    parser.add_argument("--bcc", action="append", default=[], metavar="ADDR", help="BCC recipient (repeatable)")
    parser.add_argument("--subject", default="", help="Subject line")

    text = parser.add_mutually_exclusive_group()
    text.add_argument("--text", help="Plain text body")
    text.add_argument("--text-file", type=Path, help="Read the plain text body from a file")

    parser.add_argument("--html-file", type=Path, help="Read the HTML body from a file")
    parser.add_argument("--attach", action="append", default=[], metavar="PATH", help="Attach a file (repeatable)")

    parser.add_argument(
        "--dump",
        action="store_true",
        help="Write the composed message to stdout instead of sending it",
    )

    return parser.parse_args(argv)


def build_message(
    args: argparse.Namespace,
    default_sender: Address | None = None,
) -> Message:
    """
    Assemble a Message from the parsed arguments.

    --from wins over default_sender, which is used as-is (not re-parsed).

    Raises:
        OSError: If a body file cannot be read.
        AttachmentReadError: If an attachment cannot be read.
    """
    body_text = args.text or ""
    if args.text_file:
        body_text = args.text_file.read_text(encoding="utf-8")

    body_html = ""
    if args.html_file:
        body_html = args.html_file.read_text(encoding="utf-8")

    message = Message(subject=args.subject, body_text=body_text, body_html=body_html)
    if args.sender:
        message.set_from(args.sender)
    else:
        message.sender = default_sender
    message.set_to(args.to)
    message.set_cc(args.cc)
    message.set_bcc(args.bcc)

    for path in args.attach:
        message.attach_file(path)

    return message


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for mailhawk.

    This function:
        1. Parses command-line arguments
        2. Handles special commands (--paths, --version)
        3. Loads configuration and builds the message
        4. Dumps or sends it

    Returns:
        Exit code (0 for success, 1 for errors, 2 if recipients were refused).
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.paths:
        print_paths()
        return EXIT_OK

    try:
        config = Config.load(args.config)
        account = None
        if not args.dump or not args.sender:
            account = config.get_account(args.account)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        message = build_message(args, account.sender_address if account else None)
    except AttachmentReadError as e:
        print(str(e), file=sys.stderr)
        return EXIT_FAILURE
    except OSError as e:
        print(f"Cannot read body file: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.dump:
        sys.stdout.buffer.write(message.to_bytes())
        sys.stdout.buffer.flush()
        return EXIT_OK

    if not message.all_recipients:
        print("No recipients specified", file=sys.stderr)
        return EXIT_FAILURE

    sender = SMTPSender.from_account(account)
    try:
        result = sender.send(message)
    except SMTPError as e:
        print(f"Send failed: {e}", file=sys.stderr)
        if isinstance(e, TransmissionError):
            for error in e.result.rejected:
                print(str(error), file=sys.stderr)
        return EXIT_FAILURE

    if not result.all_accepted:
        for error in result.rejected:
            print(str(error), file=sys.stderr)
        return EXIT_PARTIAL

    logger.info(f"Message delivered to {len(result.accepted)} recipient(s)")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
