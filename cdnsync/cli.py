"""
cdnsync - Main CLI interface
Incremental S3 upload with CloudFront invalidation

Subcommand model: ``sync`` performs a full run, ``invalidate`` submits
a manual invalidation batch.
"""
import sys
import signal
import argparse
import threading
from botocore.exceptions import BotoCoreError
from colorama import init, Fore, Style

from . import __version__
from .exceptions import ConfigError
from .utils.aws.aws_utils import create_boto3_session
from .utils.config_loader import ConfigLoader, handle_config_update

# Initialize colorama
init(autoreset=True)

# ── Help-text epilogs for subcommands ──────────────────────────────────────

SYNC_EXAMPLES = """\
Examples:
  cdnsync sync www.example.com ./public
  cdnsync sync www.example.com ./public --workers 16
  cdnsync sync assets-bucket ./dist --domain static.example.com
  cdnsync sync www.example.com ./public --force
  cdnsync sync www.example.com ./public --dry-run

Only files whose content changed since the last run are uploaded.
Hidden files and directories (names starting with '.') are skipped.
"""

INVALIDATE_EXAMPLES = """\
Examples:
  cdnsync invalidate www.example.com /index.html /css/site.css
  cdnsync invalidate www.example.com "/img/*"
"""


class CdnSync:
    """Main CLI application class."""

    def __init__(self, config=None, profile=None, region=None):
        """Initialize CLI application.

        Args:
            config: Configuration dictionary (loaded from config.json)
            profile: AWS profile override
            region: AWS region override
        """
        self.config = config or {}
        self.profile = profile or self.config.get('aws_profile', '')
        self.region = region or self.config.get('aws_region', '')
        self.session = None
        self.cancel_event = threading.Event()

    def get_session(self):
        """Create the boto3 session on first use.

        Raises:
            ConfigError: the profile or region could not be resolved
        """
        if self.session is None:
            try:
                self.session = create_boto3_session(self.profile, self.region)
            except BotoCoreError as e:
                raise ConfigError(f"Could not create AWS session: {e}") from e
        return self.session

    def signal_handler(self, sig, frame):
        """Handle Ctrl+C: first press cancels the run, second press exits."""
        if self.cancel_event.is_set():
            print(f"\n{Fore.RED}[INFO] Aborting{Style.RESET_ALL}")
            sys.exit(130)
        print(f"\n\n{Fore.YELLOW}[INFO] Cancelling after in-flight uploads finish "
              f"(Ctrl+C again to abort)...{Style.RESET_ALL}")
        self.cancel_event.set()

    def install_signal_handler(self):
        signal.signal(signal.SIGINT, self.signal_handler)


# ── Argument Parser ────────────────────────────────────────────────────────

def _positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def create_argument_parser():
    """Create and configure the subparser-based argument parser."""
    parser = argparse.ArgumentParser(
        prog='cdnsync',
        description='cdnsync — incremental S3 upload with CloudFront invalidation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Global flags (apply to all subcommands)
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('--quiet', action='store_true', help='Only show warnings and errors')
    parser.add_argument('--config', help='Update config.json with JSON string')
    parser.add_argument('--profile', help='AWS profile (overrides config.json)')
    parser.add_argument('--region', help='AWS region (overrides config.json)')

    # Shared parent so --verbose works after the subcommand name too
    _verbose_parent = argparse.ArgumentParser(add_help=False)
    _verbose_parent.add_argument('--verbose', action='store_true', default=argparse.SUPPRESS,
                                 help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ── sync ───────────────────────────────────────────────────────────
    sync_parser = subparsers.add_parser(
        'sync',
        parents=[_verbose_parent],
        help='Upload changed files to S3 and invalidate CloudFront',
        description='Synchronize a local directory to an S3 bucket.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=SYNC_EXAMPLES,
    )
    sync_parser.add_argument('bucket', help='Target S3 bucket')
    sync_parser.add_argument('path', help='Local directory to upload')
    sync_parser.add_argument('--force', action='store_true',
                             help='Re-upload every file regardless of content digest')
    sync_parser.add_argument('--workers', type=_positive_int, default=None,
                             help='Concurrent upload workers (default: config.json, 8)')
    sync_parser.add_argument('--domain',
                             help='CloudFront alias to invalidate (default: bucket name)')
    sync_parser.add_argument('--dry-run', action='store_true',
                             help='Show what would be uploaded without uploading')
    sync_parser.add_argument('--no-invalidate', action='store_true',
                             help='Skip the CloudFront invalidation step')

    # ── invalidate ─────────────────────────────────────────────────────
    invalidate_parser = subparsers.add_parser(
        'invalidate',
        parents=[_verbose_parent],
        help='Invalidate paths on the distribution serving a domain',
        description='Submit one CloudFront invalidation batch.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=INVALIDATE_EXAMPLES,
    )
    invalidate_parser.add_argument('domain', help='CloudFront alias (CNAME)')
    invalidate_parser.add_argument('paths', nargs='+', help='Paths to invalidate')

    return parser


# ── Main Entry Point ──────────────────────────────────────────────────────

def main(argv=None):
    """Main CLI entry point."""
    from .utils.logger import setup_logging

    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=getattr(args, 'verbose', False), quiet=args.quiet)

    # Handle --config (no AWS access needed)
    if args.config:
        return handle_config_update(args.config)

    if args.command is None:
        parser.print_help()
        return 1

    config = ConfigLoader.load_config_json()
    app = CdnSync(config, profile=args.profile, region=args.region)
    app.install_signal_handler()

    from .modes.sync_handler import SyncHandler
    from .modes.invalidate_handler import InvalidateHandler

    handlers = {
        'sync': lambda: SyncHandler(app, args),
        'invalidate': lambda: InvalidateHandler(app, args),
    }

    return handlers[args.command]().execute()


if __name__ == '__main__':
    sys.exit(main())
