"""Handler for the 'sync' subcommand.

Usage:
    cdnsync sync BUCKET PATH [--force] [--workers N] [--domain D] [--dry-run]
"""
import os
from colorama import Fore, Style

from ..services.aws import CloudFrontOperations, S3Operations, SyncEngine
from ..utils.config_loader import validate_config
from .base_handler import ModeHandler, EXIT_CANCELLED, EXIT_OK


class SyncHandler(ModeHandler):
    """Handles ``cdnsync sync`` — upload changed files and invalidate them."""

    def display_banner(self):
        print(f"\n{Fore.CYAN}  ▸ S3 Sync{Style.RESET_ALL}\n")

    def validate_prerequisites(self) -> bool:
        if not self.args.bucket.strip():
            print(f"{Fore.RED}[ERROR] Bucket name is empty{Style.RESET_ALL}")
            return False

        if not os.path.isdir(self.args.path):
            print(f"{Fore.RED}[ERROR] Not a directory: {self.args.path}{Style.RESET_ALL}")
            return False

        return True

    def prepare_context(self) -> dict:
        args = self.args
        config = dict(self.config)

        # Command-line flags override config.json for this run
        if args.workers is not None:
            config['workers'] = args.workers
        validate_config(config)

        bucket = args.bucket.strip()
        # Static-site buckets are named after the domain they serve
        domain = args.domain or bucket

        session = self.app.get_session()
        store = S3Operations.from_session(
            session, bucket,
            cache_control=config['cache_control'],
            acl=config['acl'],
            retries=config['upload_retries'],
        )
        cdn = None
        if not args.no_invalidate and not args.dry_run:
            cdn = CloudFrontOperations.from_session(session)

        engine = SyncEngine(
            store, cdn,
            workers=config['workers'],
            queue_size=config['queue_size'],
            compress_min_size=config['compress_min_size'],
            cancel_event=self.app.cancel_event,
        )

        print(f"  Bucket  : {bucket}")
        print(f"  Source  : {os.path.abspath(args.path)}")
        print(f"  Domain  : {domain if cdn else '(no invalidation)'}")
        print(f"  Workers : {config['workers']}")
        if args.force:
            print(f"  {Fore.YELLOW}Force re-upload enabled{Style.RESET_ALL}")
        if args.dry_run:
            print(f"  {Fore.YELLOW}Dry run — nothing will be uploaded{Style.RESET_ALL}")
        print()

        return {'engine': engine, 'domain': domain, 'root': args.path}

    def execute_workflow(self, context: dict):
        return context['engine'].sync(
            context['root'],
            domain=context['domain'],
            force=self.args.force,
            dry_run=self.args.dry_run,
            invalidate=not self.args.no_invalidate,
        )

    def display_completion(self, result):
        colour = Fore.GREEN if not result.failed else Fore.YELLOW
        verb = "Would upload" if result.dry_run else "Uploaded"

        print(f"\n{colour}  ▸ Sync — {'Cancelled' if result.cancelled else 'Complete'}{Style.RESET_ALL}\n")
        print(f"{Fore.CYAN}Summary:{Style.RESET_ALL}")
        print(f"  {verb}: {result.uploaded}")
        print(f"  Unchanged: {result.skipped}")
        print(f"  Failed: {len(result.failed)}")
        for key, error in result.failed:
            print(f"    {Fore.RED}{key}{Style.RESET_ALL}: {error}")
        if result.invalidation_id:
            print(f"  Invalidation: {result.invalidation_id} on {result.distribution_id}")
        print()

    def exit_code(self, result) -> int:
        # Per-file failures are logged but do not change the exit status
        return EXIT_CANCELLED if result.cancelled else EXIT_OK
