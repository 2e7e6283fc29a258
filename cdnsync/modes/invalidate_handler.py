"""Handler for the 'invalidate' subcommand.

Usage:
    cdnsync invalidate DOMAIN PATH [PATH ...]
"""
from colorama import Fore, Style

from ..services.aws import CloudFrontOperations
from ..utils.paths import normalize_remote_path
from .base_handler import ModeHandler


class InvalidateHandler(ModeHandler):
    """Handles ``cdnsync invalidate`` — manual invalidation of given paths."""

    def display_banner(self):
        print(f"\n{Fore.CYAN}  ▸ CloudFront Invalidation{Style.RESET_ALL}\n")

    def validate_prerequisites(self) -> bool:
        if not self.args.paths:
            print(f"{Fore.RED}[ERROR] No paths given{Style.RESET_ALL}")
            return False
        return True

    def prepare_context(self) -> dict:
        # Preserve order, drop duplicates
        paths = list(dict.fromkeys(normalize_remote_path(p) for p in self.args.paths))
        cdn = CloudFrontOperations.from_session(self.app.get_session())
        return {'cdn': cdn, 'paths': paths}

    def execute_workflow(self, context: dict):
        return context['cdn'].invalidate(self.args.domain, context['paths'])

    def display_completion(self, result):
        distribution_id, invalidation_id = result
        print(f"\n{Fore.GREEN}[SUCCESS] Invalidation {invalidation_id} "
              f"submitted to {distribution_id}{Style.RESET_ALL}\n")
