"""Base mode handler with template method pattern."""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
from colorama import Fore, Style

from ..exceptions import CdnSyncError
from ..utils.logger import get_logger

log = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


class ModeHandler(ABC):
    """Abstract base class for all mode handlers."""

    def __init__(self, app, args=None):
        """Initialize mode handler with the CLI application instance.

        Args:
            app: Main :class:`~cdnsync.cli.CdnSync` instance (config, session, cancel event)
            args: Parsed argparse namespace for the subcommand
        """
        self.app = app
        self.config = app.config
        self.args = args

    def execute(self) -> int:
        """Execute mode workflow (Template Method).

        Fatal :class:`CdnSyncError` failures are reported here and turned
        into a non-zero exit code.

        Returns:
            Exit code (0 success, 1 failure, 130 cancelled)
        """
        self.display_banner()

        if not self.validate_prerequisites():
            return EXIT_FAILURE

        try:
            context = self.prepare_context()
            if context is None:
                return EXIT_FAILURE

            result = self.execute_workflow(context)
        except CdnSyncError as e:
            print(f"\n{Fore.RED}[ERROR] {e}{Style.RESET_ALL}")
            log.debug("Fatal error", exc_info=True)
            return EXIT_FAILURE

        if result is None or result is False:
            return EXIT_FAILURE

        self.display_completion(result)
        return self.exit_code(result)

    @abstractmethod
    def display_banner(self):
        """Display mode-specific banner."""

    @abstractmethod
    def validate_prerequisites(self) -> bool:
        """Validate prerequisites for this mode.

        Returns:
            True if prerequisites are met, False otherwise
        """

    @abstractmethod
    def prepare_context(self) -> Optional[Dict[str, Any]]:
        """Prepare execution context.

        Returns:
            Context dictionary with required data, or None if preparation failed
        """

    @abstractmethod
    def execute_workflow(self, context: Dict[str, Any]) -> Any:
        """Execute mode-specific workflow.

        Args:
            context: Prepared context dictionary

        Returns:
            Result object (mode-specific), or None/False if failed
        """

    def display_completion(self, result: Any):
        """Display completion message. Override for custom output."""
        print(f"\n{Fore.GREEN}[SUCCESS] Done{Style.RESET_ALL}\n")

    def exit_code(self, result: Any) -> int:
        """Map a successful workflow result to an exit code."""
        return EXIT_OK
