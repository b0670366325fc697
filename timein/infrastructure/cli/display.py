import logging
from typing import Any, Optional

from rich.console import Console
from rich.text import Text

from timein.domain.interfaces.user_interface import UserInterface
from timein.domain.models.common import FormattedOutput

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library.

    Results go to stdout verbatim (Alfred parses them); everything meant for
    a human goes to stderr with styling.
    """

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        """Initializes the rich consoles for stdout and stderr."""
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def display_output(self, output: FormattedOutput, **kwargs: Any) -> None:
        """Writes a rendered result without markup, wrapping or highlighting.

        Args:
            output: The rendered result (plain text or JSON).
        """
        text = str(output)
        logger.debug(f"display_output called: content_length={len(text)}")
        self.console.out(text, highlight=False)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message on stderr.

        Args:
            error_message: The error message to display.
        """
        self.err_console.print(Text(error_message, style="bold red"))

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        self.err_console.print(Text(f"Warning: {warning_message}", style="yellow"))

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.err_console.print(Text(info_message))
