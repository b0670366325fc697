"""Output formatters (plain text and Alfred Script Filter JSON)."""

from timein.domain.models.common import OutputFormat
from timein.domain.interfaces.output_formatter import OutputFormatter
from timein.infrastructure.presenters.alfred import AlfredFormatter
from timein.infrastructure.presenters.plain import PlainFormatter


def get_formatter(output_format: OutputFormat) -> OutputFormatter:
    if output_format == OutputFormat.ALFRED:
        return AlfredFormatter()
    return PlainFormatter()


__all__ = ["AlfredFormatter", "PlainFormatter", "get_formatter"]
