"""
Error Handling Utilities
Maps conversion failures to messages, suggestions and exit codes
"""

from difflib import get_close_matches
from typing import Optional

from rich.console import Console
from rich.markup import escape

from imgconvert.core.constants import (
    EXIT_DECODE,
    EXIT_ENCODE,
    EXIT_INPUT_OPEN,
    EXIT_OUTPUT_CREATE,
    EXIT_SUCCESS,
    EXIT_UNSUPPORTED_FORMAT,
    EXIT_USAGE,
)
from imgconvert.models.conversion import (
    ConversionErrorKind,
    ConversionResult,
    OutputFormat,
)

EXIT_CODES = {
    ConversionErrorKind.USAGE: EXIT_USAGE,
    ConversionErrorKind.INPUT_OPEN: EXIT_INPUT_OPEN,
    ConversionErrorKind.DECODE: EXIT_DECODE,
    ConversionErrorKind.OUTPUT_CREATE: EXIT_OUTPUT_CREATE,
    ConversionErrorKind.UNSUPPORTED_FORMAT: EXIT_UNSUPPORTED_FORMAT,
    ConversionErrorKind.ENCODE: EXIT_ENCODE,
}

ERROR_PREFIXES = {
    ConversionErrorKind.INPUT_OPEN: "Error opening input file",
    ConversionErrorKind.DECODE: "Error decoding image",
    ConversionErrorKind.OUTPUT_CREATE: "Error creating output file",
    ConversionErrorKind.ENCODE: "Error encoding image",
}


class ErrorHandler:
    """Reports failed conversions with helpful suggestions"""

    def __init__(self):
        self.known_formats = OutputFormat.tokens()

    def suggest_format(self, incorrect: str) -> Optional[str]:
        """Suggest a similar format"""
        matches = get_close_matches(
            incorrect.lower(), self.known_formats, n=1, cutoff=0.6
        )
        return matches[0] if matches else None

    def exit_code(self, result: ConversionResult) -> int:
        """Exit code for a finished conversion"""
        if result.succeeded:
            return EXIT_SUCCESS
        return EXIT_CODES[ConversionErrorKind(result.error_kind)]

    def report(self, result: ConversionResult, console: Console):
        """Print the failure line for a failed conversion"""
        kind = ConversionErrorKind(result.error_kind)

        if kind == ConversionErrorKind.UNSUPPORTED_FORMAT:
            token = result.requested_format or ""
            console.print(f"[red]Unsupported output format: {escape(token)}[/red]")
            suggestion = self.suggest_format(token)
            if suggestion:
                console.print(f"Did you mean: [cyan]{suggestion}[/cyan]?")
            console.print(
                f"[dim]Supported formats: {', '.join(self.known_formats)}[/dim]"
            )
            return

        prefix = ERROR_PREFIXES[kind]
        console.print(f"[red]{prefix}: {escape(result.error_message or '')}[/red]")

        if kind == ConversionErrorKind.ENCODE and result.partial_output_removed:
            console.print("[dim]Partially written output file was removed[/dim]")
