"""Output formatters for supply and swap results.

Provides multiple output formats:
- JSON: Machine-readable, complete data
- Table: Human-readable CLI output
"""

import json
import logging
from abc import ABC, abstractmethod
from io import StringIO
from typing import Any, Union

from rich.console import Console
from rich.table import Table

from ..core.models import SwapOutput, TokenAmount
from ..core.types import ChainId

logger = logging.getLogger(__name__)

Result = Union[TokenAmount, SwapOutput]


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, result: Result) -> str:
        """Format the result as a string."""
        pass

    def format_to_file(self, result: Result, filepath: str) -> None:
        """Write formatted result to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format(result))


class JSONFormatter(OutputFormatter):
    """Formats results as JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, result: Result) -> str:
        """Format result as JSON string.

        Amounts are written as strings so 256-bit values survive JSON
        consumers that parse numbers as doubles.
        """
        data: dict[str, Any] = result.model_dump(mode="json")
        if isinstance(result, TokenAmount):
            data["amount"] = str(result.amount)
            formatted = result.to_decimal_string()
            if formatted is not None:
                data["formatted"] = formatted
        return json.dumps(data, indent=self.indent)


class TableFormatter(OutputFormatter):
    """Formats results as a rich table for the terminal."""

    def __init__(self, width: int = 100):
        self.width = width

    def _rows(self, result: Result) -> list[tuple[str, str]]:
        if isinstance(result, SwapOutput):
            return [("Transaction", result.tx_hash)]

        token = result.token
        rows = [
            ("Chain", ChainId.describe(token.chain_id)),
            ("Address", token.address),
            ("Symbol", token.symbol or "-"),
            ("Name", token.name or "-"),
            ("Total supply (raw)", f"{result.amount:,}"),
        ]
        formatted = result.to_decimal_string()
        if formatted is not None:
            rows.append(("Total supply", f"{formatted} {token.symbol or ''}".rstrip()))
        return rows

    def _title(self, result: Result) -> str:
        return "Swap Submitted" if isinstance(result, SwapOutput) else "Token Supply"

    def format(self, result: Result) -> str:
        """Rich table formatting with colors."""
        output = StringIO()
        console = Console(file=output, force_terminal=True, width=self.width)

        table = Table(title=self._title(result), show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="green")
        for field, value in self._rows(result):
            table.add_row(field, value)
        console.print(table)

        return output.getvalue()

    def format_plain(self, result: Result) -> str:
        """Plain text formatting without ANSI codes."""
        lines = [self._title(result).upper(), "-" * 40]
        for field, value in self._rows(result):
            lines.append(f"{field + ':':<20} {value}")
        return "\n".join(lines) + "\n"

    def format_to_file(self, result: Result, filepath: str) -> None:
        """Write formatted output to file."""
        # For file output, use plain format (no ANSI codes)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format_plain(result))
