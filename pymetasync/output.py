"""Console output formatting for PyMetaSync."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


class OutputFormatter:
    """Writes user-facing messages, tables and panels to the console."""

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of decorated text
            quiet: Suppress non-essential output
            console: Console for normal output (defaults to stdout)
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def info(self, message: str) -> None:
        """Print an informational message (suppressed in quiet mode)."""
        if self.quiet or self.json_output:
            return
        self.console.print(Text(message, style="cyan"), soft_wrap=True)

    def success(self, message: str) -> None:
        """Print a success message."""
        if self.quiet or self.json_output:
            return
        self.console.print(Text(message, style="green"), soft_wrap=True)

    def warning(self, message: str) -> None:
        """Print a warning message."""
        if self.json_output:
            return
        self.console.print(Text(message, style="yellow"), soft_wrap=True)

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        self.err_console.print(Text(message, style="bold red"), soft_wrap=True)

    def output_json(self, data: Any) -> None:
        """Print data as JSON."""
        self.console.print_json(json.dumps(data, default=str))

    def output_table(
        self, rows: list[dict[str, Any]], columns: list[str], title: str = ""
    ) -> None:
        """Print rows as a table.

        Args:
            rows: Row dictionaries
            columns: Keys to show, in order
            title: Optional table title
        """
        if self.json_output:
            self.output_json(rows)
            return
        table = Table(title=title or None, box=box.SIMPLE_HEAD)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(str(row.get(column, "")) for column in columns))
        self.console.print(table)

    def print_categories(self, title: str, categories: dict[str, list[str]]) -> bool:
        """Print non-empty categories of file names inside a panel.

        Panels are printed in quiet mode too: they list the files the
        operator is about to choose from.

        Args:
            title: Panel title
            categories: Category heading -> file names

        Returns:
            True if at least one category was non-empty
        """
        non_empty = {name: files for name, files in categories.items() if files}
        if not non_empty:
            return False
        if self.json_output:
            return True

        body = Text()
        for index, (category, files) in enumerate(non_empty.items()):
            if index:
                body.append("\n\n")
            body.append(category, style="bold")
            for file_name in files:
                body.append(f"\n - {file_name}")

        self.console.print()
        self.console.print(
            Panel(body, title=title, title_align="left", box=box.HEAVY, padding=1)
        )
        return True

    def show_diff(self, file_name: str, diff: str) -> None:
        """Print the diff of one file.

        Diffs are only shown on request, so quiet mode does not hide them.
        """
        if self.json_output:
            return
        self.console.print()
        self.console.print(Text(f"Diff for {file_name}:", style="bold red"))
        self.console.print(Syntax(diff, "diff", theme="ansi_dark", word_wrap=True))

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner while the block runs (nothing in quiet/JSON mode)."""
        if self.quiet or self.json_output:
            yield
            return
        with self.console.status(message):
            yield
