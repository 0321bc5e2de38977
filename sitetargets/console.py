"""
Console input service.

Lists are rendered as rich tables, one page at a time, and answers are
read with click prompts so that the same code works in a terminal and
under click's test runner.
"""

from typing import Optional, Sequence

import click
from rich.console import Console
from rich.table import Table

from sitetargets.plugin import Choice

DEFAULT_PAGE_SIZE = 20


class ConsoleInputService:
    """
    Interactive input service backed by the terminal.

    Args:
        page_size: Number of rows shown before pausing
        console: Rich console to render with, mainly for tests
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE, console: Optional[Console] = None) -> None:
        self.page_size = max(1, page_size)
        self.console = console or Console(highlight=False)

    def write_paged_list(self, choices: Sequence[Choice]) -> None:
        if not choices:
            self.console.print("No entries to show")
            return

        with_labels = any(label for _, label, _ in choices)
        for start in range(0, len(choices), self.page_size):
            table = Table(show_header=with_labels, box=None, pad_edge=False)
            table.add_column("Id", justify="right", style="bold")
            if with_labels:
                table.add_column("Description")
            for index, (value, label, command) in enumerate(choices[start:start + self.page_size], start + 1):
                key = command if command is not None else str(index)
                if with_labels:
                    table.add_row(key, label)
                else:
                    table.add_row(key, value)
            self.console.print(table)

            if start + self.page_size < len(choices):
                click.pause("-- Press any key to see more --")

    def request_string(self, prompt: str) -> str:
        return click.prompt(prompt, default="", show_default=False)

    def choose_from(self, prompt: str, options: Sequence[str]) -> str:
        self.write_paged_list([(option, "", None) for option in options])
        index = click.prompt(prompt, type=click.IntRange(1, len(options)), default=1)
        return options[index - 1]
