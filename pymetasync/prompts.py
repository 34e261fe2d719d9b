"""Interactive file selection prompts."""

from collections.abc import Sequence

import click


def parse_selection(answer: str, count: int) -> list[int]:
    """Parse a selection answer into zero-based indexes.

    Accepts comma- or space-separated numbers and ranges (``1,3-4``),
    ``all``/``a`` for everything and an empty answer or ``none`` for nothing.

    Args:
        answer: Raw user input
        count: Number of available choices

    Returns:
        Sorted, de-duplicated zero-based indexes

    Raises:
        ValueError: If the answer is not a valid selection
    """
    answer = answer.strip().lower()
    if answer in ("", "none", "n"):
        return []
    if answer in ("all", "a", "*"):
        return list(range(count))

    selected: set[int] = set()
    for token in answer.replace(",", " ").split():
        if "-" in token:
            start_str, _, end_str = token.partition("-")
            start, end = int(start_str), int(end_str)
            if start > end:
                raise ValueError(f"Invalid range: {token}")
            numbers = range(start, end + 1)
        else:
            numbers = range(int(token), int(token) + 1)
        for number in numbers:
            if not 1 <= number <= count:
                raise ValueError(f"Choice out of range: {number}")
            selected.add(number - 1)
    return sorted(selected)


class FilePrompter:
    """Asks the operator to pick a subset of file names."""

    def select(self, message: str, choices: Sequence[str]) -> list[str]:
        """Prompt for a subset of ``choices``.

        Args:
            message: Question shown above the list
            choices: Candidate labels

        Returns:
            Chosen labels, in the order of ``choices`` (possibly empty)

        Raises:
            click.Abort: If the operator aborts the prompt
        """
        if not choices:
            return []

        # stderr keeps stdout clean for --json results
        click.echo(err=True)
        click.echo(message, err=True)
        for number, choice in enumerate(choices, start=1):
            click.echo(f"  [{number}] {choice}", err=True)

        while True:
            answer = click.prompt(
                "Selection (e.g. 1,3-4, 'all', empty for none)",
                default="",
                show_default=False,
                err=True,
            )
            try:
                indexes = parse_selection(answer, len(choices))
            except ValueError as e:
                click.echo(f"Invalid selection: {e}", err=True)
                continue
            return [choices[i] for i in indexes]
