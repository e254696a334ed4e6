"""Shared utility functions for the knapsack scaffolder.

Provides Rich-based status reporting, atomic text writes and small
file-system helpers used by the generator actions.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Status reporting
# ---------------------------------------------------------------------------


STATUS_COLORS: dict[str, str] = {
    "create": "green",
    "insert": "green",
    "gsub": "green",
    "identical": "blue",
    "unchanged": "blue",
    "info": "blue",
    "force": "yellow",
    "skip": "yellow",
    "warning": "yellow",
    "conflict": "red",
    "remove": "red",
    "revert": "red",
    "missing": "red",
}

_STATUS_WIDTH = 12


def say_status(status: str, message: str, color: str | None = None) -> None:
    """Print a right-aligned, coloured status column followed by *message*.

    Mirrors the familiar Rails generator output::

              create  app/models/scholarly_paper.rb
           identical  config/metadata/scholarly_paper.yaml
    """
    color = color or STATUS_COLORS.get(status, "white")
    console.print(
        f"[bold {color}]{status:>{_STATUS_WIDTH}}[/bold {color}]  {message}",
        highlight=False,
        soft_wrap=True,
    )


def print_banner(message: str, color: str = "blue") -> None:
    """Print a full-width rule announcing a generator run."""
    console.print()
    console.print(Rule(f"[bold {color}] {message} [/bold {color}]", style=color))
    console.print()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def relative_to_root(path: Path, root: Path) -> str:
    """Return *path* relative to *root* when possible, for display."""
    try:
        return str(Path(path).relative_to(root))
    except ValueError:
        return str(path)


def atomic_write_text(path: str | Path, content: str) -> Path:
    """Write *content* to *path* via a temporary file and ``os.replace``.

    The temporary file lives in the destination directory so the final
    rename never crosses a file-system boundary.  Either the old or the
    new content is on disk at any moment.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        mode = target.stat().st_mode if target.exists() else 0o644
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target


def read_text(path: str | Path) -> str:
    """Read a text file without newline translation."""
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


def prune_empty_dirs(start: Path, stop: Path) -> list[Path]:
    """Remove empty directories from *start* upward, stopping before *stop*.

    Returns the directories that were removed.
    """
    removed: list[Path] = []
    current = Path(start)
    stop = Path(stop)
    while current != stop and stop in current.parents:
        if not current.is_dir() or any(current.iterdir()):
            break
        current.rmdir()
        removed.append(current)
        current = current.parent
    return removed
