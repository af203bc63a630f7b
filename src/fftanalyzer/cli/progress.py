"""
Rich-based progress bars and console output utilities for the fftanalyzer CLI.
"""

from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

# Global console instance
console = Console()


class ProgressBar:
    """
    Rich-based progress bar for batch ingestion.

    Example:
        >>> with ProgressBar(total=len(files), description="Ingesting") as pb:
        ...     for file in files:
        ...         ingest(file)
        ...         pb.update(completed=pb.completed + 1)
    """

    def __init__(
        self,
        total: Optional[int] = None,
        description: str = "Processing",
        transient: bool = False,
        disable: bool = False,
    ) -> None:
        self.total = total
        self.description = description
        self.transient = transient
        self.disable = disable
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None
        self._completed = 0

    def __enter__(self) -> "ProgressBar":
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=self.transient,
            disable=self.disable,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(self.description, total=self.total)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._progress:
            self._progress.stop()

    def update(self, completed: Optional[int] = None, description: Optional[str] = None) -> None:
        """Update the progress bar state."""
        if self._progress and self._task_id is not None:
            kwargs: Dict[str, Any] = {}
            if completed is not None:
                kwargs["completed"] = completed
                self._completed = completed
            if description is not None:
                kwargs["description"] = description
            if kwargs:
                self._progress.update(self._task_id, **kwargs)

    def set_total(self, total: int) -> None:
        """Set the total count (useful when total is unknown at start)."""
        if self._progress and self._task_id is not None:
            self._progress.update(self._task_id, total=total)
            self.total = total

    @property
    def completed(self) -> int:
        return self._completed


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]![/yellow] {message}")


def print_table(title: str, columns: Sequence[str], rows: List[Sequence[Any]]) -> None:
    """
    Print a formatted table.

    Args:
        title: Table title
        columns: Column names
        rows: Row data (each row is a sequence of values)
    """
    table = Table(title=title)

    for col in columns:
        table.add_column(col)

    for row in rows:
        table.add_row(*["" if v is None else str(v) for v in row])

    console.print(table)


def print_summary(title: str, stats: Dict[str, Any], style: str = "blue") -> None:
    """Print a summary panel with statistics."""
    lines = []
    for key, value in stats.items():
        if isinstance(value, float):
            lines.append(f"[bold]{key}:[/bold] {value:.2f}")
        else:
            lines.append(f"[bold]{key}:[/bold] {value}")

    console.print(Panel("\n".join(lines), title=title, border_style=style))


def print_peaks(title: str, peaks: Sequence[Any], log_scale: bool = False) -> None:
    """Print peaks as a table of index, frequency and amplitude."""
    from fftanalyzer.core.formatting import format_amplitude, format_frequency

    if not peaks:
        print_warning("No peaks found")
        return

    print_table(
        title,
        ["#", "Bin", "Frequency", "Amplitude"],
        [
            [i, peak.index, format_frequency(peak.frequency), format_amplitude(peak.amplitude, log_scale)]
            for i, peak in enumerate(peaks, 1)
        ],
    )
