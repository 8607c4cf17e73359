"""
Binds the download progress callback to a Rich progress bar.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
)

PROGRESS_RESOLUTION = 1000


class ProgressManager:
    """
    A progress display for a single artifact download.

    The callback receives completed fractions; the bar is scaled to a fixed
    resolution so that it works whether or not the size is known in advance.
    """

    def __init__(self, console: Console, description: str = "Downloading"):
        self.console = console
        self.description = description
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=False,
        )
        self._task_id: TaskID | None = None

    def __enter__(self) -> "ProgressManager":
        self.progress.start()
        self._task_id = self.progress.add_task(
            self.description, total=PROGRESS_RESOLUTION
        )
        return self

    def __exit__(self, *exc_info) -> None:
        self.progress.stop()

    def update(self, fraction: float) -> None:
        """Progress callback: displays the completed fraction."""
        if self._task_id is not None:
            self.progress.update(
                self._task_id, completed=int(fraction * PROGRESS_RESOLUTION)
            )
