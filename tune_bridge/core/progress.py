"""
Progress bar handling for tune-bridge using Rich library.

Progress bars are drawn on stderr, so standard output stays clean for
resolved links.

Bars:
    - CollectingProgressBar: Spotify scroll loop (total unknown)
    - ResolvingProgressBar: Cross-platform resolution (one step per track)

Usage:
    from tune_bridge.core.progress import ResolvingProgressBar

    with ResolvingProgressBar(total=len(tracks)) as progress:
        for track in tracks:
            progress.update(resolved=find(track) is not None)
"""

from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console, JustifyMethod, OverflowMethod
from rich.highlighter import Highlighter
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    Task,
    TaskID,
)
from rich.style import StyleType
from rich.text import Text
from rich.theme import Theme


PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(165,66,129)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(165,66,129)",
    "progress.percentage": "white",
})


class SizedTextColumn(ProgressColumn):
    """
    Text column truncated with an ellipsis past a fixed width.
    """

    def __init__(
        self,
        text_format: str,
        style: StyleType = "none",
        justify: JustifyMethod = "left",
        markup: bool = True,
        highlighter: Optional[Highlighter] = None,
        overflow: Optional[OverflowMethod] = None,
        width: int = 20,
    ) -> None:
        self.text_format = text_format
        self.justify: JustifyMethod = justify
        self.style = style
        self.markup = markup
        self.highlighter = highlighter
        self.overflow: Optional[OverflowMethod] = overflow
        self.width = width
        super().__init__()

    def render(self, task: Task) -> Text:
        _text = self.text_format.format(task=task)
        if self.markup:
            text = Text.from_markup(_text, style=self.style, justify=self.justify)
        else:
            text = Text(_text, style=self.style, justify=self.justify)
        if self.highlighter:
            self.highlighter.highlight(text)

        text.truncate(max_width=self.width, overflow=self.overflow, pad=True)
        return text


class BaseProgressBar(ABC):
    """
    Abstract base class for all progress bars.

    Provides common functionality:
    - Rich Progress instance on a stderr console
    - Context manager support (__enter__/__exit__)
    - Manual start/stop control
    - Log method for printing above the progress bar

    Subclasses must implement:
    - _get_status_text(): Return formatted status string
    - update(): Update progress with bar-specific logic
    """

    def __init__(
        self,
        total: Optional[int],
        description: str,
        status_width: int = 35
    ):
        """
        Initialize the progress bar.

        Args:
            total: Total number of items, or None when unknown (pulsing bar).
            description: Description to show on the left (e.g., "Resolving").
            status_width: Width of the status column.
        """
        self.total = total
        self.description = description
        self.completed = 0

        self.console = Console(stderr=True, theme=PROGRESS_THEME)

        columns: list = [
            SizedTextColumn(
                "[white]{task.description}",
                overflow="ellipsis",
                width=15,
            ),
            SizedTextColumn(
                "{task.fields[status]}",
                width=status_width,
                style="white",
            ),
            BarColumn(bar_width=40, finished_style="green"),
        ]
        if total is None:
            columns.append(SpinnerColumn())
        else:
            columns.append("[progress.percentage]{task.percentage:>3.0f}%")

        self.progress = Progress(
            *columns,
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )

        self.task_id: Optional[TaskID] = None
        self._started = False

    def __enter__(self) -> "BaseProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        """Start the progress bar (can be called manually)."""
        if not self._started:
            self.progress.start()
            self.task_id = self.progress.add_task(
                description=self.description,
                total=self.total,
                status=self._get_status_text(),
            )
            self._started = True

    def stop(self) -> None:
        """Stop the progress bar."""
        if self._started:
            self.progress.stop()
            self._started = False

    def _update_progress(self) -> None:
        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                completed=self.completed,
                status=self._get_status_text(),
            )

    @abstractmethod
    def _get_status_text(self) -> str:
        pass

    @abstractmethod
    def update(self, *args, **kwargs) -> None:
        pass


class CollectingProgressBar(BaseProgressBar):
    """
    Progress bar for the Spotify scroll loop.

    The playlist length is not known up front, so the bar pulses and
    the status shows tracks collected and the current pass.

    Example:
        Collecting      ♫ 215  pass 9          ━━━━━━━━━━━━━━━━━  ⠋
    """

    def __init__(self, description: str = "Collecting"):
        super().__init__(total=None, description=description)
        self.collected = 0
        self.passes = 0

    def _get_status_text(self) -> str:
        return f"[green]♫ {self.collected}[/green]  [white]pass {self.passes}[/white]"

    def update(self, collected: int, passes: int) -> None:
        """
        Record the state after a scroll pass.

        Args:
            collected: Total unique tracks collected so far.
            passes: Number of passes completed.
        """
        self.collected = collected
        self.passes = passes
        self.completed = collected
        self._update_progress()


class ResolvingProgressBar(BaseProgressBar):
    """
    Progress bar for cross-platform resolution.

    Example:
        Resolving       ✓ 45  ✗ 2              ━━━━━━━━━━━━━━━━━  47%
    """

    def __init__(self, total: int, description: str = "Resolving"):
        super().__init__(total=total, description=description)
        self.resolved = 0
        self.unmatched = 0

    def _get_status_text(self) -> str:
        parts = [
            f"[green]✓ {self.resolved}[/green]",
            f"[red]✗ {self.unmatched}[/red]",
        ]
        return "  ".join(parts)

    def update(self, resolved: bool) -> None:
        """
        Update the progress bar with a finished track.

        Args:
            resolved: Whether a link was found for the track.
        """
        self.completed += 1
        if resolved:
            self.resolved += 1
        else:
            self.unmatched += 1

        self._update_progress()


__all__ = [
    "PROGRESS_THEME",
    "SizedTextColumn",
    "BaseProgressBar",
    "CollectingProgressBar",
    "ResolvingProgressBar",
]
