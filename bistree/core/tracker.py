"""
Progress tracker: the set of in-flight tasks and the transcript of results.

The tracker keeps one path name per in-flight TaskId. Every insert and remove
re-renders a bounded live view (the earliest-spawned tasks first) on an
interactive terminal; finished tasks are written above it as permanent,
colored transcript lines. Without a terminal the lines are simply printed.

All methods are called from the scheduler loop only, so no locking is done.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Dict, List, Optional

from rich.console import Console, Group
from rich.live import Live
from rich.text import Text

from .errors import TrackerClosedError, TrackerDesyncError
from .results import Result, completion_line

logger = logging.getLogger(__name__)

DEFAULT_VIEW_LIMIT = 10


@dataclass
class InFlightView:
    """Snapshot of the live view: the first names by TaskId plus an overflow count."""
    names: List[str] = field(default_factory=list)
    hidden: int = 0

    @property
    def total(self) -> int:
        return len(self.names) + self.hidden

    def __rich__(self) -> Any:
        lines: List[Any] = [Text(name) for name in self.names]
        if self.hidden:
            lines.append(Text(f"… and {self.hidden} more", style="dim italic"))
        return Group(*lines)


class RenderSurface(ABC):
    """Where the live view and transcript lines go on an interactive terminal."""

    @abstractmethod
    def render(self, view: InFlightView) -> None:
        raise NotImplementedError

    @abstractmethod
    def emit(self, lines: List[Text]) -> None:
        """Append permanent lines above the live region."""
        raise NotImplementedError

    @abstractmethod
    def finalize(self, view: InFlightView) -> None:
        """Flush and release the surface, keeping emitted lines visible."""
        raise NotImplementedError

    def abort(self) -> None:
        """Release the surface without a final render."""


class LiveSurface(RenderSurface):
    """Rich ``Live`` display refreshed on demand, cleared on exit."""

    def __init__(self, console: Console):
        self.console = console
        self.live = Live(
            InFlightView(),
            console=console,
            auto_refresh=False,
            transient=True,
            redirect_stdout=True,
            redirect_stderr=False,
        )
        self._started = False

    def _ensure_started(self) -> None:
        if not self._started:
            self.live.start()
            self._started = True

    def render(self, view: InFlightView) -> None:
        self._ensure_started()
        self.live.update(view, refresh=True)

    def emit(self, lines: List[Text]) -> None:
        self._ensure_started()
        for line in lines:
            self.live.console.print(line)

    def finalize(self, view: InFlightView) -> None:
        if self._started:
            self.live.update(view, refresh=True)
            self.live.stop()
            self._started = False

    def abort(self) -> None:
        if self._started:
            self.live.stop()
            self._started = False


def is_interactive(console: Console) -> bool:
    return console.is_terminal and not console.is_dumb_terminal


class ProgressTracker:
    """In-flight bookkeeping plus transcript emission.

    Args:
        console: Console used for plain output when no surface is attached.
        surface: Live rendering surface, or None for non-interactive output.
        view_limit: Maximum number of in-flight names shown at once.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        surface: Optional[RenderSurface] = None,
        view_limit: int = DEFAULT_VIEW_LIMIT,
    ):
        if view_limit < 1:
            raise ValueError("view_limit must be at least 1")
        self.console = console if console is not None else Console()
        self.surface = surface
        self.view_limit = view_limit
        self.transcript: List[str] = []
        self._names: Dict[int, str] = {}
        self._last_id: Optional[int] = None
        self._closed = False

    @classmethod
    def for_console(
        cls,
        console: Optional[Console] = None,
        *,
        live: str = "auto",
        view_limit: int = DEFAULT_VIEW_LIMIT,
    ) -> "ProgressTracker":
        """Build a tracker, attaching a live surface when the console allows it.

        ``live`` is one of ``auto`` (terminal only), ``always`` or ``never``.
        """
        console = console if console is not None else Console()
        if live == "always" or (live == "auto" and is_interactive(console)):
            surface: Optional[RenderSurface] = LiveSurface(console)
        else:
            surface = None
        logger.debug("progress tracker: live=%s surface=%s", live, type(surface).__name__)
        return cls(console=console, surface=surface, view_limit=view_limit)

    @property
    def in_flight(self) -> Dict[int, str]:
        """Copy of the in-flight mapping, ordered by TaskId."""
        return dict(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, task_id: int) -> bool:
        return task_id in self._names

    def _check_open(self) -> None:
        if self._closed:
            raise TrackerClosedError("progress tracker already finalized")

    def view(self) -> InFlightView:
        # Ids are inserted in increasing order, so the dict is already sorted
        names = [name for _, name in islice(self._names.items(), self.view_limit)]
        return InFlightView(names=names, hidden=len(self._names) - len(names))

    def _render(self) -> None:
        if self.surface is not None:
            self.surface.render(self.view())

    def insert(self, task_id: int, name: str) -> None:
        """Register a newly spawned task."""
        self._check_open()
        if self._last_id is not None and task_id <= self._last_id:
            raise TrackerDesyncError(task_id, f"ids must increase (last was {self._last_id})")
        self._last_id = task_id
        self._names[task_id] = name
        self._render()

    def remove(self, task_id: int, result: Result) -> str:
        """Mark a task as completed and return its path name."""
        self._check_open()
        try:
            name = self._names.pop(task_id)
        except KeyError:
            raise TrackerDesyncError(task_id, "not in flight") from None

        line = completion_line(name, result)
        if line is not None:
            text, style = line
            self.transcript.append(text)
            rendered = Text(text, style=style)
            if self.surface is not None:
                self.surface.emit([rendered])
            else:
                self.console.print(rendered, soft_wrap=True)

        self._render()
        return name

    def finalize(self) -> None:
        """Close the tracker, leaving the transcript on screen."""
        self._check_open()
        self._closed = True
        if self.surface is not None:
            self.surface.finalize(self.view())

    def abort(self) -> None:
        """Tear down the live view after a harness fault."""
        if self._closed:
            return
        self._closed = True
        if self.surface is not None:
            self.surface.abort()
