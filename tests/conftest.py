import io
import logging
from typing import List

import pytest
from rich.console import Console

from bistree.core.tracker import InFlightView, ProgressTracker, RenderSurface


class RecordingSurface(RenderSurface):
    """Surface that remembers every call instead of drawing."""

    def __init__(self):
        self.renders: List[InFlightView] = []
        self.emitted: List[str] = []
        self.styles: List[str] = []
        self.finalized = None
        self.aborted = False

    def render(self, view):
        self.renders.append(view)

    def emit(self, lines):
        for line in lines:
            self.emitted.append(line.plain)
            self.styles.append(str(line.style))

    def finalize(self, view):
        self.finalized = view

    def abort(self):
        self.aborted = True


def plain_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=200)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Drop handlers installed by setup_logging during a test."""
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in before and type(h).__module__ in ("logging", "bistree.utils.logging_config"):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def console():
    return plain_console()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def live_tracker(surface, console):
    return ProgressTracker(console=console, surface=surface)
