"""
Exception hierarchy for the self-test runner.

Two families matter to callers:

- ``CheckError`` / ``ChecksFailed``: ordinary test failures. A case raises
  ``CheckError`` (or returns ``Err``), the run records it and keeps draining
  the tree, and ``ChecksFailed`` is raised once at the end.
- ``HarnessFault``: the harness itself is broken (tracker out of sync with
  the scheduler, a case started twice, a task crashed). These are never
  contained; they abort the whole run.
"""

from __future__ import annotations

from typing import Any, Optional


class BistError(Exception):
    """Base class for all bistree errors."""


class CheckError(BistError):
    """Raised from a test body to report a failed check."""


class HarnessFault(BistError):
    """Fatal defect in the harness or in how it is used."""


class TrackerDesyncError(HarnessFault):
    """The in-flight set disagrees with the scheduler's pending tasks."""

    def __init__(self, task_id: int, reason: str):
        super().__init__(f"task {task_id}: {reason}")
        self.task_id = task_id


class TrackerClosedError(HarnessFault):
    """The tracker was used after finalize()."""


class CaseReusedError(HarnessFault):
    """A test case was started more than once."""


class ChecksFailed(BistError):
    """Run-level failure: at least one case reported an error."""

    def __init__(self, message: str = "One or more checks failed", summary: Optional[Any] = None):
        super().__init__(message)
        self.summary = summary


class ConfigurationError(BistError, ValueError):
    """Invalid runner settings."""
