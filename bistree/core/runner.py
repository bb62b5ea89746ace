"""
Runner: concurrent scheduler for a dynamically discovered test tree.

Behavior:
- Spawn the entrypoint case as an asyncio task, tagged with a fresh TaskId
- Wait for whichever pending task finishes first and hand its Result to the
  progress tracker
- Branch results spawn their children under the parent's path name, growing
  the pending set while it is being drained
- When nothing is pending, finalize the tracker and report pass/fail

Test failures (``Err``, or an exception raised by a test body) are recorded
and the run continues. Harness faults (a cancelled task, a case started twice,
tracker desync) cancel everything still pending and propagate out of ``run()``.
With ``errors_as_failures`` off, only ``CheckError`` counts as a failure and
any other exception from a test body is a harness fault.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Dict, Optional

from rich.console import Console

from .case import TestCase
from .errors import ChecksFailed, CheckError, HarnessFault
from .models import RunnerSettings
from .results import Branch, Err, Result, ResultKind
from .tracker import ProgressTracker

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome counts for one run."""
    spawned: int = 0
    ok: int = 0
    warned: int = 0
    failed: int = 0
    branched: int = 0
    empty: int = 0

    @property
    def passed(self) -> bool:
        return self.failed == 0

    @property
    def leaves(self) -> int:
        return self.ok + self.warned + self.failed + self.empty

    def record(self, result: Result) -> None:
        kind = result.kind
        if kind is ResultKind.OK:
            self.ok += 1
        elif kind is ResultKind.WARN:
            self.warned += 1
        elif kind is ResultKind.ERROR:
            self.failed += 1
        elif kind is ResultKind.BRANCH:
            self.branched += 1
        else:
            self.empty += 1


class Runner:
    """The runner keeps track of all tests in one run.

    Args:
        settings: Runner settings; defaults apply when omitted.
        tracker: Progress tracker; built from ``settings`` when omitted.
        console: Console for the transcript when ``tracker`` is omitted.
    """

    def __init__(
        self,
        settings: Optional[RunnerSettings] = None,
        tracker: Optional[ProgressTracker] = None,
        console: Optional[Console] = None,
    ):
        self.settings = settings if settings is not None else RunnerSettings()
        if tracker is None:
            tracker = ProgressTracker.for_console(
                console, live=self.settings.live, view_limit=self.settings.view_limit
            )
        self.tracker = tracker
        self.summary = RunSummary()
        self._pending: Dict[asyncio.Task, int] = {}
        self._completions: Optional[asyncio.Queue] = None
        self._n_spawned = 0
        self._errored = False
        self._used = False

    @property
    def errored(self) -> bool:
        return self._errored

    def _next_id(self) -> int:
        task_id = self._n_spawned
        self._n_spawned += 1
        return task_id

    def spawn(self, parent: str, case: TestCase) -> int:
        """Name, register and schedule ``case``; return its TaskId."""
        if self._completions is None:
            raise HarnessFault("spawn() is only valid while run() is active")
        if not isinstance(case, TestCase):
            raise HarnessFault(f"expected a TestCase, got {type(case).__name__}")
        name = case.name() if not parent else f"{parent}{self.settings.separator}{case.name()}"
        case.claim()

        task_id = self._next_id()
        self.tracker.insert(task_id, name)
        task = asyncio.ensure_future(self._execute(case))
        self._pending[task] = task_id
        task.add_done_callback(self._completions.put_nowait)
        self.summary.spawned += 1
        logger.debug("spawned task %d: %s", task_id, name)
        return task_id

    async def _execute(self, case: TestCase) -> Result:
        try:
            return await case.run()
        except CheckError as e:
            return Err(e)
        except Exception as e:
            if self.settings.errors_as_failures:
                return Err(e)
            raise

    def _collect(self, task: asyncio.Task, task_id: int) -> Result:
        if task.cancelled():
            raise HarnessFault(f"task {task_id} was cancelled")
        exc = task.exception()
        if exc is not None:
            raise HarnessFault(f"task {task_id} crashed: {exc!r}") from exc
        result = task.result()
        if not isinstance(result, Result):
            raise HarnessFault(f"task {task_id} returned {type(result).__name__}, expected a Result")
        return result

    async def _teardown(self) -> None:
        """Cancel every pending task and release the live view."""
        tasks = list(self._pending)
        self._pending.clear()
        for task in tasks:
            task.cancel()
        try:
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            self.tracker.abort()
            logger.error("run aborted with %d task(s) still pending", len(tasks))

    async def run(self, entrypoint: TestCase) -> RunSummary:
        """Run the suite, beginning with ``entrypoint``.

        Raises:
            ChecksFailed: One or more cases reported an error.
            HarnessFault: A task crashed or the bookkeeping broke.
        """
        if self._used:
            raise HarnessFault("runner already used; create a new Runner per run")
        self._used = True

        # Done callbacks fire in completion order, so the queue yields arrival order
        self._completions = asyncio.Queue()
        try:
            self.spawn("", entrypoint)
            logger.info("run started: %s", self.tracker.in_flight.get(0))
            while self._pending:
                task = await self._completions.get()
                task_id = self._pending.pop(task)
                result = self._collect(task, task_id)
                self._complete(task_id, result)
        except HarnessFault:
            await self._teardown()
            raise
        except Exception as e:
            # name() or similar user code failed inside the scheduler loop
            await self._teardown()
            raise HarnessFault(f"run aborted: {e!r}") from e
        except BaseException:
            await self._teardown()
            raise

        self.tracker.finalize()
        logger.info(
            "run finished: %d spawned, %d ok, %d warn, %d error, %d empty",
            self.summary.spawned, self.summary.ok, self.summary.warned,
            self.summary.failed, self.summary.empty,
        )

        if self._errored:
            raise ChecksFailed("One or more checks failed", summary=self.summary)
        print("All checks passed!", file=sys.stderr)
        return self.summary

    def _complete(self, task_id: int, result: Result) -> None:
        name = self.tracker.remove(task_id, result)
        self.summary.record(result)
        logger.debug("completed task %d: %s (%s)", task_id, name, result.kind.value)

        if isinstance(result, Err):
            self._errored = True
        elif isinstance(result, Branch):
            for case in result.children:
                self.spawn(name, case)


def run_tree(
    entrypoint: TestCase,
    settings: Optional[RunnerSettings] = None,
    console: Optional[Console] = None,
) -> bool:
    """Run ``entrypoint`` on a fresh event loop; return True when all checks pass."""
    runner = Runner(settings=settings, console=console)
    try:
        asyncio.run(runner.run(entrypoint))
    except ChecksFailed:
        return False
    return True
