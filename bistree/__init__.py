"""
bistree: a built-in self-test runner for asyncio programs whose tests form a
dynamic tree.

    from bistree import Branch, Ok, Runner, test_fn

    async def entry():
        return Branch([test_fn("ping", lambda: Ok())])

    asyncio.run(Runner().run(test_fn("entry", entry)))
"""

__version__ = "0.1.0"

from .core import (
    BistError,
    CheckError,
    HarnessFault,
    ChecksFailed,
    ConfigurationError,
    Result,
    ResultKind,
    Ok,
    Warn,
    Err,
    Branch,
    TestCase,
    test_fn,
    ProgressTracker,
    RunnerSettings,
    load_settings,
    Runner,
    RunSummary,
    run_tree,
)

__all__ = [
    "BistError",
    "CheckError",
    "HarnessFault",
    "ChecksFailed",
    "ConfigurationError",
    "Result",
    "ResultKind",
    "Ok",
    "Warn",
    "Err",
    "Branch",
    "TestCase",
    "test_fn",
    "ProgressTracker",
    "RunnerSettings",
    "load_settings",
    "Runner",
    "RunSummary",
    "run_tree",
]
