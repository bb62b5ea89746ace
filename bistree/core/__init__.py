"""
Core modules: result model, test cases, progress tracking and scheduling.
"""

from .errors import (
    BistError, CheckError, HarnessFault, TrackerDesyncError,
    TrackerClosedError, CaseReusedError, ChecksFailed, ConfigurationError,
)
from .results import Result, ResultKind, Ok, Warn, Err, Branch, completion_line, format_error_chain
from .case import TestCase, FnTestCase, test_fn
from .tracker import ProgressTracker, InFlightView, RenderSurface, LiveSurface
from .models import RunnerSettings
from .configuration import SettingsLoader, load_settings
from .runner import Runner, RunSummary, run_tree

__all__ = [
    "BistError",
    "CheckError",
    "HarnessFault",
    "TrackerDesyncError",
    "TrackerClosedError",
    "CaseReusedError",
    "ChecksFailed",
    "ConfigurationError",
    "Result",
    "ResultKind",
    "Ok",
    "Warn",
    "Err",
    "Branch",
    "completion_line",
    "format_error_chain",
    "TestCase",
    "FnTestCase",
    "test_fn",
    "ProgressTracker",
    "InFlightView",
    "RenderSurface",
    "LiveSurface",
    "RunnerSettings",
    "SettingsLoader",
    "load_settings",
    "Runner",
    "RunSummary",
    "run_tree",
]
