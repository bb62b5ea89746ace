#!/usr/bin/env python3
"""
bist: command line front end for the self-test runner

Commands:
  bist run MODULE:ATTR   # run a test tree from an importable entrypoint
  bist config            # print effective settings
"""
from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from bistree.core.case import TestCase
from bistree.core.configuration import load_settings
from bistree.core.errors import ChecksFailed, ConfigurationError, HarnessFault
from bistree.core.models import RunnerSettings
from bistree.core.runner import Runner
from bistree.utils.logging_config import LOGGER_NAME, setup_logging

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_HARNESS = 2


def resolve_entrypoint(target: str, search_path: Optional[str] = None) -> TestCase:
    """Import ``module:attr`` and return the entrypoint case.

    ``attr`` may be a TestCase or a zero-argument callable returning one.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"target must look like 'module:attr', got {target!r}")
    if search_path is not None:
        path = str(Path(search_path).resolve())
        if path not in sys.path:
            sys.path.insert(0, path)

    obj = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not isinstance(obj, TestCase) and callable(obj):
        obj = obj()
    if not isinstance(obj, TestCase):
        raise TypeError(f"{target} did not produce a TestCase (got {type(obj).__name__})")
    return obj


def _settings_from_args(args: argparse.Namespace) -> RunnerSettings:
    return load_settings(
        getattr(args, "config", None),
        view_limit=getattr(args, "limit", None),
        live="never" if getattr(args, "no_live", False) else None,
        errors_as_failures=False if getattr(args, "exceptions_fatal", False) else None,
        log_level=getattr(args, "log_level", None),
        log_file=getattr(args, "log_file", None),
    )


def cmd_run(args: argparse.Namespace) -> int:
    log = logging.getLogger(LOGGER_NAME)
    try:
        settings = _settings_from_args(args)
    except ConfigurationError as e:
        print(f"bist: {e}", file=sys.stderr)
        return EXIT_HARNESS

    setup_logging(
        level=settings.log_level,
        log_file=Path(settings.log_file) if settings.log_file else None,
        console_level=settings.log_level,
    )
    try:
        entrypoint = resolve_entrypoint(args.target, getattr(args, "path", None))
    except Exception:
        # Syntax errors and failing factories included
        log.exception("cannot load entrypoint %s", args.target)
        return EXIT_HARNESS

    runner = Runner(settings=settings)
    try:
        asyncio.run(runner.run(entrypoint))
    except ChecksFailed as e:
        print(f"bist: {e}", file=sys.stderr)
        return EXIT_FAILED
    except HarnessFault:
        log.exception("harness fault, run aborted")
        return EXIT_HARNESS
    return EXIT_OK


def cmd_config(args: argparse.Namespace) -> int:
    try:
        settings = _settings_from_args(args)
    except ConfigurationError as e:
        print(f"bist: {e}", file=sys.stderr)
        return EXIT_HARNESS
    print(yaml.safe_dump({"bistree": settings.model_dump()}, sort_keys=False), end="")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bist", description="Built-in self-test runner for dynamic test trees")
    sub = parser.add_subparsers(dest="cmd")

    p_run = sub.add_parser("run", help="Run a test tree from MODULE:ATTR")
    p_run.add_argument("target", help="Entrypoint as module:attr (TestCase or factory)")
    p_run.add_argument("--config", help="Settings YAML file")
    p_run.add_argument("--path", default=".", help="Directory prepended to sys.path for imports (default: .)")
    p_run.add_argument("--limit", type=int, help="Max in-flight tasks shown in the live view (default: 10)")
    p_run.add_argument("--no-live", action="store_true", help="Disable the live view; print results only")
    p_run.add_argument("--exceptions-fatal", action="store_true",
                       help="Abort the run when a test body raises anything but CheckError")
    p_run.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p_run.add_argument("--log-file", help="Also write logs to this file")
    p_run.set_defaults(func=cmd_run)

    p_cfg = sub.add_parser("config", help="Print effective settings as YAML")
    p_cfg.add_argument("--config", help="Settings YAML file")
    p_cfg.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return int(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
