"""
Test case interface.

A case is a node in the test tree: it has a display name and runs once to
produce a single Result. Only the Runner starts cases.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Union

from .errors import CaseReusedError
from .results import Result


class TestCase(ABC):
    """A node in the test tree. The easiest way to create one is ``test_fn``."""

    __test__ = False  # not a pytest collection target

    _bist_started = False

    @abstractmethod
    def name(self) -> str:
        """Declared display name of this case (not the full path)."""
        raise NotImplementedError

    @abstractmethod
    async def run(self) -> Result:
        """Run the case. Do not call directly; use ``Runner.run``."""
        raise NotImplementedError

    def claim(self) -> None:
        """Mark the case as started; a second claim is a harness fault."""
        if self._bist_started:
            raise CaseReusedError(f"test case {self.name()!r} was already started")
        self._bist_started = True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name()!r}>"


CaseBody = Callable[[], Union[Result, Awaitable[Result]]]


class FnTestCase(TestCase):
    """Test case backed by a plain or async zero-argument callable."""

    def __init__(self, name: str, fn: CaseBody):
        self._name = name
        self._fn = fn

    def name(self) -> str:
        return self._name

    async def run(self) -> Result:
        out = self._fn()
        if inspect.isawaitable(out):
            out = await out
        return out


def test_fn(name: str, fn: CaseBody) -> TestCase:
    """Create a test case from a function."""
    return FnTestCase(str(name), fn)


test_fn.__test__ = False
