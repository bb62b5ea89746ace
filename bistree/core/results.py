"""
Result model for finished test cases.

A case produces exactly one of ``Ok``, ``Warn``, ``Err`` or ``Branch``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from .case import TestCase

Message = Union[str, BaseException]


class ResultKind(Enum):
    """Display category of a result."""
    OK = "ok"
    WARN = "warn"
    ERROR = "error"
    BRANCH = "branch"
    EMPTY = "empty"


# Style names understood by rich.
LINE_STYLES = {
    ResultKind.OK: "green",
    ResultKind.WARN: "yellow",
    ResultKind.ERROR: "red",
    ResultKind.EMPTY: "yellow",
}


class Result:
    """Base for the four result variants."""

    kind: ResultKind

    @property
    def is_failure(self) -> bool:
        return self.kind is ResultKind.ERROR


@dataclass
class Ok(Result):
    """The case passed with no remarks."""

    @property
    def kind(self) -> ResultKind:
        return ResultKind.OK


@dataclass
class Warn(Result):
    """The case passed but attaches a warning."""
    message: Message

    @property
    def kind(self) -> ResultKind:
        return ResultKind.WARN


@dataclass
class Err(Result):
    """The case failed."""
    message: Message

    @property
    def kind(self) -> ResultKind:
        return ResultKind.ERROR


@dataclass
class Branch(Result):
    """The case passed and hands further checking to its children."""
    children: List["TestCase"] = field(default_factory=list)

    @property
    def kind(self) -> ResultKind:
        return ResultKind.BRANCH if self.children else ResultKind.EMPTY


def format_error_chain(message: Message) -> str:
    """Render an error with every cause it wraps, outermost first.

    ``CheckError("write failed") from OSError("disk full")`` becomes
    ``"write failed: disk full"``.
    """
    if not isinstance(message, BaseException):
        return str(message)

    parts: List[str] = []
    seen = set()
    exc: Optional[BaseException] = message
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        parts.append(str(exc) or type(exc).__name__)
        if exc.__cause__ is not None:
            exc = exc.__cause__
        elif not exc.__suppress_context__:
            exc = exc.__context__
        else:
            exc = None
    return ": ".join(parts)


def completion_line(name: str, result: Result) -> Optional[Tuple[str, str]]:
    """Return ``(text, style)`` for the transcript, or None when silent.

    Non-empty branches stay silent; their children report for them.
    """
    kind = result.kind
    if kind is ResultKind.BRANCH:
        return None
    if kind is ResultKind.OK:
        text = f"{name} OK"
    elif kind is ResultKind.WARN:
        text = f"{name} WARN: {result.message}"
    elif kind is ResultKind.ERROR:
        text = f"{name} ERROR: {format_error_chain(result.message)}"
    else:
        text = f"{name} EMPTY"
    return text, LINE_STYLES[kind]
