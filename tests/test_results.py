from bistree.core.case import test_fn
from bistree.core.errors import CheckError
from bistree.core.results import (
    Branch, Err, Ok, ResultKind, Warn, completion_line, format_error_chain,
)


def test_kinds():
    assert Ok().kind is ResultKind.OK
    assert Warn("w").kind is ResultKind.WARN
    assert Err("e").kind is ResultKind.ERROR
    assert Branch([test_fn("c", Ok)]).kind is ResultKind.BRANCH
    assert Branch([]).kind is ResultKind.EMPTY
    assert Branch().kind is ResultKind.EMPTY
    assert Err("e").is_failure and not Warn("w").is_failure


def test_completion_lines():
    assert completion_line("a > b", Ok()) == ("a > b OK", "green")
    assert completion_line("a", Warn("slow")) == ("a WARN: slow", "yellow")
    assert completion_line("a", Err("x")) == ("a ERROR: x", "red")
    assert completion_line("a", Branch([])) == ("a EMPTY", "yellow")
    assert completion_line("a", Branch([test_fn("c", Ok)])) is None


def test_error_chain_explicit_cause():
    try:
        try:
            raise OSError("disk full")
        except OSError as e:
            raise CheckError("write failed") from e
    except CheckError as exc:
        err = exc
    assert format_error_chain(err) == "write failed: disk full"
    assert completion_line("w", Err(err)) == ("w ERROR: write failed: disk full", "red")


def test_error_chain_implicit_context_and_empty_message():
    try:
        try:
            raise KeyError
        except KeyError:
            raise CheckError("lookup")
    except CheckError as exc:
        err = exc
    assert format_error_chain(err) == "lookup: KeyError"


def test_error_chain_suppressed_context():
    try:
        try:
            raise ValueError("hidden")
        except ValueError:
            raise CheckError("shown") from None
    except CheckError as exc:
        err = exc
    assert format_error_chain(err) == "shown"


def test_warning_shows_top_level_only():
    inner = ValueError("inner")
    outer = CheckError("outer")
    outer.__cause__ = inner
    assert completion_line("n", Warn(outer)) == ("n WARN: outer", "yellow")
