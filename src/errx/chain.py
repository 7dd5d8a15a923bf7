"""Walking error chains.

An error chain is followed through explicit cause links only: ``Error.cause``,
``__cause__`` (``raise ... from ...``) and the members of exception groups.
Implicit ``__context__`` (an exception raised while handling another) is not a
cause and is not followed.

Targets are either exception classes (a class or tuple, matched with
``isinstance``) or predicates taking an exception and returning ``bool``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, NamedTuple, TypeAlias

from .code import Code
from .error import Error
from .stack import FrameRef

Target: TypeAlias = "type[BaseException] | tuple[type[BaseException], ...] | Callable[[BaseException], bool]"


class Match(NamedTuple):
    """Result of a chain search: the first matching node and whether there was one."""

    value: Any
    found: bool


_MISS = Match(None, False)


def unwrap(err: BaseException | None) -> tuple[BaseException, ...]:
    """Direct causes of ``err``."""
    match err:
        case None:
            return ()
        case Error():
            return () if err.cause is None else (err.cause,)
        case BaseExceptionGroup():
            return tuple(err.exceptions)
        case _:
            return () if err.__cause__ is None else (err.__cause__,)


def walk(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and everything it wraps, depth-first, each node once."""
    if err is None:
        return
    pending, seen = [err], set()
    while pending:
        node = pending.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        pending.extend(reversed(unwrap(node)))


def _matcher(target: Target) -> Callable[[BaseException], bool]:
    if isinstance(target, (type, tuple)):
        return lambda node: isinstance(node, target)  # type: ignore[arg-type]
    return target  # type: ignore[return-value]


def find(err: BaseException | None, target: Target) -> Match:
    """First node in ``err``'s chain matching ``target``."""
    test = _matcher(target)
    for node in walk(err):
        if test(node):
            return Match(node, True)
    return _MISS


def contains(err: BaseException | None, target: Target) -> bool:
    return find(err, target).found


def as_error(err: BaseException | None) -> Match:
    """First ``Error`` in the chain (the outermost one)."""
    return find(err, Error)


def is_error(err: BaseException | None) -> bool:
    return as_error(err).found


def code_of(err: BaseException | None) -> Code:
    """Code of the first ``Error`` in the chain, ``Code.UNKNOWN`` if there is none."""
    value, found = as_error(err)
    return value.code if found else Code.UNKNOWN


def code_is(err: BaseException | None, code: Code) -> bool:
    value, found = as_error(err)
    return found and value.code == code


def code_in(err: BaseException | None, *codes: Code) -> bool:
    """Whether the first ``Error``'s code is any of ``codes``."""
    value, found = as_error(err)
    return found and value.code in codes


def is_retryable(err: BaseException | None) -> bool:
    """False when no ``Error`` is found in the chain."""
    value, found = as_error(err)
    return found and value.retryable


def matches(err: BaseException | None, target: BaseException | None) -> bool:
    """Whether any node of ``err``'s chain is ``target`` or an ``Error`` equivalent to it.

    ``None`` matches only ``None``.
    """
    if err is None or target is None:
        return err is target
    return any(node is target or (isinstance(node, Error) and node.equivalent(target)) for node in walk(err))


# ─── Total readers ─────────────────────────────────────────────────────
# Same lookup as code_of: the first Error in the chain, zero values when there is none.


def message_of(err: BaseException | None) -> str:
    value, found = as_error(err)
    return value.message if found else ""


def debug_message_of(err: BaseException | None) -> str:
    value, found = as_error(err)
    return value.debug_message if found else ""


def cause_of(err: BaseException | None) -> BaseException | None:
    value, found = as_error(err)
    return value.cause if found else None


def source_of(err: BaseException | None) -> str:
    value, found = as_error(err)
    return value.source if found else ""


def tags_of(err: BaseException | None) -> tuple[str, ...]:
    value, found = as_error(err)
    return value.tags if found else ()


def details_of(err: BaseException | None) -> dict[str, Any]:
    value, found = as_error(err)
    return value.details if found else {}


def metadata_of(err: BaseException | None) -> dict[str, Any]:
    value, found = as_error(err)
    return value.metadata if found else {}


def stack_trace_of(err: BaseException | None) -> tuple[FrameRef, ...]:
    value, found = as_error(err)
    return value.stack_trace if found else ()
