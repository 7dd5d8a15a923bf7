"""Error constructors.

``create`` and ``wrap`` always build a new ``Error``. ``ensure`` is for
boundaries: it passes an already-classified error through untouched and only
wraps errors it does not recognise, so a precise ``not_found`` raised deep in a
call stack is never downgraded to a generic ``internal`` on the way out.

    >>> def handler():
    ...     try:
    ...         return service()
    ...     except Exception as exc:
    ...         raise ensure(exc, Code.INTERNAL, "unexpected error") from None
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .chain import as_error
from .code import Code, classify_exception
from .error import Error, interpolate
from .observability import get_logger


def _new_error(code: Code, message: str, cause: BaseException | None, skip: int = 0) -> Error:
    # Frames dropped from the stack: this helper, the public constructor and ``skip`` more
    return Error(code, message, cause, skip=2 + skip)


def _ensure_with(err: BaseException | None, code: Code, message: Callable[[], str]) -> Error | None:
    if err is None:
        return None
    if (found := as_error(err)).found:
        return found.value
    get_logger("errx").debug("wrapping unclassified error", error_type=type(err).__name__, fallback=str(code))
    return _new_error(code, message(), err, skip=1)


def create(code: Code, message: str) -> Error:
    """New error with a client-safe message."""
    return _new_error(code, message, None)


def create_formatted(code: Code, fmt: str, *args: Any) -> Error:
    """New error with a ``%``-formatted message."""
    return _new_error(code, interpolate(fmt, args), None)


def wrap(err: BaseException | None, code: Code, message: str) -> Error | None:
    """New error caused by ``err``. Wrapping ``None`` gives ``None``."""
    return None if err is None else _new_error(code, message, err)


def wrap_formatted(err: BaseException | None, code: Code, fmt: str, *args: Any) -> Error | None:
    return None if err is None else _new_error(code, interpolate(fmt, args), err)


def ensure(err: BaseException | None, code: Code, message: str) -> Error | None:
    """Guarantee an ``Error``.

    Returns ``None`` for ``None``, the first ``Error`` in ``err``'s chain unchanged
    if there is one, and otherwise a new ``Error`` wrapping ``err`` with the
    fallback code and message.
    """
    return _ensure_with(err, code, lambda: message)


def ensure_formatted(err: BaseException | None, code: Code, fmt: str, *args: Any) -> Error | None:
    return _ensure_with(err, code, lambda: interpolate(fmt, args))


def ensure_classified(err: BaseException | None, message: str) -> Error | None:
    """``ensure`` with the fallback code picked by ``classify_exception``."""
    return _ensure_with(err, classify_exception(err), lambda: message)
