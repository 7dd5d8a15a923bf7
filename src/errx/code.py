"""Standardized error codes.

Codes classify failures independently of any transport. HTTP, gRPC and other
layers map them onto their own status codes via ``code_of``/``code_is``.
Numeric values are part of the log and wire contract: new codes are only ever
appended, existing ones are never renumbered.
"""

from __future__ import annotations

import asyncio
from enum import IntEnum
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from .error import Error


class Code(IntEnum):
    """Standard error codes, aligned with the Connect/gRPC code set.

    ``str(code)`` is the canonical lowercase name used in logs and payloads.
    Each member also carries convenience constructors so callers can write
    ``Code.NOT_FOUND.create("user not found")``.
    """

    UNKNOWN = 0              # default / zero value
    CANCELED = 1             # operation canceled by caller
    INVALID_ARGUMENT = 2     # request is invalid regardless of system state
    DEADLINE_EXCEEDED = 3    # deadline expired before the operation completed
    NOT_FOUND = 4            # requested resource cannot be found
    ALREADY_EXISTS = 5       # resource already exists
    PERMISSION_DENIED = 6    # caller isn't authorized
    RESOURCE_EXHAUSTED = 7   # quota, storage, ...
    FAILED_PRECONDITION = 8  # system isn't in the required state
    ABORTED = 9              # concurrency conflict
    OUT_OF_RANGE = 10        # operation attempted past the valid range
    UNIMPLEMENTED = 11       # operation not implemented/supported
    INTERNAL = 12            # invariant broken
    UNAVAILABLE = 13         # service temporarily unavailable
    DATA_LOSS = 14           # unrecoverable data loss or corruption
    UNAUTHENTICATED = 15     # valid credentials required

    def __str__(self) -> str:
        return self.name.lower()

    def __format__(self, spec: str) -> str:
        """Plain ``{code}`` gives the name; any format spec applies to the integer value."""
        return str(self) if not spec else int.__format__(self, spec)

    @classmethod
    def parse(cls, name: str) -> Self:
        """Look up a code by its canonical name (case-insensitive)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"{name!r} is not a valid Code, try [{', '.join(cls.names())}]") from None

    @classmethod
    def names(cls) -> list[str]:
        """Canonical names in declaration order."""
        return [str(c) for c in cls]

    @classmethod
    def values(cls) -> list[Self]:
        """All codes in declaration order."""
        return list(cls)

    # ─── Convenience Constructors ──────────────────────────────────────

    def create(self, message: str) -> Error:
        from .builder import _new_error
        return _new_error(self, message, None)

    def create_formatted(self, fmt: str, *args: Any) -> Error:
        from .builder import _new_error
        from .error import interpolate
        return _new_error(self, interpolate(fmt, args), None)

    def wrap(self, err: BaseException | None, message: str) -> Error | None:
        from .builder import _new_error
        return None if err is None else _new_error(self, message, err)

    def wrap_formatted(self, err: BaseException | None, fmt: str, *args: Any) -> Error | None:
        from .builder import _new_error
        from .error import interpolate
        return None if err is None else _new_error(self, interpolate(fmt, args), err)

    def ensure(self, err: BaseException | None, message: str) -> Error | None:
        from .builder import _ensure_with
        return _ensure_with(err, self, lambda: message)

    def ensure_formatted(self, err: BaseException | None, fmt: str, *args: Any) -> Error | None:
        from .builder import _ensure_with
        from .error import interpolate
        return _ensure_with(err, self, lambda: interpolate(fmt, args))


def code_name(value: int) -> str:
    """Canonical name for any integer; values outside the set render as ``Code(n)``."""
    try:
        return str(Code(value))
    except ValueError:
        return f"Code({value})"


# Ordered: more specific exception types first
_TYPE_CODES: tuple[tuple[type[BaseException], Code], ...] = (
    (asyncio.CancelledError, Code.CANCELED),
    (TimeoutError, Code.DEADLINE_EXCEEDED),
    (PermissionError, Code.PERMISSION_DENIED),
    (FileNotFoundError, Code.NOT_FOUND),
    (FileExistsError, Code.ALREADY_EXISTS),
    (ConnectionError, Code.UNAVAILABLE),
    (NotImplementedError, Code.UNIMPLEMENTED),
    (IndexError, Code.OUT_OF_RANGE),
    (LookupError, Code.NOT_FOUND),
    (MemoryError, Code.RESOURCE_EXHAUSTED),
    (ValueError, Code.INVALID_ARGUMENT),
    (TypeError, Code.INVALID_ARGUMENT),
)


@lru_cache(maxsize=256)
def _classify_type(exc_type: type[BaseException]) -> Code:
    """Cached classification by exception type."""
    for base, code in _TYPE_CODES:
        if issubclass(exc_type, base):
            return code
    return Code.INTERNAL


def classify_exception(exc: BaseException | None) -> Code:
    """Map a builtin exception type to the closest code; anything unrecognised is INTERNAL."""
    return Code.UNKNOWN if exc is None else _classify_type(type(exc))
