"""The structured error value.

``Error`` carries three tiers of information:

- a ``Code`` for machines (other services, transport mappers),
- a client-safe ``message`` and ``details`` for end users,
- ``debug_message``, ``metadata``, ``source``, ``tags`` and a stack trace for
  maintainers.

Builder methods mutate in place and return the same instance so they chain:

    >>> err = (Error(Code.PERMISSION_DENIED, "access denied")
    ...        .with_detail("resource", "admin-panel")
    ...        .with_source("auth-service")
    ...        .with_meta("user_id", 42))
    >>> err.debug_summary()
    "[permission_denied] access denied | source=auth-service | details={'resource': 'admin-panel'} | metadata={'user_id': 42}"

Builders also accept ``None`` as receiver when called through the class
(``Error.with_meta(maybe_err, "k", v)``) and return ``None``, so decoration
can run unconditionally on the result of ``wrap``/``ensure``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

import orjson

from .code import Code, code_name
from .context import read
from .payload import ErrorPayload
from .stack import FrameRef, capture, format_frames


def interpolate(fmt: str, args: tuple[Any, ...]) -> str:
    """printf-style interpolation that never raises; mismatches append the args instead."""
    if not args:
        return fmt
    try:
        return fmt % args
    except (TypeError, ValueError, KeyError):
        return " ".join([fmt, *map(str, args)])


def _project(cause: BaseException) -> Any:
    """Nested projection for values that provide one, plain message otherwise."""
    log_value = getattr(cause, "log_value", None)
    return log_value() if callable(log_value) else str(cause)


class Error(Exception):
    """Rich error with code, messages, context and an optional wrapped cause.

    The stack is captured once, at construction. ``skip`` drops that many
    extra frames so helpers can make the trace start at their own caller.
    """

    __slots__ = ("_code", "_message", "_debug", "_cause", "_source", "_tags",
                 "_details", "_metadata", "_stack", "_retryable")

    def __init__(
        self,
        code: Code = Code.UNKNOWN,
        message: str = "",
        cause: BaseException | None = None,
        *,
        skip: int = 0,
    ) -> None:
        super().__init__(message)
        self._code = code
        self._message = message
        self._debug = ""
        self._cause = cause
        self._source = ""
        self._tags: list[str] = []
        self._details: dict[str, Any] = {}
        self._metadata: dict[str, Any] = {}
        self._stack = capture(skip + 1)
        self._retryable = False
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return f"Error({code_name(self._code)}, {self._message!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        # Code objects don't pickle, so the stack is left behind.
        state = {"debug": self._debug, "source": self._source, "tags": self._tags,
                 "details": self._details, "metadata": self._metadata, "retryable": self._retryable}
        return type(self), (self._code, self._message, self._cause), state

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._debug = state["debug"]
        self._source = state["source"]
        self._tags = list(state["tags"])
        self._details = dict(state["details"])
        self._metadata = dict(state["metadata"])
        self._retryable = state["retryable"]
        self._stack = ()

    # ─── Readers ───────────────────────────────────────────────────────

    @property
    def code(self) -> Code:
        return self._code

    @property
    def message(self) -> str:
        """Client-safe message."""
        return self._message

    @property
    def debug_message(self) -> str:
        """Internal message, never shown to clients."""
        return self._debug

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    @property
    def source(self) -> str:
        """Service, package or component where the error occurred."""
        return self._source

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._tags)

    @property
    def details(self) -> dict[str, Any]:
        """Client-safe key/value details."""
        return self._details

    @property
    def metadata(self) -> dict[str, Any]:
        """Internal key/value metadata."""
        return self._metadata

    @property
    def stack_trace(self) -> tuple[FrameRef, ...]:
        return self._stack

    @property
    def retryable(self) -> bool:
        return self._retryable

    # ─── Builders ──────────────────────────────────────────────────────

    def with_detail(self, key: str, value: Any) -> Self:
        """Add a client-safe detail."""
        if self is None:
            return None
        self._details[key] = value
        return self

    def with_meta(self, key: str, value: Any) -> Self:
        """Add internal metadata. Shown in debug output, never to clients."""
        if self is None:
            return None
        self._metadata[key] = value
        return self

    def with_context_meta(self, ctx: Mapping[str, Any] | None) -> Self:
        """Merge a ``MetaContext`` snapshot into metadata.

        Context values overwrite existing keys, so call order decides precedence:
        ``.with_meta("k", 1).with_context_meta(ctx)`` lets the context win,
        ``.with_context_meta(ctx).with_meta("k", 1)`` keeps 1.
        """
        if self is None:
            return None
        self._metadata.update(read(ctx))
        return self

    def with_debug(self, message: str) -> Self:
        if self is None:
            return None
        self._debug = message
        return self

    def with_debug_formatted(self, fmt: str, *args: Any) -> Self:
        if self is None:
            return None
        return self.with_debug(interpolate(fmt, args))

    def with_source(self, source: str) -> Self:
        if self is None:
            return None
        self._source = source
        return self

    def with_tags(self, *tags: str) -> Self:
        """Append tags; order and duplicates are kept."""
        if self is None:
            return None
        self._tags.extend(tags)
        return self

    def with_retryable(self) -> Self:
        """Mark the failed operation as safe to retry. There is no way to unset this."""
        if self is None:
            return None
        self._retryable = True
        return self

    # ─── Projections ───────────────────────────────────────────────────

    def debug_summary(self) -> str:
        """One-line summary with all context, for maintainers only.

        The cause is rendered by its plain message, one level deep.
        """
        parts = [f"[{code_name(self._code)}] {self._message}"]
        if self._source:
            parts.append(f"source={self._source}")
        if self._tags:
            parts.append(f"tags={self._tags}")
        if self._details:
            parts.append(f"details={self._details}")
        if self._metadata:
            parts.append(f"metadata={self._metadata}")
        if self._retryable:
            parts.append("retryable=true")
        if self._debug and self._debug != self._message:
            parts.append(f"debug={self._debug}")
        if self._cause is not None:
            parts.append(f"cause={self._cause}")
        return " | ".join(parts)

    def log_value(self) -> dict[str, Any]:
        """Structured projection for log sinks.

        Keys appear in a fixed order and default-valued fields are left out:
        code, message, source, tags, details, metadata, retryable, debug, cause.
        A cause that has its own ``log_value`` is nested recursively.
        """
        out: dict[str, Any] = {"code": code_name(self._code), "message": self._message}
        if self._source:
            out["source"] = self._source
        if self._tags:
            out["tags"] = list(self._tags)
        if self._details:
            out["details"] = dict(self._details)
        if self._metadata:
            out["metadata"] = dict(self._metadata)
        if self._retryable:
            out["retryable"] = True
        if self._debug and self._debug != self._message:
            out["debug"] = self._debug
        if self._cause is not None:
            out["cause"] = _project(self._cause)
        return out

    def to_json(self) -> bytes:
        """``log_value()`` as JSON; values orjson can't encode are stringified."""
        return orjson.dumps(self.log_value(), default=str, option=orjson.OPT_NON_STR_KEYS)

    def to_payload(self) -> ErrorPayload:
        """Client-facing view: code, message, details and the retry hint only."""
        return ErrorPayload(
            code=code_name(self._code),
            message=self._message,
            details=dict(self._details),
            retryable=self._retryable,
        )

    def format_stack_trace(self) -> str:
        """Human-readable stack trace; frames are resolved here, not at capture."""
        return format_frames(self._stack)

    # ─── Comparison ────────────────────────────────────────────────────

    def equivalent(self, other: object) -> bool:
        """Errors are equivalent when their codes match; messages and causes are ignored."""
        return isinstance(other, Error) and other._code == self._code


def equivalent(a: Error | None, b: Error | None) -> bool:
    """``Error.equivalent`` that also accepts ``None`` (equivalent only to ``None``)."""
    if a is None or b is None:
        return a is b
    return a.equivalent(b)
