"""errx - Structured errors with stable codes, safe client messages and rich debug context.

Three audiences, one value:
- Services read the ``Code`` (``code_of(err)``) to decide what to do.
- Clients see ``message`` and ``details`` (``err.to_payload()``).
- Maintainers get ``debug_summary()``, ``log_value()`` and the stack trace.

Quick Start:
    >>> import errx
    >>> from errx import Code
    >>>
    >>> err = errx.create(Code.NOT_FOUND, "user not found").with_detail("user_id", 42)
    >>> str(err.code)
    'not_found'
    >>>
    >>> # Wrap foreign errors
    >>> db_err = ConnectionError("connection refused")
    >>> err = errx.wrap(db_err, Code.UNAVAILABLE, "database unavailable").with_retryable()
    >>> errx.is_retryable(err)
    True

Boundaries:
    >>> # Keeps not_found as not_found; only unknown errors become internal
    >>> errx.ensure(exc, Code.INTERNAL, "unexpected error")

Request-scoped metadata:
    >>> ctx = errx.attach(None, "request_id", "r-1")
    >>> errx.create(Code.INTERNAL, "failed").with_context_meta(ctx).metadata
    {'request_id': 'r-1'}
"""

from __future__ import annotations

__version__ = "0.1.0"

from .builder import (
    create,
    create_formatted,
    ensure,
    ensure_classified,
    ensure_formatted,
    wrap,
    wrap_formatted,
)
from .chain import (
    Match,
    as_error,
    cause_of,
    code_in,
    code_is,
    code_of,
    contains,
    debug_message_of,
    details_of,
    find,
    is_error,
    is_retryable,
    matches,
    message_of,
    metadata_of,
    source_of,
    stack_trace_of,
    tags_of,
    unwrap,
    walk,
)
from .code import Code, classify_exception, code_name
from .context import EMPTY, MetaContext, attach, read
from .error import Error, equivalent
from .payload import ErrorPayload
from .stack import FrameRef, ResolvedFrame, capture, format_frames

__all__ = [
    # Codes
    "Code", "code_name", "classify_exception",
    # Error value
    "Error", "ErrorPayload", "equivalent",
    # Constructors
    "create", "create_formatted", "wrap", "wrap_formatted",
    "ensure", "ensure_formatted", "ensure_classified",
    # Chain traversal
    "Match", "unwrap", "walk", "find", "contains", "as_error", "is_error",
    "code_of", "code_is", "code_in", "is_retryable", "matches",
    # Total readers
    "message_of", "debug_message_of", "cause_of", "source_of", "tags_of",
    "details_of", "metadata_of", "stack_trace_of",
    # Metadata context
    "MetaContext", "EMPTY", "attach", "read",
    # Stack
    "FrameRef", "ResolvedFrame", "capture", "format_frames",
]
