"""Call-stack capture for errors.

Capturing is cheap: only code objects and line numbers are recorded. Turning
them into function/file/line text happens in ``format_frames``, which runs
only when someone asks for a readable trace.
"""

from __future__ import annotations

import sys
from types import CodeType
from typing import NamedTuple

from pydantic import ValidationError

from .config import get_settings

MAX_DEPTH = 32


class ResolvedFrame(NamedTuple):
    """Human-readable frame."""

    function: str
    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.function}\n\t{self.file}:{self.line}"


class FrameRef(NamedTuple):
    """Unresolved frame identifier: code object plus the line being executed."""

    code: CodeType
    line: int

    def resolve(self) -> ResolvedFrame:
        return ResolvedFrame(self.code.co_qualname, self.code.co_filename, self.line)


def _configured_depth() -> int:
    """Depth from settings; an invalid environment falls back to MAX_DEPTH so errors still build."""
    try:
        return get_settings().stack.max_depth
    except ValidationError:
        return MAX_DEPTH


def capture(skip: int = 0, limit: int | None = None) -> tuple[FrameRef, ...]:
    """Snapshot the stack starting at the caller of ``capture``, minus ``skip`` frames.

    At most ``limit`` frames are kept (default: ``ERRX_STACK_MAX_DEPTH``, never more than 32).
    """
    depth = min(limit if limit is not None else _configured_depth(), MAX_DEPTH)
    try:
        frame = sys._getframe(skip + 1)
    except ValueError:  # skip ran past the bottom of the stack
        return ()
    frames: list[FrameRef] = []
    while frame is not None and len(frames) < depth:
        frames.append(FrameRef(frame.f_code, frame.f_lineno or 0))
        frame = frame.f_back
    return tuple(frames)


def format_frames(frames: tuple[FrameRef, ...]) -> str:
    """Resolve and render frames, innermost first."""
    return "\n".join(str(f.resolve()) for f in frames)
