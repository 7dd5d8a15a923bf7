"""Tests for stack capture and lazy resolution."""

from __future__ import annotations

from errx import FrameRef, ResolvedFrame, capture, format_frames
from errx.stack import MAX_DEPTH


def _nested(depth: int) -> tuple[FrameRef, ...]:
    return capture() if depth == 0 else _nested(depth - 1)


def test_capture_starts_at_caller() -> None:
    frames = capture()
    assert frames[0].code.co_name == "test_capture_starts_at_caller"


def test_capture_skip() -> None:
    def helper() -> tuple[FrameRef, ...]:
        return capture(skip=1)

    assert helper()[0].code.co_name == "test_capture_skip"


def test_capture_is_bounded() -> None:
    frames = _nested(MAX_DEPTH + 10)
    assert len(frames) == MAX_DEPTH
    assert all(f.code.co_name == "_nested" for f in frames)


def test_capture_limit() -> None:
    assert len(_nested(10)) >= 11
    assert len(capture(limit=2)) == 2
    assert len(capture(limit=MAX_DEPTH * 2)) <= MAX_DEPTH
    assert capture(limit=0) == ()


def test_capture_skip_past_bottom() -> None:
    assert capture(skip=10_000) == ()


def test_capture_is_deterministic() -> None:
    def grab() -> tuple[FrameRef, ...]:
        return capture()

    first, second = grab(), grab()
    assert [f.code for f in first] == [f.code for f in second]


def test_resolve_and_format() -> None:
    frame = capture()[0]
    resolved = frame.resolve()

    assert isinstance(resolved, ResolvedFrame)
    assert resolved.function == "test_resolve_and_format"
    assert resolved.file.endswith("test_stack.py")
    assert resolved.line == frame.line > 0
    assert str(resolved) == f"test_resolve_and_format\n\t{resolved.file}:{resolved.line}"


def test_format_frames_qualified_names() -> None:
    class Repo:
        def load(self) -> tuple[FrameRef, ...]:
            return capture()

    text = format_frames(Repo().load())
    assert text.splitlines()[0] == "test_format_frames_qualified_names.<locals>.Repo.load"


def test_format_empty() -> None:
    assert format_frames(()) == ""
