"""Request-scoped metadata snapshots for attaching to errors.

A ``MetaContext`` is an immutable key/value snapshot passed explicitly down a
call graph. Deriving a child copies the parent first, so tasks that derive from
a shared parent each get an independent snapshot:

    >>> ctx = attach(None, "request_id", "r-1")
    >>> per_post = [attach(ctx, "post_id", pid) for pid in (1, 2)]
    >>> [dict(c) for c in per_post]
    [{'request_id': 'r-1', 'post_id': 1}, {'request_id': 'r-1', 'post_id': 2}]

Errors pick the snapshot up with ``Error.with_context_meta(ctx)``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True, eq=False)
class MetaContext(Mapping[str, Any]):
    """Read-only metadata snapshot. Compares equal to any mapping with the same items."""

    _values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MetaContext({dict(self._values)!r})"

    def attach(self, *keyvals: Any) -> MetaContext:
        """Derive a child snapshot; see ``attach``."""
        return attach(self, *keyvals)


# Shared root for "no metadata"
EMPTY = MetaContext()


def attach(parent: Mapping[str, Any] | None, *keyvals: Any) -> MetaContext:
    """Derive a child snapshot from ``parent`` plus alternating key/value pairs.

    The parent is copied, never mutated. Later pairs win over earlier ones and
    over the parent. Pairs whose key is not a ``str`` are skipped, and a
    trailing key without a value is dropped.
    """
    merged: dict[str, Any] = dict(parent) if parent else {}
    for key, value in zip(keyvals[::2], keyvals[1::2]):
        if isinstance(key, str):
            merged[key] = value
    return MetaContext(MappingProxyType(merged))


def read(ctx: Mapping[str, Any] | None) -> Mapping[str, Any]:
    """Snapshot of ``ctx``, or an empty mapping when nothing was attached."""
    if ctx is None:
        return EMPTY._values
    return ctx._values if isinstance(ctx, MetaContext) else MappingProxyType(dict(ctx))
