"""Configuration property paths.

Purpose
-------
Model the location of one addressable value as an ordered tuple of segments.
Each segment kind decides how it renders inside an environment variable name
and which key it occupies in the configuration tree.

Contents
--------
* :class:`NamedSegment` – a schema-declared property name; case-transformed.
* :class:`LiteralSegment` – a discovered (unnamed) property name; verbatim.
* :class:`MetaMarker` – synthetic ``every``/``each``/``FILE`` markers.
* :data:`EVERY`, :data:`EACH`, :data:`FILE` – the marker singletons.
* :func:`find_only_index` / :func:`format_path` – small helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union


@dataclass(frozen=True, slots=True)
class NamedSegment:
    """Property name declared under ``properties``."""

    value: str


@dataclass(frozen=True, slots=True)
class LiteralSegment:
    """Property name discovered from environment variable names."""

    value: str


class MetaKind(str, Enum):
    EVERY = "every"
    EACH = "each"
    FILE = "FILE"


@dataclass(frozen=True, slots=True)
class MetaMarker:
    """Synthetic segment that steers matching but never becomes a config key.

    Markers render as their literal text, untouched by the naming case.
    """

    kind: MetaKind

    @property
    def value(self) -> str:
        return self.kind.value


PathSegment = Union[NamedSegment, LiteralSegment, MetaMarker]
ConfigPropertyPath = tuple[PathSegment, ...]

EVERY = MetaMarker(MetaKind.EVERY)
EACH = MetaMarker(MetaKind.EACH)
FILE = MetaMarker(MetaKind.FILE)


def find_only_index(path: Sequence[PathSegment], marker: MetaMarker) -> int | None:
    """Return the index of *marker* when it occurs exactly once in *path*.

    Examples
    --------
    >>> find_only_index((NamedSegment("array"), EVERY, NamedSegment("prop")), EVERY)
    1
    >>> find_only_index((NamedSegment("a"), EVERY, NamedSegment("b"), EVERY), EVERY) is None
    True
    >>> find_only_index((LiteralSegment("every"),), EVERY) is None
    True
    """

    found: int | None = None
    for index, segment in enumerate(path):
        if segment == marker:
            if found is not None:
                return None
            found = index
    return found


def format_path(path: Sequence[PathSegment]) -> str:
    """Render *path* with dots for log events, bracketing meta markers.

    Examples
    --------
    >>> format_path((NamedSegment("array"), EACH, LiteralSegment("x-y")))
    'array.[each].x-y'
    """

    return ".".join(f"[{segment.value}]" if isinstance(segment, MetaMarker) else segment.value for segment in path)
