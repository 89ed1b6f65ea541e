"""Helpers for splitting property paths into structural parts.

All helpers accept raw and normalized paths alike.  A path is a sequence of
dot-separated segments; a segment may carry one or more bracketed indices
(``Results[3]``, ``Items[*]``).  Dots inside brackets never split.
"""

from __future__ import annotations

import re

__all__ = [
    "collection_name",
    "element_property",
    "ends_with_index",
    "first_index",
    "has_index",
    "last_segment",
    "parent_and_leaf",
    "split_segments",
]

# Numeric or wildcard index anywhere in a path, e.g. "[3]" or "[*]"
_ANY_INDEX = re.compile(r"\[(?:\d+|\*)\]")

# Index closing the path, e.g. "Items[2]"
_TRAILING_INDEX = re.compile(r"\[(?:\d+|\*)\]$")

# First numeric index, capturing the digits
_NUMERIC_INDEX = re.compile(r"\[(\d+)\]")


def split_segments(path: str) -> list[str]:
    """Split *path* on dots that are not inside brackets.

    Empty segments (leading, trailing or doubled dots) are dropped.
    """
    segments: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in path:
        if ch == "[":
            depth += 1
        elif ch == "]" and depth > 0:
            depth -= 1
        if ch == "." and depth == 0:
            if current:
                segments.append("".join(current))
            current = []
            continue
        current.append(ch)
    if current:
        segments.append("".join(current))
    return segments


def parent_and_leaf(path: str) -> tuple[str, str]:
    """Return ``(parent_path, last_segment)``; the parent of a root segment is ``""``."""
    segments = split_segments(path)
    if not segments:
        return "", ""
    return ".".join(segments[:-1]), segments[-1]


def last_segment(path: str) -> str:
    segments = split_segments(path)
    return segments[-1] if segments else ""


def has_index(path: str) -> bool:
    """True if *path* contains a numeric or wildcard index."""
    return _ANY_INDEX.search(path) is not None


def ends_with_index(path: str) -> bool:
    return _TRAILING_INDEX.search(path) is not None


def collection_name(path: str) -> str:
    """Text before the first index, e.g. ``"Body.Results"`` for ``"Body.Results[0].Score"``.

    Returns ``""`` for paths without an index.
    """
    match = _ANY_INDEX.search(path)
    if match is None:
        return ""
    return path[: match.start()]


def element_property(path: str) -> str:
    """Text after the first index, without the joining dot.

    ``"Results[0].Score"`` gives ``"Score"``; ``"Items[1]"`` gives ``""``.
    """
    match = _ANY_INDEX.search(path)
    if match is None:
        return ""
    return path[match.end() :].lstrip(".")


def first_index(path: str) -> int:
    """First numeric index in *path*, or -1 when there is none."""
    match = _NUMERIC_INDEX.search(path)
    return int(match.group(1)) if match else -1
