"""Hierarchy and wildcard matching over tags.

Both sides are normalized before comparison. In a pattern, ``*`` matches any run
of characters inside one segment; a pattern that is exactly ``*`` matches every
tag, and a trailing ``/*`` segment matches every descendant (``archive/*``
matches ``archive/2023`` and ``archive/2024/q1`` but not ``archive``).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import lru_cache
from typing import Literal, Optional

from obsidian_tags.core.tag_normalizer import normalize_tag, tag_key

WILDCARD = "*"

RemovalDecision = Literal["removed", "preserved"]


@lru_cache(maxsize=256)
def _segment_regex(pattern_segment: str) -> re.Pattern[str]:
    return re.compile(".*".join(re.escape(part) for part in pattern_segment.split(WILDCARD)))


def _segment_matches(segment: str, pattern_segment: str) -> bool:
    if WILDCARD not in pattern_segment:
        return segment == pattern_segment
    return _segment_regex(pattern_segment).fullmatch(segment) is not None


def matches_pattern(tag: str, pattern: str) -> bool:
    """Return True when ``tag`` is selected by ``pattern``.

    Examples:
        >>> matches_pattern("archive/2024/q1", "archive/*")
        True
        >>> matches_pattern("archive", "archive/*")
        False
        >>> matches_pattern("project-alpha", "project-*")
        True
    """
    normalized_pattern = normalize_tag(pattern)
    if normalized_pattern == WILDCARD:
        return True

    tag_segments = normalize_tag(tag).split("/")
    pattern_segments = normalized_pattern.split("/")

    if pattern_segments[-1] == WILDCARD:
        head = pattern_segments[:-1]
        if len(tag_segments) <= len(head):
            return False
        return all(_segment_matches(t, p) for t, p in zip(tag_segments, head))

    if len(tag_segments) != len(pattern_segments):
        return False
    return all(_segment_matches(t, p) for t, p in zip(tag_segments, pattern_segments))


def is_parent_tag(candidate: str, tag: str) -> bool:
    """Return True when ``tag`` strictly extends ``candidate`` by whole segments."""
    parent = normalize_tag(candidate)
    return bool(parent) and normalize_tag(tag).startswith(parent + "/")


def related_tags(tag: str, universe: Iterable[str]) -> set[str]:
    """Return the ancestors and descendants of ``tag`` found in ``universe``."""
    key = normalize_tag(tag)
    return {
        other
        for other in universe
        if normalize_tag(other) != key
        and (is_parent_tag(tag, other) or is_parent_tag(other, tag))
    }


def classify_removal(
    tag: str,
    targets: Sequence[str],
    *,
    normalize: bool = True,
    preserve_children: bool = False,
    patterns: Sequence[str] = (),
) -> Optional[RemovalDecision]:
    """Decide what a removal request does to a tag that is present in a note.

    Returns ``"removed"`` for a tag equal to a target or selected by a pattern, and
    for a strict descendant of a target unless ``preserve_children`` is set, in which
    case the descendant is ``"preserved"``. Returns ``None`` for tags the request
    does not concern.
    """
    key = tag_key(tag, normalize)
    target_keys = [tag_key(target, normalize) for target in targets]

    if key in target_keys or any(matches_pattern(tag, pattern) for pattern in patterns):
        return "removed"

    if any(key.startswith(target + "/") for target in target_keys if target):
        return "preserved" if preserve_children else "removed"

    return None
