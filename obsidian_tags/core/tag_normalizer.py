"""Tag syntax validation and canonical normalization.

A tag is one or more segments separated by ``/``; each segment is made of
letters, digits, ``-`` and ``_``. Normalization turns ``ProjectActive`` into
``project-active`` and is idempotent.
"""

from __future__ import annotations

import re

_SEGMENT = r"[\w-]+"
_TAG_RE = re.compile(rf"{_SEGMENT}(?:/{_SEGMENT})*")
_PATTERN_RE = re.compile(r"[\w*-]+(?:/[\w*-]+)*")

_WHITESPACE_RE = re.compile(r"\s+")
_ACRONYM_BOUNDARY_RE = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])")
_CASE_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def strip_hash(tag: str) -> str:
    """Remove surrounding whitespace and leading ``#`` markers."""
    return tag.strip().lstrip("#")


def validate_tag(tag: str) -> bool:
    """Return True when ``tag`` follows the segment grammar.

    Examples:
        >>> validate_tag("project/active")
        True
        >>> validate_tag("bad tag!")
        False
    """
    return isinstance(tag, str) and _TAG_RE.fullmatch(tag) is not None


def validate_pattern(pattern: str) -> bool:
    """Return True for a tag pattern: the tag grammar with ``*`` allowed in segments."""
    return isinstance(pattern, str) and _PATTERN_RE.fullmatch(pattern) is not None


def _normalize_segment(segment: str) -> str:
    segment = _WHITESPACE_RE.sub("-", segment.strip())
    segment = _ACRONYM_BOUNDARY_RE.sub("-", segment)
    segment = _CASE_BOUNDARY_RE.sub("-", segment)
    return segment.lower()


def normalize_tag(tag: str) -> str:
    """Return the canonical form of ``tag``.

    Strips leading ``#`` markers, then for every segment inserts ``-`` at casing
    boundaries, replaces whitespace runs with ``-`` and lower-cases the result.

    Examples:
        >>> normalize_tag("#ProjectActive")
        'project-active'
        >>> normalize_tag("Area/HTMLParser")
        'area/html-parser'
    """
    return "/".join(_normalize_segment(segment) for segment in strip_hash(tag).split("/"))


def tag_key(tag: str, normalize: bool) -> str:
    """Identity key used to decide whether two tags are the same tag.

    With ``normalize`` the key is the normalized form, so ``ProjectActive`` and
    ``project-active`` collide. Without it tags are only compared case-insensitively.
    """
    if normalize:
        return normalize_tag(tag)
    return strip_hash(tag).lower()
