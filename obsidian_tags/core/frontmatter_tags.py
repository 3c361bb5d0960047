"""Adding and removing tags in the frontmatter ``tags`` field."""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from obsidian_tags.constants import TAGS_FIELD
from obsidian_tags.core.tag_matcher import classify_removal
from obsidian_tags.core.tag_normalizer import normalize_tag, strip_hash, tag_key, validate_tag
from obsidian_tags.data_models import TagChangeRecord, TagRemovalReport

logger = logging.getLogger(__name__)

_STRING_TAGS_SPLIT_RE = re.compile(r"[,\s]+")


def get_frontmatter_tags(metadata: Mapping[str, Any]) -> list[str]:
    """Return the tags listed in ``metadata`` as strings.

    Accepts the list form (``tags: [a, b]``) and the single-string form
    (``tags: a, b`` or ``tags: a b``). A missing or empty field yields ``[]``.
    """
    raw = metadata.get(TAGS_FIELD)
    if raw is None:
        return []
    if isinstance(raw, str):
        return [strip_hash(part) for part in _STRING_TAGS_SPLIT_RE.split(raw) if strip_hash(part)]
    if isinstance(raw, list):
        return [str(item).strip() for item in raw if item is not None and str(item).strip()]
    return [str(raw).strip()]


def prepare_tags(tags: Iterable[str], normalize: bool) -> list[str]:
    """Validate and optionally normalize caller-supplied tags, dropping duplicates.

    Invalid tags are skipped; the request models reject them before this point.
    """
    prepared: list[str] = []
    seen: set[str] = set()
    for tag in tags:
        candidate = strip_hash(tag)
        if not validate_tag(candidate):
            logger.debug("Skipping invalid tag '%s'", tag)
            continue
        value = normalize_tag(candidate) if normalize else candidate
        key = tag_key(value, normalize)
        if key in seen:
            continue
        seen.add(key)
        prepared.append(value)
    return prepared


def add_frontmatter_tags(
    metadata: Mapping[str, Any],
    tags: Sequence[str],
    normalize: bool = True,
) -> dict[str, Any]:
    """Return a copy of ``metadata`` whose tag list also contains ``tags``.

    A ``tags`` list is created when the field is absent. Tags already present
    (compared with :func:`tag_key`) are not added again, existing entries keep
    their order and spelling, and every other field is left untouched. The input
    mapping is never mutated, so ``result == metadata`` means nothing was added.
    """
    updated = copy.deepcopy(dict(metadata))
    existing = get_frontmatter_tags(updated)
    present = {tag_key(tag, normalize) for tag in existing}
    additions = [tag for tag in prepare_tags(tags, normalize) if tag_key(tag, normalize) not in present]

    if TAGS_FIELD not in updated:
        updated[TAGS_FIELD] = additions
        return updated

    if not additions:
        return updated

    raw = updated[TAGS_FIELD]
    if isinstance(raw, list):
        updated[TAGS_FIELD] = raw + additions
    else:
        updated[TAGS_FIELD] = existing + additions
    return updated


def remove_frontmatter_tags(
    metadata: Mapping[str, Any],
    targets: Sequence[str],
    *,
    normalize: bool = True,
    preserve_children: bool = False,
    patterns: Sequence[str] = (),
) -> tuple[dict[str, Any], TagRemovalReport]:
    """Remove targeted tags from the frontmatter tag list.

    Args:
        metadata: Parsed frontmatter (not mutated).
        targets: Tags to remove; their descendants are removed too unless
            ``preserve_children`` is set.
        normalize: Compare tags by their normalized form instead of case-insensitively.
        preserve_children: Keep descendants of targets and report them as preserved.
        patterns: Wildcard patterns selecting additional tags to remove.

    Returns:
        ``(updated_metadata, report)``. The tag field keeps its original shape when
        nothing is removed; otherwise it is rewritten as a list.
    """
    updated = copy.deepcopy(dict(metadata))
    raw = updated.get(TAGS_FIELD)
    if raw is None:
        return updated, TagRemovalReport()

    items: list[Any] = raw if isinstance(raw, list) else get_frontmatter_tags(updated)
    kept: list[Any] = []
    removed: list[TagChangeRecord] = []
    preserved: list[TagChangeRecord] = []

    for item in items:
        text = "" if item is None else str(item).strip()
        decision = classify_removal(
            text,
            targets,
            normalize=normalize,
            preserve_children=preserve_children,
            patterns=patterns,
        ) if text else None

        if decision == "removed":
            removed.append(TagChangeRecord(tag=text, location="frontmatter"))
            continue
        if decision == "preserved":
            preserved.append(TagChangeRecord(tag=text, location="frontmatter"))
        kept.append(item)

    if removed:
        updated[TAGS_FIELD] = kept

    return updated, TagRemovalReport(removed=tuple(removed), preserved=tuple(preserved))
