"""Tag search across vault notes."""

from __future__ import annotations

import logging
from typing import Any

from obsidian_tags.core.frontmatter_tags import get_frontmatter_tags
from obsidian_tags.core.inline_tags import find_inline_tags
from obsidian_tags.core.note_codec import parse_note
from obsidian_tags.core.tag_matcher import is_parent_tag, related_tags
from obsidian_tags.core.tag_normalizer import normalize_tag
from obsidian_tags.core.vault_operations import ensure_vault_ready, note_display_name, read_note_text
from obsidian_tags.data_models import VaultMetadata

logger = logging.getLogger(__name__)


def _note_tags(text: str, include_inline: bool) -> list[str]:
    document = parse_note(text)
    tags = get_frontmatter_tags(document.metadata)
    if include_inline:
        tags.extend(token.tag for token in find_inline_tags(document.body))
    return tags


def _tag_matches(query: str, note_tags: list[str], include_children: bool) -> bool:
    key = normalize_tag(query)
    return any(
        normalize_tag(tag) == key or (include_children and is_parent_tag(query, tag))
        for tag in note_tags
    )


def search_notes_by_tags(
    tags: list[str],
    vault: VaultMetadata,
    match_all: bool = False,
    include_children: bool = True,
    include_inline: bool = True,
) -> dict[str, Any]:
    """Search notes by tags, honouring tag hierarchy.

    Args:
        tags: Tags to search for (case-insensitive, compared in normalized form).
        vault: Vault metadata describing the target vault.
        match_all: When True require all tags; when False match any tag.
        include_children: When True a query tag also matches its descendants.
        include_inline: When True inline ``#tags`` count as well as frontmatter tags.

    Returns:
        Dictionary containing the vault name, search parameters, the sorted note
        identifiers that matched, and ``related_tags``: ancestors and descendants of
        the query tags seen in the matching notes.

    Raises:
        ValueError: If the tags list is empty or contains only whitespace.
    """
    ensure_vault_ready(vault)

    search_tags = [tag.strip().lstrip("#") for tag in tags if tag.strip().lstrip("#")]
    if not search_tags:
        raise ValueError("Must specify at least one non-empty tag.")

    matches: list[str] = []
    seen_tags: set[str] = set()

    for note_path in vault.path.rglob("*.md"):
        if not note_path.is_file():
            continue

        try:
            note_tags = _note_tags(read_note_text(note_path), include_inline)
        except (OSError, ValueError) as exc:
            logger.debug("Skipping file '%s' during tag search: %s", note_path, exc)
            continue

        if not note_tags:
            continue

        hits = [_tag_matches(query, note_tags, include_children) for query in search_tags]
        if not (all(hits) if match_all else any(hits)):
            continue

        matches.append(note_display_name(vault, note_path))
        seen_tags.update(note_tags)

    related: set[str] = set()
    for query in search_tags:
        related.update(normalize_tag(tag) for tag in related_tags(query, seen_tags))

    matches.sort()
    logger.info(
        "Tag search in vault '%s' for %s (%s mode) found %d matches",
        vault.name,
        search_tags,
        "all" if match_all else "any",
        len(matches),
    )
    return {
        "vault": vault.name,
        "tags": search_tags,
        "match_mode": "all" if match_all else "any",
        "matches": matches,
        "related_tags": sorted(related),
    }
