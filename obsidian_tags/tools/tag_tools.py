"""Tag management MCP tools.

This module provides MCP tool wrappers for tag operations:
- Add or remove tags across many notes (frontmatter and inline)
- List the tags of specific notes
- Search the vault for notes by tag

All tools delegate to core operations in obsidian_tags.core.
"""
from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from obsidian_tags.server import mcp
from obsidian_tags.session import resolve_vault
from obsidian_tags.models import (
    ManageTagsInput,
    ListNoteTagsInput,
    SearchNotesByTagInput,
)
from obsidian_tags.core.tag_operations import format_report, list_note_tags, manage_tags
from obsidian_tags.core.search_operations import search_notes_by_tags


# ==============================================================================
# TAG OPERATIONS
# ==============================================================================

@mcp.tool()
async def manage_obsidian_tags(
    input: ManageTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Add or remove tags in notes, in the frontmatter and/or as inline #tags.

    Processes files in order. A file that is missing, unreadable or outside the
    vault is reported under ``errors`` without stopping the batch. Inline tags
    inside code blocks and inline code are never touched.

    The input is validated automatically by Pydantic; an invalid file name or
    tag rejects the whole request before any note is read.

    Args:
        input (ManageTagsInput): Validated input containing:
            - files (list[str]): Vault-relative filenames ending in .md
            - operation ("add" | "remove")
            - tags (list[str]): Tags, '/' for hierarchy (e.g. 'project/active')
            - options (TagOptions, optional):
                - location: "frontmatter" | "content" | "both" (default "both")
                - normalize: ProjectActive -> project-active (default True)
                - position: "start" | "end" for inline additions (default "end")
                - preserveChildren: keep child tags when removing a parent
                - patterns: wildcard patterns for removal, e.g. ["archive/*"]
            - vault (str, optional): Target vault (omit to use active vault)

    Returns:
        {
            "vault": str,
            "operation": "add" | "remove",
            "success": list[str],      # files rewritten
            "unchanged": list[str],    # files that needed no change
            "errors": [{"file": str, "error": str}],
            "details": {file: {"removedTags": [...], "preservedTags": [...]}},
            "summary": str
        }

    Examples:
        - "Tag these meeting notes with project/alpha" → operation="add"
        - "Drop every archive/* tag" → operation="remove", patterns=["archive/*"]
        - "Remove #project but keep project/alpha" → preserveChildren=True

    Error Handling:
        - ValidationError: empty lists, non-.md files, invalid tag or pattern syntax
        - Vault directory missing → FileNotFoundError
    """
    metadata = resolve_vault(input.vault, ctx)
    report = manage_tags(metadata, input)
    return {
        "vault": metadata.name,
        "operation": input.operation,
        **report.as_payload(),
        "summary": format_report(report),
    }


@mcp.tool(
    annotations={
        "title": "List Note Tags",
        "readOnlyHint": True,
        "openWorldHint": False,
    }
)
async def list_obsidian_note_tags(
    input: ListNoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List the frontmatter and inline tags of specific notes.

    Args:
        input (ListNoteTagsInput): Validated input containing:
            - files (list[str]): Vault-relative filenames ending in .md
            - vault (str, optional): Target vault (omit to use active vault)

    Returns:
        {
            "vault": str,
            "notes": [{"file": str, "frontmatter": list[str], "inline": [{"tag": str, "line": int}]}],
            "errors": [{"file": str, "error": str}]
        }

    Examples:
        - Use when: checking which tags a note has before removing some
    """
    metadata = resolve_vault(input.vault, ctx)
    return list_note_tags(metadata, input.files)


@mcp.tool(
    annotations={
        "title": "Search Notes by Tag",
        "readOnlyHint": True,
        "openWorldHint": False,
    }
)
async def search_notes_by_tag(
    input: SearchNotesByTagInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Search notes by tag, including child tags and inline #tags.

    Args:
        input (SearchNotesByTagInput): Validated input containing:
            - tags (list[str]): Tags to search for (case-insensitive)
            - match_all (bool): When True require all tags; when False match any tag
            - include_children (bool): 'project' also matches 'project/alpha'
            - include_inline (bool): Count inline #tags as well as frontmatter tags
            - vault (str, optional): Vault name (omit to use active vault)

    Returns:
        Dictionary containing vault name, tags, match mode, sorted matches and
        related_tags (parents/children of the query tags seen in matching notes).

    Examples:
        - Use when: "Find notes tagged project" (also finds project/alpha)
        - Workflow: search_notes_by_tag() → manage_obsidian_tags() on the matches
    """
    metadata = resolve_vault(input.vault, ctx)
    return search_notes_by_tags(
        input.tags,
        metadata,
        match_all=input.match_all,
        include_children=input.include_children,
        include_inline=input.include_inline,
    )
