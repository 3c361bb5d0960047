"""Pydantic input models for tag operations.

This module defines input models for tag management:
- Add or remove tags across notes (frontmatter and/or inline)
- List the tags of specific notes
- Search the vault for notes carrying tags
"""

from __future__ import annotations

from typing import Literal
from pydantic import BaseModel, Field, field_validator

from obsidian_tags.core.tag_normalizer import strip_hash, validate_pattern, validate_tag
from .base import BaseFilesInput, BaseVaultInput


def _validate_tag_list(v: list[str]) -> list[str]:
    cleaned: list[str] = []
    for tag in v:
        candidate = strip_hash(tag)
        if not validate_tag(candidate):
            raise ValueError(
                f"Invalid tag format: '{tag}'. "
                "Tags must contain only letters, numbers, '-', '_' "
                "and forward slashes for hierarchy."
            )
        cleaned.append(candidate)
    return cleaned


class TagOptions(BaseModel):
    """Options controlling where and how tags are added or removed.

    Every field has a default, so omitting ``options`` entirely is valid.
    """

    location: Literal["frontmatter", "content", "both"] = Field(
        "both",
        description=(
            "Where to add/remove tags: the frontmatter 'tags' list, "
            "inline #tags in the note body, or both."
        )
    )

    normalize: bool = Field(
        True,
        description="Normalize tag format (e.g., ProjectActive -> project-active)."
    )

    position: Literal["start", "end"] = Field(
        "end",
        description="Where to add inline tags in the note body."
    )

    preserve_children: bool = Field(
        False,
        alias="preserveChildren",
        description=(
            "When removing a parent tag, keep its child tags "
            "(e.g. removing 'project' keeps 'project/alpha')."
        )
    )

    patterns: list[str] = Field(
        default_factory=list,
        description=(
            "Tag patterns to match for removal. '*' matches within one segment; "
            "a trailing '/*' matches all descendants; '*' alone matches every tag."
        ),
        examples=[["archive/*"], ["draft-*", "temp"]]
    )

    @field_validator('patterns')
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Validate wildcard pattern syntax."""
        cleaned: list[str] = []
        for pattern in v:
            candidate = strip_hash(pattern)
            if not validate_pattern(candidate):
                raise ValueError(
                    f"Invalid tag pattern: '{pattern}'. "
                    "Patterns follow tag syntax with '*' as a wildcard."
                )
            cleaned.append(candidate)
        return cleaned

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True
        frozen = True
        json_schema_extra = {
            "examples": [
                {"location": "both", "normalize": True, "position": "end"},
                {"location": "content", "preserveChildren": True, "patterns": ["archive/*"]}
            ]
        }


class ManageTagsInput(BaseFilesInput):
    """Input model for manage_obsidian_tags tool.

    Adds or removes tags in a batch of notes. The whole request is rejected
    before any file is read when a field is missing or malformed.

    Examples:
        >>> ManageTagsInput(files=["Note.md"], operation="add", tags=["project/active"])
        >>> ManageTagsInput(
        ...     files=["A.md", "B.md"],
        ...     operation="remove",
        ...     tags=["project"],
        ...     options={"preserveChildren": True},
        ... )
    """

    operation: Literal["add", "remove"] = Field(
        description="Whether to add or remove the specified tags."
    )

    tags: list[str] = Field(
        min_length=1,
        description=(
            "Tags to add or remove, without or with a leading '#'. "
            "Use '/' for hierarchy. Examples: ['project/active'], ['draft']"
        )
    )

    options: TagOptions = Field(
        default_factory=TagOptions,
        description="Location, normalization, insertion position and removal options."
    )

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Validate tag syntax, stripping a leading '#'.

        Raises:
            ValueError: If any tag violates the tag grammar
        """
        return _validate_tag_list(v)

    class Config:
        """Pydantic model configuration."""
        frozen = True
        json_schema_extra = {
            "examples": [
                {
                    "files": ["Projects/Alpha.md"],
                    "operation": "add",
                    "tags": ["project/active"],
                    "options": {"location": "frontmatter"},
                    "vault": None
                },
                {
                    "files": ["Archive/2023.md", "Archive/2024.md"],
                    "operation": "remove",
                    "tags": ["archive"],
                    "options": {"patterns": ["archive/*"], "location": "both"},
                    "vault": "work"
                }
            ]
        }


class ListNoteTagsInput(BaseFilesInput):
    """Input model for list_obsidian_note_tags tool.

    Reads the frontmatter and inline tags of the given notes without modifying them.

    Examples:
        >>> ListNoteTagsInput(files=["Projects/Alpha.md"])
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"files": ["Projects/Alpha.md"], "vault": None}
            ]
        }


class SearchNotesByTagInput(BaseVaultInput):
    """Input model for search_notes_by_tag tool.

    Searches notes by tag with hierarchy awareness: searching for ``project``
    also finds notes tagged ``project/alpha`` unless ``include_children`` is off.

    Examples:
        >>> SearchNotesByTagInput(tags=["machine-learning"], match_all=False)
        >>> SearchNotesByTagInput(tags=["project", "active"], match_all=True)
    """

    tags: list[str] = Field(
        min_length=1,
        description=(
            "Tags to search for (case-insensitive). "
            "Examples: ['machine-learning'], ['project/alpha', 'mcp']"
        )
    )

    match_all: bool = Field(
        False,
        description=(
            "If True, require all tags (AND logic). "
            "If False, match any tag (OR logic). "
            "Default: False"
        )
    )

    include_children: bool = Field(
        True,
        description="If True, a tag also matches its descendants (project -> project/alpha)."
    )

    include_inline: bool = Field(
        True,
        description="If True, inline #tags in note bodies count as well as frontmatter tags."
    )

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Validate tag syntax, stripping a leading '#'."""
        return _validate_tag_list(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"tags": ["machine-learning"], "match_all": False, "vault": None},
                {"tags": ["project", "active"], "match_all": True, "vault": "work"}
            ]
        }
