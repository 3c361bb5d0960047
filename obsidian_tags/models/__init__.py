"""Pydantic input models for MCP tool validation.

This package defines Pydantic models that provide automatic input validation
for all MCP tools. Each model represents the input schema for one or more tools,
with field-level validation, type checking, and descriptive error messages.

Architecture:
- base: Base models (BaseVaultInput, BaseFilesInput) for common validation
- tag_models: Input models for tag management and tag search
- vault_models: Input models for vault management operations

Usage:
    from obsidian_tags.models import ManageTagsInput, TagOptions
    from obsidian_tags.models import ListVaultsInput, SetActiveVaultInput
"""

from .base import BaseVaultInput, BaseFilesInput
from .tag_models import (
    TagOptions,
    ManageTagsInput,
    ListNoteTagsInput,
    SearchNotesByTagInput,
)
from .vault_models import (
    ListVaultsInput,
    SetActiveVaultInput,
)

__all__ = [
    # Base models
    "BaseVaultInput",
    "BaseFilesInput",
    # Tag models
    "TagOptions",
    "ManageTagsInput",
    "ListNoteTagsInput",
    "SearchNotesByTagInput",
    # Vault models
    "ListVaultsInput",
    "SetActiveVaultInput",
]
