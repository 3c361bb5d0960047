"""Base Pydantic models for MCP tool input validation.

This module defines base models that provide common validation patterns
for tag operations. Other input models inherit from these bases.

Base Models:
- BaseVaultInput: Optional vault selection shared by every tool
- BaseFilesInput: Adds the list of vault-relative markdown files to process
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class BaseVaultInput(BaseModel):
    """Base model carrying the optional vault name.

    All vault-scoped input models should inherit from this class.
    """

    vault: Optional[str] = Field(
        None,
        description=(
            "Vault name (omit to use active vault). "
            "Use list_vaults() to discover available vaults."
        )
    )

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        """Validate vault name format.

        Args:
            v: The vault name to validate

        Returns:
            The validated vault name or None

        Raises:
            ValueError: If vault name is empty string
        """
        if v is not None and not v.strip():
            raise ValueError(
                "Vault name cannot be empty. "
                "Either omit the vault parameter to use the active vault, "
                "or provide a valid vault name from list_vaults()."
            )

        return v.strip() if v else None


class BaseFilesInput(BaseVaultInput):
    """Base model for operations over a list of notes.

    Files are vault-relative paths including the ``.md`` extension. Whether a
    path stays inside the vault is checked per file when it is resolved, so a
    bad path fails only that file, not the whole request.
    """

    files: list[str] = Field(
        min_length=1,
        description=(
            "Vault-relative note filenames, each ending in '.md'. "
            "Examples: ['Daily Notes/2025-10-27.md', 'Projects/Alpha.md']"
        ),
        examples=[["Daily Notes/2025-10-27.md"], ["Projects/Alpha.md", "README.md"]]
    )

    @field_validator('files')
    @classmethod
    def validate_files(cls, v: list[str]) -> list[str]:
        """Validate that every entry names a markdown file.

        Raises:
            ValueError: If an entry is blank or lacks the ``.md`` extension
        """
        cleaned: list[str] = []
        for filename in v:
            stripped = filename.strip()
            if not stripped:
                raise ValueError(
                    "File names cannot be empty. "
                    "Provide vault-relative paths like 'Projects/Alpha.md'."
                )
            if not stripped.endswith(".md"):
                raise ValueError(
                    "All files must have .md extension. "
                    f"Invalid file: '{stripped}'"
                )
            cleaned.append(stripped)

        return cleaned
