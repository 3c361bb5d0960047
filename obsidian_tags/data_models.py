"""Data models for vault configuration and tag operation reports."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Literal, Optional

TagLocation = Literal["frontmatter", "content"]


@dataclass(frozen=True)
class VaultMetadata:
    """Normalized metadata describing an Obsidian vault."""

    name: str
    path: Path
    description: str
    exists: bool

    def as_payload(self) -> dict[str, Any]:
        """Return a serializable payload representation."""
        return {
            "name": self.name,
            "path": str(self.path),
            "description": self.description,
            "exists": self.path.is_dir(),
        }


class VaultConfiguration:
    """Holds vault metadata and default resolution helpers.

    Loaded lazily from vaults.yaml the first time a tool needs it.
    Provides vault lookup by name and payload serialization for MCP responses.
    """

    def __init__(self, default_vault: str, vaults: dict[str, VaultMetadata]) -> None:
        self.default_vault = default_vault
        self.vaults = vaults

    def get(self, name: str) -> VaultMetadata:
        """Get vault metadata by name.

        Args:
            name: The name of the vault to retrieve.

        Returns:
            VaultMetadata for the requested vault.

        Raises:
            ValueError: If the vault name is not found in configuration.
        """
        try:
            return self.vaults[name]
        except KeyError as exc:
            raise ValueError(f"Unknown vault '{name}'") from exc

    def as_payload(self) -> dict[str, Any]:
        """Return serializable configuration payload."""
        return {
            "default": self.default_vault,
            "vaults": [vault.as_payload() for vault in self.vaults.values()],
        }


# ==============================================================================
# TAG REPORTS
# ==============================================================================


@dataclass(frozen=True)
class TagChangeRecord:
    """A single tag that was removed from, or deliberately kept in, a note."""

    tag: str
    location: TagLocation
    line: Optional[int] = None
    context: Optional[str] = None

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"tag": self.tag, "location": self.location}
        if self.line is not None:
            payload["line"] = self.line
        if self.context is not None:
            payload["context"] = self.context
        return payload


@dataclass(frozen=True)
class TagRemovalReport:
    """Outcome of one editor pass: which tags went and which were preserved."""

    removed: tuple[TagChangeRecord, ...] = ()
    preserved: tuple[TagChangeRecord, ...] = ()


@dataclass(frozen=True)
class FileTagDetails:
    """Removed/preserved tag records accumulated for one file."""

    removed_tags: tuple[TagChangeRecord, ...] = ()
    preserved_tags: tuple[TagChangeRecord, ...] = ()

    def merge(self, report: TagRemovalReport) -> FileTagDetails:
        """Return a copy extended with the records of ``report``."""
        return FileTagDetails(
            removed_tags=self.removed_tags + report.removed,
            preserved_tags=self.preserved_tags + report.preserved,
        )

    def as_payload(self) -> dict[str, Any]:
        return {
            "removedTags": [record.as_payload() for record in self.removed_tags],
            "preservedTags": [record.as_payload() for record in self.preserved_tags],
        }


@dataclass(frozen=True)
class FileError:
    file: str
    error: str

    def as_payload(self) -> dict[str, str]:
        return {"file": self.file, "error": self.error}


@dataclass(frozen=True)
class FileOutcome:
    """Per-file delta folded into an :class:`OperationReport` by the coordinator.

    ``status`` is ``"updated"`` when the note was rewritten, ``"unchanged"`` when it
    was processed without any difference, and ``"error"`` when processing failed.
    ``details`` is ``None`` when the file never got as far as parsing.
    """

    file: str
    status: Literal["updated", "unchanged", "error"]
    details: Optional[FileTagDetails] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class OperationReport:
    """Immutable result of a batch tag operation.

    Entries keep the order in which files were listed in the request.
    """

    success: tuple[str, ...] = ()
    unchanged: tuple[str, ...] = ()
    errors: tuple[FileError, ...] = ()
    details: tuple[tuple[str, FileTagDetails], ...] = field(default=())

    def with_outcome(self, outcome: FileOutcome) -> OperationReport:
        """Return a new report that also accounts for ``outcome``."""
        report = self
        if outcome.details is not None:
            report = replace(report, details=report.details + ((outcome.file, outcome.details),))

        if outcome.status == "updated":
            return replace(report, success=report.success + (outcome.file,))
        if outcome.status == "unchanged":
            return replace(report, unchanged=report.unchanged + (outcome.file,))
        return replace(
            report,
            errors=report.errors + (FileError(outcome.file, outcome.error or "Unknown error"),),
        )

    def details_for(self, filename: str) -> Optional[FileTagDetails]:
        for name, details in self.details:
            if name == filename:
                return details
        return None

    def as_payload(self) -> dict[str, Any]:
        """Return the report as plain JSON-compatible data."""
        return {
            "success": list(self.success),
            "unchanged": list(self.unchanged),
            "errors": [error.as_payload() for error in self.errors],
            "details": {name: details.as_payload() for name, details in self.details},
        }
