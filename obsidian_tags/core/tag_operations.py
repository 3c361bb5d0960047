"""Batch tag operations across vault notes."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from obsidian_tags.core.frontmatter_tags import (
    add_frontmatter_tags,
    get_frontmatter_tags,
    remove_frontmatter_tags,
)
from obsidian_tags.core.inline_tags import find_inline_tags, insert_inline_tags, remove_inline_tags
from obsidian_tags.core.note_codec import (
    NoteDocument,
    diff_documents,
    frontmatter_line_count,
    metadata_equal,
    parse_note,
    serialize_note,
)
from obsidian_tags.core.vault_operations import (
    ensure_vault_ready,
    read_note_text,
    resolve_vault_file,
    write_note_text,
)
from obsidian_tags.data_models import (
    FileOutcome,
    FileTagDetails,
    OperationReport,
    TagChangeRecord,
    VaultMetadata,
)
from obsidian_tags.models import ManageTagsInput

logger = logging.getLogger(__name__)


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _add_tags(document: NoteDocument, request: ManageTagsInput) -> NoteDocument:
    options = request.options
    updated = document

    if options.location != "content":
        metadata = add_frontmatter_tags(updated.metadata, request.tags, options.normalize)
        if not metadata_equal(updated.metadata, metadata):
            updated = replace(updated, metadata=metadata, has_metadata=True)

    if options.location != "frontmatter":
        body = insert_inline_tags(
            updated.body,
            request.tags,
            normalize=options.normalize,
            position=options.position,
        )
        updated = replace(updated, body=body)

    return updated


def _remove_tags(
    document: NoteDocument,
    request: ManageTagsInput,
) -> tuple[NoteDocument, FileTagDetails]:
    options = request.options
    selection = {
        "normalize": options.normalize,
        "preserve_children": options.preserve_children,
        "patterns": options.patterns,
    }
    updated = document
    details = FileTagDetails()

    if options.location != "content" and updated.has_metadata:
        metadata, report = remove_frontmatter_tags(updated.metadata, request.tags, **selection)
        details = details.merge(report)
        updated = replace(updated, metadata=metadata)

    if options.location != "frontmatter":
        body, report = remove_inline_tags(
            updated.body,
            request.tags,
            line_offset=frontmatter_line_count(document),
            **selection,
        )
        details = details.merge(report)
        updated = replace(updated, body=body)

    return updated, details


def _process_file(vault: VaultMetadata, filename: str, request: ManageTagsInput) -> FileOutcome:
    """Run the request against one file and describe the outcome.

    Never raises: any failure becomes an ``"error"`` outcome so the batch goes on.
    """
    try:
        path = resolve_vault_file(vault, filename)
        original = parse_note(read_note_text(path))

        if request.operation == "add":
            updated, details = _add_tags(original, request), FileTagDetails()
        else:
            updated, details = _remove_tags(original, request)

        diff = diff_documents(original, updated)
        if not diff.changed:
            logger.info(
                "Tags unchanged for note '%s' in vault '%s' (nothing to %s)",
                filename,
                vault.name,
                request.operation,
            )
            return FileOutcome(file=filename, status="unchanged", details=details)

        write_note_text(path, serialize_note(updated))
    except Exception as exc:
        logger.warning(
            "Tag %s failed for note '%s' in vault '%s': %s",
            request.operation,
            filename,
            vault.name,
            exc,
        )
        return FileOutcome(file=filename, status="error", error=str(exc) or type(exc).__name__)

    logger.info(
        "Tags updated for note '%s' in vault '%s' (frontmatter=%s, content=%s, removed=%d, preserved=%d)",
        filename,
        vault.name,
        diff.metadata_changed,
        diff.body_changed,
        len(details.removed_tags),
        len(details.preserved_tags),
    )
    return FileOutcome(file=filename, status="updated", details=details)


def _format_change(record: TagChangeRecord) -> str:
    location = record.location
    if record.line is not None:
        location += f", line {record.line}"
    return f"    - {record.tag} ({location})"


# ==============================================================================
# TAG OPERATIONS
# ==============================================================================


def manage_tags(vault: VaultMetadata, request: ManageTagsInput) -> OperationReport:
    """Add or remove tags in every file of ``request``, in order.

    Files are processed one after another. A file that escapes the vault, does not
    exist, cannot be read or cannot be written is recorded as an error and the
    batch continues. Files that need no change are not rewritten and are listed
    under ``unchanged``.

    Args:
        vault: Vault metadata.
        request: Validated tag operation request.

    Returns:
        The :class:`OperationReport` for the whole batch.

    Raises:
        FileNotFoundError: If the vault directory itself is not accessible.
    """
    ensure_vault_ready(vault)

    report = OperationReport()
    for filename in request.files:
        report = report.with_outcome(_process_file(vault, filename, request))

    logger.info(
        "Tag %s of %s in vault '%s': %d updated, %d unchanged, %d failed",
        request.operation,
        ", ".join(request.tags),
        vault.name,
        len(report.success),
        len(report.unchanged),
        len(report.errors),
    )
    return report


def format_report(report: OperationReport) -> str:
    """Render a human-readable summary of ``report``."""
    sections: list[str] = []

    if report.success:
        sections.append(f"Successfully processed tags in: {', '.join(report.success)}")
    if report.unchanged:
        sections.append(f"No changes needed in: {', '.join(report.unchanged)}")

    for filename, details in report.details:
        if not details.removed_tags and not details.preserved_tags:
            continue
        lines = [f"Changes in {filename}:"]
        if details.removed_tags:
            lines.append("  Removed tags:")
            lines.extend(_format_change(record) for record in details.removed_tags)
        if details.preserved_tags:
            lines.append("  Preserved tags:")
            lines.extend(_format_change(record) for record in details.preserved_tags)
        sections.append("\n".join(lines))

    if report.errors:
        lines = ["Errors:"]
        lines.extend(f"  {error.file}: {error.error}" for error in report.errors)
        sections.append("\n".join(lines))

    return "\n\n".join(sections) if sections else "No files processed."


def list_note_tags(vault: VaultMetadata, files: list[str]) -> dict[str, Any]:
    """Read the frontmatter and inline tags of ``files`` without modifying them.

    Args:
        vault: Vault metadata.
        files: Vault-relative markdown filenames.

    Returns:
        Dictionary with the vault name, one entry per readable note (frontmatter
        tags, inline tags with line numbers) and per-file errors.
    """
    ensure_vault_ready(vault)

    notes: list[dict[str, Any]] = []
    errors: list[dict[str, str]] = []
    for filename in files:
        try:
            document = parse_note(read_note_text(resolve_vault_file(vault, filename)))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read tags of '%s' in vault '%s': %s", filename, vault.name, exc)
            errors.append({"file": filename, "error": str(exc)})
            continue

        offset = frontmatter_line_count(document)
        notes.append(
            {
                "file": filename,
                "frontmatter": get_frontmatter_tags(document.metadata),
                "inline": [
                    {"tag": token.tag, "line": token.line + offset}
                    for token in find_inline_tags(document.body)
                ],
            }
        )

    return {"vault": vault.name, "notes": notes, "errors": errors}
