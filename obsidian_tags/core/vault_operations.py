"""Core vault file access and sandbox enforcement."""

from pathlib import Path
from obsidian_tags.data_models import VaultMetadata


def ensure_vault_ready(vault: VaultMetadata) -> None:
    """Ensure the target vault directory is accessible before performing operations.

    Args:
        vault: Metadata describing the vault to use.

    Raises:
        FileNotFoundError: If the vault path does not exist or is not a directory.
    """
    if not vault.path.is_dir():
        raise FileNotFoundError(f"Vault '{vault.name}' is not accessible at {vault.path}")


def resolve_vault_file(vault: VaultMetadata, filename: str) -> Path:
    """Resolve a vault-relative markdown filename to an absolute path.

    Only performs path resolution and sandbox enforcement. Shape checks (``.md``
    suffix, non-empty) are handled at the MCP tool boundary by Pydantic models.

    Args:
        vault: Vault metadata.
        filename: Vault-relative filename, including the ``.md`` suffix.

    Returns:
        The absolute :class:`Path` to the file inside ``vault``.

    Raises:
        ValueError: If the resolved path escapes the vault root.
    """
    candidate = (vault.path / Path(filename)).resolve(strict=False)
    vault_root = vault.path.resolve(strict=False)

    # Filesystem-level check: symlinks and '..' segments are resolved first
    if not candidate.is_relative_to(vault_root):
        raise ValueError("Note path escapes the configured vault.")

    return candidate


def note_display_name(vault: VaultMetadata, path: Path) -> str:
    """Convert a note path into a forward-slash display name without extension.

    ``path`` may be relative to the configured vault root (as yielded by a walk of
    ``vault.path``) or to its resolved form (as returned by ``resolve_vault_file``).
    """
    root = vault.path if path.is_relative_to(vault.path) else vault.path.resolve(strict=False)
    return path.relative_to(root).with_suffix("").as_posix()


def read_note_text(path: Path) -> str:
    """Read a note as UTF-8 text.

    Raises:
        FileNotFoundError: If ``path`` is not an existing file.
        ValueError: If the file cannot be read or is not UTF-8 encoded.
    """
    if not path.is_file():
        raise FileNotFoundError("File not found")

    try:
        # newline="" keeps \r\n intact so unchanged lines round-trip exactly
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise ValueError("Failed to read file: not UTF-8 encoded") from exc
    except OSError as exc:
        raise ValueError(f"Failed to read file: {exc.strerror or exc}") from exc


def write_note_text(path: Path, content: str) -> None:
    """Write ``content`` back to ``path`` as UTF-8 without newline translation."""
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(content)
