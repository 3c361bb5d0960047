"""Lossless parsing and serialization of notes with YAML frontmatter.

``parse_note`` splits a raw markdown document into its frontmatter mapping and
body. ``serialize_note`` puts it back together. When the metadata has not been
touched the original block text is emitted unchanged, and when only some keys
changed the untouched keys keep their original formatting, so
``serialize_note(parse_note(text)) == text`` holds for every input.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml
from frontmatter.default_handlers import YAMLHandler

from obsidian_tags.constants import FRONTMATTER_DELIMITER

logger = logging.getLogger(__name__)

_HANDLER = YAMLHandler()
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")


# ==============================================================================
# DOCUMENT MODEL
# ==============================================================================


@dataclass(frozen=True)
class _SourceBlock:
    """Raw text of a parsed frontmatter block, kept for faithful re-emission."""

    opening: str
    closing: str
    text: str
    preamble: str
    chunks: Optional[tuple[tuple[Any, str, str], ...]]
    metadata: dict[str, Any]


@dataclass
class NoteDocument:
    """A note split into frontmatter ``metadata`` and markdown ``body``.

    ``has_metadata`` is False when the source had no (valid) frontmatter block;
    such a document serializes to its body alone.
    """

    metadata: dict[str, Any] = field(default_factory=dict)
    has_metadata: bool = False
    body: str = ""
    source: Optional[_SourceBlock] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class DocumentDiff:
    """Differences between two versions of a note."""

    has_metadata_changed: bool
    changed_keys: tuple[Any, ...]
    body_changed: bool

    @property
    def metadata_changed(self) -> bool:
        return self.has_metadata_changed or bool(self.changed_keys)

    @property
    def changed(self) -> bool:
        return self.metadata_changed or self.body_changed


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` keeping line endings; ``"".join`` restores it exactly."""
    return _LINE_RE.findall(text)


def _is_delimiter(line: str) -> bool:
    return line.rstrip("\r\n").rstrip(" \t") == FRONTMATTER_DELIMITER


def _starts_key(line: str) -> bool:
    """Return True for a line that opens a new top-level mapping entry."""
    return bool(line.strip()) and line[0] not in " \t#-"


def _convert(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_convert(item) for item in value]
    return value


def _ordered_equal(left: Any, right: Any) -> bool:
    """Structural equality that also treats key order and value types as significant."""
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return list(left.keys()) == list(right.keys()) and all(
            _ordered_equal(left[key], right[key]) for key in left
        )
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(
            _ordered_equal(a, b) for a, b in zip(left, right)
        )
    return type(left) is type(right) and left == right


def _is_trivia(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def _split_trailer(lines: list[str]) -> tuple[str, str]:
    """Split a key chunk into its entry text and the comment/blank lines after it.

    The trailer is only split off when dropping it leaves the loaded value intact,
    so lines that belong to a block scalar stay with the entry.
    """
    end = len(lines)
    while end > 1 and _is_trivia(lines[end - 1]):
        end -= 1
    text, trailer = "".join(lines[:end]), "".join(lines[end:])
    if not trailer:
        return text, ""
    try:
        if _HANDLER.load(text) != _HANDLER.load(text + trailer):
            return text + trailer, ""
    except yaml.YAMLError:
        return text + trailer, ""
    return text, trailer


def _split_chunks(
    lines: list[str],
    metadata: dict[str, Any],
) -> tuple[str, Optional[tuple[tuple[Any, str, str], ...]]]:
    """Split block lines into a preamble and one ``(key, text, trailer)`` chunk per top-level key.

    ``trailer`` holds the comment and blank lines following the entry; they are
    re-emitted even when the entry itself is re-encoded. Returns ``None`` for the
    chunks when the split does not line up with the parsed keys (flow mappings
    spanning lines, duplicate keys, ...); the block is then re-encoded as a whole
    whenever it changes.
    """
    preamble: list[str] = []
    chunks: list[list[str]] = []
    for line in lines:
        if _starts_key(line):
            chunks.append([line])
        elif chunks:
            chunks[-1].append(line)
        else:
            preamble.append(line)

    keys: list[Any] = []
    for chunk in chunks:
        try:
            loaded = _HANDLER.load("".join(chunk))
        except yaml.YAMLError:
            return "".join(preamble), None
        if not isinstance(loaded, Mapping) or len(loaded) != 1:
            return "".join(preamble), None
        keys.append(next(iter(loaded)))

    if keys != list(metadata.keys()):
        return "".join(preamble), None

    return "".join(preamble), tuple(
        (key, *_split_trailer(chunk)) for key, chunk in zip(keys, chunks)
    )


def _encode(metadata: Mapping[str, Any], newline: str) -> str:
    if not metadata:
        return ""
    dumped = _HANDLER.export(dict(metadata), sort_keys=False)
    return dumped.replace("\n", newline) + newline


def _render_block(document: NoteDocument) -> str:
    source = document.source
    if source is None:
        delimiter = FRONTMATTER_DELIMITER + "\n"
        return delimiter + _encode(document.metadata, "\n") + delimiter

    closing = source.closing
    if document.body and not closing.endswith("\n"):
        closing += "\r\n" if source.opening.endswith("\r\n") else "\n"

    if _ordered_equal(source.metadata, document.metadata):
        return source.opening + source.text + closing

    newline = "\r\n" if source.opening.endswith("\r\n") else "\n"
    if source.chunks is None:
        return source.opening + source.preamble + _encode(document.metadata, newline) + closing

    original = {key: (text, trailer) for key, text, trailer in source.chunks}
    parts = [source.preamble]
    for key, value in document.metadata.items():
        if key not in original:
            parts.append(_encode({key: value}, newline))
            continue
        text, trailer = original[key]
        if not _ordered_equal(source.metadata.get(key), value):
            text = _encode({key: value}, newline)
        parts.append(text + trailer)
    # comments that followed a deleted key
    parts.extend(trailer for key, _, trailer in source.chunks if key not in document.metadata)
    return source.opening + "".join(parts) + closing


# ==============================================================================
# CODEC OPERATIONS
# ==============================================================================


def parse_note(raw: str) -> NoteDocument:
    """Split raw markdown into frontmatter metadata and body.

    A block is recognized only when the first line is the ``---`` delimiter and a
    later line closes it. Block content that is not valid YAML, or that does not
    load as a mapping, is not treated as frontmatter: the whole input becomes the
    body. This function never raises.

    Args:
        raw: Raw note text.

    Returns:
        The parsed :class:`NoteDocument`.
    """
    lines = split_lines(raw)
    if not lines or not _is_delimiter(lines[0]):
        return NoteDocument(body=raw)

    closing_index = next(
        (index for index in range(1, len(lines)) if _is_delimiter(lines[index])),
        None,
    )
    if closing_index is None:
        return NoteDocument(body=raw)

    block_lines = lines[1:closing_index]
    block_text = "".join(block_lines)
    try:
        loaded = _HANDLER.load(block_text) if block_text.strip() else {}
    except yaml.YAMLError as exc:
        logger.debug("Ignoring malformed frontmatter block: %s", exc)
        return NoteDocument(body=raw)

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, Mapping):
        logger.debug("Ignoring frontmatter block that is not a mapping (%s)", type(loaded).__name__)
        return NoteDocument(body=raw)

    metadata = {key: _convert(value) for key, value in loaded.items()}
    preamble, chunks = _split_chunks(block_lines, metadata)
    source = _SourceBlock(
        opening=lines[0],
        closing=lines[closing_index],
        text=block_text,
        preamble=preamble,
        chunks=chunks,
        metadata=copy.deepcopy(metadata),
    )
    return NoteDocument(
        metadata=metadata,
        has_metadata=True,
        body="".join(lines[closing_index + 1:]),
        source=source,
    )


def serialize_note(document: NoteDocument) -> str:
    """Render a :class:`NoteDocument` back into markdown text.

    Emits the frontmatter block only when ``has_metadata`` is set; keys whose values
    are unchanged since parsing keep their original text and changed or new keys are
    encoded as block-style YAML in the order of ``document.metadata``.
    """
    if not document.has_metadata:
        return document.body
    return _render_block(document) + document.body


def diff_documents(original: NoteDocument, updated: NoteDocument) -> DocumentDiff:
    """Compare two documents key by key (order-sensitive) and by body text."""
    changed: list[Any] = []
    for key, value in updated.metadata.items():
        if key not in original.metadata or not _ordered_equal(original.metadata[key], value):
            changed.append(key)
    changed.extend(key for key in original.metadata if key not in updated.metadata)
    if not changed and list(original.metadata) != list(updated.metadata):
        # same entries, different order
        changed.extend(updated.metadata)

    return DocumentDiff(
        has_metadata_changed=original.has_metadata != updated.has_metadata,
        changed_keys=tuple(changed),
        body_changed=original.body != updated.body,
    )


def metadata_equal(left: Mapping[str, Any], right: Mapping[str, Any]) -> bool:
    """Key-order-sensitive equality of two frontmatter mappings."""
    return _ordered_equal(left, right)


def documents_equal(left: NoteDocument, right: NoteDocument) -> bool:
    """Return True when both documents would serialize to equivalent notes."""
    return not diff_documents(left, right).changed


def frontmatter_line_count(document: NoteDocument) -> int:
    """Number of lines the frontmatter block occupies, 0 when there is none."""
    if not document.has_metadata:
        return 0
    return len(split_lines(_render_block(document)))
