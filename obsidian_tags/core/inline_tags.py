"""Inline ``#tag`` tokens in note bodies.

Tokens are recognized line by line. A token is ``#`` followed by a tag, preceded
by whitespace or the start of the line and followed by whitespace, the end of
the line or closing punctuation. Lines inside fenced code blocks and text inside
inline code spans never yield tokens, so removal leaves code untouched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Literal, Optional

from obsidian_tags.constants import CONTEXT_RADIUS
from obsidian_tags.core.frontmatter_tags import prepare_tags
from obsidian_tags.core.note_codec import split_lines
from obsidian_tags.core.tag_matcher import classify_removal
from obsidian_tags.core.tag_normalizer import tag_key
from obsidian_tags.data_models import TagChangeRecord, TagRemovalReport

logger = logging.getLogger(__name__)

# A token also ends before closing punctuation: "#work." is the tag "work", as in Obsidian.
_TOKEN_RE = re.compile(r"(?<!\S)#(?P<tag>[\w-]+(?:/[\w-]+)*)(?=[\s.,;:!?)\]}]|$)")
_QUOTE_RE = re.compile(r"^(?:[ \t]*>)*")
_FENCE_RE = re.compile(r"[ \t]*(?P<fence>`{3,}|~{3,})(?P<info>.*)")
_BACKTICKS_RE = re.compile(r"`+")
_INLINE_WHITESPACE = " \t"


@dataclass(frozen=True)
class InlineTag:
    """A ``#tag`` token found in a note body.

    ``line`` is 1-based; ``start``/``end`` are offsets of the token (including the
    ``#``) within that line.
    """

    tag: str
    line: int
    start: int
    end: int


# ==============================================================================
# TOKENIZATION
# ==============================================================================


def _split_eol(line: str) -> tuple[str, str]:
    if line.endswith("\r\n"):
        return line[:-2], "\r\n"
    if line.endswith("\n"):
        return line[:-1], "\n"
    return line, ""


def _code_spans(content: str) -> list[tuple[int, int]]:
    """Return ``(start, end)`` ranges covered by inline code spans.

    A span opens with a run of backticks and closes at the next run of the same
    length; an unmatched run is literal text.
    """
    runs = [(match.start(), match.end()) for match in _BACKTICKS_RE.finditer(content)]
    spans: list[tuple[int, int]] = []
    index = 0
    while index < len(runs):
        start, end = runs[index]
        length = end - start
        closing = next(
            (j for j in range(index + 1, len(runs)) if runs[j][1] - runs[j][0] == length),
            None,
        )
        if closing is None:
            index += 1
            continue
        spans.append((start, runs[closing][1]))
        index = closing + 1
    return spans


def _line_tokens(content: str, number: int) -> list[InlineTag]:
    spans = _code_spans(content) if "`" in content else []
    tokens: list[InlineTag] = []
    for match in _TOKEN_RE.finditer(content):
        if any(start <= match.start() < end for start, end in spans):
            continue
        tokens.append(InlineTag(tag=match.group("tag"), line=number, start=match.start(), end=match.end()))
    return tokens


def _fence_marker(content: str) -> tuple[int, Optional[re.Match[str]]]:
    """Return the blockquote depth of ``content`` and its code fence match, if any.

    A backtick run followed by more backticks on the same line is an inline code
    span, not a fence.
    """
    quote = _QUOTE_RE.match(content).group(0)
    fence = _FENCE_RE.match(content, len(quote))
    if fence and fence.group("fence")[0] == "`" and "`" in fence.group("info"):
        fence = None
    return quote.count(">"), fence


def _iter_lines(body: str) -> Iterator[tuple[int, str, str, list[InlineTag]]]:
    """Yield ``(line_number, content, line_ending, tokens)`` for every body line.

    Fences may be indented (list items) or quoted (``> ```` in blockquotes and
    callouts). A fence closes on the same marker at the same quote depth, or when
    the enclosing blockquote ends.
    """
    open_fence: str | None = None
    open_depth = 0
    for number, raw_line in enumerate(split_lines(body), start=1):
        content, eol = _split_eol(raw_line)
        depth, fence = _fence_marker(content)

        if open_fence is not None:
            if depth < open_depth:
                open_fence = None
            else:
                if (
                    fence
                    and depth == open_depth
                    and fence.group("fence")[0] == open_fence[0]
                    and len(fence.group("fence")) >= len(open_fence)
                    and not fence.group("info").strip()
                ):
                    open_fence = None
                yield number, content, eol, []
                continue

        if fence:
            open_fence, open_depth = fence.group("fence"), depth
            yield number, content, eol, []
            continue

        yield number, content, eol, _line_tokens(content, number)


def find_inline_tags(body: str) -> list[InlineTag]:
    """Return every inline tag token in ``body`` outside of code, in reading order."""
    return [token for _, _, _, tokens in _iter_lines(body) for token in tokens]


def _context(content: str, start: int, end: int) -> str:
    snippet_start = max(0, start - CONTEXT_RADIUS)
    snippet_end = min(len(content), end + CONTEXT_RADIUS)
    snippet = content[snippet_start:snippet_end].strip()

    if snippet_start > 0:
        snippet = "..." + snippet
    if snippet_end < len(content):
        snippet = snippet + "..."
    return snippet


def _delete_token(content: str, token: InlineTag) -> str:
    """Cut ``token`` out of ``content`` together with one adjacent whitespace."""
    start, end = token.start, token.end
    if end < len(content) and content[end] in _INLINE_WHITESPACE:
        end += 1
    elif start > 0 and content[start - 1] in _INLINE_WHITESPACE:
        start -= 1
    return content[:start] + content[end:]


# ==============================================================================
# INLINE TAG OPERATIONS
# ==============================================================================


def remove_inline_tags(
    body: str,
    targets: Sequence[str],
    *,
    normalize: bool = True,
    preserve_children: bool = False,
    patterns: Sequence[str] = (),
    line_offset: int = 0,
) -> tuple[str, TagRemovalReport]:
    """Delete targeted ``#tag`` tokens from ``body``.

    Tokens are selected with the same rules as frontmatter removal. Each deleted
    token takes one neighbouring space with it; a line left blank becomes empty
    but stays in place so reported line numbers remain valid.

    Args:
        body: Note body (without frontmatter).
        targets: Tags to remove.
        normalize: Compare by normalized form instead of case-insensitively.
        preserve_children: Keep descendants of targets and report them as preserved.
        patterns: Wildcard patterns selecting additional tags to remove.
        line_offset: Added to reported line numbers, e.g. the frontmatter height.

    Returns:
        ``(updated_body, report)``.
    """
    output: list[str] = []
    removed: list[TagChangeRecord] = []
    preserved: list[TagChangeRecord] = []

    for number, content, eol, tokens in _iter_lines(body):
        doomed: list[InlineTag] = []
        for token in tokens:
            decision = classify_removal(
                token.tag,
                targets,
                normalize=normalize,
                preserve_children=preserve_children,
                patterns=patterns,
            )
            if decision is None:
                continue

            record = TagChangeRecord(
                tag=token.tag,
                location="content",
                line=number + line_offset,
                context=_context(content, token.start, token.end),
            )
            if decision == "removed":
                doomed.append(token)
                removed.append(record)
            else:
                preserved.append(record)

        updated = content
        for token in reversed(doomed):
            updated = _delete_token(updated, token)
        if doomed and not updated.strip():
            updated = ""

        output.append(updated + eol)

    if removed:
        logger.debug("Removed %d inline tag(s)", len(removed))
    return "".join(output), TagRemovalReport(removed=tuple(removed), preserved=tuple(preserved))


def insert_inline_tags(
    body: str,
    tags: Sequence[str],
    *,
    normalize: bool = True,
    position: Literal["start", "end"] = "end",
) -> str:
    """Add ``tags`` to ``body`` as a paragraph of ``#tag`` tokens.

    Tags that already appear inline are skipped, so repeating an add leaves the
    note alone instead of appending another tag paragraph; when nothing is left
    ``body`` is returned unchanged. The paragraph is separated from the trimmed body by a blank
    line, before it for ``position="start"`` and after it for ``"end"``.

    Examples:
        >>> insert_inline_tags("Notes here.", ["ProjectActive"], position="start")
        '#project-active\\n\\nNotes here.'
    """
    present = {tag_key(token.tag, normalize) for token in find_inline_tags(body)}
    additions = [tag for tag in prepare_tags(tags, normalize) if tag_key(tag, normalize) not in present]
    if not additions:
        return body

    tag_line = " ".join(f"#{tag}" for tag in additions)
    trimmed = body.strip()

    if not trimmed:
        updated = tag_line
    elif position == "start":
        updated = f"{tag_line}\n\n{trimmed}"
    else:
        updated = f"{trimmed}\n\n{tag_line}"

    if body.endswith("\n"):
        updated += "\n"
    return updated
