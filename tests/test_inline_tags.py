"""Tests for inline #tag discovery, removal and insertion."""

from obsidian_tags.core.inline_tags import (
    find_inline_tags,
    insert_inline_tags,
    remove_inline_tags,
)


def _tags(body):
    return [(token.tag, token.line) for token in find_inline_tags(body)]


class TestFindInlineTags:
    """Tokenization of note bodies."""

    def test_finds_tags_with_line_numbers(self):
        body = "First #alpha line\nno tags\n#beta/gamma at start\n"
        assert _tags(body) == [("alpha", 1), ("beta/gamma", 3)]

    def test_trailing_punctuation_ends_token(self):
        assert _tags("Tagged #work, #home. Done (#x)\n") == [("work", 1), ("home", 1)]

    def test_requires_whitespace_before_hash(self):
        assert _tags("email me@host#frag and a#b\n") == []

    def test_headings_are_not_tags(self):
        assert _tags("# Title\n## Section\n") == []

    def test_fenced_code_is_ignored(self):
        body = "```python\n#comment\n```\n#real\n"
        assert _tags(body) == [("real", 4)]

    def test_tilde_fence_is_ignored(self):
        body = "~~~\n#hidden\n~~~\n#shown\n"
        assert _tags(body) == [("shown", 4)]

    def test_fence_closes_only_on_same_marker(self):
        body = "```\n~~~\n#still-code\n```\n#after\n"
        assert _tags(body) == [("after", 5)]

    def test_inline_code_span_is_ignored(self):
        assert _tags("See `run #notatag now` and #tag\n") == [("tag", 1)]

    def test_fence_indented_in_list_item_is_ignored(self):
        body = "- step\n\n    ```c\n    #include <stdio.h>\n    ```\n#after\n"
        assert _tags(body) == [("after", 6)]

    def test_fence_inside_blockquote_is_ignored(self):
        body = "> [!note]\n> ```c\n> #include <stdio.h>\n> ```\n> #quoted\n"
        assert _tags(body) == [("quoted", 5)]

    def test_quoted_fence_closes_when_blockquote_ends(self):
        body = "> ```\n> #code\n\n#real\n"
        assert _tags(body) == [("real", 4)]

    def test_triple_backtick_span_on_one_line_is_not_a_fence(self):
        assert _tags("```x``` #tag\nnext #line\n") == [("tag", 1), ("line", 2)]

    def test_unmatched_backtick_is_plain_text(self):
        assert _tags("a ` stray #tag\n") == [("tag", 1)]

    def test_offsets_cover_the_token(self):
        token = find_inline_tags("Some #thing here")[0]
        assert "Some #thing here"[token.start:token.end] == "#thing"


class TestRemoveInlineTags:
    """Removing inline tags."""

    def test_pattern_removal_keeps_other_tags(self):
        body = "Intro\nArchive notes #archive/2023 #archive/2024/q1 #keep\n"
        updated, report = remove_inline_tags(body, [], patterns=["archive/*"])

        assert updated == "Intro\nArchive notes #keep\n"
        assert [(r.tag, r.line) for r in report.removed] == [
            ("archive/2023", 2),
            ("archive/2024/q1", 2),
        ]
        assert all(r.location == "content" for r in report.removed)

    def test_tag_at_line_end_takes_preceding_space(self):
        updated, _ = remove_inline_tags("text #old\n", ["old"])
        assert updated == "text\n"

    def test_line_left_blank_becomes_empty(self):
        updated, _ = remove_inline_tags("Intro\n  #gone  \nEnd\n", ["gone"])
        assert updated == "Intro\n\nEnd\n"

    def test_untouched_lines_are_byte_identical(self):
        body = "  indented #keep   \r\nline #drop\r\n"
        updated, _ = remove_inline_tags(body, ["drop"])
        assert updated == "  indented #keep   \r\nline\r\n"

    def test_code_is_untouched(self):
        body = "```\n#archive/2023\n```\nSee `run #archive/2024 now` and #archive/2025\n"
        updated, report = remove_inline_tags(body, [], patterns=["archive/*"])

        assert updated == "```\n#archive/2023\n```\nSee `run #archive/2024 now` and\n"
        assert [r.tag for r in report.removed] == ["archive/2025"]

    def test_preserve_children(self):
        updated, report = remove_inline_tags(
            "#project #project/alpha\n",
            ["project"],
            preserve_children=True,
        )
        assert updated == "#project/alpha\n"
        assert [r.tag for r in report.removed] == ["project"]
        assert [r.tag for r in report.preserved] == ["project/alpha"]

    def test_descendants_removed_by_default(self):
        updated, report = remove_inline_tags("#project #project/alpha end\n", ["project"])
        assert updated == "end\n"
        assert len(report.removed) == 2

    def test_line_offset_shifts_reported_lines(self):
        _, report = remove_inline_tags("#a\n", ["a"], line_offset=3)
        assert report.removed[0].line == 4

    def test_context_is_trimmed_around_token(self):
        content = "x" * 60 + " #old " + "y" * 60
        _, report = remove_inline_tags(content, ["old"])
        context = report.removed[0].context

        assert context.startswith("...")
        assert context.endswith("...")
        assert "#old" in context

    def test_short_line_context_is_whole_line(self):
        _, report = remove_inline_tags("Short line #old here\n", ["old"])
        assert report.removed[0].context == "Short line #old here"

    def test_code_in_indented_and_quoted_fences_is_untouched(self):
        body = (
            "- step\n\n    ```c\n    #include <stdio.h>\n    ```\n"
            "> ```c\n> #include <stdio.h>\n> ```\n"
        )
        updated, report = remove_inline_tags(body, ["include"])
        assert updated == body
        assert report.removed == ()

    def test_closing_punctuation_stays_in_place(self):
        updated, report = remove_inline_tags("Done with #work.\n", ["work"])
        assert updated == "Done with.\n"
        assert [r.tag for r in report.removed] == ["work"]

    def test_no_match_leaves_body_alone(self):
        body = "Nothing #here\n"
        updated, report = remove_inline_tags(body, ["other"])
        assert updated == body
        assert report.removed == () and report.preserved == ()


class TestInsertInlineTags:
    """Adding inline tags."""

    def test_start_position(self):
        assert insert_inline_tags("Notes here.", ["ProjectActive"], position="start") == (
            "#project-active\n\nNotes here."
        )

    def test_end_position_keeps_trailing_newline(self):
        assert insert_inline_tags("Body\n", ["a", "b"]) == "Body\n\n#a #b\n"

    def test_existing_inline_tags_are_skipped(self):
        assert insert_inline_tags("Has #a\n", ["a"]) == "Has #a\n"
        assert insert_inline_tags("Has #a\n", ["A", "b"]) == "Has #a\n\n#b\n"

    def test_empty_body(self):
        assert insert_inline_tags("", ["x"]) == "#x"

    def test_without_normalization_spelling_is_kept(self):
        assert insert_inline_tags("Body", ["ProjectActive"], normalize=False) == "Body\n\n#ProjectActive"

    def test_duplicate_requests_collapse(self):
        assert insert_inline_tags("Body", ["a", "A", "#a"]) == "Body\n\n#a"
