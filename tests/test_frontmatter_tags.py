"""Tests for editing the frontmatter tag list."""

import pytest

from obsidian_tags.core.frontmatter_tags import (
    add_frontmatter_tags,
    get_frontmatter_tags,
    prepare_tags,
    remove_frontmatter_tags,
)


class TestGetFrontmatterTags:
    """Reading the tag field in its different shapes."""

    def test_list_field(self):
        assert get_frontmatter_tags({"tags": ["a", "b/c"]}) == ["a", "b/c"]

    def test_string_field_split_on_commas_and_spaces(self):
        assert get_frontmatter_tags({"tags": "a b,c,  d"}) == ["a", "b", "c", "d"]

    def test_missing_or_empty_field(self):
        assert get_frontmatter_tags({}) == []
        assert get_frontmatter_tags({"tags": None}) == []

    def test_scalar_field(self):
        assert get_frontmatter_tags({"tags": 2024}) == ["2024"]


class TestPrepareTags:
    def test_normalizes_and_drops_duplicates(self):
        assert prepare_tags(["ProjectActive", "project-active", "#Work"], normalize=True) == [
            "project-active",
            "work",
        ]

    def test_keeps_spelling_without_normalization(self):
        assert prepare_tags(["ProjectActive", "projectactive"], normalize=False) == ["ProjectActive"]


class TestAddFrontmatterTags:
    """Adding tags to the frontmatter."""

    def test_creates_tags_field(self):
        result = add_frontmatter_tags({"title": "A"}, ["ProjectActive"])
        assert result == {"title": "A", "tags": ["project-active"]}
        assert list(result) == ["title", "tags"]

    def test_appends_after_existing_tags(self):
        result = add_frontmatter_tags({"tags": ["Work", "home"]}, ["new"])
        assert result["tags"] == ["Work", "home", "new"]

    def test_existing_tag_is_not_duplicated(self):
        metadata = {"tags": ["work"]}
        assert add_frontmatter_tags(metadata, ["Work", "#work"]) == metadata

    def test_normalized_duplicate_is_detected(self):
        metadata = {"tags": ["project-active"]}
        assert add_frontmatter_tags(metadata, ["ProjectActive"]) == metadata

    def test_without_normalization_only_case_is_ignored(self):
        result = add_frontmatter_tags({"tags": ["project-active"]}, ["ProjectActive"], normalize=False)
        assert result["tags"] == ["project-active", "ProjectActive"]

    def test_string_field_becomes_list_when_extended(self):
        result = add_frontmatter_tags({"tags": "a, b"}, ["c"])
        assert result["tags"] == ["a", "b", "c"]

    def test_string_field_untouched_when_nothing_added(self):
        result = add_frontmatter_tags({"tags": "a, b"}, ["a"])
        assert result["tags"] == "a, b"

    def test_input_is_not_mutated(self):
        metadata = {"tags": ["a"], "nested": {"x": [1]}}
        add_frontmatter_tags(metadata, ["b"])
        assert metadata == {"tags": ["a"], "nested": {"x": [1]}}


class TestRemoveFrontmatterTags:
    """Removing tags from the frontmatter."""

    def test_preserve_children_keeps_descendants(self):
        metadata, report = remove_frontmatter_tags(
            {"tags": ["work", "project/alpha"]},
            ["project"],
            preserve_children=True,
        )
        assert metadata["tags"] == ["work", "project/alpha"]
        assert report.removed == ()
        assert [record.tag for record in report.preserved] == ["project/alpha"]
        assert report.preserved[0].location == "frontmatter"

    def test_preserve_children_removes_parent(self):
        metadata, report = remove_frontmatter_tags(
            {"tags": ["work", "project", "project/alpha"]},
            ["project"],
            preserve_children=True,
        )
        assert metadata["tags"] == ["work", "project/alpha"]
        assert [record.tag for record in report.removed] == ["project"]
        assert [record.tag for record in report.preserved] == ["project/alpha"]

    def test_descendants_removed_by_default(self):
        metadata, report = remove_frontmatter_tags(
            {"tags": ["work", "project", "project/alpha", "project/alpha/x"]},
            ["project"],
        )
        assert metadata["tags"] == ["work"]
        assert [record.tag for record in report.removed] == [
            "project",
            "project/alpha",
            "project/alpha/x",
        ]
        assert report.preserved == ()

    def test_every_tag_is_kept_or_removed(self):
        original = ["a", "b/c", "archive/2023", "Keep", "b"]
        metadata, report = remove_frontmatter_tags(
            {"tags": original},
            ["b"],
            patterns=["archive/*"],
        )
        removed = [record.tag for record in report.removed]
        assert sorted(metadata["tags"] + removed) == sorted(original)
        assert metadata["tags"] == ["a", "Keep"]

    def test_pattern_removal(self):
        metadata, report = remove_frontmatter_tags(
            {"tags": ["archive/2023", "archive/2024/q1", "keep"]},
            [],
            patterns=["archive/*"],
        )
        assert metadata["tags"] == ["keep"]
        assert len(report.removed) == 2

    def test_case_insensitive_without_normalization(self):
        metadata, report = remove_frontmatter_tags({"tags": ["Work"]}, ["work"], normalize=False)
        assert metadata["tags"] == []
        assert report.removed[0].tag == "Work"

    def test_string_field_rewritten_as_list(self):
        metadata, _ = remove_frontmatter_tags({"tags": "work, project"}, ["work"])
        assert metadata["tags"] == ["project"]

    def test_field_shape_kept_when_nothing_removed(self):
        metadata, report = remove_frontmatter_tags({"tags": "work, project"}, ["other"])
        assert metadata["tags"] == "work, project"
        assert report.removed == () and report.preserved == ()

    @pytest.mark.parametrize("metadata", [{}, {"title": "A"}, {"tags": None}])
    def test_missing_field_is_a_no_op(self, metadata):
        updated, report = remove_frontmatter_tags(metadata, ["work"])
        assert updated == metadata
        assert report.removed == ()

    def test_input_is_not_mutated(self):
        metadata = {"tags": ["a", "b"]}
        remove_frontmatter_tags(metadata, ["a"])
        assert metadata == {"tags": ["a", "b"]}
