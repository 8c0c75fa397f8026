"""Unit tests for block content and config validation."""

import pytest

from humans.domain.exceptions import BlockContentError
from humans.domain.services import validate_block_config, validate_block_content
from humans.domain.services.block_content import build_outline, reading_time_minutes


class TestValidateBlockContent:
    def test_bio_content(self):
        content = validate_block_content(
            "bio",
            {"display_name": "Alice", "links": [{"label": "Site", "url": "https://a.example"}]},
        )
        assert content == {
            "display_name": "Alice",
            "links": [{"label": "Site", "url": "https://a.example"}],
        }

    def test_links_content(self):
        content = validate_block_content(
            "links", {"items": [{"title": "Blog", "url": "https://blog.example"}]}
        )
        assert content["items"][0]["title"] == "Blog"

    def test_content_list_rejects_unknown_item_type(self):
        with pytest.raises(BlockContentError) as exc_info:
            validate_block_content("content_list", {"items": [{"title": "X", "type": "movie"}]})
        assert exc_info.value.code == "invalid_content"
        assert exc_info.value.field.startswith("content.items")

    def test_unknown_keys_are_rejected(self):
        with pytest.raises(BlockContentError) as exc_info:
            validate_block_content("links", {"items": [], "extra": True})
        assert exc_info.value.code == "invalid_content"

    def test_text_requires_text(self):
        with pytest.raises(BlockContentError):
            validate_block_content("text", {})

    def test_unknown_block_type(self):
        with pytest.raises(BlockContentError) as exc_info:
            validate_block_content("poll", {})
        assert exc_info.value.code == "unknown_block_type"

    @pytest.mark.parametrize("block_type", ["media", "gallery"])
    def test_reserved_block_types_are_unsupported(self, block_type):
        with pytest.raises(BlockContentError) as exc_info:
            validate_block_content(block_type, {})
        assert exc_info.value.code == "unsupported_block_type"


class TestTextMetrics:
    def test_metrics_are_derived_from_text(self):
        content = validate_block_content(
            "text", {"text": "one two three", "word_count": 999, "reading_time": 42}
        )
        assert content["word_count"] == 3
        assert content["reading_time"] == 1
        assert content["outline"] == []

    def test_metrics_prefer_html(self):
        markup = "<h2>Intro</h2><p>Hello and welcome</p>"
        content = validate_block_content(
            "text", {"text": "ignored", "html": markup, "formatting": "rich"}
        )
        assert content["word_count"] == 4
        assert content["outline"] == [
            {"id": "heading-0", "level": 2, "text": "Intro", "anchor": "#heading-0"}
        ]

    def test_reading_time_rounds_up(self):
        assert reading_time_minutes(0) == 0
        assert reading_time_minutes(200) == 1
        assert reading_time_minutes(201) == 2

    def test_outline_ignores_h5_and_keeps_ids_unique(self):
        markup = "<h1>A</h1><h5>skip</h5><h1>A</h1>"
        outline = build_outline(markup)
        assert [entry.level for entry in outline] == [1, 1]
        assert outline[0].id != outline[1].id


class TestValidateBlockConfig:
    def test_keeps_unknown_keys(self):
        assert validate_block_config({"size": "large", "accent": "red"}) == {
            "size": "large",
            "accent": "red",
        }

    def test_none_is_empty(self):
        assert validate_block_config(None) == {}

    def test_invalid_size(self):
        with pytest.raises(BlockContentError) as exc_info:
            validate_block_config({"size": "huge"})
        assert exc_info.value.code == "invalid_config"
        assert exc_info.value.field == "config.size"
