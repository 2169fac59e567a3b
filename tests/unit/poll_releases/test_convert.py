"""Tests for poll_releases.convert module."""

import pytest

from poll_releases.convert import convert_item_to_release, is_valid_item, process_feed_items

RSS_SOURCE = "https://www.prnewswire.com/rss/news-releases-list.rss"


def _item(**overrides) -> dict:
    item = {
        "title": "  Blackstone Announces Record Q4 2024 Results ",
        "description": "<p>Blackstone reported fourth quarter   earnings.</p>",
        "link": "https://www.prnewswire.com/news-releases/blackstone-q4.html",
        "published_at": "Thu, 30 Jan 2025 11:45:00 GMT",
    }
    item.update(overrides)
    return item


class TestIsValidItem:
    def test_complete_item(self) -> None:
        assert is_valid_item(_item())

    @pytest.mark.parametrize("field", ["title", "description", "link", "published_at"])
    def test_missing_or_blank_field(self, field: str) -> None:
        assert not is_valid_item(_item(**{field: "   "}))
        assert not is_valid_item(_item(**{field: None}))

    def test_none(self) -> None:
        assert not is_valid_item(None)


class TestConvertItemToRelease:
    def test_fields(self) -> None:
        release = convert_item_to_release(_item(), "bx", RSS_SOURCE)

        assert release.company_id == "bx"
        assert release.title == "Blackstone Announces Record Q4 2024 Results"
        assert release.content == "Blackstone reported fourth quarter earnings."
        assert release.summary == release.content
        assert release.published_at == "2025-01-30T11:45:00.000Z"
        assert release.rss_source_url == RSS_SOURCE
        assert len(release.content_hash) == 64

    def test_long_content_summary_is_truncated(self) -> None:
        release = convert_item_to_release(_item(description="word " * 100), "bx", RSS_SOURCE)
        assert len(release.summary) == 200
        assert release.summary.endswith("...")
        assert release.content.startswith(release.summary[:-3])

    def test_bad_date_raises(self) -> None:
        with pytest.raises(ValueError):
            convert_item_to_release(_item(published_at="sometime soon"), "bx", RSS_SOURCE)


class TestProcessFeedItems:
    def test_counts_skipped(self) -> None:
        items = [
            _item(),
            _item(title=""),
            _item(published_at="not a date"),
            _item(link="https://www.prnewswire.com/news-releases/other.html", title="Second release"),
        ]
        result = process_feed_items(items, "bx", RSS_SOURCE)

        assert [r.title for r in result.releases] == [
            "Blackstone Announces Record Q4 2024 Results",
            "Second release",
        ]
        assert result.skipped == 2

    def test_empty(self) -> None:
        result = process_feed_items([], "bx", RSS_SOURCE)
        assert result.releases == []
        assert result.skipped == 0
