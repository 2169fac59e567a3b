"""Tests for extract_content.quality module."""

from extract_content.quality import validate_content_quality

SENTENCE = (
    "Blackstone reported fourth quarter results that reflected strong fundraising across its "
    "real estate, private equity and credit businesses, with inflows driven by institutional "
    "and individual investors alike, while management noted that realizations accelerated "
    "during the period as markets stabilized and transaction activity improved across regions, "
    "supporting distributable earnings growth and continued momentum in the firm's perpetual "
    "capital strategies, which now represent a meaningful share of fee-earning assets under "
    "management for the firm and its limited partners worldwide"
)


def _press_release(sentences: int = 6) -> str:
    return "<p>" + ". ".join([SENTENCE] * sentences) + ".</p>"


class TestValidateContentQuality:
    def test_boilerplate_rejected(self) -> None:
        assert not validate_content_quality("Subscribe to our newsletter for updates")

    def test_full_press_release_accepted(self) -> None:
        content = _press_release(6)
        assert len(content.split()) >= 400
        assert validate_content_quality(content)

    def test_too_few_sentences(self) -> None:
        assert not validate_content_quality(_press_release(2))

    def test_too_few_words(self) -> None:
        text = "Supercalifragilistic announcement. " * 10
        assert not validate_content_quality(text)

    def test_navigation_prefix_rejected(self) -> None:
        assert not validate_content_quality("Share this story. " + _press_release(6))

    def test_javascript_notice_rejected(self) -> None:
        assert not validate_content_quality(_press_release(6) + " Please enable JavaScript to continue.")

    def test_empty(self) -> None:
        assert not validate_content_quality("")
