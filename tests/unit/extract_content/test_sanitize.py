"""Tests for extract_content.sanitize module."""

from extract_content.sanitize import (
    extract_text_content,
    highlight_financial_terms,
    process_html_content,
    sanitize_html,
    validate_html_safety,
)


class TestSanitizeHtml:
    def test_keeps_allowed_tags_only(self) -> None:
        html = '<div class="body"><p onclick="track()">Hi <b>there</b></p><script>alert(1)</script></div>'
        assert sanitize_html(html) == "<p>Hi <strong>there</strong></p>"

    def test_italic_becomes_em(self) -> None:
        assert sanitize_html("<p><i>Note</i></p>") == "<p><em>Note</em></p>"

    def test_link_attributes(self) -> None:
        result = sanitize_html('<a href="https://example.com" rel="nofollow" target="_blank">x</a>')
        assert 'href="https://example.com"' in result
        assert 'target="_blank"' in result
        assert "rel=" not in result

    def test_scripting_href_dropped(self) -> None:
        result = sanitize_html('<a href="javascript:alert(1)">x</a>')
        assert "javascript" not in result
        assert ">x</a>" in result

    def test_wire_artifacts_removed(self) -> None:
        html = (
            '<p>Contact <span class="__cf_email__">[email&#160;protected]</span></p>'
            '<img src="https://rt.prnewswire.com/rt.gif?NewsItemId=1" style="width: 1px">'
            '<p><a href="/cdn-cgi/l/email-protection#abc">Email us</a></p>'
        )
        result = sanitize_html(html)
        assert "protected" not in result
        assert "rt.prnewswire" not in result
        assert "cdn-cgi" not in result
        assert "Email us" in result

    def test_empty_paragraphs_removed(self) -> None:
        assert sanitize_html("<p>   </p><p>Keep</p>") == "<p>Keep</p>"

    def test_comments_removed(self) -> None:
        assert "tracking" not in sanitize_html("<p>Body<!-- tracking --></p>")

    def test_empty_input(self) -> None:
        assert sanitize_html("") == ""


class TestExtractTextContent:
    def test_decodes_entities_and_collapses(self) -> None:
        assert extract_text_content("<p>A&amp;B</p>\n<p>Next&nbsp;line</p>") == "A&B Next line"

    def test_drops_scripts(self) -> None:
        assert extract_text_content("<p>Body</p><script>var x = 1;</script>") == "Body"


class TestHighlightFinancialTerms:
    def test_money_and_percentages(self) -> None:
        result = highlight_financial_terms("Revenue of $250 million reflected 12% growth")
        assert '<mark class="highlight-financial">$250 million</mark>' in result
        assert '<mark class="highlight-percentage">12% growth</mark>' in result


class TestValidateHtmlSafety:
    def test_detects_event_handlers(self) -> None:
        assert not validate_html_safety('<p onclick="x()">Hi</p>')
        assert not validate_html_safety('<iframe src="x"></iframe>')

    def test_clean_html(self) -> None:
        assert validate_html_safety("<p>Hi</p>")


class TestProcessHtmlContent:
    def test_valid_fragment(self) -> None:
        result = process_html_content("<div><p>Assets reached $1,300 billion.</p></div>")
        assert result.is_valid
        assert result.sanitized_html.startswith("<p>")
        assert "highlight-financial" in result.sanitized_html
        assert result.text_content == "Assets reached $1,300 billion."

    def test_highlighting_can_be_disabled(self) -> None:
        result = process_html_content("<p>Assets reached $1,300 billion.</p>", enable_highlighting=False)
        assert "<mark" not in result.sanitized_html

    def test_empty_input_is_invalid(self) -> None:
        result = process_html_content("")
        assert not result.is_valid
        assert result.sanitized_html == ""
