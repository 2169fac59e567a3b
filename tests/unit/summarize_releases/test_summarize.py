"""Tests for summarize_releases.summarize module."""

import json
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from common.errors import CompletionErrorKind, CompletionServiceError
from summarize_releases.models import HighlightType, Summary
from summarize_releases.prompts import DEFAULT_SYSTEM_PROMPT, DEFAULT_USER_PROMPT_TEMPLATE
from summarize_releases.summarize import (
    FALLBACK_KEY_POINT,
    FALLBACK_SUMMARY,
    OpenAICompletionService,
    _map_api_error,
    locate_highlight,
    parse_summary_response,
    summarize_release,
)

CONTENT = (
    "Blackstone reported revenue of $2.1 billion for the fourth quarter. "
    "The firm plans to expand its private credit platform into Asia. "
    "Rising interest rates may pressure real estate valuations."
)

RESPONSE = {
    "summary": "Blackstone posted strong results and outlined expansion plans.",
    "keyPoints": ["Revenue of $2.1 billion", "Expansion into Asia"],
    "highlights": [
        {"type": "financial", "text": "revenue of $2.1 billion", "reasoning": "headline number"},
        {"type": "OPPORTUNITY", "text": "expand its private credit platform into Asia", "reasoning": "growth"},
        {"type": "risk", "text": "text that does not appear anywhere", "reasoning": "hallucinated"},
        {"type": "sentiment", "text": "Blackstone reported", "reasoning": "unknown category"},
    ],
}


def _status_error(cls, status: int):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return cls("error", response=httpx.Response(status, request=request), body=None)


def _completion(content, prompt_tokens=120, completion_tokens=40):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    return response


class TestLocateHighlight:
    def test_case_insensitive(self) -> None:
        start, end = locate_highlight("REVENUE OF $2.1 BILLION", CONTENT)
        assert CONTENT[start:end] == "revenue of $2.1 billion"

    def test_partial_match_on_leading_words(self) -> None:
        span = locate_highlight("Rising interest rates may pressure office valuations", CONTENT)
        assert span is not None
        assert CONTENT[span[0]:].startswith("Rising interest rates may")

    def test_partial_match_near_end_stays_inside_content(self) -> None:
        text = "Rising interest rates may pressure real estate across global markets"
        start, end = locate_highlight(text, CONTENT)
        assert end == len(CONTENT)
        assert CONTENT[start:end] == "Rising interest rates may pressure real estate valuations."

    def test_partial_highlight_text_matches_its_span(self) -> None:
        raw = [{"type": "risk", "text": "Rising interest rates may pressure real estate across global markets"}]
        summary = parse_summary_response(json.dumps({"summary": "s", "keyPoints": ["k"], "highlights": raw}), CONTENT)
        (highlight,) = summary.highlights
        assert highlight.end <= len(CONTENT)
        assert CONTENT[highlight.start:highlight.end] == highlight.text

    def test_short_text_needs_exact_match(self) -> None:
        assert locate_highlight("falling interest rates", CONTENT) is None


class TestParseSummaryResponse:
    def test_valid_json(self) -> None:
        summary = parse_summary_response(json.dumps(RESPONSE), CONTENT)

        assert summary.summary == RESPONSE["summary"]
        assert summary.key_points == RESPONSE["keyPoints"]
        assert [h.type for h in summary.highlights] == [HighlightType.FINANCIAL, HighlightType.OPPORTUNITY]
        for highlight in summary.highlights:
            assert CONTENT[highlight.start:highlight.end] == highlight.text

    def test_json_inside_prose(self) -> None:
        text = "Here is the analysis:\n" + json.dumps({"summary": "Short.", "key_points": ["One"]}) + "\nDone."
        summary = parse_summary_response(text, CONTENT)
        assert summary.summary == "Short."
        assert summary.key_points == ["One"]
        assert summary.highlights == []

    def test_malformed_json_keeps_summary_field(self) -> None:
        summary = parse_summary_response('{"summary": "Results were strong", "keyPoints": [', CONTENT)
        assert summary.summary == "Results were strong"
        assert summary.key_points == [FALLBACK_KEY_POINT]

    def test_no_json(self) -> None:
        summary = parse_summary_response("I cannot help with that.", CONTENT)
        assert summary.summary == FALLBACK_SUMMARY
        assert summary.key_points == [FALLBACK_KEY_POINT]


class TestMapApiError:
    @pytest.mark.parametrize(
        "cls, status, kind",
        [
            (openai.AuthenticationError, 401, CompletionErrorKind.INVALID_CREDENTIAL),
            (openai.RateLimitError, 429, CompletionErrorKind.RATE_LIMITED),
            (openai.BadRequestError, 400, CompletionErrorKind.MALFORMED_REQUEST),
            (openai.InternalServerError, 503, CompletionErrorKind.UPSTREAM_UNAVAILABLE),
            (openai.NotFoundError, 404, CompletionErrorKind.MALFORMED_REQUEST),
        ],
    )
    def test_status_errors(self, cls, status, kind) -> None:
        assert _map_api_error(_status_error(cls, status)).kind == kind

    def test_connection_error(self) -> None:
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        error = _map_api_error(openai.APIConnectionError(request=request))
        assert error.kind == CompletionErrorKind.UPSTREAM_UNAVAILABLE
        assert not error.is_actionable


class TestOpenAICompletionService:
    def test_summarize(self) -> None:
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(json.dumps(RESPONSE))
        service = OpenAICompletionService(client=client, model="gpt-4o-mini")

        summary = service.summarize("Q4 Results", CONTENT, company_name="Blackstone", date="2025-01-30")

        assert summary.summary == RESPONSE["summary"]
        assert len(summary.highlights) == 2
        assert (summary.input_tokens, summary.output_tokens) == (120, 40)

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0]["role"] == "system"
        assert "Company: Blackstone" in kwargs["messages"][1]["content"]
        assert CONTENT in kwargs["messages"][1]["content"]

    def test_requires_title_and_content(self) -> None:
        service = OpenAICompletionService(client=MagicMock())
        with pytest.raises(CompletionServiceError) as exc_info:
            service.summarize("", CONTENT)
        assert exc_info.value.kind == CompletionErrorKind.MALFORMED_REQUEST

    def test_empty_completion(self) -> None:
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("")
        with pytest.raises(CompletionServiceError) as exc_info:
            OpenAICompletionService(client=client).summarize("Q4 Results", CONTENT)
        assert exc_info.value.kind == CompletionErrorKind.NO_CONTENT
        assert exc_info.value.message == "No analysis content received"

    def test_api_error_is_mapped(self) -> None:
        client = MagicMock()
        client.chat.completions.create.side_effect = _status_error(openai.RateLimitError, 429)
        with pytest.raises(CompletionServiceError) as exc_info:
            OpenAICompletionService(client=client).summarize("Q4 Results", CONTENT)
        assert exc_info.value.kind == CompletionErrorKind.RATE_LIMITED
        assert exc_info.value.is_actionable

    def test_missing_api_key(self, monkeypatch) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(CompletionServiceError) as exc_info:
            OpenAICompletionService().summarize("Q4 Results", CONTENT)
        assert exc_info.value.kind == CompletionErrorKind.INVALID_CREDENTIAL


class FakeCompletionService:
    def __init__(self):
        self.calls = []

    def summarize(self, title, content, system_prompt, user_prompt_template, company_name=None, date=None):
        self.calls.append((title, system_prompt, user_prompt_template, company_name))
        return Summary(summary=f"Summary of {title}")


class TestSummarizeRelease:
    def test_uses_default_prompts(self) -> None:
        service = FakeCompletionService()
        summary = summarize_release("Q4 Results", CONTENT, service, company_name="Blackstone")

        assert summary.summary == "Summary of Q4 Results"
        ((title, system_prompt, template, company),) = service.calls
        assert system_prompt == DEFAULT_SYSTEM_PROMPT
        assert template == DEFAULT_USER_PROMPT_TEMPLATE
        assert company == "Blackstone"

    def test_custom_prompts(self) -> None:
        service = FakeCompletionService()
        summarize_release("Q4", CONTENT, service, system_prompt="Be brief.", user_prompt_template="{{TITLE}}")
        assert service.calls[0][1:3] == ("Be brief.", "{{TITLE}}")
