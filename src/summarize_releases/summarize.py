"""Summarize press releases through the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Optional

import openai
from openai import OpenAI

from common.errors import CompletionErrorKind, CompletionServiceError
from summarize_releases.models import Highlight, HighlightType, Summary
from summarize_releases.ports import CompletionService
from summarize_releases.prompts import DEFAULT_SYSTEM_PROMPT, DEFAULT_USER_PROMPT_TEMPLATE, process_template

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
FALLBACK_SUMMARY = "Analysis completed but formatting error occurred"
FALLBACK_KEY_POINT = "Analysis completed with formatting issues"

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_SUMMARY_FIELD_RE = re.compile(r"""summary['"]\s*:\s*['"]([^'"]+)['"]""", re.IGNORECASE)


def _map_api_error(error: openai.OpenAIError) -> CompletionServiceError:
    if isinstance(error, openai.AuthenticationError):
        kind = CompletionErrorKind.INVALID_CREDENTIAL
    elif isinstance(error, openai.RateLimitError):
        kind = CompletionErrorKind.RATE_LIMITED
    elif isinstance(error, openai.BadRequestError):
        kind = CompletionErrorKind.MALFORMED_REQUEST
    elif isinstance(error, openai.APIConnectionError):
        kind = CompletionErrorKind.UPSTREAM_UNAVAILABLE
    elif isinstance(error, openai.APIStatusError) and error.status_code >= 500:
        kind = CompletionErrorKind.UPSTREAM_UNAVAILABLE
    else:
        kind = CompletionErrorKind.MALFORMED_REQUEST
    return CompletionServiceError(kind, str(error))


def locate_highlight(text: str, content: str) -> Optional[tuple[int, int]]:
    """Find `text` in `content` case-insensitively.

    Long highlights (more than three words) that do not match exactly are
    retried with their leading 70% of words. Returns (start, end) or None.
    """
    search = text.strip()
    content_lower = content.lower()
    start = content_lower.find(search.lower())

    if start == -1:
        words = search.split()
        if len(words) > 3:
            keep = -(-len(words) * 7 // 10)
            start = content_lower.find(" ".join(words[:keep]).lower())

    if start == -1:
        return None
    return start, min(start + len(search), len(content))


def _parse_highlights(raw: Any, content: str) -> list[Highlight]:
    highlights = []
    if not isinstance(raw, list):
        return highlights

    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("text") or not entry.get("type"):
            continue
        try:
            kind = HighlightType(str(entry["type"]).lower())
        except ValueError:
            logger.warning("Dropping highlight with unknown type: %s", entry["type"])
            continue

        span = locate_highlight(str(entry["text"]), content)
        if span is None:
            logger.warning("Could not find highlight text in content: %.50s", entry["text"])
            continue

        start, end = span
        highlights.append(Highlight(type=kind, text=content[start:end], start=start, end=end))
    return highlights


def parse_summary_response(text: str, content: str) -> Summary:
    """Parse the model's JSON answer, falling back to a minimal summary when it is malformed."""
    match = _JSON_OBJECT_RE.search(text)
    try:
        if not match:
            raise ValueError("No JSON found in completion response")
        data = json.loads(match.group(0))
        if not isinstance(data, dict):
            raise ValueError("Completion response is not a JSON object")
    except ValueError as e:
        logger.error("Failed to parse completion JSON: %s", e)
        summary_match = _SUMMARY_FIELD_RE.search(text)
        return Summary(
            summary=summary_match.group(1) if summary_match else FALLBACK_SUMMARY,
            key_points=[FALLBACK_KEY_POINT],
        )

    key_points = data.get("keyPoints") or data.get("key_points") or []
    return Summary(
        summary=data.get("summary") or "Analysis completed",
        key_points=[str(point) for point in key_points] if isinstance(key_points, list) else [],
        highlights=_parse_highlights(data.get("highlights"), content),
    )


class OpenAICompletionService:
    """CompletionService backed by OpenAI chat completions in JSON mode."""

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ):
        self._client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise CompletionServiceError(CompletionErrorKind.INVALID_CREDENTIAL, "OPENAI_API_KEY is not set")
            self._client = OpenAI(api_key=api_key)
        return self._client

    def summarize(
        self,
        title: str,
        content: str,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        user_prompt_template: str = DEFAULT_USER_PROMPT_TEMPLATE,
        company_name: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Summary:
        """Summarize one release.

        Raises:
            CompletionServiceError: With the kind matching the failure.
        """
        if not title or not content:
            raise CompletionServiceError(CompletionErrorKind.MALFORMED_REQUEST, "Content and title are required")

        logger.info("Analyzing press release: %.50s", title)
        user_prompt = process_template(user_prompt_template, title, content, company_name, date)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            error = _map_api_error(e)
            logger.error("Completion request failed (%s): %s", error.kind.value, e)
            raise error from e

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise CompletionServiceError(CompletionErrorKind.NO_CONTENT)

        summary = parse_summary_response(text, content)
        if response.usage is not None:
            summary.input_tokens = response.usage.prompt_tokens or 0
            summary.output_tokens = response.usage.completion_tokens or 0

        logger.info("Analysis complete: %d highlights found", len(summary.highlights))
        return summary


def summarize_release(
    title: str,
    content: str,
    service: Optional[CompletionService] = None,
    company_name: Optional[str] = None,
    date: Optional[str] = None,
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    user_prompt_template: str = DEFAULT_USER_PROMPT_TEMPLATE,
) -> Summary:
    """Summarize with the default prompts unless custom ones are given."""
    service = service or OpenAICompletionService()
    return service.summarize(
        title,
        content,
        system_prompt=system_prompt,
        user_prompt_template=user_prompt_template,
        company_name=company_name,
        date=date,
    )
