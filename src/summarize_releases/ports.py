"""Completion service interface consumed by the summarizer."""

from __future__ import annotations

from typing import Optional, Protocol

from summarize_releases.models import Summary


class CompletionService(Protocol):
    def summarize(
        self,
        title: str,
        content: str,
        system_prompt: str,
        user_prompt_template: str,
        company_name: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Summary:
        """Raises `common.errors.CompletionServiceError` on failure."""
        ...
