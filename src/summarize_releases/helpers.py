"""Helper functions for summarize_releases CLI."""

from __future__ import annotations

import argparse
from pathlib import Path

from common.cli_helpers import add_common_args
from common.config import get_config
from summarize_releases.summarize import OpenAICompletionService


def read_content(content: str | None, content_file: str | None) -> str:
    '''Release content from --content or --content-file.'''

    if content_file:
        return Path(content_file).read_text(encoding="utf-8")
    return content or ""


def build_completion_service(model: str | None = None) -> OpenAICompletionService:
    '''OpenAI service configured from the loaded config. `model` overrides the configured one.'''

    config = get_config().summarize
    return OpenAICompletionService(
        model=model or config.model,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )


def parse_summarize_releases_args() -> argparse.Namespace:
    '''Parse CLI arguments for summarize_releases.'''

    parser = argparse.ArgumentParser(description="Summarize a press release with an LLM.")
    parser.add_argument("--title", required=True)
    parser.add_argument("--content", default=None)
    parser.add_argument("--content-file", default=None, help="Read release content from this file.")
    parser.add_argument("--company-name", default=None)
    parser.add_argument("--date", default=None)
    parser.add_argument("--model", default=None, help="OpenAI model to use (default: from config).")
    add_common_args(parser)
    return parser.parse_args()
