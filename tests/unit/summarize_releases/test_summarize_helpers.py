"""Tests for summarize_releases.helpers module."""

import pytest

from common.config import parse_config, reset_config, set_config
from summarize_releases.helpers import build_completion_service, read_content


@pytest.fixture(autouse=True)
def _reset_config():
    yield
    reset_config()


class TestBuildCompletionService:
    def test_uses_loaded_config(self) -> None:
        set_config(parse_config({"summarize": {"model": "gpt-4o", "max_tokens": 800, "temperature": 0.1}}))
        service = build_completion_service()
        assert (service.model, service.max_tokens, service.temperature) == ("gpt-4o", 800, 0.1)

    def test_model_override(self) -> None:
        set_config(parse_config({"summarize": {"model": "gpt-4o"}}))
        assert build_completion_service("gpt-4o-mini").model == "gpt-4o-mini"


def test_read_content_prefers_file(tmp_path) -> None:
    path = tmp_path / "release.txt"
    path.write_text("From file", encoding="utf-8")
    assert read_content("Inline", str(path)) == "From file"
    assert read_content("Inline", None) == "Inline"
    assert read_content(None, None) == ""
