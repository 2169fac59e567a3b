"""Configuration loader for the press-release pipeline."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Generic, TypeVar

import yaml

T = TypeVar('T')

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"


@dataclass
class FeedConfig:
    url: str
    kind: str = "all-news"
    source_name: str = "general"
    display_name: str = ""


@dataclass
class FeedsConfig:
    request_timeout: float = 15
    user_agent: str = "PressWire/1.0 (Competitive Intelligence Tool)"
    feeds: list[FeedConfig] = field(default_factory=list)


@dataclass
class ResolveConfig:
    request_timeout: float = 15
    max_redirects: int = 10
    cache_ttl_hours: float = 24
    cache_max_entries: int = 1000
    concurrency: int = 3
    delay_ms: int = 1000


@dataclass
class ExtractConfig:
    request_timeout: float = 15
    retries: int = 2


@dataclass
class PollConfig:
    company_delay_seconds: float = 1.0
    retention_days: int = 30
    summary_chars: int = 200


@dataclass
class SummarizeConfig:
    model: str = "gpt-4o-mini"
    max_tokens: int = 2000
    temperature: float = 0.3


@dataclass
class CompanyConfig:
    id: str
    name: str
    variations: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    feeds: FeedsConfig = field(default_factory=FeedsConfig)
    resolve: ResolveConfig = field(default_factory=ResolveConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    poll: PollConfig = field(default_factory=PollConfig)
    summarize: SummarizeConfig = field(default_factory=SummarizeConfig)
    companies: list[CompanyConfig] = field(default_factory=list)


def find_config_path(
    config_name: str | None,
    config_dir: Path = CONFIG_DIR,
    default_name: str = "prod",
    env_var: str | None = "CONFIG_ENV",
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml), a path to a YAML file, or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    if config_name.endswith((".yaml", ".yml")):
        config_path = Path(config_name)
    else:
        config_path = config_dir / f"{config_name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_config(data: dict) -> AppConfig:
    """Parse config dictionary into AppConfig object."""
    feeds_data = data.get("feeds", {})
    feeds = FeedsConfig(
        request_timeout=feeds_data.get("request_timeout", 15),
        user_agent=feeds_data.get("user_agent", FeedsConfig.user_agent),
        feeds=[FeedConfig(**entry) for entry in feeds_data.get("sources", [])],
    )

    resolve_data = data.get("resolve", {})
    resolve = ResolveConfig(
        request_timeout=resolve_data.get("request_timeout", 15),
        max_redirects=resolve_data.get("max_redirects", 10),
        cache_ttl_hours=resolve_data.get("cache_ttl_hours", 24),
        cache_max_entries=resolve_data.get("cache_max_entries", 1000),
        concurrency=resolve_data.get("concurrency", 3),
        delay_ms=resolve_data.get("delay_ms", 1000),
    )

    extract = ExtractConfig(
        request_timeout=data.get("extract", {}).get("request_timeout", 15),
        retries=data.get("extract", {}).get("retries", 2),
    )

    poll_data = data.get("poll", {})
    poll = PollConfig(
        company_delay_seconds=poll_data.get("company_delay_seconds", 1.0),
        retention_days=poll_data.get("retention_days", 30),
        summary_chars=poll_data.get("summary_chars", 200),
    )

    summarize_data = data.get("summarize", {})
    summarize = SummarizeConfig(
        model=summarize_data.get("model", "gpt-4o-mini"),
        max_tokens=summarize_data.get("max_tokens", 2000),
        temperature=summarize_data.get("temperature", 0.3),
    )

    companies = [
        CompanyConfig(
            id=str(entry.get("id") or entry["name"].lower()),
            name=entry["name"],
            variations=list(entry.get("variations", [])),
        )
        for entry in data.get("companies", [])
    ]

    return AppConfig(
        feeds=feeds,
        resolve=resolve,
        extract=extract,
        poll=poll,
        summarize=summarize,
        companies=companies,
    )


def load_config(config_name: str | None = None) -> AppConfig:
    """Load configuration from a YAML file in configs/ (or an explicit path)."""
    return parse_config(load_yaml(find_config_path(config_name)))


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        """Get the config, loading it lazily if needed."""
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        """Set the config directly."""
        self._config = config

    def reset(self) -> None:
        """Reset the config, forcing reload on next get()."""
        self._config = None


_manager: ConfigSingleton[AppConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
