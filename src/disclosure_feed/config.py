"""Configuration loader for the disclosure feed."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .http_client import DEFAULT_USER_AGENT
from .models import ExtractorConfig
from .sources.regulatory import DEFAULT_FORM_TYPES

DEFAULT_CONFIG_PATH = Path("config/disclosure_feed.yaml")


@dataclass
class FeedConfig:
    """Settings for one pipeline run and for the feed consumer."""

    ticker: str = "TUTH"
    output_path: Path = Path("disclosures.json")
    wrap_output: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    max_filings: int = 200
    form_types: List[str] = field(default_factory=lambda: sorted(DEFAULT_FORM_TYPES))
    regulatory_enabled: bool = True
    webpage_enabled: bool = True
    page_url_template: str = "https://www.otcmarkets.com/stock/{symbol}/disclosure"
    navigation_timeout_ms: int = 60000
    settle_ms: int = 2500
    http_timeout_seconds: float = 30.0
    max_retries: int = 2
    retry_base_delay: float = 1.0
    feed_location: str = "disclosures.json"
    page_size: int = 8
    max_items: int = 2000

    def __post_init__(self) -> None:
        self.output_path = Path(self.output_path)
        self.ticker = self.ticker.strip().upper()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeedConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def load(
        cls,
        path: Optional[Union[str, Path]] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "FeedConfig":
        """Load YAML settings, then apply environment overrides.

        A missing file yields the defaults. Recognised variables are
        ``SEC_USER_AGENT``, ``WRITE_PATH`` and ``DISCLOSURE_TICKER``.
        """
        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        data: Dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as handle:
                data = dict(yaml.safe_load(handle) or {})

        env = os.environ if environ is None else environ
        if env.get("SEC_USER_AGENT"):
            data["user_agent"] = env["SEC_USER_AGENT"]
        if env.get("WRITE_PATH"):
            data["output_path"] = env["WRITE_PATH"]
        if env.get("DISCLOSURE_TICKER"):
            data["ticker"] = env["DISCLOSURE_TICKER"]

        return cls.from_dict(data)

    def regulatory_config(self) -> ExtractorConfig:
        return ExtractorConfig(
            name="sec_edgar",
            enabled=self.regulatory_enabled,
            timeout_seconds=self.http_timeout_seconds,
            max_retries=self.max_retries,
            retry_base_delay=self.retry_base_delay,
            headers={"User-Agent": self.user_agent},
        )

    def webpage_config(self) -> ExtractorConfig:
        return ExtractorConfig(
            name="otc_disclosure",
            enabled=self.webpage_enabled,
            timeout_seconds=self.navigation_timeout_ms / 1000,
            max_retries=0,
        )
