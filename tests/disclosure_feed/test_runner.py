"""Tests for the command line entry point."""

import json
from typing import List

import pytest

from src.disclosure_feed import runner
from src.disclosure_feed.extractor import BaseExtractor
from src.disclosure_feed.models import CandidateRecord, ExtractorConfig, ExtractorStats, RecordSource
from src.disclosure_feed.pipeline import FeedPipeline


class StaticExtractor(BaseExtractor):
    def __init__(self, name, records=None, error=None, critical=True):
        super().__init__(ExtractorConfig(name=name))
        self.critical = critical
        self.records = records or []
        self.error = error

    async def _extract_records(self, stats: ExtractorStats) -> List[CandidateRecord]:
        if self.error is not None:
            raise self.error
        return self.records


@pytest.fixture
def captured_configs(monkeypatch):
    """Replace pipeline construction with static extractors, recording the config."""
    configs = []
    extractors = {}

    def fake_from_config(config, renderer=None):
        configs.append(config)
        return FeedPipeline(extractors["list"], config.output_path, wrap=config.wrap_output)

    monkeypatch.setattr(runner.FeedPipeline, "from_config", fake_from_config)
    return configs, extractors


def test_fetch_writes_feed_and_exits_zero(tmp_path, captured_configs):
    configs, extractors = captured_configs
    extractors["list"] = [
        StaticExtractor(
            "sec_edgar",
            [CandidateRecord(RecordSource.REGULATORY, "8-K filed", "2024-03-01", "SEC EDGAR filing", "https://x")],
        ),
        StaticExtractor("otc_disclosure", error=RuntimeError("blocked")),
    ]
    output = tmp_path / "feed.json"

    code = runner.main(
        ["--config", str(tmp_path / "none.yaml"), "fetch", "--ticker", "abcd", "--output", str(output), "--skip-webpage"]
    )

    assert code == 0
    assert json.loads(output.read_text(encoding="utf-8"))[0]["title"] == "8-K filed"
    assert configs[0].ticker == "ABCD"
    assert configs[0].webpage_enabled is False


def test_fetch_exits_nonzero_when_every_extractor_fails(tmp_path, captured_configs):
    _, extractors = captured_configs
    extractors["list"] = [
        StaticExtractor("sec_edgar", error=RuntimeError("HTTP 503")),
        StaticExtractor("otc_disclosure", error=RuntimeError("timeout")),
    ]
    output = tmp_path / "feed.json"

    code = runner.main(["--config", str(tmp_path / "none.yaml"), "fetch", "--output", str(output)])

    assert code == 1
    assert not output.exists()


def test_fetch_keeps_previous_feed_when_filings_fail_and_page_is_empty(tmp_path, captured_configs):
    _, extractors = captured_configs
    extractors["list"] = [
        StaticExtractor("sec_edgar", error=RuntimeError("HTTP 503")),
        StaticExtractor("otc_disclosure", [], critical=False),
    ]
    output = tmp_path / "feed.json"
    output.write_text('[{"title": "previous"}]', encoding="utf-8")

    code = runner.main(["--config", str(tmp_path / "none.yaml"), "fetch", "--output", str(output)])

    assert code == 1
    assert json.loads(output.read_text(encoding="utf-8")) == [{"title": "previous"}]


def test_view_prints_requested_page(tmp_path, capsys):
    feed = tmp_path / "feed.json"
    feed.write_text(
        json.dumps(
            [
                {"title": "Annual Report", "date": "2024-04-15", "description": "OTC Disclosure & News Service"},
                {"title": "8-K filed", "date": "2024-03-01", "description": "SEC EDGAR filing"},
            ]
        ),
        encoding="utf-8",
    )

    code = runner.main(
        ["--config", str(tmp_path / "none.yaml"), "view", "--feed", str(feed), "--query", "edgar"]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "Mar 01, 2024  8-K filed" in out
    assert "Annual Report" not in out
    assert "[1–1 of 1]" in out


def test_view_missing_feed_shows_placeholder(tmp_path, capsys):
    code = runner.main(
        ["--config", str(tmp_path / "none.yaml"), "view", "--feed", str(tmp_path / "missing.json")]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "Could not load disclosures. Showing placeholder." in out
    assert "Placeholder until first run" in out


def test_view_writes_html(tmp_path):
    feed = tmp_path / "feed.json"
    feed.write_text(json.dumps({"items": [{"title": "X", "date": "2024-05-01"}]}), encoding="utf-8")
    html_path = tmp_path / "site" / "index.html"

    code = runner.main(
        ["--config", str(tmp_path / "none.yaml"), "view", "--feed", str(feed), "--html", str(html_path)]
    )

    assert code == 0
    assert "May 01, 2024" in html_path.read_text(encoding="utf-8")
