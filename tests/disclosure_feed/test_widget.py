"""Tests for the feed consumer state, filtering and loading."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
import pytest

from src.disclosure_feed.parser_utils import EPOCH
from src.disclosure_feed.widget import (
    PLACEHOLDER_RECORD,
    STATUS_EMPTY,
    STATUS_LOAD_FAILED,
    DisplayRecord,
    SortMode,
    WidgetState,
    apply_filters,
    coerce_items,
    compute_view,
    go_to_page,
    load_feed,
    next_page,
    normalize_display_record,
    paginate,
    previous_page,
    set_query,
    set_sort_mode,
)


def display(title, date, description=""):
    return DisplayRecord(
        title=title,
        description=description,
        link="",
        date=datetime.fromisoformat(date).replace(tzinfo=timezone.utc),
    )


class MockHttpClient:
    def __init__(self, status_code: int = 200, text: str = "[]") -> None:
        self.status_code = status_code
        self.text = text
        self.headers: list = []

    async def get(self, url: str, *, headers: Optional[Dict[str, str]] = None, **kwargs: Any):
        self.headers.append(headers)
        request = httpx.Request("GET", url)
        response = httpx.Response(self.status_code, request=request, text=self.text)
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(f"HTTP {self.status_code}", request=request, response=response)
        return response


def test_coerce_items_accepts_both_shapes():
    item = {"title": "X", "date": "2024-05-01"}
    assert len(coerce_items([item])) == 1
    assert len(coerce_items({"items": [item]})) == 1
    assert coerce_items({"data": [item]}) == []
    assert coerce_items("nonsense") == []
    assert coerce_items(None) == []


def test_coerce_items_caps_ingestion():
    items = [{"title": f"T{i}", "date": "2024-01-01"} for i in range(2500)]
    assert len(coerce_items(items)) == 2000
    assert len(coerce_items(items, max_items=10)) == 10


def test_normalize_display_record_is_defensive():
    record = normalize_display_record({"title": 42, "description": None, "date": "nope"})
    assert record.title == "42"
    assert record.description == ""
    assert record.link == ""
    assert record.date == EPOCH
    assert record.has_date is False

    assert normalize_display_record("not a dict").title == ""
    assert normalize_display_record({"datetime": "2024-05-01T10:00:00Z"}).date.day == 1


def test_filter_matches_title_or_description_case_insensitively():
    records = [
        display("Annual Report", "2024-01-01"),
        display("8-K filed", "2024-02-01", "SEC EDGAR filing"),
        display("Letter", "2024-03-01", "OTC Disclosure & News Service"),
    ]

    assert [r.title for r in apply_filters(records, WidgetState(query="  annual "))] == ["Annual Report"]
    assert [r.title for r in apply_filters(records, WidgetState(query="EDGAR"))] == ["8-K filed"]
    assert len(apply_filters(records, WidgetState(query=""))) == 3


def test_sort_modes():
    records = [
        display("beta", "2024-02-01"),
        display("Alpha", "2024-03-01"),
        display("gamma", "2024-01-01"),
    ]

    def titles(mode):
        return [r.title for r in apply_filters(records, WidgetState(sort_mode=mode))]

    assert titles(SortMode.DATE_DESC) == ["Alpha", "beta", "gamma"]
    assert titles(SortMode.DATE_ASC) == ["gamma", "beta", "Alpha"]
    assert titles(SortMode.TITLE_ASC) == ["Alpha", "beta", "gamma"]
    assert titles(SortMode.TITLE_DESC) == ["gamma", "beta", "Alpha"]
    assert titles(SortMode.NONE) == ["beta", "Alpha", "gamma"]


def test_filter_and_sort_changes_reset_page():
    state = WidgetState(page=4)
    assert set_query(state, "8-K").page == 1
    assert set_sort_mode(state, "title_asc") == WidgetState(sort_mode=SortMode.TITLE_ASC, page=1)
    assert next_page(state).page == 5
    assert previous_page(state).page == 3
    assert go_to_page(state, 2).page == 2


def test_paginate_clamps_page_and_reports_range():
    records = [display(f"T{i}", "2024-01-01") for i in range(20)]

    first = paginate(records, 1, page_size=8)
    assert len(first.items) == 8
    assert first.status_text == "1–8 of 20"
    assert first.has_previous is False
    assert first.has_next is True

    last = paginate(records, 99, page_size=8)
    assert last.page == 3
    assert len(last.items) == 4
    assert last.status_text == "17–20 of 20"
    assert last.has_next is False

    assert paginate(records, -5, page_size=8).page == 1


def test_paginate_empty():
    view = paginate([], 3)
    assert view.page == 1
    assert view.pages == 1
    assert view.items == []
    assert view.status_text == "0–0 of 0"


def test_compute_view_filters_before_paging():
    records = [display(f"Report {i}", f"2024-01-{i + 1:02d}") for i in range(12)]
    records.append(display("Letter", "2024-02-01"))

    view = compute_view(records, WidgetState(query="report", page=2), page_size=8)

    assert view.total == 12
    assert view.page == 2
    assert [r.title for r in view.items] == ["Report 3", "Report 2", "Report 1", "Report 0"]


@pytest.mark.asyncio
async def test_load_feed_from_file(tmp_path):
    path = tmp_path / "disclosures.json"
    path.write_text(json.dumps({"items": [{"title": "X", "date": "2024-05-01"}]}), encoding="utf-8")

    loaded = await load_feed(path)

    assert loaded.ok is True
    assert loaded.status == ""
    assert len(loaded.records) == 1
    assert loaded.records[0].title == "X"
    assert loaded.records[0].link == ""


@pytest.mark.asyncio
async def test_load_empty_feed_reports_status(tmp_path):
    path = tmp_path / "disclosures.json"
    path.write_text("[]", encoding="utf-8")

    loaded = await load_feed(path)

    assert loaded.records == []
    assert loaded.status == STATUS_EMPTY


@pytest.mark.asyncio
async def test_load_failure_shows_single_placeholder(tmp_path):
    missing = await load_feed(tmp_path / "missing.json")
    assert missing.records == [PLACEHOLDER_RECORD]
    assert missing.status == STATUS_LOAD_FAILED
    assert missing.ok is False

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    malformed = await load_feed(broken)
    assert malformed.records == [PLACEHOLDER_RECORD]


@pytest.mark.asyncio
async def test_load_from_url_with_not_found_status():
    client = MockHttpClient(status_code=404)

    loaded = await load_feed("https://example.com/disclosures.json", http_client=client)

    assert len(loaded.records) == 1
    assert loaded.records[0].title == "Placeholder until first run"
    assert loaded.status == "Could not load disclosures. Showing placeholder."


@pytest.mark.asyncio
async def test_load_from_url_bypasses_cache():
    client = MockHttpClient(text=json.dumps([{"title": "X", "date": "2024-05-01"}]))

    loaded = await load_feed("https://example.com/disclosures.json", http_client=client)

    assert len(loaded.records) == 1
    assert client.headers[0]["Cache-Control"] == "no-cache"
