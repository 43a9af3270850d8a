"""Feed consumer: load the published feed and page through it.

The consumer never trusts the artifact. Every record is re-normalized, the
number of records is capped, and a failed load degrades to one placeholder
record. Search, sort and pagination are pure functions of the loaded records
and an immutable ``WidgetState``.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from .http_client import HTTPClient
from .logging_config import get_logger
from .models import ExtractorConfig
from .parser_utils import EPOCH, ensure_text, parse_display_date

logger = get_logger("widget")

MAX_ITEMS = 2000
PAGE_SIZE = 8

STATUS_LOAD_FAILED = "Could not load disclosures. Showing placeholder."
STATUS_EMPTY = "No disclosures yet."


class SortMode(str, Enum):
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"
    NONE = "none"


@dataclass(frozen=True)
class DisplayRecord:
    """A feed entry as the consumer shows it."""

    title: str
    description: str
    link: str
    date: datetime

    @property
    def has_date(self) -> bool:
        return self.date != EPOCH


PLACEHOLDER_RECORD = DisplayRecord(
    title="Placeholder until first run",
    description="This file will be replaced automatically by your publishing workflow.",
    link="#",
    date=datetime(2025, 1, 1, tzinfo=timezone.utc),
)


@dataclass(frozen=True)
class WidgetState:
    """Search, sort and page selection."""

    query: str = ""
    sort_mode: SortMode = SortMode.DATE_DESC
    page: int = 1


def set_query(state: WidgetState, query: str) -> WidgetState:
    return replace(state, query=query, page=1)


def set_sort_mode(state: WidgetState, sort_mode: Union[SortMode, str]) -> WidgetState:
    return replace(state, sort_mode=SortMode(sort_mode), page=1)


def go_to_page(state: WidgetState, page: int) -> WidgetState:
    return replace(state, page=page)


def next_page(state: WidgetState) -> WidgetState:
    return replace(state, page=state.page + 1)


def previous_page(state: WidgetState) -> WidgetState:
    return replace(state, page=state.page - 1)


@dataclass(frozen=True)
class PageView:
    """One page of filtered records plus the numbers the status line needs."""

    items: List[DisplayRecord]
    page: int
    pages: int
    start: int
    end: int
    total: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def status_text(self) -> str:
        first = self.start + 1 if self.total else 0
        return f"{first}–{self.end} of {self.total}"


@dataclass
class FeedLoadResult:
    records: List[DisplayRecord]
    status: str
    ok: bool


def normalize_display_record(item: Any) -> DisplayRecord:
    """Coerce one feed entry into a ``DisplayRecord``."""
    if not isinstance(item, dict):
        item = {}
    return DisplayRecord(
        title=ensure_text(item.get("title")),
        description=ensure_text(item.get("description")),
        link=ensure_text(item.get("link")),
        date=parse_display_date(item.get("date") or item.get("datetime")),
    )


def coerce_items(data: Any, *, max_items: int = MAX_ITEMS) -> List[DisplayRecord]:
    """Accept a bare list or an object with an ``items`` list."""
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict) and isinstance(data.get("items"), list):
        items = data["items"]
    else:
        items = []
    return [normalize_display_record(item) for item in items[:max_items]]


def _matches(record: DisplayRecord, query: str) -> bool:
    return query in record.title.lower() or query in record.description.lower()


def apply_filters(records: List[DisplayRecord], state: WidgetState) -> List[DisplayRecord]:
    """Filter by the state's query and order by its sort mode."""
    query = state.query.strip().lower()
    filtered = [record for record in records if not query or _matches(record, query)]

    mode = state.sort_mode
    if mode is SortMode.DATE_DESC:
        filtered.sort(key=lambda record: record.date, reverse=True)
    elif mode is SortMode.DATE_ASC:
        filtered.sort(key=lambda record: record.date)
    elif mode is SortMode.TITLE_ASC:
        filtered.sort(key=lambda record: record.title.casefold())
    elif mode is SortMode.TITLE_DESC:
        filtered.sort(key=lambda record: record.title.casefold(), reverse=True)
    return filtered


def paginate(records: List[DisplayRecord], page: int, page_size: int = PAGE_SIZE) -> PageView:
    """Slice one page, clamping the page number into range."""
    total = len(records)
    pages = max(1, math.ceil(total / page_size))
    page = min(max(1, page), pages)
    start = (page - 1) * page_size
    end = min(start + page_size, total)
    return PageView(
        items=records[start:end],
        page=page,
        pages=pages,
        start=start,
        end=end,
        total=total,
    )


def compute_view(
    records: List[DisplayRecord],
    state: WidgetState,
    page_size: int = PAGE_SIZE,
) -> PageView:
    return paginate(apply_filters(records, state), state.page, page_size)


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


async def _read_location(location: Union[str, Path], http_client: Optional[HTTPClient]) -> Any:
    location_text = str(location)
    if _is_url(location_text):
        client = http_client or HTTPClient(ExtractorConfig(name="feed_consumer", max_retries=0))
        response = await client.get(
            location_text,
            headers={"Cache-Control": "no-cache", "Pragma": "no-cache"},
        )
        return response.json()
    with open(location_text, "r", encoding="utf-8") as handle:
        return json.load(handle)


async def load_feed(
    location: Union[str, Path],
    *,
    http_client: Optional[HTTPClient] = None,
    max_items: int = MAX_ITEMS,
) -> FeedLoadResult:
    """Load the feed from a path or URL.

    Never raises: any failure yields the placeholder record.
    """
    try:
        data = await _read_location(location, http_client)
    except Exception as exc:
        logger.error(f"Could not load feed from {location}: {exc}")
        return FeedLoadResult(records=[PLACEHOLDER_RECORD], status=STATUS_LOAD_FAILED, ok=False)

    records = coerce_items(data, max_items=max_items)
    return FeedLoadResult(records=records, status="" if records else STATUS_EMPTY, ok=True)
