"""Extractor for the OTC Markets disclosure & news page."""

from __future__ import annotations

import re
from typing import Any, List, Optional, Sequence
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

from ...extractor import BaseExtractor
from ...models import CandidateRecord, ExtractorConfig, ExtractorStats, RecordSource
from ...parser_utils import normalize_date
from .renderer import PageRenderer, PlaywrightPageRenderer

DESCRIPTION = "OTC Disclosure & News Service"
CONTAINER_SELECTORS: Sequence[str] = ("main", "#root", "body")
ROW_TAGS: Sequence[str] = ("tr", "article", "li", "div")
LINK_MARKERS: Sequence[str] = ("/file/", "/news/", "/filing/")
MONTH_DATE_PATTERN = re.compile(
    r"\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\s+\d{1,2},\s+\d{4}\b",
    re.IGNORECASE,
)


def _page_origin(page_url: str) -> str:
    parts = urlsplit(page_url)
    return f"{parts.scheme}://{parts.netloc}"


def _find_container(soup: BeautifulSoup) -> Any:
    for selector in CONTAINER_SELECTORS:
        node = soup.select_one(selector)
        if node is not None:
            return node
    return soup


def _clean_text(node: Any) -> str:
    return " ".join(node.get_text(" ").split())


def find_row_date(row: Any) -> Optional[str]:
    """Return the raw date text for a row, or None.

    A ``<time>`` element wins, first its ``datetime`` attribute and then its
    text; otherwise the first month-name date in the row text is used.
    """
    if row is None:
        return None

    time_node = row.find("time")
    if time_node is not None:
        machine = (time_node.get("datetime") or "").strip()
        if machine:
            return machine
        visible = time_node.get_text(strip=True)
        if visible:
            return visible

    match = MONTH_DATE_PATTERN.search(_clean_text(row))
    return match.group(0) if match else None


def extract_candidates(html: str, page_url: str) -> List[CandidateRecord]:
    """Find disclosure links in rendered page HTML.

    Only anchors pointing at files, news items or filings qualify. Dates come
    from the anchor's enclosing row or card. Links are resolved against the
    page origin. Incomplete candidates are returned as-is; callers filter.
    """
    soup = BeautifulSoup(html or "", "lxml")
    container = _find_container(soup)
    origin = _page_origin(page_url)

    records: List[CandidateRecord] = []
    for anchor in container.find_all("a"):
        href = (anchor.get("href") or "").strip()
        if not href or not any(marker in href for marker in LINK_MARKERS):
            continue

        row = anchor.find_parent(list(ROW_TAGS)) or anchor.parent
        records.append(
            CandidateRecord(
                source=RecordSource.WEBPAGE,
                title=anchor.get_text().strip(),
                date=normalize_date(find_row_date(row)),
                description=DESCRIPTION,
                link=urljoin(origin, href),
            )
        )
    return records


class OTCDisclosureExtractor(BaseExtractor):
    """Scrape the script-rendered OTC Markets disclosure page."""

    critical = False
    page_url_template = "https://www.otcmarkets.com/stock/{symbol}/disclosure"

    def __init__(
        self,
        ticker: str,
        config: Optional[ExtractorConfig] = None,
        *,
        renderer: Optional[PageRenderer] = None,
        page_url_template: Optional[str] = None,
    ) -> None:
        if config is None:
            config = ExtractorConfig(name="otc_disclosure")
        super().__init__(config)
        self.ticker = ticker
        self.renderer = renderer or PlaywrightPageRenderer()
        if page_url_template:
            self.page_url_template = page_url_template

    @property
    def page_url(self) -> str:
        return self.page_url_template.format(symbol=self.ticker.upper())

    async def _extract_records(self, stats: ExtractorStats) -> List[CandidateRecord]:
        page = await self.renderer.render(self.page_url)
        candidates = extract_candidates(page.html, page.url)
        self.logger.info(f"Found {len(candidates)} candidate links on {page.url}")
        return candidates

    def _log_failure(self, exc: Exception) -> None:
        self.logger.warning(f"OTC scrape failed, continuing with SEC only: {exc}")
