"""Extractor for SEC EDGAR filings of a single ticker."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from ...extractor import BaseExtractor
from ...http_client import HTTPClient
from ...models import CandidateRecord, ExtractorConfig, ExtractorStats, RecordSource

DEFAULT_FORM_TYPES = frozenset(
    {"8-K", "10-Q", "10-K", "6-K", "S-1", "S-3", "SC 13D", "SC 13G", "DEF 14A"}
)


class EdgarExtractor(BaseExtractor):
    """Fetch recent disclosure-relevant filings from SEC EDGAR."""

    source = RecordSource.REGULATORY
    description = "SEC EDGAR filing"

    ticker_map_url = "https://www.sec.gov/files/company_tickers.json"
    submissions_url = "https://data.sec.gov/submissions/CIK{issuer_id}.json"
    archives_base = "https://www.sec.gov/Archives/edgar/data"

    failure_log_message = "SEC extraction failed for {name}, continuing without filings"

    def __init__(
        self,
        ticker: str,
        config: Optional[ExtractorConfig] = None,
        http_client: Optional[HTTPClient] = None,
        *,
        max_filings: int = 200,
        form_types: Optional[Iterable[str]] = None,
    ) -> None:
        if config is None:
            config = ExtractorConfig(name="sec_edgar")
        super().__init__(config, http_client)
        self.ticker = ticker
        self.max_filings = max_filings
        self.form_types = frozenset(form_types) if form_types is not None else DEFAULT_FORM_TYPES

    async def _extract_records(self, stats: ExtractorStats) -> List[CandidateRecord]:
        issuer_id = await self.resolve_issuer_id(self.ticker, stats=stats)
        if issuer_id is None:
            self.logger.warning(f"No SEC issuer found for ticker {self.ticker}; skipping filings")
            return []
        self.logger.info(f"Resolved ticker {self.ticker} to CIK {issuer_id}")
        return await self.fetch_filings(issuer_id, stats=stats)

    async def resolve_issuer_id(
        self,
        ticker: str,
        *,
        stats: Optional[ExtractorStats] = None,
    ) -> Optional[str]:
        """Look up the zero-padded 10-digit CIK for a ticker.

        Returns None when the ticker is not in the directory. HTTP failures
        propagate.
        """
        mapping = await self.http_client.get_json(self.ticker_map_url, stats=stats)
        return self.match_issuer_id(mapping, ticker)

    @staticmethod
    def match_issuer_id(mapping: Any, ticker: str) -> Optional[str]:
        entries = mapping.values() if isinstance(mapping, dict) else mapping or []
        wanted = str(ticker).upper()
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            if str(entry.get("ticker")).upper() != wanted:
                continue
            cik = entry.get("cik_str")
            if not cik:
                return None
            return str(cik).zfill(10)
        return None

    async def fetch_filings(
        self,
        issuer_id: str,
        *,
        stats: Optional[ExtractorStats] = None,
    ) -> List[CandidateRecord]:
        """Fetch the issuer's recent filings and map them to candidates."""
        url = self.submissions_url.format(issuer_id=issuer_id)
        payload = await self.http_client.get_json(url, stats=stats)
        return self.parse_filings(issuer_id, payload)

    def parse_filings(self, issuer_id: str, payload: Dict[str, Any]) -> List[CandidateRecord]:
        """Map a submissions payload to candidate records without HTTP."""
        recent = (payload or {}).get("filings", {}).get("recent")
        if not recent:
            return []

        forms = recent.get("form") or []
        filing_dates = recent.get("filingDate") or []
        accessions = recent.get("accessionNumber") or []
        documents = recent.get("primaryDocument") or []

        records: List[CandidateRecord] = []
        for index in range(min(len(forms), self.max_filings)):
            form = forms[index]
            if form not in self.form_types:
                continue
            records.append(
                CandidateRecord(
                    source=self.source,
                    title=f"{form} filed",
                    date=filing_dates[index],
                    description=self.description,
                    link=self.build_document_url(issuer_id, accessions[index], documents[index]),
                )
            )
        return records

    def build_document_url(self, issuer_id: str, accession_number: str, primary_document: str) -> str:
        accession = accession_number.replace("-", "")
        return f"{self.archives_base}/{int(issuer_id)}/{accession}/{primary_document}"
