"""Base extractor implementation for disclosure sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from .http_client import HTTPClient
from .logging_config import get_logger
from .models import (
    CandidateRecord,
    ExtractionOutcome,
    ExtractionResult,
    ExtractorConfig,
    ExtractorError,
    ExtractorStats,
)
from .reconcile import is_complete


class BaseExtractor(ABC):
    """Abstract base class for all disclosure extractors.

    Subclasses implement ``_extract_records``. ``extract`` wraps it so that a
    failing source never escapes as an exception: the caller always receives
    an ``ExtractionResult`` and decides what a failed outcome means for the
    run.
    """

    failure_log_message = "Extraction failed for {name}"
    # A failed critical extractor aborts a run that has nothing else to publish
    critical = True

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        self.config = config or ExtractorConfig(name=self.__class__.__name__)
        self._http_client = http_client
        self.logger = get_logger(self.config.name)

    @property
    def http_client(self) -> HTTPClient:
        if self._http_client is None:
            self._http_client = HTTPClient(config=self.config)
        return self._http_client

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    async def extract(self) -> ExtractionResult:
        """Run the extractor and capture its outcome."""
        stats = ExtractorStats(extractor_name=self.name, started_at=datetime.now(timezone.utc))

        try:
            self.logger.info(f"Starting extraction for {self.name}")
            candidates = await self._extract_records(stats)
            records = [record for record in candidates if is_complete(record)]
            stats.records_dropped += len(candidates) - len(records)
            stats.records_extracted = len(records)
            stats.completed_at = datetime.now(timezone.utc)

            self.logger.info(
                f"Extraction completed for {self.name}: "
                f"{stats.records_extracted} records, "
                f"{stats.records_dropped} dropped, "
                f"{stats.retry_attempts} retries, "
                f"{stats.duration_seconds or 0.0:.2f}s"
            )
            return ExtractionResult(
                extractor_name=self.name,
                records=records,
                outcome=ExtractionOutcome.OK,
                stats=stats,
            )

        except Exception as exc:
            stats.completed_at = datetime.now(timezone.utc)
            stats.add_error(
                ExtractorError(
                    extractor_name=self.name,
                    error_type=type(exc).__name__,
                    message=str(exc),
                )
            )
            self._log_failure(exc)
            return ExtractionResult(
                extractor_name=self.name,
                records=[],
                outcome=ExtractionOutcome.FAILED_RECOVERED,
                stats=stats,
                error_message=str(exc),
            )

    def _log_failure(self, exc: Exception) -> None:
        self.logger.error(f"{self.failure_log_message.format(name=self.name)}: {exc}")

    @abstractmethod
    async def _extract_records(self, stats: ExtractorStats) -> List[CandidateRecord]:
        """Produce candidate records from the source.

        Args:
            stats: Stats object to update during extraction

        Returns:
            Candidate records, possibly incomplete

        Raises:
            Any exception encountered during extraction
        """
        pass
