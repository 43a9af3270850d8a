"""Data models for the disclosure feed pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class RecordSource(str, Enum):
    """Provenance tag carried by every record."""

    REGULATORY = "SEC"
    WEBPAGE = "OTC"


class ExtractionOutcome(str, Enum):
    """How an extractor run ended."""

    OK = "ok"
    FAILED_RECOVERED = "failed_recovered"


class PipelineError(RuntimeError):
    """Raised when a pipeline run cannot produce a feed."""


@dataclass
class CandidateRecord:
    """A single disclosure observed by one extractor.

    Candidates are produced per run and discarded once reconciled. The same
    shape is persisted to the feed after reconciliation.
    """

    source: RecordSource
    title: Optional[str]
    date: Optional[str]
    description: str
    link: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in feed field order."""
        return {
            "source": self.source.value,
            "title": self.title,
            "date": self.date,
            "description": self.description,
            "link": self.link,
        }


@dataclass
class ExtractorConfig:
    """HTTP and retry settings for a single extractor."""

    name: str
    enabled: bool = True
    timeout_seconds: float = 30.0
    max_retries: int = 2
    retry_base_delay: float = 1.0
    retry_exponential_base: float = 2.0
    retry_max_delay: float = 10.0
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class ExtractorError:
    """A failure observed while an extractor was running."""

    extractor_name: str
    error_type: str
    message: str
    url: Optional[str] = None


@dataclass
class ExtractorStats:
    """Counters for one extractor run."""

    extractor_name: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    http_requests: int = 0
    retry_attempts: int = 0
    records_extracted: int = 0
    records_dropped: int = 0
    errors: List[ExtractorError] = field(default_factory=list)

    def add_error(self, error: ExtractorError) -> None:
        self.errors.append(error)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()


@dataclass
class ExtractionResult:
    """Records from one extractor together with how the run ended."""

    extractor_name: str
    records: List[CandidateRecord]
    outcome: ExtractionOutcome
    stats: Optional[ExtractorStats] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is ExtractionOutcome.OK

    @property
    def record_count(self) -> int:
        return len(self.records)
