"""Pipeline that turns extractor output into the persisted feed.

Extractors run one after another. Each returns an ``ExtractionResult``; only
successful results feed the reconciler, and every recovered failure is logged
and reported in the run summary. A run writes nothing when every extractor
failed, or when a critical extractor failed and no usable records remain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .config import FeedConfig
from .extractor import BaseExtractor
from .feed_writer import write_feed
from .logging_config import get_logger
from .models import CandidateRecord, ExtractionResult, PipelineError
from .reconcile import reconcile
from .sources.regulatory import EdgarExtractor
from .sources.webpage import OTCDisclosureExtractor, PageRenderer, PlaywrightPageRenderer

logger = get_logger("pipeline")


def _utc_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass
class RunSummary:
    """Summary of a pipeline run."""

    started_at: str
    completed_at: str = ""
    output_path: Optional[str] = None
    successful_extractors: List[str] = field(default_factory=list)
    failed_extractors: List[str] = field(default_factory=list)
    failed_critical: List[str] = field(default_factory=list)
    records_by_extractor: Dict[str, int] = field(default_factory=dict)
    records_written: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "output_path": self.output_path,
            "successful_extractors": self.successful_extractors,
            "failed_extractors": self.failed_extractors,
            "failed_critical": self.failed_critical,
            "records_by_extractor": self.records_by_extractor,
            "records_written": self.records_written,
        }


def collect_successful(results: Sequence[ExtractionResult]) -> List[CandidateRecord]:
    """Concatenate the records of successful results, in extractor order."""
    records: List[CandidateRecord] = []
    for result in results:
        if result.ok:
            records.extend(result.records)
        else:
            logger.warning(
                f"Extractor {result.extractor_name} failed and was skipped: {result.error_message}"
            )
    return records


class FeedPipeline:
    """Run extractors sequentially, reconcile, and write the feed."""

    def __init__(
        self,
        extractors: Sequence[BaseExtractor],
        output_path: Union[str, Path],
        *,
        wrap: bool = False,
    ) -> None:
        self.extractors = list(extractors)
        self.output_path = Path(output_path)
        self.wrap = wrap

    @classmethod
    def from_config(
        cls,
        config: FeedConfig,
        *,
        renderer: Optional[PageRenderer] = None,
    ) -> "FeedPipeline":
        extractors: List[BaseExtractor] = []
        if config.regulatory_enabled:
            extractors.append(
                EdgarExtractor(
                    config.ticker,
                    config.regulatory_config(),
                    max_filings=config.max_filings,
                    form_types=config.form_types,
                )
            )
        if config.webpage_enabled:
            extractors.append(
                OTCDisclosureExtractor(
                    config.ticker,
                    config.webpage_config(),
                    renderer=renderer
                    or PlaywrightPageRenderer(
                        navigation_timeout_ms=config.navigation_timeout_ms,
                        settle_ms=config.settle_ms,
                    ),
                    page_url_template=config.page_url_template,
                )
            )
        return cls(extractors, config.output_path, wrap=config.wrap_output)

    async def extract_all(self) -> List[ExtractionResult]:
        results: List[ExtractionResult] = []
        for extractor in self.extractors:
            if not extractor.enabled:
                logger.info(f"Skipping disabled extractor: {extractor.name}")
                continue
            results.append(await extractor.extract())
        return results

    async def run(self) -> RunSummary:
        """Execute one full run.

        Raises:
            PipelineError: if no extractor ran, every extractor failed, or a
                critical extractor failed and nothing usable remains
            OSError: if the feed cannot be written
        """
        summary = RunSummary(started_at=_utc_now())
        results = await self.extract_all()

        critical_names = {extractor.name for extractor in self.extractors if extractor.critical}
        for result in results:
            summary.records_by_extractor[result.extractor_name] = result.record_count
            if result.ok:
                summary.successful_extractors.append(result.extractor_name)
            else:
                summary.failed_extractors.append(result.extractor_name)
                if result.extractor_name in critical_names:
                    summary.failed_critical.append(result.extractor_name)

        if not summary.successful_extractors:
            raise PipelineError(
                "No extractor produced a result"
                + (f" (failed: {', '.join(summary.failed_extractors)})" if summary.failed_extractors else "")
            )

        merged = reconcile(collect_successful(results))
        if not merged and summary.failed_critical:
            raise PipelineError(
                f"No usable records and {', '.join(summary.failed_critical)} failed; keeping {self.output_path}"
            )

        summary.records_written = write_feed(merged, self.output_path, wrap=self.wrap)
        summary.output_path = str(self.output_path)
        summary.completed_at = _utc_now()
        return summary
