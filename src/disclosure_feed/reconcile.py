"""Merge candidate records from all extractors into the final feed order."""

from __future__ import annotations

from typing import Dict, Iterable, List

from .logging_config import get_logger
from .models import CandidateRecord

logger = get_logger("reconcile")


def is_complete(record: CandidateRecord) -> bool:
    """A record needs a non-empty title and link and a parsed date."""
    title = (record.title or "").strip()
    link = (record.link or "").strip()
    return bool(title and link and record.date)


def identity_key(record: CandidateRecord) -> str:
    return f"{record.title}|{record.link}|{record.date}"


def reconcile(records: Iterable[CandidateRecord]) -> List[CandidateRecord]:
    """Filter, deduplicate and sort candidate records.

    Incomplete records are dropped. Records with equal identity keys collapse
    into one, and the later record's fields win. The result is sorted by date,
    newest first; records sharing a date keep their insertion order.
    """
    by_key: Dict[str, CandidateRecord] = {}
    dropped = 0
    for record in records:
        if not is_complete(record):
            dropped += 1
            continue
        by_key[identity_key(record)] = record

    if dropped:
        logger.debug(f"Dropped {dropped} incomplete records")

    merged = sorted(by_key.values(), key=lambda record: record.date, reverse=True)
    logger.info(f"Reconciled {len(merged)} records")
    return merged
