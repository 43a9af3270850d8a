"""Persist reconciled records as the JSON feed artifact."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Union

from .logging_config import get_logger
from .models import CandidateRecord

logger = get_logger("feed_writer")


def build_feed_payload(records: Iterable[CandidateRecord], *, wrap: bool = False) -> Any:
    """Build the JSON-ready feed, either a bare list or an ``items`` object."""
    items = [record.to_dict() for record in records]
    if not wrap:
        return items
    generated_at = datetime.now(timezone.utc).replace(microsecond=0).isoformat()
    if generated_at.endswith("+00:00"):
        generated_at = generated_at[:-6] + "Z"
    return {"items": items, "generated_at": generated_at, "count": len(items)}


def write_feed(
    records: Iterable[CandidateRecord],
    path: Union[str, Path],
    *,
    wrap: bool = False,
) -> int:
    """Write the feed to ``path``, replacing any previous file.

    The JSON is written to a temporary file beside the target and moved into
    place, so readers never observe a partially written feed.

    Returns:
        Number of records written
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    payload = build_feed_payload(records, wrap=wrap)
    count = payload["count"] if wrap else len(payload)
    text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.info(f"Wrote {count} items to {target}")
    return count
