"""Disclosure feed package namespace."""

from importlib import import_module
from typing import Any

__all__ = [
    "CandidateRecord",
    "FeedConfig",
    "FeedPipeline",
    "RecordSource",
    "normalize_date",
    "reconcile",
    "write_feed",
    "load_feed",
]

_EXPORTS = {
    "CandidateRecord": "models",
    "RecordSource": "models",
    "FeedConfig": "config",
    "FeedPipeline": "pipeline",
    "normalize_date": "parser_utils",
    "reconcile": "reconcile",
    "write_feed": "feed_writer",
    "load_feed": "widget",
}


def __getattr__(name: str) -> Any:
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(f"{__name__}.{module_name}")
    return getattr(module, name)


def __dir__() -> list[str]:
    return sorted(__all__)
