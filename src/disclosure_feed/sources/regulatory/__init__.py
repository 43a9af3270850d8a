"""Regulatory filing extractors."""

from .edgar import DEFAULT_FORM_TYPES, EdgarExtractor

__all__ = [
    "DEFAULT_FORM_TYPES",
    "EdgarExtractor",
]
