"""Disclosure sources for the feed pipeline."""

from .regulatory import EdgarExtractor
from .webpage import OTCDisclosureExtractor, PlaywrightPageRenderer, extract_candidates

__all__ = [
    "EdgarExtractor",
    "OTCDisclosureExtractor",
    "PlaywrightPageRenderer",
    "extract_candidates",
]
