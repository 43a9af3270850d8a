"""Extractors for script-rendered disclosure webpages."""

from .otc import OTCDisclosureExtractor, extract_candidates
from .renderer import PageRenderer, PlaywrightPageRenderer, RenderedPage

__all__ = [
    "OTCDisclosureExtractor",
    "PageRenderer",
    "PlaywrightPageRenderer",
    "RenderedPage",
    "extract_candidates",
]
