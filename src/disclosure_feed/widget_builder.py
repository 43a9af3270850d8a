"""Render a page of the feed as HTML or plain text using Jinja2 templates."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .widget import DisplayRecord, PageView

NO_DATE = "—"


def display_date(record: DisplayRecord) -> str:
    """Format a record date like ``Mar 01, 2024``; records without one get a dash."""
    if not record.has_date:
        return NO_DATE
    return record.date.strftime("%b %d, %Y")


class WidgetRenderer:
    """Renders ``PageView`` objects for the browser widget or a terminal."""

    def __init__(self, template_dir: Optional[Union[str, Path]] = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"
        self.template_dir = Path(template_dir)
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            keep_trailing_newline=True,
        )
        self.jinja_env.filters["display_date"] = display_date

    def render_html(self, view: PageView, status: str = "") -> str:
        template = self.jinja_env.get_template("widget.html")
        return template.render(view=view, status=status)

    def render_text(self, view: PageView, status: str = "") -> str:
        template = self.jinja_env.get_template("widget.txt")
        return template.render(view=view, status=status)
