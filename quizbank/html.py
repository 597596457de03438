"""Text sanitizing helpers used before storing or rendering free text."""
from __future__ import annotations

from typing import Iterable

import nh3

# Tags produced by ``string_to_html``; everything else is stripped.
PARAGRAPH_TAGS = frozenset({"p", "br"})


def replace_html_entities(value: str) -> str:
    """Escape ``&``, ``<`` and ``>``. Ampersand goes first."""
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def string_to_html(value: str) -> str:
    """Turn plain text into paragraphs, keeping line breaks and double spaces.

    Not idempotent: running it on its own output escapes the markup again, so
    call it exactly once per raw value.
    """
    paragraphs = replace_html_entities(value).split("\n\n")
    html = "".join(f"<p>{paragraph}</p>" for paragraph in paragraphs)
    return html.replace("\n", "<br>").replace("  ", "&nbsp;&nbsp;")


def xss(value: str, tags: Iterable[str] = ()) -> str:
    """Strip anything script-like from ``value``, keeping only ``tags``."""
    return nh3.clean(value, tags=set(tags), attributes={})


__all__ = ["PARAGRAPH_TAGS", "replace_html_entities", "string_to_html", "xss"]
