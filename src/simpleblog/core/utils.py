# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from datetime import datetime, timezone

import markdown
import nh3
from markupsafe import Markup

MD_EXTENSIONS = ["fenced_code", "sane_lists"]

ALLOWED_TAGS = {
    "a", "abbr", "b", "blockquote", "br", "code", "em", "h1", "h2", "h3", "h4", "h5", "h6",
    "hr", "i", "img", "li", "ol", "p", "pre", "strong", "ul",
}
ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
    "abbr": {"title"},
    "img": {"src", "alt", "title"},
}
ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}


def as_text(value) -> str:
    """Coerce form input to str; anything that is not a string becomes ''."""
    return value if isinstance(value, str) else ""


def strip_tags(value) -> str:
    """Drop every HTML tag and trim (used for single-line fields like titles)."""
    return Markup(as_text(value)).striptags().strip()


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def render_markdown(text) -> Markup:
    """Render stored markdown to sanitised HTML.

    Only the tags, attributes and URL schemes allowed above survive; script and
    style elements are dropped together with their content.
    """
    html = markdown.markdown(as_text(text), extensions=MD_EXTENSIONS)
    return Markup(
        nh3.clean(
            html,
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            url_schemes=ALLOWED_URL_SCHEMES,
        )
    )
