"""Allow-list sanitization for converted markdown.

Runs on the converter's output before any enhancement markup is added, so the
fragment handed to the page only ever contains content tags: headings,
paragraphs, lists, tables, blockquotes, images, links and code, plus the
inline emphasis tags and the ``div``/``span`` wrappers Pygments emits.
"""

from __future__ import annotations

from functools import lru_cache

import bleach
from bleach.css_sanitizer import CSSSanitizer

from daily_pages._constants import HEADING_TAGS, LANGUAGE_ATTR

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto", "tel"})
# Python-Markdown writes table column alignment as an inline style.
ALLOWED_CSS_PROPERTIES = frozenset({"text-align"})


@lru_cache(maxsize=1)
def _allowed_tags() -> frozenset[str]:
    return frozenset(
        {
            # text
            "p",
            "br",
            "hr",
            "em",
            "strong",
            "del",
            "sup",
            "sub",
            # headings
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            # lists
            "ul",
            "ol",
            "li",
            "dl",
            "dt",
            "dd",
            "blockquote",
            # code
            "pre",
            "code",
            "kbd",
            "div",
            "span",
            # tables
            "table",
            "thead",
            "tbody",
            "tr",
            "th",
            "td",
            # media and links
            "img",
            "a",
        }
    )


_ALLOWED_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "title", "class"}),
    "img": frozenset({"src", "alt", "title", "width", "height"}),
    "ol": frozenset({"start"}),
    "th": frozenset({"style", "colspan", "rowspan"}),
    "td": frozenset({"style", "colspan", "rowspan"}),
    "code": frozenset({"class"}),
    "pre": frozenset({"class", LANGUAGE_ATTR}),
    "div": frozenset({"class", LANGUAGE_ATTR}),
    "span": frozenset({"class"}),
}


@lru_cache(maxsize=1)
def _css_sanitizer() -> CSSSanitizer:
    return CSSSanitizer(allowed_css_properties=ALLOWED_CSS_PROPERTIES)


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    """Return ``True`` when ``name`` may stay on ``tag``."""
    if name == "id":
        return tag in HEADING_TAGS
    return name in _ALLOWED_ATTRIBUTES.get(tag, frozenset())


def sanitize_html(html: str) -> str:
    """Strip disallowed attributes and escape disallowed tags in ``html``.

    Parameters
    ----------
    html : str
        Markup produced by the markdown converter.

    Returns
    -------
    str
        Markup containing only allow-listed tags, attributes and link
        protocols, with inline styles reduced to ``text-align``. Disallowed
        tags are escaped rather than dropped so their text stays visible to
        readers.
    """
    if not html:
        return html
    return bleach.clean(
        html,
        tags=_allowed_tags(),
        attributes=_allow_attribute,
        protocols=ALLOWED_PROTOCOLS,
        css_sanitizer=_css_sanitizer(),
        strip=False,
        strip_comments=True,
    )


__all__ = ["ALLOWED_CSS_PROPERTIES", "ALLOWED_PROTOCOLS", "sanitize_html"]
