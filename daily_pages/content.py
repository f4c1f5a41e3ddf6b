"""Load author markdown from disk or over HTTP and split off front matter.

Content files may open with a YAML front matter block delimited by ``---``
lines. The block is parsed with ruamel.yaml and exposed as
:attr:`ContentDocument.front_matter`; the remaining markdown is what the
renderer sees.

Example
-------
>>> from daily_pages.content import split_front_matter
>>> meta, body = split_front_matter("---\\ntitle: Day 1\\n---\\n# Hello")
>>> meta["title"], body
('Day 1', '# Hello')
"""

from __future__ import annotations

import dataclasses as dc
import io
import logging
import re
import typing as typ
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<meta>.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)
TITLE_PATTERN = re.compile(r"^#[ \t]+(?P<title>.+?)[ \t#]*$", re.MULTILINE)
REMOTE_PREFIXES = ("http://", "https://")


@dc.dataclass(slots=True)
class ContentDocument:
    """Markdown body plus the metadata that travelled with it."""

    markdown: str
    front_matter: dict[str, typ.Any] = dc.field(default_factory=dict)
    source: str = ""

    @property
    def title(self) -> str | None:
        """Return the front matter title or the first level-one heading."""
        raw = self.front_matter.get("title")
        if raw:
            return str(raw).strip()
        match = TITLE_PATTERN.search(self.markdown)
        return match.group("title").strip() if match else None


def split_front_matter(text: str) -> tuple[dict[str, typ.Any], str]:
    """Return ``(front_matter, body)`` for ``text``.

    Documents without a leading ``---`` block, or whose block does not parse
    to a mapping, come back unchanged with empty metadata.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return {}, text
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(io.StringIO(match.group("meta")))
    except YAMLError:
        logger.warning("ignoring unparseable front matter", exc_info=True)
        return {}, text
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        logger.warning("ignoring front matter that is not a mapping")
        return {}, text
    return dict(loaded), text[match.end() :]


def _fetch_text(url: str, *, timeout: float = 30) -> str:
    """Download ``url`` with retries on transient server errors."""
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    finally:
        session.close()


def load_content(source: str | Path) -> ContentDocument:
    """Read markdown from a filesystem path or an http(s) URL.

    Parameters
    ----------
    source : str | Path
        Local file path or absolute ``http://``/``https://`` URL.

    Returns
    -------
    ContentDocument
        Markdown body with its front matter separated.

    Raises
    ------
    FileNotFoundError
        If a local source does not exist.
    requests.HTTPError
        If a remote source answers with an error status after retries.
    """
    text_source = str(source)
    if text_source.startswith(REMOTE_PREFIXES):
        logger.info("fetching %s", text_source)
        raw = _fetch_text(text_source)
    else:
        path = Path(source)
        if not path.exists():
            msg = f"Content file '{path}' not found."
            raise FileNotFoundError(msg)
        raw = path.read_text(encoding="utf-8")
    front_matter, body = split_front_matter(raw)
    return ContentDocument(markdown=body, front_matter=front_matter, source=text_source)


__all__ = ["ContentDocument", "load_content", "split_front_matter"]
