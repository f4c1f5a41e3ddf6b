"""Live HTML document that hosts the client-side enhancers.

:class:`PageDocument` plays the part of the browser page for the enhancement
code: it holds the parsed tree, mounts converter output as raw markup, keeps
event listeners per element, delivers subtree-mutation notifications, exposes
the current URL and clipboard, and runs timers on the asyncio event loop.

Mutation notifications are queued and delivered in order. A notification
raised while observers are still running (for example because an enhancer
appended a control) is delivered after the current one finishes instead of
recursing into the observers.

Example
-------
>>> page = PageDocument("<main></main>", url="https://example.com/post")
>>> seen = []
>>> disconnect = page.observe(lambda record: seen.append(len(record.added)))
>>> _ = page.mount("<p>one</p><p>two</p>")
>>> seen
[2]
"""

from __future__ import annotations

import asyncio
import collections
import dataclasses as dc
import inspect
import typing as typ
from urllib.parse import urlsplit, urlunsplit

from bs4 import BeautifulSoup, Tag

from daily_pages.enhance.clipboard import Clipboard, MemoryClipboard

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    Listener = cabc.Callable[["Event"], cabc.Awaitable[None] | None]
    Observer = cabc.Callable[["MutationRecord"], None]


@dc.dataclass(frozen=True, slots=True)
class MutationRecord:
    """Elements inserted into the document in one change."""

    added: tuple[Tag, ...] = ()


@dc.dataclass(slots=True)
class Event:
    """User interaction delivered to element listeners."""

    type: str
    target: Tag
    key: str | None = None
    default_prevented: bool = False

    def prevent_default(self) -> None:
        """Mark the event's default action as cancelled."""
        self.default_prevented = True


@dc.dataclass(frozen=True, slots=True)
class ScrollRequest:
    """A ``scroll_into_view`` call recorded by the document."""

    element_id: str | None
    behavior: str


def find_matching(root: Tag, predicate: typ.Callable[[Tag], bool]) -> list[Tag]:
    """Return ``root`` and its descendant elements that satisfy ``predicate``."""
    found = [root] if predicate(root) else []
    found.extend(root.find_all(predicate))
    return found


class PageDocument:
    """Parsed page with listeners, mutation delivery, URL and clipboard."""

    def __init__(
        self,
        html: str = "",
        *,
        url: str,
        clipboard: Clipboard | None = None,
    ) -> None:
        """Parse ``html`` and bind the page to ``url`` and ``clipboard``.

        Parameters
        ----------
        html : str, optional
            Initial markup, usually the server-rendered page.
        url : str
            Absolute URL of the page, including any fragment.
        clipboard : Clipboard, optional
            Clipboard used by copy controls; defaults to
            :class:`~daily_pages.enhance.clipboard.MemoryClipboard`.
        """
        self.soup = BeautifulSoup(html, "html.parser")
        self.url = url
        self.clipboard: Clipboard = clipboard or MemoryClipboard()
        self.scroll_log: list[ScrollRequest] = []
        self._listeners: dict[int, tuple[Tag, dict[str, list[Listener]]]] = {}
        self._observers: list[Observer] = []
        self._pending: collections.deque[MutationRecord] = collections.deque()
        self._delivering = False

    # -- location -------------------------------------------------------

    @property
    def fragment(self) -> str:
        """Return the URL fragment without the leading ``#``."""
        return urlsplit(self.url).fragment

    def set_fragment(self, fragment: str) -> None:
        """Replace the URL fragment, as assigning ``location.hash`` does."""
        parts = urlsplit(self.url)
        self.url = urlunsplit(parts._replace(fragment=fragment))

    def link_to(self, fragment: str) -> str:
        """Return the page's origin and path followed by ``#fragment``."""
        parts = urlsplit(self.url)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", fragment))

    # -- tree -----------------------------------------------------------

    @property
    def content_root(self) -> Tag:
        """Return ``<body>`` when present, otherwise the document itself."""
        return self.soup.body or self.soup

    def get_element_by_id(self, element_id: str) -> Tag | None:
        """Return the first element whose ``id`` equals ``element_id``."""
        if not element_id:
            return None
        return self.soup.find(id=element_id)

    def create_element(self, name: str, attrs: dict[str, str] | None = None) -> Tag:
        """Create a detached element owned by this document."""
        return self.soup.new_tag(name, attrs=attrs or {})

    def parse_fragment(self, html: str) -> list[Tag]:
        """Parse ``html`` and return its detached top-level elements."""
        fragment = BeautifulSoup(html, "html.parser")
        nodes = list(fragment.contents)
        for node in nodes:
            node.extract()
        return [node for node in nodes if isinstance(node, Tag)]

    def mount(self, html: str, parent: Tag | None = None) -> list[Tag]:
        """Insert raw markup at the end of ``parent`` and notify observers.

        Parameters
        ----------
        html : str
            Markup to inject, typically a rendered fragment.
        parent : Tag, optional
            Container to append into; defaults to :attr:`content_root`.

        Returns
        -------
        list[Tag]
            The inserted top-level elements.
        """
        target = parent if parent is not None else self.content_root
        added = self.parse_fragment(html)
        for node in added:
            target.append(node)
        if added:
            self._notify(MutationRecord(added=tuple(added)))
        return added

    def append_child(self, parent: Tag, child: Tag) -> Tag:
        """Append ``child`` to ``parent`` and notify observers."""
        parent.append(child)
        self._notify(MutationRecord(added=(child,)))
        return child

    def set_inner_html(self, element: Tag, html: str) -> list[Tag]:
        """Replace ``element``'s children with parsed ``html``.

        Listeners registered on the discarded descendants are dropped.
        """
        for descendant in element.find_all(True):
            self._listeners.pop(id(descendant), None)
        element.clear()
        added = self.parse_fragment(html)
        for node in added:
            element.append(node)
        if added:
            self._notify(MutationRecord(added=tuple(added)))
        return added

    # -- mutation delivery ----------------------------------------------

    def observe(self, observer: Observer) -> typ.Callable[[], None]:
        """Register ``observer`` for subtree mutations; return a disconnect."""
        self._observers.append(observer)

        def _disconnect() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _disconnect

    def _notify(self, record: MutationRecord) -> None:
        self._pending.append(record)
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._pending:
                current = self._pending.popleft()
                for observer in list(self._observers):
                    observer(current)
        finally:
            self._delivering = False

    # -- events ---------------------------------------------------------

    def add_event_listener(self, element: Tag, event_type: str, listener: Listener) -> None:
        """Register ``listener`` for ``event_type`` events on ``element``."""
        _, by_type = self._listeners.setdefault(id(element), (element, {}))
        by_type.setdefault(event_type, []).append(listener)

    def listener_count(self, element: Tag, event_type: str) -> int:
        """Return how many listeners ``element`` has for ``event_type``."""
        entry = self._listeners.get(id(element))
        if entry is None:
            return 0
        return len(entry[1].get(event_type, []))

    def dispatch(
        self, element: Tag, event_type: str, *, key: str | None = None
    ) -> list[asyncio.Task[None]]:
        """Deliver an event to ``element``'s listeners.

        Synchronous listeners run immediately. Coroutine listeners are
        scheduled as tasks on the running loop and returned so callers can
        await them; the caller itself is never blocked.
        """
        event = Event(type=event_type, target=element, key=key)
        entry = self._listeners.get(id(element))
        if entry is None:
            return []
        tasks: list[asyncio.Task[None]] = []
        for listener in list(entry[1].get(event_type, [])):
            result = listener(event)
            if inspect.isawaitable(result):
                tasks.append(asyncio.ensure_future(result))
        return tasks

    def click(self, element: Tag) -> list[asyncio.Task[None]]:
        """Dispatch a pointer activation."""
        return self.dispatch(element, "click")

    def press_key(self, element: Tag, key: str) -> list[asyncio.Task[None]]:
        """Dispatch a keyboard activation with ``key`` (``"Enter"``, ``" "``)."""
        return self.dispatch(element, "keydown", key=key)

    # -- effects --------------------------------------------------------

    def set_timeout(
        self, delay: float, callback: typ.Callable[[], None]
    ) -> asyncio.TimerHandle:
        """Run ``callback`` after ``delay`` seconds on the running loop."""
        return asyncio.get_running_loop().call_later(delay, callback)

    def scroll_into_view(self, element: Tag, *, behavior: str = "smooth") -> None:
        """Record a request to bring ``element`` into view."""
        self.scroll_log.append(ScrollRequest(element.get("id"), behavior))

    def serialize(self) -> str:
        """Return the current markup."""
        return str(self.soup)


__all__ = [
    "Event",
    "MutationRecord",
    "PageDocument",
    "ScrollRequest",
    "find_matching",
]
