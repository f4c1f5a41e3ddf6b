"""Heading anchor enhancer: copy-link controls and fragment scrolling.

Headings arrive from the converter with an ``id`` and a self-link. The
enhancer adds (or reuses a server-rendered) copy-link button, wires pointer and
keyboard activation, and marks the heading ``data-enhanced`` before doing any
other work so a mutation-triggered pass over the same subtree is a no-op.
"""

from __future__ import annotations

import logging
import typing as typ

from bs4 import BeautifulSoup, Tag

from daily_pages._constants import (
    ENHANCED_ATTR,
    HEADING_CONTROL_ATTR,
    HEADING_COPY_RESET_SECONDS,
    HEADING_TAGS,
    INITIAL_SCROLL_DELAY_SECONDS,
    STATE_ATTR,
)
from daily_pages.enhance.controls import IDLE_STATE, CopyFeedback
from daily_pages.enhance.document import find_matching
from daily_pages.enhance.icons import LINK_ICON

if typ.TYPE_CHECKING:
    import asyncio
    import collections.abc as cabc

    from daily_pages.enhance.document import Event, PageDocument

logger = logging.getLogger(__name__)

ACTIVATION_KEYS = frozenset({"Enter", " "})
COPY_LINK_LABEL = "Copy link to section"
LINK_COPIED_TEXT = "Link copied!"
HEADING_CONTROL_CLASS = "heading-copy"


def _control_attrs(heading_id: str) -> dict[str, str]:
    return {
        "type": "button",
        "class": HEADING_CONTROL_CLASS,
        HEADING_CONTROL_ATTR: heading_id,
        "aria-label": COPY_LINK_LABEL,
        STATE_ATTR: IDLE_STATE,
    }


def _is_heading(tag: Tag) -> bool:
    return tag.name in HEADING_TAGS and bool(tag.get("id"))


def _needs_enhancement(tag: Tag) -> bool:
    return _is_heading(tag) and not tag.has_attr(ENHANCED_ATTR)


def _find_control(heading: Tag) -> Tag | None:
    return heading.find("button", attrs={HEADING_CONTROL_ATTR: True})


def _find_self_link(heading: Tag) -> Tag | None:
    return heading.find("a", href=lambda href: bool(href) and href.startswith("#"))


def prerender_heading_controls(html: str) -> str:
    """Add copy-link buttons to every heading with an ``id`` in ``html``.

    The buttons are inert markup; headings are not marked enhanced, so the
    client-side :class:`AnchorEnhancer` still finds them and wires the
    existing buttons instead of creating new ones. Headings that already hold
    a control are left unchanged.
    """
    soup = BeautifulSoup(html, "html.parser")
    for heading in soup.find_all(_is_heading):
        if _find_control(heading) is not None:
            continue
        control = soup.new_tag("button", attrs=_control_attrs(heading["id"]))
        for node in list(BeautifulSoup(LINK_ICON, "html.parser").contents):
            control.append(node)
        heading.append(control)
    return str(soup)


class AnchorEnhancer:
    """Attach copy-link behaviour to headings inside a :class:`PageDocument`."""

    def __init__(
        self,
        document: PageDocument,
        *,
        reset_after: float = HEADING_COPY_RESET_SECONDS,
        scroll_delay: float = INITIAL_SCROLL_DELAY_SECONDS,
    ) -> None:
        """Bind the enhancer to ``document``.

        Parameters
        ----------
        document : PageDocument
            Page whose headings are enhanced.
        reset_after : float, optional
            Seconds the "copied" state stays visible.
        scroll_delay : float, optional
            Grace delay before the initial fragment scroll.
        """
        self.document = document
        self.reset_after = reset_after
        self.scroll_delay = scroll_delay
        self.controls: dict[str, CopyFeedback] = {}
        self._initial_scroll: asyncio.TimerHandle | None = None
        self._initial_scroll_requested = False

    def enhance(self, root: Tag | None = None) -> list[Tag]:
        """Enhance every not-yet-enhanced heading under ``root``.

        Returns the headings handled by this call; headings already marked
        ``data-enhanced`` are skipped.
        """
        scope = root if root is not None else self.document.soup
        headings = find_matching(scope, _needs_enhancement)
        for heading in headings:
            self._enhance_heading(heading)
        return headings

    def _enhance_heading(self, heading: Tag) -> None:
        heading_id = heading["id"]
        heading[ENHANCED_ATTR] = "true"

        control = _find_control(heading)
        if control is None:
            control = self.document.create_element(
                "button", _control_attrs(heading_id)
            )
            for node in self.document.parse_fragment(LINK_ICON):
                control.append(node)
            self.document.append_child(heading, control)

        feedback = CopyFeedback(
            self.document,
            control,
            idle_html=LINK_ICON,
            idle_label=COPY_LINK_LABEL,
            copied_label=COPY_LINK_LABEL,
            reset_after=self.reset_after,
            tooltip=LINK_COPIED_TEXT,
            subject=f"link to #{heading_id}",
        )
        self.controls[heading_id] = feedback

        async def _copy_link(event: Event) -> None:
            event.prevent_default()
            await feedback.copy(self.document.link_to(heading_id))

        def _on_keydown(event: Event) -> cabc.Awaitable[None] | None:
            if event.key not in ACTIVATION_KEYS:
                return None
            return _copy_link(event)

        self.document.add_event_listener(control, "click", _copy_link)
        self.document.add_event_listener(control, "keydown", _on_keydown)

        link = _find_self_link(heading)
        if link is not None:

            def _follow(event: Event) -> None:
                event.prevent_default()
                self.document.set_fragment(heading_id)
                self.document.scroll_into_view(heading, behavior="smooth")

            self.document.add_event_listener(link, "click", _follow)

    def schedule_initial_scroll(self) -> asyncio.TimerHandle | None:
        """Scroll to the URL fragment's heading after the grace delay.

        Only the first call schedules anything; later calls return ``None``.
        """
        if self._initial_scroll_requested:
            return None
        self._initial_scroll_requested = True
        self._initial_scroll = self.document.set_timeout(
            self.scroll_delay, self.scroll_to_fragment
        )
        return self._initial_scroll

    def scroll_to_fragment(self) -> bool:
        """Scroll the heading named by the URL fragment into view.

        Returns ``False`` without side effects when there is no fragment or no
        heading carries that id.
        """
        fragment = self.document.fragment
        if not fragment:
            return False
        target = self.document.get_element_by_id(fragment)
        if target is None or not _is_heading(target):
            logger.debug("no heading matches fragment #%s", fragment)
            return False
        self.document.scroll_into_view(target, behavior="smooth")
        return True


__all__ = [
    "ACTIVATION_KEYS",
    "AnchorEnhancer",
    "LINK_COPIED_TEXT",
    "prerender_heading_controls",
]
