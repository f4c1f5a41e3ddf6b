"""Reveal behaviour for the collapsed solution container.

The container markup comes from ``templates/disclosure.jinja``: a
``<section data-disclosure data-state="collapsed">`` holding a toggle button
and a ``hidden`` content ``<div>``. The hidden HTML always stays in the
document; the gate only flips visibility state.
"""

from __future__ import annotations

import enum
import logging
import typing as typ

from daily_pages._constants import DISCLOSURE_ATTR, ENHANCED_ATTR, STATE_ATTR
from daily_pages.enhance.document import find_matching

if typ.TYPE_CHECKING:
    from bs4 import Tag

    from daily_pages.enhance.document import Event, PageDocument

logger = logging.getLogger(__name__)

TOGGLE_CLASS = "solution-reveal-toggle"


class DisclosureState(enum.StrEnum):
    """Visibility of a disclosure container."""

    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


class DisclosureGate:
    """Toggle one disclosure container between collapsed and expanded."""

    def __init__(self, document: PageDocument, container: Tag) -> None:
        """Locate the toggle and content of ``container``.

        Raises
        ------
        ValueError
            If the container has no toggle button or the button's
            ``aria-controls`` does not name an element inside the container.
        """
        self.document = document
        self.container = container
        toggle = container.find("button", class_=TOGGLE_CLASS)
        if toggle is None:
            msg = "disclosure container has no toggle button"
            raise ValueError(msg)
        content_id = toggle.get("aria-controls", "")
        content = container.find(id=content_id) if content_id else None
        if content is None:
            msg = f"disclosure toggle controls missing element '{content_id}'"
            raise ValueError(msg)
        self.toggle_control: Tag = toggle
        self.content: Tag = content

    @property
    def state(self) -> DisclosureState:
        """Return the container's current state."""
        raw = self.container.get(STATE_ATTR, DisclosureState.COLLAPSED.value)
        return DisclosureState(raw)

    def toggle(self) -> DisclosureState:
        """Flip the state and return the new one."""
        if self.state is DisclosureState.COLLAPSED:
            self.expand()
        else:
            self.collapse()
        return self.state

    def expand(self) -> None:
        """Show the content."""
        self._apply(DisclosureState.EXPANDED)

    def collapse(self) -> None:
        """Hide the content without removing it."""
        self._apply(DisclosureState.COLLAPSED)

    def _apply(self, state: DisclosureState) -> None:
        expanded = state is DisclosureState.EXPANDED
        self.container[STATE_ATTR] = state.value
        self.toggle_control["aria-expanded"] = "true" if expanded else "false"
        if expanded:
            if self.content.has_attr("hidden"):
                del self.content["hidden"]
        else:
            self.content["hidden"] = ""

    def bind(self) -> None:
        """Wire the toggle button's click to :meth:`toggle`."""

        def _on_click(event: Event) -> None:
            event.prevent_default()
            self.toggle()

        self.document.add_event_listener(self.toggle_control, "click", _on_click)


def _needs_binding(tag: Tag) -> bool:
    return tag.has_attr(DISCLOSURE_ATTR) and not tag.has_attr(ENHANCED_ATTR)


def bind_disclosures(
    document: PageDocument, root: Tag | None = None
) -> list[DisclosureGate]:
    """Bind every unbound disclosure container under ``root``.

    Malformed containers are marked, logged and skipped.
    """
    scope = root if root is not None else document.soup
    gates: list[DisclosureGate] = []
    for container in find_matching(scope, _needs_binding):
        container[ENHANCED_ATTR] = "true"
        try:
            gate = DisclosureGate(document, container)
        except ValueError:
            logger.warning("skipping malformed disclosure container", exc_info=True)
            continue
        gate.bind()
        gates.append(gate)
    return gates


__all__ = ["DisclosureGate", "DisclosureState", "bind_disclosures"]
