"""Copy-to-clipboard controls with a transient "copied" presentation."""

from __future__ import annotations

import logging
import typing as typ
from html import escape

from daily_pages._constants import STATE_ATTR
from daily_pages.enhance.icons import CHECK_ICON

if typ.TYPE_CHECKING:
    import asyncio

    from bs4 import Tag

    from daily_pages.enhance.document import PageDocument

logger = logging.getLogger(__name__)

IDLE_STATE = "idle"
COPIED_STATE = "copied"


class CopyFeedback:
    """Write text to the clipboard and flip ``control`` into its copied state.

    The copied state shows a check icon (and an optional tooltip) and reverts
    to the idle icon after ``reset_after`` seconds. Activating the control
    again while it is still copied restarts the revert timer.
    """

    def __init__(
        self,
        document: PageDocument,
        control: Tag,
        *,
        idle_html: str,
        idle_label: str,
        copied_label: str,
        reset_after: float,
        tooltip: str | None = None,
        subject: str = "text",
    ) -> None:
        self.document = document
        self.control = control
        self.idle_html = idle_html
        self.idle_label = idle_label
        self.copied_label = copied_label
        self.reset_after = reset_after
        self.tooltip = tooltip
        self.subject = subject
        self._timer: asyncio.TimerHandle | None = None

    @property
    def state(self) -> str:
        """Return ``"idle"`` or ``"copied"``."""
        return self.control.get(STATE_ATTR, IDLE_STATE)

    async def copy(self, text: str) -> bool:
        """Copy ``text``; return ``False`` when the clipboard refuses it.

        Clipboard failures are logged and leave the control in its current
        state. Clipboards outside this package may raise their own errors
        (``PermissionError`` and the like); those are treated the same as
        :class:`~daily_pages.enhance.clipboard.ClipboardError`.
        """
        try:
            await self.document.clipboard.write_text(text)
        except Exception:
            logger.warning("failed to copy %s to clipboard", self.subject, exc_info=True)
            return False
        self.show_copied()
        return True

    def show_copied(self) -> None:
        """Display the copied state and (re)start the revert timer."""
        self.cancel()
        self.control[STATE_ATTR] = COPIED_STATE
        self.control["aria-label"] = self.copied_label
        markup = CHECK_ICON
        if self.tooltip:
            markup += (
                f'<span class="copy-tooltip" role="status">{escape(self.tooltip)}</span>'
            )
        self.document.set_inner_html(self.control, markup)
        self._timer = self.document.set_timeout(self.reset_after, self.reset)

    def reset(self) -> None:
        """Return the control to its idle icon and label."""
        self._timer = None
        self.control[STATE_ATTR] = IDLE_STATE
        self.control["aria-label"] = self.idle_label
        self.document.set_inner_html(self.control, self.idle_html)

    def cancel(self) -> None:
        """Cancel a pending revert, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["COPIED_STATE", "IDLE_STATE", "CopyFeedback"]
