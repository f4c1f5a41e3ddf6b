"""Copy-to-clipboard controls for rendered code blocks."""

from __future__ import annotations

import typing as typ

from daily_pages._constants import CODE_COPY_RESET_SECONDS, PROCESSED_ATTR, STATE_ATTR
from daily_pages.enhance.controls import IDLE_STATE, CopyFeedback
from daily_pages.enhance.document import find_matching
from daily_pages.enhance.icons import COPY_ICON

if typ.TYPE_CHECKING:
    from bs4 import Tag

    from daily_pages.enhance.document import Event, PageDocument

COPY_CODE_LABEL = "Copy code"
CODE_COPIED_LABEL = "Copied!"
CODE_CONTROL_CLASS = "copy-button"


def _needs_processing(tag: Tag) -> bool:
    return tag.name == "pre" and not tag.has_attr(PROCESSED_ATTR)


class CodeBlockEnhancer:
    """Attach a copy button to each ``<pre><code>`` block once."""

    def __init__(
        self, document: PageDocument, *, reset_after: float = CODE_COPY_RESET_SECONDS
    ) -> None:
        self.document = document
        self.reset_after = reset_after
        self.controls: list[CopyFeedback] = []

    def enhance(self, root: Tag | None = None) -> list[Tag]:
        """Process every unmarked code block under ``root``.

        ``<pre>`` elements without a ``<code>`` child are left alone and stay
        unmarked. Returns the blocks handled by this call.
        """
        scope = root if root is not None else self.document.soup
        handled: list[Tag] = []
        for pre in find_matching(scope, _needs_processing):
            code = pre.find("code")
            if code is None:
                continue
            pre[PROCESSED_ATTR] = "true"
            self._attach_control(pre, code.get_text())
            handled.append(pre)
        return handled

    def _attach_control(self, pre: Tag, text: str) -> None:
        control = self.document.create_element(
            "button",
            {
                "type": "button",
                "class": CODE_CONTROL_CLASS,
                "aria-label": COPY_CODE_LABEL,
                STATE_ATTR: IDLE_STATE,
            },
        )
        for node in self.document.parse_fragment(COPY_ICON):
            control.append(node)
        feedback = CopyFeedback(
            self.document,
            control,
            idle_html=COPY_ICON,
            idle_label=COPY_CODE_LABEL,
            copied_label=CODE_COPIED_LABEL,
            reset_after=self.reset_after,
            subject="code block",
        )
        self.controls.append(feedback)

        async def _copy(_event: Event) -> None:
            await feedback.copy(text)

        self.document.add_event_listener(control, "click", _copy)
        self.document.append_child(pre, control)


__all__ = ["CODE_COPIED_LABEL", "COPY_CODE_LABEL", "CodeBlockEnhancer"]
