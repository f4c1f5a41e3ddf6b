"""Run the enhancers once on mount and again for every inserted subtree."""

from __future__ import annotations

import logging
import typing as typ

from daily_pages.config.models import EnhancementConfig
from daily_pages.enhance.anchors import AnchorEnhancer
from daily_pages.enhance.code_blocks import CodeBlockEnhancer
from daily_pages.enhance.disclosure import DisclosureGate, bind_disclosures

if typ.TYPE_CHECKING:
    from bs4 import Tag

    from daily_pages.enhance.document import MutationRecord, PageDocument

logger = logging.getLogger(__name__)


class ContentEnhancer:
    """Keep a :class:`PageDocument` enhanced as its content changes.

    Examples
    --------
    >>> from daily_pages.enhance.document import PageDocument
    >>> page = PageDocument("<main></main>", url="https://example.com/a")
    >>> enhancer = ContentEnhancer(page)
    >>> enhancer.attach(initial_load=False)
    >>> _ = page.mount('<h2 id="intro">Intro</h2>')
    >>> page.soup.h2["data-enhanced"]
    'true'
    """

    def __init__(
        self, document: PageDocument, settings: EnhancementConfig | None = None
    ) -> None:
        settings = settings or EnhancementConfig()
        self.document = document
        self.anchors = AnchorEnhancer(
            document,
            reset_after=settings.heading_copy_reset,
            scroll_delay=settings.initial_scroll_delay,
        )
        self.code_blocks = CodeBlockEnhancer(
            document, reset_after=settings.code_copy_reset
        )
        self.disclosures: list[DisclosureGate] = []
        self._disconnect: typ.Callable[[], None] | None = None

    @property
    def attached(self) -> bool:
        """Return ``True`` while the mutation observer is connected."""
        return self._disconnect is not None

    def attach(self, *, initial_load: bool = True) -> None:
        """Enhance the current content and start watching for insertions.

        Parameters
        ----------
        initial_load : bool, optional
            Also schedule the one-off scroll to the URL fragment's heading.
            Requires a running event loop.
        """
        if self.attached:
            return
        self.enhance()
        self._disconnect = self.document.observe(self._on_mutation)
        if initial_load:
            self.anchors.schedule_initial_scroll()

    def detach(self) -> None:
        """Stop reacting to mutations."""
        if self._disconnect is not None:
            self._disconnect()
            self._disconnect = None

    def enhance(self, root: Tag | None = None) -> None:
        """Run every enhancer over ``root`` (the whole document by default)."""
        headings = self.anchors.enhance(root)
        blocks = self.code_blocks.enhance(root)
        gates = bind_disclosures(self.document, root)
        self.disclosures.extend(gates)
        if headings or blocks or gates:
            logger.debug(
                "enhanced %d headings, %d code blocks, %d disclosures",
                len(headings),
                len(blocks),
                len(gates),
            )

    def _on_mutation(self, record: MutationRecord) -> None:
        for node in record.added:
            if node.parent is None:
                continue
            self.enhance(node)


__all__ = ["ContentEnhancer"]
