"""Progressive enhancement of rendered content.

The enhancers operate on a :class:`~daily_pages.enhance.document.PageDocument`,
which stands in for the browser page: it parses HTML, keeps event listeners,
delivers subtree mutations and exposes the clipboard and URL.
"""

from .anchors import AnchorEnhancer, prerender_heading_controls
from .clipboard import Clipboard, ClipboardError, MemoryClipboard
from .code_blocks import CodeBlockEnhancer
from .disclosure import DisclosureGate, DisclosureState, bind_disclosures
from .document import MutationRecord, PageDocument
from .watcher import ContentEnhancer

__all__ = [
    "AnchorEnhancer",
    "Clipboard",
    "ClipboardError",
    "CodeBlockEnhancer",
    "ContentEnhancer",
    "DisclosureGate",
    "DisclosureState",
    "MemoryClipboard",
    "MutationRecord",
    "PageDocument",
    "bind_disclosures",
    "prerender_heading_controls",
]
