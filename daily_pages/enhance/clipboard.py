"""Clipboard collaborators used by the copy controls."""

from __future__ import annotations

import typing as typ


class ClipboardError(RuntimeError):
    """Raised when the clipboard rejects or cannot perform a write."""


class Clipboard(typ.Protocol):
    """Asynchronous text clipboard, as exposed by the hosting page."""

    async def write_text(self, text: str) -> None:
        """Store ``text``; raise :class:`ClipboardError` on denial."""
        ...


class MemoryClipboard:
    """Clipboard that keeps written text in memory.

    Parameters
    ----------
    available : bool, optional
        When ``False`` every write raises :class:`ClipboardError`, mirroring a
        denied permission or an insecure context.
    """

    def __init__(self, *, available: bool = True) -> None:
        self.available = available
        self.text: str | None = None
        self.writes: list[str] = []

    async def write_text(self, text: str) -> None:
        """Record ``text`` as the clipboard contents."""
        if not self.available:
            msg = "clipboard write denied"
            raise ClipboardError(msg)
        self.text = text
        self.writes.append(text)


__all__ = ["Clipboard", "ClipboardError", "MemoryClipboard"]
