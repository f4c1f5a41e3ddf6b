"""Inline SVG markup for the enhancer controls."""

_SVG_OPEN = (
    '<svg class="icon" fill="none" stroke="currentColor" viewBox="0 0 24 24" '
    'aria-hidden="true">'
)
_PATH = '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="{d}"/>'

LINK_ICON = (
    _SVG_OPEN
    + _PATH.format(
        d=(
            "M13.828 10.172a4 4 0 00-5.656 0l-4 4a4 4 0 105.656 5.656l1.102-1.101"
            "m-.758-4.899a4 4 0 005.656 0l4-4a4 4 0 00-5.656-5.656l-1.1 1.1"
        )
    )
    + "</svg>"
)
COPY_ICON = (
    _SVG_OPEN
    + _PATH.format(
        d=(
            "M8 16H6a2 2 0 01-2-2V6a2 2 0 012-2h8a2 2 0 012 2v2m-6 12h8a2 2 0 "
            "002-2v-8a2 2 0 00-2-2h-8a2 2 0 00-2 2v8a2 2 0 002 2z"
        )
    )
    + "</svg>"
)
CHECK_ICON = _SVG_OPEN + _PATH.format(d="M5 13l4 4L19 7") + "</svg>"

__all__ = ["CHECK_ICON", "COPY_ICON", "LINK_ICON"]
