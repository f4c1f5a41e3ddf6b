"""Common literal values used across daily_pages.

These constants keep marker attributes, section headings, and metadata
filenames centralized so the renderer, the enhancers, and the tests import the
same values without drifting. Intended for internal use within the
daily_pages package.

Examples
--------
>>> from daily_pages import _constants
>>> _constants.PAGE_META_TEMPLATE.format(key="day-1")
'.daily-pages-day-1-meta.json'
>>> _constants.SOLUTION_HEADING
'## Solution'
"""

PAGE_META_TEMPLATE = ".daily-pages-{key}-meta.json"

SOLUTION_HEADING = "## Solution"
VISIBLE_SECTION_TITLES = ("Result", "Validation", "Links", "Share Your Success")

ENHANCED_ATTR = "data-enhanced"
PROCESSED_ATTR = "data-processed"
HEADING_CONTROL_ATTR = "data-heading-id"
LANGUAGE_ATTR = "data-language"
STATE_ATTR = "data-state"
DISCLOSURE_ATTR = "data-disclosure"

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

HEADING_COPY_RESET_SECONDS = 2.0
CODE_COPY_RESET_SECONDS = 1.0
INITIAL_SCROLL_DELAY_SECONDS = 0.1
