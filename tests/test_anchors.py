"""Tests for the heading anchor enhancer.

Headings rendered by the converter are enhanced inside a ``PageDocument``:
each gains exactly one copy-link button, activation copies the page URL with
the heading fragment, the copied state reverts on a timer, and the page
scrolls to the fragment's heading once on initial load.
"""

from __future__ import annotations

import asyncio
import logging

import pytest
from bs4 import Tag

from daily_pages.enhance.anchors import AnchorEnhancer, prerender_heading_controls
from daily_pages.enhance.clipboard import MemoryClipboard
from daily_pages.enhance.document import PageDocument, ScrollRequest
from daily_pages.generator.renderer import convert

PAGE_URL = "https://devops-daily.com/advent-of-devops/day-1?ref=feed"
CONTENT = "## Setup\n\nText.\n\n## Deploy\n\nMore text.\n\n## Setup"


def _page(
    markdown_text: str = CONTENT,
    *,
    url: str = PAGE_URL,
    clipboard: MemoryClipboard | None = None,
    prerender: bool = False,
) -> PageDocument:
    html = convert(markdown_text)
    if prerender:
        html = prerender_heading_controls(html)
    return PageDocument(
        f'<main class="prose">{html}</main>',
        url=url,
        clipboard=clipboard or MemoryClipboard(),
    )


def _control(page: PageDocument, heading_id: str) -> Tag:
    heading = page.get_element_by_id(heading_id)
    assert heading is not None, f"missing heading #{heading_id}"
    controls = heading.find_all("button", attrs={"data-heading-id": True})
    assert len(controls) == 1, f"expected one control on #{heading_id}"
    return controls[0]


def test_enhance_marks_headings_and_adds_one_control() -> None:
    """Every heading with an id is marked and receives a control."""
    page = _page()
    enhanced = AnchorEnhancer(page).enhance()
    assert [h["id"] for h in enhanced] == ["setup", "deploy", "setup-2"]
    for heading_id in ("setup", "deploy", "setup-2"):
        heading = page.get_element_by_id(heading_id)
        assert heading is not None
        assert heading["data-enhanced"] == "true"
        assert _control(page, heading_id)["data-heading-id"] == heading_id


def test_enhance_is_idempotent() -> None:
    """A second pass adds no control and no listener."""
    page = _page()
    enhancer = AnchorEnhancer(page)
    enhancer.enhance()
    assert enhancer.enhance() == []
    control = _control(page, "setup")
    assert page.listener_count(control, "click") == 1
    assert page.listener_count(control, "keydown") == 1


def test_server_rendered_control_is_reused() -> None:
    """Pre-rendered buttons are wired instead of duplicated."""
    page = _page(prerender=True)
    heading = page.get_element_by_id("deploy")
    assert heading is not None
    assert not heading.has_attr("data-enhanced"), "prerender must not mark headings"
    AnchorEnhancer(page).enhance()
    control = _control(page, "deploy")
    assert page.listener_count(control, "click") == 1


def test_headings_without_id_are_ignored() -> None:
    """Only headings carrying an id are candidates."""
    page = PageDocument("<h2>No id</h2>", url=PAGE_URL)
    assert AnchorEnhancer(page).enhance() == []
    assert page.soup.find("button") is None


@pytest.mark.asyncio
async def test_click_copies_page_url_with_fragment() -> None:
    """The copied URL is origin plus path plus the heading fragment."""
    clipboard = MemoryClipboard()
    page = _page(clipboard=clipboard)
    AnchorEnhancer(page).enhance()
    control = _control(page, "setup-2")

    await asyncio.gather(*page.click(control))

    assert clipboard.text == "https://devops-daily.com/advent-of-devops/day-1#setup-2"
    assert control["data-state"] == "copied"
    tooltip = control.find(class_="copy-tooltip")
    assert tooltip is not None
    assert tooltip.get_text() == "Link copied!"


@pytest.mark.asyncio
@pytest.mark.parametrize("key", ["Enter", " "])
async def test_keyboard_activation_copies(key: str) -> None:
    """Enter and Space activate the control."""
    clipboard = MemoryClipboard()
    page = _page(clipboard=clipboard)
    AnchorEnhancer(page).enhance()

    await asyncio.gather(*page.press_key(_control(page, "deploy"), key))

    assert clipboard.writes == [
        "https://devops-daily.com/advent-of-devops/day-1#deploy"
    ]


@pytest.mark.asyncio
async def test_other_keys_do_nothing() -> None:
    """Keys other than Enter and Space are ignored."""
    clipboard = MemoryClipboard()
    page = _page(clipboard=clipboard)
    AnchorEnhancer(page).enhance()
    assert page.press_key(_control(page, "deploy"), "a") == []
    assert clipboard.writes == []


@pytest.mark.asyncio
async def test_copied_state_reverts_after_timeout() -> None:
    """The check icon and tooltip disappear once the timer fires."""
    page = _page()
    AnchorEnhancer(page, reset_after=0.01).enhance()
    control = _control(page, "setup")

    await asyncio.gather(*page.click(control))
    assert control["data-state"] == "copied"
    await asyncio.sleep(0.05)

    assert control["data-state"] == "idle"
    assert control.find(class_="copy-tooltip") is None
    assert control.find("svg") is not None


@pytest.mark.asyncio
async def test_reactivation_restarts_revert_timer() -> None:
    """Clicking again while copied pushes the revert back."""
    page = _page()
    AnchorEnhancer(page, reset_after=0.2).enhance()
    control = _control(page, "setup")

    await asyncio.gather(*page.click(control))
    await asyncio.sleep(0.12)
    await asyncio.gather(*page.click(control))
    await asyncio.sleep(0.12)
    assert control["data-state"] == "copied", "second click should extend the state"

    await asyncio.sleep(0.2)
    assert control["data-state"] == "idle"


@pytest.mark.asyncio
async def test_heading_revert_uses_two_second_default(mocker) -> None:
    """Without configuration the copied state lasts two seconds."""
    page = _page()
    spy = mocker.spy(page, "set_timeout")
    AnchorEnhancer(page).enhance()

    await asyncio.gather(*page.click(_control(page, "setup")))

    assert spy.call_args.args[0] == 2.0


@pytest.mark.asyncio
async def test_clipboard_failure_is_logged_and_state_unchanged(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Denied clipboard writes never raise and leave the control idle."""
    page = _page(clipboard=MemoryClipboard(available=False))
    AnchorEnhancer(page).enhance()
    control = _control(page, "setup")

    with caplog.at_level(logging.WARNING, logger="daily_pages.enhance.controls"):
        await asyncio.gather(*page.click(control))

    assert control["data-state"] == "idle"
    assert "failed to copy" in caplog.text


def test_self_link_sets_fragment_and_scrolls() -> None:
    """Following a heading's own link updates the URL and scrolls smoothly."""
    page = _page()
    AnchorEnhancer(page).enhance()
    heading = page.get_element_by_id("deploy")
    assert heading is not None
    link = heading.find("a", class_="heading-anchor")
    assert link is not None

    assert page.click(link) == []

    assert page.fragment == "deploy"
    assert page.scroll_log == [ScrollRequest("deploy", "smooth")]


@pytest.mark.asyncio
async def test_initial_scroll_targets_fragment_heading() -> None:
    """A matching fragment scrolls its heading into view after the delay."""
    page = _page(url=f"{PAGE_URL}#deploy")
    enhancer = AnchorEnhancer(page, scroll_delay=0.01)
    enhancer.enhance()

    assert enhancer.schedule_initial_scroll() is not None
    assert page.scroll_log == [], "scroll waits for the grace delay"
    await asyncio.sleep(0.05)

    assert page.scroll_log == [ScrollRequest("deploy", "smooth")]
    assert enhancer.schedule_initial_scroll() is None, "initial scroll runs once"


@pytest.mark.asyncio
async def test_initial_scroll_without_match_is_noop() -> None:
    """Unknown fragments and missing fragments do nothing."""
    for url in (f"{PAGE_URL}#missing", PAGE_URL):
        page = _page(url=url)
        enhancer = AnchorEnhancer(page, scroll_delay=0.0)
        enhancer.schedule_initial_scroll()
        await asyncio.sleep(0.01)
        assert page.scroll_log == [], url


def test_prerender_adds_controls_once() -> None:
    """Server-side controls are added once per heading."""
    html = prerender_heading_controls(convert("## One\n\n## Two"))
    again = prerender_heading_controls(html)
    page = PageDocument(again, url=PAGE_URL)
    assert len(page.soup.find_all("button", attrs={"data-heading-id": True})) == 2
