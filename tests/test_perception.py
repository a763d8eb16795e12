import pytest

from web_task_agent.models import ElementDescriptor
from web_task_agent.perception import (
    _COLLECT_JS,
    INTERACTIVE_SELECTOR,
    MAX_TEXT_LENGTH,
    NO_ELEMENTS_FOUND,
    SUMMARY_HEADER,
    Perception,
    infer_selector,
    render_summary,
)

from .fakes import FakeElement, FakePage


def test_selector_prefers_id_over_class():
    assert infer_selector("button", "submit", "btn primary") == "#submit"


def test_selector_uses_first_non_empty_class():
    assert infer_selector("a", "", "  card-link   extra") == ".card-link"


def test_selector_falls_back_to_tag():
    assert infer_selector("input", None, "   ") == "input"
    assert infer_selector("a", "", None) == "a"


def test_selector_quotes_ids_that_are_not_css_identifiers():
    assert infer_selector("button", "1st:step", "") == "[id='1st:step']"
    assert infer_selector("a", "", "w-1/2 x") == "[class~='w-1/2']"
    assert infer_selector("a", "it's", "") == "[id='it\\'s']"


def test_quoted_selector_renders_unambiguously():
    line = ElementDescriptor("button", infer_selector("button", "1st:step", ""), "Go").render()

    assert line == "<button selector=\"[id='1st:step']\">Go</button>"
    assert line.count('"') == 2


def test_interactive_selector_covers_aria_roles():
    for part in ("a", "button", "input", '[role="button"]', '[role="link"]'):
        assert part in INTERACTIVE_SELECTOR


@pytest.mark.asyncio
async def test_extract_skips_elements_without_bounding_box(page):
    descriptors = await Perception().extract_elements(page)

    assert [d.selector for d in descriptors] == ["#home", ".btn", "#email"]
    assert all("Hidden" not in d.text for d in descriptors)


@pytest.mark.asyncio
async def test_extract_trims_and_bounds_text():
    long_text = "  " + "x" * 250 + "  "
    page = FakePage([FakeElement("a", text=long_text)])

    [descriptor] = await Perception().extract_elements(page)

    assert descriptor.text == "x" * MAX_TEXT_LENGTH


@pytest.mark.asyncio
async def test_extract_is_recomputed_on_every_call(page):
    perception = Perception()
    first = await perception.extract_elements(page)

    page.elements.append(FakeElement("a", id="new-link", text="New"))
    second = await perception.extract_elements(page)

    assert len(second) == len(first) + 1
    assert second[-1].selector == "#new-link"


@pytest.mark.asyncio
async def test_summary_renders_one_line_per_element(page):
    summary = await Perception().summarize(page)

    lines = summary.splitlines()
    assert lines[0] == SUMMARY_HEADER
    assert lines[1] == '<a selector="#home">Home</a>'
    assert lines[2] == '<button selector=".btn">Sign up</button>'
    assert lines[3] == '<input selector="#email"></input>'


@pytest.mark.asyncio
async def test_summary_of_page_with_only_hidden_elements_is_sentinel():
    page = FakePage([FakeElement("button", id="x", visible=False)])

    assert await Perception().summarize(page) == NO_ELEMENTS_FOUND


def test_render_summary_empty_is_sentinel_not_error():
    assert render_summary([]) == NO_ELEMENTS_FOUND
    assert render_summary([ElementDescriptor("a", "a", "")]).startswith(SUMMARY_HEADER)


def test_visibility_is_filtered_inside_the_page_script():
    assert "getClientRects().length > 0" in _COLLECT_JS


@pytest.mark.asyncio
async def test_extract_uses_a_single_browser_round_trip():
    page = FakePage([FakeElement("a", id=f"link-{i}", text=str(i)) for i in range(50)])

    descriptors = await Perception().extract_elements(page)

    assert len(descriptors) == 50
    assert page.round_trips == 1
    assert page.queried == [INTERACTIVE_SELECTOR]
