import pytest
from pydantic import ValidationError

from ui_query.selectors.locator import Selector, SelectorStrategy, parse_selector, to_selector


@pytest.mark.parametrize(
    "selector,expected",
    [
        (Selector.css("a.missing"), "a.missing"),
        (Selector.xpath("//form//button"), "xpath=//form//button"),
        (Selector.text("More information"), "text=More information"),
        (Selector.role("button"), "role=button"),
        (Selector.role("button|Create Project"), 'role=button[name="Create Project"]'),
        (Selector.role("textbox name=Search"), 'role=textbox[name="Search"]'),
        (Selector.id("real"), '[id="real"]'),
        (Selector.class_name("firstHeading"), '[class~="firstHeading"]'),
        (Selector.name("q"), '[name="q"]'),
        (Selector.tag("h1"), "h1"),
        (Selector.link_text("Log in"), 'a:text-is("Log in")'),
        (Selector.partial_link_text("Log"), 'a:has-text("Log")'),
    ],
)
def test_engine_selector(selector, expected):
    assert selector.engine_selector() == expected


def test_quotes_are_escaped():
    assert Selector.id('we"ird').engine_selector() == '[id="we\\"ird"]'


def test_empty_value_is_rejected():
    with pytest.raises(ValidationError):
        Selector.css("   ")


def test_parse_selector_prefixes():
    assert parse_selector("id:searchInput") == Selector.id("searchInput")
    assert parse_selector("partial-link:Log") == Selector.partial_link_text("Log")
    assert parse_selector("XPATH://div").strategy == SelectorStrategy.xpath


def test_parse_selector_defaults_to_css():
    # "a" is not a strategy, so the colon belongs to the CSS pseudo-class
    assert parse_selector("a:hover") == Selector.css("a:hover")
    assert parse_selector("button[type='submit']").strategy == SelectorStrategy.css


def test_to_selector_and_str():
    assert to_selector("div.card") == Selector.css("div.card")
    assert str(Selector.id("real")) == "id:real"


@pytest.mark.parametrize("strategy", list(SelectorStrategy))
def test_every_strategy_maps_to_an_engine_selector(strategy):
    engine = Selector(value="main", strategy=strategy).engine_selector()
    if strategy in (SelectorStrategy.css, SelectorStrategy.tag):
        assert engine == "main"
    else:
        assert engine != "main" and "main" in engine
