# ui_query/selectors/locator.py
from __future__ import annotations

import json
from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SelectorStrategy(str, Enum):
    css = "css"
    xpath = "xpath"
    text = "text"
    role = "role"
    id = "id"
    class_name = "class"
    name = "name"
    tag = "tag"
    link_text = "link"
    partial_link_text = "partial-link"


class Selector(BaseModel):
    """One way of locating an element, translated to a Playwright selector string."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="Selector value, interpreted per strategy")
    strategy: SelectorStrategy = Field(default=SelectorStrategy.css)

    @field_validator("value")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("selector.value cannot be empty")
        return v

    # ---------- Constructors ----------

    @classmethod
    def css(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.css)

    @classmethod
    def xpath(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.xpath)

    @classmethod
    def text(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.text)

    @classmethod
    def role(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.role)

    @classmethod
    def id(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.id)

    @classmethod
    def class_name(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.class_name)

    @classmethod
    def name(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.name)

    @classmethod
    def tag(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.tag)

    @classmethod
    def link_text(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.link_text)

    @classmethod
    def partial_link_text(cls, value: str) -> "Selector":
        return cls(value=value, strategy=SelectorStrategy.partial_link_text)

    # ---------- Rendering ----------

    def engine_selector(self) -> str:
        """
        Playwright selector string for `query_selector_all`.
        We prefer Playwright's built-in engines (css, text=, xpath=, role=).
        """
        s, v = self.strategy, self.value
        if s == SelectorStrategy.css:
            return v
        if s == SelectorStrategy.xpath:
            return f"xpath={v}"
        if s == SelectorStrategy.text:
            return f"text={v}"
        if s == SelectorStrategy.role:
            role, name = _parse_role_value(v)
            return f"role={role}" + (f"[name={json.dumps(name)}]" if name else "")
        if s == SelectorStrategy.id:
            return f"[id={json.dumps(v)}]"
        if s == SelectorStrategy.class_name:
            return f"[class~={json.dumps(v)}]"
        if s == SelectorStrategy.name:
            return f"[name={json.dumps(v)}]"
        if s == SelectorStrategy.tag:
            return v
        if s == SelectorStrategy.link_text:
            return f"a:text-is({json.dumps(v)})"
        # partial_link_text
        return f"a:has-text({json.dumps(v)})"

    def __str__(self) -> str:
        return f"{self.strategy.value}:{self.value}"


SelectorLike = Union[Selector, str]


def _parse_role_value(value: str) -> Tuple[str, Optional[str]]:
    """
    Accept a few simple role notations:

    - "button"                      → role="button"
    - "button|Create Project"       → role="button", name="Create Project"
    - "button name=Create Project"  → same as above (space syntax)

    Returns: (role, accessible_name_or_None)
    """
    v = value.strip()
    if "|" in v:
        role, name = v.split("|", 1)
        return role.strip(), name.strip() or None
    if " name=" in v:
        role, name = v.split(" name=", 1)
        return role.strip(), name.strip() or None
    return v, None


def parse_selector(raw: str) -> Selector:
    """
    Parse the `strategy:value` notation used on the command line.

    - "id:searchInput"       → Selector.id("searchInput")
    - "xpath://form//button" → Selector.xpath("//form//button")
    - "button[type=submit]"  → css (no known strategy prefix)
    """
    head, sep, rest = raw.partition(":")
    if sep:
        key = head.strip().lower()
        for strategy in SelectorStrategy:
            if strategy.value == key:
                return Selector(value=rest, strategy=strategy)
    return Selector(value=raw, strategy=SelectorStrategy.css)


def to_selector(sel: SelectorLike) -> Selector:
    """Plain strings are taken as CSS."""
    return sel if isinstance(sel, Selector) else Selector.css(sel)
