# ui_query/core/conditions.py
from __future__ import annotations

"""Element predicates
---------------------
Builders for the async predicates consumed by ElementWaiter and ElementQuery.
Each returns `async def predicate(element) -> bool` calling one accessor of the
element (see `ElementLike`). Errors raised by the accessor are left to the
caller's error-tolerance policy.
"""

from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Protocol, Tuple, Union

from ui_query.core.needle import NeedleLike, to_needle

ElementPredicate = Callable[[Any], Union[bool, Awaitable[bool]]]

NamedNeedles = Union[Mapping[str, NeedleLike], Iterable[Tuple[str, NeedleLike]]]


class ElementLike(Protocol):
    """Accessors the predicates rely on (implemented by WebElement)."""

    async def is_present(self) -> bool: ...
    async def is_displayed(self) -> bool: ...
    async def is_selected(self) -> bool: ...
    async def is_enabled(self) -> bool: ...
    async def is_clickable(self) -> bool: ...
    async def get_attribute(self, name: str) -> Optional[str]: ...
    async def get_property(self, name: str) -> Optional[str]: ...
    async def get_css_value(self, name: str) -> str: ...
    async def text(self) -> str: ...
    async def value(self) -> Optional[str]: ...
    async def class_name(self) -> Optional[str]: ...


def _pairs(desired: NamedNeedles) -> list[tuple[str, Any]]:
    items = desired.items() if isinstance(desired, Mapping) else desired
    return [(name, to_needle(needle)) for name, needle in items]


# ---------- State ----------

def element_is_stale() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return not await elem.is_present()
    return predicate


def element_is_displayed() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return await elem.is_displayed()
    return predicate


def element_is_not_displayed() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return not await elem.is_displayed()
    return predicate


def element_is_selected() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return await elem.is_selected()
    return predicate


def element_is_not_selected() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return not await elem.is_selected()
    return predicate


def element_is_enabled() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return await elem.is_enabled()
    return predicate


def element_is_not_enabled() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return not await elem.is_enabled()
    return predicate


def element_is_clickable() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return await elem.is_clickable()
    return predicate


def element_is_not_clickable() -> ElementPredicate:
    async def predicate(elem: ElementLike) -> bool:
        return not await elem.is_clickable()
    return predicate


# ---------- Class / text / value ----------

def element_has_class(class_name: NeedleLike) -> ElementPredicate:
    """True when any whitespace-separated class matches the needle."""
    needle = to_needle(class_name)

    async def predicate(elem: ElementLike) -> bool:
        classes = (await elem.class_name() or "").split()
        return any(needle.is_match(c) for c in classes)
    return predicate


def element_lacks_class(class_name: NeedleLike) -> ElementPredicate:
    has = element_has_class(class_name)

    async def predicate(elem: ElementLike) -> bool:
        return not await has(elem)
    return predicate


def element_has_text(text: NeedleLike) -> ElementPredicate:
    needle = to_needle(text)

    async def predicate(elem: ElementLike) -> bool:
        return needle.is_match(await elem.text())
    return predicate


def element_lacks_text(text: NeedleLike) -> ElementPredicate:
    needle = to_needle(text)

    async def predicate(elem: ElementLike) -> bool:
        return not needle.is_match(await elem.text())
    return predicate


def element_has_value(value: NeedleLike) -> ElementPredicate:
    needle = to_needle(value)

    async def predicate(elem: ElementLike) -> bool:
        current = await elem.value()
        return current is not None and needle.is_match(current)
    return predicate


def element_lacks_value(value: NeedleLike) -> ElementPredicate:
    needle = to_needle(value)

    async def predicate(elem: ElementLike) -> bool:
        current = await elem.value()
        return current is None or not needle.is_match(current)
    return predicate


# ---------- Attributes / properties / CSS ----------
# A missing attribute or property never "has" a value and always "lacks" it.

def element_has_attribute(name: str, value: NeedleLike) -> ElementPredicate:
    needle = to_needle(value)

    async def predicate(elem: ElementLike) -> bool:
        current = await elem.get_attribute(name)
        return current is not None and needle.is_match(current)
    return predicate


def element_lacks_attribute(name: str, value: NeedleLike) -> ElementPredicate:
    needle = to_needle(value)

    async def predicate(elem: ElementLike) -> bool:
        current = await elem.get_attribute(name)
        return current is None or not needle.is_match(current)
    return predicate


def element_has_attributes(desired: NamedNeedles) -> ElementPredicate:
    pairs = _pairs(desired)

    async def predicate(elem: ElementLike) -> bool:
        for name, needle in pairs:
            current = await elem.get_attribute(name)
            if current is None or not needle.is_match(current):
                return False
        return True
    return predicate


def element_lacks_attributes(desired: NamedNeedles) -> ElementPredicate:
    pairs = _pairs(desired)

    async def predicate(elem: ElementLike) -> bool:
        for name, needle in pairs:
            current = await elem.get_attribute(name)
            if current is not None and needle.is_match(current):
                return False
        return True
    return predicate


def element_has_property(name: str, value: NeedleLike) -> ElementPredicate:
    needle = to_needle(value)

    async def predicate(elem: ElementLike) -> bool:
        current = await elem.get_property(name)
        return current is not None and needle.is_match(current)
    return predicate


def element_lacks_property(name: str, value: NeedleLike) -> ElementPredicate:
    needle = to_needle(value)

    async def predicate(elem: ElementLike) -> bool:
        current = await elem.get_property(name)
        return current is None or not needle.is_match(current)
    return predicate


def element_has_properties(desired: NamedNeedles) -> ElementPredicate:
    pairs = _pairs(desired)

    async def predicate(elem: ElementLike) -> bool:
        for name, needle in pairs:
            current = await elem.get_property(name)
            if current is None or not needle.is_match(current):
                return False
        return True
    return predicate


def element_lacks_properties(desired: NamedNeedles) -> ElementPredicate:
    pairs = _pairs(desired)

    async def predicate(elem: ElementLike) -> bool:
        for name, needle in pairs:
            current = await elem.get_property(name)
            if current is not None and needle.is_match(current):
                return False
        return True
    return predicate


def element_has_css_property(name: str, value: NeedleLike) -> ElementPredicate:
    needle = to_needle(value)

    async def predicate(elem: ElementLike) -> bool:
        return needle.is_match(await elem.get_css_value(name))
    return predicate


def element_lacks_css_property(name: str, value: NeedleLike) -> ElementPredicate:
    needle = to_needle(value)

    async def predicate(elem: ElementLike) -> bool:
        return not needle.is_match(await elem.get_css_value(name))
    return predicate


def element_has_css_properties(desired: NamedNeedles) -> ElementPredicate:
    pairs = _pairs(desired)

    async def predicate(elem: ElementLike) -> bool:
        for name, needle in pairs:
            if not needle.is_match(await elem.get_css_value(name)):
                return False
        return True
    return predicate


def element_lacks_css_properties(desired: NamedNeedles) -> ElementPredicate:
    pairs = _pairs(desired)

    async def predicate(elem: ElementLike) -> bool:
        for name, needle in pairs:
            if needle.is_match(await elem.get_css_value(name)):
                return False
        return True
    return predicate
