# ui_query/core/needle.py
from __future__ import annotations

"""String needles
-----------------
Small comparison objects used by the text/attribute/property/CSS conditions.
Plain strings match exactly; compiled regex patterns match with `search`.
"""

import re
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class Needle(Protocol):
    def is_match(self, haystack: str) -> bool: ...


@dataclass(frozen=True)
class Exact:
    value: str
    case_sensitive: bool = True

    def is_match(self, haystack: str) -> bool:
        if self.case_sensitive:
            return haystack == self.value
        return haystack.casefold() == self.value.casefold()

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class Contains:
    value: str
    case_sensitive: bool = True

    def is_match(self, haystack: str) -> bool:
        if self.case_sensitive:
            return self.value in haystack
        return self.value.casefold() in haystack.casefold()

    def __str__(self) -> str:
        return f"contains {self.value!r}"


@dataclass(frozen=True)
class Regex:
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, pattern: str, flags: int = 0) -> "Regex":
        return cls(re.compile(pattern, flags))

    def is_match(self, haystack: str) -> bool:
        return self.pattern.search(haystack) is not None

    def __str__(self) -> str:
        return f"/{self.pattern.pattern}/"


NeedleLike = Union[str, re.Pattern[str], Needle]


def to_needle(value: NeedleLike) -> Needle:
    if isinstance(value, str):
        return Exact(value)
    if isinstance(value, re.Pattern):
        return Regex(value)
    if isinstance(value, Needle):
        return value
    raise TypeError(f"cannot match against {type(value).__name__}; use str, re.Pattern or a Needle")
