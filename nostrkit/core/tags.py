"""nostrkit.core.tags

Tags are an ordered list of ordered string lists. Order at both levels is
signed content: nothing here sorts, dedupes in place, or normalizes.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema


class Tag(list[str]):
    """One tag, e.g. ``["e", "<event id>", "wss://relay"]``."""

    @property
    def key(self) -> str:
        return self[0] if self else ""

    @property
    def value(self) -> str:
        return self[1] if len(self) > 1 else ""

    def starts_with(self, prefix: Iterable[str]) -> bool:
        """True if this tag begins with ``prefix``.

        The last prefix element matches as a string prefix, so
        ``["p", "ab"]`` matches ``["p", "abcdef"]``.
        """

        prefix = list(prefix)
        if not prefix:
            return True
        if len(prefix) > len(self):
            return False
        *head, last = prefix
        if any(self[i] != v for i, v in enumerate(head)):
            return False
        return self[len(head)].startswith(last)


class Tags(list[Tag]):
    """Ordered tags attached to an event."""

    def __init__(self, tags: Iterable[Iterable[str]] = ()) -> None:
        super().__init__(Tag(_checked(t)) for t in tags)

    def append(self, tag: Iterable[str]) -> None:
        super().append(Tag(_checked(tag)))

    def insert(self, index: int, tag: Iterable[str]) -> None:  # type: ignore[override]
        super().insert(index, Tag(_checked(tag)))

    def extend(self, tags: Iterable[Iterable[str]]) -> None:
        super().extend(Tag(_checked(t)) for t in tags)

    def to_array(self) -> list[list[str]]:
        """Plain ``list[list[str]]`` in the order held."""

        return [list(t) for t in self]

    def get_first(self, prefix: Iterable[str]) -> Tag | None:
        prefix = list(prefix)
        for t in self:
            if t.starts_with(prefix):
                return t
        return None

    def get_last(self, prefix: Iterable[str]) -> Tag | None:
        prefix = list(prefix)
        for t in reversed(self):
            if t.starts_with(prefix):
                return t
        return None

    def get_all(self, prefix: Iterable[str]) -> Tags:
        prefix = list(prefix)
        return Tags(t for t in self if t.starts_with(prefix))

    def filter_out(self, prefix: Iterable[str]) -> Tags:
        prefix = list(prefix)
        return Tags(t for t in self if not t.starts_with(prefix))

    def contains_any(self, key: str, values: Iterable[str]) -> bool:
        wanted = set(values)
        return any(t.key == key and len(t) > 1 and t.value in wanted for t in self)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            handler.generate_schema(list[list[str]]),
            serialization=core_schema.plain_serializer_function_ser_schema(lambda v: [list(t) for t in v]),
        )


def _checked(tag: Iterable[str]) -> list[str]:
    if isinstance(tag, str):
        raise TypeError("a tag must be a sequence of strings, not a string")
    items = list(tag)
    for item in items:
        if not isinstance(item, str):
            raise TypeError(f"tag elements must be str, got {type(item).__name__}")
    return items
