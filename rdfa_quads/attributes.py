"""Three-state view over an element's raw attributes.

Each attribute is either ABSENT, present and empty (``""``), or present with
a value. The tokenizer reports attributes written without a value
(``<div inlist>``) as present and empty.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from .types import ABSENT


# Attributes that make an element take part in RDFa processing. An element
# with none of them is a pass-through element.
RDFA_ATTRIBUTES = frozenset({
    "about", "typeof", "property", "rel", "rev", "resource", "href", "src",
})


class AttributeView:
    """Read-only attribute lookup that preserves absent vs empty."""

    __slots__ = ("_values",)

    def __init__(self, attrs: Mapping[str, str | None] | Iterable[tuple[str, str | None]] = ()):
        pairs = attrs.items() if isinstance(attrs, Mapping) else attrs
        values: dict[str, str] = {}
        for name, value in pairs:
            name = name.lower()
            # HTML keeps the first occurrence of a duplicated attribute
            if name not in values:
                values[name] = "" if value is None else value
        self._values = values

    def get(self, name: str):
        """Raw value, ``""`` when present without a value, else ABSENT."""
        return self._values.get(name, ABSENT)

    def has(self, name: str) -> bool:
        return name in self._values

    def has_any(self, *names: str) -> bool:
        return any(name in self._values for name in names)

    @property
    def is_rdfa(self) -> bool:
        return not RDFA_ATTRIBUTES.isdisjoint(self._values)

    def items(self):
        return self._values.items()

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __repr__(self) -> str:
        return f"AttributeView({self._values!r})"
