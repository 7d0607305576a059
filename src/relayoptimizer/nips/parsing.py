"""
Declarative, lenient field parsing for untrusted JSON documents.

Relays and other clients publish arbitrary JSON (NIP-11 documents, kind 0
profile content). Each data model declares a
[FieldSpec][relayoptimizer.nips.parsing.FieldSpec] naming the fields it
expects per type; [parse_fields][relayoptimizer.nips.parsing.parse_fields]
keeps the values of the right type and silently drops everything else.
Nothing in this module raises on bad input.

Note:
    ``bool`` is a subclass of ``int`` in Python, so integer fields reject
    booleans explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable


_SKIP: Any = object()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _scalar(check: Callable[[Any], bool]) -> Callable[[Any], Any]:
    def parse(value: Any) -> Any:
        return value if check(value) else _SKIP

    return parse


def _list_of(check: Callable[[Any], bool]) -> Callable[[Any], Any]:
    def parse(value: Any) -> Any:
        if not isinstance(value, list):
            return _SKIP
        items = [item for item in value if check(item)]
        return items or _SKIP

    return parse


def _parse_float(value: Any) -> Any:
    if _is_int(value) or isinstance(value, float):
        return float(value)
    return _SKIP


_PARSERS: dict[str, Callable[[Any], Any]] = {
    "int_fields": _scalar(_is_int),
    "bool_fields": _scalar(lambda v: isinstance(v, bool)),
    "str_fields": _scalar(lambda v: isinstance(v, str)),
    "float_fields": _parse_float,
    "str_list_fields": _list_of(lambda v: isinstance(v, str)),
    "int_list_fields": _list_of(_is_int),
}


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Expected type of each parsed field, as sets of field names.

    Attributes:
        int_fields: ``int`` values (``bool`` excluded).
        bool_fields: ``bool`` values.
        str_fields: ``str`` values.
        float_fields: ``float`` values (``int`` accepted and converted).
        str_list_fields: Lists of ``str``; other elements are dropped.
        int_list_fields: Lists of ``int``; other elements are dropped.

    Fields not named in any set are ignored.
    """

    int_fields: frozenset[str] = field(default_factory=frozenset)
    bool_fields: frozenset[str] = field(default_factory=frozenset)
    str_fields: frozenset[str] = field(default_factory=frozenset)
    float_fields: frozenset[str] = field(default_factory=frozenset)
    str_list_fields: frozenset[str] = field(default_factory=frozenset)
    int_list_fields: frozenset[str] = field(default_factory=frozenset)

    def parser_for(self, name: str) -> Callable[[Any], Any] | None:
        """Parser of field *name*, or ``None`` when the field is not declared."""
        for attr, parser in _PARSERS.items():
            if name in getattr(self, attr):
                return parser
        return None


def parse_fields(data: dict[str, Any], spec: FieldSpec) -> dict[str, Any]:
    """Return the fields of *data* that match *spec*, dropping the rest.

    Empty lists (after filtering) are dropped too.

    Examples:
        ```python
        spec = FieldSpec(str_fields=frozenset({"name"}), int_list_fields=frozenset({"nips"}))
        parse_fields({"name": "x", "nips": [1, "2", True], "junk": 3}, spec)
        # {'name': 'x', 'nips': [1]}
        ```
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        parser = spec.parser_for(key)
        if parser is None:
            continue
        parsed = parser(value)
        if parsed is not _SKIP:
            result[key] = parsed
    return result


__all__ = ["FieldSpec", "parse_fields"]
