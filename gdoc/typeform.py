"""Shallow structural parsing of raw type-expression text.

``parse_type_form("*pkg.Foo")`` splits a type string into its prefix facets
(pointer markers, slice/array brackets, variadic dots), an optional map
key/value split and a package-qualified base identifier. Nothing here knows
about symbol tables; classification happens in :mod:`gdoc.resolver`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .logging import get_logger
from .models import MapType, TypeDesc

_ARRAY_FACET = re.compile(r"\[(\d*)\]")
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_MAP_OPEN = "map["
_POINTER = "*"
_VARIADIC = "..."

_LOGGER = get_logger("typeform")


@dataclass(frozen=True)
class TypeForm:
    """Structural facets of one type expression.

    ``structured`` is False when the expression uses a construct the parser
    does not decompose (channels, function types, inline struct or interface
    literals). Such forms keep only ``raw`` and render as plain text.
    """

    raw: str
    prefix: Tuple[str, ...] = ()
    qualifier: Optional[str] = None
    identifier: str = ""
    type_args: str = ""
    map_key: Optional[str] = None
    map_value: Optional[str] = None
    structured: bool = True

    @property
    def is_map(self) -> bool:
        return self.map_key is not None

    @property
    def pointer_depth(self) -> int:
        depth = 0
        for facet in self.prefix:
            if facet != _POINTER:
                break
            depth += 1
        return depth

    @property
    def is_pointer(self) -> bool:
        return self.pointer_depth > 0

    @property
    def is_slice(self) -> bool:
        return "[]" in self.prefix

    @property
    def is_variadic(self) -> bool:
        return _VARIADIC in self.prefix

    @property
    def array_length(self) -> Optional[int]:
        for facet in self.prefix:
            match = _ARRAY_FACET.fullmatch(facet)
            if match and match.group(1):
                return int(match.group(1))
        return None

    @property
    def is_qualified(self) -> bool:
        return self.qualifier is not None

    @property
    def prefix_text(self) -> str:
        return "".join(self.prefix)

    @property
    def qualified_name(self) -> str:
        if self.qualifier:
            return f"{self.qualifier}.{self.identifier}"
        return self.identifier


def parse_type_form(raw: str) -> TypeForm:
    """Decompose ``raw`` into a :class:`TypeForm`; never raises."""
    text = raw.strip()
    prefix, rest = _split_prefix(text)

    if rest.startswith(_MAP_OPEN):
        close = _matching_bracket(rest, len(_MAP_OPEN) - 1)
        if close is None:
            return _unstructured(text)
        key = rest[len(_MAP_OPEN) : close].strip()
        value = rest[close + 1 :].strip()
        if not key or not value:
            return _unstructured(text)
        return TypeForm(
            raw=text,
            prefix=prefix,
            identifier="map",
            map_key=key,
            map_value=value,
        )

    base, type_args = _split_type_args(rest)
    if base is None:
        return _unstructured(text)

    qualifier, _, identifier = base.rpartition(".")
    if not _IDENTIFIER.fullmatch(identifier):
        return _unstructured(text)
    if qualifier and not _IDENTIFIER.fullmatch(qualifier):
        return _unstructured(text)

    return TypeForm(
        raw=text,
        prefix=prefix,
        qualifier=qualifier or None,
        identifier=identifier,
        type_args=type_args,
    )


def _split_prefix(text: str) -> tuple[Tuple[str, ...], str]:
    facets: list[str] = []
    rest = text
    while rest:
        if rest.startswith(_POINTER):
            facets.append(_POINTER)
            rest = rest[1:]
            continue
        if rest.startswith(_VARIADIC):
            facets.append(_VARIADIC)
            rest = rest[len(_VARIADIC) :]
            continue
        match = _ARRAY_FACET.match(rest)
        if match:
            facets.append(match.group(0))
            rest = rest[match.end() :]
            continue
        break
    return tuple(facets), rest.strip()


def _split_type_args(rest: str) -> tuple[Optional[str], str]:
    """Split ``List[T]`` into ``("List", "[T]")``; ``(None, "")`` when malformed."""
    if not rest:
        return None, ""
    open_index = rest.find("[")
    if open_index == -1:
        return rest, ""
    if open_index == 0:
        return None, ""
    close = _matching_bracket(rest, open_index)
    if close != len(rest) - 1:
        return None, ""
    return rest[:open_index], rest[open_index:]


def _matching_bracket(text: str, open_index: int) -> Optional[int]:
    depth = 0
    for index in range(open_index, len(text)):
        char = text[index]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
    return None


def _unstructured(text: str) -> TypeForm:
    _LOGGER.debug("Type expression %r kept as plain text", text)
    return TypeForm(raw=text, structured=False)


def describe_type(raw: str, *, line_break: bool = False) -> TypeDesc:
    """Build an unresolved :class:`~gdoc.models.TypeDesc` for ``raw``, map sides included."""
    form = parse_type_form(raw)
    map_type = None
    if form.is_map:
        map_type = MapType(
            key=describe_type(form.map_key or ""),
            value=describe_type(form.map_value or ""),
        )
    return TypeDesc(
        raw=form.raw,
        form=form,
        is_pointer=form.is_pointer,
        has_line_break=line_break,
        map_type=map_type,
    )


__all__ = ["TypeForm", "describe_type", "parse_type_form"]
