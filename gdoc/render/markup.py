"""AsciiDoc building blocks used by the linker and the renderer."""

from __future__ import annotations

import re

NBSP = "{nbsp}"
LINE_BREAK = " +"

KEYWORD = "keyword"
BUILTIN = "builtin"
TYPE = "type"
NAME = "name"
VARIABLE = "variable"
CONSTANT = "constant"
STRING = "string"
OPERATOR = "operator"
COMMENT = "comment"
INFO = "information"
CAPTION = "caption"
CODE = "code"

_FORMATTING_CHARS = re.compile(r"[*_#`^~+\[\]<>{}]")
_GENERATED_LINK = re.compile(r"<<ref[0-9a-f]{40},[^<>]*>>")


def role(name: str, text: str) -> str:
    """Inline text styled with a custom role, e.g. ``[keyword]#func#``."""
    return f"[{name}]#{text}#"


def anchor(anchor_id: str) -> str:
    return f"[[{anchor_id}]]"


def link(target: str, text: str) -> str:
    return f"<<{target},{text}>>"


def passthrough(text: str) -> str:
    return "pass:[" + text.replace("]", "\\]") + "]"


def escape(text: str) -> str:
    """Return ``text`` unchanged unless it contains inline formatting characters."""
    if _FORMATTING_CHARS.search(text):
        return passthrough(text)
    return text


def escape_prose(text: str) -> str:
    """Escape free text while keeping the cross-references inserted by the linker."""
    pieces = []
    last = 0
    for match in _GENERATED_LINK.finditer(text):
        pieces.append(escape(text[last : match.start()]))
        pieces.append(match.group(0))
        last = match.end()
    pieces.append(escape(text[last:]))
    return "".join(pieces)


def padding(width: int) -> str:
    return NBSP * max(width, 0)


def indent(text: str, width: int) -> str:
    return padding(width) + text


__all__ = [
    "BUILTIN",
    "CAPTION",
    "CODE",
    "COMMENT",
    "CONSTANT",
    "INFO",
    "KEYWORD",
    "LINE_BREAK",
    "NAME",
    "NBSP",
    "OPERATOR",
    "STRING",
    "TYPE",
    "VARIABLE",
    "anchor",
    "escape",
    "escape_prose",
    "indent",
    "link",
    "padding",
    "passthrough",
    "role",
]
