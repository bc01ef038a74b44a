"""Reflows Go-style doc comments into AsciiDoc.

Comments are processed line by line by a small state machine:

* ``NORMAL``: plain text. A ``# Heading`` line becomes a styled caption.
* ``IN_LIST``: consecutive ``- item`` lines, re-emitted with ``*`` bullets.
* ``IN_INDENTED_BLOCK``: consecutive indented lines, emitted as one
  monospace block that keeps the source indentation as ``{nbsp}`` padding.

A blank line, an unindented non-list line or the end of the text closes a
list or indented run.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Tuple

from . import markup

_LIST_MARKER = "-"
_BULLET = "*"
_CAPTION_MARKER = "#"
_TAB_WIDTH = 4


class ReflowState(Enum):
    NORMAL = "normal"
    IN_LIST = "inList"
    IN_INDENTED_BLOCK = "inIndentedBlock"


class CommentReflow:
    """Single-use reflow of one comment text; see :func:`reflow`."""

    def __init__(self) -> None:
        self.state = ReflowState.NORMAL
        self._output: List[str] = []
        self._list_items: List[str] = []
        self._block_lines: List[Tuple[int, str]] = []

    def run(self, text: str) -> str:
        for line in text.replace("\r\n", "\n").split("\n"):
            self._feed(line)
        self._flush()
        return "\n".join(self._output).strip("\n")

    def _feed(self, line: str) -> None:
        stripped = line.strip()
        if not stripped:
            self._flush()
            self._output.append("")
            return

        indented = line[0] in (" ", "\t")
        if _is_list_item(stripped):
            if self.state is ReflowState.IN_INDENTED_BLOCK:
                self._flush()
            self.state = ReflowState.IN_LIST
            item = stripped[len(_LIST_MARKER) :].strip()
            self._list_items.append(f"{_BULLET} {markup.escape_prose(item)}".rstrip())
            return

        if indented:
            if self.state is ReflowState.IN_LIST:
                self._list_items[-1] += " " + markup.escape_prose(stripped)
                return
            self.state = ReflowState.IN_INDENTED_BLOCK
            self._block_lines.append((_indent_width(line), stripped))
            return

        self._flush()
        if stripped.startswith(_CAPTION_MARKER):
            caption = stripped.lstrip(_CAPTION_MARKER).strip()
            if caption:
                self._output.append(markup.role(markup.CAPTION, markup.escape_prose(caption)))
            else:
                self._output.append(line)
            return
        self._output.append(markup.escape_prose(line))

    def _flush(self) -> None:
        if self.state is ReflowState.IN_LIST and self._list_items:
            if self._output and self._output[-1] != "":
                self._output.append("")
            self._output.append("\n".join(self._list_items))
        elif self.state is ReflowState.IN_INDENTED_BLOCK and self._block_lines:
            self._output.append(_monospace_block(self._block_lines))
        self._list_items = []
        self._block_lines = []
        self.state = ReflowState.NORMAL


def reflow(text: str) -> str:
    """Return ``text`` with lists, indented blocks and captions converted."""
    if not text:
        return ""
    return CommentReflow().run(text)


def _is_list_item(stripped: str) -> bool:
    return stripped == _LIST_MARKER or stripped.startswith(_LIST_MARKER + " ")


def _indent_width(line: str) -> int:
    width = 0
    for char in line:
        if char == "\t":
            width += _TAB_WIDTH
        elif char == " ":
            width += 1
        else:
            break
    return width


def _monospace_block(lines: List[Tuple[int, str]]) -> str:
    # The shallowest line starts at column zero; deeper lines keep their offset.
    base = min(width for width, _ in lines)
    body = (markup.LINE_BREAK + "\n").join(
        markup.indent(markup.escape(text), width - base) for width, text in lines
    )
    return f"[.{markup.CODE}]#{body}#" + markup.LINE_BREAK


__all__ = ["CommentReflow", "ReflowState", "reflow"]
