"""Linting utilities for generated AsciiDoc."""

from __future__ import annotations

from typing import List

_BLOCK_DELIMITER = "****"


class AsciiDocLinter:
    """Normalizes line endings, trailing whitespace and blank runs.

    Line-break markers (`` +``) are part of the line content and survive the
    trailing whitespace cleanup. Lines inside ``****`` blocks are kept as-is.
    """

    def lint(self, document: str) -> str:
        normalized = document.replace("\r\n", "\n").replace("\r", "\n")
        cleaned: List[str] = []
        in_block = False
        previous_blank = False

        for line in normalized.split("\n"):
            stripped = line.rstrip()
            if stripped == _BLOCK_DELIMITER:
                in_block = not in_block
                cleaned.append(stripped)
                previous_blank = False
                continue

            if not in_block:
                if stripped.startswith("=") and " " in stripped and cleaned and cleaned[-1] != "":
                    cleaned.append("")
                if not stripped:
                    if previous_blank or not cleaned:
                        continue
                    previous_blank = True
                    cleaned.append("")
                    continue

            cleaned.append(stripped)
            previous_blank = False

        while cleaned and cleaned[-1] == "":
            cleaned.pop()

        return "\n".join(cleaned) + "\n"


__all__ = ["AsciiDocLinter"]
