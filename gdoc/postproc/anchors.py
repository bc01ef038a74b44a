"""Cross-reference validation for rendered documents."""

from __future__ import annotations

import re
from typing import List


class AnchorCheckError(RuntimeError):
    """Raised in strict mode when a document links to anchors it never defines."""

    def __init__(self, issues: List[str]) -> None:
        super().__init__("; ".join(issues))
        self.issues = issues


class AnchorValidator:
    """Ensures every ``<<target,text>>`` link has a matching ``[[target]]`` anchor."""

    _ANCHOR_PATTERN = re.compile(r"\[\[([^\[\]]+)\]\]")
    _LINK_PATTERN = re.compile(r"<<([^,<>]*)(?:,[^<>]*)?>>")

    def validate(self, document: str) -> List[str]:
        """Return a list of issues discovered in the provided document."""

        anchors = set(self._ANCHOR_PATTERN.findall(document))
        issues: List[str] = []
        seen = set()
        for match in self._LINK_PATTERN.finditer(document):
            target = match.group(1).strip()
            if not target:
                issues.append("Empty cross-reference target detected")
                continue
            if target in anchors or target in seen:
                continue
            seen.add(target)
            issues.append(f"Cross-reference target not found: {target}")
        return issues

    def check(self, document: str) -> None:
        issues = self.validate(document)
        if issues:
            raise AnchorCheckError(issues)


__all__ = ["AnchorCheckError", "AnchorValidator"]
