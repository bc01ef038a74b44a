"""Rewrites identifiers found in documentation text into cross-references."""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional, Protocol, Sequence

from .models import Module
from .registry import CrossReferenceRegistry
from .render import markup

_WHITESPACE = re.compile(r"(\s+)")
_LEADING = "("
_TRAILING = ".,;:!?)"


class TieBreakPolicy(Protocol):
    """Orders candidate packages when one qualifier matches several import paths."""

    def order(
        self, qualifier: str, candidates: Sequence[str], *, imports: Sequence[str]
    ) -> List[str]:
        ...


class ImportAwareTieBreak:
    """Exact import path first, then packages the current package imports,
    then the shortest path, then lexicographic order."""

    def order(
        self, qualifier: str, candidates: Sequence[str], *, imports: Sequence[str]
    ) -> List[str]:
        imported = set(imports)
        return sorted(
            candidates,
            key=lambda path: (path != qualifier, path not in imported, len(path), path),
        )


class CommentLinker:
    """Links identifiers in free text using the cross-reference registry.

    Tokens are whitespace-delimited; surrounding punctuation such as a
    sentence-ending period is kept outside the link. For every token the first
    matching rule wins: a package-qualified declaration, then a declaration of
    the current package, then a ``[Name]`` doc link.
    """

    def __init__(
        self,
        registry: CrossReferenceRegistry,
        *,
        policy: TieBreakPolicy | None = None,
        imports: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self.registry = registry
        self.policy = policy or ImportAwareTieBreak()
        self._imports = dict(imports or {})

    @classmethod
    def for_module(
        cls,
        module: Module,
        registry: CrossReferenceRegistry,
        *,
        policy: TieBreakPolicy | None = None,
    ) -> "CommentLinker":
        imports = {path: list(pkg.imports) for path, pkg in module.packages.items()}
        return cls(registry, policy=policy, imports=imports)

    def link(self, text: str, import_path: str) -> str:
        if not text:
            return text
        lines = text.split("\n")
        return "\n".join(
            line if _is_code_line(line) else self._link_line(line, import_path)
            for line in lines
        )

    def _link_line(self, line: str, import_path: str) -> str:
        pieces: List[str] = []
        for piece in _WHITESPACE.split(line):
            if not piece or piece.isspace():
                pieces.append(piece)
                continue
            pieces.append(self._link_token(piece, import_path))
        return "".join(pieces)

    def _link_token(self, token: str, import_path: str) -> str:
        lead_end = len(token) - len(token.lstrip(_LEADING))
        core = token[lead_end:].rstrip(_TRAILING)
        if not core:
            return token
        trail = token[lead_end + len(core) :]
        replacement = self._match(core, import_path)
        if replacement is None:
            return token
        return token[:lead_end] + replacement + trail

    def _match(self, core: str, import_path: str) -> Optional[str]:
        bracketed = len(core) > 2 and core.startswith("[") and core.endswith("]")
        candidate = core[1:-1] if bracketed else core
        if "." in candidate:
            qualified = self._qualified(candidate, import_path)
            if qualified is not None:
                return qualified
        return self._local(candidate, import_path)

    def _qualified(self, text: str, import_path: str) -> Optional[str]:
        imports = self._imports.get(import_path, ())
        for left, right in _dot_splits(text):
            candidates = self.registry.packages_matching(left)
            if not candidates:
                continue
            for path in self.policy.order(left, candidates, imports=imports):
                ref = self.registry.local(path).get(right)
                package_ref = self.registry.package_ref(path)
                if ref is None or package_ref is None:
                    continue
                return "{}.{}".format(
                    markup.link(self.registry.link_target_of(package_ref), left),
                    markup.link(self.registry.link_target_of(ref), right),
                )
        return None

    def _local(self, text: str, import_path: str) -> Optional[str]:
        ref = self.registry.local(import_path).get(text)
        if ref is None:
            return None
        return markup.link(self.registry.link_target_of(ref), text)


def _is_code_line(line: str) -> bool:
    """Indented lines that are not list items are preformatted code; never linked."""
    if line[:1] not in (" ", "\t"):
        return False
    stripped = line.strip()
    return bool(stripped) and not (stripped == "-" or stripped.startswith("- "))


def _dot_splits(text: str) -> Iterable[tuple[str, str]]:
    """Yield ``(left, right)`` for every dot, rightmost split first."""
    index = text.rfind(".")
    while index > 0:
        left, right = text[:index], text[index + 1 :]
        if left and right:
            yield left, right
        index = text.rfind(".", 0, index)


__all__ = ["CommentLinker", "ImportAwareTieBreak", "TieBreakPolicy"]
