"""Contract between gdoc and the source analyzer front-end.

A source analyzer turns a source tree into a :class:`SourceAnalysis`: per
package the import path, raw declarations (type expressions and comments kept
as text) and the exported-symbol table used during resolution.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence


class AnalyzerLoadFailure(RuntimeError):
    """Raised when the analyzer cannot provide symbol information for a package."""

    def __init__(self, import_path: str, reason: str) -> None:
        super().__init__(f"cannot load symbols for package {import_path}: {reason}")
        self.import_path = import_path
        self.reason = reason


@dataclass
class FieldSource:
    """A named (or embedded, when ``name`` is empty) typed slot."""

    name: str
    type: str
    comment: str = ""
    doc: str = ""


@dataclass
class FuncSource:
    name: str
    doc: str = ""
    params: List[FieldSource] = field(default_factory=list)
    results: List[FieldSource] = field(default_factory=list)
    type_params: List[FieldSource] = field(default_factory=list)
    receiver: Optional[FieldSource] = None


@dataclass
class TypeSource:
    """A named type declaration.

    ``kind`` is ``struct``, ``interface`` or anything else for a defined type
    whose right-hand side is kept in ``underlying``. Interface members are
    listed in ``fields`` with their method signature as type text.
    """

    name: str
    kind: str = "struct"
    doc: str = ""
    fields: List[FieldSource] = field(default_factory=list)
    type_params: List[FieldSource] = field(default_factory=list)
    underlying: str = ""


@dataclass
class ValueSource:
    name: str
    type: str = ""
    value: str = ""
    doc: str = ""
    comment: str = ""


@dataclass
class PackageSource:
    import_path: str
    name: str
    doc: str = ""
    readme: str = ""
    imports: List[str] = field(default_factory=list)
    types: List[TypeSource] = field(default_factory=list)
    funcs: List[FuncSource] = field(default_factory=list)
    consts: List[ValueSource] = field(default_factory=list)
    vars: List[ValueSource] = field(default_factory=list)
    # Explicit exported-symbol table; derived from the declarations when None.
    symbols: Optional[List[str]] = None
    load_error: Optional[str] = None

    def declared_names(self) -> List[str]:
        names: List[str] = [t.name for t in self.types]
        names.extend(f.name for f in self.funcs if f.receiver is None)
        names.extend(c.name for c in self.consts)
        names.extend(v.name for v in self.vars)
        return [name for name in names if is_exported(name)]


@dataclass
class SourceAnalysis:
    module: str
    readme: str = ""
    packages: List[PackageSource] = field(default_factory=list)

    def filtered(self, selection: Sequence[str] | None) -> "SourceAnalysis":
        """Keep only packages whose import path equals or ends with a selected entry."""
        if not selection:
            return self
        wanted = [entry.strip().strip("/") for entry in selection if entry.strip()]
        kept = [
            pkg
            for pkg in self.packages
            if any(pkg.import_path == w or pkg.import_path.endswith("/" + w) for w in wanted)
        ]
        return SourceAnalysis(module=self.module, readme=self.readme, packages=kept)


@dataclass(frozen=True)
class SymbolTable:
    """Exported symbols of one package; answers membership queries only."""

    import_path: str
    name: str
    symbols: FrozenSet[str]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.symbols


class SourceAnalyzer(ABC):
    """Front-end producing a :class:`SourceAnalysis` for the documentation pipeline."""

    name = "analyzer"

    @abstractmethod
    def analyze(self) -> SourceAnalysis:
        """Return the raw declarations of every package in the analysed tree."""

    def symbol_table(self, package: PackageSource) -> SymbolTable:
        """Load the exported-symbol table of ``package``.

        Raises :class:`AnalyzerLoadFailure` when the analyzer reported that the
        package could not be loaded.
        """
        if package.load_error:
            raise AnalyzerLoadFailure(package.import_path, package.load_error)
        names: Iterable[str] = (
            package.symbols if package.symbols is not None else package.declared_names()
        )
        return SymbolTable(
            import_path=package.import_path,
            name=package.name,
            symbols=frozenset(names),
        )


class StaticAnalyzer(SourceAnalyzer):
    """Serves an already materialised analysis, e.g. built in memory by a caller."""

    name = "static"

    def __init__(self, analysis: SourceAnalysis) -> None:
        self._analysis = analysis

    def analyze(self) -> SourceAnalysis:
        return self._analysis


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


__all__ = [
    "AnalyzerLoadFailure",
    "FieldSource",
    "FuncSource",
    "PackageSource",
    "SourceAnalysis",
    "SourceAnalyzer",
    "StaticAnalyzer",
    "SymbolTable",
    "TypeSource",
    "ValueSource",
    "is_exported",
]
