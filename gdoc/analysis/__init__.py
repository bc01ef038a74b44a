"""Source analyzer contract, built-in adapters and plugin discovery."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, List

from .base import (
    AnalyzerLoadFailure,
    FieldSource,
    FuncSource,
    PackageSource,
    SourceAnalysis,
    SourceAnalyzer,
    StaticAnalyzer,
    SymbolTable,
    TypeSource,
    ValueSource,
    is_exported,
)
from .dump import AnalysisFormatError, DumpAnalyzer, analysis_from_dict

_ENTRY_POINT_GROUP = "gdoc.analyzers"

AnalyzerFactory = Callable[[str], SourceAnalyzer]

_BUILTIN_FACTORIES: Dict[str, AnalyzerFactory] = {
    "dump": DumpAnalyzer,
}


def available_analyzers() -> List[str]:
    """Names accepted by :func:`create_analyzer`, built-ins first."""
    names = list(_BUILTIN_FACTORIES)
    for entry in _iter_entry_points():
        if entry.name.lower() not in names:
            names.append(entry.name.lower())
    return names


def create_analyzer(name: str, target: str) -> SourceAnalyzer:
    """Instantiate the analyzer registered under ``name`` for ``target``.

    Built-in analyzers shadow entry points of the same name.
    """
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory(target)

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load analyzer entry point '{name}': {exc}") from exc
        return _coerce_analyzer(loaded, target)

    known = ", ".join(available_analyzers())
    raise ValueError(f"Unknown analyzer '{name}' (available: {known})")


def _coerce_analyzer(obj: object, target: str) -> SourceAnalyzer:
    if isinstance(obj, SourceAnalyzer):
        return obj
    if callable(obj):
        instance = obj(target)
        if isinstance(instance, SourceAnalyzer):
            return instance
    raise TypeError("Analyzer entry point must be a SourceAnalyzer subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "AnalysisFormatError",
    "AnalyzerLoadFailure",
    "DumpAnalyzer",
    "FieldSource",
    "FuncSource",
    "PackageSource",
    "SourceAnalysis",
    "SourceAnalyzer",
    "StaticAnalyzer",
    "SymbolTable",
    "TypeSource",
    "ValueSource",
    "analysis_from_dict",
    "available_analyzers",
    "create_analyzer",
    "is_exported",
]
