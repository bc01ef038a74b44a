"""Analyzer adapter reading a front-end dump written as YAML or JSON.

The dump mirrors :class:`~gdoc.analysis.base.SourceAnalysis`::

    module: example.com/shop
    packages:
      - import_path: example.com/shop/catalog
        name: catalog
        types:
          - name: Widget
            fields:
              - {name: ID, type: string}
        funcs:
          - name: NewWidget
            results: [{type: "*Widget"}]

JSON is a subset of YAML, so both are read with ``yaml.safe_load``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .base import (
    AnalyzerLoadFailure,
    FieldSource,
    FuncSource,
    PackageSource,
    SourceAnalysis,
    SourceAnalyzer,
    TypeSource,
    ValueSource,
)


class AnalysisFormatError(ValueError):
    """Raised when an analyzer dump does not follow the expected layout."""


class DumpAnalyzer(SourceAnalyzer):
    """Loads a :class:`SourceAnalysis` from a dump file on disk."""

    name = "dump"

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def analyze(self) -> SourceAnalysis:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise AnalyzerLoadFailure(str(self.path), f"unreadable dump: {exc}") from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise AnalysisFormatError(f"Failed to parse {self.path.name}: {exc}") from exc
        return analysis_from_dict(data)


def analysis_from_dict(data: Any) -> SourceAnalysis:
    """Convert a plain mapping (decoded YAML/JSON) into a :class:`SourceAnalysis`."""
    if not isinstance(data, Mapping):
        raise AnalysisFormatError("analyzer dump must contain a mapping at the root")
    module = _as_str(data.get("module"))
    if not module:
        raise AnalysisFormatError("analyzer dump is missing the 'module' name")
    packages = [_package(entry) for entry in _as_list(data.get("packages"), "packages")]
    return SourceAnalysis(module=module, readme=_as_str(data.get("readme")), packages=packages)


def _package(entry: Any) -> PackageSource:
    mapping = _as_mapping(entry, "package")
    import_path = _as_str(mapping.get("import_path"))
    if not import_path:
        raise AnalysisFormatError("package entry is missing 'import_path'")
    name = _as_str(mapping.get("name")) or import_path.rsplit("/", 1)[-1]
    symbols_raw = mapping.get("symbols")
    symbols: Optional[List[str]] = None
    if symbols_raw is not None:
        symbols = [str(item) for item in _as_list(symbols_raw, "symbols")]
    load_error = mapping.get("load_error")
    return PackageSource(
        import_path=import_path,
        name=name,
        doc=_as_str(mapping.get("doc")),
        readme=_as_str(mapping.get("readme")),
        imports=[str(item) for item in _as_list(mapping.get("imports"), "imports")],
        types=[_type(item) for item in _as_list(mapping.get("types"), "types")],
        funcs=[_func(item) for item in _as_list(mapping.get("funcs"), "funcs")],
        consts=[_value(item) for item in _as_list(mapping.get("consts"), "consts")],
        vars=[_value(item) for item in _as_list(mapping.get("vars"), "vars")],
        symbols=symbols,
        load_error=str(load_error) if load_error else None,
    )


def _type(entry: Any) -> TypeSource:
    mapping = _as_mapping(entry, "type")
    return TypeSource(
        name=_required_name(mapping, "type"),
        kind=_as_str(mapping.get("kind")) or "struct",
        doc=_as_str(mapping.get("doc")),
        fields=_fields(mapping.get("fields"), "fields"),
        type_params=_fields(mapping.get("type_params"), "type_params"),
        underlying=_as_str(mapping.get("underlying")),
    )


def _func(entry: Any) -> FuncSource:
    mapping = _as_mapping(entry, "func")
    receiver_raw = mapping.get("receiver")
    return FuncSource(
        name=_required_name(mapping, "func"),
        doc=_as_str(mapping.get("doc")),
        params=_fields(mapping.get("params"), "params"),
        results=_fields(mapping.get("results"), "results"),
        type_params=_fields(mapping.get("type_params"), "type_params"),
        receiver=_field(receiver_raw) if receiver_raw is not None else None,
    )


def _value(entry: Any) -> ValueSource:
    mapping = _as_mapping(entry, "value")
    return ValueSource(
        name=_required_name(mapping, "value"),
        type=_as_str(mapping.get("type")),
        value=_as_str(mapping.get("value")),
        doc=_as_str(mapping.get("doc")),
        comment=_as_str(mapping.get("comment")),
    )


def _fields(value: Any, label: str) -> List[FieldSource]:
    return [_field(item) for item in _as_list(value, label)]


def _field(entry: Any) -> FieldSource:
    mapping = _as_mapping(entry, "field")
    type_text = _as_str(mapping.get("type"))
    if not type_text:
        raise AnalysisFormatError(f"field {mapping.get('name')!r} is missing its 'type'")
    return FieldSource(
        name=_as_str(mapping.get("name")),
        type=type_text,
        comment=_as_str(mapping.get("comment")),
        doc=_as_str(mapping.get("doc")),
    )


def _required_name(mapping: Mapping[str, Any], label: str) -> str:
    name = _as_str(mapping.get("name"))
    if not name:
        raise AnalysisFormatError(f"{label} entry is missing 'name'")
    return name


def _as_mapping(value: Any, label: str) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        raise AnalysisFormatError(f"{label} entry must be a mapping, got {type(value).__name__}")
    return dict(value)


def _as_list(value: Any, label: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise AnalysisFormatError(f"'{label}' must be a list")


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return ""


__all__ = ["AnalysisFormatError", "DumpAnalyzer", "analysis_from_dict"]
