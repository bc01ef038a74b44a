"""Analyzer dump loading tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gdoc.analysis import (
    AnalysisFormatError,
    AnalyzerLoadFailure,
    DumpAnalyzer,
    StaticAnalyzer,
    analysis_from_dict,
)
from tests._fixtures.analysis_builder import shop_dump


def test_yaml_dump_round_trips_declarations(dump_file: Path) -> None:
    analysis = DumpAnalyzer(dump_file).analyze()
    assert analysis.module == "example.com/shop"
    catalog = analysis.packages[0]
    assert catalog.name == "catalog"
    widget = catalog.types[0]
    assert widget.name == "Widget"
    assert widget.fields[0].comment == "unique id"
    resize = next(f for f in catalog.funcs if f.name == "Resize")
    assert resize.receiver is not None and resize.receiver.type == "*Widget"


def test_json_dump_is_accepted(tmp_path: Path) -> None:
    path = tmp_path / "shop.json"
    path.write_text(json.dumps(shop_dump()), encoding="utf-8")
    assert len(DumpAnalyzer(path).analyze().packages) == 3


def test_package_name_defaults_to_last_path_segment() -> None:
    analysis = analysis_from_dict({"module": "m", "packages": [{"import_path": "m/a/b"}]})
    assert analysis.packages[0].name == "b"


def test_symbol_table_derives_exported_names(analysis) -> None:
    table = StaticAnalyzer(analysis).symbol_table(analysis.packages[0])
    assert "Widget" in table
    assert "NewWidget" in table
    assert "cache" not in table
    assert "Resize" not in table


def test_explicit_symbols_override_declarations() -> None:
    analysis = analysis_from_dict(
        {"module": "m", "packages": [{"import_path": "m/x", "symbols": ["Hidden"]}]}
    )
    table = StaticAnalyzer(analysis).symbol_table(analysis.packages[0])
    assert table.symbols == frozenset({"Hidden"})


def test_load_error_raises_on_symbol_table() -> None:
    analysis = analysis_from_dict(
        {"module": "m", "packages": [{"import_path": "m/x", "load_error": "broken"}]}
    )
    with pytest.raises(AnalyzerLoadFailure):
        StaticAnalyzer(analysis).symbol_table(analysis.packages[0])


def test_missing_file_is_load_failure(tmp_path: Path) -> None:
    with pytest.raises(AnalyzerLoadFailure):
        DumpAnalyzer(tmp_path / "absent.yml").analyze()


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"packages": []},
        {"module": "m", "packages": {}},
        {"module": "m", "packages": [{"name": "x"}]},
        {"module": "m", "packages": [{"import_path": "m/x", "types": [{"doc": "no name"}]}]},
        {
            "module": "m",
            "packages": [
                {"import_path": "m/x", "types": [{"name": "T", "fields": [{"name": "F"}]}]}
            ],
        },
    ],
)
def test_malformed_dumps_are_rejected(data) -> None:
    with pytest.raises(AnalysisFormatError):
        analysis_from_dict(data)


def test_filter_by_suffix(analysis) -> None:
    kept = analysis.filtered(["shop/money", "cmd/shop"])
    assert [p.import_path for p in kept.packages] == [
        "example.com/shop/money",
        "example.com/shop/cmd/shop",
    ]
