"""Helpers for constructing analyzer dumps and resolved modules in tests."""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional, Sequence

from gdoc.analysis import SourceAnalysis, StaticAnalyzer, analysis_from_dict
from gdoc.builder import ModelBuilder
from gdoc.models import Module
from gdoc.resolver import ResolveContext

SHOP_DUMP: Dict[str, Any] = {
    "module": "example.com/shop",
    "readme": "Shop sells widgets.",
    "packages": [
        {
            "import_path": "example.com/shop/catalog",
            "name": "catalog",
            "doc": "Package catalog lists Widget values.\n\nUse money.Amount for prices.",
            "imports": ["fmt", "example.com/shop/money", "fmt"],
            "types": [
                {
                    "name": "Widget",
                    "doc": "Widget is a sellable item.",
                    "fields": [
                        {"name": "ID", "type": "string", "comment": "unique id"},
                        {"name": "Description", "type": "string"},
                        {"name": "Price", "type": "money.Amount"},
                        {"name": "Tags", "type": "map[string]Tag"},
                        {"name": "stock", "type": "int"},
                    ],
                },
                {
                    "name": "Registry",
                    "doc": "Registry keeps widgets by id.",
                    "fields": [{"name": "items", "type": "map[string]*Widget"}],
                },
                {"name": "Tag", "kind": "defined", "underlying": "string"},
                {
                    "name": "Store",
                    "kind": "interface",
                    "fields": [{"name": "Get", "type": "func(id string) (*Widget, error)"}],
                },
                {"name": "cache", "fields": [{"name": "Hits", "type": "int"}]},
            ],
            "funcs": [
                {
                    "name": "NewWidget",
                    "doc": "NewWidget returns a Widget with the given id.",
                    "params": [{"name": "id", "type": "string"}],
                    "results": [{"type": "*Widget"}],
                },
                {
                    "name": "NewRegistry",
                    "results": [{"type": "*Registry"}],
                },
                {
                    "name": "Lookup",
                    "doc": "Lookup finds a widget in r.",
                    "params": [
                        {"name": "r", "type": "*Registry"},
                        {"name": "id", "type": "string"},
                    ],
                    "results": [{"type": "*Widget"}, {"type": "bool"}],
                },
                {
                    "name": "Resize",
                    "doc": "Resize scales the widget price.",
                    "receiver": {"name": "w", "type": "*Widget"},
                    "params": [{"name": "factor", "type": "float64"}],
                    "results": [{"type": "error"}],
                },
                {
                    "name": "Reset",
                    "receiver": {"name": "c", "type": "*cache"},
                },
                {"name": "helper"},
            ],
            "consts": [
                {"name": "MaxTags", "type": "int", "value": "8", "comment": "upper bound"},
                {"name": "minTags", "type": "int", "value": "1"},
            ],
            "vars": [
                {"name": "ErrNotFound", "type": "error"},
                {"name": "Default", "type": "*Widget", "doc": "Default is the fallback widget."},
            ],
        },
        {
            "import_path": "example.com/shop/money",
            "name": "money",
            "types": [
                {
                    "name": "Amount",
                    "fields": [
                        {"name": "Cents", "type": "int64"},
                        {"name": "Currency", "type": "string"},
                    ],
                }
            ],
        },
        {
            "import_path": "example.com/shop/cmd/shop",
            "name": "main",
            "imports": ["example.com/shop/catalog"],
        },
    ],
}


def shop_dump() -> Dict[str, Any]:
    """Return a fresh copy of the sample dump so tests may mutate it."""
    return copy.deepcopy(SHOP_DUMP)


def shop_analysis() -> SourceAnalysis:
    return analysis_from_dict(shop_dump())


def build_module(
    analysis: SourceAnalysis,
    *,
    builder: Optional[ModelBuilder] = None,
    packages: Sequence[str] | None = None,
) -> Module:
    """Run filtering, symbol loading and model construction like the orchestrator."""
    analysis = analysis.filtered(packages)
    context = ResolveContext.load(StaticAnalyzer(analysis), analysis)
    return (builder or ModelBuilder()).build(analysis, context)


__all__ = ["SHOP_DUMP", "build_module", "shop_analysis", "shop_dump"]
