from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from gdoc.analysis import SourceAnalysis
from gdoc.models import Module
from tests._fixtures.analysis_builder import build_module, shop_analysis, shop_dump


@pytest.fixture
def analysis() -> SourceAnalysis:
    """The sample shop module as a source analysis."""
    return shop_analysis()


@pytest.fixture
def module(analysis: SourceAnalysis) -> Module:
    """The sample shop module, built and resolved."""
    return build_module(analysis)


@pytest.fixture
def dump_file(tmp_path: Path) -> Path:
    """The sample shop module written as an analyzer dump."""
    path = tmp_path / "shop.yml"
    path.write_text(yaml.safe_dump(shop_dump(), sort_keys=False), encoding="utf-8")
    return path
