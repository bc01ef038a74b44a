"""Reference identity and cross-reference registry tests."""

from __future__ import annotations

import hashlib

from gdoc.models import Module, RefId
from gdoc.registry import CrossReferenceRegistry


def test_ref_id_is_stable_hash_of_path_and_identifier() -> None:
    ref = RefId("example.com/shop/catalog", "Widget")
    expected = hashlib.sha1(b"example.com/shop/catalog#Widget").hexdigest()
    assert ref.id() == "ref" + expected
    assert RefId("example.com/shop/catalog", "Widget").id() == ref.id()


def test_package_identity_uses_empty_identifier() -> None:
    ref = RefId.for_package("example.com/shop/catalog")
    assert ref.is_package
    assert ref.id() != RefId("example.com/shop/catalog", "Widget").id()


def test_anchor_and_link_target_agree() -> None:
    ref = RefId("example.com/shop/money", "Amount")
    assert CrossReferenceRegistry.anchor_id_of(ref) == CrossReferenceRegistry.link_target_of(ref)


def test_registry_indexes_module_declarations(module: Module) -> None:
    registry = CrossReferenceRegistry.from_module(module)
    catalog = "example.com/shop/catalog"
    assert RefId(catalog, "Widget") in registry
    assert RefId(catalog, "Widget.Resize") in registry
    assert RefId(catalog, "NewWidget") in registry
    assert RefId(catalog, "MaxTags") in registry
    assert registry.package_ref(catalog) == RefId.for_package(catalog)
    assert registry.package_name(catalog) == "catalog"
    assert "Lookup" in registry.local(catalog)
    assert RefId(catalog, "cache") not in registry


def test_register_is_idempotent() -> None:
    registry = CrossReferenceRegistry()
    ref = RefId("a/b", "X")
    assert registry.register(ref) is ref
    assert registry.register(RefId("a/b", "X")) is ref
    assert len(registry) == 1


def test_packages_matching_by_path_suffix() -> None:
    registry = CrossReferenceRegistry()
    registry.register_package("example.com/z/util", "util")
    registry.register_package("example.com/a/util", "util")
    registry.register_package("example.com/a/xutil", "xutil")
    assert registry.packages_matching("util") == ["example.com/a/util", "example.com/z/util"]
    assert registry.packages_matching("a/util") == ["example.com/a/util"]
    assert registry.packages_matching("") == []
