"""Comment cross-linking tests."""

from __future__ import annotations

from gdoc.linker import CommentLinker, ImportAwareTieBreak
from gdoc.models import RefId
from gdoc.registry import CrossReferenceRegistry

APP = "example.com/app"


def _registry() -> CrossReferenceRegistry:
    registry = CrossReferenceRegistry()
    registry.register_package(APP, "app")
    registry.register(RefId(APP, "Server"))
    registry.register(RefId(APP, "Server.Start"))
    registry.register_package("example.com/z/util", "util")
    registry.register(RefId("example.com/z/util", "Tool"))
    registry.register_package("example.com/a/util", "util")
    registry.register(RefId("example.com/a/util", "Tool"))
    return registry


def _link(text: str, imports=None) -> str:
    linker = CommentLinker(_registry(), imports=imports or {})
    return linker.link(text, APP)


def test_local_identifier_is_linked_and_punctuation_kept_outside() -> None:
    result = _link("Use Server.")
    assert result == f"Use <<{RefId(APP, 'Server').id()},Server>>."


def test_method_identifier_resolves_locally() -> None:
    result = _link("Call (Server.Start) first")
    assert f"(<<{RefId(APP, 'Server.Start').id()},Server.Start>>)" in result


def test_qualified_identifier_links_package_and_declaration() -> None:
    result = _link("See util.Tool for details")
    package_id = RefId.for_package("example.com/a/util").id()
    tool_id = RefId("example.com/a/util", "Tool").id()
    assert f"<<{package_id},util>>.<<{tool_id},Tool>>" in result


def test_imported_package_wins_tie_break() -> None:
    result = _link("See util.Tool", imports={APP: ["example.com/z/util"]})
    assert RefId("example.com/z/util", "Tool").id() in result


def test_bracketed_doc_link() -> None:
    result = _link("Returns a [Server].")
    assert result == f"Returns a <<{RefId(APP, 'Server').id()},Server>>."


def test_unknown_words_are_left_alone() -> None:
    assert _link("Nothing to see here.") == "Nothing to see here."


def test_indented_code_lines_are_not_linked() -> None:
    text = "Example:\n\n    s := Server{}\n- Server item"
    result = _link(text)
    assert "    s := Server{}" in result
    assert f"- <<{RefId(APP, 'Server').id()},Server>> item" in result


def test_tie_break_order() -> None:
    policy = ImportAwareTieBreak()
    candidates = ["example.com/z/util", "x/util", "util", "example.com/a/util"]
    assert policy.order("util", candidates, imports=["example.com/z/util"]) == [
        "util",
        "example.com/z/util",
        "x/util",
        "example.com/a/util",
    ]
