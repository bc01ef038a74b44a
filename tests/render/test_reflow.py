"""Comment reflow tests."""

from __future__ import annotations

from gdoc.render.reflow import CommentReflow, ReflowState, reflow


def test_plain_text_is_unchanged() -> None:
    assert reflow("One line.\nAnother line.") == "One line.\nAnother line."


def test_list_items_become_bullets_after_blank_line() -> None:
    result = reflow("Options:\n- fast\n- safe\nDone.")
    assert result == "Options:\n\n* fast\n* safe\nDone."


def test_indented_line_continues_list_item() -> None:
    result = reflow("- first item\n  continued\n- second")
    assert result == "* first item continued\n* second"


def test_indented_block_becomes_monospace_with_relative_padding() -> None:
    result = reflow("Example:\n\tif ok\n\t    run()\n\tdone")
    assert result == (
        "Example:\n"
        "[.code]#if ok +\n"
        "{nbsp}{nbsp}{nbsp}{nbsp}run() +\n"
        "done# +"
    )


def test_formatting_characters_in_code_are_passed_through() -> None:
    result = reflow("    x := *p")
    assert "pass:[x := *p]" in result


def test_heading_becomes_caption() -> None:
    assert reflow("# Usage") == "[caption]#Usage#"


def test_state_returns_to_normal_after_run() -> None:
    flow = CommentReflow()
    flow.run("- item")
    assert flow.state is ReflowState.NORMAL


def test_empty_text() -> None:
    assert reflow("") == ""


def test_code_after_blank_line_leaves_following_paragraph_alone() -> None:
    result = reflow("Example:\n\n    x := 1\n\nAfter text.")
    assert result.count("[.code]#") == 1
    assert "[.code]#x := 1# +" in result
    assert result.endswith("\n\nAfter text.")


def test_reserved_characters_in_prose_are_escaped() -> None:
    result = reflow("Accepts a web colour like #FF0000 or #fff.")
    assert result == "pass:[Accepts a web colour like #FF0000 or #fff.]"


def test_generated_links_survive_escaping() -> None:
    ref = "ref" + "a" * 40
    result = reflow(f"See <<{ref},Widget>> for *details*.")
    assert result == f"See <<{ref},Widget>>pass:[ for *details*.]"
