"""Post-processing tests."""

from __future__ import annotations

import pytest

from gdoc.postproc import AnchorCheckError, AnchorValidator, AsciiDocLinter


def test_linter_normalizes_whitespace_and_blank_runs() -> None:
    linter = AsciiDocLinter()
    document = "= Title\r\n\r\n\r\nText   \r\n== Section\nBody +\n\n\n"
    assert linter.lint(document) == "= Title\n\nText\n\n== Section\nBody +\n"


def test_linter_keeps_block_content() -> None:
    linter = AsciiDocLinter()
    document = "[.code]\n****\nline one +\n\n\nline two +\n****\n"
    assert linter.lint(document) == document


def test_anchor_validator_reports_missing_targets() -> None:
    validator = AnchorValidator()
    document = "[[refa]]Alpha\n\nSee <<refa,Alpha>> and <<refb,Beta>> and <<refb,again>>."
    assert validator.validate(document) == ["Cross-reference target not found: refb"]


def test_anchor_validator_accepts_complete_document() -> None:
    validator = AnchorValidator()
    assert validator.validate("[[x1]]X <<x1,X>>") == []


def test_anchor_check_raises_in_strict_mode() -> None:
    with pytest.raises(AnchorCheckError) as excinfo:
        AnchorValidator().check("<<missing,text>>")
    assert excinfo.value.issues == ["Cross-reference target not found: missing"]
