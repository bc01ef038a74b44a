"""CLI parser and render command tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from gdoc.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "render", "dump.yml"])
    assert args.verbose is True
    assert args.command == "render"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["render", "dump.yml", "-v"])
    assert args.verbose is True


def test_cli_render_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["render", "dump.yml", "-o", "out.adoc", "--packages", "a;b", "--pkg-sep", "."]
    )
    assert args.analysis == "dump.yml"
    assert args.output == "out.adoc"
    assert args.packages == "a;b"
    assert args.package_separator == "."
    assert args.analyzer is None


def test_cli_serve_defaults() -> None:
    args = _build_parser().parse_args(["serve"])
    assert args.command == "serve"
    assert args.port == 8000


def test_render_writes_document(
    dump_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    monkeypatch.chdir(tmp_path)
    main(["render", str(dump_file), "--packages", "catalog;money"])

    output = tmp_path / "doc.adoc"
    assert output.exists()
    text = output.read_text(encoding="utf-8")
    assert text.startswith("= Module example.com/shop")
    assert "[name]#main#" not in text
    assert "Documentation written to doc.adoc" in capsys.readouterr().out


def test_render_reports_load_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        main(["render", str(tmp_path / "missing.yml")])
    assert excinfo.value.code == 1


def test_render_rejects_unknown_analyzer(
    dump_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        main(["render", str(dump_file), "--analyzer", "nope"])
    assert excinfo.value.code == 1


def test_cli_accepts_quiet_and_theme() -> None:
    args = _build_parser().parse_args(["render", "dump.yml", "-q", "--theme", "dark"])
    assert args.quiet is True
    assert args.verbose is False
    assert args.theme == "dark"


def test_quiet_flag_reaches_logging_setup(
    dump_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[dict] = []
    monkeypatch.setattr("gdoc.cli.configure_logging", lambda **kwargs: calls.append(kwargs))
    monkeypatch.chdir(tmp_path)
    main(["-q", "render", str(dump_file), "--theme", "dark"])

    assert calls == [{"verbose": False, "quiet": True, "log_file": None}]
    assert (tmp_path / "docinfo.html").exists()
