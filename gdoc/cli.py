"""CLI entrypoints for gdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .analysis import AnalysisFormatError, AnalyzerLoadFailure, available_analyzers
from .config import THEMES, ConfigError, load_config, split_packages
from .logging import configure_logging
from .orchestrator import Orchestrator

DEFAULT_OUTPUT = "doc.adoc"


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write log records to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdoc",
        description="Render cross-linked AsciiDoc reference documentation for a Go module.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser(
        "render",
        help="Render the documentation for an analysed module.",
    )
    _add_logging_options(render_parser, suppress_default=True)
    render_parser.add_argument(
        "analysis",
        help="Analyzer input, e.g. the dump file produced by the source front-end.",
    )
    render_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help=f"Output file (defaults to the configured output or {DEFAULT_OUTPUT}).",
    )
    render_parser.add_argument(
        "--packages",
        default=None,
        help="Semicolon-separated import paths (or path suffixes) to document.",
    )
    render_parser.add_argument(
        "--pkg-sep",
        dest="package_separator",
        default=None,
        help="Separator used when displaying package import paths.",
    )
    render_parser.add_argument(
        "--theme",
        choices=THEMES,
        default=None,
        help="Colour theme written to docinfo.html next to the output.",
    )
    render_parser.add_argument(
        "--analyzer",
        default=None,
        help="Analyzer used to read the input (available: %s)." % ", ".join(available_analyzers()),
    )
    render_parser.add_argument(
        "--config",
        default=".",
        help="Path to .gdoc.yml or the directory holding it (defaults to current directory).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP rendering service.",
    )
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "render":
        _render(parser, args)
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _render(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.package_separator is not None and not args.package_separator:
        parser.exit(1, "--pkg-sep must not be empty\n")

    output = Path(args.output) if args.output else config.output or Path(DEFAULT_OUTPUT)
    orchestrator = Orchestrator(config)
    try:
        outcome = orchestrator.run_path(
            args.analysis,
            analyzer_name=args.analyzer,
            packages=split_packages(args.packages) or None,
            package_separator=args.package_separator,
            theme=args.theme,
            output=output,
        )
    except (AnalyzerLoadFailure, AnalysisFormatError, ValueError) as exc:
        parser.exit(1, f"gdoc render failed: {exc}\n")
    except RuntimeError as exc:
        parser.exit(1, f"gdoc render failed: {exc}\nRun with --verbose for more details.\n")

    rel_path = _relativize(outcome.output_path or output)
    print(f"Documentation written to {rel_path}")
    if outcome.issues:
        print(f"{len(outcome.issues)} unresolved cross-references (see log output)")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
