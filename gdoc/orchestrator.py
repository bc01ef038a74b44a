"""Pipeline orchestration: analyze, resolve, build, render, post-process."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .analysis import SourceAnalysis, SourceAnalyzer, StaticAnalyzer, create_analyzer
from .builder import ModelBuilder, PrefixConstructorPolicy
from .config import GdocConfig
from .logging import get_logger, log_stage
from .models import Module
from .postproc import AnchorValidator, AsciiDocLinter
from .render import DOCINFO_FILENAME, Renderer, RenderOptions
from .resolver import ResolveContext


@dataclass
class RenderOutcome:
    """Result of one documentation run."""

    document: str
    module: Module
    issues: List[str] = field(default_factory=list)
    output_path: Optional[Path] = None
    docinfo: Optional[str] = None
    docinfo_path: Optional[Path] = None


class Orchestrator:
    """Coordinates one documentation run over a source analysis.

    Stages run strictly in order: analysis, package filtering, symbol table
    loading, model construction (including resolution and comment linking),
    rendering, linting and the anchor check. Any failure aborts the run.
    """

    def __init__(
        self,
        config: GdocConfig | None = None,
        *,
        linter: AsciiDocLinter | None = None,
        anchor_validator: AnchorValidator | None = None,
    ) -> None:
        self.config = config or GdocConfig(root=Path.cwd())
        self.linter = linter or AsciiDocLinter()
        self.anchor_validator = anchor_validator or AnchorValidator()
        self.logger = get_logger("orchestrator")

    def run_path(
        self,
        target: Path | str,
        *,
        analyzer_name: str | None = None,
        **kwargs: object,
    ) -> RenderOutcome:
        """Run the pipeline with the analyzer registered as ``analyzer_name``."""
        analyzer = create_analyzer(analyzer_name or self.config.analyzer, str(target))
        return self.run(analyzer, **kwargs)  # type: ignore[arg-type]

    def run_analysis(self, analysis: SourceAnalysis, **kwargs: object) -> RenderOutcome:
        """Run the pipeline over an analysis that is already in memory."""
        return self.run(StaticAnalyzer(analysis), **kwargs)  # type: ignore[arg-type]

    def run(
        self,
        analyzer: SourceAnalyzer,
        *,
        packages: Sequence[str] | None = None,
        package_separator: str | None = None,
        theme: str | None = None,
        output: Path | None = None,
    ) -> RenderOutcome:
        selection = list(packages) if packages else list(self.config.packages)
        with log_stage(self.logger, "analyze"):
            analysis = analyzer.analyze()
        if self.config.module:
            analysis.module = self.config.module
        self.logger.info(
            "Documenting module %s (%d packages)", analysis.module, len(analysis.packages)
        )

        analysis = analysis.filtered(selection)
        if selection:
            self.logger.info("Package filter kept %d packages", len(analysis.packages))

        with log_stage(self.logger, "load"):
            context = ResolveContext.load(analyzer, analysis)

        builder = ModelBuilder(
            constructor_policy=PrefixConstructorPolicy(self.config.builder.constructor_prefixes),
            link_comments=self.config.links.enabled,
            workers=self.config.resolve.workers,
        )
        with log_stage(self.logger, "build"):
            module = builder.build(analysis, context)

        render_config = self.config.render
        options = RenderOptions(
            package_separator=package_separator or render_config.package_separator,
            toc=render_config.toc,
            theme=theme or render_config.theme,
            include_readme=render_config.include_readme,
            include_index=render_config.include_index,
            templates_dir=render_config.templates_dir,
        )
        with log_stage(self.logger, "render"):
            renderer = Renderer(options)
            document = renderer.render(module)
            docinfo = renderer.render_docinfo()

        with log_stage(self.logger, "postprocess"):
            document = self.linter.lint(document)
            if render_config.strict_anchors:
                self.anchor_validator.check(document)
                issues: List[str] = []
            else:
                issues = self.anchor_validator.validate(document)
                for issue in issues:
                    self.logger.warning(issue)

        outcome = RenderOutcome(document=document, module=module, issues=issues, docinfo=docinfo)
        target = output or self.config.output
        if target is not None:
            outcome.output_path = self._write(target, document)
            if docinfo is not None:
                outcome.docinfo_path = self._write(
                    outcome.output_path.with_name(DOCINFO_FILENAME), docinfo
                )
        return outcome

    def _write(self, target: Path, text: str) -> Path:
        path = Path(target).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        self.logger.info("Wrote %s", path)
        return path


__all__ = ["Orchestrator", "RenderOutcome"]
