"""FastAPI application entrypoint for gdoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Literal, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..analysis import AnalysisFormatError, analysis_from_dict
from ..orchestrator import Orchestrator, RenderOutcome


class RenderRequest(BaseModel):
    analysis: Dict[str, Any]
    packages: List[str] = Field(default_factory=list)
    package_separator: Optional[str] = Field(default=None, min_length=1)
    theme: Optional[Literal["light", "dark"]] = None


class RenderResponse(BaseModel):
    module: str
    packages: List[str]
    document: str
    issues: List[str] = Field(default_factory=list)
    docinfo: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing the rendering pipeline."""

    app = FastAPI(title="gdoc Service", version=__version__)

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/render", response_model=RenderResponse)
    async def render(
        payload: RenderRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> RenderResponse:
        def _run() -> RenderOutcome:
            analysis = analysis_from_dict(payload.analysis)
            return orchestrator.run_analysis(
                analysis,
                packages=payload.packages or None,
                package_separator=payload.package_separator,
                theme=payload.theme,
            )

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run)
        return RenderResponse(
            module=outcome.module.name,
            packages=[package.import_path for package in outcome.module.sorted_packages()],
            document=outcome.document,
            issues=outcome.issues,
            docinfo=outcome.docinfo,
        )

    @app.exception_handler(AnalysisFormatError)
    async def format_error_handler(_: Any, exc: AnalysisFormatError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["HealthResponse", "RenderRequest", "RenderResponse", "create_app", "run_service"]
