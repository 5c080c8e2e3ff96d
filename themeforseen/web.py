"""FastAPI application for the ThemeForseen dev server.

Provides:
    GET     /api/health   — liveness + detected project type and CSS file
    GET     /api/project  — full detection result and effective write target
    POST    /api/apply    — write a theme or font block into the project
    OPTIONS *             — CORS preflight (204)

The browser widget calls these cross-origin from the page under
development, so every response carries permissive CORS headers.  Unknown
routes (and unsupported methods) answer ``404 {"error": "Not found"}``.

Handlers are ``async def`` and do their file I/O inline: each request
runs to completion on the event loop before the next one is served, so two
writes to the same target never interleave and no locking is needed.
"""

import json
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from themeforseen import __version__
from themeforseen.config import load_settings
from themeforseen.detect import default_css_path, detect_project, import_instruction
from themeforseen.models import (
    FILE,
    ApplyRequest,
    ApplyResponse,
    CssTarget,
    HealthResponse,
    ProjectInfo,
)
from themeforseen.paths import project_root
from themeforseen.writer import WriteResult, write_font_to_target, write_theme_to_target

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class ProjectState:
    """Detection result for one project root, computed once per process.

    Populated lazily on first access and never invalidated: the server is
    a short-lived dev tool, restart it after moving stylesheets around.
    Two near-simultaneous first requests may both run detection; they
    compute the same value.
    """

    def __init__(self, root: Path, target_override: CssTarget | None = None):
        self.root = root
        self.target_override = target_override
        self._info: ProjectInfo | None = None

    @property
    def info(self) -> ProjectInfo:
        if self._info is None:
            info = detect_project(self.root)
            if self.target_override is not None:
                info.css_target = self.target_override
            logger.info(
                "Detected project | type=%s | target=%s | tailwind=%s",
                info.type.value,
                info.css_target.path if info.css_target else None,
                info.has_tailwind,
            )
            self._info = info
        return self._info

    def write_target(self) -> CssTarget:
        """Detected target, or the type's default file (created on first write)."""
        info = self.info
        if info.css_target is not None:
            return info.css_target
        return CssTarget(FILE, default_css_path(info.type))


def _reply(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code)


def _failure(message: str) -> JSONResponse:
    return _reply(400, ApplyResponse(success=False, message=message).to_json())


def create_app(
    root: Path | None = None,
    target_override: CssTarget | None = None,
    log_level: str | None = None,
) -> FastAPI:
    """Create and configure the FastAPI app.

    When *root* is ``None`` (e.g. when called by uvicorn as a factory), the
    project root comes from ``THEMEFORSEEN_ROOT`` or the working directory.
    *target_override* and *log_level* default to the project settings; the
    CLI passes its own resolved level so command-line flags win.
    """
    root = project_root(root)
    settings = load_settings(root)
    if target_override is None:
        target_override = settings.target

    # Safe to call multiple times
    from themeforseen.logging_setup import configure_logging
    configure_logging(log_level or settings.log_level)

    app = FastAPI(title="ThemeForseen Dev Server", docs_url=None, redoc_url=None, openapi_url=None)
    state = ProjectState(root, target_override)
    app.state.project = state

    # --- CORS ---

    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return _reply(404, {"error": "Not found"})
        return _reply(exc.status_code, {"error": str(exc.detail)})

    # --- Endpoints ---

    @app.get("/api/health")
    async def health():
        info = state.info
        return HealthResponse(
            version=__version__,
            project_type=info.type,
            css_file=info.css_target.path if info.css_target else None,
        ).to_json()

    @app.get("/api/project")
    async def project():
        return {**state.info.to_dict(), "writeTarget": state.write_target().to_dict()}

    @app.post("/api/apply")
    async def apply(request: Request):
        body = await request.body()
        try:
            payload = json.loads(body)
        except (ValueError, RecursionError) as exc:
            return _failure(f"Failed to parse request: {exc}")

        try:
            req = ApplyRequest.model_validate(payload)
        except ValidationError:
            return _failure("Invalid request: must specify type (theme/font) and corresponding data")

        info = state.info
        target = state.write_target()

        result: WriteResult
        if req.type == "theme":
            result = write_theme_to_target(target, req.data.colors, req.data.is_dark_mode, root=root)
        else:
            result = write_font_to_target(target, req.data.font, root=root)

        logger.info(
            "Apply | type=%s | file=%s | success=%s | created=%s",
            req.type, target.path, result.success, result.created,
        )
        if not result.success:
            return _failure(result.message)

        response = ApplyResponse(
            success=True,
            message=result.message,
            file=target.path,
            project_type=info.type,
            created=result.created,
        )
        if result.created:
            response.import_instruction = import_instruction(info.type, target.path)
        return _reply(200, response.to_json())

    return app
