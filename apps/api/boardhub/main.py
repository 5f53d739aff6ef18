from __future__ import annotations

from time import monotonic

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware

from boardhub.config import settings
from boardhub.errors import BoardhubError
from boardhub.logs import configure_logging
from boardhub.metrics import runtime_metrics
from boardhub.routers.audit import router as audit_router
from boardhub.routers.boards import router as boards_router
from boardhub.routers.notifications import router as notifications_router
from boardhub.routers.system import router as system_router
from boardhub.routers.tasks import router as tasks_router

configure_logging()
log = structlog.get_logger()

app = FastAPI(
  title="Boardhub API",
  version="0.1.0",
  docs_url="/docs" if settings.api_docs_enabled else None,
  redoc_url="/redoc" if settings.api_docs_enabled else None,
  openapi_url="/openapi.json" if settings.api_docs_enabled else None,
)


@app.exception_handler(BoardhubError)
async def _boardhub_error_handler(request, exc: BoardhubError) -> JSONResponse:
  log.info("request.rejected", path=request.url.path, status=exc.status_code, error=type(exc).__name__, detail=exc.message)
  return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.add_middleware(
  CORSMiddleware,
  allow_origins=settings.cors_origin_list(),
  allow_origin_regex=settings.cors_origin_regex,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_host_list())

app.include_router(boards_router)
app.include_router(tasks_router)
app.include_router(notifications_router)
app.include_router(audit_router)
app.include_router(system_router)


@app.middleware("http")
async def _request_metrics_middleware(request, call_next):
  start = monotonic()
  response = await call_next(request)
  elapsed_ms = (monotonic() - start) * 1000.0
  runtime_metrics.observe_request(response.status_code, elapsed_ms)
  response.headers.setdefault("X-Content-Type-Options", "nosniff")
  response.headers.setdefault("X-Frame-Options", "DENY")
  response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
  return response


@app.get("/health")
async def health() -> dict:
  return {"ok": True}


@app.get("/version")
async def version() -> dict:
  return {"version": settings.app_version, "buildSha": settings.build_sha}


@app.on_event("startup")
async def _startup() -> None:
  log.info("app.started", version=settings.app_version, build_sha=settings.build_sha)
