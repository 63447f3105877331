"""
FastAPI application for Timesense.
"""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timesense.analyzer import CodeComplexityAnalyzer, UnsupportedLanguageError, detect_language
from timesense.constraints import check_constraints
from timesense.render import Renderer

from . import __version__
from .config import settings, logger
from .models import AnalyzeRequest, AnalyzeResponse, ErrorResponse


analyzer = CodeComplexityAnalyzer()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Timesense API starting...")
    logger.info(f"Server: {settings.HOST}:{settings.PORT}")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Timesense API",
    description="Rule-based time and space complexity analysis for C/C++",
    version=__version__,
    lifespan=lifespan,
)

cors_origins = settings.cors_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(UnsupportedLanguageError)
async def unsupported_language_handler(request: Request, exc: UnsupportedLanguageError):
    logger.warning(f"Unsupported language on {request.url.path}: {exc.language} ({exc.filename})")
    return JSONResponse(
        status_code=415,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors without echoing the submitted code."""
    fields = [err.get("loc", ["unknown"])[-1] for err in exc.errors()[:5]]
    logger.warning(f"Validation error on {request.method} {request.url.path}: {fields}")
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(error="Invalid request format", details=", ".join(map(str, fields))).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)[:200]}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error").model_dump(),
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Timesense API",
        "version": __version__,
        "status": "ok",
        "endpoints": {
            "/analyze": "POST - Analyze C/C++ time and space complexity",
            "/health": "GET - Health check",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.post("/analyze", response_model=AnalyzeResponse, responses={
    415: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
})
async def analyze_code(request: AnalyzeRequest):
    """
    Analyze code complexity.

    Returns the loop, call, function and allocation records, the overall
    time and space classes, editor annotations, and constraint warnings
    when problem limits are supplied.
    """
    request_id = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    start_time = time.time()

    logger.info(f"[{request_id}] REQUEST RECEIVED - {request.filename} - {len(request.code)} chars")

    result = analyzer.analyze(request.code, request.filename, request.language)
    language = detect_language(request.code, request.filename, request.language)

    annotations = Renderer(settings.display).render(result, request.code.splitlines())

    report = None
    warnings: list[str] = []
    if request.constraints is not None:
        report = check_constraints(
            result.overall_time,
            result.overall_space,
            request.constraints,
            settings.thresholds,
        )
        warnings = report.warnings

    elapsed_time = time.time() - start_time
    logger.info(f"[{request_id}] REQUEST COMPLETED - {elapsed_time:.3f}s - {result.summary()}")

    return AnalyzeResponse(
        success=True,
        language=language,
        result=result,
        summary=result.summary(),
        annotations=annotations,
        constraints=report,
        warnings=warnings,
    )
