"""
LTL API App - FastAPI Application

This module provides the FastAPI application exposing validation, parsing,
metadata extraction and CoNLL-U to Turtle conversion over HTTP.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ltl_core.config_runtime import RuntimeConfig

logger = logging.getLogger(__name__)

_app: Optional[FastAPI] = None


@dataclass
class APIConfig:
    """Configuration for the API"""
    title: str = "LiITA Text Linker API"

    description: str = "CoNLL-U validation and conversion to POWLA/LiLa Turtle"

    version: str = "1.0.0"

    host: str = "127.0.0.1"

    port: int = 8000

    debug: bool = False

    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    cors_allow_credentials: bool = True

    cors_allow_methods: List[str] = field(default_factory=lambda: ["*"])

    cors_allow_headers: List[str] = field(default_factory=lambda: ["*"])

    api_prefix: str = "/api/v1"

    docs_url: str = "/docs"

    openapi_url: str = "/openapi.json"

    max_upload_bytes: int = 10 * 1024 * 1024

    @classmethod
    def from_runtime_config(cls, runtime: RuntimeConfig, **overrides) -> "APIConfig":
        """Server settings from the runtime configuration; None overrides are ignored"""
        values: Dict[str, Any] = {
            "host": runtime.get_setting("server", "host", cls.host),
            "port": int(runtime.get_setting("server", "port", cls.port)),
            "max_upload_bytes": int(
                runtime.get_setting("server", "max_upload_bytes", cls.max_upload_bytes)
            ),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    config = app.state.config
    logger.info(
        f"Starting LiITA Text Linker API on {config.host}:{config.port} "
        f"(upload limit {config.max_upload_bytes} bytes)"
    )

    app.state.initialized = True

    yield

    logger.info("Shutting down LiITA Text Linker API")

    app.state.initialized = False


def create_app(config: Optional[APIConfig] = None) -> FastAPI:
    """Create FastAPI application"""
    global _app

    config = config or APIConfig()

    app = FastAPI(
        title=config.title,
        description=config.description,
        version=config.version,
        debug=config.debug,
        docs_url=config.docs_url,
        openapi_url=config.openapi_url,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    app.state.config = config

    from ltl_api.routes_convert import router as convert_router

    app.include_router(convert_router, prefix=config.api_prefix, tags=["Conversion"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "name": config.title,
            "version": config.version,
            "status": "running",
            "docs": config.docs_url,
            "endpoints": [
                f"{config.api_prefix}/{name}" for name in ("validate", "parse", "metadata", "convert")
            ]
        }

    @app.get(f"{config.api_prefix}/health")
    async def health():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "version": config.version
        }

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions"""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "message": exc.detail,
                "status_code": exc.status_code
            }
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """Malformed input is the caller's fault"""
        logger.warning(f"Rejected request to {request.url.path}: {exc}")
        return JSONResponse(
            status_code=422,
            content={
                "error": True,
                "message": str(exc),
                "status_code": 422
            }
        )

    _app = app

    return app


def get_app() -> Optional[FastAPI]:
    """Get the current FastAPI application"""
    return _app
