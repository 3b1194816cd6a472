"""
LTL API - REST API Package

This package exposes the CoNLL-U validation and conversion pipeline over
HTTP using FastAPI.

Modules:
    app: FastAPI application factory
    routes_convert: Validation, parsing, metadata and conversion endpoints
"""

from ltl_api.app import create_app, get_app, APIConfig

__version__ = "1.0.0"

__all__ = [
    "create_app",
    "get_app",
    "APIConfig",
]
