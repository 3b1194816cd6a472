"""
LTL Core - LiITA Text Linker Core Module

This package provides the foundational data models, runtime configuration
and logging infrastructure shared by the parser, the validator and the
corpus graph mapper.

Modules:
    models: Core domain objects (Token, Sentence, ConlluDocument, etc.)
    config_runtime: Runtime configuration from file and environment
    logging_monitoring: Structured logging and operation timing
"""

from ltl_core.models import (
    Token,
    TokenKind,
    MetadataComment,
    FreeformComment,
    BoundaryComment,
    BoundaryKind,
    Comment,
    Sentence,
    ConlluDocument,
    DocumentMetadata,
    CitationLabels,
    ConversionOptions,
)

from ltl_core.config_runtime import (
    RuntimeConfig,
    get_runtime_config,
    reset_runtime_config,
    get_setting,
)

from ltl_core.logging_monitoring import (
    LogLevel,
    StructuredFormatter,
    ConsoleFormatter,
    setup_logging,
    timed,
)

__version__ = "1.0.0"

__all__ = [
    "Token",
    "TokenKind",
    "MetadataComment",
    "FreeformComment",
    "BoundaryComment",
    "BoundaryKind",
    "Comment",
    "Sentence",
    "ConlluDocument",
    "DocumentMetadata",
    "CitationLabels",
    "ConversionOptions",
    "RuntimeConfig",
    "get_runtime_config",
    "reset_runtime_config",
    "get_setting",
    "LogLevel",
    "StructuredFormatter",
    "ConsoleFormatter",
    "setup_logging",
    "timed",
]
