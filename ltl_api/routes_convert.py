"""
LTL API Routes Convert - Validation and Conversion Endpoints

This module provides REST API endpoints for validating, parsing and
converting CoNLL-U text.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from ltl_core.models import CitationLabels, ConversionOptions, DocumentMetadata
from ltl_core.config_runtime import get_runtime_config
from ltl_io.format_converters import (
    FormatConverter, extract_metadata, parse_source, validate_source
)

logger = logging.getLogger(__name__)

router = APIRouter()


class ContentRequest(BaseModel):
    """Schema for a request carrying CoNLL-U text"""
    content: str = Field(..., description="CoNLL-U text")


class ParseRequest(ContentRequest):
    """Schema for parse request"""
    strict: bool = Field(False, description="Reject lines with too few fields")


class MetadataModel(BaseModel):
    """Schema for document metadata"""
    doc_id: str = ""
    doc_title: str = ""
    contributor: str = ""
    corpus_ref: str = ""
    doc_author: str = ""
    see_also: str = ""
    description: str = ""


class ConversionOptionsModel(BaseModel):
    """Schema for conversion options; unset fields use the configured defaults"""
    include_citation_layer: Optional[bool] = None
    include_morphological_layer: Optional[bool] = None
    document_label: Optional[str] = None
    paragraph_label: Optional[str] = None
    sentence_label: Optional[str] = None


class ConvertRequest(ContentRequest):
    """Schema for conversion request"""
    metadata: Optional[MetadataModel] = Field(None, description="Overrides for comment metadata")
    options: Optional[ConversionOptionsModel] = None
    strict: bool = False
    validate_input: bool = Field(False, description="Validate before converting")


class ValidationResponse(BaseModel):
    """Schema for validation response"""
    is_valid: bool
    error_count: int
    errors: List[str]
    warnings: List[str]
    validated_lines: int
    validated_sentences: int


class ParseResponse(BaseModel):
    """Schema for parse response"""
    sentence_count: int
    token_count: int
    sentences: List[Dict[str, Any]]


class ConvertResponse(BaseModel):
    """Schema for conversion response"""
    turtle: str
    metadata: MetadataModel
    sentences_converted: int
    tokens_converted: int
    triples_written: int
    warnings: List[str]
    conversion_time_ms: float


def _check_size(request: Request, content: str):
    limit = request.app.state.config.max_upload_bytes
    if len(content.encode("utf-8")) > limit:
        raise HTTPException(status_code=413, detail=f"Content exceeds {limit} bytes")


def _conversion_options(model: Optional[ConversionOptionsModel]) -> ConversionOptions:
    configured = get_runtime_config().conversion_options()
    if model is None:
        return configured

    def pick(value, default):
        return default if value is None else value

    labels = configured.citation_labels
    return ConversionOptions(
        include_citation_layer=pick(model.include_citation_layer, configured.include_citation_layer),
        include_morphological_layer=pick(
            model.include_morphological_layer, configured.include_morphological_layer
        ),
        citation_labels=CitationLabels(
            document_label=pick(model.document_label, labels.document_label),
            paragraph_label=pick(model.paragraph_label, labels.paragraph_label),
            sentence_label=pick(model.sentence_label, labels.sentence_label),
        ),
    )


@router.post("/validate", response_model=ValidationResponse)
def validate_content(request: ContentRequest, http_request: Request):
    """Validate CoNLL-U text"""
    _check_size(http_request, request.content)
    result = validate_source(request.content)
    return ValidationResponse(
        is_valid=result.is_valid,
        error_count=len(result.errors),
        errors=result.errors,
        warnings=result.warnings,
        validated_lines=result.validated_lines,
        validated_sentences=result.validated_sentences,
    )


@router.post("/parse", response_model=ParseResponse)
def parse_content(request: ParseRequest, http_request: Request):
    """Parse CoNLL-U text into sentences and tokens"""
    _check_size(http_request, request.content)
    document = parse_source(request.content, strict=request.strict)
    return ParseResponse(
        sentence_count=document.sentence_count,
        token_count=document.token_count,
        sentences=[s.to_dict() for s in document.sentences],
    )


@router.post("/metadata", response_model=MetadataModel)
def extract_content_metadata(request: ContentRequest, http_request: Request):
    """Extract document metadata from comments"""
    _check_size(http_request, request.content)
    metadata = extract_metadata(parse_source(request.content))
    return MetadataModel(**metadata.to_dict())


@router.post("/convert", response_model=ConvertResponse)
def convert_content(request: ConvertRequest, http_request: Request):
    """Convert CoNLL-U text to Turtle"""
    _check_size(http_request, request.content)

    config = get_runtime_config()
    converter = FormatConverter(
        options=_conversion_options(request.options),
        strict=request.strict,
        validate=request.validate_input,
        default_corpus_ref=config.get_setting("conversion", "default_corpus_ref", ""),
    )
    overrides = DocumentMetadata(**request.metadata.model_dump()) if request.metadata else None
    result = converter.convert_string(request.content, overrides)

    if not result.success:
        logger.info(f"Conversion rejected: {len(result.errors)} errors")
        raise HTTPException(status_code=422, detail="; ".join(result.errors))

    return ConvertResponse(
        turtle=result.output_string,
        metadata=MetadataModel(**result.metadata.to_dict()),
        sentences_converted=result.sentences_converted,
        tokens_converted=result.tokens_converted,
        triples_written=result.triples_written,
        warnings=result.warnings,
        conversion_time_ms=result.conversion_time_ms,
    )
