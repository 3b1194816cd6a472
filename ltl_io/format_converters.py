"""
LTL IO Format Converters - CoNLL-U to Turtle Pipeline

This module wires the parser, validator, corpus graph mapper and Turtle
writer together. The plain functions (``parse_source``, ``serialize_source``,
``validate_source``, ``convert``) raise on bad input; ``FormatConverter``
wraps the whole pipeline and reports failures in a ``ConversionResult``
instead.
"""

from __future__ import annotations
import time
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any, Union
from dataclasses import dataclass, field

from ltl_core.models import (
    ConlluDocument, ConversionOptions, DocumentMetadata, MetadataComment
)
from ltl_core.logging_monitoring import timed
from ltl_io.conllu_io import CoNLLUReader, CoNLLUWriter
from ltl_qa.validators import CoNLLUValidator, ValidationResult
from ltl_mapping.corpus_mapper import CorpusGraphMapper
from ltl_rdf.turtle_writer import serialize_turtle

logger = logging.getLogger(__name__)

# Sentence metadata keys that carry document metadata
METADATA_KEYS: Dict[str, str] = {
    "docId": "doc_id",
    "docTitle": "doc_title",
    "contributor": "contributor",
    "corpusRef": "corpus_ref",
    "docAuthor": "doc_author",
    "seeAlso": "see_also",
    "description": "description",
}


def parse_source(text: str, strict: bool = False) -> ConlluDocument:
    """Parse CoNLL-U text"""
    return CoNLLUReader(strict=strict).read_string(text)


def serialize_source(document: ConlluDocument) -> str:
    """Serialize a document back to CoNLL-U text"""
    return CoNLLUWriter().write_string(document)


def validate_source(text: str) -> ValidationResult:
    """Validate CoNLL-U text"""
    return CoNLLUValidator().validate_string(text)


def extract_metadata(document: ConlluDocument) -> DocumentMetadata:
    """Collect document metadata from sentence comments; the last value wins"""
    values: Dict[str, str] = {}
    for sentence in document.sentences:
        for comment in sentence.comments:
            if isinstance(comment, MetadataComment) and comment.key in METADATA_KEYS:
                values[METADATA_KEYS[comment.key]] = comment.value
    return DocumentMetadata(**values)


def merge_metadata(base: DocumentMetadata, overrides: Optional[DocumentMetadata]) -> DocumentMetadata:
    """Non-empty override fields replace the base fields"""
    if overrides is None:
        return base
    merged = base.to_dict()
    merged.update({k: v for k, v in overrides.to_dict().items() if v})
    return DocumentMetadata.from_dict(merged)


def convert(
    document: ConlluDocument,
    metadata: DocumentMetadata,
    options: Optional[ConversionOptions] = None
) -> str:
    """Map a parsed document to the corpus graph and render it as Turtle"""
    graph = CorpusGraphMapper(metadata, options).map_to_graph(document)
    return serialize_turtle(graph)


def conllu_to_turtle(
    text: str,
    metadata: Optional[DocumentMetadata] = None,
    options: Optional[ConversionOptions] = None,
    strict: bool = False
) -> str:
    """Parse CoNLL-U text and convert it; metadata defaults to the comments"""
    document = parse_source(text, strict=strict)
    if metadata is None:
        metadata = extract_metadata(document)
    return convert(document, metadata, options)


def read_conllu_file(file_path: Union[str, Path], strict: bool = False) -> ConlluDocument:
    """Read a CoNLL-U file"""
    return CoNLLUReader(strict=strict).read_file(file_path)


@dataclass
class ConversionResult:
    """Result of a CoNLL-U to Turtle conversion"""
    success: bool
    output_path: Optional[str] = None
    output_string: Optional[str] = None

    metadata: Optional[DocumentMetadata] = None

    sentences_converted: int = 0
    tokens_converted: int = 0
    triples_written: int = 0

    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    conversion_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "output_path": self.output_path,
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "sentences_converted": self.sentences_converted,
            "tokens_converted": self.tokens_converted,
            "triples_written": self.triples_written,
            "warnings": self.warnings,
            "errors": self.errors,
            "conversion_time_ms": self.conversion_time_ms,
        }


class FormatConverter:
    """CoNLL-U to Turtle converter reporting into a ConversionResult"""

    def __init__(
        self,
        options: Optional[ConversionOptions] = None,
        strict: bool = False,
        validate: bool = False,
        default_corpus_ref: str = ""
    ):
        self.options = options or ConversionOptions()
        self.strict = strict
        self.validate = validate
        self.default_corpus_ref = default_corpus_ref

    def convert_file(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        metadata: Optional[DocumentMetadata] = None
    ) -> ConversionResult:
        """Convert a CoNLL-U file, writing Turtle when an output path is given"""
        input_path = Path(input_path)

        if not input_path.exists():
            result = ConversionResult(success=False)
            result.errors.append(f"Input file not found: {input_path}")
            return result

        try:
            text = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            result = ConversionResult(success=False)
            result.errors.append(f"Cannot read {input_path}: {e}")
            logger.exception(f"Reading {input_path} failed")
            return result

        result = self.convert_string(text, metadata)

        if result.success and output_path is not None:
            output_path = Path(output_path)
            try:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                output_path.write_text(result.output_string, encoding="utf-8")
                result.output_path = str(output_path)
            except OSError as e:
                result.success = False
                result.errors.append(f"Cannot write {output_path}: {e}")
                logger.exception(f"Writing {output_path} failed")

        return result

    def convert_string(
        self,
        input_string: str,
        metadata: Optional[DocumentMetadata] = None
    ) -> ConversionResult:
        """Convert CoNLL-U text to Turtle"""
        start_time = time.time()
        result = ConversionResult(success=False)

        try:
            if self.validate:
                validation = validate_source(input_string)
                result.warnings.extend(str(w) for w in validation.warnings)
                if not validation.is_valid:
                    result.errors.extend(str(e) for e in validation.errors)
                    return self._finish(result, start_time)

            reader = CoNLLUReader(strict=self.strict)
            with timed("parse", logger):
                document = reader.read_string(input_string)
            result.warnings.extend(
                f"Line {n}: skipped line with too few fields" for n in reader.skipped_lines
            )

            resolved = merge_metadata(extract_metadata(document), metadata)
            if not resolved.corpus_ref and self.default_corpus_ref:
                resolved.corpus_ref = self.default_corpus_ref
            if not resolved.doc_title:
                result.warnings.append("No document title given; document URI ends with an empty segment")
            result.metadata = resolved

            with timed("map", logger):
                graph = CorpusGraphMapper(resolved, self.options).map_to_graph(document)
            with timed("serialize", logger):
                result.output_string = serialize_turtle(graph)

            tokened = document.tokened_sentences()
            result.success = True
            result.sentences_converted = len(tokened)
            result.tokens_converted = sum(len(s.tokens) for s in tokened)
            result.triples_written = len(graph.triples)

        except ValueError as e:
            result.errors.append(f"Conversion error: {str(e)}")
            logger.exception("Conversion failed")

        return self._finish(result, start_time)

    def _finish(self, result: ConversionResult, start_time: float) -> ConversionResult:
        result.conversion_time_ms = (time.time() - start_time) * 1000
        return result


def convert_file(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    metadata: Optional[DocumentMetadata] = None,
    options: Optional[ConversionOptions] = None
) -> ConversionResult:
    """Convert a CoNLL-U file to Turtle"""
    return FormatConverter(options).convert_file(input_path, output_path, metadata)
