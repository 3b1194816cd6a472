"""
LTL IO - Input/Output for CoNLL-U and the Conversion Pipeline

This package reads and writes CoNLL-U and runs the CoNLL-U to Turtle
conversion pipeline.

Modules:
    conllu_io: CoNLL-U reading and writing
    format_converters: Pipeline entry points and FormatConverter
"""

from ltl_io.conllu_io import (
    CoNLLUReader,
    CoNLLUWriter,
    parse_feats,
    parse_misc,
    parse_conllu_file,
    parse_conllu_string,
    write_conllu_file,
    write_conllu_string,
)

from ltl_io.format_converters import (
    ConversionResult,
    FormatConverter,
    parse_source,
    serialize_source,
    validate_source,
    extract_metadata,
    merge_metadata,
    convert,
    convert_file,
    conllu_to_turtle,
    read_conllu_file,
)

__version__ = "1.0.0"

__all__ = [
    "CoNLLUReader",
    "CoNLLUWriter",
    "parse_feats",
    "parse_misc",
    "parse_conllu_file",
    "parse_conllu_string",
    "write_conllu_file",
    "write_conllu_string",
    "ConversionResult",
    "FormatConverter",
    "parse_source",
    "serialize_source",
    "validate_source",
    "extract_metadata",
    "merge_metadata",
    "convert",
    "convert_file",
    "conllu_to_turtle",
    "read_conllu_file",
]
