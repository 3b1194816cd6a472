"""
LTL RDF - Graph Model and Turtle Support

This package provides the ontology-independent RDF layer: an ordered
in-memory graph, a Turtle writer with subject grouping and prefix rules,
and a minimal Turtle reader for checking converted output.

Modules:
    graph: IRI, BlankNode, Literal, Triple and TurtleDocument
    turtle_writer: Turtle serialization
    turtle_reader: Minimal Turtle parsing
"""

from ltl_rdf.graph import (
    IRI,
    BlankNode,
    Literal,
    Triple,
    Prefix,
    TurtleDocument,
    create_uri,
    create_prefixed_uri,
    encode_uri_component,
    validate_document,
    RDF_TYPE_IRI,
    XSD_INTEGER_IRI,
)

from ltl_rdf.turtle_writer import (
    TurtleWriter,
    serialize_turtle,
    write_turtle_file,
)

from ltl_rdf.turtle_reader import (
    TurtleReader,
    TurtleSyntaxError,
    parse_turtle_string,
    parse_turtle_file,
)

__version__ = "1.0.0"

__all__ = [
    "IRI",
    "BlankNode",
    "Literal",
    "Triple",
    "Prefix",
    "TurtleDocument",
    "create_uri",
    "create_prefixed_uri",
    "encode_uri_component",
    "validate_document",
    "RDF_TYPE_IRI",
    "XSD_INTEGER_IRI",
    "TurtleWriter",
    "serialize_turtle",
    "write_turtle_file",
    "TurtleReader",
    "TurtleSyntaxError",
    "parse_turtle_string",
    "parse_turtle_file",
]
