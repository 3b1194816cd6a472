"""
LTL RDF Graph - In-Memory RDF Graph Model

This module defines the ontology-independent graph model produced by the
corpus graph mapper and consumed by the Turtle writer: IRIs, blank nodes,
literals, triples and an ordered document of prefixes and triples.

IRIs are stored exactly as given. A value may be a full IRI
(``http://...``) or a prefixed name (``powla:Terminal``); the writer
decides how each is rendered.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union, Iterable, Sequence
from urllib.parse import quote

logger = logging.getLogger(__name__)

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
XSD_NS = "http://www.w3.org/2001/XMLSchema#"

RDF_TYPE_IRI = f"{RDF_NS}type"
RDF_FIRST_IRI = f"{RDF_NS}first"
RDF_REST_IRI = f"{RDF_NS}rest"
RDF_NIL_IRI = f"{RDF_NS}nil"
RDFS_LABEL_CURIE = "rdfs:label"

XSD_INTEGER_IRI = f"{XSD_NS}integer"
XSD_BOOLEAN_IRI = f"{XSD_NS}boolean"

# Characters encodeURIComponent leaves alone besides the alphanumerics and "-_.~"
URI_COMPONENT_SAFE = "!*'()"


@dataclass(frozen=True)
class IRI:
    """IRI reference, full or prefixed"""
    value: str


@dataclass(frozen=True)
class BlankNode:
    """Blank node identified by its label"""
    label: str


@dataclass(frozen=True)
class Literal:
    """RDF literal with an optional datatype or language tag"""
    value: str
    datatype: Optional[str] = None
    language: Optional[str] = None

    def __post_init__(self):
        if self.datatype is not None and self.language is not None:
            raise ValueError("A literal cannot have both a datatype and a language tag")


Subject = Union[IRI, BlankNode]
Node = Union[IRI, BlankNode, Literal]
NodeLike = Union[Node, str]


@dataclass(frozen=True)
class Triple:
    """Subject, predicate, object statement"""
    subject: Subject
    predicate: IRI
    object: Node


@dataclass(frozen=True)
class Prefix:
    """Prefix declaration"""
    prefix: str
    uri: str


def as_node(value: NodeLike) -> Node:
    """Wrap a plain string as an IRI (or a blank node for ``_:label``)"""
    if isinstance(value, (IRI, BlankNode, Literal)):
        return value
    if value.startswith("_:"):
        return BlankNode(value[2:])
    return IRI(value)


def encode_uri_component(value: str) -> str:
    """Percent-encode one URI path segment"""
    return quote(value, safe=URI_COMPONENT_SAFE)


def create_uri(base: str, *segments: str) -> str:
    """Join a base URI with percent-encoded path segments"""
    return f"{base}/{'/'.join(encode_uri_component(s) for s in segments)}"


def create_prefixed_uri(prefix: str, local_name: str) -> str:
    """Build a prefixed name such as ``powla:Document``"""
    return f"{prefix}:{local_name}"


@dataclass
class TurtleDocument:
    """
    Ordered prefixes and triples.

    ``add_prefix`` and ``add_triple`` are the only mutators: nothing is
    deduplicated and insertion order is kept. Blank node labels come from a
    per-document counter so output is deterministic.
    """
    prefixes: List[Prefix] = field(default_factory=list)
    triples: List[Triple] = field(default_factory=list)
    _blank_counter: int = field(default=0, compare=False, repr=False)

    def add_prefix(self, prefix: str, uri: str):
        self.prefixes.append(Prefix(prefix=prefix, uri=uri))

    def add_triple(self, subject: NodeLike, predicate: Union[IRI, str], obj: NodeLike):
        subject_node = as_node(subject)
        if isinstance(subject_node, Literal):
            raise ValueError("A literal cannot be the subject of a triple")
        predicate_node = predicate if isinstance(predicate, IRI) else IRI(predicate)
        self.triples.append(Triple(subject_node, predicate_node, as_node(obj)))

    def prefix_names(self) -> List[str]:
        return [p.prefix for p in self.prefixes]

    def new_blank_node(self, hint: str = "b") -> BlankNode:
        """Mint a fresh blank node"""
        label = f"{hint}{self._blank_counter}"
        self._blank_counter += 1
        return BlankNode(label)

    def add_type(self, subject: NodeLike, rdf_type: NodeLike):
        self.add_triple(subject, RDF_TYPE_IRI, rdf_type)

    def add_label(self, subject: NodeLike, label: str, language: Optional[str] = None):
        self.add_triple(subject, RDFS_LABEL_CURIE, Literal(label, language=language))

    def add_property(self, subject: NodeLike, predicate: Union[IRI, str], obj: NodeLike):
        self.add_triple(subject, predicate, obj)

    def add_string_property(self, subject: NodeLike, predicate: Union[IRI, str], value: str,
                            language: Optional[str] = None):
        self.add_triple(subject, predicate, Literal(value, language=language))

    def add_integer_property(self, subject: NodeLike, predicate: Union[IRI, str], value: int):
        self.add_triple(subject, predicate, Literal(str(int(value)), datatype=XSD_INTEGER_IRI))

    def add_boolean_property(self, subject: NodeLike, predicate: Union[IRI, str], value: bool):
        self.add_triple(subject, predicate, Literal("true" if value else "false", datatype=XSD_BOOLEAN_IRI))

    def add_multiple_triples(self, triples: Iterable[Sequence[NodeLike]]):
        for subject, predicate, obj in triples:
            self.add_triple(subject, predicate, obj)

    def create_collection(self, items: Sequence[NodeLike]) -> Subject:
        """
        Add an RDF list of the given items and return its head.

        An empty list is ``rdf:nil`` itself and adds no triples.
        """
        if not items:
            return IRI(RDF_NIL_IRI)

        nodes = [self.new_blank_node("list") for _ in items]
        for index, item in enumerate(items):
            rest: Subject = nodes[index + 1] if index + 1 < len(nodes) else IRI(RDF_NIL_IRI)
            self.add_triple(nodes[index], RDF_FIRST_IRI, item)
            self.add_triple(nodes[index], RDF_REST_IRI, rest)
        return nodes[0]


def validate_document(document: TurtleDocument) -> bool:
    """Check that every prefix and triple component is non-empty"""
    for prefix in document.prefixes:
        if not prefix.prefix or not prefix.uri:
            return False

    for triple in document.triples:
        if isinstance(triple.subject, IRI) and not triple.subject.value:
            return False
        if isinstance(triple.subject, BlankNode) and not triple.subject.label:
            return False
        if not triple.predicate.value:
            return False
        if isinstance(triple.object, IRI) and not triple.object.value:
            return False
        if isinstance(triple.object, BlankNode) and not triple.object.label:
            return False

    return True
