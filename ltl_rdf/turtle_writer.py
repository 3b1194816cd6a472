"""
LTL RDF Turtle Writer - Turtle Serialization

This module renders a TurtleDocument as Turtle text. Subjects are grouped
in first-occurrence order and predicates within a subject likewise;
objects sharing a subject and predicate are joined with commas.

Rendering rules:
- ``rdf:type`` in predicate position is always written ``a``
- a prefixed name whose prefix is declared is written as is
- every other IRI is written in angle brackets
- the ``xsd:integer`` datatype is always written ``xsd:int``
"""

from __future__ import annotations
import logging
from typing import Dict, List, Set, Tuple, Union
from pathlib import Path

from ltl_rdf.graph import (
    IRI, BlankNode, Literal, Node, Subject, TurtleDocument,
    RDF_TYPE_IRI, XSD_INTEGER_IRI
)

logger = logging.getLogger(__name__)

INDENT = "    "
LONG_SUBJECT_THRESHOLD = 60
RDF_TYPE_NAMES = frozenset({RDF_TYPE_IRI, "rdf:type", "a"})
XSD_INTEGER_NAMES = frozenset({XSD_INTEGER_IRI, "xsd:integer"})
ABSOLUTE_PREFIXES = ("http://", "https://", "_:")

LITERAL_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
}


def escape_literal(value: str) -> str:
    """Escape a string for a double-quoted Turtle literal"""
    return "".join(LITERAL_ESCAPES.get(ch, ch) for ch in value)


class TurtleWriter:
    """Writer for Turtle format"""

    def __init__(self, document: TurtleDocument):
        self.document = document
        self._prefix_names: Set[str] = set(document.prefix_names())

    def serialize(self) -> str:
        """Serialize the document to Turtle text"""
        lines: List[str] = [
            f"@prefix {p.prefix}: <{p.uri}> ." for p in self.document.prefixes
        ]
        if lines:
            lines.append("")

        for subject, predicates in self._group_triples():
            lines.extend(self._write_subject(subject, predicates))

        logger.debug(
            f"Serialized {len(self.document.triples)} triples, "
            f"{len(self.document.prefixes)} prefixes"
        )
        return "\n".join(lines)

    def _group_triples(self) -> List[Tuple[Subject, List[Tuple[IRI, List[Node]]]]]:
        """Group triples by subject, then predicate, in first-occurrence order"""
        grouped: Dict[Subject, Dict[IRI, List[Node]]] = {}
        for triple in self.document.triples:
            predicates = grouped.setdefault(triple.subject, {})
            predicates.setdefault(triple.predicate, []).append(triple.object)
        return [(s, list(p.items())) for s, p in grouped.items()]

    def _write_subject(self, subject: Subject, predicates: List[Tuple[IRI, List[Node]]]) -> List[str]:
        """Write one subject block"""
        subject_text = self.render_node(subject)
        rendered = [
            (self.render_predicate(p), ", ".join(self.render_node(o) for o in objects))
            for p, objects in predicates
        ]

        if len(predicates) == 1 and len(predicates[0][1]) == 1:
            predicate_text, object_text = rendered[0]
            return [f"{subject_text} {predicate_text} {object_text} ."]

        raw_subject = subject.value if isinstance(subject, IRI) else subject.label
        first_predicate = predicates[0][0]

        subject_alone = (
            len(raw_subject) > LONG_SUBJECT_THRESHOLD
            and first_predicate.value in RDF_TYPE_NAMES
        )

        if subject_alone:
            block = [subject_text, f"{INDENT}{rendered[0][0]} {rendered[0][1]}"]
        else:
            block = [f"{subject_text} {rendered[0][0]} {rendered[0][1]}"]
        block.extend(f"{INDENT}{p} {o}" for p, o in rendered[1:])

        first_predicate_line = 1 if subject_alone else 0
        for index in range(first_predicate_line, len(block) - 1):
            block[index] += ";"
        block[-1] += " ."
        block.append("")
        return block

    def render_predicate(self, predicate: IRI) -> str:
        if predicate.value in RDF_TYPE_NAMES:
            return "a"
        return self.render_iri(predicate.value)

    def render_node(self, node: Node) -> str:
        """Render a subject or object"""
        if isinstance(node, IRI):
            return self.render_iri(node.value)
        if isinstance(node, BlankNode):
            return f"_:{node.label}"
        return self.render_literal(node)

    def render_iri(self, value: str) -> str:
        """Prefixed names with a declared prefix pass through, the rest is bracketed"""
        if not value.startswith(ABSOLUTE_PREFIXES) and ":" in value:
            prefix = value.split(":", 1)[0]
            if prefix in self._prefix_names:
                return value
        return f"<{value}>"

    def render_literal(self, literal: Literal) -> str:
        text = f'"{escape_literal(literal.value)}"'
        if literal.language:
            return f"{text}@{literal.language}"
        if literal.datatype:
            if literal.datatype in XSD_INTEGER_NAMES:
                return f"{text}^^xsd:int"
            return f"{text}^^{self.render_iri(literal.datatype)}"
        return text


def serialize_turtle(document: TurtleDocument) -> str:
    """Serialize a TurtleDocument to Turtle text"""
    return TurtleWriter(document).serialize()


def write_turtle_file(document: TurtleDocument, file_path: Union[str, Path]):
    """Write a TurtleDocument to a Turtle file"""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(serialize_turtle(document))
