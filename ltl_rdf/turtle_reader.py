"""
LTL RDF Turtle Reader - Minimal Turtle Parsing

This module reads back the Turtle subset produced by the Turtle writer so
converted output can be checked: ``@prefix`` directives and subject blocks
with ``;`` and ``,`` lists, ``a``, bracketed IRIs, prefixed names, blank
node labels and string literals with escapes, language tags and
datatypes. It is not a general Turtle parser (no collections, no
``[]`` blank node property lists, no long strings, no base resolution).

Prefixed names are kept as written so that reading then writing a
document reproduces it.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Tuple, Union
from pathlib import Path

from ltl_rdf.graph import (
    IRI, BlankNode, Literal, Node, Subject, TurtleDocument,
    RDF_TYPE_IRI, XSD_INTEGER_IRI
)

logger = logging.getLogger(__name__)

NAME_TERMINATORS = set(" \t\r\n;,<>\"'()[]{}#")
STRING_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
}


class TurtleSyntaxError(ValueError):
    """Raised on malformed Turtle input"""

    def __init__(self, line: int, column: int, message: str):
        super().__init__(f"{line}:{column}: {message}")
        self.line = line
        self.column = column
        self.message = message


class Scanner:
    """Character scanner with line and column tracking"""

    def __init__(self, text: str):
        self.text = text
        self.i = 0
        self.line = 1
        self.col = 1

    def eof(self) -> bool:
        return self.i >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        idx = self.i + offset
        if idx >= len(self.text):
            return ""
        return self.text[idx]

    def startswith(self, token: str) -> bool:
        return self.text.startswith(token, self.i)

    def advance(self) -> str:
        ch = self.peek()
        if not ch:
            self.error("Unexpected end of input")
        self.i += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def consume(self, token: str) -> bool:
        if self.startswith(token):
            for _ in token:
                self.advance()
            return True
        return False

    def expect(self, token: str, message: Optional[str] = None):
        if not self.consume(token):
            self.error(message or f"Expected '{token}'")

    def error(self, message: str):
        raise TurtleSyntaxError(self.line, self.col, message)

    def skip_ws_comments(self):
        while not self.eof():
            ch = self.peek()
            if ch in " \t\r\n":
                self.advance()
            elif ch == "#":
                while not self.eof() and self.peek() != "\n":
                    self.advance()
            else:
                break


class TurtleReader:
    """Reader for the Turtle subset written by TurtleWriter"""

    def read_file(self, file_path: Union[str, Path]) -> TurtleDocument:
        """Read Turtle file"""
        with open(file_path, "r", encoding="utf-8") as f:
            return self.read_string(f.read())

    def read_string(self, turtle_string: str) -> TurtleDocument:
        """Read Turtle string"""
        scanner = Scanner(turtle_string)
        document = TurtleDocument()

        scanner.skip_ws_comments()
        while not scanner.eof():
            if scanner.startswith("@prefix"):
                self._parse_prefix(scanner, document)
            else:
                self._parse_statement(scanner, document)
            scanner.skip_ws_comments()

        logger.debug(
            f"Read {len(document.prefixes)} prefixes, {len(document.triples)} triples"
        )
        return document

    def _parse_prefix(self, scanner: Scanner, document: TurtleDocument):
        scanner.expect("@prefix")
        scanner.skip_ws_comments()
        name = self._read_name(scanner)
        if not name.endswith(":"):
            scanner.error("Expected prefix name ending with ':'")
        scanner.skip_ws_comments()
        uri = self._parse_iri_ref(scanner)
        scanner.skip_ws_comments()
        scanner.expect(".", "Expected '.' after prefix declaration")
        document.add_prefix(name[:-1], uri)

    def _parse_statement(self, scanner: Scanner, document: TurtleDocument):
        subject = self._parse_subject(scanner)
        for predicate, objects in self._parse_predicate_object_list(scanner):
            for obj in objects:
                document.add_triple(subject, predicate, obj)
        scanner.skip_ws_comments()
        scanner.expect(".", "Expected '.' at end of statement")

    def _parse_predicate_object_list(self, scanner: Scanner) -> List[Tuple[IRI, List[Node]]]:
        pairs: List[Tuple[IRI, List[Node]]] = []
        while True:
            scanner.skip_ws_comments()
            predicate = self._parse_verb(scanner)
            pairs.append((predicate, self._parse_object_list(scanner)))
            scanner.skip_ws_comments()
            if not scanner.consume(";"):
                break
            scanner.skip_ws_comments()
            # a trailing ';' before '.' is allowed
            if scanner.peek() == ".":
                break
        return pairs

    def _parse_object_list(self, scanner: Scanner) -> List[Node]:
        objects: List[Node] = []
        while True:
            scanner.skip_ws_comments()
            objects.append(self._parse_object(scanner))
            scanner.skip_ws_comments()
            if not scanner.consume(","):
                return objects

    def _parse_subject(self, scanner: Scanner) -> Subject:
        node = self._parse_object(scanner)
        if isinstance(node, Literal):
            scanner.error("A literal cannot be a subject")
        return node

    def _parse_verb(self, scanner: Scanner) -> IRI:
        if scanner.peek() == "a" and (scanner.peek(1) in NAME_TERMINATORS or scanner.peek(1) == ""):
            scanner.advance()
            return IRI(RDF_TYPE_IRI)
        node = self._parse_object(scanner)
        if not isinstance(node, IRI):
            scanner.error("Predicate must be an IRI")
        return node

    def _parse_object(self, scanner: Scanner) -> Node:
        ch = scanner.peek()
        if ch == "<":
            return IRI(self._parse_iri_ref(scanner))
        if ch == '"':
            return self._parse_literal(scanner)
        if scanner.startswith("_:"):
            scanner.consume("_:")
            label = self._read_name(scanner)
            if not label:
                scanner.error("Empty blank node label")
            return BlankNode(label)
        name = self._read_name(scanner)
        if ":" not in name:
            scanner.error(f"Expected IRI, prefixed name or literal, got {name!r}")
        return IRI(name)

    def _parse_iri_ref(self, scanner: Scanner) -> str:
        scanner.expect("<")
        chars: List[str] = []
        while True:
            if scanner.eof():
                scanner.error("Unterminated IRI")
            ch = scanner.advance()
            if ch == ">":
                return "".join(chars)
            if ch in " \n\r\t":
                scanner.error("Whitespace in IRI")
            chars.append(ch)

    def _read_name(self, scanner: Scanner) -> str:
        """Read a prefixed name, stopping before a statement-final '.'"""
        chars: List[str] = []
        while not scanner.eof():
            ch = scanner.peek()
            if ch in NAME_TERMINATORS:
                break
            if ch == "." and (scanner.peek(1) == "" or scanner.peek(1) in NAME_TERMINATORS):
                break
            chars.append(scanner.advance())
        return "".join(chars)

    def _parse_literal(self, scanner: Scanner) -> Literal:
        scanner.expect('"')
        chars: List[str] = []
        while True:
            if scanner.eof():
                scanner.error("Unterminated string literal")
            ch = scanner.advance()
            if ch == '"':
                break
            if ch == "\n":
                scanner.error("Newline in string literal")
            if ch == "\\":
                escaped = scanner.advance()
                if escaped not in STRING_ESCAPES:
                    scanner.error(f"Unknown escape sequence '\\{escaped}'")
                chars.append(STRING_ESCAPES[escaped])
            else:
                chars.append(ch)
        value = "".join(chars)

        if scanner.consume("@"):
            language = self._read_name(scanner)
            if not language:
                scanner.error("Empty language tag")
            return Literal(value, language=language)

        if scanner.consume("^^"):
            if scanner.peek() == "<":
                datatype = self._parse_iri_ref(scanner)
            else:
                datatype = self._read_name(scanner)
            if datatype in ("xsd:int", "xsd:integer"):
                datatype = XSD_INTEGER_IRI
            return Literal(value, datatype=datatype)

        return Literal(value)


def parse_turtle_string(turtle_string: str) -> TurtleDocument:
    """Parse Turtle string"""
    return TurtleReader().read_string(turtle_string)


def parse_turtle_file(file_path: Union[str, Path]) -> TurtleDocument:
    """Parse Turtle file"""
    return TurtleReader().read_file(file_path)
