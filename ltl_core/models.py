"""
LTL Core Models - Domain Objects for CoNLL-U Corpora

This module defines the data structures shared by the parser, the
validator, the citation hierarchy builder and the corpus graph mapper.

The models cover:
- CoNLL-U tokens (regular words, multiword ranges, empty nodes)
- Sentence comments (metadata, freeform, document/paragraph boundaries)
- Document-level metadata used to mint the corpus graph URIs
- Conversion options controlling which ontology layers are produced
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Union
from enum import Enum


MULTIWORD_ID_PATTERN = re.compile(r"^\d+-\d+$")
EMPTY_NODE_ID_PATTERN = re.compile(r"^(0|[1-9]\d*)\.[1-9]\d*$")
REGULAR_ID_PATTERN = re.compile(r"^\d+$")


class TokenKind(Enum):
    """Category of a token line, derived from its ID"""
    REGULAR = "regular"
    MULTIWORD = "multiword"
    EMPTY_NODE = "empty_node"


class BoundaryKind(Enum):
    """Kind of a citation boundary marker"""
    NEWDOC = "newdoc"
    NEWPAR = "newpar"


@dataclass
class Token:
    """
    One CoNLL-U token line.

    Absent fields (written ``_`` in the source) are ``None``. ``feats`` keeps
    the source order of the features; the writer sorts them by key.
    ``misc`` keeps the raw ``key=value`` entries.
    """
    id: str
    form: str
    lemma: Optional[str] = None
    upos: Optional[str] = None
    xpos: Optional[str] = None
    feats: Optional[Dict[str, str]] = None
    head: Optional[str] = None
    deprel: Optional[str] = None
    deps: Optional[str] = None
    misc: Optional[List[str]] = None

    @property
    def kind(self) -> TokenKind:
        """Token category from the shape of its ID"""
        if MULTIWORD_ID_PATTERN.match(self.id):
            return TokenKind.MULTIWORD
        if EMPTY_NODE_ID_PATTERN.match(self.id):
            return TokenKind.EMPTY_NODE
        return TokenKind.REGULAR

    @property
    def is_multiword(self) -> bool:
        return self.kind == TokenKind.MULTIWORD

    @property
    def is_empty_node(self) -> bool:
        return self.kind == TokenKind.EMPTY_NODE

    @property
    def is_regular(self) -> bool:
        return self.kind == TokenKind.REGULAR

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "form": self.form,
            "lemma": self.lemma,
            "upos": self.upos,
            "xpos": self.xpos,
            "feats": dict(self.feats) if self.feats is not None else None,
            "head": self.head,
            "deprel": self.deprel,
            "deps": self.deps,
            "misc": list(self.misc) if self.misc is not None else None,
        }


@dataclass
class MetadataComment:
    """``# key = value`` comment"""
    key: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "metadata", "key": self.key, "value": self.value}


@dataclass
class FreeformComment:
    """Any ``#`` comment without an equals sign"""
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "comment", "text": self.text}


@dataclass
class BoundaryComment:
    """
    Explicitly typed document or paragraph boundary.

    The parser never produces this shape; it exists for programmatic
    producers that build documents without going through CoNLL-U text.
    """
    kind: BoundaryKind
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "id": self.id}


Comment = Union[MetadataComment, FreeformComment, BoundaryComment]


@dataclass
class Sentence:
    """A block of comments and token lines separated by blank lines"""
    comments: List[Comment] = field(default_factory=list)
    tokens: List[Token] = field(default_factory=list)

    def get_metadata(self, key: str) -> Optional[str]:
        """Value of the first metadata comment with the given key"""
        for comment in self.comments:
            if isinstance(comment, MetadataComment) and comment.key == key:
                return comment.value
        return None

    @property
    def sent_id(self) -> Optional[str]:
        return self.get_metadata("sent_id")

    @property
    def text(self) -> Optional[str]:
        return self.get_metadata("text")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "comments": [c.to_dict() for c in self.comments],
            "tokens": [t.to_dict() for t in self.tokens],
        }


@dataclass
class ConlluDocument:
    """Ordered list of sentences parsed from one CoNLL-U text"""
    sentences: List[Sentence] = field(default_factory=list)

    @property
    def sentence_count(self) -> int:
        return len(self.sentences)

    @property
    def token_count(self) -> int:
        return sum(len(s.tokens) for s in self.sentences)

    def tokened_sentences(self) -> List[Sentence]:
        """Sentences that carry at least one token"""
        return [s for s in self.sentences if s.tokens]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "sentence_count": self.sentence_count,
            "token_count": self.token_count,
            "sentences": [s.to_dict() for s in self.sentences],
        }


@dataclass
class DocumentMetadata:
    """Document-level descriptive metadata for the corpus graph"""
    doc_id: str = ""
    doc_title: str = ""
    contributor: str = ""
    corpus_ref: str = ""
    doc_author: str = ""
    see_also: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary"""
        return {
            "doc_id": self.doc_id,
            "doc_title": self.doc_title,
            "contributor": self.contributor,
            "corpus_ref": self.corpus_ref,
            "doc_author": self.doc_author,
            "see_also": self.see_also,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentMetadata":
        """Create from dictionary, ignoring unknown keys"""
        known = cls().to_dict().keys()
        return cls(**{k: str(v) for k, v in data.items() if k in known and v is not None})


@dataclass
class CitationLabels:
    """Human-readable labels of the three citation levels"""
    document_label: str = "Document"
    paragraph_label: str = "Paragraph"
    sentence_label: str = "Sentence"


@dataclass
class ConversionOptions:
    """Which optional layers the corpus graph mapper produces"""
    include_citation_layer: bool = True
    include_morphological_layer: bool = True
    citation_labels: CitationLabels = field(default_factory=CitationLabels)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "include_citation_layer": self.include_citation_layer,
            "include_morphological_layer": self.include_morphological_layer,
            "document_label": self.citation_labels.document_label,
            "paragraph_label": self.citation_labels.paragraph_label,
            "sentence_label": self.citation_labels.sentence_label,
        }
