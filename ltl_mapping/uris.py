"""
LTL Mapping URIs - Deterministic Resource Naming

Every resource of the corpus graph hangs off the document URI
``{corpus_ref}/{encoded title}``. Citation units use their explicit id as
path segment, else ``{Label}_{index}``; tokens append ``/t{k}`` to the URI
of the sentence that owns them. UD and morphology nodes are named by
sentence/token position only.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from ltl_core.models import CitationLabels
from ltl_rdf.graph import create_uri, encode_uri_component


@dataclass
class UriFactory:
    """Builds the URIs of one converted document"""
    corpus_ref: str
    doc_title: str
    labels: CitationLabels = field(default_factory=CitationLabels)

    @property
    def document(self) -> str:
        return create_uri(self.corpus_ref, self.doc_title)

    @property
    def document_layer(self) -> str:
        return f"{self.document}/DocumentLayer"

    @property
    def citation_structure(self) -> str:
        return f"{self.document}/CiteStructure"

    @property
    def ud_layer(self) -> str:
        return f"{self.document}/UDAnnotationLayer"

    @property
    def morphology_layer(self) -> str:
        return f"{self.document}/UDMorphologyAnnotationLayer"

    def citation_document(self, doc_segment: str) -> str:
        return create_uri(self.citation_structure, doc_segment)

    def citation_paragraph(self, para_segment: str, doc_segment: Optional[str] = None) -> str:
        if doc_segment is not None:
            return create_uri(self.citation_structure, doc_segment, para_segment)
        return create_uri(self.citation_structure, para_segment)

    def sentence(
        self,
        number: int,
        doc_segment: Optional[str] = None,
        para_segment: Optional[str] = None
    ) -> str:
        """Citation sentence URI, nested under its document and paragraph"""
        parts = [self.citation_structure]
        if doc_segment is not None:
            parts.append(encode_uri_component(doc_segment))
        if para_segment is not None:
            parts.append(encode_uri_component(para_segment))
        parts.append(f"s{number}")
        return "/".join(parts)

    @staticmethod
    def token(sentence_uri: str, position: int) -> str:
        return f"{sentence_uri}/t{position}"

    def ud_sentence(self, number: int) -> str:
        return f"{self.ud_layer}/Sentence_{number}"

    def dependency(self, number: int, position: int) -> str:
        return f"{self.document}/UD/s{number}t{position}"

    def morphology_annotation(self, number: int, position: int) -> str:
        return f"{self.morphology_layer}/id/s{number}t{position}"
