"""
LTL Citations - Citation Structure of CoNLL-U Documents

This package derives the citation hierarchy (documents, paragraphs and
sentences) from the ``newdoc``/``newpar`` markers of a CoNLL-U document.

Modules:
    hierarchy: Boundary marker parsing and hierarchy building
"""

from ltl_citations.hierarchy import (
    TopLevelShape,
    BoundaryMarker,
    SentenceGroup,
    ParagraphGroup,
    DirectSentences,
    DocumentGroup,
    CitationHierarchy,
    CitationHierarchyBuilder,
    parse_boundary_marker,
    build_citation_hierarchy,
)

__version__ = "1.0.0"

__all__ = [
    "TopLevelShape",
    "BoundaryMarker",
    "SentenceGroup",
    "ParagraphGroup",
    "DirectSentences",
    "DocumentGroup",
    "CitationHierarchy",
    "CitationHierarchyBuilder",
    "parse_boundary_marker",
    "build_citation_hierarchy",
]
