"""
LTL Citations Hierarchy - Document/Paragraph/Sentence Grouping

This module scans sentence comments for ``newdoc`` and ``newpar``
boundary markers and groups the token-bearing sentences of a CoNLL-U
document into an optional Document -> Paragraph -> Sentence tree.

Exactly one top-level shape applies per document:
- DOCUMENTS when any sentence carries a ``newdoc`` marker
- PARAGRAPHS when there is no ``newdoc`` but some ``newpar``
- SENTENCES otherwise (flat citation structure)

Markers are recognised in three comment shapes, in this precedence:
metadata comments (``# newdoc id = X``), explicitly typed boundary
comments, and freeform comments (``# newpar``).
"""

from __future__ import annotations
import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Iterable, Union
from enum import Enum

from ltl_core.models import (
    Sentence, Comment, MetadataComment, FreeformComment,
    BoundaryComment, BoundaryKind
)

logger = logging.getLogger(__name__)


METADATA_MARKER_KEY = re.compile(r"^(newdoc|newpar)(\s+id)?$", re.IGNORECASE)
FREEFORM_MARKER = re.compile(r"^#?\s*(newdoc|newpar)(?:\s+id\s*=\s*(.+))?$", re.IGNORECASE)


class TopLevelShape(Enum):
    """Which citation units sit directly under the citation structure"""
    DOCUMENTS = "documents"
    PARAGRAPHS = "paragraphs"
    SENTENCES = "sentences"


@dataclass(frozen=True)
class BoundaryMarker:
    """A recognised newdoc/newpar marker; ``id`` is empty when none was given"""
    kind: BoundaryKind
    id: str = ""


@dataclass
class SentenceGroup:
    """A token-bearing sentence and its 0-based position among them"""
    sentence: Sentence
    index: int

    @property
    def number(self) -> int:
        """1-based global sentence number"""
        return self.index + 1


@dataclass
class ParagraphGroup:
    """Sentences opened by a newpar marker (or an implicit paragraph)"""
    id: str
    index: int
    sentences: List[SentenceGroup] = field(default_factory=list)

    def segment(self, label: str) -> str:
        """Path segment and reference value: explicit id, else Label_index"""
        return self.id or f"{label}_{self.index}"


@dataclass
class DirectSentences:
    """Sentences attached straight to a document that has no paragraph layer"""
    sentences: List[SentenceGroup] = field(default_factory=list)


DocumentChild = Union[ParagraphGroup, DirectSentences]


@dataclass
class DocumentGroup:
    """Sentences opened by a newdoc marker (or an implicit document)"""
    id: str
    index: int
    children: List[DocumentChild] = field(default_factory=list)

    def segment(self, label: str) -> str:
        """Path segment and reference value: explicit id, else Label_index"""
        return self.id or f"{label}_{self.index}"

    @property
    def paragraphs(self) -> List[ParagraphGroup]:
        return [c for c in self.children if isinstance(c, ParagraphGroup)]

    @property
    def sentences(self) -> List[SentenceGroup]:
        return [s for c in self.children for s in c.sentences]


@dataclass
class CitationHierarchy:
    """Result of grouping; only the list matching ``shape`` is top level"""
    shape: TopLevelShape
    sentences: List[SentenceGroup] = field(default_factory=list)
    documents: List[DocumentGroup] = field(default_factory=list)
    paragraphs: List[ParagraphGroup] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Summary of the grouping, for logging and the API"""
        return {
            "shape": self.shape.value,
            "sentence_count": len(self.sentences),
            "documents": [
                {
                    "id": d.id,
                    "index": d.index,
                    "paragraphs": [
                        {"id": p.id, "index": p.index, "sentences": [s.number for s in p.sentences]}
                        for p in d.paragraphs
                    ],
                    "sentences": [s.number for s in d.sentences],
                }
                for d in self.documents
            ],
            "paragraphs": [
                {"id": p.id, "index": p.index, "sentences": [s.number for s in p.sentences]}
                for p in self.paragraphs
            ],
        }


def _as_kind(kind: Union[BoundaryKind, str]) -> Optional[BoundaryKind]:
    if isinstance(kind, BoundaryKind):
        return kind
    try:
        return BoundaryKind(str(kind).strip().lower())
    except ValueError:
        return None


def parse_boundary_marker(comment: Comment) -> Optional[BoundaryMarker]:
    """Recognise a newdoc/newpar marker in any comment shape"""
    if isinstance(comment, MetadataComment):
        match = METADATA_MARKER_KEY.match(comment.key.strip())
        if match:
            return BoundaryMarker(BoundaryKind(match.group(1).lower()), comment.value.strip())
        return None

    if isinstance(comment, BoundaryComment):
        kind = _as_kind(comment.kind)
        if kind is None:
            return None
        return BoundaryMarker(kind, (comment.id or "").strip())

    if isinstance(comment, FreeformComment):
        match = FREEFORM_MARKER.match(comment.text.strip())
        if match:
            return BoundaryMarker(BoundaryKind(match.group(1).lower()), (match.group(2) or "").strip())

    return None


@dataclass
class _SentenceMarkers:
    newdoc: Optional[BoundaryMarker] = None
    newpar: Optional[BoundaryMarker] = None


class CitationHierarchyBuilder:
    """Groups sentences into documents and paragraphs in one left-to-right pass"""

    def build(self, sentences: Iterable[Sentence]) -> CitationHierarchy:
        """Build the hierarchy over the sentences that carry tokens"""
        tokened = [s for s in sentences if s.tokens]
        groups = [SentenceGroup(sentence=s, index=i) for i, s in enumerate(tokened)]
        markers = [self._collect_markers(g.sentence) for g in groups]

        has_newdoc = any(m.newdoc is not None for m in markers)
        has_newpar = any(m.newpar is not None for m in markers)

        if has_newdoc:
            hierarchy = CitationHierarchy(
                shape=TopLevelShape.DOCUMENTS,
                sentences=groups,
                documents=self._group_documents(groups, markers, has_newpar),
            )
        elif has_newpar:
            hierarchy = CitationHierarchy(
                shape=TopLevelShape.PARAGRAPHS,
                sentences=groups,
                paragraphs=self._group_paragraphs(groups, markers),
            )
        else:
            hierarchy = CitationHierarchy(shape=TopLevelShape.SENTENCES, sentences=groups)

        logger.debug(
            f"Citation hierarchy: shape={hierarchy.shape.value}, "
            f"documents={len(hierarchy.documents)}, paragraphs={len(hierarchy.paragraphs)}, "
            f"sentences={len(groups)}"
        )
        return hierarchy

    def _collect_markers(self, sentence: Sentence) -> _SentenceMarkers:
        """Last marker of each kind in a sentence wins"""
        found = _SentenceMarkers()
        for comment in sentence.comments:
            marker = parse_boundary_marker(comment)
            if marker is None:
                continue
            if marker.kind == BoundaryKind.NEWDOC:
                found.newdoc = marker
            else:
                found.newpar = marker
        return found

    def _group_documents(
        self,
        groups: List[SentenceGroup],
        markers: List[_SentenceMarkers],
        has_newpar: bool
    ) -> List[DocumentGroup]:
        documents: List[DocumentGroup] = []
        current_doc: Optional[DocumentGroup] = None
        current_para: Optional[ParagraphGroup] = None
        para_counter = 0

        for group, marker in zip(groups, markers):
            if marker.newdoc is not None:
                current_doc = DocumentGroup(id=marker.newdoc.id, index=len(documents) + 1)
                documents.append(current_doc)
                current_para = None
                para_counter = 0
            elif current_doc is None:
                current_doc = DocumentGroup(id="", index=len(documents) + 1)
                documents.append(current_doc)

            if has_newpar:
                if marker.newpar is not None or current_para is None:
                    para_counter += 1
                    current_para = ParagraphGroup(
                        id=marker.newpar.id if marker.newpar is not None else "",
                        index=para_counter,
                    )
                    current_doc.children.append(current_para)
                current_para.sentences.append(group)
            else:
                if not current_doc.children:
                    current_doc.children.append(DirectSentences())
                current_doc.children[0].sentences.append(group)

        return documents

    def _group_paragraphs(
        self,
        groups: List[SentenceGroup],
        markers: List[_SentenceMarkers]
    ) -> List[ParagraphGroup]:
        paragraphs: List[ParagraphGroup] = []

        for group, marker in zip(groups, markers):
            if marker.newpar is not None or not paragraphs:
                paragraphs.append(ParagraphGroup(
                    id=marker.newpar.id if marker.newpar is not None else "",
                    index=len(paragraphs) + 1,
                ))
            paragraphs[-1].sentences.append(group)

        return paragraphs


def build_citation_hierarchy(sentences: Iterable[Sentence]) -> CitationHierarchy:
    """Group sentences into a citation hierarchy"""
    return CitationHierarchyBuilder().build(sentences)
