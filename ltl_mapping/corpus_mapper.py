"""
LTL Mapping Corpus Mapper - CoNLL-U to POWLA / LiLa Graph

This module maps a parsed CoNLL-U document onto the layered corpus graph:

1. document metadata and the corpus ``hasSubDocument`` link
2. the document layer
3. the citation structure (documents, paragraphs, sentences) with the
   terminals of every sentence, or just the terminals when the citation
   layer is disabled
4. the UD annotation layer, one root per sentence, each followed by its
   dependency relations when the morphological layer is enabled
5. the morphology annotation layer, when enabled

Sentences without tokens take no part in any layer.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence

from ltl_core.models import ConlluDocument, ConversionOptions, DocumentMetadata
from ltl_citations.hierarchy import (
    CitationHierarchy, CitationHierarchyBuilder, SentenceGroup, TopLevelShape
)
from ltl_rdf.graph import TurtleDocument
from ltl_mapping.uris import UriFactory
from ltl_mapping import layers

logger = logging.getLogger(__name__)

UNRESOLVED_HEADS = (None, "", "0", "_")


class CorpusGraphMapper:
    """Builds the corpus graph of one CoNLL-U document"""

    def __init__(self, metadata: DocumentMetadata, options: Optional[ConversionOptions] = None):
        self.metadata = metadata
        self.options = options or ConversionOptions()
        self.labels = self.options.citation_labels
        self.uris = UriFactory(metadata.corpus_ref, metadata.doc_title, self.labels)

    def map_to_graph(self, document: ConlluDocument) -> TurtleDocument:
        """Map a document to a TurtleDocument"""
        hierarchy = CitationHierarchyBuilder().build(document.sentences)
        groups = hierarchy.sentences
        if not groups:
            raise ValueError("Document contains no sentences with tokens")

        graph = TurtleDocument()
        layers.add_all_prefixes(graph)
        layers.add_document_metadata(graph, self.uris.document, self.metadata)
        layers.add_document_layer(
            graph, self.uris.document_layer, self.uris.document, self.metadata.doc_title
        )

        if self.options.include_citation_layer:
            sentence_uris = self._add_citation_layer(graph, hierarchy)
        else:
            sentence_uris = [self.uris.sentence(g.number) for g in groups]
            for group, sentence_uri in zip(groups, sentence_uris):
                layers.add_tokens(
                    graph,
                    group.sentence.tokens,
                    self._token_uris(sentence_uri, group),
                    self.uris.document_layer,
                )

        token_uris = [self._token_uris(uri, g) for g, uri in zip(groups, sentence_uris)]

        self._add_ud_layer(graph, groups, token_uris)
        if self.options.include_morphological_layer:
            self._add_morphology_layer(graph, groups, token_uris)

        logger.info(
            f"Mapped '{self.metadata.doc_title}': {len(groups)} sentences, "
            f"{sum(len(t) for t in token_uris)} tokens, {len(graph.triples)} triples "
            f"(shape={hierarchy.shape.value})"
        )
        return graph

    def _token_uris(self, sentence_uri: str, group: SentenceGroup) -> List[str]:
        return [self.uris.token(sentence_uri, k) for k in range(1, len(group.sentence.tokens) + 1)]

    def _add_citation_layer(self, graph: TurtleDocument, hierarchy: CitationHierarchy) -> List[str]:
        """Emit the citation structure; returns sentence URIs by sentence index"""
        sentence_uris: Dict[int, str] = {}
        structure_uri = self.uris.citation_structure

        if hierarchy.shape == TopLevelShape.DOCUMENTS:
            top_level = [
                self.uris.citation_document(d.segment(self.labels.document_label))
                for d in hierarchy.documents
            ]
        elif hierarchy.shape == TopLevelShape.PARAGRAPHS:
            top_level = [
                self.uris.citation_paragraph(p.segment(self.labels.paragraph_label))
                for p in hierarchy.paragraphs
            ]
        else:
            top_level = [self.uris.sentence(g.number) for g in hierarchy.sentences]

        layers.add_citation_structure_header(
            graph, structure_uri, self.uris.document, self.metadata.doc_title, top_level
        )

        if hierarchy.shape == TopLevelShape.DOCUMENTS:
            self._add_documents(graph, hierarchy, top_level, sentence_uris)
        elif hierarchy.shape == TopLevelShape.PARAGRAPHS:
            self._add_paragraphs(graph, hierarchy.paragraphs, top_level, None, sentence_uris)
        else:
            self._add_sentences(graph, hierarchy.sentences, top_level, sentence_uris)

        return [sentence_uris[g.index] for g in hierarchy.sentences]

    def _add_documents(
        self,
        graph: TurtleDocument,
        hierarchy: CitationHierarchy,
        document_uris: List[str],
        sentence_uris: Dict[int, str]
    ):
        label = self.labels.document_label
        for i, (group, uri) in enumerate(zip(hierarchy.documents, document_uris)):
            segment = group.segment(label)
            paragraphs = group.paragraphs

            if paragraphs:
                child_uris = [
                    self.uris.citation_paragraph(p.segment(self.labels.paragraph_label), segment)
                    for p in paragraphs
                ]
            else:
                child_uris = [self.uris.sentence(s.number, segment) for s in group.sentences]

            layers.add_citation_unit(
                graph, uri,
                ref_type=label,
                ref_value=segment,
                label=group.id or f"{label} {group.index}",
                child_uris=child_uris,
                previous_uri=document_uris[i - 1] if i > 0 else None,
                next_uri=document_uris[i + 1] if i + 1 < len(document_uris) else None,
            )

            if paragraphs:
                self._add_paragraphs(graph, paragraphs, child_uris, segment, sentence_uris)
            else:
                self._add_sentences(graph, group.sentences, child_uris, sentence_uris)

    def _add_paragraphs(
        self,
        graph: TurtleDocument,
        paragraphs: Sequence,
        paragraph_uris: List[str],
        doc_segment: Optional[str],
        sentence_uris: Dict[int, str]
    ):
        label = self.labels.paragraph_label
        for i, (group, uri) in enumerate(zip(paragraphs, paragraph_uris)):
            segment = group.segment(label)
            child_uris = [self.uris.sentence(s.number, doc_segment, segment) for s in group.sentences]

            layers.add_citation_unit(
                graph, uri,
                ref_type=label,
                ref_value=segment,
                label=group.id or f"{label} {group.index}",
                child_uris=child_uris,
                previous_uri=paragraph_uris[i - 1] if i > 0 else None,
                next_uri=paragraph_uris[i + 1] if i + 1 < len(paragraph_uris) else None,
            )
            self._add_sentences(graph, group.sentences, child_uris, sentence_uris)

    def _add_sentences(
        self,
        graph: TurtleDocument,
        groups: Sequence[SentenceGroup],
        uris: List[str],
        sentence_uris: Dict[int, str]
    ):
        """Sentence units of one parent, each followed by its terminals"""
        label = self.labels.sentence_label
        for i, (group, uri) in enumerate(zip(groups, uris)):
            token_uris = self._token_uris(uri, group)
            layers.add_citation_unit(
                graph, uri,
                ref_type=label,
                ref_value=f"{label}_{group.number}",
                label=f"{label} {group.number}",
                child_uris=token_uris,
                previous_uri=uris[i - 1] if i > 0 else None,
                next_uri=uris[i + 1] if i + 1 < len(uris) else None,
            )
            layers.add_tokens(graph, group.sentence.tokens, token_uris, self.uris.document_layer)
            sentence_uris[group.index] = uri

    def _add_ud_layer(
        self,
        graph: TurtleDocument,
        groups: List[SentenceGroup],
        token_uris: List[List[str]]
    ):
        root_uris = [self.uris.ud_sentence(g.number) for g in groups]
        layers.add_ud_layer_header(
            graph, self.uris.ud_layer, self.uris.document, self.metadata.doc_title, root_uris
        )

        for i, group in enumerate(groups):
            root_uri = root_uris[i]
            layers.add_ud_sentence(
                graph, root_uri, group.number, token_uris[i],
                previous_uri=root_uris[i - 1] if i > 0 else None,
                next_uri=root_uris[i + 1] if i + 1 < len(root_uris) else None,
            )
            if self.options.include_morphological_layer:
                self._add_dependencies(graph, group, token_uris[i], root_uri)

    def _add_dependencies(
        self,
        graph: TurtleDocument,
        group: SentenceGroup,
        token_uris: List[str],
        root_uri: str
    ):
        """Heads are looked up by token id within the sentence"""
        tokens = group.sentence.tokens
        by_id = {token.id: uri for token, uri in zip(tokens, token_uris)}

        for position, (token, token_uri) in enumerate(zip(tokens, token_uris), start=1):
            head_uri = None if token.head in UNRESOLVED_HEADS else by_id.get(token.head)
            layers.add_dependency_relation(
                graph,
                self.uris.dependency(group.number, position),
                token, token_uri, head_uri, root_uri,
            )

    def _add_morphology_layer(
        self,
        graph: TurtleDocument,
        groups: List[SentenceGroup],
        token_uris: List[List[str]]
    ):
        layer_uri = self.uris.morphology_layer
        layers.add_morphology_layer_header(
            graph, layer_uri, self.uris.document, self.metadata.doc_title
        )
        for group, uris in zip(groups, token_uris):
            for position, (token, token_uri) in enumerate(zip(group.sentence.tokens, uris), start=1):
                layers.add_morphology_annotation(
                    graph,
                    self.uris.morphology_annotation(group.number, position),
                    token, layer_uri, token_uri,
                )


def map_to_graph(
    document: ConlluDocument,
    metadata: DocumentMetadata,
    options: Optional[ConversionOptions] = None
) -> TurtleDocument:
    """Map a CoNLL-U document to the corpus graph"""
    return CorpusGraphMapper(metadata, options).map_to_graph(document)
