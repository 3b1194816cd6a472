"""
LTL Mapping - CoNLL-U to Corpus Graph

This package maps parsed CoNLL-U documents onto the POWLA / LiLa corpus
ontology: a document layer, a citation structure, a UD dependency layer
and a morphology annotation layer.

Modules:
    vocabulary: Prefixes, classes and predicates
    uris: Deterministic URI construction
    layers: Per-node triple emitters and token helpers
    corpus_mapper: Layer orchestration
"""

from ltl_mapping.uris import UriFactory

from ltl_mapping.layers import (
    parse_misc_field,
    get_lemma_prefix,
    extract_lemma_id,
    features_to_ud_urls,
)

from ltl_mapping.corpus_mapper import (
    CorpusGraphMapper,
    map_to_graph,
)

__version__ = "1.0.0"

__all__ = [
    "UriFactory",
    "parse_misc_field",
    "get_lemma_prefix",
    "extract_lemma_id",
    "features_to_ud_urls",
    "CorpusGraphMapper",
    "map_to_graph",
]
