"""
LTL Mapping Vocabulary - POWLA / LiLa Terms

This module holds the namespaces, prefix declarations and predicate/class
names used by the corpus graph mapper. Terms are written as prefixed names
(``powla:Terminal``) so the Turtle writer keeps them compact; ``rdf:type``
and the Dublin Core terms ``creator`` predicate are kept as full IRIs.
"""

from __future__ import annotations
from typing import List, Tuple

from ltl_rdf.graph import RDF_TYPE_IRI

# Prefix declarations, in the order they are written
PREFIXES: List[Tuple[str, str]] = [
    ("UD_tag", "https://universaldependencies.org/u/dep/"),
    ("dc", "http://purl.org/dc/elements/1.1/"),
    ("liitaIpoLemma", "http://liita.it/data/id/hypolemma/"),
    ("liitaLemma", "http://liita.it/data/id/lemma/"),
    ("lila", "http://liita.it/data/corpora/"),
    ("lilaOntology", "http://lila-erc.eu/ontologies/lila/"),
    ("lila_authors", "http://liita.it/data/corpora/id/authors/"),
    ("lila_corpus", "http://lila-erc.eu/ontologies/lila_corpora/"),
    ("oa", "http://www.w3.org/ns/oa#"),
    ("ontolex", "http://www.w3.org/ns/lemon/ontolex#"),
    ("owl", "http://www.w3.org/2002/07/owl#"),
    ("powla", "http://purl.org/powla/powla.owl#"),
    ("rdfs", "http://www.w3.org/2000/01/rdf-schema#"),
    ("xsd", "http://www.w3.org/2001/XMLSchema#"),
]

RDF_TYPE = RDF_TYPE_IRI
RDFS_LABEL = "rdfs:label"
RDFS_SEE_ALSO = "rdfs:seeAlso"

DC_CONTRIBUTOR = "dc:contributor"
DC_DESCRIPTION = "dc:description"
DC_TITLE = "dc:title"
DCTERMS_CREATOR = "http://purl.org/dc/terms/creator"

POWLA_DOCUMENT = "powla:Document"
POWLA_DOCUMENT_LAYER = "powla:DocumentLayer"
POWLA_TERMINAL = "powla:Terminal"
POWLA_ROOT = "powla:Root"
POWLA_HAS_SUB_DOCUMENT = "powla:hasSubDocument"
POWLA_HAS_DOCUMENT = "powla:hasDocument"
POWLA_HAS_CHILD = "powla:hasChild"
POWLA_HAS_LAYER = "powla:hasLayer"
POWLA_HAS_STRING_VALUE = "powla:hasStringValue"
POWLA_NEXT = "powla:next"
POWLA_PREVIOUS = "powla:previous"
POWLA_FIRST_TERMINAL = "powla:firstTerminal"
POWLA_HAS_TERMINAL = "powla:hasTerminal"
POWLA_LAST_TERMINAL = "powla:lastTerminal"

LILA_CORPUS_CITATION_STRUCTURE = "lila_corpus:CitationStructure"
LILA_CORPUS_CITATION_UNIT = "lila_corpus:citationUnit"
LILA_CORPUS_SYNTACTIC_ANNOTATION = "lila_corpus:SyntacticAnnotation"
LILA_CORPUS_FIRST = "lila_corpus:first"
LILA_CORPUS_LAST = "lila_corpus:last"
LILA_CORPUS_IS_LAYER = "lila_corpus:isLayer"
LILA_CORPUS_HAS_CIT_LEVEL = "lila_corpus:hasCitLevel"
LILA_CORPUS_HAS_REF_TYPE = "lila_corpus:hasRefType"
LILA_CORPUS_HAS_REF_VALUE = "lila_corpus:hasRefValue"
LILA_CORPUS_HAS_DEP = "lila_corpus:hasDep"
LILA_CORPUS_HAS_HEAD = "lila_corpus:hasHead"

LILA_ONTOLOGY_HAS_LEMMA = "lilaOntology:hasLemma"

OA_ANNOTATION = "oa:Annotation"
OA_HAS_BODY = "oa:hasBody"
OA_HAS_TARGET = "oa:hasTarget"

UD_TAG_PREFIX = "UD_tag"
UD_FEATURE_NAMESPACE = "https://universaldependencies.org/it/feat/"

LEMMA_PREFIX = "liitaLemma"
HYPOLEMMA_PREFIX = "liitaIpoLemma"

LAYER_TITLE_DOCUMENT = "Document Layer"
LAYER_TITLE_CITATION = "Citation Layer"
LAYER_TITLE_UD_MORPHOLOGY = "UD Morphology Annotation Layer"
UD_SENTENCE_REF_TYPE = "Sentence"
DEFAULT_DEPREL = "root"
CITATION_LEVEL = 1
