"""
LTL Mapping Layers - Triple Emitters for the Corpus Graph

This module contains one emitter per node kind of the POWLA / LiLa corpus
graph (document, layers, citation units, terminals, UD roots, dependency
relations and morphology annotations) plus the token-level helpers that
read lemma links and features out of CoNLL-U tokens.

Emitters append triples to a TurtleDocument in a fixed predicate order.
Nodes that link to ordered children refuse an empty child list.
"""

from __future__ import annotations
import re
import json
import logging
from typing import Dict, List, Optional, Any, Sequence

from ltl_core.models import Token, DocumentMetadata
from ltl_rdf.graph import TurtleDocument
from ltl_mapping import vocabulary as v

logger = logging.getLogger(__name__)

LINKED_URIS_KEY = "LiITALinkedURIs"
INTEGER_MISC_KEYS = ("start_char", "end_char")
LEMMA_ID_PATTERN = re.compile(r"/id/(?:hypo)?lemma/(\d+)")


def parse_misc_field(misc: Optional[Sequence[str]]) -> Dict[str, Any]:
    """Parse MISC entries into a dictionary"""
    result: Dict[str, Any] = {}
    if not misc:
        return result

    for item in misc:
        if "=" not in item:
            continue
        key, value = item.split("=", 1)

        if key == LINKED_URIS_KEY:
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError:
                logger.debug(f"Malformed {LINKED_URIS_KEY} value: {value!r}")
                parsed = []
            result[key] = parsed if isinstance(parsed, list) else []
        elif key in INTEGER_MISC_KEYS:
            try:
                result[key] = int(value)
            except ValueError:
                logger.debug(f"Non-integer {key} value: {value!r}")
        else:
            result[key] = value

    return result


def get_lemma_prefix(uri: str) -> str:
    """Hypolemma links get their own prefix"""
    return v.HYPOLEMMA_PREFIX if "/hypolemma/" in uri else v.LEMMA_PREFIX


def extract_lemma_id(uri: str) -> str:
    """Numeric lemma id of a LiITA link, empty when there is none"""
    match = LEMMA_ID_PATTERN.search(uri)
    return match.group(1) if match else ""


def lemma_reference(token: Token) -> Optional[str]:
    """Prefixed lemma name from the first linked URI of a token"""
    links = parse_misc_field(token.misc).get(LINKED_URIS_KEY) or []
    if not links:
        return None
    first = str(links[0])
    lemma_id = extract_lemma_id(first)
    if not lemma_id:
        return None
    return f"{get_lemma_prefix(first)}:{lemma_id}"


def features_to_ud_urls(feats: Optional[Dict[str, str]]) -> List[str]:
    """One feature IRI per key/value pair, in feature order"""
    if not feats:
        return []
    return [f"{v.UD_FEATURE_NAMESPACE}{key}#{value}" for key, value in feats.items()]


def _require_children(children: Sequence[str], what: str):
    if not children:
        raise ValueError(f"{what} must have at least one child")


def _add_siblings(doc: TurtleDocument, uri: str, next_uri: Optional[str], previous_uri: Optional[str]):
    if next_uri:
        doc.add_property(uri, v.POWLA_NEXT, next_uri)
    if previous_uri:
        doc.add_property(uri, v.POWLA_PREVIOUS, previous_uri)


def add_all_prefixes(doc: TurtleDocument):
    for prefix, uri in v.PREFIXES:
        doc.add_prefix(prefix, uri)


def add_document_metadata(doc: TurtleDocument, doc_uri: str, metadata: DocumentMetadata):
    """Document node plus the corpus hasSubDocument link"""
    doc.add_type(doc_uri, v.POWLA_DOCUMENT)
    doc.add_string_property(doc_uri, v.DC_CONTRIBUTOR, metadata.contributor)
    doc.add_string_property(doc_uri, v.DC_DESCRIPTION, metadata.description)
    doc.add_string_property(doc_uri, v.DC_TITLE, metadata.doc_title)
    doc.add_property(doc_uri, v.DCTERMS_CREATOR, metadata.doc_author)
    doc.add_property(doc_uri, v.RDFS_SEE_ALSO, metadata.see_also)
    doc.add_property(metadata.corpus_ref, v.POWLA_HAS_SUB_DOCUMENT, doc_uri)


def add_document_layer(doc: TurtleDocument, layer_uri: str, doc_uri: str, doc_title: str):
    doc.add_type(layer_uri, v.POWLA_DOCUMENT_LAYER)
    doc.add_string_property(layer_uri, v.DC_DESCRIPTION, f"{doc_title} Document Layer")
    doc.add_string_property(layer_uri, v.DC_TITLE, v.LAYER_TITLE_DOCUMENT)
    doc.add_property(layer_uri, v.POWLA_HAS_DOCUMENT, doc_uri)


def add_citation_structure_header(
    doc: TurtleDocument,
    structure_uri: str,
    doc_uri: str,
    doc_title: str,
    top_level_uris: Sequence[str]
):
    _require_children(top_level_uris, "Citation structure")
    doc.add_type(structure_uri, v.LILA_CORPUS_CITATION_STRUCTURE)
    doc.add_property(structure_uri, v.LILA_CORPUS_FIRST, top_level_uris[0])
    for uri in top_level_uris:
        doc.add_property(structure_uri, v.LILA_CORPUS_IS_LAYER, uri)
    doc.add_property(structure_uri, v.LILA_CORPUS_LAST, top_level_uris[-1])
    doc.add_string_property(structure_uri, v.DC_DESCRIPTION, f"{doc_title} Citation Layer")
    doc.add_string_property(structure_uri, v.DC_TITLE, v.LAYER_TITLE_CITATION)
    doc.add_property(structure_uri, v.POWLA_HAS_DOCUMENT, doc_uri)


def add_citation_unit(
    doc: TurtleDocument,
    unit_uri: str,
    ref_type: str,
    ref_value: str,
    label: str,
    child_uris: Sequence[str],
    previous_uri: Optional[str] = None,
    next_uri: Optional[str] = None
):
    """Document, paragraph or sentence citation unit"""
    _require_children(child_uris, f"Citation unit {unit_uri}")
    doc.add_type(unit_uri, v.LILA_CORPUS_CITATION_UNIT)
    doc.add_property(unit_uri, v.LILA_CORPUS_FIRST, child_uris[0])
    doc.add_integer_property(unit_uri, v.LILA_CORPUS_HAS_CIT_LEVEL, v.CITATION_LEVEL)
    doc.add_string_property(unit_uri, v.LILA_CORPUS_HAS_REF_TYPE, ref_type)
    doc.add_string_property(unit_uri, v.LILA_CORPUS_HAS_REF_VALUE, ref_value)
    doc.add_property(unit_uri, v.LILA_CORPUS_LAST, child_uris[-1])
    for child in child_uris:
        doc.add_property(unit_uri, v.POWLA_HAS_CHILD, child)
    _add_siblings(doc, unit_uri, next_uri, previous_uri)
    doc.add_label(unit_uri, label)


def add_token(
    doc: TurtleDocument,
    token_uri: str,
    token: Token,
    layer_uri: str,
    previous_uri: Optional[str] = None,
    next_uri: Optional[str] = None
):
    """Terminal node of one token"""
    doc.add_type(token_uri, v.POWLA_TERMINAL)
    lemma = lemma_reference(token)
    if lemma:
        doc.add_property(token_uri, v.LILA_ONTOLOGY_HAS_LEMMA, lemma)
    doc.add_property(token_uri, v.POWLA_HAS_LAYER, layer_uri)
    doc.add_string_property(token_uri, v.POWLA_HAS_STRING_VALUE, token.form)
    _add_siblings(doc, token_uri, next_uri, previous_uri)
    doc.add_label(token_uri, token.form)


def add_tokens(doc: TurtleDocument, tokens: Sequence[Token], token_uris: Sequence[str], layer_uri: str):
    """Terminals of one sentence, linked in order"""
    last = len(token_uris) - 1
    for position, (token, uri) in enumerate(zip(tokens, token_uris)):
        add_token(
            doc, uri, token, layer_uri,
            previous_uri=token_uris[position - 1] if position > 0 else None,
            next_uri=token_uris[position + 1] if position < last else None,
        )


def add_ud_layer_header(
    doc: TurtleDocument,
    layer_uri: str,
    doc_uri: str,
    doc_title: str,
    root_uris: Sequence[str]
):
    _require_children(root_uris, "UD annotation layer")
    doc.add_type(layer_uri, v.LILA_CORPUS_SYNTACTIC_ANNOTATION)
    doc.add_property(layer_uri, v.LILA_CORPUS_FIRST, root_uris[0])
    for uri in root_uris:
        doc.add_property(layer_uri, v.LILA_CORPUS_IS_LAYER, uri)
    doc.add_property(layer_uri, v.LILA_CORPUS_LAST, root_uris[-1])
    doc.add_string_property(
        layer_uri, v.DC_DESCRIPTION,
        f"{doc_title} Universal Dependencies syntactic annotation layer"
    )
    doc.add_string_property(layer_uri, v.DC_TITLE, f"{doc_title} UD Annotation Layer")
    doc.add_property(layer_uri, v.POWLA_HAS_DOCUMENT, doc_uri)


def add_ud_sentence(
    doc: TurtleDocument,
    root_uri: str,
    number: int,
    token_uris: Sequence[str],
    previous_uri: Optional[str] = None,
    next_uri: Optional[str] = None
):
    """UD root of one sentence"""
    _require_children(token_uris, f"UD sentence {root_uri}")
    doc.add_type(root_uri, v.POWLA_ROOT)
    doc.add_integer_property(root_uri, v.LILA_CORPUS_HAS_CIT_LEVEL, v.CITATION_LEVEL)
    doc.add_string_property(root_uri, v.LILA_CORPUS_HAS_REF_TYPE, v.UD_SENTENCE_REF_TYPE)
    doc.add_string_property(root_uri, v.LILA_CORPUS_HAS_REF_VALUE, f"Sentence_{number}")
    doc.add_property(root_uri, v.POWLA_FIRST_TERMINAL, token_uris[0])
    for uri in token_uris:
        doc.add_property(root_uri, v.POWLA_HAS_TERMINAL, uri)
    doc.add_property(root_uri, v.POWLA_LAST_TERMINAL, token_uris[-1])
    _add_siblings(doc, root_uri, next_uri, previous_uri)
    doc.add_label(root_uri, f"Sentence {number}")


def add_dependency_relation(
    doc: TurtleDocument,
    dep_uri: str,
    token: Token,
    token_uri: str,
    head_uri: Optional[str],
    root_uri: str
):
    """Dependency node; attaches to the sentence root when the head is unresolved"""
    deprel = token.deprel or v.DEFAULT_DEPREL
    doc.add_type(dep_uri, f"{v.UD_TAG_PREFIX}:{deprel}")
    doc.add_property(dep_uri, v.LILA_CORPUS_HAS_DEP, token_uri)
    if token.deprel == v.DEFAULT_DEPREL or head_uri is None:
        doc.add_property(dep_uri, v.LILA_CORPUS_HAS_HEAD, root_uri)
    else:
        doc.add_property(dep_uri, v.LILA_CORPUS_HAS_HEAD, head_uri)
    doc.add_label(dep_uri, f"UD DepRel {deprel}")


def add_morphology_layer_header(doc: TurtleDocument, layer_uri: str, doc_uri: str, doc_title: str):
    doc.add_type(layer_uri, v.POWLA_DOCUMENT_LAYER)
    doc.add_string_property(layer_uri, v.DC_DESCRIPTION, f"{doc_title} Morphology Annotation Layer")
    doc.add_string_property(layer_uri, v.DC_TITLE, v.LAYER_TITLE_UD_MORPHOLOGY)
    doc.add_property(layer_uri, v.POWLA_HAS_DOCUMENT, doc_uri)


def add_morphology_annotation(
    doc: TurtleDocument,
    annotation_uri: str,
    token: Token,
    layer_uri: str,
    token_uri: str
):
    """Feature annotation of one token"""
    doc.add_type(annotation_uri, v.OA_ANNOTATION)
    doc.add_property(annotation_uri, v.POWLA_HAS_LAYER, layer_uri)
    doc.add_label(annotation_uri, f"UD Features of {token.form}")
    bodies = features_to_ud_urls(token.feats) or [v.UD_FEATURE_NAMESPACE]
    for body in bodies:
        doc.add_property(annotation_uri, v.OA_HAS_BODY, body)
    doc.add_property(annotation_uri, v.OA_HAS_TARGET, token_uri)
