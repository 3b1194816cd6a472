"""
Corpus Graph Mapper Tests

Checks the triples of every layer for the flat, nested and paragraph-only
citation shapes, the layer switches and the fail-fast rules.
"""

from __future__ import annotations

from typing import List

import pytest

from conftest import token_line, word
from ltl_core.models import CitationLabels, ConversionOptions, DocumentMetadata, Token
from ltl_io.conllu_io import parse_conllu_string
from ltl_mapping import layers
from ltl_mapping.corpus_mapper import CorpusGraphMapper
from ltl_mapping.layers import (
    extract_lemma_id,
    features_to_ud_urls,
    get_lemma_prefix,
    parse_misc_field,
)
from ltl_mapping.vocabulary import PREFIXES
from ltl_rdf.graph import IRI, Literal, RDF_TYPE_IRI, XSD_INTEGER_IRI, TurtleDocument
from ltl_rdf.turtle_reader import parse_turtle_string
from ltl_rdf.turtle_writer import serialize_turtle

CORPUS = "http://example.org/corpus"
DOC = f"{CORPUS}/Test%20Doc"
CITE = f"{DOC}/CiteStructure"
UD_LAYER = f"{DOC}/UDAnnotationLayer"
MORPH_LAYER = f"{DOC}/UDMorphologyAnnotationLayer"


def _metadata() -> DocumentMetadata:
    return DocumentMetadata(
        doc_title="Test Doc",
        corpus_ref=CORPUS,
        contributor="Tester",
        doc_author="http://example.org/authors/dante",
        see_also="http://example.org/about",
        description="A small test document",
    )


def _map(text: str, **options) -> TurtleDocument:
    return CorpusGraphMapper(_metadata(), ConversionOptions(**options)).map_to_graph(
        parse_conllu_string(text)
    )


def _objects(graph: TurtleDocument, subject: str, predicate: str) -> List:
    return [
        t.object for t in graph.triples
        if t.subject == IRI(subject) and t.predicate == IRI(predicate)
    ]


def _values(graph: TurtleDocument, subject: str, predicate: str) -> List[str]:
    return [o.value for o in _objects(graph, subject, predicate)]


def _subjects(graph: TurtleDocument) -> List[str]:
    seen = []
    for triple in graph.triples:
        if triple.subject.value not in seen:
            seen.append(triple.subject.value)
    return seen


def test_prefixes_in_fixed_order(flat_conllu):
    graph = _map(flat_conllu)
    assert graph.prefix_names() == [p for p, _ in PREFIXES]
    assert graph.prefix_names()[0] == "UD_tag"


def test_document_metadata(flat_conllu):
    graph = _map(flat_conllu)
    first = graph.triples[:6]
    assert [t.predicate.value for t in first] == [
        RDF_TYPE_IRI, "dc:contributor", "dc:description", "dc:title",
        "http://purl.org/dc/terms/creator", "rdfs:seeAlso",
    ]
    assert all(t.subject == IRI(DOC) for t in first)
    assert first[4].object == IRI("http://example.org/authors/dante")
    assert _values(graph, CORPUS, "powla:hasSubDocument") == [DOC]

    layer = f"{DOC}/DocumentLayer"
    assert _values(graph, layer, RDF_TYPE_IRI) == ["powla:DocumentLayer"]
    assert _values(graph, layer, "dc:description") == ["Test Doc Document Layer"]
    assert _values(graph, layer, "powla:hasDocument") == [DOC]


def test_flat_citation_structure(flat_conllu):
    graph = _map(flat_conllu)
    s1, s2 = f"{CITE}/s1", f"{CITE}/s2"

    assert _values(graph, CITE, "lila_corpus:first") == [s1]
    assert _values(graph, CITE, "lila_corpus:isLayer") == [s1, s2]
    assert _values(graph, CITE, "lila_corpus:last") == [s2]
    assert _values(graph, CITE, "dc:title") == ["Citation Layer"]

    assert _values(graph, s1, RDF_TYPE_IRI) == ["lila_corpus:citationUnit"]
    assert _objects(graph, s1, "lila_corpus:hasCitLevel") == [Literal("1", datatype=XSD_INTEGER_IRI)]
    assert _values(graph, s1, "lila_corpus:hasRefType") == ["Sentence"]
    assert _values(graph, s1, "lila_corpus:hasRefValue") == ["Sentence_1"]
    assert _values(graph, s1, "powla:hasChild") == [f"{s1}/t1", f"{s1}/t2", f"{s1}/t3"]
    assert _values(graph, s1, "powla:next") == [s2]
    assert _values(graph, s1, "powla:previous") == []
    assert _values(graph, s2, "powla:previous") == [s1]
    assert _values(graph, s2, "rdfs:label") == ["Sentence 2"]


def test_sentence_unit_is_followed_by_its_tokens(flat_conllu):
    subjects = _subjects(_map(flat_conllu))
    start = subjects.index(f"{CITE}/s1")
    assert subjects[start:start + 5] == [
        f"{CITE}/s1", f"{CITE}/s1/t1", f"{CITE}/s1/t2", f"{CITE}/s1/t3", f"{CITE}/s2",
    ]


def test_tokens(flat_conllu):
    graph = _map(flat_conllu)
    t1, t2, t3 = (f"{CITE}/s1/t{k}" for k in (1, 2, 3))

    assert [t.predicate.value for t in graph.triples if t.subject == IRI(t1)] == [
        RDF_TYPE_IRI, "lilaOntology:hasLemma", "powla:hasLayer",
        "powla:hasStringValue", "powla:next", "rdfs:label",
    ]
    assert _values(graph, t1, "lilaOntology:hasLemma") == ["liitaLemma:101"]
    assert _values(graph, t3, "lilaOntology:hasLemma") == ["liitaIpoLemma:55"]
    assert _values(graph, t2, "lilaOntology:hasLemma") == []
    assert _values(graph, t2, "powla:hasLayer") == [f"{DOC}/DocumentLayer"]
    assert _objects(graph, t2, "powla:hasStringValue") == [Literal("gatto")]
    assert _values(graph, t2, "powla:next") == [t3]
    assert _values(graph, t2, "powla:previous") == [t1]


def test_ud_layer(flat_conllu):
    graph = _map(flat_conllu)
    root1, root2 = f"{UD_LAYER}/Sentence_1", f"{UD_LAYER}/Sentence_2"

    assert _values(graph, UD_LAYER, RDF_TYPE_IRI) == ["lila_corpus:SyntacticAnnotation"]
    assert _values(graph, UD_LAYER, "lila_corpus:isLayer") == [root1, root2]
    assert _values(graph, UD_LAYER, "dc:title") == ["Test Doc UD Annotation Layer"]

    assert _values(graph, root1, RDF_TYPE_IRI) == ["powla:Root"]
    assert _values(graph, root1, "powla:firstTerminal") == [f"{CITE}/s1/t1"]
    assert _values(graph, root1, "powla:lastTerminal") == [f"{CITE}/s1/t3"]
    assert _values(graph, root1, "powla:next") == [root2]
    assert _values(graph, root2, "powla:previous") == [root1]
    assert _values(graph, root2, "lila_corpus:hasRefValue") == ["Sentence_2"]


def test_dependency_relations(flat_conllu):
    graph = _map(flat_conllu)
    dep = f"{DOC}/UD"

    assert _values(graph, f"{dep}/s1t1", RDF_TYPE_IRI) == ["UD_tag:det"]
    assert _values(graph, f"{dep}/s1t1", "lila_corpus:hasDep") == [f"{CITE}/s1/t1"]
    assert _values(graph, f"{dep}/s1t1", "lila_corpus:hasHead") == [f"{CITE}/s1/t2"]
    assert _values(graph, f"{dep}/s1t3", "lila_corpus:hasHead") == [f"{UD_LAYER}/Sentence_1"]
    assert _values(graph, f"{dep}/s1t3", "rdfs:label") == ["UD DepRel root"]
    assert _values(graph, f"{dep}/s2t1", "lila_corpus:hasHead") == [f"{UD_LAYER}/Sentence_2"]

    subjects = _subjects(graph)
    assert subjects.index(f"{dep}/s1t1") == subjects.index(f"{UD_LAYER}/Sentence_1") + 1


def test_unresolved_head_attaches_to_root():
    text = "\n".join([
        word("1", "a", head="2", deprel="det"),
        word("2", "b", head="9", deprel="nsubj"),
    ])
    graph = _map(text)
    base = f"{DOC}/UD"
    assert _values(graph, f"{base}/s1t1", "lila_corpus:hasHead") == [f"{CITE}/s1/t2"]
    assert _values(graph, f"{base}/s1t2", "lila_corpus:hasHead") == [f"{UD_LAYER}/Sentence_1"]


def test_morphology_layer(flat_conllu):
    graph = _map(flat_conllu)
    annotation = f"{MORPH_LAYER}/id/s1t1"

    assert _values(graph, MORPH_LAYER, RDF_TYPE_IRI) == ["powla:DocumentLayer"]
    assert _values(graph, MORPH_LAYER, "dc:title") == ["UD Morphology Annotation Layer"]
    assert _values(graph, annotation, RDF_TYPE_IRI) == ["oa:Annotation"]
    assert _values(graph, annotation, "powla:hasLayer") == [MORPH_LAYER]
    assert _values(graph, annotation, "rdfs:label") == ["UD Features of Il"]
    assert _values(graph, annotation, "oa:hasBody") == [
        "https://universaldependencies.org/it/feat/Definite#Def",
        "https://universaldependencies.org/it/feat/Gender#Masc",
    ]
    assert _values(graph, annotation, "oa:hasTarget") == [f"{CITE}/s1/t1"]
    assert _values(graph, f"{MORPH_LAYER}/id/s2t1", "oa:hasBody") == [
        "https://universaldependencies.org/it/feat/"
    ]


def test_morphological_layer_switch(flat_conllu):
    graph = _map(flat_conllu, include_morphological_layer=False)
    subjects = _subjects(graph)
    assert MORPH_LAYER not in subjects
    assert not any(s.startswith(f"{DOC}/UD/") for s in subjects)
    assert f"{UD_LAYER}/Sentence_1" in subjects


def test_citation_layer_switch_keeps_tokens(flat_conllu):
    graph = _map(flat_conllu, include_citation_layer=False)
    subjects = _subjects(graph)
    assert CITE not in subjects
    assert f"{CITE}/s1" not in subjects
    assert f"{CITE}/s1/t1" in subjects
    assert _values(graph, f"{UD_LAYER}/Sentence_1", "powla:firstTerminal") == [f"{CITE}/s1/t1"]


def test_nested_documents_and_paragraphs(nested_conllu):
    graph = _map(nested_conllu)
    doc1, doc2 = f"{CITE}/doc1", f"{CITE}/Document_2"
    p1, p2 = f"{doc1}/p1", f"{doc1}/Paragraph_2"
    p3 = f"{doc2}/Paragraph_1"

    assert _values(graph, CITE, "lila_corpus:isLayer") == [doc1, doc2]
    assert _values(graph, doc1, "powla:hasChild") == [p1, p2]
    assert _values(graph, doc1, "rdfs:label") == ["doc1"]
    assert _values(graph, doc2, "rdfs:label") == ["Document 2"]
    assert _values(graph, doc2, "lila_corpus:hasRefValue") == ["Document_2"]
    assert _values(graph, doc1, "powla:next") == [doc2]

    assert _values(graph, p1, "powla:hasChild") == [f"{p1}/s1", f"{p1}/s2"]
    assert _values(graph, p1, "powla:next") == [p2]
    assert _values(graph, p2, "rdfs:label") == ["Paragraph 2"]
    assert _values(graph, p3, "powla:previous") == []
    assert _values(graph, p3, "powla:hasChild") == [f"{p3}/s4"]

    # siblings link only within their parent
    assert _values(graph, f"{p1}/s2", "powla:next") == []
    assert _values(graph, f"{p2}/s3", "powla:previous") == []

    assert _values(graph, f"{p3}/s4/t1", "powla:hasStringValue") == ["D"]
    assert _values(graph, f"{UD_LAYER}/Sentence_4", "powla:firstTerminal") == [f"{p3}/s4/t1"]
    assert _values(graph, f"{UD_LAYER}/Sentence_3", "powla:previous") == [f"{UD_LAYER}/Sentence_2"]


def test_nested_emission_order(nested_conllu):
    subjects = _subjects(_map(nested_conllu))
    doc1 = f"{CITE}/doc1"
    order = [doc1, f"{doc1}/p1", f"{doc1}/p1/s1", f"{doc1}/p1/s2", f"{doc1}/Paragraph_2",
             f"{doc1}/Paragraph_2/s3", f"{CITE}/Document_2"]
    positions = [subjects.index(s) for s in order]
    assert positions == sorted(positions)


def test_paragraphs_only(paragraph_conllu):
    graph = _map(paragraph_conllu)
    para1, intro = f"{CITE}/Paragraph_1", f"{CITE}/intro"

    assert _values(graph, CITE, "lila_corpus:isLayer") == [para1, intro]
    assert _values(graph, para1, "powla:hasChild") == [f"{para1}/s1"]
    assert _values(graph, intro, "powla:hasChild") == [f"{intro}/s2"]
    assert _values(graph, intro, "rdfs:label") == ["intro"]
    assert _values(graph, f"{intro}/s2/t1", "rdfs:label") == ["Seconda"]


def test_custom_labels(paragraph_conllu):
    labels = CitationLabels(document_label="Libro", paragraph_label="Capitolo", sentence_label="Verso")
    graph = _map(paragraph_conllu, citation_labels=labels)
    chapter = f"{CITE}/Capitolo_1"
    assert _values(graph, chapter, "lila_corpus:hasRefType") == ["Capitolo"]
    assert _values(graph, f"{chapter}/s1", "rdfs:label") == ["Verso 1"]
    assert _values(graph, f"{UD_LAYER}/Sentence_1", "lila_corpus:hasRefType") == ["Sentence"]


def test_sentences_without_tokens_are_excluded(flat_conllu):
    text = "# global.columns = ID FORM\n\n" + flat_conllu
    graph = _map(text)
    assert _values(graph, CITE, "lila_corpus:first") == [f"{CITE}/s1"]
    assert _values(graph, UD_LAYER, "lila_corpus:isLayer") == [
        f"{UD_LAYER}/Sentence_1", f"{UD_LAYER}/Sentence_2",
    ]


def test_document_without_tokens_raises():
    with pytest.raises(ValueError, match="no sentences with tokens"):
        _map("# docTitle = Empty\n")


def test_units_without_children_raise():
    graph = TurtleDocument()
    with pytest.raises(ValueError):
        layers.add_citation_unit(graph, "http://x/u", "Sentence", "Sentence_1", "Sentence 1", [])
    with pytest.raises(ValueError):
        layers.add_citation_structure_header(graph, "http://x/c", "http://x", "T", [])
    with pytest.raises(ValueError):
        layers.add_ud_layer_header(graph, "http://x/ud", "http://x", "T", [])
    with pytest.raises(ValueError):
        layers.add_ud_sentence(graph, "http://x/ud/Sentence_1", 1, [])
    assert graph.triples == []


def test_serialized_graph_reads_back(nested_conllu):
    graph = _map(nested_conllu)
    reparsed = parse_turtle_string(serialize_turtle(graph))
    assert reparsed.prefix_names() == graph.prefix_names()
    assert len(reparsed.triples) == len(graph.triples)
    assert set(reparsed.triples) == set(graph.triples)


def test_parse_misc_field():
    parsed = parse_misc_field([
        'LiITALinkedURIs=["http://liita.it/data/id/lemma/1"]',
        "start_char=3",
        "end_char=7",
        "SpaceAfter=No",
        "NoEquals",
    ])
    assert parsed == {
        "LiITALinkedURIs": ["http://liita.it/data/id/lemma/1"],
        "start_char": 3,
        "end_char": 7,
        "SpaceAfter": "No",
    }
    assert parse_misc_field(["LiITALinkedURIs=[broken"]) == {"LiITALinkedURIs": []}
    assert parse_misc_field(None) == {}


def test_lemma_helpers():
    assert get_lemma_prefix("http://liita.it/data/id/hypolemma/55") == "liitaIpoLemma"
    assert get_lemma_prefix("http://liita.it/data/id/lemma/101") == "liitaLemma"
    assert extract_lemma_id("http://liita.it/data/id/lemma/101") == "101"
    assert extract_lemma_id("http://liita.it/data/id/other/101") == ""
    assert features_to_ud_urls(None) == []


def test_lemma_link_without_id_is_skipped():
    token = Token(id="1", form="a", head="0", deprel="root",
                  misc=['LiITALinkedURIs=["http://example.org/nothing"]'])
    graph = TurtleDocument()
    layers.add_token(graph, "http://x/t1", token, "http://x/layer")
    assert _values(graph, "http://x/t1", "lilaOntology:hasLemma") == []


def test_heads_resolve_by_token_id_around_ranges_and_empty_nodes():
    text = "\n".join([
        token_line("1-2", "della", "_", "_", "_", "_", "_", "_", "_", "_"),
        word("1", "di", head="2", deprel="case"),
        word("2", "la"),
        token_line("2.1", "x", "_", "_", "_", "_", "_", "_", "1:dep", "_"),
        word("3", "c", head="_", deprel="dep"),
        word("4", "d", head="0", deprel="dep"),
    ])
    graph = _map(text)
    base, sentence_uri = f"{DOC}/UD/s1", f"{CITE}/s1"
    root = f"{UD_LAYER}/Sentence_1"

    # word 1 points at word 2, which is the third row of the sentence
    assert _values(graph, f"{base}t2", "lila_corpus:hasHead") == [f"{sentence_uri}/t3"]
    assert _values(graph, f"{base}t3", "lila_corpus:hasHead") == [root]

    # range row, empty node and unresolvable heads hang off the sentence root
    for position in (1, 4, 5, 6):
        assert _values(graph, f"{base}t{position}", "lila_corpus:hasHead") == [root]
    assert _values(graph, f"{base}t1", RDF_TYPE_IRI) == ["UD_tag:root"]
    assert _values(graph, f"{base}t4", RDF_TYPE_IRI) == ["UD_tag:root"]
    assert _values(graph, f"{base}t5", RDF_TYPE_IRI) == ["UD_tag:dep"]

    for position in range(1, 7):
        dependency = f"{base}t{position}"
        heads = _values(graph, dependency, "lila_corpus:hasHead")
        assert len(heads) == 1
        assert heads != _values(graph, dependency, "lila_corpus:hasDep")
