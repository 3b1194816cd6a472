"""
Pytest Configuration

Shared fixtures: sample CoNLL-U documents in the three citation shapes,
an isolated runtime configuration and restoration of the root logger
after tests that install logging handlers.
"""

from __future__ import annotations

import logging

import pytest

from ltl_core.config_runtime import get_runtime_config, reset_runtime_config


def token_line(*fields: str) -> str:
    """Join ten CoNLL-U fields with tabs"""
    assert len(fields) == 10
    return "\t".join(fields)


def word(token_id: str, form: str, head: str = "0", deprel: str = "root",
         feats: str = "_", misc: str = "_", lemma: str = "_", upos: str = "X") -> str:
    return token_line(token_id, form, lemma, upos, "_", feats, head, deprel, "_", misc)


def sentence(sent_id: str, text: str, *lines: str, comments=()) -> str:
    header = list(comments) + [f"# sent_id = {sent_id}", f"# text = {text}"]
    return "\n".join(header + list(lines))


FLAT_CONLLU = "\n\n".join([
    sentence(
        "1", "Il gatto dorme",
        word("1", "Il", head="2", deprel="det", lemma="il", upos="DET",
             feats="Definite=Def|Gender=Masc",
             misc='LiITALinkedURIs=["http://liita.it/data/id/lemma/101"]'),
        word("2", "gatto", head="3", deprel="nsubj", lemma="gatto", upos="NOUN",
             feats="Gender=Masc|Number=Sing"),
        word("3", "dorme", lemma="dormire", upos="VERB", feats="Mood=Ind",
             misc='LiITALinkedURIs=["http://liita.it/data/id/hypolemma/55"]|SpaceAfter=No'),
        comments=[
            "# docTitle = Test Doc",
            "# corpusRef = http://example.org/corpus",
            "# contributor = Tester",
            "# docAuthor = http://example.org/authors/dante",
            "# seeAlso = http://example.org/about",
            "# description = A small test document",
        ],
    ),
    sentence("2", "Piove", word("1", "Piove", lemma="piovere", upos="VERB")),
]) + "\n"


NESTED_CONLLU = "\n\n".join([
    sentence("1", "A", word("1", "A"), comments=["# newdoc id = doc1", "# newpar id = p1"]),
    sentence("2", "B", word("1", "B")),
    sentence("3", "C", word("1", "C"), comments=["# newpar"]),
    sentence("4", "D", word("1", "D"), comments=["# newdoc"]),
]) + "\n"


PARAGRAPH_CONLLU = "\n\n".join([
    sentence("1", "Prima", word("1", "Prima")),
    sentence("2", "Seconda", word("1", "Seconda"), comments=["# newpar id = intro"]),
]) + "\n"


@pytest.fixture
def flat_conllu() -> str:
    return FLAT_CONLLU


@pytest.fixture
def nested_conllu() -> str:
    return NESTED_CONLLU


@pytest.fixture
def paragraph_conllu() -> str:
    return PARAGRAPH_CONLLU


@pytest.fixture
def flat_file(tmp_path, flat_conllu):
    path = tmp_path / "flat.conllu"
    path.write_text(flat_conllu, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def runtime_config(tmp_path, monkeypatch):
    """A fresh configuration backed by a temporary settings file"""
    monkeypatch.delenv("LTL_CONFIG", raising=False)
    reset_runtime_config()
    config = get_runtime_config(tmp_path / "settings.json")
    yield config
    reset_runtime_config()


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
