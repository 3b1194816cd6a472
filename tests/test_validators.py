"""
CoNLL-U Validator Tests

One well-formed document and one injected violation per rule.
"""

from __future__ import annotations

import pytest

from conftest import sentence, token_line, word
from ltl_io.conllu_io import parse_conllu_string, write_conllu_string
from ltl_qa.validators import CoNLLUValidator, ValidationSeverity, validate_conllu_string


def _errors(*lines: str):
    return validate_conllu_string(sentence("1", "t", *lines)).errors


def test_valid_document(flat_conllu):
    result = validate_conllu_string(flat_conllu)
    assert result.is_valid, result.errors
    assert result.validated_sentences == 2


def test_serialized_parse_result_is_valid(nested_conllu):
    text = write_conllu_string(parse_conllu_string(nested_conllu))
    assert validate_conllu_string(text).errors == []


def test_field_count():
    errors = _errors("1\ta\ta")
    assert errors == ["Line 3: Token line must have 10 tab-separated fields"]


def test_invalid_token_id():
    errors = _errors(token_line("x1", "a", "_", "_", "_", "_", "0", "root", "_", "_"))
    assert errors == ["Line 3: Invalid token ID format"]


def test_multiword_with_deprel():
    errors = _errors(
        token_line("1-2", "della", "_", "_", "_", "_", "_", "det", "_", "_"),
        word("1", "di"),
        word("2", "la", head="1", deprel="det"),
    )
    assert any("Multiword token fields" in e for e in errors)


def test_multiword_feats_only_typo():
    errors = _errors(
        token_line("1-2", "della", "_", "_", "_", "Gender=Fem", "_", "_", "_", "_"),
        word("1", "di"),
        word("2", "la", head="1", deprel="det"),
    )
    assert any("Typo=Yes" in e for e in errors)


def test_multiword_range_must_be_nonempty():
    errors = _errors(
        token_line("2-2", "x", "_", "_", "_", "_", "_", "_", "_", "_"),
        word("2", "x"),
    )
    assert any("start < end" in e for e in errors)


def test_overlapping_multiword_ranges():
    errors = _errors(
        token_line("1-2", "ab", "_", "_", "_", "_", "_", "_", "_", "_"),
        token_line("2-3", "bc", "_", "_", "_", "_", "_", "_", "_", "_"),
        word("1", "a"),
        word("2", "b", head="1", deprel="dep"),
        word("3", "c", head="1", deprel="dep"),
    )
    assert "Line 4: Multiword token ranges must not overlap" in errors


def test_empty_node_requires_deps():
    errors = _errors(
        word("1", "a"),
        token_line("1.1", "x", "_", "_", "_", "_", "_", "_", "_", "_"),
    )
    assert "Line 4: Empty node field DEPS is required" in errors


def test_empty_node_sequence_must_be_consecutive():
    errors = _errors(
        word("1", "a"),
        token_line("1.2", "x", "_", "_", "_", "_", "_", "_", "1:dep", "_"),
    )
    assert any(e.startswith("Line 4: Empty node sequence") for e in errors)


def test_regular_token_head_must_be_numeric():
    errors = _errors(word("1", "a", head="x"))
    assert errors == ["Line 3: HEAD must be integer or 0"]


def test_regular_token_requires_deprel():
    errors = _errors(word("1", "a", deprel="_"))
    assert errors == ["Line 3: DEPREL must not be empty"]


def test_no_spaces_outside_form_lemma_misc():
    errors = _errors(token_line("1", "a b", "a b", "NO UN", "_", "_", "0", "root", "_", "_"))
    assert errors == ["Line 3: No spaces allowed in field UPOS"]


def test_feats_grammar():
    errors = _errors(word("1", "a", feats="Gender"))
    assert errors == ['Line 3: Invalid FEATS format: "Gender" (missing equals sign)']


def test_misc_control_characters():
    errors = _errors(word("1", "a", misc="Note=\x01"))
    assert len(errors) == 1
    assert "Invalid MISC format" in errors[0]


def test_missing_sentence_metadata():
    result = validate_conllu_string(word("1", "a"))
    assert result.errors == [
        "Sentence 1: Missing required sent_id comment",
        "Sentence 1: Missing required text comment",
    ]


def test_metadata_only_block_needs_no_sent_id():
    text = "# global.columns = ID FORM\n\n" + sentence("1", "a", word("1", "a"))
    assert validate_conllu_string(text).is_valid


def test_invalid_metadata_format():
    errors = _errors(word("1", "a"))
    assert errors == []
    text = "# sent_id = 1\n# text = a = b\n" + word("1", "a")
    assert validate_conllu_string(text).errors == ["Line 2: Invalid metadata format"]


def test_sentence_numbers_count_blocks(flat_conllu):
    text = flat_conllu + "\n\n\n" + word("1", "x") + "\n"
    errors = validate_conllu_string(text).errors
    assert errors[0].startswith("Sentence 3:")


def test_parse_is_more_lenient_than_validation():
    text = sentence("1", "a", word("1", "a", feats="Gender"))
    assert parse_conllu_string(text).token_count == 1
    assert not validate_conllu_string(text).is_valid


def test_report_and_issue_details():
    validator = CoNLLUValidator()
    result = validator.validate_string(word("1", "a", head="x"))
    assert result.issues[0].code == "head"
    assert result.issues[0].severity == ValidationSeverity.ERROR
    assert result.issues[0].line_number == 1
    assert "INVALID (3 errors)" in validator.get_report()
    assert result.to_dict()["error_count"] == 3


@pytest.mark.parametrize("token_id", ["1", "1-2", "1.1", "0.1", "_"])
def test_is_valid_token_id(token_id):
    from ltl_qa.validators import is_valid_token_id
    assert is_valid_token_id(token_id)
