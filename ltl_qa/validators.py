"""
LTL QA Validators - CoNLL-U Structural Validation

This module re-scans raw CoNLL-U text, independently of the lenient
parser, and reports every structural problem it finds: field counts,
token ID shapes, per-category field constraints, whitespace, FEATS and
MISC grammar, multiword ranges, empty node numbering and required
sentence metadata.

The validator never raises; problems are collected as diagnostics.
"""

from __future__ import annotations
import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple
from pathlib import Path
from enum import Enum

from ltl_core.models import (
    MULTIWORD_ID_PATTERN, EMPTY_NODE_ID_PATTERN, REGULAR_ID_PATTERN
)
from ltl_io.conllu_io import (
    CONLLU_FIELD_COUNT, CONLLU_FIELDS, EMPTY_VALUE, parse_feats, parse_misc
)

logger = logging.getLogger(__name__)


ID, FORM, LEMMA, UPOS, XPOS, FEATS, HEAD, DEPREL, DEPS, MISC = range(CONLLU_FIELD_COUNT)
SPACE_ALLOWED_FIELDS = (FORM, LEMMA, MISC)
MULTIWORD_RESTRICTED_FIELDS = (LEMMA, UPOS, XPOS, HEAD, DEPREL, DEPS)
WHITESPACE = re.compile(r"\s")
HEAD_PATTERN = re.compile(r"^\d+$")


class ValidationSeverity(Enum):
    """Severity of validation issues"""
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """Represents a single validation problem"""
    code: str
    message: str
    severity: ValidationSeverity = ValidationSeverity.ERROR

    line_number: Optional[int] = None

    sentence_number: Optional[int] = None

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"Line {self.line_number}: {self.message}"
        if self.sentence_number is not None:
            return f"Sentence {self.sentence_number}: {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "line_number": self.line_number,
            "sentence_number": self.sentence_number,
        }


@dataclass
class ValidationResult:
    """Result of validation"""
    issues: List[ValidationIssue] = field(default_factory=list)

    validated_lines: int = 0

    validated_sentences: int = 0

    @property
    def is_valid(self) -> bool:
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> List[str]:
        """Human-readable diagnostics, in detection order"""
        return [str(i) for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[str]:
        return [str(i) for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def add_issue(self, issue: ValidationIssue):
        """Add an issue"""
        self.issues.append(issue)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "is_valid": self.is_valid,
            "error_count": len(self.errors),
            "validated_lines": self.validated_lines,
            "validated_sentences": self.validated_sentences,
            "errors": self.errors,
            "issues": [i.to_dict() for i in self.issues],
        }


def is_valid_token_id(token_id: str) -> bool:
    """Whether an ID is a word, multiword range, empty node or '_'"""
    return bool(
        MULTIWORD_ID_PATTERN.match(token_id)
        or EMPTY_NODE_ID_PATTERN.match(token_id)
        or REGULAR_ID_PATTERN.match(token_id)
        or token_id == EMPTY_VALUE
    )


class CoNLLUValidator:
    """Validator for CoNLL-U format"""

    def __init__(self):
        self._result = ValidationResult()

    def validate_file(self, file_path: Path) -> ValidationResult:
        """Validate CoNLL-U file"""
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()
        return self.validate_string(content)

    def validate_string(self, conllu_string: str) -> ValidationResult:
        """Validate CoNLL-U string"""
        self._result = ValidationResult()
        lines = conllu_string.strip().split("\n")

        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            if not line:
                continue

            line_number = index + 1
            self._result.validated_lines += 1
            if line.startswith("#"):
                self._validate_comment(line, line_number)
            else:
                self._validate_token_line(line, line_number)

        self._validate_sentences(lines)

        logger.debug(
            f"Validated {self._result.validated_lines} lines: "
            f"{len(self._result.errors)} errors"
        )
        return self._result

    @property
    def errors(self) -> List[str]:
        return self._result.errors

    def get_report(self) -> str:
        """Get validation report"""
        lines = ["CoNLL-U Validation Report", "=" * 40]
        if self._result.is_valid:
            lines.append("Status: VALID")
        else:
            lines.append(f"Status: INVALID ({len(self._result.errors)} errors)")
            lines.append("")
            lines.extend(f"  - {e}" for e in self._result.errors)
        return "\n".join(lines)

    def _error(self, code: str, message: str, line_number: Optional[int] = None,
               sentence_number: Optional[int] = None):
        self._result.add_issue(ValidationIssue(
            code=code,
            message=message,
            line_number=line_number,
            sentence_number=sentence_number,
        ))

    def _validate_comment(self, line: str, line_number: int):
        """Metadata comments must be exactly 'key = value'"""
        content = line[1:].strip()
        if "=" in content:
            parts = content.split("=")
            if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
                self._error("metadata_format", "Invalid metadata format", line_number)

    def _validate_token_line(self, line: str, line_number: int):
        """Validate a single token line"""
        fields = line.split("\t")

        if len(fields) < CONLLU_FIELD_COUNT:
            self._error(
                "field_count",
                f"Token line must have {CONLLU_FIELD_COUNT} tab-separated fields",
                line_number,
            )
            return

        token_id = fields[ID]
        if not is_valid_token_id(token_id):
            self._error("token_id", "Invalid token ID format", line_number)
            return

        if MULTIWORD_ID_PATTERN.match(token_id):
            self._validate_multiword_token(fields, line_number)
        elif EMPTY_NODE_ID_PATTERN.match(token_id):
            self._validate_empty_node(fields, line_number)
        else:
            self._validate_regular_token(fields, line_number)

        self._validate_field_spaces(fields, line_number)
        self._validate_feats(fields, line_number)
        self._validate_misc(fields, line_number)

    def _validate_multiword_token(self, fields: List[str], line_number: int):
        if any(fields[i] != EMPTY_VALUE for i in MULTIWORD_RESTRICTED_FIELDS):
            self._error(
                "multiword_fields",
                "Multiword token fields (except FORM, MISC, FEATS=Typo=Yes) must be underscores",
                line_number,
            )

        if fields[FEATS] not in (EMPTY_VALUE, "Typo=Yes"):
            self._error(
                "multiword_feats",
                "Multiword token FEATS must be '_' or 'Typo=Yes'",
                line_number,
            )

    def _validate_empty_node(self, fields: List[str], line_number: int):
        if fields[HEAD] != EMPTY_VALUE or fields[DEPREL] != EMPTY_VALUE:
            self._error(
                "empty_node_fields",
                "Empty node fields HEAD and DEPREL must be underscores",
                line_number,
            )

        if fields[DEPS] == EMPTY_VALUE:
            self._error("empty_node_deps", "Empty node field DEPS is required", line_number)

    def _validate_regular_token(self, fields: List[str], line_number: int):
        if not HEAD_PATTERN.match(fields[HEAD]):
            self._error("head", "HEAD must be integer or 0", line_number)

        if not fields[DEPREL] or fields[DEPREL] == EMPTY_VALUE:
            self._error("deprel", "DEPREL must not be empty", line_number)

    def _validate_field_spaces(self, fields: List[str], line_number: int):
        for index in range(CONLLU_FIELD_COUNT):
            if index in SPACE_ALLOWED_FIELDS:
                continue
            if WHITESPACE.search(fields[index]):
                self._error(
                    "whitespace",
                    f"No spaces allowed in field {CONLLU_FIELDS[index]}",
                    line_number,
                )

    def _validate_feats(self, fields: List[str], line_number: int):
        try:
            parse_feats(fields[FEATS])
        except ValueError as e:
            self._error("feats", str(e), line_number)

    def _validate_misc(self, fields: List[str], line_number: int):
        try:
            parse_misc(fields[MISC])
        except ValueError as e:
            self._error("misc", str(e), line_number)

    def _validate_sentences(self, lines: List[str]):
        """Sentence-level constraints, appended after line-level checks"""
        for sentence_number, block in enumerate(self._sentence_blocks(lines), start=1):
            self._result.validated_sentences += 1
            self._validate_sentence_block(sentence_number, block)

    @staticmethod
    def _sentence_blocks(lines: List[str]) -> List[List[Tuple[int, str]]]:
        """Group stripped non-blank lines into blank-line separated blocks"""
        blocks: List[List[Tuple[int, str]]] = []
        current: List[Tuple[int, str]] = []
        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            if not line:
                if current:
                    blocks.append(current)
                    current = []
                continue
            current.append((index + 1, line))
        if current:
            blocks.append(current)
        return blocks

    def _validate_sentence_block(self, sentence_number: int, block: List[Tuple[int, str]]):
        has_sent_id = False
        has_text = False
        has_tokens = False
        multiword_ranges: List[Tuple[int, int]] = []
        empty_node_sequences: Dict[str, int] = {}

        for line_number, line in block:
            if line.startswith("#"):
                content = line[1:].strip()
                if "=" in content:
                    key = content.split("=", 1)[0].strip()
                    has_sent_id = has_sent_id or key == "sent_id"
                    has_text = has_text or key == "text"
                continue

            fields = line.split("\t")
            if len(fields) < CONLLU_FIELD_COUNT:
                continue
            has_tokens = True
            token_id = fields[ID]

            if MULTIWORD_ID_PATTERN.match(token_id):
                start, end = (int(part) for part in token_id.split("-"))
                if start >= end:
                    self._error(
                        "multiword_range",
                        "Multiword token range must be nonempty (start < end)",
                        line_number,
                    )
                for range_start, range_end in multiword_ranges:
                    if start <= range_end and end >= range_start:
                        self._error(
                            "multiword_overlap",
                            "Multiword token ranges must not overlap",
                            line_number,
                        )
                multiword_ranges.append((start, end))

            elif EMPTY_NODE_ID_PATTERN.match(token_id):
                base_id, sequence = token_id.split(".")
                expected = empty_node_sequences.get(base_id, 0) + 1
                if int(sequence) != expected:
                    self._error(
                        "empty_node_sequence",
                        "Empty node sequence must start at 1 and be consecutive "
                        f"(expected {base_id}.{expected}, got {token_id})",
                        line_number,
                    )
                empty_node_sequences[base_id] = int(sequence)

        if has_tokens:
            if not has_sent_id:
                self._error(
                    "missing_sent_id", "Missing required sent_id comment",
                    sentence_number=sentence_number,
                )
            if not has_text:
                self._error(
                    "missing_text", "Missing required text comment",
                    sentence_number=sentence_number,
                )


def validate_conllu_string(conllu_string: str) -> ValidationResult:
    """Validate CoNLL-U string"""
    return CoNLLUValidator().validate_string(conllu_string)


def validate_conllu_file(file_path: Path) -> ValidationResult:
    """Validate CoNLL-U file"""
    return CoNLLUValidator().validate_file(Path(file_path))
