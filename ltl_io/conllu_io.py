"""
LTL IO CoNLL-U - CoNLL-U Format Support

This module reads and writes the CoNLL-U format used by Universal
Dependencies treebanks.

Supports:
- Sentence-level metadata and freeform comments
- Multi-word tokens and empty nodes (kept as plain token lines)
- FEATS and MISC field codecs
- Lenient parsing (malformed lines and fields degrade) or strict parsing
"""

from __future__ import annotations
import re
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union, Iterator

from ltl_core.models import (
    Token, Sentence, ConlluDocument,
    MetadataComment, FreeformComment, BoundaryComment, BoundaryKind, Comment
)

logger = logging.getLogger(__name__)


CONLLU_FIELD_COUNT = 10
CONLLU_FIELDS = ["ID", "FORM", "LEMMA", "UPOS", "XPOS", "FEATS", "HEAD", "DEPREL", "DEPS", "MISC"]
EMPTY_VALUE = "_"

MISC_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def parse_feats(feats_str: str) -> Optional[Dict[str, str]]:
    """Parse a FEATS field into an ordered mapping"""
    if feats_str is None or feats_str.strip() in ("", EMPTY_VALUE):
        return None

    feats: Dict[str, str] = {}
    for segment in feats_str.split("|"):
        if "=" not in segment:
            raise ValueError(f"Invalid FEATS format: \"{segment}\" (missing equals sign)")
        key, value = segment.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid FEATS format: \"{segment}\" (empty feature key)")
        feats[key] = value.strip()
    return feats


def serialize_feats(feats: Optional[Dict[str, str]]) -> str:
    """Serialize features sorted by name"""
    if not feats:
        return EMPTY_VALUE
    return "|".join(f"{key}={feats[key]}" for key in sorted(feats))


def parse_misc(misc_str: str) -> Optional[List[str]]:
    """Parse a MISC field into its raw entries"""
    if misc_str == EMPTY_VALUE:
        return None
    if misc_str == "":
        raise ValueError('Invalid MISC format: "" (empty field)')
    if MISC_CONTROL_CHARS.search(misc_str):
        raise ValueError(f"Invalid MISC format: {misc_str!r} (contains control characters)")
    if misc_str != misc_str.strip(" "):
        raise ValueError(f"Invalid MISC format: {misc_str!r} (starts or ends with space)")
    return misc_str.split("|")


def serialize_misc(misc: Optional[List[str]]) -> str:
    """Serialize MISC entries"""
    if not misc:
        return EMPTY_VALUE
    return "|".join(misc)


def _optional(value: str) -> Optional[str]:
    """Map '_' to None; an empty field is kept as the literal '_'"""
    if value == EMPTY_VALUE:
        return None
    return value or EMPTY_VALUE


class CoNLLUReader:
    """Reader for CoNLL-U format"""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._line_number = 0
        self._skipped_lines: List[int] = []

    @property
    def skipped_lines(self) -> List[int]:
        """Line numbers dropped by the last lenient read"""
        return list(self._skipped_lines)

    def read_file(self, file_path: Union[str, Path]) -> ConlluDocument:
        """Read CoNLL-U file and return a document"""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        return self.read_string(content)

    def read_string(self, conllu_string: str) -> ConlluDocument:
        """Read CoNLL-U string and return a document"""
        self._skipped_lines = []
        document = ConlluDocument(sentences=list(self._iter_sentences(conllu_string)))
        logger.debug(
            f"Parsed {document.sentence_count} sentences, {document.token_count} tokens"
        )
        return document

    def _iter_sentences(self, conllu_string: str) -> Iterator[Sentence]:
        """Iterate over sentences in CoNLL-U string"""
        current: Optional[Sentence] = None
        self._line_number = 0

        for raw_line in conllu_string.strip().split("\n"):
            self._line_number += 1
            line = raw_line.strip()

            if not line:
                if current is not None:
                    yield current
                    current = None
                continue

            if line.startswith("#"):
                if current is None:
                    current = Sentence()
                current.comments.append(self._parse_comment(line))
                continue

            token = self._parse_token_line(line)
            if token is None:
                continue
            if current is None:
                current = Sentence()
            current.tokens.append(token)

        if current is not None:
            yield current

    def _parse_comment(self, line: str) -> Comment:
        """Parse comment line"""
        content = line[1:].strip()

        if "=" in content:
            key, value = content.split("=", 1)
            return MetadataComment(key=key.strip(), value=value.strip())

        return FreeformComment(text=content)

    def _parse_token_line(self, line: str) -> Optional[Token]:
        """Parse a single token line"""
        fields = line.split("\t")

        if len(fields) < CONLLU_FIELD_COUNT:
            if self.strict:
                raise ValueError(
                    f"Invalid field count at line {self._line_number}: "
                    f"expected {CONLLU_FIELD_COUNT}, got {len(fields)}"
                )
            logger.debug(f"Skipping line {self._line_number}: {len(fields)} fields")
            self._skipped_lines.append(self._line_number)
            return None

        try:
            feats = parse_feats(fields[5])
        except ValueError as e:
            logger.debug(f"Line {self._line_number}: dropping FEATS ({e})")
            feats = None

        try:
            misc = parse_misc(fields[9])
        except ValueError as e:
            logger.debug(f"Line {self._line_number}: dropping MISC ({e})")
            misc = None

        return Token(
            id=fields[0] or EMPTY_VALUE,
            form=fields[1] or EMPTY_VALUE,
            lemma=_optional(fields[2]),
            upos=_optional(fields[3]),
            xpos=_optional(fields[4]),
            feats=feats,
            head=_optional(fields[6]),
            deprel=_optional(fields[7]),
            deps=_optional(fields[8]),
            misc=misc,
        )


class CoNLLUWriter:
    """Writer for CoNLL-U format"""

    def write_file(self, document: ConlluDocument, file_path: Union[str, Path]):
        """Write document to CoNLL-U file"""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            f.write(self.write_string(document))
            f.write("\n")

    def write_string(self, document: ConlluDocument) -> str:
        """Write document to CoNLL-U string"""
        return "\n\n".join(self.write_sentence(s) for s in document.sentences)

    def write_sentence(self, sentence: Sentence) -> str:
        """Write a single sentence"""
        lines = [self._write_comment(c) for c in sentence.comments]
        lines.extend(self._write_token_line(t) for t in sentence.tokens)
        return "\n".join(lines)

    def _write_comment(self, comment: Comment) -> str:
        """Write a comment line"""
        if isinstance(comment, MetadataComment):
            return f"# {comment.key} = {comment.value}"
        if isinstance(comment, BoundaryComment):
            keyword = comment.kind.value if isinstance(comment.kind, BoundaryKind) else str(comment.kind)
            if comment.id:
                return f"# {keyword} id = {comment.id}"
            return f"# {keyword}"
        return f"# {comment.text}"

    def _write_token_line(self, token: Token) -> str:
        """Write a single token line"""
        fields = [
            token.id,
            token.form,
            token.lemma or EMPTY_VALUE,
            token.upos or EMPTY_VALUE,
            token.xpos or EMPTY_VALUE,
            serialize_feats(token.feats),
            token.head or EMPTY_VALUE,
            token.deprel or EMPTY_VALUE,
            token.deps or EMPTY_VALUE,
            serialize_misc(token.misc),
        ]
        return "\t".join(fields)


def parse_conllu_file(file_path: Union[str, Path], strict: bool = False) -> ConlluDocument:
    """Parse CoNLL-U file"""
    reader = CoNLLUReader(strict=strict)
    return reader.read_file(file_path)


def parse_conllu_string(conllu_string: str, strict: bool = False) -> ConlluDocument:
    """Parse CoNLL-U string"""
    reader = CoNLLUReader(strict=strict)
    return reader.read_string(conllu_string)


def write_conllu_file(document: ConlluDocument, file_path: Union[str, Path]):
    """Write document to CoNLL-U file"""
    writer = CoNLLUWriter()
    writer.write_file(document, file_path)


def write_conllu_string(document: ConlluDocument) -> str:
    """Write document to CoNLL-U string"""
    writer = CoNLLUWriter()
    return writer.write_string(document)
