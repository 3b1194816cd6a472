"""
LTL QA - Quality Assurance for CoNLL-U Input

This package validates raw CoNLL-U text before it enters the conversion
pipeline.

Modules:
    validators: Structural CoNLL-U validation with line-level diagnostics
"""

from ltl_qa.validators import (
    CoNLLUValidator,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    is_valid_token_id,
    validate_conllu_file,
    validate_conllu_string,
)

__version__ = "1.0.0"

__all__ = [
    "CoNLLUValidator",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "is_valid_token_id",
    "validate_conllu_file",
    "validate_conllu_string",
]
