"""
Quiz module: Markdown quiz compilation and validation.

This module provides:
- QuizCompiler: folds a lexed Markdown quiz document into question drafts
- validate: first-failure structural validation of a draft
- classify: media type detection for embedded images/audio/video
- QuizImporter: compile + validate a whole document for storage

Document conventions:
- `#` heading: question text
- `###` heading: explanation
- list items: answers (`- ## text` marks the correct one)
- image / code block after the question: question media
- a single answer makes the question open-ended
"""

from .compiler import HeadingRole, QuizCompiler, compile_tokens
from .importer import ImportResult, QuizImporter
from .media import classify
from .models import MALFORMED_SENTINEL, AnswerDraft, MediaSpec, MediaType, QuestionDraft
from .tokens import QuizCompilerError, TokenContractError, tokens_from_lexer
from .validator import QuizErrorCode, is_valid, validate

__all__ = [
    # Compilation
    "QuizCompiler",
    "compile_tokens",
    "HeadingRole",
    "tokens_from_lexer",
    # Validation
    "validate",
    "is_valid",
    "QuizErrorCode",
    # Import
    "QuizImporter",
    "ImportResult",
    # Models
    "QuestionDraft",
    "AnswerDraft",
    "MediaSpec",
    "MediaType",
    "MALFORMED_SENTINEL",
    "classify",
    # Errors
    "QuizCompilerError",
    "TokenContractError",
]
