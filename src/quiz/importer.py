"""
Quiz importer - turns a lexed quiz document into storable question records.

Runs the compiler and the validator together the way the upload and
"add question" flows need them:

- a document must compile to at least one question
- every question must validate; the first error rejects the document
- accepted questions are stamped with their quiz id

Nothing is persisted here. `ImportResult.questions` holds plain dicts
with the persisted field names, ready for the storage layer.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from .compiler import QuizCompiler
from .models import QuestionDraft
from .validator import QuizErrorCode, validate


@dataclass
class ImportResult:
    """Result of importing one quiz document."""

    drafts: list[QuestionDraft] = field(default_factory=list)
    questions: list[dict[str, Any]] = field(default_factory=list)
    error_code: QuizErrorCode | None = None
    failed_index: int | None = None  # Position of the draft that failed validation

    @property
    def accepted(self) -> bool:
        return self.error_code is None

    @property
    def total_parsed(self) -> int:
        return len(self.drafts)


class QuizImporter:
    """
    Compile and validate quiz documents.

    Args:
        compiler: Compiler to use. Defaults to a fresh QuizCompiler.
    """

    def __init__(self, compiler: QuizCompiler | None = None):
        self.compiler = compiler or QuizCompiler()

    def import_document(self, tokens: Iterable[Any], quiz_id: str | None = None) -> ImportResult:
        """Compile a whole quiz document and validate every question in order."""
        drafts = self.compiler.compile(tokens)
        result = ImportResult(drafts=drafts)

        if not drafts:
            logger.warning("Quiz document contains no questions")
            result.error_code = QuizErrorCode.NO_QUESTIONS
            return result

        return self._accept(result, drafts, quiz_id)

    def import_question(self, tokens: Iterable[Any], quiz_id: str) -> ImportResult:
        """
        Compile a single question for an existing quiz.

        Only the first compiled draft is considered; anything after it
        in the snippet is ignored.
        """
        drafts = self.compiler.compile(tokens)
        result = ImportResult(drafts=drafts[:1])

        if not drafts:
            logger.warning(f"Question snippet for quiz {quiz_id} compiled to nothing")
            result.error_code = QuizErrorCode.NO_QUESTIONS
            return result

        return self._accept(result, drafts[:1], quiz_id)

    def prepare_update(self, tokens: Iterable[Any]) -> dict[str, Any] | None:
        """
        Build the field set for updating an existing question.

        The original creation timestamp is kept, so `created_at` is left
        out. Returns None when the snippet holds no question.
        """
        drafts = self.compiler.compile(tokens)
        if not drafts:
            return None

        update = drafts[0].to_dict()
        del update["created_at"]
        return update

    def _accept(
        self,
        result: ImportResult,
        drafts: list[QuestionDraft],
        quiz_id: str | None,
    ) -> ImportResult:
        for index, draft in enumerate(drafts):
            error = validate(draft)
            if error:
                logger.warning(
                    f"Question {index + 1}/{len(drafts)} rejected: {error.value} "
                    f"({draft.question[:60]!r})"
                )
                result.error_code = error
                result.failed_index = index
                return result

        for draft in drafts:
            record = draft.to_dict()
            if quiz_id is not None:
                record["quiz_id"] = quiz_id
            result.questions.append(record)

        logger.info(f"Accepted {len(result.questions)} question(s)" + (f" for quiz {quiz_id}" if quiz_id else ""))
        return result
