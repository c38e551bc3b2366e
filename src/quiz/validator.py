"""
Quiz Data Validator.

Checks one compiled draft against the structural rules a question must
satisfy before it is stored. The rules run as an ordered pipeline of
guards; the first guard that fails decides the returned error code.
Callers rely on that order, so new guards go at the end of their branch.

The validator is pure: it never mutates the draft and returns the same
code for the same input every time. It accepts a `QuestionDraft` or a
plain mapping using the persisted field names (drafts coming back from
storage or from an HTTP body).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Optional

from .models import MALFORMED_SENTINEL, OPEN_SUFFIX, AnswerDraft, MediaType, QuestionDraft


class QuizErrorCode(str, Enum):
    """Stable error codes consumed by the message/localization layer."""
    QUESTION_REQUIRED = "quiz_question_required"
    QUESTION_INVALID_FORMAT = "quiz_question_invalid_format"
    QUESTION_LENGTH = "quiz_question_length"
    QUESTION_HEADING = "quiz_question_heading"
    EXPLANATION_INVALID_FORMAT = "quiz_explanation_invalid_format"
    EXPLANATION_LENGTH = "quiz_explanation_length"
    ANSWERS_INVALID_FORMAT = "quiz_answers_invalid_format"
    OPEN_OPTIONS_REQUIRED = "quiz_open_options_required"
    OPEN_ANSWER_REQUIRED = "quiz_open_answer_required"
    OPEN_ANSWER_SINGLE = "quiz_open_answer_single"
    OPEN_ANSWER_LENGTH = "quiz_open_answer_length"
    ANSWERS_REQUIRED = "quiz_answers_required"
    ANSWER_REQUIRED = "quiz_answer_required"
    ANSWER_LENGTH = "quiz_answer_length"
    ANSWER_HEADING = "quiz_answer_heading"
    ANSWER_OPTIONS_CONTENT_REQUIRED = "quiz_answer_options_content_required"
    DUPLICATE_ANSWERS = "quiz_duplicate_answers"
    CORRECT_ANSWER_REQUIRED = "quiz_correct_answer_required"
    OPTIONS_CONTENT_REQUIRED = "quiz_options_content_required"
    # Document level, reported by the importer
    NO_QUESTIONS = "quiz_no_questions"

    def __str__(self) -> str:
        return self.value


# Inclusive (min, max) character lengths
QUESTION_LENGTH = (2, 2048)
EXPLANATION_LENGTH = (2, 4096)
ANSWER_LENGTH = (2, 2048)

# Option types whose content must not be empty
ANSWER_MEDIA_TYPES = frozenset({
    MediaType.CODESPAN.value,
    MediaType.IMAGE.value,
    MediaType.VIDEO.value,
    MediaType.AUDIO.value,
})
QUESTION_MEDIA_TYPES = frozenset({
    MediaType.CODE.value,
    MediaType.IMAGE.value,
    MediaType.VIDEO.value,
    MediaType.AUDIO.value,
})

Guard = Callable[[Mapping[str, Any]], Optional[QuizErrorCode]]


# =============================================================================
# Normalization
# =============================================================================


def _as_mapping(value: Any) -> Mapping[str, Any]:
    """View a draft, answer or options value as a read-only mapping."""
    if isinstance(value, (QuestionDraft, AnswerDraft)):
        return value.to_dict()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Mapping):
        return value
    return {}


def _within(text: str, bounds: tuple[int, int]) -> bool:
    low, high = bounds
    return low <= len(text) <= high


def _has_content(content: Any) -> bool:
    """Booleans count as content (open questions store True)."""
    if content is None or content is False:
        return False
    if content is True:
        return True
    try:
        return len(content) > 0
    except TypeError:
        return bool(content)


def _options_type(data: Mapping[str, Any]) -> str | None:
    option_type = _as_mapping(data.get("options")).get("type")
    return option_type if isinstance(option_type, str) else None


# =============================================================================
# Question-level guards
# =============================================================================


def _check_question(data: Mapping[str, Any]) -> QuizErrorCode | None:
    question = data.get("question")
    if not question:
        return QuizErrorCode.QUESTION_REQUIRED
    if not isinstance(question, str):
        return QuizErrorCode.QUESTION_INVALID_FORMAT
    if not _within(question, QUESTION_LENGTH):
        if question == MALFORMED_SENTINEL:
            return QuizErrorCode.QUESTION_HEADING
        return QuizErrorCode.QUESTION_LENGTH
    return None


def _check_explanation(data: Mapping[str, Any]) -> QuizErrorCode | None:
    explanation = data.get("explanation")
    if not explanation:
        return None
    if not isinstance(explanation, str):
        return QuizErrorCode.EXPLANATION_INVALID_FORMAT
    if not _within(explanation, EXPLANATION_LENGTH):
        return QuizErrorCode.EXPLANATION_LENGTH
    return None


def _check_answers_format(data: Mapping[str, Any]) -> QuizErrorCode | None:
    if not isinstance(data.get("answers"), (list, tuple)):
        return QuizErrorCode.ANSWERS_INVALID_FORMAT
    return None


def _check_answers(data: Mapping[str, Any]) -> QuizErrorCode | None:
    option_type = _options_type(data)
    if option_type and OPEN_SUFFIX in option_type:
        return _check_open_question(data)
    return _check_multiple_choice(data)


# =============================================================================
# Open questions
# =============================================================================


def _check_open_question(data: Mapping[str, Any]) -> QuizErrorCode | None:
    options = _as_mapping(data.get("options"))
    answers = data["answers"]

    if not _has_content(options.get("content")):
        return QuizErrorCode.OPEN_OPTIONS_REQUIRED
    if len(answers) == 0:
        return QuizErrorCode.OPEN_ANSWER_REQUIRED
    if len(answers) != 1:
        return QuizErrorCode.OPEN_ANSWER_SINGLE

    answer = _as_mapping(answers[0]).get("answer")
    if not isinstance(answer, str) or not _within(answer, ANSWER_LENGTH):
        return QuizErrorCode.OPEN_ANSWER_LENGTH
    return None


# =============================================================================
# Multiple choice
# =============================================================================


def _check_answer(answer: Mapping[str, Any]) -> QuizErrorCode | None:
    text = answer.get("answer")
    if not text:
        return QuizErrorCode.ANSWER_REQUIRED
    if not isinstance(text, str) or not _within(text, ANSWER_LENGTH):
        if text == MALFORMED_SENTINEL:
            return QuizErrorCode.ANSWER_HEADING
        return QuizErrorCode.ANSWER_LENGTH

    options = _as_mapping(answer.get("options"))
    if options.get("type") in ANSWER_MEDIA_TYPES and not _has_content(options.get("content")):
        return QuizErrorCode.ANSWER_OPTIONS_CONTENT_REQUIRED
    return None


def _check_multiple_choice(data: Mapping[str, Any]) -> QuizErrorCode | None:
    answers = [_as_mapping(a) for a in data["answers"]]

    if len(answers) < 2:
        return QuizErrorCode.ANSWERS_REQUIRED

    for answer in answers:
        error = _check_answer(answer)
        if error:
            return error

    texts = [a.get("answer") for a in answers]
    if len(set(texts)) != len(texts):
        return QuizErrorCode.DUPLICATE_ANSWERS

    if not any(a.get("is_correct") for a in answers):
        return QuizErrorCode.CORRECT_ANSWER_REQUIRED

    options = _as_mapping(data.get("options"))
    if options.get("type") in QUESTION_MEDIA_TYPES and not _has_content(options.get("content")):
        return QuizErrorCode.OPTIONS_CONTENT_REQUIRED
    return None


# =============================================================================
# Public API
# =============================================================================


GUARDS: tuple[Guard, ...] = (
    _check_question,
    _check_explanation,
    _check_answers_format,
    _check_answers,
)


def validate(draft: QuestionDraft | Mapping[str, Any]) -> QuizErrorCode | None:
    """
    Return the first rule the draft violates, or None when it is valid.

    Example:
        >>> validate({"question": "H", "answers": []})
        <QuizErrorCode.QUESTION_HEADING: 'quiz_question_heading'>
    """
    data = _as_mapping(draft)
    for guard in GUARDS:
        error = guard(data)
        if error:
            return error
    return None


def is_valid(draft: QuestionDraft | Mapping[str, Any]) -> bool:
    return validate(draft) is None
