"""
Quiz draft data models.

These records are what the token compiler emits and what the validator
and importer consume. Field names match the persisted question schema
exactly, so `to_dict()` output can be handed straight to storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4


# Sentinel question/answer text written by the compiler on malformed input
MALFORMED_SENTINEL = "H"


class MediaType(str, Enum):
    """Base option types a question or answer can carry."""
    CODE = "code"            # Fenced/indented code block on the question
    CODESPAN = "codespan"    # Inline code inside an answer
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    OPEN = "open"            # Free-text question (<= 1 answer)


OPEN_SUFFIX = MediaType.OPEN.value


@dataclass(frozen=True)
class MediaSpec:
    """
    Media or code attached to a question or an answer.

    `type` is None when nothing is attached. Open questions carry a
    hyphenated type such as "code-open" and `content` may be the
    boolean True when there was nothing else to store.
    """
    type: str | None = None
    content: str | bool | None = None

    @property
    def is_empty(self) -> bool:
        return self.type is None and self.content is None

    @property
    def is_open(self) -> bool:
        return bool(self.type) and OPEN_SUFFIX in self.type

    def as_open(self) -> MediaSpec:
        """Return the open-question variant of this spec."""
        open_type = "-".join(t for t in (self.type, OPEN_SUFFIX) if t)
        return replace(self, type=open_type, content=self.content or True)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass(frozen=True)
class AnswerDraft:
    """One answer choice parsed from a list item."""
    answer: str
    options: MediaSpec = field(default_factory=MediaSpec)
    is_correct: bool = False
    answer_id: str = field(default_factory=lambda: str(uuid4()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "answer_id": self.answer_id,
            "answer": self.answer,
            "options": self.options.to_dict(),
            "is_correct": self.is_correct,
        }


@dataclass(frozen=True)
class QuestionDraft:
    """
    A compiled, not-yet-validated quiz question.

    `attempts` and `reported` always start at their zero values;
    both timestamps are set when the draft is emitted.
    """
    question: str
    options: MediaSpec = field(default_factory=MediaSpec)
    answers: tuple[AnswerDraft, ...] = ()
    explanation: str = ""
    attempts: int = 0
    reported: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime | None = None

    def __post_init__(self):
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)

    @property
    def is_sentinel(self) -> bool:
        """True for the placeholder draft emitted on malformed input."""
        return self.question == MALFORMED_SENTINEL

    @property
    def is_open(self) -> bool:
        return self.options.is_open

    @property
    def correct_answers(self) -> list[AnswerDraft]:
        return [a for a in self.answers if a.is_correct]

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the exact field names expected by persistence."""
        return {
            "question": self.question,
            "options": self.options.to_dict(),
            "answers": [a.to_dict() for a in self.answers],
            "explanation": self.explanation,
            "attempts": self.attempts,
            "reported": self.reported,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
