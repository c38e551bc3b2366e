"""
Markdown Token Compiler.

Folds a lexed Markdown quiz document into an ordered list of question
drafts in a single left-to-right pass:

    # Question text                  -> opens a question
    ### Explanation                  -> explanation for the current question
    - ## Correct answer              -> answer marked correct
    - Wrong answer                   -> answer
    - `inline code` / ![video](url)  -> answer with code or media
    ![image](url) / ```code```       -> media or code on the question

Each token handler returns either `Continue(state)` or `Halt(state)`.
A heading that is out of place (or loose paragraph text) puts the
document into the malformed condition: the current question becomes the
"H" sentinel and nothing after that token is compiled. Malformed input is
returned as data, never raised; the validator turns the sentinel into
`quiz_question_heading`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Union
from uuid import uuid4

from loguru import logger

from .media import classify
from .models import (
    MALFORMED_SENTINEL,
    AnswerDraft,
    MediaSpec,
    MediaType,
    QuestionDraft,
)
from .tokens import (
    CodeToken,
    HeadingToken,
    ListItemToken,
    ListToken,
    OtherToken,
    ParagraphToken,
    TextBlockToken,
    TokenContractError,
    block_from_lexer,
    inline_children,
    token_text,
)


# =============================================================================
# Heading roles
# =============================================================================


class HeadingContext(str, Enum):
    """Where a heading was found."""
    DOCUMENT = "document"    # Top level of the quiz document
    ANSWER = "answer"        # Nested inside a list item


class HeadingRole(str, Enum):
    """What a heading means once its context is known."""
    QUESTION = "question"
    EXPLANATION = "explanation"
    CORRECT_ANSWER = "correct_answer"
    MISPLACED = "misplaced"


HEADING_ROLES: dict[tuple[HeadingContext, int], HeadingRole] = {
    (HeadingContext.DOCUMENT, 1): HeadingRole.QUESTION,
    (HeadingContext.DOCUMENT, 2): HeadingRole.MISPLACED,
    (HeadingContext.DOCUMENT, 3): HeadingRole.EXPLANATION,
    (HeadingContext.DOCUMENT, 4): HeadingRole.MISPLACED,
    (HeadingContext.DOCUMENT, 5): HeadingRole.MISPLACED,
    (HeadingContext.DOCUMENT, 6): HeadingRole.MISPLACED,
    (HeadingContext.ANSWER, 1): HeadingRole.MISPLACED,
    (HeadingContext.ANSWER, 2): HeadingRole.CORRECT_ANSWER,
    (HeadingContext.ANSWER, 3): HeadingRole.MISPLACED,
    (HeadingContext.ANSWER, 4): HeadingRole.MISPLACED,
    (HeadingContext.ANSWER, 5): HeadingRole.MISPLACED,
    (HeadingContext.ANSWER, 6): HeadingRole.MISPLACED,
}


def heading_role(context: HeadingContext, depth: int) -> HeadingRole:
    """Look up the meaning of a heading depth in the given context."""
    try:
        return HEADING_ROLES[(context, depth)]
    except KeyError:
        raise TokenContractError(f"Heading depth must be 1-6, got {depth!r}") from None


# =============================================================================
# Fold state
# =============================================================================


@dataclass(frozen=True)
class CompilerState:
    """Scan state for one document. A new value is produced per token."""
    question: str | None = None
    answers: tuple[AnswerDraft, ...] = ()
    options: MediaSpec = field(default_factory=MediaSpec)
    explanation: str = ""
    drafts: tuple[QuestionDraft, ...] = ()
    malformed: bool = False


@dataclass(frozen=True)
class Continue:
    state: CompilerState


@dataclass(frozen=True)
class Halt:
    state: CompilerState


Step = Union[Continue, Halt]


# =============================================================================
# Compiler
# =============================================================================


class QuizCompiler:
    """
    Compile a lexed quiz document into question drafts.

    The compiler holds no per-document state, so one instance can be
    shared between threads.

    Args:
        clock: Returns the timestamp stamped on emitted drafts.
        id_factory: Returns a fresh identifier for each answer.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ):
        self._clock = clock
        self._new_id = id_factory

    def compile(self, tokens: Iterable[Any]) -> list[QuestionDraft]:
        """
        Fold the token sequence into drafts.

        Returns every draft finalized before a malformed token plus, if one
        was hit, a single sentinel draft. Raises TokenContractError only if
        the tree itself breaks the lexer contract.
        """
        state = CompilerState()

        for token in tokens:
            step = self._step(state, _coerce(token))
            state = step.state
            if isinstance(step, Halt):
                break

        if state.question:
            state = self._save(state)

        return list(state.drafts)

    # -------------------------------------------------------------------------
    # Token handlers
    # -------------------------------------------------------------------------

    def _step(self, state: CompilerState, token: Any) -> Step:
        if isinstance(token, HeadingToken):
            return self._on_heading(state, token)
        if isinstance(token, ListToken):
            return self._on_list(state, token)
        if isinstance(token, ParagraphToken):
            return self._on_paragraph(state, token)
        if isinstance(token, CodeToken):
            return Continue(replace(state, options=MediaSpec(MediaType.CODE.value, token.text)))
        return Continue(state)

    def _on_heading(self, state: CompilerState, token: HeadingToken) -> Step:
        role = heading_role(HeadingContext.DOCUMENT, token.depth)

        if role is HeadingRole.QUESTION:
            if state.question:
                state = self._save(state)
            return Continue(replace(
                state,
                question=token.text,
                answers=(),
                options=MediaSpec(),
                explanation="",
            ))

        if role is HeadingRole.EXPLANATION:
            return Continue(replace(state, explanation=token.text))

        if state.question:
            state = self._save(state)
        return self._malformed(state, f"level {token.depth} heading '{token.text}' outside an answer")

    def _on_list(self, state: CompilerState, token: ListToken) -> Step:
        answers = list(state.answers)

        for item in token.items:
            answer = self._parse_list_item(item)
            if answer is None:
                return self._malformed(state, "answer contains a heading other than level 2")
            answers.append(answer)

        return Continue(replace(state, answers=tuple(answers)))

    def _on_paragraph(self, state: CompilerState, token: ParagraphToken) -> Step:
        for inline in token.tokens:
            if inline.is_image:
                media = MediaSpec(classify(inline.text), inline.href)
                return Continue(replace(state, options=media))
            if inline.is_text:
                return self._malformed(state, f"loose text '{inline.text[:40]}'")

        return Continue(replace(state, options=MediaSpec()))

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _parse_list_item(self, item: ListItemToken) -> AnswerDraft | None:
        """Build one answer from a list item. None means the item is malformed."""
        if not isinstance(item, ListItemToken) or not item.tokens:
            raise TokenContractError("List item carries no tokens")

        is_correct = False
        text: str | None = None
        media_label: str | None = None
        options = MediaSpec()

        for sub in item.tokens:
            if isinstance(sub, HeadingToken):
                role = heading_role(HeadingContext.ANSWER, sub.depth)
                if role is HeadingRole.MISPLACED:
                    return None
                is_correct = True

            if text is None and token_text(sub):
                text = token_text(sub)

            for inline in inline_children(sub):
                if inline.is_codespan:
                    options = MediaSpec(MediaType.CODESPAN.value, inline.text)
                elif inline.is_image:
                    media_label = classify(inline.text)
                    options = MediaSpec(media_label, inline.href)

        return AnswerDraft(
            answer_id=self._new_id(),
            answer=(media_label or text or "").strip(),
            options=options,
            is_correct=is_correct,
        )

    def _malformed(self, state: CompilerState, reason: str) -> Halt:
        logger.warning(f"Malformed quiz document ({reason}); compilation stopped")
        return Halt(replace(
            state,
            question=MALFORMED_SENTINEL,
            answers=(),
            options=MediaSpec(),
            explanation="",
            malformed=True,
        ))

    def _save(self, state: CompilerState) -> CompilerState:
        """Finalize the current question and append it to the output."""
        options = state.options
        if len(state.answers) <= 1:
            options = options.as_open()

        now = self._clock()
        draft = QuestionDraft(
            question=state.question,
            options=options,
            answers=state.answers,
            explanation=state.explanation,
            created_at=now,
            updated_at=now,
        )
        logger.debug(
            f"Compiled question #{len(state.drafts) + 1}: "
            f"{len(draft.answers)} answers, options={options.type or '-'}"
        )
        return replace(state, drafts=state.drafts + (draft,))


_BLOCK_TYPES = (HeadingToken, ListToken, ParagraphToken, CodeToken, TextBlockToken, OtherToken)


def _coerce(token: Any) -> Any:
    """Accept raw lexer nodes alongside typed tokens."""
    if isinstance(token, Mapping):
        return block_from_lexer(token)
    if not isinstance(token, _BLOCK_TYPES):
        raise TokenContractError(f"Unsupported token object: {type(token).__name__}")
    return token


_default_compiler = QuizCompiler()


def compile_tokens(tokens: Iterable[Any]) -> list[QuestionDraft]:
    """Compile a token sequence with the default compiler."""
    return _default_compiler.compile(tokens)
