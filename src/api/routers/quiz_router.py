"""
Quiz router for Markdown quiz compilation.

Endpoints for:
- Compiling a whole lexed quiz document into validated questions
- Compiling a single question for an existing quiz
- Building the update field set for an existing question
- Validating an already-built question record

Request bodies carry the token tree produced by the Markdown lexer, not
raw Markdown. Validation failures are reported as the stable error code
so the caller can localize the message.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from loguru import logger
from pydantic import BaseModel, Field

from config import get_settings
from src.quiz import (
    ImportResult,
    QuizImporter,
    TokenContractError,
    tokens_from_lexer,
    validate,
)


router = APIRouter()

importer = QuizImporter()


# ========================================
# Request/Response Models
# ========================================


class CompileRequest(BaseModel):
    """Request model for compiling a quiz document."""

    tokens: List[Dict[str, Any]] = Field(..., description="Top-level nodes from the Markdown lexer")
    quiz_id: Optional[str] = Field(None, description="Quiz the questions belong to")


class QuestionSnippetRequest(BaseModel):
    """Request model for a single-question snippet."""

    tokens: List[Dict[str, Any]] = Field(..., description="Top-level nodes from the Markdown lexer")


class CompileResponse(BaseModel):
    """Response model for an accepted document."""

    count: int
    questions: List[Dict[str, Any]]


class ValidationResponse(BaseModel):
    """Response model for question validation."""

    is_valid: bool
    error: Optional[str] = None


# ========================================
# Helpers
# ========================================


async def _check_size(request: Request) -> None:
    body = await request.body()
    limit = get_settings().max_document_bytes
    if len(body) > limit:
        raise HTTPException(status_code=413, detail=f"Document exceeds {limit} bytes")


def _typed_tokens(raw: List[Dict[str, Any]]):
    try:
        return tokens_from_lexer(raw)
    except TokenContractError as exc:
        logger.warning(f"Rejected token tree: {exc}")
        raise HTTPException(status_code=400, detail=str(exc))


def _raise_for_result(result: ImportResult) -> None:
    if result.accepted:
        return
    raise HTTPException(
        status_code=422,
        detail={"error": result.error_code.value, "index": result.failed_index},
    )


# ========================================
# Endpoints
# ========================================


@router.post(
    "/compile",
    response_model=CompileResponse,
    status_code=201,
    summary="Compile and validate a quiz document",
)
async def compile_document(body: CompileRequest, request: Request) -> CompileResponse:
    """
    Compile every question in a lexed quiz document.

    The document is rejected as a whole on the first invalid question;
    the response detail then carries the error code and question index.
    """
    await _check_size(request)
    result = importer.import_document(_typed_tokens(body.tokens), quiz_id=body.quiz_id)
    _raise_for_result(result)
    return CompileResponse(count=len(result.questions), questions=result.questions)


@router.post(
    "/{quiz_id}/questions",
    response_model=CompileResponse,
    status_code=201,
    summary="Compile a single question for a quiz",
)
async def compile_question(
    quiz_id: str,
    body: QuestionSnippetRequest,
    request: Request,
) -> CompileResponse:
    """Compile the first question of a snippet and stamp it with the quiz id."""
    await _check_size(request)
    result = importer.import_question(_typed_tokens(body.tokens), quiz_id=quiz_id)
    _raise_for_result(result)
    return CompileResponse(count=len(result.questions), questions=result.questions)


@router.post(
    "/questions/update",
    summary="Build update fields for an existing question",
)
async def prepare_question_update(body: QuestionSnippetRequest, request: Request) -> Dict[str, Any]:
    """Compile a snippet into update fields. The creation timestamp is left out."""
    await _check_size(request)
    update = importer.prepare_update(_typed_tokens(body.tokens))
    if update is None:
        raise HTTPException(status_code=422, detail={"error": "quiz_no_questions", "index": None})
    return update


@router.post(
    "/validate",
    response_model=ValidationResponse,
    summary="Validate a question record",
)
def validate_question(question: Dict[str, Any]) -> ValidationResponse:
    """Run the structural rules on a question record without compiling."""
    error = validate(question)
    return ValidationResponse(is_valid=error is None, error=error.value if error else None)
