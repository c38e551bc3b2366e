"""
FastAPI application for quizmark.

Provides REST API for:
- Compiling lexed Markdown quiz documents into question records
- Validating question records against the structural quiz rules
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import FastAPI
from loguru import logger

from config import get_settings
from src.api.routers import quiz_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    logger.info(f"Starting quizmark service on {settings.api_host}:{settings.api_port}")

    yield

    logger.info("Shutting down quizmark service...")


app = FastAPI(
    title="Quizmark",
    description="""
    Markdown quiz compilation service.

    ## Data Flow

    ```
    Markdown document
        ↓ lexer (client side)
    Token tree
        ↓ /api/quiz/compile
    Question drafts → validation → question records
    ```
    """,
    version="0.1.0",
    lifespan=lifespan,
)


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": "quizmark",
        "version": "0.1.0",
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "config": {
            "max_document_bytes": settings.max_document_bytes,
        },
    }


# ========================================
# Include Routers
# ========================================

app.include_router(quiz_router.router, prefix="/api/quiz", tags=["Quiz"])
