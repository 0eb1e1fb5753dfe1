"""APIRouter registration for the questionnaire service."""

from __future__ import annotations

from fastapi import APIRouter

from questionario.routes.questionario import router as questionario_router

api_router = APIRouter()
api_router.include_router(questionario_router, tags=["Questionario"])


@api_router.get("/health", summary="Liveness check", operation_id="health")
def health() -> dict:
    return {"status": "ok"}


__all__ = ["api_router"]
