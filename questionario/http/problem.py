"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that produce
application/problem+json responses.
"""

from __future__ import annotations

import logging
from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from questionario.errors import QuestionBankError

PROBLEM_MEDIA_TYPE = "application/problem+json"

QUESTION_BANK_UNAVAILABLE = "QUESTION_BANK_UNAVAILABLE"

logger = logging.getLogger(__name__)


def problem(status: int, title: str, detail: str = "", **extra: object) -> JSONResponse:
    body: dict[str, object] = {"title": title, "status": status}
    if detail:
        body["detail"] = detail
    body.update(extra)
    return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(getattr(exc, "status_code", 500) or 500)
    if isinstance(exc.detail, dict):
        body = {"status": status, **exc.detail}
        return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=exc.headers)
    response = problem(status, "Error", str(exc.detail or ""))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    return problem(422, "Invalid Request", "Request validation failed", errors=jsonable_encoder(exc.errors()))


async def handle_question_bank_error(request: Request, exc: QuestionBankError) -> JSONResponse:  # noqa: D401
    logger.error("question_bank.unavailable path=%s error=%s", request.url.path, exc)
    return problem(
        500,
        "Question bank unavailable",
        "O banco de questões não pôde ser carregado. Verifique o arquivo questoes.json.",
        code=QUESTION_BANK_UNAVAILABLE,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return problem(500, "Internal Server Error")


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "QUESTION_BANK_UNAVAILABLE",
    "handle_http_exception",
    "handle_question_bank_error",
    "handle_request_validation_error",
    "handle_unexpected_error",
    "problem",
]
