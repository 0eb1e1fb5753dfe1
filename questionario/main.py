from __future__ import annotations

import logging

from fastapi import FastAPI
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError

from questionario.config import AppConfig, load_config
from questionario.errors import QuestionBankError
from questionario.http.problem import (
    handle_http_exception,
    handle_question_bank_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from questionario.http.request_id import RequestIdMiddleware
from questionario.logging_setup import configure_logging
from questionario.logic.question_bank import QuestionBankProvider
from questionario.middleware.cors import apply_cors
from questionario.routes import api_router

logger = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the FastAPI application.

    The question bank is loaded lazily on the first request that needs it and
    shared read-only afterwards; a broken bank file does not stop start-up,
    it turns bank-backed requests into 500 problem responses.
    """
    config = config or load_config()
    configure_logging(config.http.log_level)

    app = FastAPI(title="Questionário", version="1.0.0")
    app.state.config = config
    app.state.bank_provider = QuestionBankProvider(config.storage.question_bank_path)

    app.add_exception_handler(QuestionBankError, handle_question_bank_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app, origins=config.http.cors_origins)
    app.add_middleware(RequestIdMiddleware)
    app.include_router(api_router)

    logger.info(
        "app.created bank=%s responses_dir=%s strict_option_matching=%s",
        config.storage.question_bank_path,
        config.storage.responses_dir,
        config.validation.strict_option_matching,
    )
    return app


__all__ = ["create_app"]
