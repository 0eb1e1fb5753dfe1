"""Questionnaire endpoints.

Implements:
- GET /api/v1/instrumentos
  - Sorted list of instruments in the question bank
- GET /api/v1/questionario?instrumento=<name>
  - Sections (faixa etária -> dimensão -> questions) for the selected instrument
- POST /api/v1/respostas
  - Validates submitted ``resp_<id>`` fields and saves a summary file
- POST /api/v1/questoes/recarregar
  - Reloads the question bank from disk
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping

import anyio.to_thread
from fastapi import APIRouter, Depends, Query, Request

from questionario.config import AppConfig
from questionario.logic.answers import answer_field, validate_answers
from questionario.logic.grouping import sections_for, select_instrument
from questionario.logic.question_bank import QuestionBank, QuestionBankProvider
from questionario.logic.recorder import persist_summary
from questionario.http.problem import problem

router = APIRouter()
logger = logging.getLogger(__name__)

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_provider(request: Request) -> QuestionBankProvider:
    return request.app.state.bank_provider


def get_bank(provider: QuestionBankProvider = Depends(get_provider)) -> QuestionBank:
    # MalformedSourceError propagates to the problem+json handler
    return provider.get()


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


async def _submitted_fields(request: Request) -> Mapping[str, Any]:
    content_type = (request.headers.get("content-type") or "").split(";", 1)[0].strip().lower()
    if content_type == "application/json":
        body = await request.json()
        return body if isinstance(body, dict) else {}
    if content_type in _FORM_CONTENT_TYPES:
        return await request.form()
    return {}


@router.get(
    "/api/v1/instrumentos",
    summary="List instruments in the question bank",
    operation_id="listInstruments",
)
def list_instruments(bank: QuestionBank = Depends(get_bank)) -> Dict[str, Any]:
    return {"instrumentos": bank.all_instruments()}


@router.get(
    "/api/v1/questionario",
    summary="Question sections for one instrument",
    operation_id="getQuestionnaire",
)
def get_questionnaire(
    instrumento: str | None = Query(None),
    bank: QuestionBank = Depends(get_bank),
) -> Dict[str, Any]:
    selected = select_instrument(bank, instrumento)
    sections = sections_for(bank, selected)
    return {
        "instrumentos": bank.all_instruments(),
        "instrumento_selecionado": selected,
        "total_questoes": len(bank.questions_for(selected)),
        "grupos": sections,
    }


def _process_submission(bank: QuestionBank, config: AppConfig, fields: Mapping[str, Any]) -> Dict[str, Any]:
    instrument = fields.get("instrumento")
    instrument = instrument if isinstance(instrument, str) else ""

    # Re-filter by the submitted instrument; clients cannot widen the question set.
    expected = bank.questions_for(instrument)
    summary = validate_answers(
        instrument,
        expected,
        fields,
        strict_option_matching=config.validation.strict_option_matching,
        default_scale=bank.default_scale,
    )
    result = persist_summary(summary, Path(config.storage.responses_dir))

    if result.saved:
        message = f"Arquivo salvo em {config.storage.responses_dir}/{result.filename}"
    else:
        message = (
            "Respostas processadas, mas não salvas. Para salvar automaticamente, "
            f"crie a pasta {config.storage.responses_dir}/ com permissão de escrita."
        )
    submitted = {}
    for question in expected:
        raw = fields.get(answer_field(question.id))
        if isinstance(raw, (str, int, float)) and not isinstance(raw, bool) and raw != "":
            submitted[question.id] = str(raw)

    return {
        "resumo": summary.model_dump(mode="json"),
        "salvo": result.saved,
        "arquivo": result.filename,
        "mensagem": message,
        "instrumento_selecionado": instrument,
        "valores_enviados": submitted,
        "grupos": sections_for(bank, instrument),
    }


@router.post(
    "/api/v1/respostas",
    summary="Submit answers for an instrument",
    operation_id="submitAnswers",
)
async def submit_answers(
    request: Request,
    bank: QuestionBank = Depends(get_bank),
    config: AppConfig = Depends(get_config),
) -> Dict[str, Any]:
    try:
        fields = await _submitted_fields(request)
    except ValueError:
        return problem(400, "Invalid Request", "Request body could not be parsed")
    # Validation and the file write are blocking; keep them off the event loop.
    return await anyio.to_thread.run_sync(_process_submission, bank, config, fields)


@router.post(
    "/api/v1/questoes/recarregar",
    summary="Reload the question bank from its source file",
    operation_id="reloadQuestionBank",
)
def reload_question_bank(provider: QuestionBankProvider = Depends(get_provider)) -> Dict[str, Any]:
    bank = provider.reload()
    return {"questoes": len(bank), "instrumentos": bank.all_instruments()}


__all__ = ["router", "get_bank", "get_config", "get_provider"]
