"""Answer validation for a submitted questionnaire.

Raw answers arrive as form fields named ``resp_<question id>``. Each expected
question is either answered with an integer-parseable value or reported as
missing; a partially answered submission is still summarised, never rejected.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from questionario.models.question import DEFAULT_SCALE, Question, ScaleOption
from questionario.models.summary import SubmissionSummary

logger = logging.getLogger(__name__)

FIELD_PREFIX = "resp_"

_WHITESPACE = " \t\n\r\v\f"
_NUMERIC_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
# Answers must fit a signed 64-bit integer whatever their input type.
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
# Decimals with more integer digits than this are out of range before int().
_MAX_ADJUSTED_EXPONENT = 18


def _in_range(value: int) -> Optional[int]:
    return value if _INT64_MIN <= value <= _INT64_MAX else None


def answer_field(question_id: str) -> str:
    return f"{FIELD_PREFIX}{question_id}"


def parse_answer_value(raw: Any) -> Optional[int]:
    """Coerce a submitted value to an int, truncating toward zero.

    Accepts numeric strings such as ``"2"``, ``" 2.0 "``, ``"-1.5"`` or
    ``"1e1"``. Returns None for anything else, including empty strings.
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        return _in_range(raw)
    if isinstance(raw, float):
        if not math.isfinite(raw):
            return None
        return _in_range(int(raw))
    if not isinstance(raw, str):
        return None
    text = raw.strip(_WHITESPACE)
    if not _NUMERIC_RE.fullmatch(text):
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if number.is_zero():
        return 0
    if number.adjusted() > _MAX_ADJUSTED_EXPONENT:
        return None
    return _in_range(int(number))


def validate_answers(
    instrument: str,
    expected_questions: Iterable[Question],
    raw_answers: Mapping[str, Any],
    *,
    strict_option_matching: bool = False,
    default_scale: Tuple[ScaleOption, ...] = DEFAULT_SCALE,
    now: Optional[datetime] = None,
) -> SubmissionSummary:
    """Summarise a submission against the questions of `instrument`.

    `expected_questions` must come from the server-side bank filtered by the
    submitted instrument. With `strict_option_matching` a value outside the
    question's scale counts as missing; otherwise any integer is kept.
    """
    questions = list(expected_questions)
    respostas: Dict[str, int] = {}
    faltando: List[str] = []

    for question in questions:
        qid = question.id
        if not qid:
            continue
        raw = raw_answers.get(answer_field(qid))
        if raw is None or raw == "":
            faltando.append(qid)
            continue
        value = parse_answer_value(raw)
        if value is None:
            faltando.append(qid)
            continue
        if strict_option_matching:
            options = question.opcoes if question.opcoes is not None else default_scale
            if value not in {opt.value for opt in options}:
                faltando.append(qid)
                continue
        respostas[qid] = value

    moment = now or datetime.now().astimezone()
    summary = SubmissionSummary(
        instrumento=instrument,
        respondido_em=moment.isoformat(timespec="seconds"),
        total_questoes=len(questions),
        respondidas=len(respostas),
        faltando=tuple(faltando),
        respostas=respostas,
    )
    logger.info(
        "submission.validated instrument=%s total=%s answered=%s missing=%s strict=%s",
        instrument,
        summary.total_questoes,
        summary.respondidas,
        len(summary.faltando),
        strict_option_matching,
    )
    return summary


__all__ = [
    "FIELD_PREFIX",
    "answer_field",
    "parse_answer_value",
    "validate_answers",
]
