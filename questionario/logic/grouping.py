"""Instrument selection and section grouping for rendering.

Questions are grouped by faixa etária, then by dimensão, keeping the order in
which each label first appears. Section order on screen follows that order;
nothing here sorts alphabetically.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from questionario.logic.answers import answer_field
from questionario.logic.question_bank import QuestionBank
from questionario.models.grouping import (
    NO_AGE_RANGE_TITLE,
    NO_DIMENSION_TITLE,
    GroupLabel,
    InstrumentGrouping,
)
from questionario.models.question import Question


def group_questions(questions: Iterable[Question]) -> InstrumentGrouping:
    grouping: InstrumentGrouping = {}
    for question in questions:
        faixa = GroupLabel.of(question.faixa_etaria)
        dim = GroupLabel.of(question.dimensao)
        grouping.setdefault(faixa, {}).setdefault(dim, []).append(question)
    return grouping


def select_instrument(bank: QuestionBank, requested: Any = None) -> str:
    """Return the instrument to show: the requested one, else the first listed."""
    if isinstance(requested, str):
        return requested
    instruments = bank.all_instruments()
    return instruments[0] if instruments else ""


def _question_view(question: Question, bank: QuestionBank) -> Dict[str, Any]:
    return {
        "id": question.id,
        "pergunta": question.pergunta,
        "faixa_etaria": question.faixa_etaria,
        "dimensao": question.dimensao,
        "campo": answer_field(question.id),
        "opcoes": [opt.model_dump() for opt in bank.options_for(question)],
    }


def grouping_sections(grouping: InstrumentGrouping, bank: QuestionBank) -> List[Dict[str, Any]]:
    """Render a grouping as ordered JSON-ready sections.

    Unlabeled groups carry ``None`` as their label and the sentinel text as
    their title.
    """
    sections: List[Dict[str, Any]] = []
    for faixa, dims in grouping.items():
        sections.append(
            {
                "faixa_etaria": faixa.name,
                "titulo": faixa.title(NO_AGE_RANGE_TITLE),
                "dimensoes": [
                    {
                        "dimensao": dim.name,
                        "titulo": dim.title(NO_DIMENSION_TITLE),
                        "questoes": [_question_view(q, bank) for q in members],
                    }
                    for dim, members in dims.items()
                ],
            }
        )
    return sections


def sections_for(bank: QuestionBank, instrument: Optional[str]) -> List[Dict[str, Any]]:
    return grouping_sections(group_questions(bank.questions_for(instrument or "")), bank)


__all__ = [
    "group_questions",
    "grouping_sections",
    "sections_for",
    "select_instrument",
]
