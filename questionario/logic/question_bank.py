"""Question bank loading and lookup.

The bank is read from a JSON document with a required `questoes` array and an
optional `escala` array (the default answer scale). Once loaded it is
immutable and safe to share between concurrent requests.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import unicodedata
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from questionario.errors import MalformedSourceError
from questionario.models.question import DEFAULT_SCALE, Question, ScaleOption, check_scale

logger = logging.getLogger(__name__)

MEMORY_SOURCE = "<memory>"

BankSource = Union[str, "os.PathLike[str]", bytes, Mapping[str, Any]]


def collation_key(name: str) -> Tuple[str, str, str]:
    """Sort key that orders names the way a Portuguese reader expects.

    Accents and case are ignored at the first level (``Ábaco`` sorts with
    ``abaco``); remaining ties fall back to case-folded then raw text.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return base, unicodedata.normalize("NFC", name).casefold(), name


class QuestionBank:
    """Immutable catalog of questions plus the bank-wide default scale."""

    def __init__(
        self,
        questions: Iterable[Question],
        default_scale: Iterable[ScaleOption] = DEFAULT_SCALE,
        source: Optional[str] = None,
    ) -> None:
        self._questions: Tuple[Question, ...] = tuple(questions)
        self._default_scale: Tuple[ScaleOption, ...] = check_scale(tuple(default_scale))
        self._by_id: Dict[str, Question] = {q.id: q for q in self._questions if q.id}
        self._instruments: Tuple[str, ...] = tuple(
            sorted({q.instrumento for q in self._questions}, key=collation_key)
        )
        self.source = source

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def default_scale(self) -> Tuple[ScaleOption, ...]:
        return self._default_scale

    def __len__(self) -> int:
        return len(self._questions)

    def all_instruments(self) -> List[str]:
        return list(self._instruments)

    def questions_for(self, instrument: str) -> List[Question]:
        # Exact, case-sensitive match; bank order preserved.
        return [q for q in self._questions if q.instrumento == instrument]

    def options_for(self, question: Question) -> Tuple[ScaleOption, ...]:
        return question.opcoes if question.opcoes is not None else self._default_scale

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)


def _read_source(source: BankSource) -> Tuple[Any, str]:
    if isinstance(source, Mapping):
        return source, MEMORY_SOURCE
    if isinstance(source, (bytes, bytearray)):
        label = MEMORY_SOURCE
        raw = bytes(source)
    else:
        path = Path(source)
        label = str(path)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as e:
            raise MalformedSourceError(f"question bank not found: {label}", label) from e
        except OSError as e:
            raise MalformedSourceError(f"question bank unreadable: {label}: {e}", label) from e
    try:
        return json.loads(raw.decode("utf-8")), label
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedSourceError(f"question bank is not valid JSON: {label}: {e}", label) from e


def _parse_scale(raw: Any, label: str) -> Tuple[ScaleOption, ...]:
    if raw is None:
        return DEFAULT_SCALE
    if not isinstance(raw, list):
        raise MalformedSourceError("'escala' must be an array of options", label)
    try:
        return check_scale(tuple(ScaleOption.model_validate(item) for item in raw))
    except (PydanticValidationError, ValueError) as e:
        raise MalformedSourceError(f"invalid 'escala': {e}", label) from e


def load_question_bank(source: BankSource) -> QuestionBank:
    """Build a QuestionBank from a path, raw JSON bytes or a parsed mapping.

    Raises MalformedSourceError when the source cannot be read or does not
    hold a well-formed `questoes` array.
    """
    data, label = _read_source(source)
    if not isinstance(data, Mapping):
        raise MalformedSourceError("question bank must be a JSON object", label)
    raw_questions = data.get("questoes")
    if not isinstance(raw_questions, list):
        raise MalformedSourceError("question bank lacks a 'questoes' array", label)

    questions: List[Question] = []
    seen: set[str] = set()
    for index, item in enumerate(raw_questions):
        if not isinstance(item, Mapping):
            raise MalformedSourceError(f"questoes[{index}] is not an object", label)
        try:
            question = Question.model_validate(dict(item))
        except PydanticValidationError as e:
            raise MalformedSourceError(f"questoes[{index}] is invalid: {e}", label) from e
        if not question.id:
            raise MalformedSourceError(f"questoes[{index}] has an empty id", label)
        if question.id in seen:
            raise MalformedSourceError(f"duplicate question id {question.id!r}", label)
        seen.add(question.id)
        questions.append(question)

    bank = QuestionBank(questions, _parse_scale(data.get("escala"), label), source=label)
    logger.info(
        "question_bank.loaded source=%s questions=%s instruments=%s",
        label,
        len(bank),
        len(bank.all_instruments()),
    )
    return bank


class QuestionBankProvider:
    """Process-wide cache for the bank read from `path`.

    The bank is loaded on first use and reused until `reload()` is called.
    A failed load is not cached, so the next request retries it.
    """

    def __init__(self, path: Union[str, "os.PathLike[str]"]) -> None:
        self.path = Path(path)
        self._bank: Optional[QuestionBank] = None
        self._lock = threading.Lock()

    def get(self) -> QuestionBank:
        bank = self._bank
        if bank is not None:
            return bank
        with self._lock:
            if self._bank is None:
                self._bank = load_question_bank(self.path)
            return self._bank

    def reload(self) -> QuestionBank:
        with self._lock:
            bank = load_question_bank(self.path)
            self._bank = bank
        logger.info("question_bank.reloaded source=%s", self.path)
        return bank


__all__ = [
    "QuestionBank",
    "QuestionBankProvider",
    "collation_key",
    "load_question_bank",
]
