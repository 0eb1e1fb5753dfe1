"""Pydantic models for the declarative question bank."""

from __future__ import annotations

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

NO_INSTRUMENT = "Sem instrumento"


def _coerce_text(v: Any) -> Any:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return str(v)
    return v


class ScaleOption(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    value: int
    label: str

    @field_validator("label", mode="before")
    @classmethod
    def label_as_text(cls, v: Any) -> Any:
        return _coerce_text(v)


DEFAULT_SCALE: Tuple[ScaleOption, ...] = (
    ScaleOption(value=0, label="Nunca ou Raramente"),
    ScaleOption(value=1, label="Às vezes"),
    ScaleOption(value=2, label="Frequentemente"),
    ScaleOption(value=3, label="Sempre"),
)


def check_scale(options: Tuple[ScaleOption, ...]) -> Tuple[ScaleOption, ...]:
    """Reject empty scales and scales that repeat an option value."""
    if not options:
        raise ValueError("option list must not be empty")
    seen: set[int] = set()
    for opt in options:
        if opt.value in seen:
            raise ValueError(f"duplicate option value {opt.value}")
        seen.add(opt.value)
    return options


class Question(BaseModel):
    """One entry of the `questoes` array.

    `faixa_etaria` and `dimensao` are None when the source leaves them out or
    blank. `opcoes` is None when the bank default scale applies.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = ""
    instrumento: str = NO_INSTRUMENT
    faixa_etaria: Optional[str] = None
    dimensao: Optional[str] = None
    pergunta: str = ""
    opcoes: Optional[Tuple[ScaleOption, ...]] = None

    @field_validator("id", "pergunta", mode="before")
    @classmethod
    def text_or_empty(cls, v: Any) -> Any:
        return "" if v is None else _coerce_text(v)

    @field_validator("instrumento", mode="before")
    @classmethod
    def instrument_or_sentinel(cls, v: Any) -> Any:
        return NO_INSTRUMENT if v is None else _coerce_text(v)

    @field_validator("faixa_etaria", "dimensao", mode="before")
    @classmethod
    def blank_label_is_none(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        return _coerce_text(v)

    @field_validator("opcoes")
    @classmethod
    def options_well_formed(cls, v: Optional[Tuple[ScaleOption, ...]]) -> Optional[Tuple[ScaleOption, ...]]:
        if v is None:
            return v
        return check_scale(v)


__all__ = ["ScaleOption", "Question", "DEFAULT_SCALE", "NO_INSTRUMENT", "check_scale"]
