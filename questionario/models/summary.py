"""Pydantic models for submission summaries and their persistence outcome."""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class SubmissionSummary(BaseModel):
    """Durable record of one submission.

    Field order is the serialised key order. `respostas` is a read-only
    mapping so the answers cannot drift from `respondidas` after the build.
    """

    model_config = ConfigDict(frozen=True)

    instrumento: str
    respondido_em: str
    total_questoes: int
    respondidas: int
    faltando: Tuple[str, ...] = ()
    respostas: Mapping[str, int] = Field(default_factory=dict, validate_default=True)

    @field_validator("respostas")
    @classmethod
    def answers_read_only(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(v))

    @field_serializer("respostas")
    def answers_as_dict(self, v: Mapping[str, int]) -> Dict[str, int]:
        return dict(v)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False, indent=4)

    @classmethod
    def from_json(cls, text: str | bytes) -> "SubmissionSummary":
        return cls.model_validate_json(text)


class PersistResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    saved: bool
    filename: Optional[str] = None

    @model_validator(mode="after")
    def filename_only_when_saved(self) -> "PersistResult":
        if not self.saved and self.filename is not None:
            raise ValueError("filename must be null when nothing was saved")
        return self

    @classmethod
    def not_saved(cls) -> "PersistResult":
        return cls(saved=False, filename=None)


__all__ = ["SubmissionSummary", "PersistResult"]
