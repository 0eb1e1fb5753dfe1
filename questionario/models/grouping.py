"""Group keys used to lay out an instrument's questions into sections."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from questionario.models.question import Question

NO_AGE_RANGE_TITLE = "Sem faixa etária"
NO_DIMENSION_TITLE = "Sem dimensão"


class GroupLabel(BaseModel):
    """Tagged optional label: a named group, or the unlabeled group.

    The unlabeled group never compares equal to a named one, whatever the name.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None

    @classmethod
    def labeled(cls, name: str) -> "GroupLabel":
        return cls(name=name)

    @classmethod
    def unlabeled(cls) -> "GroupLabel":
        return cls(name=None)

    @classmethod
    def of(cls, name: Optional[str]) -> "GroupLabel":
        return cls.unlabeled() if name is None else cls.labeled(name)

    @property
    def is_labeled(self) -> bool:
        return self.name is not None

    def title(self, fallback: str) -> str:
        return self.name if self.name is not None else fallback


# faixa -> dimensao -> questions, both levels in first-seen order
InstrumentGrouping = Dict[GroupLabel, Dict[GroupLabel, List[Question]]]


__all__ = [
    "GroupLabel",
    "InstrumentGrouping",
    "NO_AGE_RANGE_TITLE",
    "NO_DIMENSION_TITLE",
]
