"""Exception types raised by the questionnaire core."""

from __future__ import annotations


class QuestionarioError(Exception):
    pass


class QuestionBankError(QuestionarioError):
    """The question bank cannot be used to serve requests."""


class MalformedSourceError(QuestionBankError):
    """The question bank source is unreadable or not a well-formed catalog.

    `source` names where the bank was read from (a path or ``"<memory>"``).
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


__all__ = ["QuestionarioError", "QuestionBankError", "MalformedSourceError"]
