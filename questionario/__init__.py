"""FastAPI application package for the questionnaire service.

Loads a declarative question bank, groups an instrument's questions for
rendering, validates submitted answers and saves one JSON summary per
submission. Business logic lives in `questionario/logic/` and route handlers
in `questionario/routes/`.
"""

from __future__ import annotations

from questionario.main import create_app

__all__ = ["create_app"]
