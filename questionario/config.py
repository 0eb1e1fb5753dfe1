"""Configuration utilities for the questionnaire service.

This module loads application configuration with the following rules:
- Primary source: `questionario_config.json` in the working directory.
- Overrides: environment variables (a local `.env` is honoured), then optional
  text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("questionario_config.json")
logger = logging.getLogger(__name__)

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _read_config_file(config_dir: Path, rel_path: str) -> Optional[str]:
    path = config_dir / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _as_bool(text: Optional[str]) -> bool:
    return str(text or "").strip().lower() in {"true", "1", "yes", "on"}


class StorageConfig(BaseModel):
    question_bank_path: str
    responses_dir: str

    @field_validator("question_bank_path", "responses_dir")
    @classmethod
    def path_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("storage paths must be non-empty strings")
        return v.strip()


class ValidationConfig(BaseModel):
    # Off: any integer-parseable answer is stored verbatim.
    strict_option_matching: bool = Field(default=False)


class HttpConfig(BaseModel):
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = str(v or "").strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level


class AppConfig(BaseModel):
    storage: StorageConfig
    validation: ValidationConfig
    http: HttpConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config(
    *,
    config_dir: Path | None = None,
    root_config: Path | None = None,
    dotenv: bool = True,
) -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) questionario_config.json (primary base)
    4) Safe defaults for development
    """
    if dotenv:
        load_dotenv(override=False)
    config_dir = config_dir or CONFIG_DIR
    base = _read_json_file(root_config or ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(x) for x in cur)
        return str(cur) if cur is not None else default

    bank_path = (
        _env("QUESTION_BANK_PATH")
        or _read_config_file(config_dir, "question_bank.path")
        or _base("storage.question_bank_path", "questoes.json")
    )
    responses_dir = (
        _env("RESPONSES_DIR")
        or _read_config_file(config_dir, "responses.dir")
        or _base("storage.responses_dir", "respostas")
    )
    strict_text = (
        _env("STRICT_OPTION_MATCHING")
        or _read_config_file(config_dir, "validation.strict_option_matching")
        or _base("validation.strict_option_matching", "false")
    )
    origins_text = (
        _env("CORS_ORIGINS")
        or _read_config_file(config_dir, "http.cors_origins")
        or _base("http.cors_origins", "*")
    )
    log_level = _env("LOG_LEVEL") or _read_config_file(config_dir, "http.log_level") or _base("http.log_level", "INFO")

    try:
        return AppConfig(
            storage=StorageConfig(question_bank_path=bank_path, responses_dir=responses_dir),
            validation=ValidationConfig(strict_option_matching=_as_bool(strict_text)),
            http=HttpConfig(
                cors_origins=[o.strip() for o in str(origins_text).split(",") if o.strip()] or ["*"],
                log_level=log_level,
            ),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "StorageConfig",
    "ValidationConfig",
    "HttpConfig",
    "load_config",
]
