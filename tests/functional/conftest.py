from __future__ import annotations

"""Shared fixtures for the questionnaire functional tests.

Every test gets its own question bank file and responses directory under
pytest's tmp_path, so nothing is read from or written to the working tree.
"""

import copy
import json
import pathlib
from typing import Any, Dict

import pytest

from questionario.config import AppConfig, HttpConfig, StorageConfig, ValidationConfig


SAMPLE_BANK: Dict[str, Any] = {
    "questoes": [
        {
            "id": "q1",
            "instrumento": "Saúde Mental",
            "faixa_etaria": "6 a 10 anos",
            "dimensao": "Atenção",
            "pergunta": "Tem dificuldade para manter a atenção?",
        },
        {
            "id": "q2",
            "instrumento": "Saúde Mental",
            "faixa_etaria": "11 a 14 anos",
            "dimensao": "Humor",
            "pergunta": "Parece triste ou desanimado?",
        },
        {
            "id": "q3",
            "instrumento": "Saúde Mental",
            "faixa_etaria": "6 a 10 anos",
            "dimensao": "Atenção",
            "pergunta": "Distrai-se com facilidade?",
        },
        {
            "id": "a1",
            "instrumento": "Ansiedade",
            "pergunta": "Sente-se nervoso?",
            "opcoes": [
                {"value": 0, "label": "Não"},
                {"value": 1, "label": "Sim"},
            ],
        },
        {
            "id": "b1",
            "instrumento": "Ábaco",
            "dimensao": "Cálculo",
            "pergunta": "Soma sem ajuda?",
        },
        {
            "id": "z1",
            "instrumento": "zebra",
            "faixa_etaria": "Adulto",
            "pergunta": "Listras?",
        },
    ]
}


@pytest.fixture()
def bank_data() -> Dict[str, Any]:
    return copy.deepcopy(SAMPLE_BANK)


@pytest.fixture()
def bank_file(tmp_path: pathlib.Path, bank_data: Dict[str, Any]) -> pathlib.Path:
    path = tmp_path / "questoes.json"
    path.write_text(json.dumps(bank_data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture()
def responses_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "respostas"
    path.mkdir()
    return path


@pytest.fixture()
def app_config(bank_file: pathlib.Path, responses_dir: pathlib.Path) -> AppConfig:
    return AppConfig(
        storage=StorageConfig(question_bank_path=str(bank_file), responses_dir=str(responses_dir)),
        validation=ValidationConfig(strict_option_matching=False),
        http=HttpConfig(cors_origins=["*"], log_level="INFO"),
    )
