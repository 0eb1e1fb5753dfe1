"""Functional tests for answer validation and summary building."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from questionario.logic.answers import answer_field, parse_answer_value, validate_answers
from questionario.models.question import Question, ScaleOption
from questionario.models.summary import SubmissionSummary


def _questions(*ids: str) -> list[Question]:
    return [Question(id=i, instrumento="Inst") for i in ids]


def test_partial_submission_is_summarised():
    summary = validate_answers(
        "Inst",
        _questions("q1", "q2", "q3"),
        {"resp_q1": "2", "resp_q2": "", "resp_q3": "abc"},
    )
    assert summary.respostas == {"q1": 2}
    assert summary.faltando == ("q2", "q3")
    assert summary.respondidas == 1
    assert summary.total_questoes == 3
    assert summary.instrumento == "Inst"


def test_missing_ids_follow_question_order_not_answer_order():
    summary = validate_answers(
        "Inst",
        _questions("c", "a", "b", "d"),
        {"resp_d": "1", "resp_a": "0"},
    )
    assert summary.faltando == ("c", "b")
    assert list(summary.respostas) == ["a", "d"]


def test_zero_questions_gives_empty_summary():
    summary = validate_answers("Nada", [], {"resp_q1": "1"})
    assert (summary.total_questoes, summary.respondidas) == (0, 0)
    assert summary.faltando == ()
    assert summary.respostas == {}


def test_answers_outside_expected_questions_are_ignored():
    summary = validate_answers("Inst", _questions("q1"), {"resp_q1": "1", "resp_intruso": "3"})
    assert summary.respostas == {"q1": 1}


def test_question_with_empty_id_is_skipped_but_counted():
    questions = [Question(id="", instrumento="Inst"), Question(id="q1", instrumento="Inst")]
    summary = validate_answers("Inst", questions, {"resp_": "1", "resp_q1": "1"})
    assert summary.total_questoes == 2
    assert summary.respondidas == 1
    assert summary.faltando == ()


def test_out_of_scale_values_pass_through_by_default():
    summary = validate_answers("Inst", _questions("q1"), {"resp_q1": "42"})
    assert summary.respostas == {"q1": 42}


def test_strict_option_matching_rejects_out_of_scale_values():
    questions = [
        Question(id="q1", instrumento="Inst"),
        Question(
            id="q2",
            instrumento="Inst",
            opcoes=(ScaleOption(value=5, label="Cinco"), ScaleOption(value=9, label="Nove")),
        ),
    ]
    summary = validate_answers(
        "Inst",
        questions,
        {"resp_q1": "7", "resp_q2": "9"},
        strict_option_matching=True,
    )
    assert summary.respostas == {"q2": 9}
    assert summary.faltando == ("q1",)


def test_strict_option_matching_uses_given_default_scale():
    scale = (ScaleOption(value=10, label="Dez"),)
    summary = validate_answers(
        "Inst",
        _questions("q1", "q2"),
        {"resp_q1": "10", "resp_q2": "0"},
        strict_option_matching=True,
        default_scale=scale,
    )
    assert summary.respostas == {"q1": 10}
    assert summary.faltando == ("q2",)


def test_timestamp_is_iso_8601_with_offset():
    summary = validate_answers("Inst", [], {})
    parsed = datetime.fromisoformat(summary.respondido_em)
    assert parsed.tzinfo is not None


def test_timestamp_uses_supplied_clock():
    moment = datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone(timedelta(hours=-3)))
    summary = validate_answers("Inst", [], {}, now=moment)
    assert summary.respondido_em == "2024-03-05T14:07:09-03:00"


def test_submission_for_unknown_instrument_is_still_summarised():
    summary = validate_answers("Não existe", [], {"instrumento": "Não existe"})
    assert summary.instrumento == "Não existe"
    assert summary.total_questoes == 0


def test_summary_is_immutable():
    summary = validate_answers("Inst", _questions("q1"), {"resp_q1": "1"})
    with pytest.raises(Exception):
        summary.respondidas = 5  # type: ignore[misc]


def test_summary_answers_cannot_be_changed_after_build():
    summary = validate_answers("Inst", _questions("q1"), {"resp_q1": "1"})
    with pytest.raises(TypeError):
        summary.respostas["q9"] = 3  # type: ignore[index]
    assert summary.respondidas == len(summary.respostas) == 1
    assert summary.model_dump()["respostas"] == {"q1": 1}
    assert type(summary.model_dump()["respostas"]) is dict


def test_summary_json_round_trip_and_key_order():
    summary = validate_answers("Saúde Mental", _questions("q1", "q2"), {"resp_q1": "3"})
    text = summary.to_json()
    assert "Saúde Mental" in text
    assert text.index('"instrumento"') < text.index('"respondido_em"') < text.index('"total_questoes"')
    assert text.index('"respondidas"') < text.index('"faltando"') < text.index('"respostas"')
    assert SubmissionSummary.from_json(text) == summary


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2", 2),
        ("0", 0),
        (" 2 ", 2),
        ("\t3\n", 3),
        ("2.0", 2),
        ("2.9", 2),
        ("-1.5", -1),
        ("+4", 4),
        (".5", 0),
        ("1e1", 10),
        ("1.5E1", 15),
        ("0e999999999", 0),
        (3, 3),
        (2.7, 2),
        ("9223372036854775807", 2**63 - 1),
        ("-9223372036854775808", -(2**63)),
        (-(2**63), -(2**63)),
    ],
)
def test_parse_answer_value_accepts_numeric_strings(raw, expected):
    assert parse_answer_value(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", " ", "abc", "2a", "0x1A", "nan", "inf", "1_000", "1e30", "٣", "1.2.3", "--1", None, True, [1]],
)
def test_parse_answer_value_rejects_non_numeric(raw):
    assert parse_answer_value(raw) is None


def test_answer_field_prefix():
    assert answer_field("q10") == "resp_q10"


@pytest.mark.parametrize(
    "raw",
    [10**30, 2**63, -(2**63) - 1, 1e19, -9.3e18, "9300000000000000000", "9223372036854775808", "-9223372036854775809"],
)
def test_parse_answer_value_rejects_values_outside_64_bit_range(raw):
    assert parse_answer_value(raw) is None
