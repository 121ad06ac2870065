"""Tests for turning answer payloads into typed candidate responses."""

import pytest

from voyages.crud.forms import get_form_schema
from voyages.models.form import InputType
from voyages.services.response_normalizer import (
    BooleanAnswer,
    CandidateResponse,
    ChoiceAnswer,
    NumericAnswer,
    TextAnswer,
    normalize_responses,
    to_answer,
)


@pytest.fixture
def retro_form(db_session):
    return get_form_schema(db_session, 7)


class TestToAnswer:
    @pytest.mark.parametrize("input_type, raw, expected", [
        (InputType.TEXT, "went well", TextAnswer("went well")),
        (InputType.TEXT, "", TextAnswer("")),
        (InputType.NUMERIC, 4, NumericAnswer(4.0)),
        (InputType.NUMERIC, 2.5, NumericAnswer(2.5)),
        (InputType.BOOLEAN, False, BooleanAnswer(False)),
        (InputType.SINGLE_CHOICE, 2, ChoiceAnswer(frozenset({2}))),
        (InputType.MULTI_CHOICE, [1, 3], ChoiceAnswer(frozenset({1, 3}))),
        (InputType.MULTI_CHOICE, [], ChoiceAnswer(frozenset())),
    ])
    def test_matching_shapes(self, input_type, raw, expected):
        assert to_answer(input_type, raw) == expected

    @pytest.mark.parametrize("input_type, raw", [
        (InputType.TEXT, 12),
        (InputType.TEXT, None),
        (InputType.NUMERIC, "4"),
        (InputType.NUMERIC, True),
        (InputType.NUMERIC, float("inf")),
        (InputType.NUMERIC, float("-inf")),
        (InputType.NUMERIC, float("nan")),
        (InputType.NUMERIC, 10 ** 400),
        (InputType.BOOLEAN, 1),
        (InputType.BOOLEAN, "true"),
        (InputType.SINGLE_CHOICE, "2"),
        (InputType.MULTI_CHOICE, [1, "x"]),
        (InputType.MULTI_CHOICE, [True]),
    ])
    def test_mismatched_shapes_have_no_answer(self, input_type, raw):
        assert to_answer(input_type, raw) is None


class TestNormalizeResponses:
    def test_one_candidate_per_answered_question_in_form_order(self, retro_form):
        candidates = normalize_responses(retro_form, {3: True, 1: "went well", 2: 7})

        assert [c.question_id for c in candidates] == [1, 2, 3]
        assert candidates[0].answer == TextAnswer("went well")
        assert candidates[1].answer == NumericAnswer(7.0)
        assert candidates[2].answer == BooleanAnswer(True)

    def test_omitted_questions_produce_nothing(self, retro_form):
        assert normalize_responses(retro_form, {}) == []

    def test_string_keys_are_question_ids(self, retro_form):
        candidates = normalize_responses(retro_form, {"1": "ok"})
        assert candidates == [CandidateResponse(question_id=1, answer=TextAnswer("ok"), raw="ok")]

    def test_multi_selection_is_kept_whole(self, retro_form):
        # question 6 only allows one option; the validator rejects it later
        candidates = normalize_responses(retro_form, {6: [1, 2]})
        assert candidates[0].choice_ids == frozenset({1, 2})

    def test_unknown_questions_are_appended(self, retro_form):
        candidates = normalize_responses(retro_form, {99: "?", 1: "fine", "abc": 1})

        assert [c.question_id for c in candidates] == [1, 99, -1]
        assert candidates[1].answer is None
        assert candidates[2].answer is None
        assert candidates[1].key is None
        assert candidates[2].key == "abc"

    def test_mismatched_answer_kept_without_value(self, retro_form):
        candidates = normalize_responses(retro_form, {2: "seven"})
        assert candidates == [CandidateResponse(question_id=2, answer=None, raw="seven")]


class TestToColumns:
    def test_only_matching_slot_is_filled(self):
        assert CandidateResponse(1, NumericAnswer(3.0)).to_columns() == {
            "text": None, "numeric": 3.0, "boolean": None,
        }
        assert CandidateResponse(1, BooleanAnswer(False)).to_columns() == {
            "text": None, "numeric": None, "boolean": False,
        }

    def test_choice_answers_use_the_option_slot(self):
        candidate = CandidateResponse(4, ChoiceAnswer(frozenset({2})))
        assert candidate.to_columns() == {"text": None, "numeric": None, "boolean": None}
        assert candidate.choice_ids == frozenset({2})
