"""
Turns a submitted answer payload into typed candidate responses.

A payload maps question ids to raw answers. Which shape a raw answer must
have depends on the question's input type, so every answer is converted into
one of the answer variants below using the form's questions. Answers that do
not fit their question are kept with ``answer=None`` so the validator can
report them together with every other problem in the submission.
"""
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

from voyages.models.form import Form, InputType


@dataclass(frozen=True)
class TextAnswer:
    value: str


@dataclass(frozen=True)
class NumericAnswer:
    value: float


@dataclass(frozen=True)
class BooleanAnswer:
    value: bool


@dataclass(frozen=True)
class ChoiceAnswer:
    choice_ids: FrozenSet[int]


Answer = Union[TextAnswer, NumericAnswer, BooleanAnswer, ChoiceAnswer]


@dataclass(frozen=True)
class CandidateResponse:
    question_id: int
    answer: Optional[Answer]
    raw: Any = None
    # payload key as sent, kept only when it is not a question id
    key: Any = field(default=None, compare=False)

    def to_columns(self) -> Dict[str, Any]:
        """Value slots as stored on a Response row; unused slots are None."""
        columns = {"text": None, "numeric": None, "boolean": None}
        if isinstance(self.answer, TextAnswer):
            columns["text"] = self.answer.value
        elif isinstance(self.answer, NumericAnswer):
            columns["numeric"] = self.answer.value
        elif isinstance(self.answer, BooleanAnswer):
            columns["boolean"] = self.answer.value
        return columns

    @property
    def choice_ids(self) -> FrozenSet[int]:
        if isinstance(self.answer, ChoiceAnswer):
            return self.answer.choice_ids
        return frozenset()


def _to_question_id(key) -> Optional[int]:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, str) and key.strip().lstrip("-").isdigit():
        return int(key)
    return None


def _to_choice_ids(raw) -> Optional[FrozenSet[int]]:
    values = raw if isinstance(raw, (list, tuple, set, frozenset)) else [raw]
    ids = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        ids.append(value)
    return frozenset(ids)


def to_answer(input_type: InputType, raw) -> Optional[Answer]:
    """Pick the answer variant for an input type, or None if raw does not fit."""
    if input_type == InputType.TEXT:
        return TextAnswer(raw) if isinstance(raw, str) else None
    if input_type == InputType.NUMERIC:
        if isinstance(raw, bool) or not isinstance(raw, Real):
            return None
        try:
            value = float(raw)
        except OverflowError:
            return None
        # inf and nan cannot be stored and read back as JSON
        return NumericAnswer(value) if math.isfinite(value) else None
    if input_type == InputType.BOOLEAN:
        return BooleanAnswer(raw) if isinstance(raw, bool) else None
    if input_type.is_choice:
        choice_ids = _to_choice_ids(raw)
        return ChoiceAnswer(choice_ids) if choice_ids is not None else None
    return None


def normalize_responses(form: Form, payload: Mapping[Any, Any]) -> List[CandidateResponse]:
    """
    Convert an answer payload into candidate responses

    Args:
        form: the form being answered, with its questions loaded
        payload: question id (int or numeric string) -> raw answer

    Returns:
        One candidate per answered question, in the form's question order.
        Ids that are not questions of this form come last, in payload order,
        with answer=None. Keys that are not ids at all become question id -1.
    """
    questions = {question.id: question for question in form.questions}
    answers: Dict[int, Any] = {}
    unknown: List[CandidateResponse] = []

    for key, raw in payload.items():
        question_id = _to_question_id(key)
        if question_id is None or question_id not in questions:
            unknown.append(
                CandidateResponse(
                    question_id=question_id if question_id is not None else -1,
                    answer=None,
                    raw=raw,
                    key=key if question_id is None else None,
                )
            )
            continue
        answers[question_id] = raw

    candidates = []
    for question in form.questions:
        if question.id not in answers:
            continue
        raw = answers[question.id]
        candidates.append(
            CandidateResponse(
                question_id=question.id,
                answer=to_answer(question.input_type, raw),
                raw=raw,
            )
        )
    return candidates + unknown
