import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy.orm import Session

from voyages.core.errors import FormValidationError
from voyages.crud.forms import get_form_schema
from voyages.models.form import Form, InputType
from voyages.services.response_normalizer import CandidateResponse

logger = logging.getLogger(__name__)

MISSING_REQUIRED = "missing_required"
UNKNOWN_QUESTION = "unknown_question"
TYPE_MISMATCH = "type_mismatch"
MULTIPLE_NOT_ALLOWED = "multiple_not_allowed"
INVALID_CHOICE = "invalid_choice"


def _violation(question_id: int, reason: str, message: str) -> Dict[str, Any]:
    return {"question_id": question_id, "reason": reason, "message": message}


def find_violations(form: Form, candidates: Sequence[CandidateResponse]) -> List[Dict[str, Any]]:
    """Every way the candidates fail to fit the form, in question order."""
    questions = {question.id: question for question in form.questions}
    by_question = {c.question_id: c for c in candidates if c.question_id in questions}
    violations = []

    for question in form.questions:
        candidate = by_question.get(question.id)
        if candidate is None:
            if question.answer_required:
                violations.append(
                    _violation(question.id, MISSING_REQUIRED, "An answer is required.")
                )
            continue

        if candidate.answer is None:
            violations.append(
                _violation(
                    question.id,
                    TYPE_MISMATCH,
                    f"Expected a {question.input_type.value} answer.",
                )
            )
            continue

        if not question.input_type.is_choice:
            continue

        selected = candidate.choice_ids
        if not selected:
            # an empty selection would store a response with no value
            reason = MISSING_REQUIRED if question.answer_required else TYPE_MISMATCH
            violations.append(
                _violation(question.id, reason, "Select at least one option or leave the question out.")
            )
            continue
        allows_many = question.input_type == InputType.MULTI_CHOICE and question.multiple_allowed
        if len(selected) > 1 and not allows_many:
            violations.append(
                _violation(
                    question.id,
                    MULTIPLE_NOT_ALLOWED,
                    f"Only one option may be selected, got {len(selected)}.",
                )
            )
        invalid = sorted(selected - question.choice_ids())
        if invalid:
            violations.append(
                _violation(
                    question.id,
                    INVALID_CHOICE,
                    f"Option choice(s) {invalid} do not belong to this question.",
                )
            )

    for candidate in candidates:
        if candidate.question_id not in questions:
            if candidate.key is not None:
                message = f"'{candidate.key}' is not a question id."
            else:
                message = f"Question {candidate.question_id} is not part of form {form.id}."
            violations.append(_violation(candidate.question_id, UNKNOWN_QUESTION, message))
    return violations


def check_responses(form: Form, candidates: Sequence[CandidateResponse]) -> None:
    """Raise FormValidationError listing all violations, if there are any."""
    violations = find_violations(form, candidates)
    if violations:
        logger.info(
            "Rejected %d response(s) for form %s: %d violation(s)",
            len(candidates), form.id, len(violations),
        )
        raise FormValidationError(violations)


def validate_responses(db: Session, form_id: int, candidates: Sequence[CandidateResponse]) -> Form:
    """
    Validate candidate responses against a stored form

    Args:
        db: Database session
        form_id: the form the responses answer
        candidates: output of normalize_responses

    Returns:
        The form, when every candidate fits it
    """
    form = get_form_schema(db, form_id)
    check_responses(form, candidates)
    return form
