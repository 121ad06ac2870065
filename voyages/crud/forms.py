from sqlalchemy.orm import Session, selectinload
from typing import Any, Dict, List, Optional

from voyages.core.errors import BadRequestError, NotFoundError
from voyages.models.form import Form, FormType, OptionGroup, Question


def _form_query(db: Session):
    return db.query(Form).options(
        selectinload(Form.questions)
        .joinedload(Question.option_group)
        .selectinload(OptionGroup.option_choices)
    )


def get_form_schema(db: Session, form_id: int) -> Form:
    """
    Retrieve a form with its questions

    Parameters:
    - form_id: The ID of the form to retrieve
    - db: Database session

    Raises NotFoundError when there is no such form.
    """
    form = _form_query(db).filter(Form.id == form_id).first()
    if not form:
        raise NotFoundError(f"Form (id: {form_id}) does not exist.")
    return form


def get_form_by_title(db: Session, title: str) -> Form:
    form = _form_query(db).filter(Form.title == title).first()
    if not form:
        raise NotFoundError(f"Form '{title}' does not exist.")
    return form


def assert_form_type(db: Session, form_id: int, expected_type: FormType) -> Form:
    """
    Check that a form exists and is of the expected type

    Both failures are bad requests: the caller referenced a form it cannot
    use here.
    """
    form = _form_query(db).filter(Form.id == form_id).first()
    if not form:
        raise BadRequestError(f"Form (id: {form_id}) does not exist.")
    if form.form_type != expected_type:
        raise BadRequestError(
            f"Form (id: {form_id}) is not a {expected_type.value} form."
        )
    return form


def list_forms(db: Session, form_type: Optional[FormType] = None) -> List[Form]:
    query = _form_query(db)
    if form_type is not None:
        query = query.filter(Form.form_type == form_type)
    return query.order_by(Form.id).all()


def serialize_option_choice(choice) -> Dict[str, Any]:
    return {"id": choice.id, "text": choice.text}


def serialize_question(question: Question) -> Dict[str, Any]:
    return {
        "id": question.id,
        "order": question.order,
        "text": question.text,
        "description": question.description,
        "input_type": question.input_type.value,
        "answer_required": question.answer_required,
        "multiple_allowed": question.multiple_allowed,
        "option_choices": [
            serialize_option_choice(choice)
            for choice in question.option_group.option_choices
        ] if question.option_group else [],
    }


def serialize_form(form: Form) -> Dict[str, Any]:
    return {
        "id": form.id,
        "title": form.title,
        "description": form.description,
        "form_type": form.form_type.value,
        "questions": [serialize_question(question) for question in form.questions],
    }
