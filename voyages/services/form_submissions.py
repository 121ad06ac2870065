"""
Form submission workflows: attach a form to a meeting, answer it, check in.

Each workflow validates the whole submission before anything is written and
hands the normalized responses to the repository, which stores them in one
transaction.
"""
import logging
from sqlalchemy.orm import Session
from typing import Any, List, Mapping

from voyages.core.config.settings import get_settings
from voyages.core.errors import BadRequestError, NotFoundError
from voyages.crud.forms import assert_form_type, get_form_by_title
from voyages.crud.responses import (
    create_checkin_submission,
    create_form_response_meeting,
    get_form_response_meeting,
    upsert_responses,
)
from voyages.models.form import FormType
from voyages.models.response import FormResponseCheckin, FormResponseMeeting, Response
from voyages.services.response_normalizer import normalize_responses
from voyages.services.schema_validator import check_responses

logger = logging.getLogger(__name__)


def attach_meeting_form(db: Session, meeting_id: int, form_id: int) -> FormResponseMeeting:
    assert_form_type(db, form_id, FormType.MEETING)
    return create_form_response_meeting(db, meeting_id, form_id)


def submit_meeting_form_responses(db: Session, meeting_id: int, form_id: int,
                                  answers: Mapping[Any, Any]) -> List[Response]:
    form_response_meeting = get_form_response_meeting(db, meeting_id, form_id)
    if not form_response_meeting:
        raise NotFoundError(
            f"form response does not exist for meeting Id {meeting_id} and form Id {form_id}"
        )

    form = assert_form_type(db, form_id, FormType.MEETING)
    candidates = normalize_responses(form, answers)
    check_responses(form, candidates)
    return upsert_responses(db, form_response_meeting.response_group_id, candidates)


def submit_checkin(db: Session, member_id: int, sprint_id: int,
                   answers: Mapping[Any, Any]) -> FormResponseCheckin:
    title = get_settings().CHECKIN_FORM_TITLE
    try:
        form = get_form_by_title(db, title)
    except NotFoundError:
        logger.error(f"Check-in form '{title}' is missing, has the database been seeded?")
        raise
    if form.form_type != FormType.CHECKIN:
        raise BadRequestError(f"Form '{title}' is not a checkin form.")

    candidates = normalize_responses(form, answers)
    check_responses(form, candidates)
    return create_checkin_submission(db, member_id, sprint_id, candidates)
