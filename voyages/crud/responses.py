import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from typing import Any, Dict, Iterable, List, Optional, Sequence

from voyages.core.errors import BadRequestError, ConflictError, NotFoundError
from voyages.db.errors import FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION, classify_integrity_error
from voyages.models.form import Form, OptionChoice
from voyages.models.meeting import TeamMeeting
from voyages.models.response import (
    FormResponseCheckin,
    FormResponseMeeting,
    Response,
    ResponseGroup,
)
from voyages.services.response_normalizer import CandidateResponse

logger = logging.getLogger(__name__)


def _translate_integrity_error(exc: IntegrityError, conflict: str, bad_request: str):
    kind = classify_integrity_error(exc)
    if kind == UNIQUE_VIOLATION:
        return ConflictError(conflict)
    if kind == FOREIGN_KEY_VIOLATION:
        return BadRequestError(bad_request)
    return None


def _load_choices(db: Session, candidates: Iterable[CandidateResponse]) -> Dict[int, OptionChoice]:
    choice_ids = set()
    for candidate in candidates:
        choice_ids |= candidate.choice_ids
    if not choice_ids:
        return {}
    choices = db.query(OptionChoice).filter(OptionChoice.id.in_(choice_ids)).all()
    return {choice.id: choice for choice in choices}


def _apply_candidate(response: Response, candidate: CandidateResponse, choices: Dict[int, OptionChoice]):
    for column, value in candidate.to_columns().items():
        setattr(response, column, value)
    response.option_choices = [choices[choice_id] for choice_id in sorted(candidate.choice_ids)]


def get_form_response_meeting(db: Session, meeting_id: int, form_id: int) -> Optional[FormResponseMeeting]:
    return db.query(FormResponseMeeting).filter(
        FormResponseMeeting.meeting_id == meeting_id,
        FormResponseMeeting.form_id == form_id,
    ).first()


def create_form_response_meeting(db: Session, meeting_id: int, form_id: int) -> FormResponseMeeting:
    """
    Attach a form to a meeting with an empty response group

    The pairing and its response group are committed together. A second
    attach for the same meeting and form is a conflict.
    """
    if db.get(TeamMeeting, meeting_id) is None:
        raise BadRequestError(f"MeetingId: {meeting_id} does not exist.")
    if db.get(Form, form_id) is None:
        raise BadRequestError(f"FormId: {form_id} does not exist.")

    form_response_meeting = FormResponseMeeting(
        meeting_id=meeting_id,
        form_id=form_id,
        response_group=ResponseGroup(),
    )
    try:
        db.add(form_response_meeting)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        error = _translate_integrity_error(
            e,
            conflict=(
                f"FormId and MeetingId combination should be unique. "
                f"Meeting {meeting_id} already has form {form_id}."
            ),
            bad_request=f"MeetingId: {meeting_id} or FormId: {form_id} does not exist.",
        )
        if error is None:
            logger.error(f"Unexpected integrity error attaching form {form_id} to meeting {meeting_id}: {e}")
            raise
        raise error from e

    db.refresh(form_response_meeting)
    logger.info(
        f"Attached form {form_id} to meeting {meeting_id} "
        f"(response group {form_response_meeting.response_group_id})"
    )
    return form_response_meeting


def upsert_responses(db: Session, response_group_id: int, candidates: Sequence[CandidateResponse]) -> List[Response]:
    """
    Update or create one response per candidate in a single transaction

    Parameters:
    - response_group_id: group the responses belong to
    - candidates: validated candidate responses
    - db: Database session

    Returns:
    - The persisted responses, in candidate order

    An existing (group, question) row is updated in place, otherwise a row is
    created. The group row is locked first so concurrent upserts on the same
    group run one after the other; the unique (group, question) constraint
    backs this up. Any failure rolls the whole batch back.
    """
    try:
        group = db.query(ResponseGroup).filter(
            ResponseGroup.id == response_group_id
        ).with_for_update().first()
        if group is None:
            raise NotFoundError(f"Response group {response_group_id} does not exist.")

        question_ids = [candidate.question_id for candidate in candidates]
        existing = {
            response.question_id: response
            for response in db.query(Response).filter(
                Response.response_group_id == response_group_id,
                Response.question_id.in_(question_ids),
            ).with_for_update()
        }
        choices = _load_choices(db, candidates)

        persisted = []
        for candidate in candidates:
            response = existing.get(candidate.question_id)
            if response is None:
                response = Response(
                    response_group_id=response_group_id,
                    question_id=candidate.question_id,
                )
                db.add(response)
            _apply_candidate(response, candidate, choices)
            persisted.append(response)

        db.flush()
        db.commit()
    except IntegrityError as e:
        db.rollback()
        error = _translate_integrity_error(
            e,
            conflict=f"Concurrent update of response group {response_group_id}, please retry.",
            bad_request="Responses reference questions or options that do not exist.",
        )
        if error is None:
            logger.error(f"Unexpected integrity error updating response group {response_group_id}: {e}")
            raise
        raise error from e
    except NotFoundError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating response group {response_group_id}")
        raise

    for response in persisted:
        db.refresh(response)
    logger.info(f"Stored {len(persisted)} response(s) in response group {response_group_id}")
    return persisted


def create_checkin_submission(db: Session, member_id: int, sprint_id: int,
                              candidates: Sequence[CandidateResponse]) -> FormResponseCheckin:
    """
    Store a check-in: response group, its responses and the check-in row

    Everything is committed together. A member can check in once per sprint.
    """
    try:
        choices = _load_choices(db, candidates)
        response_group = ResponseGroup()
        for candidate in candidates:
            response = Response(question_id=candidate.question_id)
            _apply_candidate(response, candidate, choices)
            response_group.responses.append(response)
        db.add(response_group)
        # responses land before the check-in row
        db.flush()

        checkin = FormResponseCheckin(
            voyage_team_member_id=member_id,
            sprint_id=sprint_id,
            response_group_id=response_group.id,
        )
        db.add(checkin)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        error = _translate_integrity_error(
            e,
            conflict=(
                f"User {member_id} has already submitted a checkin form "
                f"for sprint id {sprint_id}."
            ),
            bad_request=f"VoyageTeamMemberId: {member_id} or SprintId: {sprint_id} does not exist.",
        )
        if error is None:
            logger.error(f"Unexpected integrity error storing checkin for member {member_id}: {e}")
            raise
        raise error from e
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error storing checkin for member {member_id}, sprint {sprint_id}")
        raise

    db.refresh(checkin)
    logger.info(f"Member {member_id} checked in for sprint {sprint_id}")
    return checkin


def get_group_responses(db: Session, response_group_id: int) -> List[Response]:
    return db.query(Response).options(
        selectinload(Response.option_choices)
    ).filter(
        Response.response_group_id == response_group_id
    ).order_by(Response.id).all()


def serialize_response(response: Response) -> Dict[str, Any]:
    return {
        "id": response.id,
        "question_id": response.question_id,
        "text": response.text,
        "numeric": response.numeric,
        "boolean": response.boolean,
        "option_choices": [
            {"id": choice.id, "text": choice.text} for choice in response.option_choices
        ],
    }
