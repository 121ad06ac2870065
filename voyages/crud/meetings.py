import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional

from voyages.core.errors import BadRequestError, ConflictError, NotFoundError
from voyages.models.meeting import Agenda, TeamMeeting
from voyages.schemas.meeting import AgendaCreate, AgendaUpdate, TeamMeetingCreate, TeamMeetingUpdate

logger = logging.getLogger(__name__)


def get_meeting(db: Session, meeting_id: int) -> Optional[TeamMeeting]:
    return db.query(TeamMeeting).filter(TeamMeeting.id == meeting_id).first()

def get_agenda(db: Session, agenda_id: int) -> Optional[Agenda]:
    return db.query(Agenda).filter(Agenda.id == agenda_id).first()

def create_team_meeting(db: Session, team_id: int, sprint_id: int, meeting_data: TeamMeetingCreate) -> TeamMeeting:
    # one meeting per sprint and team for now
    existing_meeting = db.query(TeamMeeting).filter(
        TeamMeeting.sprint_id == sprint_id,
        TeamMeeting.voyage_team_id == team_id,
    ).first()
    if existing_meeting:
        raise ConflictError("A meeting already exist for this sprint.")

    meeting = TeamMeeting(
        sprint_id=sprint_id,
        voyage_team_id=team_id,
        **meeting_data.model_dump(),
    )
    try:
        db.add(meeting)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating meeting for team {team_id}, sprint {sprint_id}: {e}")
        raise BadRequestError(f"Invalid teamId: {team_id} or sprintId: {sprint_id}") from e
    db.refresh(meeting)
    return meeting

def update_team_meeting(db: Session, meeting_id: int, meeting_data: TeamMeetingUpdate) -> TeamMeeting:
    meeting = get_meeting(db, meeting_id)
    if not meeting:
        raise NotFoundError(f"Invalid meetingId: {meeting_id}")
    for key, value in meeting_data.model_dump(exclude_unset=True).items():
        setattr(meeting, key, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error updating meeting {meeting_id}: {e}")
        raise BadRequestError(f"Invalid update for meetingId: {meeting_id}") from e
    db.refresh(meeting)
    return meeting

def create_agenda(db: Session, meeting_id: int, agenda_data: AgendaCreate) -> Agenda:
    if not get_meeting(db, meeting_id):
        raise BadRequestError(f"Invalid meetingId: {meeting_id}")
    agenda = Agenda(team_meeting_id=meeting_id, **agenda_data.model_dump())
    try:
        db.add(agenda)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise BadRequestError(f"Invalid meetingId: {meeting_id}") from e
    db.refresh(agenda)
    return agenda

def update_agenda(db: Session, agenda_id: int, agenda_data: AgendaUpdate) -> Agenda:
    agenda = get_agenda(db, agenda_id)
    if not agenda:
        raise NotFoundError(f"Invalid agendaId: {agenda_id}")
    for key, value in agenda_data.model_dump(exclude_unset=True).items():
        setattr(agenda, key, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error updating agenda {agenda_id}: {e}")
        raise BadRequestError(f"Invalid update for agendaId: {agenda_id}") from e
    db.refresh(agenda)
    return agenda

def delete_agenda(db: Session, agenda_id: int) -> dict:
    agenda = get_agenda(db, agenda_id)
    if not agenda:
        raise NotFoundError(f"Invalid agendaId: {agenda_id}")
    deleted = {
        "id": agenda.id,
        "team_meeting_id": agenda.team_meeting_id,
        "title": agenda.title,
        "description": agenda.description,
        "status": agenda.status,
        "updated_at": agenda.updated_at,
    }
    db.delete(agenda)
    db.commit()
    return deleted
