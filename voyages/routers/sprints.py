from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from voyages.db.session import get_db
from voyages.core.errors import NotFoundError
from voyages.core.security.auth import Actor, get_current_user
from voyages.core.security.permissions import (
    Action, PolicyEvaluator, ResourceRef, ensure_permitted, get_policy
)
from voyages.crud import meetings as meetings_crud
from voyages.crud import sprints as sprints_crud
from voyages.crud.responses import serialize_response
from voyages.schemas.meeting import (
    AgendaCreate, AgendaDisplay, AgendaUpdate,
    TeamMeetingCreate, TeamMeetingDisplay, TeamMeetingUpdate,
)
from voyages.schemas.response import (
    CheckinDisplay, CheckinSubmit, FormResponseMeetingDisplay,
    FormResponseSubmit, ResponseDisplay,
)
from voyages.services import form_submissions

router = APIRouter(prefix="/sprints", tags=["sprints"])


def _team(team_id: Optional[int]) -> ResourceRef:
    return ResourceRef("VoyageTeam", {"team_id": team_id})

def _authorize_meeting(db: Session, meeting_id: int, action: Action,
                       actor: Actor, policy: PolicyEvaluator) -> None:
    # unknown meetings fall through so the operation reports them itself
    meeting = meetings_crud.get_meeting(db, meeting_id)
    if meeting is not None:
        ensure_permitted(policy, actor, action, _team(meeting.voyage_team_id))

def _authorize_agenda(db: Session, agenda_id: int, action: Action,
                      actor: Actor, policy: PolicyEvaluator) -> None:
    agenda = meetings_crud.get_agenda(db, agenda_id)
    if agenda is not None:
        ensure_permitted(policy, actor, action, _team(agenda.team_meeting.voyage_team_id))


@router.get("/")
def get_voyages_and_sprints(
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """Get all voyages with their sprint dates"""
    ensure_permitted(policy, current_user, Action.READ, ResourceRef("Voyage"))
    return sprints_crud.get_voyages_and_sprints(db)

@router.get("/teams/{team_id}")
def get_sprint_dates_by_team_id(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """Get voyage and sprint dates for a team"""
    ensure_permitted(policy, current_user, Action.READ, _team(team_id))
    return sprints_crud.get_sprint_dates_by_team_id(db, team_id)

@router.get("/meetings/{meeting_id}")
def get_meeting_by_id(
    meeting_id: int,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """
    Get meeting details: title, time, link, notes, agenda and meeting forms.
    Everything needed to populate the meeting page.
    """
    _authorize_meeting(db, meeting_id, Action.READ, current_user, policy)
    return sprints_crud.get_meeting_detail(db, meeting_id)

@router.post(
    "/{sprint_number}/teams/{team_id}/meetings",
    response_model=TeamMeetingDisplay,
    status_code=status.HTTP_201_CREATED,
)
def create_team_meeting(
    sprint_number: int,
    team_id: int,
    meeting: TeamMeetingCreate,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """Create a sprint meeting given a sprint number and team Id"""
    ensure_permitted(policy, current_user, Action.CREATE, _team(team_id))
    sprint_id = sprints_crud.resolve_sprint_id(db, team_id, sprint_number)
    if not sprint_id:
        raise NotFoundError(
            f"Sprint number {sprint_number} or team Id {team_id} does not exist."
        )
    return meetings_crud.create_team_meeting(db, team_id, sprint_id, meeting)

@router.patch("/meetings/{meeting_id}", response_model=TeamMeetingDisplay)
def update_team_meeting(
    meeting_id: int,
    meeting: TeamMeetingUpdate,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """Update meeting details, including link, time and notes"""
    _authorize_meeting(db, meeting_id, Action.UPDATE, current_user, policy)
    return meetings_crud.update_team_meeting(db, meeting_id, meeting)

@router.post(
    "/meetings/{meeting_id}/agendas",
    response_model=AgendaDisplay,
    status_code=status.HTTP_201_CREATED,
)
def add_meeting_agenda(
    meeting_id: int,
    agenda: AgendaCreate,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    _authorize_meeting(db, meeting_id, Action.CREATE, current_user, policy)
    return meetings_crud.create_agenda(db, meeting_id, agenda)

@router.patch("/agendas/{agenda_id}", response_model=AgendaDisplay)
def update_meeting_agenda(
    agenda_id: int,
    agenda: AgendaUpdate,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    _authorize_agenda(db, agenda_id, Action.UPDATE, current_user, policy)
    return meetings_crud.update_agenda(db, agenda_id, agenda)

@router.delete("/agendas/{agenda_id}", response_model=AgendaDisplay)
def delete_meeting_agenda(
    agenda_id: int,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    _authorize_agenda(db, agenda_id, Action.DELETE, current_user, policy)
    return meetings_crud.delete_agenda(db, agenda_id)

@router.post(
    "/meetings/{meeting_id}/forms/{form_id}",
    status_code=status.HTTP_201_CREATED,
)
def add_meeting_form_response(
    meeting_id: int,
    form_id: int,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """
    Attach a meeting form (e.g. "Retrospective & Review", "Sprint Planning")
    to a meeting. Creates the empty record the form's responses are stored in.
    Each meeting can have each form at most once.
    """
    _authorize_meeting(db, meeting_id, Action.UPDATE, current_user, policy)
    form_response_meeting = form_submissions.attach_meeting_form(db, meeting_id, form_id)
    return {
        **FormResponseMeetingDisplay.model_validate(form_response_meeting).model_dump(),
        "responses": [],
    }

@router.get("/meetings/{meeting_id}/forms/{form_id}")
def get_meeting_form_questions_with_responses(
    meeting_id: int,
    form_id: int,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """Get a meeting form, including questions and the meeting's responses"""
    _authorize_meeting(db, meeting_id, Action.READ, current_user, policy)
    return sprints_crud.get_form_with_responses(db, meeting_id, form_id)

@router.patch(
    "/meetings/{meeting_id}/forms/{form_id}",
    response_model=List[ResponseDisplay],
)
def update_meeting_form_response(
    meeting_id: int,
    form_id: int,
    submission: FormResponseSubmit,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """Submit or update a meeting form's responses"""
    _authorize_meeting(db, meeting_id, Action.UPDATE, current_user, policy)
    responses = form_submissions.submit_meeting_form_responses(
        db, meeting_id, form_id, submission.responses
    )
    return [serialize_response(response) for response in responses]

@router.post(
    "/check-in",
    response_model=CheckinDisplay,
    status_code=status.HTTP_201_CREATED,
)
def add_checkin_form_response(
    submission: CheckinSubmit,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """Submit a sprint check-in for a voyage team member"""
    ensure_permitted(
        policy, current_user, Action.SUBMIT,
        ResourceRef("FormResponseCheckin", {"voyage_team_member_id": submission.voyage_team_member_id}),
    )
    return form_submissions.submit_checkin(
        db, submission.voyage_team_member_id, submission.sprint_id, submission.responses
    )
