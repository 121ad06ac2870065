from sqlalchemy.orm import Session, selectinload
from typing import Any, Dict, List, Optional

from voyages.core.errors import NotFoundError
from voyages.crud.forms import assert_form_type, get_form_schema, serialize_form
from voyages.crud.responses import get_form_response_meeting, get_group_responses, serialize_response
from voyages.models.form import FormType
from voyages.models.meeting import TeamMeeting
from voyages.models.response import FormResponseMeeting, Response, ResponseGroup
from voyages.models.team import VoyageTeam
from voyages.models.voyage import Sprint, Voyage


def _sprint_dates(sprint: Sprint) -> Dict[str, Any]:
    return {
        "id": sprint.id,
        "number": sprint.number,
        "start_date": sprint.start_date,
        "end_date": sprint.end_date,
    }


def _voyage_dates(voyage: Voyage) -> Dict[str, Any]:
    return {
        "id": voyage.id,
        "number": voyage.number,
        "solo_project_deadline": voyage.solo_project_deadline,
        "certificate_issue_date": voyage.certificate_issue_date,
        "showcase_publish_date": voyage.showcase_publish_date,
        "start_date": voyage.start_date,
        "end_date": voyage.end_date,
    }


def resolve_sprint_id(db: Session, team_id: int, sprint_number: int) -> Optional[int]:
    """Id of the sprint with this number in the team's voyage, or None."""
    sprint = db.query(Sprint).join(
        VoyageTeam, VoyageTeam.voyage_id == Sprint.voyage_id
    ).filter(
        VoyageTeam.id == team_id,
        Sprint.number == sprint_number,
    ).first()
    return sprint.id if sprint else None


def get_voyages_and_sprints(db: Session) -> List[Dict[str, Any]]:
    voyages = db.query(Voyage).options(selectinload(Voyage.sprints)).order_by(Voyage.id).all()
    return [
        {**_voyage_dates(voyage), "sprints": [_sprint_dates(s) for s in voyage.sprints]}
        for voyage in voyages
    ]


def get_sprint_dates_by_team_id(db: Session, team_id: int) -> Dict[str, Any]:
    """
    Voyage and sprint dates as seen by one team

    The voyage end date is replaced by the team's own end date, and each
    sprint lists the ids of this team's meetings in it.
    """
    team = db.query(VoyageTeam).filter(VoyageTeam.id == team_id).first()
    if not team:
        raise NotFoundError(f"Invalid teamId: {team_id}")

    meetings = db.query(TeamMeeting.id, TeamMeeting.sprint_id).filter(
        TeamMeeting.voyage_team_id == team_id
    ).all()
    meetings_by_sprint: Dict[int, List[Dict[str, int]]] = {}
    for meeting_id, sprint_id in meetings:
        meetings_by_sprint.setdefault(sprint_id, []).append({"id": meeting_id})

    voyage = team.voyage
    voyage_data = _voyage_dates(voyage)
    voyage_data["end_date"] = team.end_date
    voyage_data["sprints"] = [
        {**_sprint_dates(sprint), "team_meetings": meetings_by_sprint.get(sprint.id, [])}
        for sprint in voyage.sprints
    ]
    return voyage_data


def get_meeting_detail(db: Session, meeting_id: int) -> Dict[str, Any]:
    """
    Everything needed to render a meeting page

    Meeting fields, its sprint, agenda items and every attached form with
    the responses stored for it.
    """
    meeting = db.query(TeamMeeting).options(
        selectinload(TeamMeeting.agendas),
        selectinload(TeamMeeting.form_responses)
        .selectinload(FormResponseMeeting.response_group)
        .selectinload(ResponseGroup.responses)
        .selectinload(Response.option_choices),
    ).filter(TeamMeeting.id == meeting_id).first()

    if not meeting:
        raise NotFoundError(f"Meeting with id {meeting_id} not found")

    return {
        "id": meeting.id,
        "voyage_team_id": meeting.voyage_team_id,
        "sprint": _sprint_dates(meeting.sprint),
        "title": meeting.title,
        "description": meeting.description,
        "date_time": meeting.date_time,
        "meeting_link": meeting.meeting_link,
        "notes": meeting.notes,
        "agendas": [
            {
                "id": agenda.id,
                "title": agenda.title,
                "description": agenda.description,
                "status": agenda.status,
                "updated_at": agenda.updated_at,
            }
            for agenda in meeting.agendas
        ],
        "form_responses": [
            {
                "id": form_response.id,
                "form": {"id": form_response.form.id, "title": form_response.form.title},
                "response_group_id": form_response.response_group_id,
                "responses": [
                    {
                        **serialize_response(response),
                        "question": {
                            "id": response.question.id,
                            "text": response.question.text,
                            "description": response.question.description,
                            "answer_required": response.question.answer_required,
                        },
                    }
                    for response in form_response.response_group.responses
                ],
            }
            for form_response in meeting.form_responses
        ],
    }


def get_form_with_responses(db: Session, meeting_id: int, form_id: int) -> Dict[str, Any]:
    """
    A meeting form with the answers stored for this meeting

    Before the form is attached to the meeting the plain schema is returned
    (every question has empty responses), but only for meeting forms.
    """
    meeting = db.query(TeamMeeting).filter(TeamMeeting.id == meeting_id).first()
    if not meeting:
        raise NotFoundError(f"Meeting with Id {meeting_id} does not exist.")

    form_response_meeting = get_form_response_meeting(db, meeting_id, form_id)
    if not form_response_meeting:
        form = assert_form_type(db, form_id, FormType.MEETING)
        form_data = serialize_form(form)
        form_data["response_group_id"] = None
        for question in form_data["questions"]:
            question["responses"] = []
        return form_data

    form = get_form_schema(db, form_id)
    responses_by_question: Dict[int, List[Dict[str, Any]]] = {}
    for response in get_group_responses(db, form_response_meeting.response_group_id):
        responses_by_question.setdefault(response.question_id, []).append(
            serialize_response(response)
        )

    form_data = serialize_form(form)
    form_data["response_group_id"] = form_response_meeting.response_group_id
    for question in form_data["questions"]:
        question["responses"] = responses_by_question.get(question["id"], [])
    return form_data
