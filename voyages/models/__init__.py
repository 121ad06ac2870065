from voyages.models.user import User
from voyages.models.voyage import Voyage, Sprint
from voyages.models.team import VoyageTeam, VoyageTeamMember
from voyages.models.meeting import TeamMeeting, Agenda
from voyages.models.form import Form, FormType, InputType, OptionChoice, OptionGroup, Question
from voyages.models.response import (
    FormResponseCheckin,
    FormResponseMeeting,
    Response,
    ResponseGroup,
    response_option_choices,
)
