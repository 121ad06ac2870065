from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

class FormResponseSubmit(BaseModel):
    # question id -> raw answer; the accepted shape depends on the question.
    # Keys stay strings so ids that are not numbers are reported per question.
    responses: Dict[str, Any] = Field(default_factory=dict)

class CheckinSubmit(FormResponseSubmit):
    voyage_team_member_id: int
    sprint_id: int

class OptionChoiceDisplay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str

class ResponseDisplay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question_id: int
    text: Optional[str] = None
    numeric: Optional[float] = None
    boolean: Optional[bool] = None
    option_choices: List[OptionChoiceDisplay] = []

class FormResponseMeetingDisplay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    meeting_id: int
    form_id: int
    response_group_id: int

class CheckinDisplay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    voyage_team_member_id: int
    sprint_id: int
    response_group_id: int
    created_at: Optional[datetime] = None
