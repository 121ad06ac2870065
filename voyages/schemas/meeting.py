from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime

class TeamMeetingCreate(BaseModel):
    title: str
    description: Optional[str] = None
    date_time: Optional[datetime] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None

class TeamMeetingUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date_time: Optional[datetime] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v):
        if v is None:
            raise ValueError("title cannot be null")
        return v

class TeamMeetingDisplay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sprint_id: int
    voyage_team_id: int
    title: str
    description: Optional[str] = None
    date_time: Optional[datetime] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None

class AgendaCreate(BaseModel):
    title: str
    description: Optional[str] = None
    status: bool = False

class AgendaUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[bool] = None

    @field_validator("title", "status")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

class AgendaDisplay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team_meeting_id: int
    title: str
    description: Optional[str] = None
    status: bool
    updated_at: Optional[datetime] = None
