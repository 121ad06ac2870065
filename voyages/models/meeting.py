from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from voyages.db.base import Base

class TeamMeeting(Base):
    __tablename__ = "team_meetings"
    id = Column(Integer, primary_key=True)
    sprint_id = Column(Integer, ForeignKey("sprints.id"), nullable=False)
    voyage_team_id = Column(Integer, ForeignKey("voyage_teams.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    date_time = Column(DateTime, nullable=True)
    meeting_link = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    sprint = relationship("Sprint", back_populates="team_meetings")
    voyage_team = relationship("VoyageTeam", back_populates="meetings")
    agendas = relationship(
        "Agenda",
        back_populates="team_meeting",
        cascade="all, delete-orphan",
        order_by="Agenda.id",
    )
    form_responses = relationship(
        "FormResponseMeeting",
        back_populates="meeting",
        order_by="FormResponseMeeting.id",
    )

class Agenda(Base):
    __tablename__ = "agendas"
    id = Column(Integer, primary_key=True)
    team_meeting_id = Column(
        Integer, ForeignKey("team_meetings.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    team_meeting = relationship("TeamMeeting", back_populates="agendas")
