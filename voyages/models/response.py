from sqlalchemy import (
    Column, Integer, ForeignKey, DateTime, Text, Boolean, Float, Table, UniqueConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from voyages.db.base import Base

# Selected options of a choice answer
response_option_choices = Table(
    "response_option_choices", Base.metadata,
    Column("response_id", Integer, ForeignKey("responses.id", ondelete="CASCADE"), primary_key=True),
    Column("option_choice_id", Integer, ForeignKey("option_choices.id"), primary_key=True)
)

class ResponseGroup(Base):
    __tablename__ = "response_groups"
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    responses = relationship(
        "Response",
        back_populates="response_group",
        order_by="Response.id",
        cascade="all, delete-orphan",
    )
    form_response_meeting = relationship(
        "FormResponseMeeting", back_populates="response_group", uselist=False
    )
    form_response_checkin = relationship(
        "FormResponseCheckin", back_populates="response_group", uselist=False
    )

class Response(Base):
    __tablename__ = "responses"
    __table_args__ = (
        UniqueConstraint("response_group_id", "question_id", name="uq_response_group_question"),
    )

    id = Column(Integer, primary_key=True)
    response_group_id = Column(Integer, ForeignKey("response_groups.id"), nullable=False)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    text = Column(Text, nullable=True)
    numeric = Column(Float, nullable=True)
    boolean = Column(Boolean, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    response_group = relationship("ResponseGroup", back_populates="responses")
    question = relationship("Question", back_populates="responses")
    option_choices = relationship(
        "OptionChoice", secondary=response_option_choices, order_by="OptionChoice.id"
    )

class FormResponseMeeting(Base):
    __tablename__ = "form_response_meetings"
    __table_args__ = (
        UniqueConstraint("meeting_id", "form_id", name="uq_form_response_meeting_form"),
    )

    id = Column(Integer, primary_key=True)
    meeting_id = Column(Integer, ForeignKey("team_meetings.id"), nullable=False)
    form_id = Column(Integer, ForeignKey("forms.id"), nullable=False)
    response_group_id = Column(
        Integer, ForeignKey("response_groups.id"), nullable=False, unique=True
    )

    meeting = relationship("TeamMeeting", back_populates="form_responses")
    form = relationship("Form")
    response_group = relationship("ResponseGroup", back_populates="form_response_meeting")

class FormResponseCheckin(Base):
    __tablename__ = "form_response_checkins"
    __table_args__ = (
        UniqueConstraint("voyage_team_member_id", "sprint_id", name="uq_checkin_member_sprint"),
    )

    id = Column(Integer, primary_key=True)
    voyage_team_member_id = Column(
        Integer, ForeignKey("voyage_team_members.id"), nullable=False
    )
    sprint_id = Column(Integer, ForeignKey("sprints.id"), nullable=False)
    response_group_id = Column(
        Integer, ForeignKey("response_groups.id"), nullable=False, unique=True
    )
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    voyage_team_member = relationship("VoyageTeamMember", back_populates="checkins")
    sprint = relationship("Sprint")
    response_group = relationship("ResponseGroup", back_populates="form_response_checkin")
