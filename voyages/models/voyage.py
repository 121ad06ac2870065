from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from voyages.db.base import Base

class Voyage(Base):
    __tablename__ = "voyages"
    id = Column(Integer, primary_key=True)
    number = Column(String, nullable=False, unique=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    solo_project_deadline = Column(DateTime, nullable=True)
    certificate_issue_date = Column(DateTime, nullable=True)
    showcase_publish_date = Column(DateTime, nullable=True)

    sprints = relationship("Sprint", back_populates="voyage", order_by="Sprint.number")
    teams = relationship("VoyageTeam", back_populates="voyage")

class Sprint(Base):
    __tablename__ = "sprints"
    __table_args__ = (UniqueConstraint("voyage_id", "number", name="uq_sprint_voyage_number"),)

    id = Column(Integer, primary_key=True)
    voyage_id = Column(Integer, ForeignKey("voyages.id"), nullable=False)
    number = Column(Integer, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    voyage = relationship("Voyage", back_populates="sprints")
    team_meetings = relationship("TeamMeeting", back_populates="sprint")
