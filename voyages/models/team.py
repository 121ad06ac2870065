from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from voyages.db.base import Base

class VoyageTeam(Base):
    __tablename__ = "voyage_teams"
    id = Column(Integer, primary_key=True)
    voyage_id = Column(Integer, ForeignKey("voyages.id"), nullable=False)
    name = Column(String, nullable=False, unique=True)
    end_date = Column(DateTime, nullable=True)

    voyage = relationship("Voyage", back_populates="teams")
    members = relationship("VoyageTeamMember", back_populates="voyage_team")
    meetings = relationship("TeamMeeting", back_populates="voyage_team")

class VoyageTeamMember(Base):
    __tablename__ = "voyage_team_members"
    __table_args__ = (UniqueConstraint("user_id", "voyage_team_id", name="uq_member_user_team"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    voyage_team_id = Column(Integer, ForeignKey("voyage_teams.id"), nullable=False)
    hr_per_sprint = Column(Integer, nullable=True)

    user = relationship("User", back_populates="voyage_team_members")
    voyage_team = relationship("VoyageTeam", back_populates="members")
    checkins = relationship("FormResponseCheckin", back_populates="voyage_team_member")
