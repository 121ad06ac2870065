from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from voyages.db.base import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)

    voyage_team_members = relationship("VoyageTeamMember", back_populates="user")
