from dataclasses import dataclass, field
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import FrozenSet
import jwt

from voyages.core.config.settings import get_settings
from voyages.db.session import get_db
from voyages.models.team import VoyageTeamMember
from voyages.models.user import User

# Tokens are issued by the auth service; this API only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


@dataclass(frozen=True)
class Actor:
    user_id: int
    roles: FrozenSet[str] = field(default_factory=frozenset)
    team_ids: FrozenSet[int] = field(default_factory=frozenset)
    member_ids: FrozenSet[int] = field(default_factory=frozenset)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Actor:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = int(payload.get("sub"))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has expired")
    except (jwt.PyJWTError, TypeError, ValueError):
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    memberships = db.query(VoyageTeamMember).filter(VoyageTeamMember.user_id == user.id).all()
    return Actor(
        user_id=user.id,
        roles=frozenset(payload.get("roles") or []),
        team_ids=frozenset(m.voyage_team_id for m in memberships),
        member_ids=frozenset(m.id for m in memberships),
    )
