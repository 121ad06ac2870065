"""
Authorization boundary.

Routers describe what they are about to do as an (action, resource) pair and
ask the injected policy whether the actor may do it. The core never looks at
roles; swapping the policy (see get_policy) changes the rules everywhere.
"""
import enum
import logging
from dataclasses import dataclass, field
from fastapi import HTTPException, status
from typing import Any, Dict, Protocol

from voyages.core.security.auth import Actor

logger = logging.getLogger(__name__)


class Action(enum.Enum):
    MANAGE = "manage"
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    SUBMIT = "submit"


@dataclass(frozen=True)
class ResourceRef:
    subject: str
    attributes: Dict[str, Any] = field(default_factory=dict)


class PolicyEvaluator(Protocol):
    def is_permitted(self, actor: Actor, action: Action, resource: ResourceRef) -> bool:
        ...


class RolePolicy:
    """
    Default rules:
    - admins may do anything
    - voyagers may read forms and sprint dates, manage their own teams
      (meetings, agendas, meeting forms) and submit check-ins for their own
      team memberships
    """

    def is_permitted(self, actor: Actor, action: Action, resource: ResourceRef) -> bool:
        if "admin" in actor.roles:
            return True
        if "voyager" not in actor.roles:
            return False

        if resource.subject in ("Form", "Voyage"):
            return action == Action.READ
        if resource.subject == "VoyageTeam":
            return resource.attributes.get("team_id") in actor.team_ids
        if resource.subject == "FormResponseCheckin":
            return (
                action in (Action.SUBMIT, Action.READ)
                and resource.attributes.get("voyage_team_member_id") in actor.member_ids
            )
        return False


_default_policy = RolePolicy()


def get_policy() -> PolicyEvaluator:
    return _default_policy


def ensure_permitted(policy: PolicyEvaluator, actor: Actor, action: Action, resource: ResourceRef) -> None:
    if not policy.is_permitted(actor, action, resource):
        logger.warning(
            f"User {actor.user_id} denied {action.value} on {resource.subject} {resource.attributes}"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not allowed to {action.value} {resource.subject}",
        )
