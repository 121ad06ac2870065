"""Tests for token verification and the default authorization policy."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from voyages.core.config.settings import get_settings
from voyages.core.security.auth import Actor, get_current_user
from voyages.core.security.permissions import Action, ResourceRef, RolePolicy, ensure_permitted

ADMIN = Actor(user_id=1, roles=frozenset({"admin"}))
VOYAGER = Actor(user_id=2, roles=frozenset({"voyager"}), team_ids=frozenset({1}), member_ids=frozenset({3}))
NOBODY = Actor(user_id=3)


def _token(claims, **overrides):
    settings = get_settings()
    payload = {"exp": datetime.now(timezone.utc) + timedelta(minutes=5), **claims, **overrides}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


class TestRolePolicy:
    policy = RolePolicy()

    def test_admin_may_do_anything(self):
        assert self.policy.is_permitted(ADMIN, Action.DELETE, ResourceRef("VoyageTeam", {"team_id": 7}))

    @pytest.mark.parametrize("action, resource, expected", [
        (Action.READ, ResourceRef("Form"), True),
        (Action.UPDATE, ResourceRef("Form"), False),
        (Action.UPDATE, ResourceRef("VoyageTeam", {"team_id": 1}), True),
        (Action.UPDATE, ResourceRef("VoyageTeam", {"team_id": 2}), False),
        (Action.SUBMIT, ResourceRef("FormResponseCheckin", {"voyage_team_member_id": 3}), True),
        (Action.SUBMIT, ResourceRef("FormResponseCheckin", {"voyage_team_member_id": 4}), False),
        (Action.READ, ResourceRef("Agenda"), False),
    ])
    def test_voyager_rules(self, action, resource, expected):
        assert self.policy.is_permitted(VOYAGER, action, resource) is expected

    def test_no_role_no_access(self):
        assert not self.policy.is_permitted(NOBODY, Action.READ, ResourceRef("Form"))

    def test_ensure_permitted_raises_forbidden(self):
        with pytest.raises(HTTPException) as exc_info:
            ensure_permitted(self.policy, NOBODY, Action.READ, ResourceRef("Form"))
        assert exc_info.value.status_code == 403


class TestGetCurrentUser:
    def test_actor_from_token_and_memberships(self, db_session):
        actor = get_current_user(_token({"sub": "1", "roles": ["voyager"]}), db_session)

        assert actor.user_id == 1
        assert actor.roles == frozenset({"voyager"})
        assert actor.team_ids == frozenset({1})
        assert actor.member_ids == frozenset({3})

    def test_expired_token(self, db_session):
        token = _token({"sub": "1"}, exp=datetime.now(timezone.utc) - timedelta(minutes=1))
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(token, db_session)
        assert exc_info.value.detail == "Token has expired"

    @pytest.mark.parametrize("token", [
        "not-a-jwt",
        jwt.encode({"sub": "1"}, "some-other-secret", algorithm="HS256"),
    ])
    def test_invalid_token(self, db_session, token):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(token, db_session)
        assert exc_info.value.status_code == 401

    def test_unknown_user(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_token({"sub": "404"}), db_session)
        assert exc_info.value.status_code == 401
