"""
Shared pytest fixtures for all tests.

Every test gets its own in-memory SQLite database with foreign keys enforced,
filled with one voyage, its sprints, two teams and a handful of forms.
"""

import os
import tempfile

# Settings are read on first import, keep the app away from real services
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "voyages-test-logs"))
os.environ.setdefault("SEED_DEFAULT_FORMS", "false")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import datetime
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from voyages.core.security.auth import Actor, get_current_user
from voyages.db.base import Base
from voyages.db.session import enable_sqlite_foreign_keys, get_db
from voyages.models import (
    Form,
    FormType,
    InputType,
    OptionChoice,
    OptionGroup,
    Question,
    Sprint,
    TeamMeeting,
    User,
    Voyage,
    VoyageTeam,
    VoyageTeamMember,
)

ADMIN = Actor(user_id=99, roles=frozenset({"admin"}))
VOYAGER = Actor(
    user_id=1,
    roles=frozenset({"voyager"}),
    team_ids=frozenset({1}),
    member_ids=frozenset({3}),
)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def test_engine():
    """
    In-memory SQLite engine.

    StaticPool keeps the single connection shared between the test and the
    request handlers running in TestClient's worker thread.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)

    yield engine

    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session(session_factory, voyage_data) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def voyage_data(session_factory):
    """
    Reference data used across the suite:

    - voyage 1 ("46") with sprints 4, 5, 6 (numbers 1, 2, 3)
    - team 1 with members 3 and 4, team 2 with member 5
    - meeting 10 for team 1 in sprint 5
    - form 7 "Retrospective & Review" (meeting), questions 1-6
    - form 8 "Sprint Planning" (meeting), question 10
    - form 9 "Sprint Check-in" (checkin), questions 20-23
    - form 11 "Voyage Application" (other), question 30
    - option group 1 (choices 1, 2, 3), option group 2 (choices 4, 5)
    """
    session = session_factory()

    session.add_all([
        User(id=1, email="jessica.williamson@example.com", first_name="Jessica", last_name="Williamson"),
        User(id=2, email="larry.castro@example.com", first_name="Larry", last_name="Castro"),
        User(id=3, email="leonarda.rowe@example.com", first_name="Leonarda", last_name="Rowe"),
    ])
    session.add(Voyage(
        id=1,
        number="46",
        start_date=datetime(2023, 11, 6),
        end_date=datetime(2023, 12, 17),
        solo_project_deadline=datetime(2023, 10, 1),
    ))
    session.add_all([
        Sprint(id=4, voyage_id=1, number=1, start_date=datetime(2023, 11, 6), end_date=datetime(2023, 11, 12)),
        Sprint(id=5, voyage_id=1, number=2, start_date=datetime(2023, 11, 13), end_date=datetime(2023, 11, 19)),
        Sprint(id=6, voyage_id=1, number=3, start_date=datetime(2023, 11, 20), end_date=datetime(2023, 11, 26)),
    ])
    session.add_all([
        VoyageTeam(id=1, voyage_id=1, name="v46-tier3-team-35", end_date=datetime(2023, 12, 6)),
        VoyageTeam(id=2, voyage_id=1, name="v46-tier2-team-36"),
    ])
    session.add_all([
        VoyageTeamMember(id=3, user_id=1, voyage_team_id=1, hr_per_sprint=10),
        VoyageTeamMember(id=4, user_id=2, voyage_team_id=1, hr_per_sprint=12),
        VoyageTeamMember(id=5, user_id=3, voyage_team_id=2, hr_per_sprint=8),
    ])
    session.add(TeamMeeting(id=10, sprint_id=5, voyage_team_id=1, title="Sprint 2 review"))

    colors = OptionGroup(id=1, name="colors", option_choices=[
        OptionChoice(id=1, text="Red"),
        OptionChoice(id=2, text="Green"),
        OptionChoice(id=3, text="Blue"),
    ])
    yes_no = OptionGroup(id=2, name="yes-no", option_choices=[
        OptionChoice(id=4, text="Yes"),
        OptionChoice(id=5, text="No"),
    ])
    session.add_all([colors, yes_no])

    session.add(Form(id=7, title="Retrospective & Review", form_type=FormType.MEETING, questions=[
        Question(id=1, order=1, text="What went right?", input_type=InputType.TEXT, answer_required=True),
        Question(id=2, order=2, text="Rate the sprint", input_type=InputType.NUMERIC),
        Question(id=3, order=3, text="Was the demo done?", input_type=InputType.BOOLEAN),
        Question(id=4, order=4, text="Favourite color", input_type=InputType.SINGLE_CHOICE,
                 option_group=colors),
        Question(id=5, order=5, text="Colors used", input_type=InputType.MULTI_CHOICE,
                 multiple_allowed=True, option_group=colors),
        Question(id=6, order=6, text="Pick one color", input_type=InputType.MULTI_CHOICE,
                 multiple_allowed=False, option_group=colors),
    ]))
    session.add(Form(id=8, title="Sprint Planning", form_type=FormType.MEETING, questions=[
        Question(id=10, order=1, text="Sprint Goal", input_type=InputType.TEXT, answer_required=True),
    ]))
    session.add(Form(id=9, title="Sprint Check-in", form_type=FormType.CHECKIN, questions=[
        Question(id=20, order=1, text="Hours spent", input_type=InputType.NUMERIC, answer_required=True),
        Question(id=21, order=2, text="On track?", input_type=InputType.BOOLEAN, answer_required=True),
        Question(id=22, order=3, text="Did you pair program?", input_type=InputType.SINGLE_CHOICE,
                 option_group=yes_no),
        Question(id=23, order=4, text="Comments", input_type=InputType.TEXT),
    ]))
    session.add(Form(id=11, title="Voyage Application", form_type=FormType.OTHER, questions=[
        Question(id=30, order=1, text="Why do you want to join?", input_type=InputType.TEXT),
    ]))

    session.commit()
    session.close()


# =============================================================================
# API FIXTURES
# =============================================================================

def _make_client(session_factory, actor):
    from voyages.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: actor
    return app


@pytest.fixture
def client(session_factory, voyage_data) -> Generator[TestClient, None, None]:
    """Client acting as an admin."""
    app = _make_client(session_factory, ADMIN)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def voyager_client(session_factory, voyage_data) -> Generator[TestClient, None, None]:
    """Client acting as user 1, member 3 of team 1."""
    app = _make_client(session_factory, VOYAGER)
    yield TestClient(app)
    app.dependency_overrides.clear()
