import logging
from sqlalchemy.orm import Session

from voyages.core.config.settings import get_settings
from voyages.models.form import Form, FormType, InputType, OptionChoice, OptionGroup, Question

logger = logging.getLogger(__name__)

# Option groups shared by the built-in forms
DEFAULT_OPTION_GROUPS = {
    "checkin-communication": [
        "Daily, we communicate all the time",
        "Several times a week",
        "Once a week",
        "We haven't communicated this sprint",
    ],
    "checkin-contribution": [
        "Design",
        "Frontend",
        "Backend",
        "Documentation",
        "Project management",
    ],
}

DEFAULT_FORMS = [
    {
        "title": "Retrospective & Review",
        "description": "Sprint retrospective and review, filled in during the team meeting.",
        "form_type": FormType.MEETING,
        "questions": [
            {"text": "What went right?", "input_type": InputType.TEXT},
            {"text": "What could be improved?", "input_type": InputType.TEXT},
            {"text": "What changes should be made for the next sprint?", "input_type": InputType.TEXT},
        ],
    },
    {
        "title": "Sprint Planning",
        "description": "Goals and timeline for the upcoming sprint.",
        "form_type": FormType.MEETING,
        "questions": [
            {"text": "Sprint Goal", "input_type": InputType.TEXT, "answer_required": True},
            {"text": "Timeline/Tasks", "input_type": InputType.TEXT},
        ],
    },
    {
        "title": "Sprint Check-in",
        "description": "Weekly check-in submitted by every voyage team member.",
        "form_type": FormType.CHECKIN,
        "questions": [
            {
                "text": "How often did you communicate with your team this sprint?",
                "input_type": InputType.SINGLE_CHOICE,
                "answer_required": True,
                "option_group": "checkin-communication",
            },
            {
                "text": "What did you contribute to this sprint?",
                "input_type": InputType.MULTI_CHOICE,
                "answer_required": True,
                "multiple_allowed": True,
                "option_group": "checkin-contribution",
            },
            {"text": "How many hours did you spend on the project?", "input_type": InputType.NUMERIC, "answer_required": True},
            {"text": "Are you on track with your tasks?", "input_type": InputType.BOOLEAN, "answer_required": True},
            {"text": "Anything else the team or the Chingu staff should know?", "input_type": InputType.TEXT},
        ],
    },
]


def _get_or_create_option_group(db: Session, name: str) -> OptionGroup:
    option_group = db.query(OptionGroup).filter(OptionGroup.name == name).first()
    if not option_group:
        option_group = OptionGroup(
            name=name,
            option_choices=[OptionChoice(text=choice) for choice in DEFAULT_OPTION_GROUPS[name]],
        )
        db.add(option_group)
    return option_group


def seed_default_forms(db: Session) -> int:
    """Create the built-in forms that do not exist yet. Returns how many were created."""
    created = 0
    option_groups = {}
    for form_data in DEFAULT_FORMS:
        if db.query(Form).filter(Form.title == form_data["title"]).first():
            continue
        questions = []
        for order, question_data in enumerate(form_data["questions"], start=1):
            option_group_name = question_data.get("option_group")
            if option_group_name and option_group_name not in option_groups:
                option_groups[option_group_name] = _get_or_create_option_group(db, option_group_name)
            questions.append(Question(
                order=order,
                text=question_data["text"],
                input_type=question_data["input_type"],
                answer_required=question_data.get("answer_required", False),
                multiple_allowed=question_data.get("multiple_allowed", False),
                option_group=option_groups.get(option_group_name),
            ))
        db.add(Form(
            title=form_data["title"],
            description=form_data["description"],
            form_type=form_data["form_type"],
            questions=questions,
        ))
        created += 1
    return created


def init_db(db: Session) -> None:
    """Initialize database with required data"""
    if not get_settings().SEED_DEFAULT_FORMS:
        return

    created = seed_default_forms(db)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        raise e
    if created:
        logger.info(f"Seeded {created} default form(s)")
