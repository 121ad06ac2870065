from sqlalchemy import Column, Integer, String, ForeignKey, Text, Boolean, Enum, event
from sqlalchemy.orm import relationship
import enum
from voyages.db.base import Base

class FormType(enum.Enum):
    MEETING = "meeting"
    CHECKIN = "checkin"
    OTHER = "other"

class InputType(enum.Enum):
    TEXT = "text"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"

    @property
    def is_choice(self) -> bool:
        return self in (InputType.SINGLE_CHOICE, InputType.MULTI_CHOICE)

class Form(Base):
    __tablename__ = "forms"
    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    form_type = Column(Enum(FormType), nullable=False)

    questions = relationship(
        "Question",
        back_populates="form",
        order_by="Question.order",
        cascade="all, delete-orphan",
    )

class OptionGroup(Base):
    __tablename__ = "option_groups"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)

    option_choices = relationship(
        "OptionChoice",
        back_populates="option_group",
        order_by="OptionChoice.id",
        cascade="all, delete-orphan",
    )
    questions = relationship("Question", back_populates="option_group")

class OptionChoice(Base):
    __tablename__ = "option_choices"
    id = Column(Integer, primary_key=True)
    option_group_id = Column(Integer, ForeignKey("option_groups.id"), nullable=False)
    text = Column(String, nullable=False)

    option_group = relationship("OptionGroup", back_populates="option_choices")

class Question(Base):
    __tablename__ = "questions"
    id = Column(Integer, primary_key=True)
    form_id = Column(Integer, ForeignKey("forms.id"), nullable=False)
    order = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    input_type = Column(Enum(InputType), nullable=False)
    answer_required = Column(Boolean, nullable=False, default=False)
    multiple_allowed = Column(Boolean, nullable=False, default=False)
    option_group_id = Column(Integer, ForeignKey("option_groups.id"), nullable=True)

    form = relationship("Form", back_populates="questions")
    option_group = relationship("OptionGroup", back_populates="questions", lazy="joined")
    responses = relationship("Response", back_populates="question")

    def choice_ids(self) -> set:
        if self.option_group is None:
            return set()
        return {choice.id for choice in self.option_group.option_choices}


@event.listens_for(Question, "before_insert")
@event.listens_for(Question, "before_update")
def validate_option_group(mapper, connection, question):
    # Choice questions are meaningless without the choices to pick from
    if question.input_type is not None and question.input_type.is_choice:
        if question.option_group is None and question.option_group_id is None:
            raise ValueError(
                f"Question '{question.text}' is a {question.input_type.value} "
                "question and needs an option group"
            )
