from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from voyages.db.session import get_db
from voyages.core.security.auth import Actor, get_current_user
from voyages.core.security.permissions import (
    Action, PolicyEvaluator, ResourceRef, ensure_permitted, get_policy
)
from voyages.crud.forms import get_form_schema, list_forms, serialize_form
from voyages.models.form import FormType

router = APIRouter(prefix="/forms", tags=["forms"])

@router.get("/")
def get_forms(
    form_type: Optional[FormType] = None,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """List forms, optionally only those of one type"""
    ensure_permitted(policy, current_user, Action.READ, ResourceRef("Form"))
    return [serialize_form(form) for form in list_forms(db, form_type)]

@router.get("/{form_id}")
def get_form(
    form_id: int,
    db: Session = Depends(get_db),
    current_user: Actor = Depends(get_current_user),
    policy: PolicyEvaluator = Depends(get_policy),
):
    """Get a form with its questions and option choices"""
    ensure_permitted(policy, current_user, Action.READ, ResourceRef("Form", {"form_id": form_id}))
    return serialize_form(get_form_schema(db, form_id))
