from fastapi import status
from typing import Any, Dict, List, Optional


class VoyagesError(Exception):
    """Base class for errors the API reports to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(detail)
        self.detail = detail
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        payload = {"detail": self.detail}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class NotFoundError(VoyagesError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(VoyagesError):
    status_code = status.HTTP_409_CONFLICT


class BadRequestError(VoyagesError):
    status_code = status.HTTP_400_BAD_REQUEST


class FormValidationError(VoyagesError):
    """Answers do not fit the form. Carries every violation found."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, violations: List[Dict[str, Any]]):
        question_ids = sorted({v["question_id"] for v in violations})
        super().__init__(
            f"Invalid responses for question(s): {', '.join(str(q) for q in question_ids)}",
            errors=violations,
        )
        self.violations = violations

    @property
    def question_ids(self) -> List[int]:
        return sorted({v["question_id"] for v in self.violations})
