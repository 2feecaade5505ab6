"""Complaints and feedback"""
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.domain.booking import COMPLAINT_PENDING, COMPLAINT_STATUSES
from app.infrastructure.db.models import ComplaintModel, FeedbackModel
from app.utils.refs import new_ref


class ComplaintValidationError(ValueError):
    pass


class CreateComplaintUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        household_id: str,
        issue: str,
        details: str,
        photo: str | None = None,
        now: datetime | None = None,
    ) -> ComplaintModel:
        issue = (issue or "").strip()
        if not issue:
            raise ComplaintValidationError("Select the issue")

        complaint = ComplaintModel(
            complaint_ref=new_ref("CMPT"),
            household_id=household_id,
            issue=issue,
            details=(details or "").strip(),
            photo=photo,
            status=COMPLAINT_PENDING,
            created_at=now or datetime.now(timezone.utc),
        )
        self.db.add(complaint)
        self.db.commit()
        return complaint


class UpdateComplaintStatusUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, complaint_id: int, status: str) -> ComplaintModel:
        if status not in COMPLAINT_STATUSES:
            raise ComplaintValidationError(f"Unknown status: {status}")
        complaint = self.db.query(ComplaintModel).filter(ComplaintModel.id == complaint_id).first()
        if not complaint:
            raise ComplaintValidationError(f"Complaint #{complaint_id} not found")
        complaint.status = status
        self.db.commit()
        return complaint


def list_complaints(db: Session, household_id: str | None = None) -> list[ComplaintModel]:
    query = db.query(ComplaintModel)
    if household_id:
        query = query.filter(ComplaintModel.household_id == household_id)
    return query.order_by(ComplaintModel.created_at.desc(), ComplaintModel.id.desc()).all()


class AddFeedbackUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, household_id: str, feedback_text: str, rating: int, now: datetime | None = None) -> FeedbackModel:
        feedback_text = (feedback_text or "").strip()
        if not feedback_text:
            raise ComplaintValidationError("Feedback cannot be empty")
        if rating not in (1, 2, 3, 4, 5):
            raise ComplaintValidationError("Rating must be between 1 and 5")

        feedback = FeedbackModel(
            household_id=household_id,
            feedback_text=feedback_text,
            rating=rating,
            created_at=now or datetime.now(timezone.utc),
        )
        self.db.add(feedback)
        self.db.commit()
        return feedback


def list_feedback(db: Session) -> list[FeedbackModel]:
    return db.query(FeedbackModel).order_by(FeedbackModel.created_at.desc()).all()
