"""
Subscription plan settings - monthly fee tiers used at signup
"""
import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from app.domain.fees import SubscriptionPlans, DEFAULT_PLANS
from app.infrastructure.db.models import SubscriptionPlanModel

logger = logging.getLogger(__name__)


class SubscriptionPlanValidationError(ValueError):
    pass


def _get_row(db: Session) -> SubscriptionPlanModel | None:
    return db.query(SubscriptionPlanModel).order_by(SubscriptionPlanModel.id.asc()).first()


def get_subscription_plans(db: Session) -> SubscriptionPlans:
    """Stored plans, or the defaults (63 / 75 / above 5 members) if none were saved."""
    row = _get_row(db)
    if not row:
        return DEFAULT_PLANS
    return SubscriptionPlans(
        standard=Decimal(row.standard),
        large_family=Decimal(row.large_family),
        large_family_threshold=row.large_family_threshold,
    )


class UpdateSubscriptionPlansUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, standard, large_family, large_family_threshold: int) -> SubscriptionPlans:
        try:
            standard = Decimal(str(standard))
            large_family = Decimal(str(large_family))
        except InvalidOperation:
            raise SubscriptionPlanValidationError("Invalid fee amount")

        if standard <= 0 or large_family <= 0:
            raise SubscriptionPlanValidationError("Fees must be positive")
        if large_family_threshold < 1:
            raise SubscriptionPlanValidationError("Large family threshold must be at least 1")

        row = _get_row(self.db)
        if row is None:
            row = SubscriptionPlanModel(
                standard=standard,
                large_family=large_family,
                large_family_threshold=large_family_threshold,
            )
            self.db.add(row)
        else:
            row.standard = standard
            row.large_family = large_family
            row.large_family_threshold = large_family_threshold
        self.db.commit()

        logger.info(
            "Subscription plans updated: standard=%s large_family=%s threshold=%s",
            standard, large_family, large_family_threshold,
        )
        return get_subscription_plans(self.db)
