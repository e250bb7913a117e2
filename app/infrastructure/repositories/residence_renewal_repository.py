"""Persistence layer for residence renewal history."""

from sqlalchemy.orm import Session

from app.domain.entities import ResidenceRenewal
from app.infrastructure.models import ResidenceRenewalModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class ResidenceRenewalRepository:
    """Provide create/list helpers for :class:`ResidenceRenewal` entries."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, renewal: ResidenceRenewal, *, commit: bool = True) -> ResidenceRenewal:
        model = ResidenceRenewalModel(
            user_id=renewal.user_id,
            old_expiry_date=renewal.old_expiry_date,
            new_expiry_date=renewal.new_expiry_date,
            renewal_period_months=renewal.renewal_period_months,
            processed_by=renewal.processed_by,
            processed_at=(
                ensure_app_naive_datetime(renewal.processed_at)
                or ensure_app_naive_datetime(now_in_app_timezone())
            ),
            notes=renewal.notes,
        )
        self.session.add(model)
        if commit:
            self.session.commit()
            self.session.refresh(model)
        else:
            self.session.flush()
        return self._to_entity(model)

    def list_for_user(self, user_id: int) -> list[ResidenceRenewal]:
        query = (
            self.session.query(ResidenceRenewalModel)
            .filter(ResidenceRenewalModel.user_id == user_id)
            .order_by(ResidenceRenewalModel.processed_at.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: ResidenceRenewalModel) -> ResidenceRenewal:
        return ResidenceRenewal(
            id=model.id,
            user_id=model.user_id,
            old_expiry_date=model.old_expiry_date,
            new_expiry_date=model.new_expiry_date,
            renewal_period_months=model.renewal_period_months,
            processed_by=model.processed_by,
            processed_at=ensure_app_timezone(model.processed_at),
            notes=model.notes,
        )


__all__ = ["ResidenceRenewalRepository"]
