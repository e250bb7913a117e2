"""Persistence layer for residence notification audit records."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import NotificationTier, ResidenceNotificationAudit
from app.infrastructure.models import ResidenceNotificationModel
from app.utils import (
    app_day_bounds,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class ResidenceNotificationRepository:
    """Provide CRUD helpers for :class:`ResidenceNotificationAudit` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(
        self, entry: ResidenceNotificationAudit, *, commit: bool = True
    ) -> ResidenceNotificationAudit:
        model = ResidenceNotificationModel()
        self._apply_entity_to_model(model, entry)
        self.session.add(model)
        if commit:
            self.session.commit()
            self.session.refresh(model)
        else:
            self.session.flush()
        return self._to_entity(model)

    def list(
        self, *, user_id: int | None = None, limit: int | None = 200
    ) -> list[ResidenceNotificationAudit]:
        """Return audit rows, newest first, optionally for a single user."""

        query = self.session.query(ResidenceNotificationModel)
        if user_id is not None:
            query = query.filter(ResidenceNotificationModel.user_id == user_id)
        query = query.order_by(
            ResidenceNotificationModel.sent_at.desc(),
            ResidenceNotificationModel.id.desc(),
        )
        if limit is not None:
            query = query.limit(limit)
        models: Iterable[ResidenceNotificationModel] = query.all()
        return [self._to_entity(model) for model in models]

    def exists(
        self,
        *,
        user_id: int,
        tier: NotificationTier,
        expiry_date: date,
        sent_on: date | None = None,
    ) -> bool:
        """Return ``True`` when ``tier`` already fired for this expiry date.

        When ``sent_on`` is given only rows sent on that calendar day count.
        """

        query = (
            self.session.query(ResidenceNotificationModel.id)
            .filter(ResidenceNotificationModel.user_id == user_id)
            .filter(ResidenceNotificationModel.notification_type == tier.value)
            .filter(ResidenceNotificationModel.expiry_date == expiry_date)
        )
        if sent_on is not None:
            day_start, day_end = app_day_bounds(sent_on)
            query = query.filter(ResidenceNotificationModel.sent_at >= day_start)
            query = query.filter(ResidenceNotificationModel.sent_at < day_end)
        return query.first() is not None

    @staticmethod
    def _to_entity(model: ResidenceNotificationModel) -> ResidenceNotificationAudit:
        return ResidenceNotificationAudit(
            id=model.id,
            user_id=model.user_id,
            tier=NotificationTier(model.notification_type),
            expiry_date=model.expiry_date,
            days_until_expiry=model.days_until_expiry,
            sent_to=model.sent_to or "",
            is_processed=bool(model.is_processed),
            sent_at=ensure_app_timezone(model.sent_at),
        )

    @staticmethod
    def _apply_entity_to_model(
        model: ResidenceNotificationModel, entry: ResidenceNotificationAudit
    ) -> None:
        model.user_id = entry.user_id
        model.notification_type = entry.tier.value
        model.expiry_date = entry.expiry_date
        model.days_until_expiry = entry.days_until_expiry
        model.sent_to = entry.sent_to
        model.is_processed = entry.is_processed
        model.sent_at = (
            ensure_app_naive_datetime(entry.sent_at)
            or ensure_app_naive_datetime(now_in_app_timezone())
        )


__all__ = ["ResidenceNotificationRepository"]
