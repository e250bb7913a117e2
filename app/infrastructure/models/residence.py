"""SQLAlchemy models for residence notification audit rows and renewals."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class ResidenceNotificationModel(Base):
    """Audit trail of residence expiry tiers that have fired."""

    __tablename__ = "residence_notification"
    __table_args__ = (
        Index(
            "ix_residence_notification_user_tier_expiry",
            "user_id",
            "notification_type",
            "expiry_date",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    notification_type = Column(String(20), nullable=False)
    expiry_date = Column(Date, nullable=False)
    days_until_expiry = Column(Integer, nullable=False)
    sent_to = Column(String(255), nullable=False, default="")
    is_processed = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    sent_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


class ResidenceRenewalModel(Base):
    """History of residence permit renewals."""

    __tablename__ = "residence_renewal"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    old_expiry_date = Column(Date, nullable=True)
    new_expiry_date = Column(Date, nullable=False)
    renewal_period_months = Column(Integer, nullable=False)
    processed_by = Column(Integer, ForeignKey("user.id"), nullable=False)
    processed_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    notes = Column(Text, nullable=True)


__all__ = ["ResidenceNotificationModel", "ResidenceRenewalModel"]
