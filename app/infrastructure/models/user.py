"""SQLAlchemy model for the staff user table."""

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, func
from sqlalchemy.sql import expression

from app.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a staff member."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    full_name = Column(String(120), nullable=False)
    email = Column(String(120), nullable=False, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(30), nullable=False, default="admin_staff", index=True)
    is_active = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    nationality = Column(String(20), nullable=False, default="saudi")
    residence_number = Column(String(50), nullable=True)
    residence_expiry_date = Column(Date, nullable=True, index=True)
    residence_status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())


__all__ = ["UserModel"]
