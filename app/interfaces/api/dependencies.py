"""FastAPI dependency utilities."""

from collections.abc import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.application.use_cases.residence import build_residence_expiry_service
from app.config import get_settings
from app.domain.entities import User, UserRole
from app.infrastructure.database import get_db
from app.infrastructure.repositories import UserRepository
from app.infrastructure.scheduler import ResidenceNotificationScheduler
from app.infrastructure.security import decode_access_token, password_signature

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_exception(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    username = payload.get("sub")
    signature_claim = payload.get("pwd_sig")
    if not isinstance(username, str) or not isinstance(signature_claim, str):
        raise _credentials_exception()

    user = UserRepository(db).get_by_username(username)
    if user is None:
        raise _credentials_exception("User not found")

    if signature_claim != password_signature(user.password, user.is_active):
        raise _credentials_exception()

    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """Build a dependency that only lets users with one of ``roles`` through."""

    allowed = frozenset(roles)

    def _dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized",
            )
        return current_user

    return _dependency


def get_residence_scheduler(request: Request) -> ResidenceNotificationScheduler:
    """Return the scheduler owned by the running application.

    Apps built without the lifespan (e.g. some tests) get an idle scheduler
    that runs person checks inline.
    """

    scheduler = getattr(request.app.state, "residence_scheduler", None)
    if scheduler is None:
        settings = get_settings()
        scheduler = ResidenceNotificationScheduler(
            build_residence_expiry_service,
            interval_hours=settings.residence_check_interval_hours,
        )
        request.app.state.residence_scheduler = scheduler
    return scheduler
