"""Residence expiry sweep: evaluate tracked persons and dispatch due tiers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.domain.entities import (
    REPEATING_TIERS,
    DispatchResult,
    NotificationTier,
    PersonSweepResult,
    SweepReport,
    User,
)
from app.infrastructure.database import SessionLocal
from app.infrastructure.notifications import dispatch_notification
from app.infrastructure.residence_store import (
    ResidenceNotificationStore,
    SqlAlchemyResidenceStore,
)
from app.utils import now_in_app_timezone

from .dispatcher import ResidenceNotificationDispatcher
from .evaluator import SKIP_NOT_FOUND, evaluate_person, skip_reason

logger = logging.getLogger(__name__)


class ResidenceExpiryService:
    """Run the evaluate-then-dispatch pipeline over one or all persons."""

    def __init__(
        self,
        store: ResidenceNotificationStore,
        dispatcher: ResidenceNotificationDispatcher,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
        dedupe: bool = True,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._clock = clock
        self._dedupe = dedupe

    def run_sweep(self) -> SweepReport:
        """Evaluate every active person with an expiry date.

        A failure for one person never stops the sweep. A failure loading the
        persons or the oversight users ends the run with ``report.error`` set.
        """

        report = SweepReport(started_at=self._clock())
        logger.info("Running residence notification check")
        try:
            persons = self._store.get_all_active_persons_with_expiry()
            oversight_users = self._store.get_oversight_users()
        except Exception as exc:
            logger.exception("Residence notification check aborted")
            report.error = str(exc) or exc.__class__.__name__
            report.finished_at = self._clock()
            return report

        today = report.started_at.date()
        for person in persons:
            report.results.append(self._process_person(person, oversight_users, today))

        report.finished_at = self._clock()
        logger.info(
            "Residence notification check completed: %d evaluated, %d skipped, "
            "%d notifications created, %d failures",
            report.persons_evaluated,
            report.persons_skipped,
            report.notifications_created,
            len(report.failures),
        )
        return report

    def run_sweep_for_person(self, person_id: int) -> SweepReport:
        """Re-check a single person right after their expiry date changed."""

        report = SweepReport(started_at=self._clock())
        logger.info("Running residence check for user %s", person_id)
        try:
            person = self._store.get_person(person_id)
            if person is None:
                logger.info("User %s not found; residence check skipped", person_id)
                report.results.append(
                    PersonSweepResult(user_id=person_id, skipped_reason=SKIP_NOT_FOUND)
                )
            else:
                oversight_users: Sequence[User] = ()
                if skip_reason(person) is None:
                    oversight_users = self._store.get_oversight_users()
                report.results.append(
                    self._process_person(
                        person, oversight_users, report.started_at.date()
                    )
                )
        except Exception as exc:
            logger.exception("Residence check for user %s aborted", person_id)
            report.error = str(exc) or exc.__class__.__name__
        report.finished_at = self._clock()
        return report

    def _process_person(
        self, person: User, oversight_users: Sequence[User], today: date
    ) -> PersonSweepResult:
        result = PersonSweepResult(user_id=person.id)
        reason = skip_reason(person)
        if reason is not None:
            logger.debug("Skipping user %s: %s", person.id, reason)
            result.skipped_reason = reason
            return result

        evaluation = evaluate_person(person, today)
        if evaluation is None:  # pragma: no cover - covered by skip_reason
            return result
        result.days_until_expiry = evaluation.days_until_expiry
        result.tiers = list(evaluation.tiers)
        logger.debug(
            "User %s: %d days until residence expiry",
            person.id,
            evaluation.days_until_expiry,
        )
        if evaluation.days_until_expiry < 0:
            logger.warning(
                "Residence of user %s expired %d days ago; no notification tier applies",
                person.id,
                -evaluation.days_until_expiry,
            )

        for tier in evaluation.tiers:
            try:
                if self._already_sent(person.id, tier, evaluation.expiry_date, today):
                    result.already_sent.append(tier)
                    continue
            except Exception as exc:
                logger.exception(
                    "Could not read residence audit for user %s, tier %s",
                    person.id,
                    tier.value,
                )
                result.dispatches.append(
                    DispatchResult.err(tier, str(exc) or exc.__class__.__name__)
                )
                continue
            result.dispatches.append(
                self._dispatcher.dispatch(
                    person,
                    tier,
                    expiry_date=evaluation.expiry_date,
                    days_until_expiry=evaluation.days_until_expiry,
                    oversight_users=oversight_users,
                )
            )
        return result

    def _already_sent(
        self, person_id: int, tier: NotificationTier, expiry_date: date, today: date
    ) -> bool:
        if not self._dedupe:
            return False
        if tier in REPEATING_TIERS:
            return self._store.has_audit(person_id, tier, expiry_date, sent_on=today)
        return self._store.has_audit(person_id, tier, expiry_date)


def build_residence_expiry_service(
    session_factory: Callable[[], Session] | None = None,
    settings: Settings | None = None,
) -> ResidenceExpiryService:
    """Wire the service against the SQLAlchemy store and realtime publisher."""

    settings = settings or get_settings()
    store = SqlAlchemyResidenceStore(session_factory or SessionLocal)
    dispatcher = ResidenceNotificationDispatcher(
        store,
        language=settings.notification_language,
        publish=dispatch_notification,
    )
    return ResidenceExpiryService(
        store, dispatcher, dedupe=settings.residence_dedupe_notifications
    )


__all__ = ["ResidenceExpiryService", "build_residence_expiry_service"]
