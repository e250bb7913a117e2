"""Background scheduler that runs residence expiry sweeps."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from app.application.use_cases.residence import ResidenceExpiryService
from app.domain.entities import SweepReport
from app.utils import get_app_timezone

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "residence-expiry-sweep"
PERSON_JOB_PREFIX = "residence-expiry-person-"


class ResidenceNotificationScheduler:
    """Own the timer that drives :class:`ResidenceExpiryService`.

    ``start`` runs one sweep immediately and then one every
    ``interval_hours``. Sweeps never overlap (``max_instances=1``) and missed
    runs collapse into one (``coalesce=True``).
    """

    def __init__(
        self,
        service_factory: Callable[[], ResidenceExpiryService],
        *,
        interval_hours: float = 24,
        scheduler: BaseScheduler | None = None,
    ) -> None:
        if interval_hours <= 0:
            raise ValueError("interval_hours must be positive")
        self._service_factory = service_factory
        self._interval_hours = interval_hours
        self._scheduler = scheduler or BackgroundScheduler(
            daemon=True, timezone=get_app_timezone()
        )

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    @property
    def interval_hours(self) -> float:
        return self._interval_hours

    def start(self) -> None:
        if self.running:
            return
        logger.info(
            "Starting residence notification scheduler with %sh interval",
            self._interval_hours,
        )
        self._scheduler.add_job(
            self.run_sweep,
            trigger="interval",
            hours=self._interval_hours,
            id=SWEEP_JOB_ID,
            next_run_time=datetime.now(tz=get_app_timezone()),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()

    def stop(self, *, wait: bool = True) -> None:
        if not self.running:
            return
        logger.info("Stopping residence notification scheduler")
        self._scheduler.shutdown(wait=wait)

    def run_sweep(self) -> SweepReport | None:
        """Run one full sweep now, in the calling thread."""

        try:
            service = self._service_factory()
        except Exception:
            logger.exception("Could not build the residence expiry service")
            return None
        return service.run_sweep()

    def run_sweep_for_person(self, person_id: int) -> SweepReport | None:
        try:
            service = self._service_factory()
        except Exception:
            logger.exception("Could not build the residence expiry service")
            return None
        return service.run_sweep_for_person(person_id)

    def trigger_for_person(self, person_id: int) -> SweepReport | None:
        """Re-check ``person_id`` without waiting for the next tick.

        While the scheduler runs, the check is queued as a one-off job and
        ``None`` is returned. Otherwise it runs inline and its report is
        returned.
        """

        if not self.running:
            return self.run_sweep_for_person(person_id)
        self._scheduler.add_job(
            self.run_sweep_for_person,
            trigger="date",
            args=[person_id],
            id=f"{PERSON_JOB_PREFIX}{person_id}",
            replace_existing=True,
            misfire_grace_time=None,
        )
        return None


__all__ = ["ResidenceNotificationScheduler", "SWEEP_JOB_ID", "PERSON_JOB_PREFIX"]
