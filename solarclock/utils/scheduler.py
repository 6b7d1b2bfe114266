from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from apscheduler.job import Job  # type:ignore[import-untyped]
from apscheduler.jobstores.base import JobLookupError  # type:ignore[import-untyped]
from apscheduler.schedulers.background import BackgroundScheduler  # type:ignore[import-untyped]

from solarclock.utils.dates import local_now
from solarclock.utils.exceptions import SchedulerMisconfiguredError
from solarclock.utils.logging import log


def describe(func: Callable) -> str:
    return f"{func.__module__}.{func.__qualname__}"


class JobScheduler:
    """
    One-shot jobs on top of a BackgroundScheduler.
    Reusing a job ID replaces the pending job, which is how solar timers get re-armed.
    Jobs that fire late (e.g. after a suspended host wakes up) still run.
    """

    def __init__(self, apscheduler: BackgroundScheduler) -> None:
        if not isinstance(apscheduler, BackgroundScheduler):
            raise SchedulerMisconfiguredError(
                f"Expected a BackgroundScheduler, got {type(apscheduler).__name__}"
            )
        self.apscheduler = apscheduler

    def schedule_job(
        self,
        run_time: datetime,
        func: Callable,
        func_params: dict | None = None,
        job_id: str | None = None,
    ) -> str:
        """Run `func` once at `run_time`. Returns the job ID"""
        if run_time < local_now():
            raise ValueError(f"Refusing to schedule {describe(func)} in the past ({run_time})")

        job = self.apscheduler.add_job(
            func=func,
            trigger="date",
            run_date=run_time,
            id=job_id or str(uuid4()),
            name=describe(func),
            kwargs=func_params or {},
            replace_existing=True,
            misfire_grace_time=None,
        )
        log.info("Scheduled job", job_id=job.id, run_time=run_time.isoformat(), func=job.name)

        return str(job.id)

    def get_job(self, job_id: str) -> Job | None:
        return self.apscheduler.get_job(job_id)

    def cancel_job(self, job_id: str) -> None:
        """Drop a pending job. Unknown IDs are ignored"""
        try:
            self.apscheduler.remove_job(job_id)
        except JobLookupError:
            return
        log.info("Cancelled job", job_id=job_id)
