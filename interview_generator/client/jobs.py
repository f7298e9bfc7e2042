"""
Job lifecycle controller.

After a checkout session is paid, the returned session token is redeemed
for a generation job, which is then polled at a fixed interval until it
completes or fails.

States:
    IDLE -> STARTING -> PENDING -> COMPLETED | FAILED
    STARTING -> FAILED (start request error)

There is no retry and no backoff: a terminal state ends the lifecycle for
that token, and the same token is never started twice.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, List, Optional, Sequence, Set

from interview_generator.client.api import InterviewApiClient
from interview_generator.client.notifications import Notification, NotificationSink
from interview_generator.client.state import ApplicationState
from interview_generator.core.config import settings
from interview_generator.core.constants import (
    ERROR_TITLE,
    SUCCESS_DESCRIPTION,
    SUCCESS_TITLE,
    UNEXPECTED_ERROR_MESSAGE,
)
from interview_generator.core.exceptions import AppError
from interview_generator.core.logger import set_correlation_id
from interview_generator.schemas.interview import Interview

logger = logging.getLogger(__name__)


class JobPhase(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class JobLifecycleController:
    """
    Starts one generation job per payment-return token and polls it to a terminal state.

    The polling task is owned by the controller: it is cancelled on close(),
    and after that no state is mutated and no notification is emitted.
    """

    def __init__(
        self,
        api: InterviewApiClient,
        state: ApplicationState,
        notifications: NotificationSink,
        poll_interval: Optional[float] = None,
        development_mode: Optional[bool] = None,
        sample_interviews: Optional[Sequence[Interview]] = None,
    ):
        self._api = api
        self._state = state
        self._notifications = notifications
        self.poll_interval = settings.JOB_STATUS_POLLING_INTERVAL if poll_interval is None else poll_interval
        self.development_mode = settings.DEVELOPMENT_MODE if development_mode is None else development_mode
        self._sample_interviews = sample_interviews

        self._started_tokens: Set[str] = set()
        self._task: Optional[asyncio.Task] = None
        self._closed = False

        self.phase = JobPhase.IDLE
        self.job_id: Optional[str] = None
        self.progress = 0

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, session_id: Optional[str]) -> Optional[asyncio.Task]:
        """
        Start generation for a payment-return token.

        Must be called from a running event loop. Returns the polling task, or
        None when there is nothing to poll (no token, token already started,
        or development mode).
        """
        if self._closed:
            raise RuntimeError("JobLifecycleController is closed")
        if not session_id:
            return None
        if session_id in self._started_tokens:
            logger.debug(f"Session {session_id} already started; ignoring")
            return None
        self._started_tokens.add(session_id)

        if self.development_mode:
            self._load_samples()
            return None

        if self.active:
            # Only one job is tracked at a time; a newer token replaces the old one
            logger.warning(f"Replacing tracked job {self.job_id} with a new session")
            self._task.cancel()
            self.job_id = None

        self.phase = JobPhase.STARTING
        self.progress = 0
        self._state.set_interviewing(True)
        self._task = asyncio.create_task(self._run(session_id), name=f"interview-job-{session_id}")
        return self._task

    async def wait(self) -> JobPhase:
        """Wait for the tracked job (if any) to reach a terminal state."""
        task = self._task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                # Only swallow the cancellation of the job task itself
                if not task.cancelled():
                    raise
        return self.phase

    async def close(self) -> None:
        """Cancel outstanding polling; safe to call more than once."""
        self._closed = True
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Job polling cancelled on teardown")

    async def __aenter__(self) -> "JobLifecycleController":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _run(self, session_id: str) -> None:
        set_correlation_id(session_id)
        try:
            job = await self._api.start_interviews(session_id)
            self.job_id = job.jobId
            self.phase = JobPhase.PENDING
            logger.info(f"Interview job {self.job_id} started for session {session_id}")

            # First poll is immediate; later polls wait a fixed interval
            while self.job_id is not None:
                status = await self._api.fetch_status(self.job_id)

                if not status.is_terminal:
                    self.progress = status.progress or 0
                    logger.info(f"Interview job {self.job_id}: {self.progress}% complete")
                    await asyncio.sleep(self.poll_interval)
                elif status.status == "completed":
                    self._complete(status.data or [])
                else:
                    self._fail(status.error or UNEXPECTED_ERROR_MESSAGE)

        except AppError as e:
            logger.error(f"Interview job for session {session_id} failed: {e.message}")
            self._fail(e.message)
        except Exception as e:
            logger.error(f"Unexpected error tracking session {session_id}: {e}", exc_info=True)
            self._fail(str(e) or UNEXPECTED_ERROR_MESSAGE)

    def _complete(self, interviews: List[Interview]) -> None:
        logger.info(f"Interview job {self.job_id} completed with {len(interviews)} interview(s)")
        self._state.set_interviews(interviews)
        self._state.set_interviewing(False)
        self.job_id = None
        self.phase = JobPhase.COMPLETED
        self._notifications.notify(Notification(SUCCESS_TITLE, SUCCESS_DESCRIPTION))

    def _fail(self, message: str) -> None:
        self._state.set_interviewing(False)
        self.job_id = None
        self.phase = JobPhase.FAILED
        self._notifications.notify(Notification(ERROR_TITLE, message, variant="destructive"))

    def _load_samples(self) -> None:
        if self._sample_interviews is None:
            from interview_generator.data.sample_interviews import SAMPLE_INTERVIEWS
            self._sample_interviews = SAMPLE_INTERVIEWS
        logger.info("Development mode: loading sample interviews instead of starting a job")
        self._state.set_interviews(self._sample_interviews)
        self.phase = JobPhase.COMPLETED
