"""Client session: owns the shared state and wires the client components together."""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from interview_generator.client.api import InterviewApiClient
from interview_generator.client.checkout import CheckoutInitiator
from interview_generator.client.delivery import FileDelivery
from interview_generator.client.export import ExportTransport, InterviewExporter
from interview_generator.client.jobs import JobLifecycleController
from interview_generator.client.notifications import LoggingNotificationSink, NotificationSink
from interview_generator.client.state import ApplicationState
from interview_generator.core.config import settings

logger = logging.getLogger(__name__)


class InterviewGeneratorClient:
    """
    One client session (the equivalent of a browser tab).

    Usage:
        async with InterviewGeneratorClient() as client:
            await client.checkout.submit(profile)
            ...
            client.jobs.start(session_id)
            await client.jobs.wait()
            await client.exporter.export_all("csv")
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        notifications: Optional[NotificationSink] = None,
        delivery: Optional[FileDelivery] = None,
        app_url: Optional[str] = None,
        api_url: Optional[str] = None,
        **controller_options: Any,
    ):
        self._owns_http = http_client is None
        self.http = http_client or httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT)
        self.state = ApplicationState()
        self.notifications = notifications or LoggingNotificationSink()

        self.api = InterviewApiClient(self.http, app_url=app_url, api_url=api_url)
        self.checkout = CheckoutInitiator(self.api, self.state, self.notifications, return_url=app_url)
        self.jobs = JobLifecycleController(self.api, self.state, self.notifications, **controller_options)
        self.exporter = InterviewExporter(
            ExportTransport(self.http, app_url=app_url),
            delivery or FileDelivery(),
            self.state,
            self.notifications,
        )

    async def aclose(self) -> None:
        await self.jobs.close()
        if self._owns_http:
            await self.http.aclose()
        logger.debug("Client session closed")

    async def __aenter__(self) -> "InterviewGeneratorClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
