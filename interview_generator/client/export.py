"""
Export transport and export actions.

ExportTransport posts records to the export route and returns the named
payload; InterviewExporter wires transport, delivery and notifications for
the "Download Interviews" / "Download Examples" menu and per-row exports.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from interview_generator.client.delivery import FileDelivery
from interview_generator.client.notifications import Notification, NotificationSink
from interview_generator.client.state import ApplicationState
from interview_generator.core.config import settings
from interview_generator.core.constants import (
    DEFAULT_EXPORT_FILENAME,
    EXPORT_ERROR_TITLE,
    ExportFormat,
    get_export_format,
)
from interview_generator.core.exceptions import AppError, ExportError
from interview_generator.schemas.interview import ExportedFile, Interview

logger = logging.getLogger(__name__)

FILENAME_PATTERN = re.compile(r'filename="(.+)"')

Record = Union[Interview, Dict[str, Any]]


def extract_filename_from_header(content_disposition: str, default: str = DEFAULT_EXPORT_FILENAME) -> str:
    """Pull the suggested name out of a Content-Disposition header."""
    match = FILENAME_PATTERN.search(content_disposition or "")
    return match.group(1) if match else default


class ExportTransport:
    """Sends records to the export route; one request per export."""

    def __init__(self, http_client: httpx.AsyncClient, app_url: Optional[str] = None):
        self.http = http_client
        self.app_url = (app_url or settings.APP_URL).rstrip("/")

    async def export(self, path: str, records: Sequence[Record]) -> ExportedFile:
        """
        POST {"interviews": records} to path.

        Raises:
            ExportError: non-2xx response (carries the status) or network failure (status 0)
        """
        payload = [r.model_dump() if isinstance(r, Interview) else r for r in records]
        try:
            response = await self.http.post(f"{self.app_url}{path}", json={"interviews": payload})
        except httpx.HTTPError as e:
            raise ExportError(0, f"Export request failed: {e}") from e

        if response.is_error:
            raise ExportError(response.status_code)

        filename = extract_filename_from_header(response.headers.get("Content-Disposition", ""))
        media_type = response.headers.get("Content-Type", "application/octet-stream")
        logger.info(f"Export received: {filename} ({len(response.content)} bytes, {media_type})")
        return ExportedFile(content=response.content, filename=filename, media_type=media_type)


class InterviewExporter:
    """
    Export actions for the interview table and the form's download menu.
    Failures are logged and surfaced as one notification; nothing is raised.
    """

    def __init__(
        self,
        transport: ExportTransport,
        delivery: FileDelivery,
        state: ApplicationState,
        notifications: NotificationSink,
        examples: Optional[Sequence[Interview]] = None,
    ):
        self._transport = transport
        self._delivery = delivery
        self._state = state
        self._notifications = notifications
        self._examples = examples

    async def export_all(self, export_format: Union[str, ExportFormat]) -> Optional[Path]:
        """Export every generated interview, or the examples if none exist yet."""
        records: List[Interview] = self._state.interviews
        if not records:
            records = list(self._get_examples())
            logger.info("No generated interviews yet; exporting examples")
        return await self._export(records, export_format)

    async def export_one(self, interview: Interview, export_format: Union[str, ExportFormat]) -> Optional[Path]:
        """Export a single interview row."""
        return await self._export([interview], export_format)

    async def _export(self, records: Sequence[Record], export_format: Union[str, ExportFormat]) -> Optional[Path]:
        try:
            if isinstance(export_format, str):
                export_format = get_export_format(export_format)
            exported = await self._transport.export(export_format.path, records)
            return self._delivery.deliver(exported, export_format.new_tab)
        except (AppError, ValueError, OSError) as e:
            message = e.message if isinstance(e, AppError) else str(e)
            logger.error(f"Error exporting interviews: {message}")
            self._notifications.notify(Notification(EXPORT_ERROR_TITLE, message, variant="destructive"))
            return None

    def _get_examples(self) -> Sequence[Interview]:
        if self._examples is None:
            from interview_generator.data.sample_interviews import SAMPLE_INTERVIEWS
            self._examples = SAMPLE_INTERVIEWS
        return self._examples
