"""
HTTP access to the payment boundary and the generation backend.

Every failure (network error, non-2xx, unparseable body) is raised as an
AppError subclass so callers only have one family of exceptions to handle.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from interview_generator.core.config import settings
from interview_generator.core.constants import (
    CHECKOUT_ENDPOINT,
    INTERVIEW_STATUS_ENDPOINT,
    START_FAILED_MESSAGE,
    START_INTERVIEWS_ENDPOINT,
    UNEXPECTED_ERROR_MESSAGE,
)
from interview_generator.core.exceptions import CheckoutError, JobStartError, JobStatusError
from interview_generator.schemas.interview import CheckoutRequest, CheckoutSession, JobResponse, JobStatus

logger = logging.getLogger(__name__)


def _error_field(response: httpx.Response, field: str) -> Optional[str]:
    """Read a message field from a JSON error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get(field):
        return str(body[field])
    return None


class InterviewApiClient:
    """
    Client for the checkout route (this app) and the job endpoints (generation backend).

    Args:
        http_client: Shared httpx.AsyncClient (created with the configured timeout if omitted)
        app_url: Base URL of the checkout/export server
        api_url: Base URL of the generation backend
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        app_url: Optional[str] = None,
        api_url: Optional[str] = None,
    ):
        self._owns_client = http_client is None
        self.http = http_client or httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT)
        self.app_url = (app_url or settings.APP_URL).rstrip("/")
        self.api_url = (api_url or settings.API_URL).rstrip("/")

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    async def __aenter__(self) -> "InterviewApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def create_checkout_session(self, checkout: CheckoutRequest) -> CheckoutSession:
        """POST the profile to the payment boundary and return the session."""
        try:
            response = await self.http.post(f"{self.app_url}{CHECKOUT_ENDPOINT}", json=checkout.model_dump())
        except httpx.HTTPError as e:
            raise CheckoutError(f"Checkout request failed: {e}") from e

        if response.is_error:
            message = _error_field(response, "error")
            raise CheckoutError(
                message or f"Checkout request failed with status: {response.status_code}",
                details={"status": response.status_code},
            )

        try:
            return CheckoutSession.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise CheckoutError(f"Invalid checkout session response: {e}") from e

    async def start_interviews(self, session_id: str) -> JobResponse:
        """Redeem a paid checkout session for a generation job."""
        try:
            response = await self.http.post(
                f"{self.api_url}{START_INTERVIEWS_ENDPOINT}", json={"sessionId": session_id}
            )
        except httpx.HTTPError as e:
            raise JobStartError(f"{START_FAILED_MESSAGE}: {e}") from e

        if response.is_error:
            raise JobStartError(
                _error_field(response, "message") or START_FAILED_MESSAGE,
                details={"status": response.status_code},
            )

        try:
            return JobResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise JobStartError(f"Invalid job start response: {e}") from e

    async def fetch_status(self, job_id: str) -> JobStatus:
        """Fetch the current status of a generation job."""
        try:
            response = await self.http.get(f"{self.api_url}{INTERVIEW_STATUS_ENDPOINT}/{job_id}")
        except httpx.HTTPError as e:
            raise JobStatusError(f"{UNEXPECTED_ERROR_MESSAGE}: {e}") from e

        if response.is_error:
            raise JobStatusError(
                _error_field(response, "error") or UNEXPECTED_ERROR_MESSAGE,
                details={"status": response.status_code},
            )

        try:
            return JobStatus.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise JobStatusError(f"Invalid job status response: {e}") from e
