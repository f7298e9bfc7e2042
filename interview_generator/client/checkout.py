"""
Checkout initiator.

Turns a submitted profile into a Stripe checkout session and sends the user
to the hosted checkout page. Failures are logged and surfaced as a single
retryable notification; submitting again is the retry.
"""
from __future__ import annotations

import logging
import webbrowser
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError

from interview_generator.client.api import InterviewApiClient
from interview_generator.client.notifications import Notification, NotificationSink
from interview_generator.client.state import ApplicationState
from interview_generator.core.config import settings
from interview_generator.core.constants import CHECKOUT_ERROR_TITLE
from interview_generator.core.exceptions import AppError, CheckoutError
from interview_generator.core.logger import log_async_execution_time
from interview_generator.schemas.interview import CheckoutRequest, CheckoutSession, Profile

logger = logging.getLogger(__name__)

# Form field name -> Profile field name
FORM_FIELDS = {
    "role": "role",
    "industry": "industry",
    "experienceRange": "experience_range",
    "employeeRange": "company_size_range",
    "interviews": "desired_count",
}

FIELD_MESSAGES = {
    "role": "Role is required",
    "industry": "Industry is required",
    "experienceRange": 'Experience range must be in format "number-number" (e.g., "2-7")',
    "employeeRange": 'Company size must be in format "number-number" (e.g., "100-1000")',
    "interviews": (
        f"Interview count must be between {settings.MIN_INTERVIEW_COUNT} "
        f"and {settings.MAX_INTERVIEW_COUNT}"
    ),
}


def validate_profile_form(form: Mapping[str, Any]) -> Tuple[Optional[Profile], Dict[str, str]]:
    """
    Build a Profile from raw form values.

    Returns:
        (profile, {}) when valid, otherwise (None, {form field: message}).
    """
    values = {
        profile_field: form.get(form_field)
        for form_field, profile_field in FORM_FIELDS.items()
        if form.get(form_field) is not None
    }
    errors: Dict[str, str] = {}
    for form_field in ("role", "industry"):
        if not str(form.get(form_field) or "").strip():
            errors[form_field] = FIELD_MESSAGES[form_field]

    try:
        profile = Profile(**{k: v.strip() if isinstance(v, str) else v for k, v in values.items()})
    except ValidationError as e:
        reverse = {profile_field: form_field for form_field, profile_field in FORM_FIELDS.items()}
        for err in e.errors():
            field = reverse.get(str(err["loc"][0]), str(err["loc"][0]))
            errors.setdefault(field, FIELD_MESSAGES.get(field, err["msg"]))
        return None, errors

    if errors:
        return None, errors
    return profile, {}


class CheckoutInitiator:
    """
    Sends a profile to the payment boundary and redirects to the checkout page.

    Args:
        api: Client for the checkout route
        state: Shared application state (interviewing flag only)
        notifications: Sink for the checkout error notification
        return_url: Where Stripe sends the user back to (defaults to APP_URL)
        redirect: Opens the checkout page; returns False if it could not
    """

    def __init__(
        self,
        api: InterviewApiClient,
        state: ApplicationState,
        notifications: NotificationSink,
        return_url: Optional[str] = None,
        redirect: Callable[[str], Any] = webbrowser.open,
    ):
        self._api = api
        self._state = state
        self._notifications = notifications
        self.return_url = return_url or settings.APP_URL
        self._redirect = redirect

    @log_async_execution_time
    async def submit(self, profile: Profile) -> Optional[CheckoutSession]:
        """
        Create a checkout session for the profile and redirect to it.

        Returns the session, or None if checkout failed (already notified).
        """
        checkout = CheckoutRequest.from_profile(profile, self.return_url)
        logger.info(
            f"Starting checkout: {profile.desired_count} interviews for {profile.role} "
            f"(~{profile.estimated_minutes} minutes to generate)"
        )

        self._state.set_interviewing(True)
        try:
            session = await self._api.create_checkout_session(checkout)
            if not session.url:
                raise CheckoutError(f"Checkout session {session.id} has no redirect URL")
            if self._redirect(session.url) is False:
                raise CheckoutError("Could not open the checkout page")
        except AppError as e:
            logger.error(f"Error during checkout: {e.message}")
            self._notifications.notify(
                Notification(CHECKOUT_ERROR_TITLE, e.message, variant="destructive", retryable=True)
            )
            return None
        finally:
            self._state.set_interviewing(False)

        logger.info(f"Redirected to Stripe checkout session {session.id}")
        return session
