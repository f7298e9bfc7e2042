"""Stripe checkout session creation for paid interview generation runs."""

import logging
from typing import Any, Dict, Optional

import stripe

from interview_generator.core.config import settings
from interview_generator.core.constants import (
    DEFAULT_COMPANY_SIZE_RANGE,
    DEFAULT_EXPERIENCE_RANGE,
    DEFAULT_INDUSTRY,
    DEFAULT_ROLE,
)
from interview_generator.core.exceptions import CheckoutError, ConfigurationError
from interview_generator.schemas.interview import CheckoutRequest, CheckoutSession

logger = logging.getLogger(__name__)


class StripeCheckoutGateway:
    """
    Wraps the Stripe SDK for one-time card payments.

    Responsibilities:
    - Check Stripe configuration
    - Build session parameters (line items, redirect URLs, metadata)
    - Create the session and return its id and hosted URL
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        price_id: Optional[str] = None,
        api_version: Optional[str] = None,
    ):
        self.secret_key = settings.STRIPE_SECRET_KEY if secret_key is None else secret_key
        self.price_id = settings.STRIPE_PRICE_ID if price_id is None else price_id
        self.api_version = api_version or settings.STRIPE_API_VERSION

    def _check_configured(self) -> None:
        if not self.secret_key:
            raise ConfigurationError("Stripe secret key is not configured")
        if not self.price_id:
            raise ConfigurationError("Stripe price ID is not configured")

    def build_session_params(self, request: CheckoutRequest) -> Dict[str, Any]:
        """Session parameters; blank form fields fall back to defaults in metadata."""
        if not request.returnUrl:
            raise CheckoutError("Return URL is required")

        return {
            "payment_method_types": ["card"],
            "line_items": [{"price": self.price_id, "quantity": request.interviews}],
            "mode": "payment",
            # Stripe substitutes {CHECKOUT_SESSION_ID} when redirecting back
            "success_url": f"{request.returnUrl}?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": request.returnUrl,
            "metadata": {
                "role": request.role or DEFAULT_ROLE,
                "industry": request.industry or DEFAULT_INDUSTRY,
                "range": request.range or DEFAULT_EXPERIENCE_RANGE,
                "employee_range": request.employee_range or DEFAULT_COMPANY_SIZE_RANGE,
                "country": settings.CHECKOUT_COUNTRY,
                "processed": "no",
            },
        }

    def create_session(self, request: CheckoutRequest) -> CheckoutSession:
        """
        Create a Stripe checkout session.

        Raises:
            ConfigurationError: Stripe keys are missing
            CheckoutError: bad request or Stripe rejected the session
        """
        self._check_configured()
        params = self.build_session_params(request)

        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                stripe_version=self.api_version,
                **params,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed: {e}")
            raise CheckoutError(getattr(e, "user_message", None) or str(e)) from e

        logger.info(
            f"Stripe checkout session created: {session['id']} "
            f"({request.interviews} interviews, role={params['metadata']['role']})"
        )
        return CheckoutSession(id=session["id"], url=session.get("url"))
