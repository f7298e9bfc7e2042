import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from interview_generator.api.deps import get_checkout_gateway
from interview_generator.schemas.interview import CheckoutRequest, CheckoutSession
from interview_generator.services.payments.stripe_checkout import StripeCheckoutGateway

logger = logging.getLogger(__name__)

checkout_router = APIRouter()


@checkout_router.post("/checkout", response_model=CheckoutSession)
async def create_checkout_session(
    checkout: CheckoutRequest,
    gateway: StripeCheckoutGateway = Depends(get_checkout_gateway),
):
    """
    Create a Stripe checkout session for an interview generation run.

    The interview count is bounded by the request schema; configuration and
    Stripe failures surface as {"error": ...} through the AppError handler.
    """
    logger.info(f"Checkout requested for {checkout.interviews} interviews (return to {checkout.returnUrl})")
    # The Stripe SDK is synchronous
    return await run_in_threadpool(gateway.create_session, checkout)
