"""
Payment boundary package.

- stripe_checkout.py: Stripe checkout session creation
"""

from .stripe_checkout import StripeCheckoutGateway

__all__ = [
    'StripeCheckoutGateway',
]
