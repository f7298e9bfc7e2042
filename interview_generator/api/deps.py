from interview_generator.services.export.encoder import ExportEncoder
from interview_generator.services.payments.stripe_checkout import StripeCheckoutGateway


def get_checkout_gateway() -> StripeCheckoutGateway:
    """
    Dependency providing the payment boundary.
    Reads Stripe settings at request time so configuration changes apply without a restart.
    """
    return StripeCheckoutGateway()


def get_export_encoder() -> ExportEncoder:
    """Dependency providing the export encoder (overridable in tests)."""
    return ExportEncoder()
