"""Stripe charging adapter."""
import logging
from dataclasses import dataclass

import stripe

from tenant_billing.errors import ProcessorError

logger = logging.getLogger(__name__)

# PaymentIntent statuses that mean the money is captured or on its way (ACH)
SETTLED_STATUSES = ("succeeded", "processing")


@dataclass
class ChargeResult:
    payment_intent_id: str
    status: str
    amount: int
    currency: str


class StripeProcessor:
    def __init__(self, api_key):
        if not api_key:
            raise ValueError("STRIPE_SECRET_KEY environment variable must be set")
        self.api_key = api_key

    def charge_customer(self, customer_ref, payment_method_ref, amount_minor_units, currency,
                        idempotency_key=None, metadata=None):
        """Create and confirm a PaymentIntent against a saved payment method."""
        intent_params = {
            'amount': amount_minor_units,
            'currency': currency,
            'customer': customer_ref,
            'payment_method': payment_method_ref,
            'confirm': True,
            'off_session': True,
            'metadata': metadata or {},
            'api_key': self.api_key,
        }
        if idempotency_key:
            intent_params['idempotency_key'] = idempotency_key

        try:
            intent = stripe.PaymentIntent.create(**intent_params)
        except stripe.StripeError as e:
            raise ProcessorError(
                f"Stripe error: {e.user_message or str(e)}",
                code=getattr(e, 'code', None),
                decline_code=getattr(e, 'decline_code', None),
            ) from e

        if intent['status'] not in SETTLED_STATUSES:
            raise ProcessorError(
                f"PaymentIntent {intent['id']} ended in status {intent['status']}",
                code=intent['status'],
            )

        logger.debug("PaymentIntent %s %s", intent['id'], intent['status'])
        return ChargeResult(
            payment_intent_id=intent['id'],
            status=intent['status'],
            amount=intent['amount'],
            currency=intent['currency'],
        )
