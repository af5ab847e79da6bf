"""One end-to-end billing pass: fetch tenants, decide, charge, record."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from tenant_billing.errors import ProcessorError, StoreError

from .eligibility import (
    CLOCK_LAST_PAYMENT,
    DEFAULT_CYCLE_DAYS,
    billing_period_key,
    should_charge_tenant,
    to_minor_units,
    validate_billing_rules,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Tenant billing completed successfully."
FAILURE_MESSAGE = "Error during billing."


@dataclass
class BillingResult:
    status: int
    message: str
    error: Optional[str] = None
    run_at: Optional[datetime] = None
    evaluated: int = 0
    charged: int = 0
    skipped: int = 0
    no_payment_method: int = 0
    failed: int = 0
    unrecorded: int = 0
    # tenant ids whose lookup or charge failed; not exposed over HTTP
    failed_tenant_ids: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == 200

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": self.status, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
            return body
        body["summary"] = {
            "run_at": self.run_at.isoformat() if self.run_at else None,
            "evaluated": self.evaluated,
            "charged": self.charged,
            "skipped": self.skipped,
            "no_payment_method": self.no_payment_method,
            "failed": self.failed,
            "unrecorded": self.unrecorded,
        }
        return body


class BillingRun:
    """Drives a single billing pass over the tenant store.

    ``store`` must provide ``query_eligible_tenants``,
    ``query_payment_methods`` and ``update_last_payment_date``;
    ``processor`` must provide ``charge_customer``. Both are injected so the
    whole pass can run against fakes.
    """

    def __init__(self, store, processor, currency="cad",
                 cycle_days=DEFAULT_CYCLE_DAYS, clock=CLOCK_LAST_PAYMENT):
        validate_billing_rules(clock, cycle_days)
        self.store = store
        self.processor = processor
        self.currency = currency
        self.cycle_days = cycle_days
        self.clock = clock

    def run(self, now: Optional[datetime] = None) -> BillingResult:
        now = now or datetime.now(timezone.utc)
        logger.info("Running tenant billing job for %s", now.isoformat())

        try:
            tenants = self.store.query_eligible_tenants()
        except StoreError as e:
            logger.error("Error during billing: %s", e.message)
            return BillingResult(status=500, message=FAILURE_MESSAGE, error=e.message, run_at=now)

        result = BillingResult(status=200, message=SUCCESS_MESSAGE, run_at=now)
        for tenant in tenants:
            result.evaluated += 1
            self._process_tenant(tenant, now, result)

        logger.info(
            "Tenant billing finished: %d evaluated, %d charged, %d failed, %d unrecorded",
            result.evaluated, result.charged, result.failed, result.unrecorded,
        )
        return result

    def _process_tenant(self, tenant, now: datetime, result: BillingResult) -> None:
        last_payment_date = tenant.rent_most_recent_payment_date
        if not should_charge_tenant(now, tenant.move_in_date, last_payment_date,
                                    tenant.move_out_date, self.cycle_days, self.clock):
            result.skipped += 1
            return

        try:
            payment_methods = self.store.query_payment_methods(tenant.id)
        except StoreError as e:
            logger.error("Error fetching payment methods for tenant %s: %s", tenant.id, e.message)
            result.failed += 1
            result.failed_tenant_ids.append(tenant.id)
            return

        if not payment_methods:
            logger.info("Tenant %s is due but has no payment method on file", tenant.id)
            result.no_payment_method += 1
            return

        method = payment_methods[0]
        amount = to_minor_units(tenant.rent)
        key = billing_period_key(tenant.id, tenant.move_in_date, last_payment_date, now,
                                 self.cycle_days, self.clock)

        try:
            charge = self.processor.charge_customer(
                method.stripe_customer_id,
                method.stripe_payment_method_id,
                amount,
                self.currency,
                idempotency_key=key,
                metadata={"tenant_id": str(tenant.id), "billing_period": key},
            )
        except ProcessorError as e:
            logger.error("Charge failed for tenant %s: %s", tenant.id, e.message)
            result.failed += 1
            result.failed_tenant_ids.append(tenant.id)
            return

        logger.info("Charged tenant %s %d %s (%s)", tenant.id, amount, self.currency, charge.payment_intent_id)

        try:
            self.store.update_last_payment_date(tenant.id, now)
        except StoreError as e:
            # Charge went through; the next run reuses the same idempotency key
            logger.error("Charged tenant %s but could not record payment date: %s", tenant.id, e.message)
            result.unrecorded += 1
            return

        result.charged += 1
