from datetime import date
from decimal import Decimal

from tenant_billing.billing.store import SqlTenantStore
from tenant_billing.errors import StoreError
from tenant_billing.models import StripePaymentMethod, Tenant


def test_cli_run_as_of_date(app, session, stripe_calls):
    tenant = Tenant(rent=Decimal("750.00"), move_in_date=date(2026, 9, 1))
    session.add(tenant)
    session.commit()
    session.add(StripePaymentMethod(tenant_id=tenant.id, stripe_customer_id="cus_cli",
                                    stripe_payment_method_id="pm_cli"))
    session.commit()

    result = app.test_cli_runner().invoke(args=["billing", "run", "--as-of", "2026-10-01"])

    assert result.exit_code == 0, result.output
    assert "Tenant billing completed successfully." in result.output
    assert "charged=1" in result.output
    assert stripe_calls[0]["amount"] == 75000
    assert stripe_calls[0]["idempotency_key"] == f"rent:{tenant.id}:2026-09-01:1"


def test_cli_as_of_before_due_date_charges_nobody(app, session, stripe_calls):
    session.add(Tenant(rent=Decimal("750.00"), move_in_date=date(2026, 9, 1)))
    session.commit()

    result = app.test_cli_runner().invoke(args=["billing", "run", "--as-of", "2026-09-30"])

    assert result.exit_code == 0
    assert "skipped=1" in result.output
    assert stripe_calls == []


def test_cli_exits_non_zero_on_fetch_failure(app, monkeypatch):
    def broken(self):
        raise StoreError("Error fetching tenants: timeout")

    monkeypatch.setattr(SqlTenantStore, "query_eligible_tenants", broken)

    result = app.test_cli_runner().invoke(args=["billing", "run"])

    assert result.exit_code == 1
