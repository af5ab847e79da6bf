from datetime import datetime, timedelta, timezone
from decimal import Decimal

from tenant_billing.billing.store import SqlTenantStore
from tenant_billing.errors import StoreError
from tenant_billing.models import StripePaymentMethod, Tenant


def _today():
    return datetime.now(timezone.utc).date()


def _seed_due_tenant(session, rent="1000.00", with_method=True):
    tenant = Tenant(name="Due", rent=Decimal(rent), move_in_date=_today() - timedelta(days=35))
    session.add(tenant)
    session.commit()
    if with_method:
        session.add(StripePaymentMethod(tenant_id=tenant.id, stripe_customer_id="cus_due",
                                        stripe_payment_method_id="pm_due", is_default=True))
        session.commit()
    return tenant.id


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json()["status"] == "ok"


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert res.get_json() == {"error": "not_found"}


def test_run_charges_due_tenant(client, session, stripe_calls):
    tenant_id = _seed_due_tenant(session)

    res = client.post("/api/billing/run")

    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == 200
    assert body["message"] == "Tenant billing completed successfully."
    assert body["summary"]["charged"] == 1

    assert len(stripe_calls) == 1
    assert stripe_calls[0]["amount"] == 100000
    assert stripe_calls[0]["currency"] == "cad"
    assert stripe_calls[0]["customer"] == "cus_due"

    session.expire_all()
    paid_at = session.get(Tenant, tenant_id).rent_most_recent_payment_date
    assert paid_at is not None
    assert paid_at.date() == _today()


def test_second_run_same_day_does_not_recharge(client, session, stripe_calls):
    _seed_due_tenant(session)

    client.post("/api/billing/run")
    res = client.post("/api/billing/run")

    assert res.status_code == 200
    assert res.get_json()["summary"]["charged"] == 0
    assert len(stripe_calls) == 1


def test_run_without_payment_method(client, session, stripe_calls):
    tenant_id = _seed_due_tenant(session, with_method=False)

    res = client.post("/api/billing/run")

    assert res.status_code == 200
    assert res.get_json()["summary"]["no_payment_method"] == 1
    assert stripe_calls == []
    session.expire_all()
    assert session.get(Tenant, tenant_id).rent_most_recent_payment_date is None


def test_run_reports_fetch_failure(client, monkeypatch, stripe_calls):
    def broken(self):
        raise StoreError("Error fetching tenants: timeout")

    monkeypatch.setattr(SqlTenantStore, "query_eligible_tenants", broken)

    res = client.post("/api/billing/run")

    assert res.status_code == 500
    assert res.get_json() == {
        "status": 500,
        "message": "Error during billing.",
        "error": "Error fetching tenants: timeout",
    }
    assert stripe_calls == []


def test_trigger_token_enforced_when_configured(app, client, session, stripe_calls):
    app.config["BILLING_TRIGGER_TOKEN"] = "s3cret"
    _seed_due_tenant(session)

    assert client.post("/api/billing/run").status_code == 401
    assert client.post("/api/billing/run", headers={"Authorization": "Bearer wrong"}).status_code == 401
    assert stripe_calls == []

    res = client.post("/api/billing/run", headers={"Authorization": "Bearer s3cret"})
    assert res.status_code == 200
    assert len(stripe_calls) == 1


def test_run_rejects_get(client):
    assert client.get("/api/billing/run").status_code == 405
