from flask import current_app

from tenant_billing.extensions import db

from .eligibility import should_charge_tenant
from .processor import ChargeResult, StripeProcessor
from .runner import BillingResult, BillingRun
from .store import SqlTenantStore


def build_billing_run(app=None):
    """Wire a BillingRun from the app config. Needs an app context for db.session."""
    app = app or current_app
    config = app.config
    store = SqlTenantStore(db.session, require_move_out_date=config["BILLING_REQUIRE_MOVE_OUT_DATE"])
    processor = StripeProcessor(config["STRIPE_SECRET_KEY"])
    return BillingRun(
        store,
        processor,
        currency=config["BILLING_CURRENCY"],
        cycle_days=config["BILLING_CYCLE_DAYS"],
        clock=config["BILLING_CLOCK"],
    )
