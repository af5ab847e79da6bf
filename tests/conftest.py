# tests/conftest.py
import pytest
import stripe

from tenant_billing import create_app
from tenant_billing.config import TestingConfig
from tenant_billing.extensions import db as _db


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return _db.session


@pytest.fixture
def stripe_calls(monkeypatch):
    """Replace stripe.PaymentIntent.create; every call's params land in the returned list."""
    calls = []

    def fake_create(**params):
        calls.append(params)
        return {
            "id": f"pi_test_{len(calls)}",
            "status": "succeeded",
            "amount": params["amount"],
            "currency": params["currency"],
        }

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)
    return calls
