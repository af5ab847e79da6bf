import os


def _database_url():
    url = os.environ.get("DATABASE_URL")
    # Supabase/Heroku hand out postgres:// which SQLAlchemy no longer accepts
    if url and url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Config:
    # Database connection - REQUIRED
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Stripe secret key - REQUIRED
    STRIPE_SECRET_KEY = os.environ.get("STRIPE_SECRET_KEY")

    # Billing rules
    BILLING_CURRENCY = os.environ.get("BILLING_CURRENCY", "cad")
    BILLING_CYCLE_DAYS = int(os.environ.get("BILLING_CYCLE_DAYS", 30))
    BILLING_CLOCK = os.environ.get("BILLING_CLOCK", "last_payment")  # last_payment, move_in
    BILLING_REQUIRE_MOVE_OUT_DATE = os.environ.get("BILLING_REQUIRE_MOVE_OUT_DATE", "False").lower() == "true"

    # Shared secret the scheduler sends as a bearer token
    BILLING_TRIGGER_TOKEN = os.environ.get("BILLING_TRIGGER_TOKEN")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    JSON_SORT_KEYS = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    STRIPE_SECRET_KEY = "sk_test_dummy"
    BILLING_CURRENCY = "cad"
    BILLING_CYCLE_DAYS = 30
    BILLING_CLOCK = "last_payment"
    BILLING_REQUIRE_MOVE_OUT_DATE = False
    BILLING_TRIGGER_TOKEN = None
