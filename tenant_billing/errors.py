# tenant_billing/errors.py
from flask import jsonify


class BillingError(Exception):
    """Base class for failures raised while running a billing pass."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class StoreError(BillingError):
    """Tenant or payment-method read/write failed."""


class ProcessorError(BillingError):
    """The payment processor declined or could not be reached."""

    def __init__(self, message, code=None, decline_code=None):
        super().__init__(message)
        self.code = code
        self.decline_code = decline_code


def register_error_handlers(app):
    @app.errorhandler(400)
    def bad_request(e):
        return jsonify(error="bad_request", message=getattr(e, "description", "Bad Request")), 400

    @app.errorhandler(401)
    def unauthorized(e): return jsonify(error="unauthorized"), 401

    @app.errorhandler(404)
    def not_found(e): return jsonify(error="not_found"), 404

    @app.errorhandler(405)
    def method_not_allowed(e): return jsonify(error="method_not_allowed"), 405

    @app.errorhandler(BillingError)
    def billing_error(e):
        app.logger.exception("Unhandled billing error: %s", e.message)
        return jsonify(error="billing_error", message=e.message), 500

    @app.errorhandler(500)
    def server_error(e):
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify(error="server_error"), 500
