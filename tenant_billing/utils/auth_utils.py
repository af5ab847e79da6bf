import hmac
from functools import wraps

from flask import current_app, jsonify, request


def trigger_token_required(fn):
    """Require ``Authorization: Bearer <BILLING_TRIGGER_TOKEN>`` when a token is configured."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get("BILLING_TRIGGER_TOKEN")
        if expected:
            header = request.headers.get("Authorization", "")
            scheme, _, token = header.partition(" ")
            if scheme.lower() != "bearer" or not hmac.compare_digest(token.strip(), expected):
                current_app.logger.warning("Rejected billing trigger from %s", request.remote_addr)
                return jsonify({"msg": "Invalid or missing trigger token"}), 401
        return fn(*args, **kwargs)
    return wrapper
