from flask import Blueprint, current_app, jsonify

from tenant_billing.billing import build_billing_run
from tenant_billing.utils.auth_utils import trigger_token_required

bp = Blueprint("billing", __name__)


@bp.post("/billing/run")
@trigger_token_required
def run_billing():
    """Run one billing pass; called by the daily scheduler."""
    result = build_billing_run(current_app).run()
    return jsonify(result.to_dict()), result.status
