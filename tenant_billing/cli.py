from datetime import timezone

import click
from dateutil.parser import isoparse
from flask import current_app
from flask.cli import AppGroup

from tenant_billing.billing import build_billing_run

billing_cli = AppGroup("billing", help="Tenant rent billing commands.")


@billing_cli.command("run")
@click.option("--as-of", "as_of", default=None,
              help="Run as if it were this ISO date/time (UTC). Defaults to now.")
def run_command(as_of):
    """Charge every tenant whose rent is due."""
    now = None
    if as_of:
        now = isoparse(as_of)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

    result = build_billing_run(current_app).run(now)
    click.echo(result.message)
    if not result.ok:
        click.echo(f"error: {result.error}", err=True)
        raise SystemExit(1)
    summary = result.to_dict()["summary"]
    click.echo(", ".join(f"{k}={v}" for k, v in summary.items() if k != "run_at"))
