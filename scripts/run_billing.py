#!/usr/bin/env python
# scripts/run_billing.py
# Daily cron entry point for hosts without the flask CLI:
#   0 9 * * *  cd /srv/tenant-billing && python scripts/run_billing.py
import json
import sys

from dotenv import load_dotenv

load_dotenv()

from tenant_billing import create_app  # noqa: E402
from tenant_billing.billing import build_billing_run  # noqa: E402


def main():
    app = create_app()
    with app.app_context():
        result = build_billing_run(app).run()
    print(json.dumps(result.to_dict()))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
