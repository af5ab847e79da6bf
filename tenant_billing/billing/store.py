"""SQLAlchemy-backed tenant store used by the billing run."""
import logging

from sqlalchemy.exc import SQLAlchemyError

from tenant_billing.errors import StoreError
from tenant_billing.models import StripePaymentMethod, Tenant

logger = logging.getLogger(__name__)


class SqlTenantStore:
    """Reads billable tenants and their Stripe payment methods.

    ``session`` is a SQLAlchemy session (normally ``db.session``). Every
    failure surfaces as :class:`StoreError` so the runner never has to know
    about SQLAlchemy.
    """

    def __init__(self, session, require_move_out_date=False):
        self.session = session
        self.require_move_out_date = require_move_out_date

    def query_eligible_tenants(self):
        try:
            query = self.session.query(Tenant).filter(
                Tenant.rent.isnot(None),
                Tenant.move_in_date.isnot(None),
            )
            if self.require_move_out_date:
                query = query.filter(Tenant.move_out_date.isnot(None))
            tenants = query.order_by(Tenant.id).all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Error fetching tenants: {e}") from e
        # detached: a later write-back commit must not expire these rows
        for tenant in tenants:
            self.session.expunge(tenant)
        return tenants

    def query_payment_methods(self, tenant_id):
        try:
            return (
                self.session.query(StripePaymentMethod)
                .filter(StripePaymentMethod.tenant_id == tenant_id)
                .order_by(
                    StripePaymentMethod.is_default.desc(),
                    StripePaymentMethod.created_at.desc(),
                    StripePaymentMethod.id.desc(),
                )
                .all()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Error fetching payment methods for tenant {tenant_id}: {e}") from e

    def update_last_payment_date(self, tenant_id, timestamp):
        try:
            updated = (
                self.session.query(Tenant)
                .filter(Tenant.id == tenant_id)
                .update({Tenant.rent_most_recent_payment_date: timestamp}, synchronize_session="fetch")
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Error updating payment date for tenant {tenant_id}: {e}") from e
        if not updated:
            raise StoreError(f"Tenant {tenant_id} not found while updating payment date")
        logger.debug("Recorded payment date %s for tenant %s", timestamp.isoformat(), tenant_id)
