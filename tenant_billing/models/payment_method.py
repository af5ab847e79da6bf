from datetime import datetime, timezone

from tenant_billing.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class StripePaymentMethod(db.Model):
    __tablename__ = 'stripe_payment_methods'

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id'), nullable=False, index=True)

    # Processor references
    stripe_customer_id = db.Column(db.String(80), nullable=False)
    stripe_payment_method_id = db.Column(db.String(80), nullable=False)

    # The billing job charges the default method, newest first
    is_default = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f'<StripePaymentMethod {self.id}: tenant {self.tenant_id} {self.stripe_payment_method_id}>'

    def serialize(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "stripe_customer_id": self.stripe_customer_id,
            "stripe_payment_method_id": self.stripe_payment_method_id,
            "is_default": self.is_default,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
