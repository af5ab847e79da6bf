from datetime import datetime, timezone

from tenant_billing.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class Tenant(db.Model):
    __tablename__ = 'tenants'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=True)
    email = db.Column(db.String(255), nullable=True, index=True)

    # Billing terms
    rent = db.Column(db.Numeric(10, 2), nullable=True)
    move_in_date = db.Column(db.Date, nullable=True)
    move_out_date = db.Column(db.Date, nullable=True)

    # Written back by the billing job after a successful charge
    rent_most_recent_payment_date = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    payment_methods = db.relationship('StripePaymentMethod', backref='tenant', lazy=True)

    def __repr__(self):
        return f'<Tenant {self.id}: ${self.rent}>'

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'rent': float(self.rent) if self.rent is not None else None,
            'move_in_date': self.move_in_date.isoformat() if self.move_in_date else None,
            'move_out_date': self.move_out_date.isoformat() if self.move_out_date else None,
            'rent_most_recent_payment_date': (
                self.rent_most_recent_payment_date.isoformat()
                if self.rent_most_recent_payment_date else None
            ),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
