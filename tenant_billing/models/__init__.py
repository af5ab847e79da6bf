from tenant_billing.extensions import db

from .tenant import Tenant
from .payment_method import StripePaymentMethod
