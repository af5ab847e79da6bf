"""Rent eligibility rules.

Everything in here is pure: no database, no Stripe, no clock. The runner
passes the run timestamp in explicitly so a billing pass can be replayed
for any date.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from dateutil.parser import isoparse

DateLike = Union[date, datetime, str]

DEFAULT_CYCLE_DAYS = 30

# "last_payment": the 30-day clock restarts at every successful charge.
# "move_in": the clock always counts from move-in; the last payment date is
# computed and then ignored, as the first version of this job did.
CLOCK_LAST_PAYMENT = "last_payment"
CLOCK_MOVE_IN = "move_in"
CLOCKS = (CLOCK_LAST_PAYMENT, CLOCK_MOVE_IN)


def _as_date(value: DateLike) -> date:
    """Reduce a date, datetime or ISO string to a UTC calendar date."""
    if isinstance(value, str):
        value = isoparse(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if start is later)."""
    return (_as_date(end) - _as_date(start)).days


def _check_clock(clock: str) -> None:
    if clock not in CLOCKS:
        raise ValueError(f"Unknown billing clock {clock!r}; expected one of {', '.join(CLOCKS)}")


def validate_billing_rules(clock: str, cycle_days) -> None:
    """Reject settings that would break every tenant mid-run."""
    _check_clock(clock)
    if isinstance(cycle_days, bool) or not isinstance(cycle_days, int) or cycle_days < 1:
        raise ValueError(f"Billing cycle must be a whole number of days >= 1, got {cycle_days!r}")


def _operative_anchor(move_in_date: DateLike,
                      last_payment_date: Optional[DateLike],
                      clock: str) -> DateLike:
    if clock == CLOCK_LAST_PAYMENT and last_payment_date:
        return last_payment_date
    return move_in_date


def should_charge_tenant(today: DateLike,
                         move_in_date: DateLike,
                         last_payment_date: Optional[DateLike] = None,
                         move_out_date: Optional[DateLike] = None,
                         cycle_days: int = DEFAULT_CYCLE_DAYS,
                         clock: str = CLOCK_LAST_PAYMENT) -> bool:
    """Decide whether a tenant owes rent on ``today``.

    Day counts are whole calendar days (UTC). A tenant whose move-out date
    has been reached is never charged. Otherwise the tenant is charged once
    ``cycle_days`` have elapsed since the operative anchor, inclusive: on
    day 30 the answer is True. A move-in date in the future gives a negative
    count and therefore False.
    """
    _check_clock(clock)

    days_since_move_in = days_between(move_in_date, today)
    operative_days = days_since_move_in

    if last_payment_date:
        days_since_last_payment = days_between(last_payment_date, today)
        if clock == CLOCK_LAST_PAYMENT:
            operative_days = days_since_last_payment

    # No more charges once the tenant has moved out
    if move_out_date and _as_date(today) >= _as_date(move_out_date):
        return False

    return operative_days >= cycle_days


def billing_period_key(tenant_id,
                       move_in_date: DateLike,
                       last_payment_date: Optional[DateLike],
                       today: DateLike,
                       cycle_days: int = DEFAULT_CYCLE_DAYS,
                       clock: str = CLOCK_LAST_PAYMENT) -> str:
    """Idempotency key for the charge a tenant owes on ``today``.

    The key stays the same until ``rent_most_recent_payment_date`` moves, so
    re-running after a charge whose write-back was lost hits Stripe's
    idempotency cache instead of charging twice.
    """
    _check_clock(clock)
    anchor = _operative_anchor(move_in_date, last_payment_date, clock)
    cycle = max(days_between(anchor, today), 0) // cycle_days
    return f"rent:{tenant_id}:{_as_date(anchor).isoformat()}:{cycle}"


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (e.g. dollars) to minor units (cents)."""
    cents = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)
