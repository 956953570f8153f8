"""
Pricing Calculator

Booking amounts are the service's hourly price in minor units multiplied
by the booked duration in hours, rounded half-up to a whole minor unit.
Decimal arithmetic keeps half-unit boundaries exact.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.exceptions import InvalidIntervalException
from ..models.service import Service
from ..utils.time_helpers import SECONDS_PER_HOUR, ensure_utc


def _round_to_int(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def price(unit_cents_per_hour: int, start: datetime, end: datetime) -> int:
    """
    Price a window at ``unit_cents_per_hour``.

    >>> price(1000, datetime(2024, 1, 1, 0, 0), datetime(2024, 1, 1, 1, 30))
    1500
    """
    delta = ensure_utc(end) - ensure_utc(start)
    if delta.total_seconds() <= 0:
        raise InvalidIntervalException()
    # Whole microseconds keep the Decimal exact
    micros = Decimal(delta.days * 86_400_000_000 + delta.seconds * 1_000_000 + delta.microseconds)
    return _round_to_int(
        Decimal(unit_cents_per_hour) * micros / Decimal(SECONDS_PER_HOUR * 1_000_000)
    )


def price_for_service(
    service: Optional[Service], start: datetime, end: datetime
) -> Optional[int]:
    """Total for a booking; custom bookings without a service carry no amount."""
    if service is None:
        return None
    return price(service.price_cents, start, end)
