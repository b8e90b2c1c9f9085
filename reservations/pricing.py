from decimal import Decimal
from typing import NamedTuple


class RateTotal(NamedTuple):
	description: str
	value: Decimal


def duration_of_stay(check_in, check_out) -> int:
	"""Number of nights: the calendar-day difference between the two dates."""
	return (check_out - check_in).days


def rate_total(nights: int, reservation_item) -> RateTotal:
	unit = "night" if nights == 1 else "nights"
	return RateTotal(
		description=f"{reservation_item.description} x {nights} {unit}",
		value=reservation_item.daily_rate_usd * nights,
	)
