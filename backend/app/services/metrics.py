"""Account metrics engine.

Pure functions that derive the points, revenue and tenure figures shown on
the dashboard from the stored fields of an account. Nothing in this module
touches the database or the network, and malformed numeric input degrades
to ``None`` instead of raising.

Every derived figure should be produced through ``compute_derived_fields``
so that siblings are always refreshed together from one snapshot.
"""
import math
import re
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Any, Dict, Iterable, Mapping, Optional, Union

Number = Union[int, float]

# Striking distance keeps 1.5 months of recurring points in reserve.
POINTS_COMMITMENT_MONTHS = 1.5
DAYS_PER_MONTH = 30.44
SECONDS_PER_DAY = 60 * 60 * 24

_AMOUNT_JUNK = re.compile(r"[^\d.+\-]")


class DeliveryStatus(str, PyEnum):
    """Delivery classification derived from points striking distance."""
    ON_TRACK = "ON_TRACK"
    OFF_TRACK = "OFF_TRACK"


DERIVED_FIELDS = (
    "points_balance",
    "points_striking_distance",
    "delivery",
    "potential_mrr",
    "client_tenure",
)


def _as_number(value: float) -> Optional[Number]:
    if math.isnan(value) or math.isinf(value):
        return None
    if value.is_integer():
        return int(value)
    return value


def _parse(value: Any, strip) -> Optional[Number]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return _as_number(float(value))
    text = strip(str(value)).strip()
    if not text:
        return None
    try:
        return _as_number(float(text))
    except ValueError:
        return None


def parse_count(value: Any) -> Optional[Number]:
    """Parse a points figure such as ``"1,250"``.

    Only thousands separators are removed, so ``"12 points"`` is rejected.
    """
    return _parse(value, lambda text: text.replace(",", ""))


def parse_amount(value: Any) -> Optional[Number]:
    """Parse a currency figure such as ``"$1,000.50"`` or ``"-250"``."""
    return _parse(value, lambda text: _AMOUNT_JUNK.sub("", text))


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    # Compare everything as naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value: Any) -> Optional[date]:
    """Normalize a date, datetime or ISO string to a calendar date."""
    parsed = _as_datetime(value)
    return parsed.date() if parsed else None


def points_balance(purchased: Any, delivered: Any) -> Optional[Number]:
    """Points still owed to the client."""
    purchased = parse_count(purchased)
    delivered = parse_count(delivered)
    if purchased is None or delivered is None:
        return None
    return purchased - delivered


def points_striking_distance(purchased: Any, delivered: Any, recurring_allotment: Any) -> Optional[Number]:
    """Balance left after reserving 1.5 months of recurring points."""
    balance = points_balance(purchased, delivered)
    recurring = parse_count(recurring_allotment)
    if balance is None or recurring is None:
        return None
    return _as_number(float(balance - POINTS_COMMITMENT_MONTHS * recurring))


def delivery_status(striking_distance: Optional[Number]) -> Optional[DeliveryStatus]:
    """ON_TRACK when the striking distance is zero or below."""
    if striking_distance is None:
        return None
    if striking_distance <= 0:
        return DeliveryStatus.ON_TRACK
    return DeliveryStatus.OFF_TRACK


def potential_mrr(mrr: Any, growth_in_mrr: Any) -> Optional[Number]:
    current = parse_amount(mrr)
    growth = parse_amount(growth_in_mrr)
    if current is None or growth is None:
        return None
    return _as_number(float(current + growth))


def client_tenure_months(relationship_start_date: Any, now: Any) -> Optional[int]:
    """Whole months since the relationship started, using 30.44-day months.

    ``now`` is required so callers decide the reference time.
    """
    start = _as_datetime(relationship_start_date)
    reference = _as_datetime(now)
    if start is None or reference is None:
        return None
    days = math.ceil(abs((reference - start).total_seconds()) / SECONDS_PER_DAY)
    return math.floor(days / DAYS_PER_MONTH)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage_of(part: Any, total: Any) -> int:
    """Integer percentage of ``part`` in ``total``; 0 when total is empty."""
    if not total:
        return 0
    part_value = parse_amount(part) or 0
    total_value = parse_amount(total)
    if not total_value:
        return 0
    return _round_half_up(100 * part_value / total_value)


def rounded_mean(values: Iterable[Any]) -> int:
    """Mean of the parseable values rounded half-up, 0 when there are none."""
    numbers = [number for number in (parse_amount(value) for value in values) if number is not None]
    if not numbers:
        return 0
    return _round_half_up(sum(numbers) / len(numbers))


def average_progress(values: Iterable[Any]) -> int:
    """Mean goal progress, 0 when there are no goals."""
    return rounded_mean(values)


def compute_derived_fields(fields: Mapping[str, Any], now: Any) -> Dict[str, Any]:
    """Compute every derived account figure from one snapshot of stored fields."""
    striking_distance = points_striking_distance(
        fields.get("points_purchased"),
        fields.get("points_delivered"),
        fields.get("recurring_points_allotment"),
    )
    return {
        "points_balance": points_balance(
            fields.get("points_purchased"),
            fields.get("points_delivered"),
        ),
        "points_striking_distance": striking_distance,
        "delivery": delivery_status(striking_distance),
        "potential_mrr": potential_mrr(fields.get("mrr"), fields.get("growth_in_mrr")),
        "client_tenure": client_tenure_months(fields.get("relationship_start_date"), now),
    }
