# bargainer/filters/deal_sorter.py

"""Ordering of merged deal lists."""

from collections.abc import Callable
from datetime import datetime, timezone

from bargainer.models.deal import Deal


def parse_timestamp(value: str) -> float:
    """Epoch seconds for an ISO-8601 string; 0 when unparseable."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


# A missing value sorts as the worst value for its field
_SORT_KEYS: dict[str, Callable[[Deal], float]] = {
    "price": lambda d: d.price if d.price is not None else float("inf"),
    "rating": lambda d: d.rating if d.rating is not None else 0.0,
    "popularity": lambda d: (
        d.popularity if d.popularity is not None else 0.0
    ),
    "date": lambda d: parse_timestamp(d.created_at),
}


def sort_deals(
    deals: list[Deal],
    sort_by: str = "popularity",
    sort_order: str = "desc",
) -> list[Deal]:
    """Return a new list ordered by *sort_by*; stable for ties.

    An unknown field leaves the order unchanged.
    """
    key = _SORT_KEYS.get(sort_by)
    if key is None:
        return list(deals)
    return sorted(deals, key=key, reverse=sort_order == "desc")
