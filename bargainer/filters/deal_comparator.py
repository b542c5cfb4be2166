# bargainer/filters/deal_comparator.py

"""Near-duplicate grouping and best-deal selection across sources."""

import logging
import re
from functools import cmp_to_key

from bargainer.config.settings import Settings
from bargainer.models.deal import Deal

logger = logging.getLogger("bargainer.filters")

_PUNCTUATION_RE = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_title(
    title: str, length: int = Settings.TITLE_KEY_LENGTH,
) -> str:
    """Grouping key for a title.

    Lowercases, strips punctuation, collapses whitespace and keeps the
    first *length* characters.  A heuristic: long titles that differ
    only after the cut-off are merged.
    """
    lowered = title.lower()
    stripped = _PUNCTUATION_RE.sub("", lowered)
    collapsed = _WHITESPACE_RE.sub(" ", stripped).strip()
    return collapsed[:length]


def _compare(a: Deal, b: Deal) -> float:
    """Cheaper first, unless prices are within tolerance: then higher rating.

    A zero price counts as unknown, like a missing one.
    """
    if a.price and b.price:
        diff = a.price - b.price
        if abs(diff) < Settings.PRICE_TIE_TOLERANCE:
            return (b.rating or 0) - (a.rating or 0)
        return diff
    return (b.rating or 0) - (a.rating or 0)


def pick_best(group: list[Deal]) -> Deal:
    """Representative of one group of near-duplicate deals."""
    if len(group) == 1:
        return group[0]
    return sorted(group, key=cmp_to_key(_compare))[0]


def compare_deals(deals: list[Deal]) -> list[Deal]:
    """One best deal per normalised-title group.

    Groups appear in the order their first member appeared.
    """
    groups: dict[str, list[Deal]] = {}
    for deal in deals:
        groups.setdefault(normalize_title(deal.title), []).append(deal)

    best = [pick_best(group) for group in groups.values()]
    merged = len(deals) - len(best)
    if merged:
        logger.info(
            "Comparison merged %d near-duplicate deals into %d groups",
            merged,
            len(best),
        )
    return best
