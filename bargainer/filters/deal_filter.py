# bargainer/filters/deal_filter.py

"""Predicate-based filtering over an already-fetched deal set."""

import logging

from bargainer.models.deal import Deal
from bargainer.models.search_params import (
    DealFilter,
    NumericRange,
    SearchParams,
)

logger = logging.getLogger("bargainer.filters")


def _in_range(value: float | None, bounds: NumericRange | None) -> bool:
    """Inclusive range check; an absent value fails any set bound."""
    if bounds is None:
        return True
    if bounds.min is not None and (value is None or value < bounds.min):
        return False
    if bounds.max is not None and (value is None or value > bounds.max):
        return False
    return True


def _contains_any(haystack: str, needles: list[str]) -> bool:
    lowered = haystack.lower()
    return any(n.lower() in lowered for n in needles)


def matches_filter(deal: Deal, criteria: DealFilter) -> bool:
    """True if *deal* passes every dimension set on *criteria*."""
    if criteria.categories:
        wanted = {c.lower() for c in criteria.categories}
        if not deal.category or deal.category.lower() not in wanted:
            return False

    if criteria.stores:
        if not deal.store or not _contains_any(
            deal.store, criteria.stores
        ):
            return False

    if not _in_range(deal.price, criteria.price_range):
        return False

    if not _in_range(deal.rating, criteria.rating_range):
        return False

    if criteria.tags:
        if not any(
            _contains_any(tag, criteria.tags) for tag in deal.tags
        ):
            return False

    return True


def filter_deals(deals: list[Deal], criteria: DealFilter) -> list[Deal]:
    """Keep the deals matching every dimension of *criteria*.

    Pure: never touches provider state, keeps input order.
    """
    kept = [d for d in deals if matches_filter(d, criteria)]
    excluded = len(deals) - len(kept)
    if excluded:
        logger.info("Filter excluded %d of %d deals", excluded, len(deals))
    return kept


def apply_search_filters(
    deals: list[Deal], params: SearchParams,
) -> tuple[list[Deal], int]:
    """Post-fetch constraints from a search: price bounds, rating floor, store.

    Deals missing a constrained field are excluded so that every
    returned deal provably satisfies the request.

    Returns the kept deals and the count of excluded ones.
    """
    price_range = NumericRange(min=params.min_price, max=params.max_price)
    rating_range = NumericRange(min=params.min_rating)
    store = params.store.lower() if params.store else None

    kept: list[Deal] = []
    for deal in deals:
        if not _in_range(deal.price, price_range):
            continue
        if not _in_range(deal.rating, rating_range):
            continue
        if store and store not in deal.store.lower():
            continue
        kept.append(deal)

    return kept, len(deals) - len(kept)
