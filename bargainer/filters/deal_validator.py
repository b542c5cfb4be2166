# bargainer/filters/deal_validator.py

"""Deal validation: drop malformed records before they reach a caller."""

import logging
import math
from typing import Any

from bargainer.models.deal import Deal
from bargainer.providers.normalizer import is_absolute_url

logger = logging.getLogger("bargainer.filters")

_NUMERIC_FIELDS = (
    "price",
    "original_price",
    "discount",
    "discount_percentage",
    "rating",
    "popularity",
)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class DealValidator:
    """Validate deals and drop those that break the schema."""

    @staticmethod
    def problem(deal: Deal) -> str | None:
        """Describe why *deal* is invalid, or None if it is valid."""
        if not isinstance(deal.title, str) or not deal.title.strip():
            return "empty title"
        if not isinstance(deal.id, str) or not deal.id:
            return "missing id"
        if not isinstance(deal.source, str) or not deal.source:
            return "missing source"
        if not isinstance(deal.store, str) or not deal.store.strip():
            return "missing store"
        if not is_absolute_url(deal.url):
            return f"malformed url {deal.url!r}"
        if deal.image_url is not None and not is_absolute_url(
            deal.image_url
        ):
            return f"malformed image url {deal.image_url!r}"
        if not isinstance(deal.created_at, str) or not deal.created_at:
            return "missing createdAt"
        for name in _NUMERIC_FIELDS:
            value = getattr(deal, name)
            if value is not None and not _is_number(value):
                return f"non-numeric {name}"
        if deal.rating is not None and not 0 <= deal.rating <= 5:
            return f"rating {deal.rating} outside 0-5"
        if deal.review_count is not None and (
            not isinstance(deal.review_count, int)
            or isinstance(deal.review_count, bool)
            or deal.review_count < 0
        ):
            return "invalid review count"
        if not all(isinstance(t, str) for t in deal.tags):
            return "non-string tag"
        if not isinstance(deal.verified, bool):
            return "non-boolean verified"
        return None

    @staticmethod
    def validate(deals: list[Deal]) -> tuple[list[Deal], int]:
        """Keep only valid deals.

        Returns the valid deals and the count of dropped items.
        """
        valid: list[Deal] = []
        dropped = 0

        for deal in deals:
            reason = DealValidator.problem(deal)
            if reason is not None:
                logger.debug(
                    "Dropped deal (%s): source=%s, id=%s",
                    reason,
                    deal.source,
                    deal.id,
                )
                dropped += 1
                continue
            valid.append(deal)

        if dropped:
            logger.info(
                "Validation dropped %d invalid deals", dropped,
            )

        return valid, dropped
