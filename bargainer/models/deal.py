# bargainer/models/deal.py

"""Deal data model shared by providers, the aggregator and the tools."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


# Python attribute -> serialised (camelCase) key
_WIRE_KEYS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "description": "description",
    "price": "price",
    "original_price": "originalPrice",
    "discount": "discount",
    "discount_percentage": "discountPercentage",
    "rating": "rating",
    "review_count": "reviewCount",
    "category": "category",
    "store": "store",
    "url": "url",
    "image_url": "imageUrl",
    "expiration_date": "expirationDate",
    "tags": "tags",
    "source": "source",
    "created_at": "createdAt",
    "popularity": "popularity",
    "verified": "verified",
}

# Fields shown in search / top-deal listings
SUMMARY_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "price",
    "original_price",
    "discount_percentage",
    "rating",
    "store",
    "url",
    "source",
    "verified",
)


@dataclass(frozen=True)
class Deal:
    """A single normalised deal from any provider.

    Instances are never edited after construction; aggregation only
    reorders and filters them.
    """

    id: str
    title: str
    store: str
    url: str
    source: str
    created_at: str = field(default_factory=utc_now_iso)
    description: str | None = None
    price: float | None = None
    original_price: float | None = None
    discount: float | None = None
    discount_percentage: float | None = None
    rating: float | None = None
    review_count: int | None = None
    category: str | None = None
    image_url: str | None = None
    expiration_date: str | None = None
    tags: tuple[str, ...] = ()
    popularity: float | None = None
    verified: bool = False

    def to_dict(
        self, fields: tuple[str, ...] | None = None,
    ) -> dict[str, Any]:
        """Serialise to camelCase keys, omitting absent values."""
        names = fields or tuple(_WIRE_KEYS)
        result: dict[str, Any] = {}
        for name in names:
            value = getattr(self, name)
            if value is None:
                continue
            if name == "tags":
                value = list(value)
            result[_WIRE_KEYS[name]] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Deal":
        """Rebuild a Deal from a serialised dict (camelCase or snake_case).

        Missing ``store`` falls back to ``source``; a missing timestamp
        defaults to now.  Values are taken as-is; run the result
        through :class:`DealValidator` before trusting it.
        """
        values: dict[str, Any] = {}
        for name, wire in _WIRE_KEYS.items():
            if wire in data:
                values[name] = data[wire]
            elif name in data:
                values[name] = data[name]

        source = str(values.get("source") or "")
        values["id"] = str(values.get("id") or "")
        values["title"] = str(values.get("title") or "")
        values["url"] = str(values.get("url") or "")
        values["source"] = source
        values["store"] = str(values.get("store") or source)
        raw_tags: Any = values.get("tags") or []
        if isinstance(raw_tags, str):
            raw_tags = [raw_tags]
        values["tags"] = tuple(str(t) for t in raw_tags)
        values["verified"] = bool(values.get("verified", False))
        if not values.get("created_at"):
            values.pop("created_at", None)
        return cls(**values)
