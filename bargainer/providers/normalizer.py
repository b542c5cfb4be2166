# bargainer/providers/normalizer.py

"""Normalisation helpers shared by every provider.

Providers compose these functions rather than inheriting them; each
provider keeps its own field-name vocabulary and passes it in.
"""

import hashlib
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urljoin, urlparse

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER_RE = re.compile(r"^-?\d*\.?\d+(?:[eE][-+]?\d+)?")
_FIRST_NUMBER_RE = re.compile(r"-?\d*\.?\d+")


def _parse_float(text: str) -> float | None:
    """Parse the longest leading number in *text*, like ``parseFloat``."""
    match = _LEADING_NUMBER_RE.match(text.strip())
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def normalize_price(value: Any) -> float | None:
    """Turn ``19.99``, ``"$1,299.00"`` or ``"USD 5"`` into a float.

    Text is stripped of everything except digits, ``.`` and ``-``.
    Unparseable input gives ``None``, never zero.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return _parse_float(_NON_NUMERIC_RE.sub("", value))
    return None


def normalize_rating(value: Any) -> float | None:
    """Parse a rating such as ``4.5``, ``"4.5/5"`` or ``"Rated 4.5"``.

    Only the first number counts, so ``"4.5 out of 5"`` is not glued
    into ``4.55`` the way price cleaning would.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _FIRST_NUMBER_RE.search(value)
        return _parse_float(match.group(0)) if match else None
    return None


def normalize_count(value: Any) -> int | None:
    """Parse a review count; ``"1,204 reviews"`` gives ``1204``."""
    number = normalize_price(value)
    if number is None:
        return None
    return int(number)


def calculate_discount(original: float, current: float) -> float | None:
    """Percent saved from *original* to *current*, rounded to an int."""
    if not original:
        return None
    # JS Math.round semantics: halves round up
    return float(math.floor((original - current) / original * 100 + 0.5))


def derive_discount_percentage(
    supplied: Any,
    original: float | None,
    current: float | None,
) -> float | None:
    """Prefer the source's own percentage, else derive it from prices."""
    parsed = normalize_price(supplied)
    if parsed is not None:
        return parsed
    if original is None or current is None:
        return None
    return calculate_discount(original, current)


def pick(raw: Mapping[str, Any], keys: Sequence[str]) -> Any:
    """Return the first present, non-empty value among *keys*."""
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def pick_text(raw: Mapping[str, Any], keys: Sequence[str]) -> str | None:
    """Like :func:`pick` but always returns a stripped string or None."""
    value = pick(raw, keys)
    if value is None:
        return None
    return str(value).strip()


def to_tags(value: Any) -> tuple[str, ...]:
    """Accept a list of tags or a comma-separated string."""
    if value is None:
        return ()
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(v) for v in value]
    else:
        return ()
    return tuple(p.strip() for p in parts if p.strip())


def to_bool(value: Any) -> bool:
    """Loose truthiness for flags like ``verified`` / ``staff_pick``."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def resolve_url(base_url: str, href: str | None) -> str | None:
    """Resolve *href* against *base_url*; absolute URLs pass through."""
    if not href:
        return None
    href = href.strip()
    if href.startswith(("http://", "https://")):
        return href
    return urljoin(base_url.rstrip("/") + "/", href)


def is_absolute_url(value: Any) -> bool:
    """True for a well-formed absolute http(s) URL."""
    if not isinstance(value, str) or not value or " " in value:
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def deal_id_from_url(url: str) -> str:
    """Stable id for a scraped deal: last path segment, else a hash."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    if segments:
        return segments[-1]
    return hashlib.sha1(url.encode("utf-8")).hexdigest()[:12]
