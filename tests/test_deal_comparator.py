# tests/test_deal_comparator.py

"""Tests for near-duplicate grouping and best-deal selection."""

import unittest

from bargainer.filters.deal_comparator import (
    compare_deals,
    normalize_title,
    pick_best,
)
from bargainer.models.deal import Deal


def _make(
    deal_id: str,
    title: str,
    price: float | None = None,
    rating: float | None = None,
    source: str = "slickdeals",
) -> Deal:
    return Deal(
        id=deal_id,
        title=title,
        store="Amazon",
        url=f"https://example.com/{deal_id}",
        source=source,
        price=price,
        rating=rating,
    )


class TestNormalizeTitle(unittest.TestCase):
    """Title grouping keys."""

    def test_case_and_punctuation(self) -> None:
        self.assertEqual(
            normalize_title("ASUS ROG Strix G15 Gaming Laptop"),
            normalize_title("Asus ROG Strix G15 Gaming Laptop!!"),
        )

    def test_whitespace_collapsed(self) -> None:
        self.assertEqual(normalize_title("  a   b\tc "), "a b c")

    def test_truncated(self) -> None:
        key = normalize_title("x" * 80)
        self.assertEqual(len(key), 50)
        self.assertEqual(normalize_title("abcdef", length=3), "abc")


class TestCompareDeals(unittest.TestCase):
    """compare_deals picks one representative per group."""

    def test_laptop_within_tolerance_prefers_rating(self) -> None:
        """$899.99 vs $895.00 is under $5 apart, so 4.5 stars beats 4.2."""
        deals = [
            _make("1", "ASUS ROG Strix G15 Gaming Laptop", 899.99, 4.5),
            _make("2", "Asus ROG Strix G15 Gaming Laptop!!", 895.00, 4.2,
                  source="rapidapi"),
        ]
        result = compare_deals(deals)
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].id, "1")

    def test_cheaper_wins_outside_tolerance(self) -> None:
        deals = [
            _make("1", "Headphones", 120.0, 5.0),
            _make("2", "headphones", 99.0, 3.0),
        ]
        self.assertEqual(compare_deals(deals)[0].id, "2")

    def test_missing_price_compares_rating(self) -> None:
        group = [
            _make("1", "Mouse", None, 3.0),
            _make("2", "Mouse", 20.0, 4.0),
        ]
        self.assertEqual(pick_best(group).id, "2")

    def test_zero_price_compares_rating(self) -> None:
        """A $0.00 listing is not treated as the cheapest."""
        group = [
            _make("1", "Mouse", 0.0, 2.0),
            _make("2", "Mouse", 20.0, 4.0),
        ]
        self.assertEqual(pick_best(group).id, "2")

    def test_distinct_titles_kept_in_order(self) -> None:
        deals = [
            _make("1", "Keyboard", 50.0),
            _make("2", "Monitor", 200.0),
            _make("3", "keyboard.", 45.0),
        ]
        result = compare_deals(deals)
        self.assertEqual([d.id for d in result], ["3", "2"])

    def test_singleton_group(self) -> None:
        deal = _make("1", "Only one")
        self.assertIs(pick_best([deal]), deal)

    def test_empty(self) -> None:
        self.assertEqual(compare_deals([]), [])


if __name__ == "__main__":
    unittest.main()
