# tests/test_normalizer.py

"""Tests for the shared provider normalisation helpers."""

import unittest

from bargainer.providers import normalizer as norm


class TestNormalizePrice(unittest.TestCase):
    """normalize_price accepts numbers and text, never yields zero for junk."""

    def test_number_passthrough(self) -> None:
        self.assertEqual(norm.normalize_price(19.99), 19.99)
        self.assertEqual(norm.normalize_price(5), 5.0)

    def test_currency_text(self) -> None:
        """Currency symbols and thousands separators are stripped."""
        self.assertEqual(norm.normalize_price("$1,299.00"), 1299.0)
        self.assertEqual(norm.normalize_price("USD 45.50"), 45.5)

    def test_unparseable_is_none(self) -> None:
        """Text with no number gives None, not 0."""
        self.assertIsNone(norm.normalize_price("FREE"))
        self.assertIsNone(norm.normalize_price(""))
        self.assertIsNone(norm.normalize_price(None))

    def test_bool_rejected(self) -> None:
        self.assertIsNone(norm.normalize_price(True))

    def test_non_finite_rejected(self) -> None:
        self.assertIsNone(norm.normalize_price(float("nan")))


class TestNormalizeRating(unittest.TestCase):
    """normalize_rating keeps only the first number."""

    def test_plain(self) -> None:
        self.assertEqual(norm.normalize_rating("4.5"), 4.5)
        self.assertEqual(norm.normalize_rating(4), 4.0)

    def test_out_of_text(self) -> None:
        """'4.5 out of 5' is 4.5, not 4.55."""
        self.assertEqual(norm.normalize_rating("4.5 out of 5"), 4.5)
        self.assertEqual(norm.normalize_rating("Rated 3.8/5"), 3.8)

    def test_unparseable(self) -> None:
        self.assertIsNone(norm.normalize_rating("no reviews"))


class TestDiscount(unittest.TestCase):
    """Discount percentage derivation."""

    def test_calculate(self) -> None:
        self.assertEqual(norm.calculate_discount(200.0, 150.0), 25.0)

    def test_rounds_half_up(self) -> None:
        """Rounding follows half-up, so 12.5% becomes 13%."""
        self.assertEqual(norm.calculate_discount(200.0, 175.0), 13.0)

    def test_zero_original_is_none(self) -> None:
        self.assertIsNone(norm.calculate_discount(0.0, 10.0))

    def test_supplied_value_wins(self) -> None:
        self.assertEqual(
            norm.derive_discount_percentage("30%", 100.0, 90.0), 30.0
        )

    def test_derived_when_missing(self) -> None:
        self.assertEqual(
            norm.derive_discount_percentage(None, 100.0, 90.0), 10.0
        )

    def test_absent_when_price_missing(self) -> None:
        self.assertIsNone(
            norm.derive_discount_percentage(None, 100.0, None)
        )


class TestPick(unittest.TestCase):
    """First-match-wins field lookup."""

    def test_first_present_key(self) -> None:
        raw = {"deal_title": "B", "title": "A"}
        self.assertEqual(norm.pick(raw, ("title", "deal_title")), "A")

    def test_skips_empty_and_none(self) -> None:
        raw = {"title": "  ", "name": None, "productName": "C"}
        self.assertEqual(
            norm.pick(raw, ("title", "name", "productName")), "C"
        )

    def test_zero_is_a_value(self) -> None:
        """Numeric zero counts as present."""
        self.assertEqual(norm.pick({"price": 0}, ("price", "alt")), 0)

    def test_none_when_missing(self) -> None:
        self.assertIsNone(norm.pick({}, ("a", "b")))


class TestTagsAndFlags(unittest.TestCase):
    """to_tags and to_bool."""

    def test_comma_string(self) -> None:
        self.assertEqual(
            norm.to_tags("laptop, gaming,,asus"),
            ("laptop", "gaming", "asus"),
        )

    def test_list(self) -> None:
        self.assertEqual(norm.to_tags(["a", "b"]), ("a", "b"))

    def test_none(self) -> None:
        self.assertEqual(norm.to_tags(None), ())

    def test_bool_strings(self) -> None:
        self.assertTrue(norm.to_bool("true"))
        self.assertFalse(norm.to_bool("false"))
        self.assertFalse(norm.to_bool(None))


class TestUrls(unittest.TestCase):
    """URL resolution and validation."""

    def test_relative_resolved(self) -> None:
        self.assertEqual(
            norm.resolve_url("https://www.dealnews.com", "/deal/123"),
            "https://www.dealnews.com/deal/123",
        )

    def test_absolute_kept(self) -> None:
        self.assertEqual(
            norm.resolve_url("https://a.com", "https://b.com/x"),
            "https://b.com/x",
        )

    def test_empty_href(self) -> None:
        self.assertIsNone(norm.resolve_url("https://a.com", ""))

    def test_is_absolute_url(self) -> None:
        self.assertTrue(norm.is_absolute_url("https://a.com/x?y=1"))
        self.assertFalse(norm.is_absolute_url("/relative/path"))
        self.assertFalse(norm.is_absolute_url("not a url"))
        self.assertFalse(norm.is_absolute_url("ftp://a.com/file"))
        self.assertFalse(norm.is_absolute_url(None))

    def test_deal_id_from_url(self) -> None:
        self.assertEqual(
            norm.deal_id_from_url("https://a.com/deal/abc-123/"),
            "abc-123",
        )
        self.assertEqual(len(norm.deal_id_from_url("https://a.com")), 12)


if __name__ == "__main__":
    unittest.main()
