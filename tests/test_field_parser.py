import unittest

from drhub.services.field_parser import parse_price, parse_volume


class TestParsePrice(unittest.TestCase):
    def test_empty_and_none_are_zero(self):
        self.assertEqual(parse_price(""), 0)
        self.assertEqual(parse_price(None), 0)
        self.assertEqual(parse_price("   "), 0)

    def test_strips_currency_separators_and_whitespace(self):
        self.assertEqual(parse_price("฿ 1,234.50"), 1234.5)
        self.assertEqual(parse_price("-0.35 THB"), -0.35)

    def test_unparsable_leftovers_degrade_to_zero(self):
        self.assertEqual(parse_price("-"), 0)
        self.assertEqual(parse_price("1.2.3"), 0)
        self.assertEqual(parse_price("N/A"), 0)

    def test_numbers_pass_through(self):
        self.assertEqual(parse_price(6.45), 6.45)
        self.assertEqual(parse_price(7), 7.0)
        self.assertEqual(parse_price(float("nan")), 0)


class TestParseVolume(unittest.TestCase):
    def test_unit_suffixes_case_insensitive(self):
        self.assertEqual(parse_volume("1,250K"), 1_250_000)
        self.assertEqual(parse_volume("3.5m"), 3_500_000)
        self.assertEqual(parse_volume("2B"), 2_000_000_000)
        self.assertEqual(parse_volume("12 k"), 12_000)

    def test_plain_number_has_no_multiplier(self):
        self.assertEqual(parse_volume("1,250,000"), 1_250_000)

    def test_unparsable_is_zero(self):
        for raw in ("", None, "abc", "K", "1,2x", "--"):
            with self.subTest(raw=raw):
                self.assertEqual(parse_volume(raw), 0)


if __name__ == "__main__":
    unittest.main()
