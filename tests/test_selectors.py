"""
tests/test_selectors.py

Selector list parsing and XPath detection.
"""

from __future__ import annotations

import unittest

from app.scraping.selectors import is_xpath_like, parse_selector_list


class TestParseSelectorList(unittest.TestCase):
    def test_splits_on_commas_and_newlines(self) -> None:
        self.assertEqual(
            parse_selector_list("h1, .price\n  p.lead  \n\n,span"),
            ["h1", ".price", "p.lead", "span"],
        )

    def test_keeps_order_and_duplicates(self) -> None:
        self.assertEqual(parse_selector_list("p, h1, p"), ["p", "h1", "p"])

    def test_carriage_returns_are_trimmed(self) -> None:
        self.assertEqual(parse_selector_list("h1\r\nh2\r\n"), ["h1", "h2"])

    def test_blank_input_yields_empty_list(self) -> None:
        for raw in ("", "   ", " , \n ,, ", None):
            with self.subTest(raw=raw):
                self.assertEqual(parse_selector_list(raw), [])

    def test_selector_text_is_otherwise_verbatim(self) -> None:
        self.assertEqual(parse_selector_list("div > a[href$='.pdf']"), ["div > a[href$='.pdf']"])


class TestIsXPathLike(unittest.TestCase):
    def test_flags_slash_and_paren_prefixes(self) -> None:
        self.assertTrue(is_xpath_like("//div[@id='main']"))
        self.assertTrue(is_xpath_like("(//a)[1]"))

    def test_css_selectors_are_not_flagged(self) -> None:
        self.assertFalse(is_xpath_like("div.main a"))
        self.assertFalse(is_xpath_like("a:not(.x)"))


if __name__ == "__main__":
    unittest.main()
