from __future__ import annotations

import unittest

from _support import FixedWidthMeasurer

from mdradial.config import LayoutConfig
from mdradial.measure import NodeRole, TextMeasurer, size_box, wrap_label


class WrapLabelTests(unittest.TestCase):
    def test_short_text_is_one_line(self) -> None:
        self.assertEqual(wrap_label("Short", 12), ["Short"])

    def test_greedy_word_wrap(self) -> None:
        self.assertEqual(wrap_label("one two three four", 9), ["one two", "three", "four"])

    def test_long_words_are_split(self) -> None:
        self.assertEqual(wrap_label("abcdefghij", 4), ["abcd", "efgh", "ij"])

    def test_blank_text(self) -> None:
        self.assertEqual(wrap_label("   ", 5), [""])


class SizeBoxTests(unittest.TestCase):
    def test_minimum_floors(self) -> None:
        config = LayoutConfig(node_width=20, node_height=10)
        box = size_box("x", NodeRole.SUBITEM, config, FixedWidthMeasurer())
        self.assertEqual((box.width, box.height), (80.0, 40.0))

    def test_width_growth_is_capped(self) -> None:
        config = LayoutConfig(node_width=50)
        box = size_box("wwwwwwwwwwwwwwwwwwww", NodeRole.TITLE, config, FixedWidthMeasurer())
        self.assertEqual(box.width, 50 * 1.2 * 1.5)
        self.assertEqual(box.lines, ("wwwwwwwwwwwwwwwwwwww",))

    def test_height_grows_with_lines(self) -> None:
        config = LayoutConfig()
        one = size_box("tiny", NodeRole.ITEM, config, FixedWidthMeasurer())
        many = size_box("a label that needs quite a few lines to fit", NodeRole.ITEM, config, FixedWidthMeasurer())
        self.assertGreater(len(many.lines), 2)
        self.assertGreater(many.height, one.height)
        self.assertEqual(many.font_size, 12.0)

    def test_pillow_measurer_returns_widths(self) -> None:
        measurer = TextMeasurer()
        short = measurer.measure("ab", 12, "sans-serif")
        long = measurer.measure("abcdefgh", 12, "sans-serif")
        self.assertGreater(short, 0)
        self.assertGreater(long, short)
        self.assertIs(measurer.font(12, "sans-serif"), measurer.font(12.2, "sans-serif"))


if __name__ == "__main__":
    unittest.main()
