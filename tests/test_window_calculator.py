import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import unittest

from errors import ValidationError
from window_calculator import WindowTracker, compute_window, relative_scroll


class TestComputeWindow(unittest.TestCase):
    def test_first_screen_of_sixty(self):
        self.assertEqual(compute_window(60, 180, 5, 0, 900), (0, 15))

    def test_scrolled_window(self):
        # floor(1800 / 180) - 5 = 5; visible = 5 + 10
        self.assertEqual(compute_window(100, 180, 5, 1800, 900), (5, 20))

    def test_partial_item_scroll_rounds_down(self):
        self.assertEqual(compute_window(100, 180, 5, 1979, 900), (5, 20))

    def test_end_clamped_to_total(self):
        self.assertEqual(compute_window(60, 180, 5, 50 * 180, 900), (45, 60))

    def test_empty(self):
        self.assertEqual(compute_window(0, 180, 5, 5000, 900), (0, 0))

    def test_negative_scroll_counts_as_top(self):
        self.assertEqual(compute_window(60, 180, 5, -400, 900), (0, 15))

    def test_scrolled_past_end_keeps_last_window(self):
        self.assertEqual(compute_window(20, 180, 5, 100 * 180, 900), (5, 20))

    def test_bounds_hold_across_geometry(self):
        for total in (0, 1, 14, 15, 51, 60, 1000):
            for item_height in (1, 37, 180):
                for buffer_size in (0, 5):
                    for scroll in (0, 90, 10_000, 10**7):
                        for viewport in (1, 899.5, 5000):
                            start, end = compute_window(total, item_height, buffer_size, scroll, viewport)
                            self.assertTrue(0 <= start <= end <= total, (total, item_height, scroll))

    def test_invalid_geometry(self):
        with self.assertRaises(ValidationError):
            compute_window(10, 0, 5, 0, 900)
        with self.assertRaises(ValidationError):
            compute_window(10, 180, -1, 0, 900)
        with self.assertRaises(ValidationError):
            compute_window(10, 180, 5, 0, 0)

    def test_relative_scroll(self):
        self.assertEqual(relative_scroll(500, 200), 300)
        self.assertEqual(relative_scroll(100, 200), 0)


class TestWindowTracker(unittest.TestCase):
    def test_unchanged_window_returns_none(self):
        tracker = WindowTracker(180, 5)
        self.assertEqual(tracker.update(60, 0, 900), (0, 15))
        self.assertIsNone(tracker.update(60, 100, 900))
        self.assertIsNone(tracker.update(60, 179 * 5, 900))

    def test_changed_window(self):
        tracker = WindowTracker(180, 5)
        tracker.update(100, 0, 900)
        self.assertEqual(tracker.update(100, 1800, 900), (5, 20))

    def test_reset_forces_next_update(self):
        tracker = WindowTracker(180, 5)
        tracker.update(60, 0, 900)
        tracker.reset()
        self.assertEqual(tracker.update(60, 0, 900), (0, 15))


if __name__ == "__main__":
    unittest.main()
