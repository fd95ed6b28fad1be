from __future__ import annotations

import datetime as dt
import unittest

from ascent.util.timeparse import (
    date_part,
    format_hhmm,
    parse_iso_to_epoch_ms,
    parse_window,
    time_of_day_min,
)


class TestTimeparseContract(unittest.TestCase):
    def test_date_part(self) -> None:
        self.assertEqual(date_part("2024-01-05T09:30"), dt.date(2024, 1, 5))
        self.assertEqual(date_part("2024-01-05"), dt.date(2024, 1, 5))
        self.assertIsNone(date_part("09:30"))
        self.assertIsNone(date_part("2024-02-30"))
        self.assertIsNone(date_part(None))

    def test_time_of_day(self) -> None:
        self.assertEqual(time_of_day_min("2024-01-05T09:30"), 570)
        self.assertEqual(time_of_day_min("2024-01-05T09:30:00.000Z"), 570)
        self.assertIsNone(time_of_day_min("09:30"))
        self.assertIsNone(time_of_day_min("2024-01-05"))
        self.assertIsNone(time_of_day_min("2024-01-05T25:00"))

    def test_epoch_ms(self) -> None:
        self.assertEqual(parse_iso_to_epoch_ms("2020-01-01T00:00:00Z"), 1577836800000)
        self.assertEqual(parse_iso_to_epoch_ms("2020-01-01T00:00:00.000Z"), 1577836800000)
        self.assertEqual(parse_iso_to_epoch_ms("2020-01-01T00:00:00"), 1577836800000)
        self.assertIsNone(parse_iso_to_epoch_ms("yesterday"))
        self.assertIsNone(parse_iso_to_epoch_ms(""))

    def test_window(self) -> None:
        self.assertEqual(parse_window("06:00-24:00"), (360, 1440))
        self.assertEqual(parse_window("8:30-17:00"), (510, 1020))
        with self.assertRaises(ValueError):
            parse_window("17:00-08:00")
        with self.assertRaises(ValueError):
            parse_window("06:00")

    def test_format(self) -> None:
        self.assertEqual(format_hhmm(545), "09:05")


if __name__ == "__main__":
    unittest.main(verbosity=2)
