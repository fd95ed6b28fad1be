from __future__ import annotations

import datetime as dt
import unittest

from ascent.util.tz import normalize_tz_name, resolve_tz


class TestTimezoneResolutionContract(unittest.TestCase):
    def test_valid_timezone_identifiers_resolve(self) -> None:
        self.assertEqual(resolve_tz("UTC"), dt.timezone.utc)
        self.assertIsNotNone(resolve_tz("local"))
        self.assertEqual(resolve_tz("+02:00").utcoffset(None), dt.timedelta(hours=2))

    def test_invalid_timezone_identifiers_raise(self) -> None:
        with self.assertRaises(ValueError):
            resolve_tz("No/Such_Zone")
        with self.assertRaises(ValueError):
            resolve_tz("+25:00")

    def test_normalize_names(self) -> None:
        self.assertEqual(normalize_tz_name(None), "local")
        self.assertEqual(normalize_tz_name(" utc "), "UTC")
        self.assertEqual(normalize_tz_name("z"), "UTC")
        self.assertEqual(normalize_tz_name("  "), "local")
        self.assertEqual(resolve_tz("-0530").utcoffset(None), -dt.timedelta(hours=5, minutes=30))
        self.assertEqual(normalize_tz_name("Europe/Bucharest"), "Europe/Bucharest")


if __name__ == "__main__":
    unittest.main(verbosity=2)
