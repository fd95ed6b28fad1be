from __future__ import annotations

import unittest


class TestPublicApiLockContract(unittest.TestCase):
    def test_api_module_exports_are_present(self) -> None:
        import ascent.api as api

        self.assertTrue(hasattr(api, "__all__"))
        self.assertIsInstance(api.__all__, (list, tuple))
        self.assertEqual(len(api.__all__), len(api._PUBLIC_EXPORTS))

        for name in api.__all__:
            self.assertIsInstance(name, str)
            self.assertTrue(hasattr(api, name), f"ascent.api missing public name: {name}")
            self.assertIsNotNone(getattr(api, name), f"ascent.api {name} is None")

    def test_package_reexports_match_api_all(self) -> None:
        import ascent
        import ascent.api as api

        for name in api.__all__:
            self.assertTrue(hasattr(ascent, name), f"ascent package does not re-export: {name}")
            self.assertIs(getattr(ascent, name), getattr(api, name), f"ascent.{name} must be same object as ascent.api.{name}")

    def test_core_entry_points_are_public(self) -> None:
        import ascent.api as api

        for name in ("derive_queue", "project", "layout"):
            self.assertIn(name, api.__all__)

    def test_public_exports_are_sorted_and_unique(self) -> None:
        import ascent.api as api

        self.assertIsInstance(api._PUBLIC_EXPORTS, tuple)
        self.assertEqual(len(set(api._PUBLIC_EXPORTS)), len(api._PUBLIC_EXPORTS))
        self.assertEqual(list(api._PUBLIC_EXPORTS), sorted(api._PUBLIC_EXPORTS))


if __name__ == "__main__":
    unittest.main(verbosity=2)
