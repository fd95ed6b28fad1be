from __future__ import annotations

import unittest

from ascent.graph import goal_root, index_goals
from ascent.model import Goal


def _g(gid: str, *parents: str) -> Goal:
    return Goal(id=gid, content=gid, parent_ids=tuple(parents))


class TestGraphHelpersContract(unittest.TestCase):
    def setUp(self) -> None:
        self.goals = [
            _g("top"),
            _g("side"),
            _g("mid", "top", "side"),
            _g("leaf", "mid"),
            _g("stray", "nowhere"),
        ]
        self.by_id = index_goals(self.goals)

    def test_goal_root_follows_first_parent(self) -> None:
        self.assertEqual(goal_root("leaf", self.by_id).id, "top")
        self.assertEqual(goal_root("mid", self.by_id).id, "top")
        self.assertIsNone(goal_root("top", self.by_id))
        self.assertIsNone(goal_root("stray", self.by_id))
        self.assertIsNone(goal_root("unknown", self.by_id))

    def test_goal_root_skips_dangling_first_parent(self) -> None:
        by_id = index_goals([_g("top"), _g("leaf", "ghost", "top")])
        self.assertEqual(goal_root("leaf", by_id).id, "top")

    def test_goal_root_cycle_returns_none(self) -> None:
        by_id = index_goals([_g("a", "b"), _g("b", "c"), _g("c", "a"), _g("leaf", "a")])
        self.assertIsNone(goal_root("leaf", by_id))
        self.assertIsNone(goal_root("a", by_id))


if __name__ == "__main__":
    unittest.main(verbosity=2)
