from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from ascent.normalize import goal_to_dict, normalize_goal, normalize_goals


class TestNormalizeContract(unittest.TestCase):
    def test_missing_optional_fields_default(self) -> None:
        g = normalize_goal({"id": "a"})
        self.assertIsNotNone(g)
        self.assertEqual(g.priority, "P2")
        self.assertEqual(g.recurrence, "none")
        self.assertEqual(g.parent_ids, ())
        self.assertEqual(g.sub_goals, ())
        self.assertIsNone(g.duration)
        self.assertIsNone(g.start_date)

    def test_invalid_values_fall_back(self) -> None:
        g = normalize_goal(
            {
                "id": "a",
                "priority": "P7",
                "recurrence": "hourly",
                "duration": True,
                "parentIds": ["p", "p", 3, ""],
                "subGoals": [{"id": "s", "duration": 0}, {"content": "no id"}, "junk"],
                "position": "nowhere",
            }
        )
        self.assertEqual(g.priority, "P2")
        self.assertEqual(g.recurrence, "none")
        self.assertIsNone(g.duration)
        self.assertEqual(g.parent_ids, ("p",))
        self.assertEqual([s.id for s in g.sub_goals], ["s"])
        self.assertIsNone(g.sub_goals[0].duration)
        self.assertEqual(g.position, (0.0, 0.0))

    def test_legacy_parent_id(self) -> None:
        self.assertEqual(normalize_goal({"id": "a", "parentId": "p"}).parent_ids, ("p",))

    def test_normalize_goals_drops_malformed_and_duplicates(self) -> None:
        out = normalize_goals([{"id": "a"}, {"content": "no id"}, "junk", {"id": "a", "content": "dup"}])
        self.assertEqual([g.id for g in out], ["a"])
        self.assertEqual(normalize_goals(None), [])

    def test_goal_round_trip(self) -> None:
        raw = {
            "id": "a",
            "content": "A",
            "parentIds": ["p"],
            "isCompleted": True,
            "completedAt": "2024-01-02T00:00:00.000Z",
            "priority": "P0",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "isToday": True,
            "scheduledTime": "2024-01-03T09:00",
            "duration": 25,
            "startDate": "2024-01-01",
            "endDate": "2024-01-09",
            "recurrence": "weekly",
            "subGoals": [{"id": "s", "content": "S", "isCompleted": False, "scheduledTime": "2024-01-03T10:00", "duration": 15}],
            "position": {"x": 10.0, "y": 20.0},
        }
        self.assertEqual(goal_to_dict(normalize_goal(raw)), raw)

    def test_warnings_only_when_obs_enabled(self) -> None:
        raw = [{"id": "a", "createdAt": "not-a-date"}, {"content": "no id"}]
        with patch.dict(os.environ, {"ASCENT_OBS_LOG": "1"}, clear=False), patch("ascent.normalize.eprint") as ep:
            normalize_goals(raw)
        combined = "\n".join(str(c.args[0]) for c in ep.call_args_list if c.args)
        self.assertIn("[ascent.normalize] WARN: invalid createdAt id='a'", combined)
        self.assertIn("[ascent.normalize] WARN: dropped malformed goal at index 1", combined)

        with patch.dict(os.environ, {}, clear=True), patch("ascent.normalize.eprint") as ep:
            normalize_goals(raw)
        self.assertFalse(ep.called)


if __name__ == "__main__":
    unittest.main(verbosity=2)
