import unittest

from models import (
    DAILY_GOAL,
    DailyEntry,
    LeaderboardWindow,
    RoutineRegistry,
    RoutineType,
    TaskRecord,
    UserProfile,
    validate_date_key,
)

from helpers import make_entry, manual, morning, night


class TestTaskRecord(unittest.TestCase):
    def test_title_is_trimmed_and_empty_titles_rejected(self):
        self.assertEqual(TaskRecord.create("  buy milk ").title, "buy milk")
        with self.assertRaises(ValueError):
            TaskRecord.create("   ")

    def test_carry_copy_is_a_fresh_open_manual_task(self):
        task = TaskRecord.create("write report", RoutineType.MORNING)
        task.completed = True

        copy = task.carry_copy()

        self.assertNotEqual(copy.id, task.id)
        self.assertEqual(copy.title, "write report")
        self.assertFalse(copy.completed)
        self.assertEqual(copy.routine_type, RoutineType.NONE)

    def test_only_open_manual_tasks_are_carryover_candidates(self):
        self.assertTrue(TaskRecord.create("a").is_carryover_candidate)
        done = TaskRecord.create("b")
        done.completed = True
        self.assertFalse(done.is_carryover_candidate)
        self.assertFalse(TaskRecord.create("c", RoutineType.NIGHT).is_carryover_candidate)

    def test_manual_routine_type_is_stored_as_null(self):
        data = TaskRecord.create("a").to_dict()
        self.assertIsNone(data["routineType"])

        restored = TaskRecord.from_dict({"id": "x1", "title": "b", "routineType": "night"})
        self.assertEqual(restored.routine_type, RoutineType.NIGHT)
        self.assertFalse(restored.completed)

    def test_stored_task_loads_without_validation(self):
        restored = TaskRecord.from_dict({"id": "t1", "title": "", "routineType": "weekly"})

        self.assertEqual(restored.title, "")
        self.assertEqual(restored.routine_type, RoutineType.NONE)
        self.assertFalse(restored.is_carryover_candidate)


class TestDailyEntry(unittest.TestCase):
    def test_counters_follow_tasks(self):
        entry = make_entry("u1", "2025-03-10", [manual("a", True), manual("b"), morning("c", True)])

        data = entry.to_dict()

        self.assertEqual((data["completedCount"], data["totalTasks"]), (2, 3))
        entry.remove_tasks([entry.tasks[0].id])
        self.assertEqual(entry.tasks_payload()["completedCount"], 1)

    def test_perfect_day_is_exactly_the_daily_goal(self):
        entry = make_entry("u1", "2025-03-10", [manual(str(i), True) for i in range(DAILY_GOAL)])
        self.assertTrue(entry.is_perfect)
        entry.append_tasks([TaskRecord.create("extra")])
        self.assertTrue(entry.is_perfect)
        entry.tasks[0].completed = False
        self.assertFalse(entry.is_perfect)

    def test_grouped_tasks_keep_insertion_order(self):
        entry = make_entry("u1", "2025-03-10", [night("n1"), manual("a"), morning("m1"), manual("b")])

        groups = entry.grouped_tasks()

        self.assertEqual([t.title for t in groups["morning"]], ["m1"])
        self.assertEqual([t.title for t in groups["none"]], ["a", "b"])
        self.assertEqual([t.title for t in groups["night"]], ["n1"])

    def test_round_trip_through_document(self):
        entry = make_entry("u1", "2025-03-10", [manual("a", True)], rollover_applied=True)

        restored = DailyEntry.from_dict("u1", "2025-03-10", entry.to_dict())

        self.assertEqual(restored, entry)

    def test_date_keys_must_be_iso_calendar_dates(self):
        self.assertEqual(validate_date_key("2024-02-29"), "2024-02-29")
        for bad in ("2025-02-30", "2025/03/10", "20250310", "", "today"):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    validate_date_key(bad)


class TestProfileAndWindows(unittest.TestCase):
    def test_profile_defaults_display_name_to_user_id(self):
        profile = UserProfile.from_dict("u1", {"morningRoutine": ["a"]})

        self.assertEqual(profile.display_name, "u1")
        self.assertEqual(profile.routines.morning, ["a"])
        self.assertEqual(profile.routines.night, [])

    def test_registry_has_no_list_for_manual_tasks(self):
        with self.assertRaises(ValueError):
            RoutineRegistry().titles_for(RoutineType.NONE)

    def test_window_lengths(self):
        self.assertEqual(LeaderboardWindow("today").days, 1)
        self.assertEqual(LeaderboardWindow.WEEK.days, 7)


if __name__ == "__main__":
    unittest.main(verbosity=2)
