from datetime import date
import unittest

from planner.domain.Habit import Habit, weekday_number
from planner.domain.PlanState import PlanState
from planner.domain.Task import TodoItem, TopThreeItem
from planner.domain.UserInfo import UserInfo
from planner.utilities.constants import SCHEDULE_HOURS, SCHEMA_VERSION


class TestPlanState(unittest.TestCase):

    def test_empty_plan_shape(self):
        plan = PlanState.empty()
        self.assertEqual(len(plan.top_three), 3)
        self.assertTrue(all(item.text == "" and not item.done for item in plan.top_three))
        self.assertEqual(list(plan.schedule.keys()), list(SCHEDULE_HOURS))
        self.assertEqual(len(plan.schedule), 18)
        self.assertEqual(plan.meals, {"breakfast": "", "lunch": "", "dinner": ""})
        self.assertEqual(plan.water, 0)
        self.assertEqual(plan.todos, [])
        self.assertEqual(plan.habits, [])
        self.assertEqual(plan.notes, "")

    def test_top_three_is_padded(self):
        plan = PlanState(top_three=[TopThreeItem(text="Ship it")])
        self.assertEqual(len(plan.top_three), 3)
        self.assertEqual(plan.top_three[0].text, "Ship it")

    def test_to_dict_uses_stored_keys(self):
        data = PlanState.empty().to_dict()
        self.assertEqual(data["schemaVersion"], SCHEMA_VERSION)
        for key in ("topThree", "todos", "schedule", "notes", "meals", "water", "habits"):
            self.assertIn(key, data)

    def test_from_dict_to_dict(self):
        plan = PlanState(todos=[TodoItem(text="Buy milk", order=0)], notes="hello", water=3,
                         habits=[Habit("Read", days=[1, 3])])
        self.assertEqual(PlanState.from_dict(plan.to_dict()), plan)

    def test_find_todo_missing(self):
        with self.assertRaises(KeyError):
            PlanState.empty().find_todo("nope")

    def test_sorted_todos(self):
        a = TodoItem(text="a", order=2)
        b = TodoItem(text="b", order=0)
        c = TodoItem(text="c", order=1)
        plan = PlanState(todos=[a, b, c])
        self.assertEqual([t.text for t in plan.sorted_todos()], ["b", "c", "a"])


class TestHabit(unittest.TestCase):

    def test_weekday_number_starts_on_sunday(self):
        self.assertEqual(weekday_number(date(2025, 1, 5)), 0)
        self.assertEqual(weekday_number(date(2025, 1, 6)), 1)
        self.assertEqual(weekday_number(date(2025, 1, 11)), 6)

    def test_empty_days_means_every_day(self):
        habit = Habit("Stretch")
        for offset in range(7):
            self.assertTrue(habit.is_scheduled(date(2025, 1, 5 + offset)))

    def test_selected_days_only(self):
        habit = Habit("Gym", days=[1, 3, 5])
        self.assertTrue(habit.is_scheduled(date(2025, 1, 6)))   # Monday
        self.assertFalse(habit.is_scheduled(date(2025, 1, 7)))  # Tuesday

    def test_mark_and_status(self):
        habit = Habit("Read")
        day = date(2025, 1, 6)
        self.assertIsNone(habit.status_on(day))
        habit.mark(day, "skipped")
        self.assertEqual(habit.status_on(day), "skipped")
        habit.mark(day, "completed")
        self.assertEqual(habit.completions, {"2025-01-06": "completed"})

    def test_mark_unknown_status(self):
        with self.assertRaises(ValueError):
            Habit("Read").mark(date(2025, 1, 6), "done")

    def test_to_dict_sorts_days(self):
        data = Habit("Read", days={5, 0, 3}).to_dict()
        self.assertEqual(data["days"], [0, 3, 5])
        self.assertIn("createdAt", data)


class TestUserInfo(unittest.TestCase):

    def test_to_dict_keys(self):
        info = UserInfo("abc", email="a@b.c", display_name="Ann", provider="google")
        data = info.to_dict()
        self.assertEqual(set(data), {"email", "displayName", "uid", "createdAt", "lastLoginAt", "provider"})
        self.assertEqual(UserInfo.from_dict(data).to_dict(), data)

    def test_from_dict_defaults(self):
        info = UserInfo.from_dict({"uid": "x"})
        self.assertEqual(info.provider, "anonymous")
        self.assertEqual(info.email, "")


if __name__ == "__main__":
    unittest.main()
