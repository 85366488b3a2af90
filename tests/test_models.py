import datetime
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import DateTools, MathTools
from models import SetRecord, parse_set, valid_sets


class ParseSetTest(unittest.TestCase):
    def test_accepts_strings_and_numbers(self) -> None:
        self.assertEqual(parse_set({"weight": "80", "reps": "5"}), SetRecord(weight=80, reps=5))
        self.assertEqual(parse_set((42.5, 8)), SetRecord(weight=42.5, reps=8))
        self.assertEqual(parse_set({"weight": "0", "reps": "0"}), SetRecord(weight=0, reps=0))

    def test_incomplete_sets(self) -> None:
        for raw in (
            {"weight": "", "reps": "5"},
            {"weight": "80", "reps": " "},
            {"weight": None, "reps": 5},
            {"weight": "nan", "reps": 5},
            {"weight": "abc", "reps": 5},
            {"reps": 5},
            "80x5",
        ):
            self.assertIsNone(parse_set(raw), raw)

    def test_valid_sets_keeps_order(self) -> None:
        sets = valid_sets([(80, 5), ("", 3), (90, "3.9")])
        self.assertEqual(sets, [SetRecord(weight=80, reps=5), SetRecord(weight=90, reps=3)])
        self.assertEqual(sum(s.volume for s in sets), 670)


class MathToolsTest(unittest.TestCase):
    def test_volume(self) -> None:
        self.assertEqual(MathTools.volume([(80, 5), (90, 3)]), 670.0)
        self.assertEqual(MathTools.volume([]), 0.0)

    def test_percentage_rounds_half_up(self) -> None:
        self.assertEqual(MathTools.percentage(1, 8), 13)
        self.assertEqual(MathTools.percentage(2, 3), 67)
        with self.assertRaises(ValueError):
            MathTools.percentage(1, 0)

    def test_clamp(self) -> None:
        self.assertEqual(MathTools.clamp(150, 0, 100), 100)
        with self.assertRaises(ValueError):
            MathTools.clamp(1, 5, 0)


class DateToolsTest(unittest.TestCase):
    def test_window_start(self) -> None:
        today = datetime.date(2024, 5, 15)
        self.assertEqual(DateTools.window_start("7", today), datetime.date(2024, 5, 9))
        self.assertIsNone(DateTools.window_start("all", today))
        with self.assertRaises(ValueError):
            DateTools.window_days("365")

    def test_weeks(self) -> None:
        sunday = datetime.date(2024, 5, 19)
        self.assertEqual(DateTools.week_start(sunday), datetime.date(2024, 5, 13))
        self.assertEqual(DateTools.week_label(datetime.date(2024, 12, 30)), "2025-W01")

    def test_day_range(self) -> None:
        days = DateTools.day_range(datetime.date(2024, 3, 1), 3)
        self.assertEqual(
            days,
            [datetime.date(2024, 2, 28), datetime.date(2024, 2, 29), datetime.date(2024, 3, 1)],
        )
        self.assertEqual(DateTools.parse_date("2024-05-13T10:00:00"), datetime.date(2024, 5, 13))


if __name__ == "__main__":
    unittest.main()
