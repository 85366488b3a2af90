import datetime
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import WORKOUTS_KEY, KeyValueStore, WorkoutRepository
from exercise_catalog import ExerciseCatalog
from models import SetRecord


class WorkoutRepositoryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_workouts.db"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        self.repo = WorkoutRepository(self.db_path, catalog=ExerciseCatalog())

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_save_drops_incomplete_sets(self) -> None:
        entry = self.repo.save_workout(
            "2024-05-13",
            "Bankdrücken",
            [
                {"weight": "80", "reps": "5"},
                {"weight": "", "reps": "5"},
                {"weight": "70", "reps": None},
                {"weight": "abc", "reps": "3"},
                {"weight": "82,5", "reps": "4.7"},
            ],
        )
        self.assertEqual(
            entry.sets,
            [SetRecord(weight=80.0, reps=5), SetRecord(weight=82.5, reps=4)],
        )
        self.assertEqual(entry.date, datetime.date(2024, 5, 13))
        self.assertEqual(entry.category, "Brust")

    def test_save_without_valid_sets_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.repo.save_workout(
                "2024-05-13", "Bankdrücken", [{"weight": "", "reps": ""}]
            )
        self.assertEqual(self.repo.fetch_all_workouts(), [])
        self.assertIsNone(KeyValueStore(self.db_path).load(WORKOUTS_KEY))

    def test_save_requires_exercise(self) -> None:
        with self.assertRaises(ValueError):
            self.repo.save_workout("2024-05-13", "  ", [(80, 5)])

    def test_unknown_exercise_has_no_category(self) -> None:
        entry = self.repo.save_workout("2024-05-13", "Yoga", [(0, 1)])
        self.assertIsNone(entry.category)

    def test_ids_are_unique_and_increasing(self) -> None:
        ids = [
            self.repo.save_workout("2024-05-13", "Latzug", [(50, 10)]).id
            for _ in range(5)
        ]
        self.assertEqual(len(set(ids)), 5)
        self.assertEqual(ids, sorted(ids))

    def test_round_trip_through_storage(self) -> None:
        self.repo.save_workout("2024-05-13", "Bankdrücken", [(80, 5), (85, 3)])
        self.repo.save_workout("2024-05-14", "Latzug", [(55.5, 10)])
        reloaded = WorkoutRepository(self.db_path)
        self.assertEqual(
            reloaded.fetch_all_workouts(), self.repo.fetch_all_workouts()
        )

    def test_update_replaces_by_id(self) -> None:
        first = self.repo.save_workout("2024-05-13", "Bankdrücken", [(80, 5)])
        second = self.repo.save_workout("2024-05-14", "Latzug", [(50, 10)])
        updated = self.repo.update_workout(
            first.id, "2024-05-12", "Rudern", [(60, 8), (60, 8)]
        )
        self.assertEqual(updated.id, first.id)
        entries = self.repo.fetch_all_workouts()
        self.assertEqual([e.id for e in entries], [first.id, second.id])
        self.assertEqual(entries[0].exercise, "Rudern")
        self.assertEqual(entries[0].category, "Rücken")
        self.assertEqual(len(entries[0].sets), 2)

    def test_update_unknown_id(self) -> None:
        with self.assertRaises(ValueError):
            self.repo.update_workout(1, "2024-05-13", "Latzug", [(50, 10)])

    def test_delete(self) -> None:
        first = self.repo.save_workout("2024-05-13", "Bankdrücken", [(80, 5)])
        second = self.repo.save_workout("2024-05-14", "Latzug", [(50, 10)])
        self.repo.delete_workout(first.id)
        self.assertEqual([e.id for e in self.repo.fetch_all_workouts()], [second.id])
        self.assertEqual(len(WorkoutRepository(self.db_path).fetch_all_workouts()), 1)
        with self.assertRaises(ValueError):
            self.repo.delete_workout(first.id)

    def test_fetch_by_date_range(self) -> None:
        self.repo.save_workout("2024-05-01", "Bankdrücken", [(80, 5)])
        self.repo.save_workout("2024-05-10", "Latzug", [(50, 10)])
        self.repo.save_workout("2024-05-20", "Rudern", [(40, 10)])
        rows = self.repo.fetch_all_workouts("2024-05-05", "2024-05-20")
        self.assertEqual([e.exercise for e in rows], ["Latzug", "Rudern"])
        self.assertEqual(self.repo.exercises(), ["Bankdrücken", "Latzug", "Rudern"])

    def test_unreadable_value_falls_back_to_empty(self) -> None:
        KeyValueStore(self.db_path).save(WORKOUTS_KEY, "not json{")
        with self.assertLogs("db", level="WARNING"):
            repo = WorkoutRepository(self.db_path)
        self.assertEqual(repo.fetch_all_workouts(), [])

    def test_malformed_entries_fall_back_to_empty(self) -> None:
        KeyValueStore(self.db_path).save(WORKOUTS_KEY, '[{"id": "x"}]')
        with self.assertLogs("db", level="WARNING"):
            repo = WorkoutRepository(self.db_path)
        self.assertEqual(repo.fetch_all_workouts(), [])
        repo.save_workout("2024-05-13", "Latzug", [(50, 10)])
        self.assertEqual(len(WorkoutRepository(self.db_path).fetch_all_workouts()), 1)

    def test_export_csv(self) -> None:
        self.repo.save_workout("2024-05-13", "Bankdrücken", [(80, 5), (82.5, 3)])
        self.repo.save_workout("2024-05-14", "Yoga", [(0, 1)])
        lines = self.repo.export_csv().splitlines()
        self.assertEqual(
            lines,
            [
                "Date,Exercise,Category,Set#,Weight(kg),Reps",
                "2024-05-13,Bankdrücken,Brust,1,80,5",
                "2024-05-13,Bankdrücken,Brust,2,82.5,3",
                "2024-05-14,Yoga,Sonstige,1,0,1",
            ],
        )

    def test_export_csv_empty(self) -> None:
        self.assertEqual(
            self.repo.export_csv(), "Date,Exercise,Category,Set#,Weight(kg),Reps\n"
        )


class KeyValueStoreTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_storage.db"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        self.store = KeyValueStore(self.db_path)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_save_overwrites(self) -> None:
        self.assertIsNone(self.store.load("a"))
        self.store.save("a", "1")
        self.store.save("a", "2")
        self.store.save("b", "3")
        self.assertEqual(self.store.load("a"), "2")
        self.assertEqual(KeyValueStore(self.db_path).load("b"), "3")


if __name__ == "__main__":
    unittest.main()
