import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import CUSTOM_EXERCISES_KEY, CustomExerciseRepository, KeyValueStore
from exercise_catalog import ExerciseCatalog


class ExerciseCatalogTest(unittest.TestCase):
    def test_builtin_categories(self) -> None:
        catalog = ExerciseCatalog()
        self.assertEqual(
            catalog.categories(), ["Brust", "Rücken", "Arme", "Schultern", "Beine"]
        )
        self.assertEqual(catalog.exercises("Rücken"), ["Latzug", "Rudern"])
        self.assertEqual(catalog.exercises("Cardio"), [])
        self.assertEqual(catalog.category_for("Kniebeugen"), "Beine")
        self.assertEqual(catalog.category_for("Yoga"), "Sonstige")

    def test_custom_exercises_extend_catalog(self) -> None:
        catalog = ExerciseCatalog({"Brust": ["Dips"], "Cardio": ["Laufband"]})
        self.assertEqual(
            catalog.exercises("Brust"), ["Bankdrücken", "Brustpresse", "Flys", "Dips"]
        )
        self.assertEqual(catalog.categories()[-1], "Cardio")
        self.assertEqual(catalog.category_for("Laufband"), "Cardio")

    def test_first_category_wins_for_duplicates(self) -> None:
        catalog = ExerciseCatalog({"Rücken": ["Bankdrücken"]})
        self.assertEqual(catalog.category_for("Bankdrücken"), "Brust")
        names = catalog.exercises()
        self.assertEqual(names.count("Bankdrücken"), 1)

    def test_repeated_names_listed_once_per_category(self) -> None:
        catalog = ExerciseCatalog({"Brust": ["Bankdrücken", "Dips", "Dips"]})
        self.assertEqual(
            catalog.exercises("Brust"), ["Bankdrücken", "Brustpresse", "Flys", "Dips"]
        )


class CustomExerciseRepositoryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_custom_exercises.db"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        self.repo = CustomExerciseRepository(self.db_path)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_add_and_persist(self) -> None:
        self.repo.add("Cardio", "Laufband")
        self.repo.add("Cardio", "Laufband")
        self.repo.add("Brust", " Dips ")
        reloaded = CustomExerciseRepository(self.db_path)
        self.assertEqual(
            reloaded.fetch_custom(), {"Cardio": ["Laufband"], "Brust": ["Dips"]}
        )
        self.assertEqual(reloaded.catalog().category_for("Laufband"), "Cardio")

    def test_blank_names_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.repo.add("Cardio", "  ")
        with self.assertRaises(ValueError):
            self.repo.add("", "Laufband")

    def test_builtin_name_not_added_again(self) -> None:
        self.repo.add("Brust", "Bankdrücken")
        self.assertEqual(self.repo.fetch_custom(), {})
        self.assertEqual(self.repo.catalog().exercises("Brust").count("Bankdrücken"), 1)
        self.repo.add("Rücken", "Bankdrücken")
        self.assertEqual(self.repo.fetch_custom(), {"Rücken": ["Bankdrücken"]})

    def test_unreadable_value_falls_back_to_empty(self) -> None:
        KeyValueStore(self.db_path).save(CUSTOM_EXERCISES_KEY, '{"Cardio": "Laufband"}')
        with self.assertLogs("db", level="WARNING"):
            repo = CustomExerciseRepository(self.db_path)
        self.assertEqual(repo.fetch_custom(), {})

    def test_remove(self) -> None:
        self.repo.add("Cardio", "Laufband")
        self.repo.add("Cardio", "Rudergerät")
        self.repo.remove("Cardio", "Laufband")
        self.assertEqual(self.repo.fetch_custom(), {"Cardio": ["Rudergerät"]})
        self.repo.remove("Cardio", "Rudergerät")
        self.assertEqual(CustomExerciseRepository(self.db_path).fetch_custom(), {})
        with self.assertRaises(ValueError):
            self.repo.remove("Cardio", "Rudergerät")


if __name__ == "__main__":
    unittest.main()
