import datetime
import os

from db import BodyWeightRepository, CustomExerciseRepository, WorkoutRepository


def seed(db_path: str = "fitness.db") -> None:
    catalog = CustomExerciseRepository(db_path).catalog()
    workouts = WorkoutRepository(db_path, catalog)
    if workouts.fetch_all_workouts():
        print("Database already contains workouts")
        return
    today = datetime.date.today()
    plan = [
        ("Bankdrücken", [(60, 10), (70, 8), (80, 5)]),
        ("Latzug", [(50, 12), (55, 10)]),
        ("Kniebeugen", [(80, 8), (90, 6)]),
    ]
    for offset in range(0, 21, 2):
        day = today - datetime.timedelta(days=offset)
        name, sets = plan[(offset // 2) % len(plan)]
        bump = (20 - offset) // 4 * 2.5
        workouts.save_workout(
            day, name, [{"weight": w + bump, "reps": r} for w, r in sets]
        )
    body_weights = BodyWeightRepository(db_path)
    for offset in range(0, 28, 7):
        body_weights.log(today - datetime.timedelta(days=offset), 82.0 + offset / 14)
    print("Seed data inserted")


if __name__ == "__main__":
    seed(os.environ.get("DB_PATH", "fitness.db"))
