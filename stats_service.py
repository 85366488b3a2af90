from __future__ import annotations
import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from algorithms import DateTools, MathTools
from exercise_catalog import FALLBACK_CATEGORY, ExerciseCatalog
from models import BodyWeightEntry, Goals, WorkoutEntry


class StatisticsService:
    """Compute derived workout views.

    Every method is a pure function of its arguments: entries are never
    mutated and nothing is cached, so callers recompute after each change.
    ``today`` defaults to the current date and can be pinned for tests.
    """

    def __init__(self, catalog: ExerciseCatalog | None = None) -> None:
        self.catalog = catalog or ExerciseCatalog()

    @staticmethod
    def _today(today: Optional[datetime.date]) -> datetime.date:
        return today or datetime.date.today()

    def filter_by_window(
        self,
        entries: Sequence[WorkoutEntry],
        window: str | int | None,
        today: Optional[datetime.date] = None,
    ) -> List[WorkoutEntry]:
        """Return entries dated strictly after ``today - window`` in input order."""
        start = DateTools.window_start(window, self._today(today))
        if start is None:
            return list(entries)
        return [e for e in entries if e.date >= start]

    def streak(
        self,
        entries: Iterable[WorkoutEntry],
        today: Optional[datetime.date] = None,
    ) -> int:
        """Consecutive training days ending today, or yesterday if today is empty."""
        today = self._today(today)
        dates = sorted({e.date for e in entries}, reverse=True)
        if not dates:
            return 0
        one_day = datetime.timedelta(days=1)
        expected = today if today in dates else today - one_day
        streak = 0
        for day in dates:
            if day > expected:
                continue
            if day != expected:
                break
            streak += 1
            expected -= one_day
        return streak

    def personal_records(
        self, entries: Iterable[WorkoutEntry]
    ) -> Dict[str, Dict[str, float]]:
        """Return the highest-volume set per exercise; the first maximum wins ties."""
        records: Dict[str, Dict[str, float]] = {}
        for entry in entries:
            for s in entry.sets:
                volume = MathTools.set_volume(s.weight, s.reps)
                current = records.get(entry.exercise)
                if current is None or volume > current["volume"]:
                    records[entry.exercise] = {
                        "weight": s.weight,
                        "reps": s.reps,
                        "volume": volume,
                        "date": entry.date,
                    }
        return records

    def category_distribution(
        self, entries: Sequence[WorkoutEntry]
    ) -> Dict[str, Dict[str, int]]:
        """Count entries per catalog category with whole-number percentages."""
        counts: Dict[str, int] = {}
        for entry in entries:
            category = self.catalog.category_for(entry.exercise, FALLBACK_CATEGORY)
            counts[category] = counts.get(category, 0) + 1
        total = sum(counts.values())
        if total == 0:
            return {}
        return {
            category: {
                "count": count,
                "percentage": MathTools.percentage(count, total),
            }
            for category, count in counts.items()
        }

    def weekly_volume(
        self, entries: Iterable[WorkoutEntry], weeks: int = 12
    ) -> List[Dict[str, object]]:
        """Return total volume per Monday-starting week, oldest first."""
        by_week: Dict[datetime.date, float] = {}
        for entry in entries:
            start = DateTools.week_start(entry.date)
            by_week[start] = by_week.get(start, 0.0) + MathTools.volume(
                (s.weight, s.reps) for s in entry.sets
            )
        recent = sorted(by_week)[-weeks:] if weeks > 0 else []
        result: List[Dict[str, object]] = []
        for start in recent:
            result.append(
                {
                    "week": DateTools.week_label(start),
                    "week_start": start,
                    "volume": round(by_week[start], 2),
                }
            )
        return result

    def activity_series(
        self,
        entries: Iterable[WorkoutEntry],
        days: int = 90,
        today: Optional[datetime.date] = None,
    ) -> List[Dict[str, object]]:
        """Return the number of entries for each of the last ``days`` days."""
        counts: Dict[datetime.date, int] = {}
        for entry in entries:
            counts[entry.date] = counts.get(entry.date, 0) + 1
        return [
            {"date": d, "count": counts.get(d, 0)}
            for d in DateTools.day_range(self._today(today), days)
        ]

    def exercise_progress(
        self, entries: Iterable[WorkoutEntry], exercise: Optional[str]
    ) -> List[Dict[str, object]]:
        """Return max weight and total volume per entry of ``exercise`` by date."""
        if not exercise:
            return []
        matching = sorted(
            (e for e in entries if e.exercise == exercise), key=lambda e: e.date
        )
        return [
            {
                "date": e.date,
                "max_weight": e.max_weight,
                "total_volume": MathTools.volume((s.weight, s.reps) for s in e.sets),
            }
            for e in matching
        ]

    def history_by_day(
        self, entries: Iterable[WorkoutEntry]
    ) -> List[Dict[str, object]]:
        """Group entries by date, newest day first."""
        grouped: Dict[datetime.date, List[WorkoutEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.date, []).append(entry)
        result = []
        for day in sorted(grouped, reverse=True):
            day_entries = grouped[day]
            result.append(
                {
                    "date": day,
                    "entries": day_entries,
                    "max_sets": max(len(e.sets) for e in day_entries),
                }
            )
        return result

    def overview(self, entries: Sequence[WorkoutEntry]) -> Dict[str, float]:
        """Return aggregated workout statistics."""
        if not entries:
            return {
                "workouts": 0,
                "training_days": 0,
                "sets": 0,
                "volume": 0.0,
                "exercises": 0,
            }
        volume = 0.0
        sets = 0
        for entry in entries:
            volume += MathTools.volume((s.weight, s.reps) for s in entry.sets)
            sets += len(entry.sets)
        return {
            "workouts": len(entries),
            "training_days": len({e.date for e in entries}),
            "sets": sets,
            "volume": round(volume, 2),
            "exercises": len({e.exercise for e in entries}),
        }

    def goal_progress(
        self,
        entries: Iterable[WorkoutEntry],
        goals: Goals,
        today: Optional[datetime.date] = None,
    ) -> Dict[str, Dict[str, int]]:
        """Training days this week and month measured against the goals."""
        today = self._today(today)
        week_start = DateTools.week_start(today)
        month_start = DateTools.month_start(today)
        days = {e.date for e in entries if e.date <= today}
        week_days = len({d for d in days if d >= week_start})
        month_days = len({d for d in days if d >= month_start})

        def _progress(done: int, target: int) -> Dict[str, int]:
            pct = (
                100
                if target == 0
                else int(MathTools.clamp(MathTools.percentage(done, target), 0, 100))
            )
            return {"done": done, "target": target, "percentage": pct}

        return {
            "weekly": _progress(week_days, goals.weekly),
            "monthly": _progress(month_days, goals.monthly),
        }

    def body_weight_trend(
        self, entries: Iterable[BodyWeightEntry]
    ) -> List[Dict[str, object]]:
        """Body weight by date with the change since the first entry."""
        history = sorted(entries, key=lambda e: e.date)
        if not history:
            return []
        first = history[0].weight
        return [
            {
                "date": e.date,
                "weight": e.weight,
                "change": round(e.weight - first, 2),
            }
            for e in history
        ]

    def body_weight_stats(
        self, entries: Iterable[BodyWeightEntry]
    ) -> Dict[str, float]:
        trend = self.body_weight_trend(entries)
        if not trend:
            return {"latest": 0.0, "min": 0.0, "max": 0.0, "change": 0.0}
        weights = [t["weight"] for t in trend]
        return {
            "latest": trend[-1]["weight"],
            "min": min(weights),
            "max": max(weights),
            "change": trend[-1]["change"],
        }
