from __future__ import annotations

import datetime
import math
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SetRecord(BaseModel):
    """A single weight x reps pair."""

    model_config = ConfigDict(frozen=True)

    weight: float
    reps: int

    @property
    def volume(self) -> float:
        return self.weight * self.reps


class WorkoutEntry(BaseModel):
    """One logged exercise with its sets on a given date."""

    model_config = ConfigDict(frozen=True)

    id: int
    date: datetime.date
    exercise: str
    category: Optional[str] = None
    sets: List[SetRecord] = Field(default_factory=list)

    @property
    def volume(self) -> float:
        return sum(s.volume for s in self.sets)

    @property
    def max_weight(self) -> float:
        return max((s.weight for s in self.sets), default=0.0)


class BodyWeightEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime.date
    weight: float


class Goals(BaseModel):
    """Weekly and monthly training-day targets."""

    weekly: int = Field(default=3, ge=0)
    monthly: int = Field(default=12, ge=0)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value: Any) -> float | None:
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_set(raw: Any) -> SetRecord | None:
    """Return a :class:`SetRecord` for ``raw`` or ``None`` if it is incomplete.

    ``raw`` may be a mapping with ``weight`` and ``reps`` keys, a
    ``(weight, reps)`` pair or a :class:`SetRecord`. Reps are truncated to a
    whole number.
    """
    if isinstance(raw, SetRecord):
        return raw
    if isinstance(raw, dict):
        weight, reps = raw.get("weight"), raw.get("reps")
    else:
        try:
            weight, reps = raw
        except (TypeError, ValueError):
            return None
    if _is_blank(weight) or _is_blank(reps):
        return None
    weight_num = _parse_number(weight)
    reps_num = _parse_number(reps)
    if weight_num is None or reps_num is None:
        return None
    return SetRecord(weight=weight_num, reps=int(reps_num))


def valid_sets(raw_sets: Iterable[Any]) -> List[SetRecord]:
    """Drop incomplete sets, keeping the order of the remaining ones."""
    result: List[SetRecord] = []
    for raw in raw_sets:
        parsed = parse_set(raw)
        if parsed is not None:
            result.append(parsed)
    return result
