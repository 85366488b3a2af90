import math
from typing import Iterable, Tuple


class MathTools:
    """Provides the arithmetic used by the workout statistics."""

    @staticmethod
    def clamp(value: float, min_value: float, max_value: float) -> float:
        """Clamp ``value`` to the inclusive range [min_value, max_value]."""
        if min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        return max(min_value, min(value, max_value))

    @staticmethod
    def set_volume(weight: float, reps: int) -> float:
        """Return the training volume of a single set (weight times reps)."""
        return float(weight) * int(reps)

    @staticmethod
    def volume(sets: Iterable[Tuple[float, int]]) -> float:
        """Compute training volume as the sum of weight times reps."""
        vol = 0.0
        for weight, reps in sets:
            vol += float(weight) * int(reps)
        return vol

    @staticmethod
    def round_half_up(value: float) -> int:
        """Round to the nearest integer with halves rounded up."""
        return int(math.floor(value + 0.5))

    @classmethod
    def percentage(cls, part: float, total: float) -> int:
        """Return ``part`` as a whole-number percentage of ``total``."""
        if total == 0:
            raise ValueError("total must not be zero")
        return cls.round_half_up(part / total * 100)
