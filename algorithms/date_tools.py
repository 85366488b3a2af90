import datetime
from typing import List


class DateTools:
    """Calendar helpers for windows, weeks and day ranges."""

    WINDOWS: dict[str, int | None] = {
        "7": 7,
        "30": 30,
        "90": 90,
        "all": None,
    }

    @staticmethod
    def parse_date(value: str | datetime.date) -> datetime.date:
        """Return ``value`` as a calendar date."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        return datetime.date.fromisoformat(str(value).strip()[:10])

    @classmethod
    def window_days(cls, window: str | int | None) -> int | None:
        """Return the number of days covered by ``window`` or ``None`` if unbounded."""
        if window is None:
            return None
        key = str(window).strip().lower()
        if key not in cls.WINDOWS:
            raise ValueError(f"unknown time window: {window}")
        return cls.WINDOWS[key]

    @classmethod
    def window_start(
        cls, window: str | int | None, today: datetime.date
    ) -> datetime.date | None:
        """First date inside ``window``; entries must be strictly after ``today - days``."""
        days = cls.window_days(window)
        if days is None:
            return None
        return today - datetime.timedelta(days=days - 1)

    @staticmethod
    def week_start(day: datetime.date) -> datetime.date:
        """Return the Monday of the week containing ``day``."""
        return day - datetime.timedelta(days=day.weekday())

    @staticmethod
    def week_label(day: datetime.date) -> str:
        year, week, _ = day.isocalendar()
        return f"{year}-W{week:02d}"

    @staticmethod
    def month_start(day: datetime.date) -> datetime.date:
        return day.replace(day=1)

    @staticmethod
    def day_range(end: datetime.date, days: int) -> List[datetime.date]:
        """Return ``days`` consecutive dates ending with ``end``, oldest first."""
        if days < 0:
            raise ValueError("days must be non-negative")
        return [end - datetime.timedelta(days=offset) for offset in range(days - 1, -1, -1)]
