"""
Time slot representation for the scheduling system.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TimeSlot:
    """
    A candidate placement produced by the slot finder. Never persisted.
    Higher score is better.
    """
    start: datetime
    end: datetime
    score: float = 0.0

    def __repr__(self):
        return f"TimeSlot({self.start:%Y-%m-%d %H:%M} - {self.end:%H:%M}, score={self.score:g})"


@dataclass(frozen=True)
class BusyPeriod:
    """An interval a new slot must not overlap (calendar event or already placed task)."""
    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        # Open-interval test: touching endpoints do not conflict
        return start < self.end and end > self.start

    def __lt__(self, other):
        return (self.start, self.end) < (other.start, other.end)
