"""Datamodelle für die Begleitwerkzeuge."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

HOUR_MS = 60 * 60 * 1000


def _interval_ms(start_time: int, end_time: Optional[int], now: int) -> int:
    end = end_time if end_time is not None else now
    return max(0, end - start_time)


@dataclass(slots=True)
class SubActivity:
    """Eine benannte Teilaktivität innerhalb einer Sitzung."""

    identifier: str
    title: str
    start_time: int
    end_time: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def duration_ms(self, now: int) -> int:
        return _interval_ms(self.start_time, self.end_time, now)

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> "SubActivity":
        return cls(
            identifier=str(item.get("id", "")),
            title=item.get("title", ""),
            start_time=int(item.get("startTime", 0)),
            end_time=item.get("endTime"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.identifier,
            "title": self.title,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }


@dataclass(slots=True)
class WorkSession:
    """Eine erfasste Arbeitssitzung."""

    identifier: str
    start_time: int
    date: str
    end_time: Optional[int] = None
    sub_activities: List[SubActivity] = field(default_factory=list)
    note: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def duration_ms(self, now: int) -> int:
        """Dauer in Millisekunden; laufende Sitzungen zählen bis ``now``."""
        return _interval_ms(self.start_time, self.end_time, now)

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> "WorkSession":
        return cls(
            identifier=str(item.get("id", "")),
            start_time=int(item.get("startTime", 0)),
            end_time=item.get("endTime"),
            date=item.get("date", ""),
            sub_activities=[SubActivity.from_dict(sub) for sub in item.get("subActivities", [])],
            note=item.get("note"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.identifier,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "date": self.date,
            "subActivities": [sub.to_dict() for sub in self.sub_activities],
        }
        if self.note is not None:
            payload["note"] = self.note
        return payload


def weekly_balance_ms(sessions: Iterable[WorkSession], weekly_hours_target: int, now: int) -> int:
    """Über- bzw. Unterstunden aller Wochen mit erfassten Sitzungen.

    Gruppiert wird nach ISO-Woche des Sitzungsdatums; Wochen ohne Sitzungen
    zählen nicht. Sitzungen mit ungültigem Datum werden übersprungen.
    """
    per_week: Dict[Tuple[int, int], int] = defaultdict(int)
    for session in sessions:
        try:
            iso = date.fromisoformat(session.date).isocalendar()
        except ValueError:
            continue
        per_week[(iso[0], iso[1])] += session.duration_ms(now)
    target_ms = weekly_hours_target * HOUR_MS
    return sum(duration - target_ms for duration in per_week.values())


__all__ = ["SubActivity", "WorkSession", "weekly_balance_ms"]
