"""Alerts and lists of alerts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .fingerprint import Fingerprint
from .labels import ALERT_NAME_LABEL
from .labelset import LabelSet

__all__ = ["AlertStatus", "Alert", "Alerts"]


class AlertStatus(str, Enum):
    FIRING = "firing"
    RESOLVED = "resolved"


def _before(a: Optional[datetime], b: Optional[datetime]) -> bool:
    # A missing time is the zero time, earlier than any real one.
    if a is None:
        return b is not None
    if b is None:
        return False
    return a < b


@dataclass
class Alert:
    """An alert identified by its labels, with an optional activity interval."""

    labels: LabelSet = field(default_factory=LabelSet)
    annotations: LabelSet = field(default_factory=LabelSet)
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    generator_url: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.labels, LabelSet):
            self.labels = LabelSet(self.labels or {})
        if not isinstance(self.annotations, LabelSet):
            self.annotations = LabelSet(self.annotations or {})

    @property
    def name(self) -> str:
        """The value of the alertname label."""
        return self.labels.get(ALERT_NAME_LABEL, "")

    def fingerprint(self) -> Fingerprint:
        """Return the fingerprint of the alert's labels."""
        return self.labels.fingerprint()

    def resolved(self) -> bool:
        """True iff the activity interval ended in the past."""
        if self.ends_at is None:
            return False
        return self.resolved_at(datetime.now(self.ends_at.tzinfo))

    def resolved_at(self, ts: datetime) -> bool:
        """True iff the activity interval ended at or before ts."""
        if self.ends_at is None:
            return False
        return not self.ends_at > ts

    def status(self) -> AlertStatus:
        return AlertStatus.RESOLVED if self.resolved() else AlertStatus.FIRING

    def validate(self) -> None:
        """Raise ValueError if the alert data is inconsistent."""
        if self.starts_at is None:
            raise ValueError("start time missing")
        if self.ends_at is not None and self.ends_at < self.starts_at:
            raise ValueError("start time must be before end time")
        try:
            self.labels.validate()
        except ValueError as err:
            raise ValueError(f"invalid label set: {err}") from err
        if not self.labels:
            raise ValueError("at least one label pair required")
        try:
            self.annotations.validate()
        except ValueError as err:
            raise ValueError(f"invalid annotations: {err}") from err

    def __str__(self) -> str:
        state = "resolved" if self.resolved() else "active"
        return f"{self.name}[{str(self.fingerprint())[:7]}][{state}]"


def _alert_less(a: Alert, b: Alert) -> bool:
    if _before(a.starts_at, b.starts_at):
        return True
    if _before(a.ends_at, b.ends_at):
        return True
    return a.fingerprint() < b.fingerprint()


class Alerts(list):
    """A list of alerts."""

    def has_firing(self) -> bool:
        """True iff at least one alert is not resolved."""
        return any(not alert.resolved() for alert in self)

    def status(self) -> AlertStatus:
        return AlertStatus.FIRING if self.has_firing() else AlertStatus.RESOLVED

    def sort_chronologically(self) -> None:
        """Sort in place by start time, then end time, then fingerprint.

        The comparison is not a strict weak ordering, so a plain insertion
        sort is used to keep the resulting order well defined.
        """
        for i in range(1, len(self)):
            j = i
            while j > 0 and _alert_less(self[j], self[j - 1]):
                self[j], self[j - 1] = self[j - 1], self[j]
                j -= 1