"""
Schedule data model shared by the query pipeline.

Raw upstream JSON is untrusted: absent days, statuses and slot lists all
degrade to empty values. Non-definite slots with broken bounds are skipped,
since they never take part in an answer. Definite slots with broken bounds
raise ValueError/TypeError so the caller can report an upstream failure.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# --- Known upstream values ---
SLOT_DEFINITE = "Definite"

STATUS_SCHEDULE_APPLIES = "ScheduleApplies"
STATUS_WAITING_FOR_SCHEDULE = "WaitingForSchedule"
STATUS_EMERGENCY = "EmergencyShutdowns"
STATUS_STABILIZATION = "StabilizationShutdowns"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutageSlot:
    start: int  # minutes since midnight, [0, 1440)
    end: int    # minutes since midnight, (0, 1440]
    kind: str   # "Definite" or anything else upstream sends

    @property
    def is_definite(self) -> bool:
        return self.kind == SLOT_DEFINITE

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "OutageSlot":
        start = _as_minute(raw["start"])
        end = _as_minute(raw["end"])
        return cls(start=start, end=end, kind=str(raw.get("type") or ""))


@dataclass(frozen=True)
class DaySchedule:
    status: Optional[str] = None
    slots: Tuple[OutageSlot, ...] = field(default_factory=tuple)

    @classmethod
    def from_raw(cls, raw: Optional[Dict[str, Any]]) -> "DaySchedule":
        if not raw:
            return cls()
        slots = []
        for raw_slot in raw.get("slots") or []:
            try:
                slots.append(OutageSlot.from_raw(raw_slot))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                if _raw_kind(raw_slot) == SLOT_DEFINITE:
                    raise
                logger.debug(f"Skipping unusable non-definite slot {raw_slot!r}: {e}")
        return cls(status=raw.get("status"), slots=tuple(slots))


@dataclass(frozen=True)
class GroupSchedule:
    group_id: str
    updated_on: Optional[str]
    today: DaySchedule
    tomorrow: DaySchedule

    @classmethod
    def from_raw(cls, group_id: str, raw: Dict[str, Any]) -> "GroupSchedule":
        if not isinstance(raw, dict):
            raise TypeError(f"Group {group_id} payload is {type(raw).__name__}, expected object")
        return cls(
            group_id=group_id,
            updated_on=raw.get("updatedOn"),
            today=DaySchedule.from_raw(raw.get("today")),
            tomorrow=DaySchedule.from_raw(raw.get("tomorrow")),
        )


def _raw_kind(raw_slot: Any) -> Optional[str]:
    return raw_slot.get("type") if isinstance(raw_slot, dict) else None


def _as_minute(value: Any) -> int:
    # bool is an int subclass, but never a valid minute
    if isinstance(value, bool):
        raise TypeError(f"Invalid slot bound: {value!r}")
    minute = int(value)
    if minute != value:
        raise ValueError(f"Slot bound is not a whole minute: {value!r}")
    return minute


def definite_slots(day: Optional[DaySchedule]) -> Tuple[OutageSlot, ...]:
    """Confirmed outage intervals of a day, in upstream order."""
    if day is None:
        return ()
    return tuple(s for s in day.slots if s.is_definite)
