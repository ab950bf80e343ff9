"""
Last known planned schedule per group.

Upstream sometimes reports "emergency shutdowns" for today without publishing
any slots, although the previously published plan still holds. The resolver
remembers the last non-emergency plan for each group and substitutes it in
that case. This is a best-effort hint, not storage: the in-memory store is
per process, empty after every restart and not shared between instances.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

from .models import OutageSlot, STATUS_EMERGENCY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedFallback:
    slots: Tuple[OutageSlot, ...]
    updated_on: Optional[str] = None
    stored_at: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ResolvedSlots:
    slots: Tuple[OutageSlot, ...]
    is_fallback: bool = False


class FallbackStore(ABC):
    """
    Storage contract for planned fallbacks.
    Implementations must replace whole entries: a reader sees a complete
    entry or nothing.
    """

    @abstractmethod
    def get(self, group_id: str) -> Optional[PlannedFallback]:
        pass

    @abstractmethod
    def put(self, group_id: str, entry: PlannedFallback) -> None:
        pass


class InMemoryFallbackStore(FallbackStore):
    """
    Process-wide dict store. Last write wins.

    Args:
        max_age_seconds: Entries older than this are treated as absent.
                         None keeps entries for the process lifetime.
    """

    def __init__(self, max_age_seconds: Optional[float] = None):
        self.max_age_seconds = max_age_seconds
        self._entries: Dict[str, PlannedFallback] = {}

    def get(self, group_id: str) -> Optional[PlannedFallback]:
        entry = self._entries.get(group_id)
        if entry is None:
            return None
        if self.max_age_seconds is not None and time.time() - entry.stored_at > self.max_age_seconds:
            # Only drop the entry we looked at, a newer one may have replaced it
            if self._entries.get(group_id) is entry:
                self._entries.pop(group_id, None)
            logger.debug(f"Fallback for group {group_id} expired")
            return None
        return entry

    def put(self, group_id: str, entry: PlannedFallback) -> None:
        self._entries[group_id] = entry

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def resolve_slots(
    store: FallbackStore,
    group_id: str,
    today_status: Optional[str],
    today_definites: Sequence[OutageSlot],
    updated_on: Optional[str] = None,
) -> ResolvedSlots:
    """
    Records today's plan when it is trustworthy, and substitutes the
    remembered plan when today is an unpublished emergency.
    """
    live = tuple(today_definites)
    is_emergency = today_status == STATUS_EMERGENCY

    if live and not is_emergency:
        store.put(group_id, PlannedFallback(slots=live, updated_on=updated_on))
        logger.debug(f"Stored planned fallback for group {group_id}: {len(live)} slots")

    if is_emergency and not live:
        entry = store.get(group_id)
        if entry is not None:
            logger.info(
                f"Emergency without schedule for group {group_id}, "
                f"using planned fallback from {entry.updated_on}"
            )
            return ResolvedSlots(slots=entry.slots, is_fallback=True)

    return ResolvedSlots(slots=live, is_fallback=False)
