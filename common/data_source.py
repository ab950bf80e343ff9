from abc import ABC, abstractmethod
from typing import Dict, List, TypedDict
import logging

logger = logging.getLogger(__name__)

# --- Raw payload shape ---

class RawSlot(TypedDict, total=False):
    start: int  # minutes since midnight
    end: int
    type: str   # "Definite", "NotPlanned", ...

class RawDay(TypedDict, total=False):
    slots: List[RawSlot]
    date: str
    status: str  # "ScheduleApplies", "EmergencyShutdowns", ...

class RawGroup(TypedDict, total=False):
    today: RawDay
    tomorrow: RawDay
    updatedOn: str

# --- Errors ---

class UpstreamUnavailable(Exception):
    """The schedule provider could not be reached or sent an unusable payload."""

# --- Abstract Base Class ---

class ScheduleDataSource(ABC):
    """
    Abstract interface for retrieving the outage schedule feed.
    """

    @abstractmethod
    async def get_groups(self) -> Dict[str, RawGroup]:
        """
        Retrieves the schedule of every group served by the provider.

        Returns:
            Mapping of group id (e.g. "5.2") to its raw schedule.

        Raises:
            UpstreamUnavailable: If the provider is unreachable or the body is not a JSON object.
        """
        pass
