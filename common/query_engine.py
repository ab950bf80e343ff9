"""
Query engine: answers one question ("mode") about a resolved schedule.

Handlers are pure functions of a QueryContext and are looked up in
QUERY_HANDLERS. The current minute is part of the context, so answers are
deterministic for a given input.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Tuple

from .formatting import (
    FALLBACK_NOTICE,
    MSG_NEXT_OUTAGE,
    MSG_NO_MORE_SCHEDULED,
    MSG_NO_MORE_TODAY,
    MSG_POWER_ON,
    MSG_SCHEDULE_UNAVAILABLE,
    MSG_TODAY_OUTAGES,
    MSG_TOMORROW_NONE,
    MSG_TOMORROW_NOT_PUBLISHED,
    MSG_TOMORROW_OUTAGES,
    MSG_UNKNOWN_MODE,
    format_power_off_at,
    format_power_on_at,
    format_slot_range,
    format_slot_ranges,
    status_prefix,
)
from .models import OutageSlot, STATUS_EMERGENCY
from .time_utils import format_duration, minutes_to_clock

MODE_SCHEDULE = "schedule"
MODE_SCHEDULE_TOMORROW = "schedule_tomorrow"
MODE_NEXT = "next"
MODE_UNTIL_ON = "until_on"
MODE_OFF_AT = "off_at"


@dataclass(frozen=True)
class QueryContext:
    resolved_slots: Tuple[OutageSlot, ...]
    now_minute: int
    is_fallback: bool = False
    today_status: Optional[str] = None
    tomorrow_status: Optional[str] = None
    tomorrow_slots: Tuple[OutageSlot, ...] = field(default_factory=tuple)

    @property
    def prefix(self) -> str:
        return status_prefix(self.today_status) + (FALLBACK_NOTICE if self.is_fallback else "")


QueryHandler = Callable[[QueryContext], str]

QUERY_HANDLERS: Dict[str, QueryHandler] = {}


def register_mode(mode: str) -> Callable[[QueryHandler], QueryHandler]:
    def decorator(func: QueryHandler) -> QueryHandler:
        QUERY_HANDLERS[mode] = func
        return func
    return decorator


# --- Slot lookup ---

def next_upcoming_slot(slots: Sequence[OutageSlot], now_minute: int) -> Optional[OutageSlot]:
    """Earliest slot starting strictly after now. Equal starts keep input order."""
    upcoming = sorted((s for s in slots if s.start > now_minute), key=lambda s: s.start)
    return upcoming[0] if upcoming else None


def current_slot(slots: Sequence[OutageSlot], now_minute: int) -> Optional[OutageSlot]:
    """Slot covering now: start <= now < end."""
    return next((s for s in slots if s.start <= now_minute < s.end), None)


# --- Handlers ---

@register_mode(MODE_SCHEDULE)
def answer_schedule(ctx: QueryContext) -> str:
    if not ctx.resolved_slots:
        return ctx.prefix + MSG_SCHEDULE_UNAVAILABLE
    return ctx.prefix + MSG_TODAY_OUTAGES + format_slot_ranges(ctx.resolved_slots)


@register_mode(MODE_SCHEDULE_TOMORROW)
def answer_schedule_tomorrow(ctx: QueryContext) -> str:
    # Tomorrow is reported with its own status, fallback never applies
    prefix = status_prefix(ctx.tomorrow_status)
    if not ctx.tomorrow_slots:
        if ctx.tomorrow_status == STATUS_EMERGENCY:
            return prefix + MSG_TOMORROW_NOT_PUBLISHED
        return MSG_TOMORROW_NONE
    return prefix + MSG_TOMORROW_OUTAGES + format_slot_ranges(ctx.tomorrow_slots)


@register_mode(MODE_NEXT)
def answer_next(ctx: QueryContext) -> str:
    slot = next_upcoming_slot(ctx.resolved_slots, ctx.now_minute)
    if slot is None:
        return ctx.prefix + MSG_NO_MORE_TODAY
    return ctx.prefix + MSG_NEXT_OUTAGE + format_slot_range(slot)


@register_mode(MODE_UNTIL_ON)
def answer_until_on(ctx: QueryContext) -> str:
    slot = current_slot(ctx.resolved_slots, ctx.now_minute)
    if slot is None:
        return ctx.prefix + MSG_POWER_ON
    minutes_left = slot.end - ctx.now_minute
    return ctx.prefix + format_power_on_at(minutes_to_clock(slot.end), format_duration(minutes_left))


@register_mode(MODE_OFF_AT)
def answer_off_at(ctx: QueryContext) -> str:
    slot = next_upcoming_slot(ctx.resolved_slots, ctx.now_minute)
    if slot is None:
        return ctx.prefix + MSG_NO_MORE_SCHEDULED
    minutes_left = slot.start - ctx.now_minute
    return ctx.prefix + format_power_off_at(minutes_to_clock(slot.start), format_duration(minutes_left))


def answer_query(ctx: QueryContext, mode: str) -> str:
    handler = QUERY_HANDLERS.get(mode)
    if handler is None:
        return MSG_UNKNOWN_MODE
    return handler(ctx)
