"""
Common formatting for schedule answers.
Holds every fixed phrase of the output language and the status prefixes.
"""

from typing import Iterable, Optional

from .models import OutageSlot, STATUS_EMERGENCY, STATUS_STABILIZATION
from .time_utils import minutes_to_clock

# --- Status prefixes ---
EMERGENCY_PREFIX = "Действуют экстренные отключения. "
STABILIZATION_PREFIX = "Действуют стабилизационные отключения. "
FALLBACK_NOTICE = "По последнему плановому графику "

_STATUS_PREFIXES = {
    STATUS_EMERGENCY: EMERGENCY_PREFIX,
    STATUS_STABILIZATION: STABILIZATION_PREFIX,
}

# --- Messages ---
MSG_SCHEDULE_UNAVAILABLE = "Плановый график временно недоступен"
MSG_TODAY_OUTAGES = "сегодня отключения "
MSG_TOMORROW_OUTAGES = "Завтра отключения "
MSG_TOMORROW_NOT_PUBLISHED = "Завтра плановый график не опубликован"
MSG_TOMORROW_NONE = "Завтра отключений не запланировано"
MSG_NO_MORE_TODAY = "на сегодня отключений больше не ожидается"
MSG_NEXT_OUTAGE = "ближайшее отключение "
MSG_POWER_ON = "сейчас свет есть"
MSG_NO_MORE_SCHEDULED = "отключений по графику больше не ожидается"
MSG_UNKNOWN_MODE = "Неизвестный режим"
MSG_FETCH_ERROR = "Ошибка получения данных"


def status_prefix(status: Optional[str]) -> str:
    """Situational prefix for a day status. Unknown or missing statuses give ''."""
    return _STATUS_PREFIXES.get(status, "") if isinstance(status, str) else ""


def format_slot_range(slot: OutageSlot) -> str:
    return f"с {minutes_to_clock(slot.start)} до {minutes_to_clock(slot.end)}"


def format_slot_ranges(slots: Iterable[OutageSlot]) -> str:
    """'с 2:00 до 3:00 и с 18:00 до 20:30'"""
    return " и ".join(format_slot_range(s) for s in slots)


def format_power_on_at(clock: str, wait: str) -> str:
    return f"свет должны включить в {clock}, через {wait}"


def format_power_off_at(clock: str, wait: str) -> str:
    return f"свет должны выключить в {clock}, через {wait}"


def format_group_not_found(group_id: str) -> str:
    return f"Группа {group_id} не найдена"
