"""
Конфигурация pytest: общие фикстуры для тестов графиков
"""
import pytest


def make_slot(start, end, kind="Definite"):
    return {"start": start, "end": end, "type": kind}


def make_group(today_status="ScheduleApplies", today_slots=None,
               tomorrow_status="ScheduleApplies", tomorrow_slots=None,
               updated_on="2025-10-19T08:00:00+00:00"):
    return {
        "today": {"slots": today_slots or [], "date": "2025-10-19T00:00:00+03:00", "status": today_status},
        "tomorrow": {"slots": tomorrow_slots or [], "date": "2025-10-20T00:00:00+03:00", "status": tomorrow_status},
        "updatedOn": updated_on,
    }


@pytest.fixture
def normal_payload():
    """Группа 5.2: обычный день, одно отключение 2:00–3:00"""
    return {
        "5.2": make_group(
            today_slots=[
                make_slot(0, 120, "NotPlanned"),
                make_slot(120, 180),
                make_slot(180, 1440, "NotPlanned"),
            ],
            tomorrow_slots=[make_slot(600, 840)],
        ),
        "1.1": make_group(today_slots=[make_slot(480, 720)]),
    }


@pytest.fixture
def emergency_payload():
    """Группа 5.2: экстренные отключения без опубликованного графика"""
    return {
        "5.2": make_group(
            today_status="EmergencyShutdowns",
            tomorrow_status="EmergencyShutdowns",
            updated_on="2025-10-19T11:30:00+00:00",
        ),
    }


@pytest.fixture(autouse=True)
def clean_fallback_store():
    """Очищает процессный кеш плановых графиков после каждого теста"""
    yield
    try:
        from api import fallback_store
        fallback_store.clear()
    except ImportError:
        pass


@pytest.fixture
def group_factory():
    """Фабрика сырых данных группы в формате YASNO"""
    return make_group


@pytest.fixture
def slot_factory():
    return make_slot
