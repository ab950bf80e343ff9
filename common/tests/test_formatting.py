"""
Tests for common.formatting module
"""
import pytest

from common.formatting import (
    EMERGENCY_PREFIX,
    STABILIZATION_PREFIX,
    status_prefix,
    format_slot_ranges,
    format_group_not_found,
)
from common.models import OutageSlot


@pytest.mark.unit
class TestStatusPrefix:

    def test_emergency(self):
        assert status_prefix("EmergencyShutdowns") == EMERGENCY_PREFIX
        assert status_prefix("EmergencyShutdowns") == "Действуют экстренные отключения. "

    def test_stabilization(self):
        assert status_prefix("StabilizationShutdowns") == STABILIZATION_PREFIX

    @pytest.mark.parametrize("status", ["ScheduleApplies", "WaitingForSchedule", "", None, "SomethingNew", 42])
    def test_other_values_give_empty_prefix(self, status):
        assert status_prefix(status) == ""


@pytest.mark.unit
class TestSlotRanges:

    def test_single_range(self):
        assert format_slot_ranges([OutageSlot(120, 180, "Definite")]) == "с 2:00 до 3:00"

    def test_multiple_ranges_joined(self):
        slots = [OutageSlot(120, 180, "Definite"), OutageSlot(1080, 1230, "Definite")]
        assert format_slot_ranges(slots) == "с 2:00 до 3:00 и с 18:00 до 20:30"

    def test_until_midnight(self):
        assert format_slot_ranges([OutageSlot(1260, 1440, "Definite")]) == "с 21:00 до 24:00"


def test_group_not_found():
    assert format_group_not_found("9.9") == "Группа 9.9 не найдена"
