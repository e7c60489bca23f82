"""
Medication Scheduler Tool
Time-slot arithmetic and conflict detection for medication schedules
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
from enum import Enum

from config import care_config
from models import FoodRequirement, InsightSeverity
from tools.interaction_checker import InteractionChecker, interaction_checker


logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

FOOD_CONFLICT_MESSAGE = (
    "Different food rules at the same time. Separate these medications by 30 minutes."
)

DEFAULT_TIMES_BY_FREQUENCY: Dict[int, List[str]] = {
    1: ["09:00"],
    2: ["09:00", "21:00"],
    3: ["09:00", "15:00", "21:00"],
    4: ["09:00", "13:00", "17:00", "21:00"],
}


class ConflictType(str, Enum):
    """Kinds of schedule conflicts"""
    FOOD = "food"
    INTERACTION = "interaction"


@dataclass
class ConflictInfo:
    """A conflict between medications scheduled in the same slot"""
    type: ConflictType
    severity: InsightSeverity
    message: str
    medications: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "medications": list(self.medications),
        }


def _field(medication: Any, name: str, default: Any = None) -> Any:
    """Read a field from an ORM row, a dict or any attribute holder"""
    if isinstance(medication, dict):
        return medication.get(name, default)
    return getattr(medication, name, default)


def default_times_for_frequency(frequency: int) -> List[str]:
    """
    Default dose times for a number of doses per day

    Unmapped frequencies (0, negatives, 5 and above) fall back to once daily.
    """
    return list(DEFAULT_TIMES_BY_FREQUENCY.get(frequency, [care_config.DEFAULT_DOSE_TIME]))


def is_valid_time(value: Any) -> bool:
    """True for a zero-padded 24-hour "HH:MM" string"""
    return isinstance(value, str) and re.match(TIME_PATTERN, value) is not None


def time_to_minutes(value: str) -> int:
    """Convert an "HH:MM" string to minutes since midnight"""
    try:
        hours, minutes = value.split(":")
        return int(hours) * 60 + int(minutes)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time of day: {value!r}")


def is_within_slot(
    time: str,
    slot: str,
    tolerance: int = care_config.SLOT_TOLERANCE_MINUTES
) -> bool:
    """
    True if two times of day are within `tolerance` minutes of each other.

    Differences are taken on the clock face without wrapping past midnight,
    so "23:50" and "00:10" are not in the same slot.
    """
    return abs(time_to_minutes(time) - time_to_minutes(slot)) <= tolerance


def offset_time(time: str, offset_minutes: int) -> str:
    """Shift a time of day by a number of minutes, wrapping around midnight"""
    total = (time_to_minutes(time) + offset_minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def check_time_slot_conflicts(
    medications: Sequence[Any],
    time_slot: str,
    checker: Optional[InteractionChecker] = None
) -> List[ConflictInfo]:
    """
    Find food-rule and interaction conflicts among medications due near a slot

    Args:
        medications: Medications exposing `name`, `times` and `food`
        time_slot: Slot time as "HH:MM"
        checker: Interaction table to consult (default: built-in table)

    Returns:
        The food conflict (if any) first, then one interaction conflict per
        matching pair in (i, j > i) order.
    """
    checker = checker or interaction_checker
    conflicts: List[ConflictInfo] = []

    meds_at_time = [
        med for med in medications
        if any(
            is_within_slot(t, time_slot)
            for t in (_field(med, "times") or []) if is_valid_time(t)
        )
    ]

    with_food = [m for m in meds_at_time if _field(m, "food") == FoodRequirement.WITH]
    without_food = [m for m in meds_at_time if _field(m, "food") == FoodRequirement.WITHOUT]

    if with_food and without_food:
        conflicts.append(ConflictInfo(
            type=ConflictType.FOOD,
            severity=InsightSeverity.WARNING,
            message=FOOD_CONFLICT_MESSAGE,
            medications=[_field(m, "name") for m in with_food + without_food],
        ))

    for i in range(len(meds_at_time)):
        for j in range(i + 1, len(meds_at_time)):
            name_i = _field(meds_at_time[i], "name")
            name_j = _field(meds_at_time[j], "name")
            rule = checker.find_interaction(name_i, name_j)
            if rule:
                conflicts.append(ConflictInfo(
                    type=ConflictType.INTERACTION,
                    severity=rule.severity,
                    message=rule.message,
                    medications=[name_i, name_j],
                ))

    if conflicts:
        logger.debug(f"{len(conflicts)} conflict(s) at {time_slot}")
    return conflicts
