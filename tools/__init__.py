"""
Tools Package
Pure helpers for the Medlas system
"""

from .interaction_checker import (
    InteractionChecker,
    InteractionRule,
    DEFAULT_INTERACTION_RULES,
    interaction_checker,
    check_interactions
)

from .scheduler import (
    ConflictInfo,
    ConflictType,
    DEFAULT_TIMES_BY_FREQUENCY,
    TIME_PATTERN,
    default_times_for_frequency,
    is_valid_time,
    time_to_minutes,
    is_within_slot,
    offset_time,
    check_time_slot_conflicts
)

from .network import is_network_available

__all__ = [
    # Interaction Checker
    "InteractionChecker",
    "InteractionRule",
    "DEFAULT_INTERACTION_RULES",
    "interaction_checker",
    "check_interactions",

    # Scheduler
    "ConflictInfo",
    "ConflictType",
    "DEFAULT_TIMES_BY_FREQUENCY",
    "TIME_PATTERN",
    "default_times_for_frequency",
    "is_valid_time",
    "time_to_minutes",
    "is_within_slot",
    "offset_time",
    "check_time_slot_conflicts",

    # Network
    "is_network_available"
]
