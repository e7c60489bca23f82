"""
Assistant Service
Chat assistant commands and execution of the actions it proposes
"""

import logging
from typing import Dict, List, Optional, Any, Union
from sqlalchemy.orm import Session

from models import FoodRequirement
from services.llm_service import AssistantAction, AssistantReply, llm_service
from services.medication_service import medication_service
from services.resident_service import resident_service
from tools.scheduler import default_times_for_frequency, is_valid_time


logger = logging.getLogger(__name__)


def _parse_frequency(value: Any) -> int:
    try:
        frequency = int(value)
    except (TypeError, ValueError):
        return 1
    return min(max(frequency, 1), 24)


def _parse_times(value: Any, frequency: int) -> List[str]:
    """Keep well-formed HH:MM entries, else use the defaults for the frequency"""
    if isinstance(value, (list, tuple)):
        times = [t for t in value if is_valid_time(t)]
        if len(times) < len(value):
            logger.warning(f"Dropped malformed assistant times from {value!r}")
        if times:
            return times
    elif value:
        logger.warning(f"Ignoring non-list assistant times {value!r}")
    return default_times_for_frequency(frequency)


class AssistantService:
    """
    Service behind the caregiver chat assistant
    """

    def __init__(self, llm=None):
        self.llm = llm or llm_service

    async def chat(
        self,
        command: str,
        context: Optional[str] = None,
        db: Optional[Session] = None
    ) -> AssistantReply:
        """Answer a caregiver command with the full resident roster as context"""
        residents = await resident_service.list_residents(db=db)
        return await self.llm.process_command(command, residents, context=context)

    async def execute_action(
        self,
        action: Union[AssistantAction, Dict[str, Any]],
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """
        Carry out an action the caregiver confirmed

        Returns:
            {"type", "message", and "medication_id" for add_medication}

        Raises:
            ValueError: for unknown action types or unknown residents
            StorageError: if the medication could not be saved
        """
        if isinstance(action, dict):
            action = AssistantAction(type=action.get("type"), data=action.get("data") or {})
        data = action.data

        if action.type == "add_medication":
            if not data.get("name"):
                raise ValueError("add_medication requires a medication name")
            frequency = _parse_frequency(data.get("frequency"))
            food = data.get("food") or FoodRequirement.NONE.value
            if food not in {f.value for f in FoodRequirement}:
                food = FoodRequirement.NONE
            medication = await medication_service.create_medication(
                resident_id=data.get("residentId") or data.get("seniorId") or data.get("resident_id"),
                name=data["name"],
                strength=data.get("strength") or "",
                dose=data.get("dose") or "",
                frequency=frequency,
                times=_parse_times(data.get("times"), frequency),
                food=food,
                db=db
            )
            label = " ".join(part for part in (medication.name, medication.strength) if part)
            return {
                "type": action.type,
                "message": f"Successfully added {label} to the schedule!",
                "medication_id": medication.id
            }

        if action.type == "schedule_reminder":
            title = data.get("title") or "Reminder"
            logger.info(f"Reminder acknowledged: {title} at {data.get('date')} {data.get('time')}")
            return {
                "type": action.type,
                "message": f"Scheduled reminder: {title}"
            }

        raise ValueError(f"Unsupported action type: {action.type}")


# Singleton instance
assistant_service = AssistantService()
