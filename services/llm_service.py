"""
LLM Service
Client for the generative-language API behind insights and the chat assistant
"""

import logging
from typing import Dict, List, Optional, Any, Sequence
from dataclasses import dataclass, field
import json
import re
import asyncio
from datetime import datetime

import requests

from config import settings, care_config
from models import InsightSeverity
from services import prompts


logger = logging.getLogger(__name__)


ACTION_TYPES = {"add_medication", "schedule_reminder"}


@dataclass
class AssistantAction:
    """Structured action requested by the assistant"""
    type: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "data": self.data}


@dataclass
class AssistantReply:
    """Free-text reply with any requested actions"""
    response: str
    actions: List[AssistantAction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "response": self.response,
            "actions": [a.to_dict() for a in self.actions]
        }


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _as_iso(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value) if value is not None else "unknown"


class LLMService:
    """
    Service for interacting with an OpenAI-compatible chat completions API
    """

    def __init__(self):
        self.model_name = settings.LLM_MODEL
        self.temperature = settings.LLM_TEMPERATURE
        self.max_tokens = settings.LLM_MAX_TOKENS
        self.timeout = settings.LLM_TIMEOUT_SECONDS

        # Provider state
        self._configured = False

        # Usage tracking
        self._total_tokens_used = 0
        self._request_count = 0

        self._configure()

    def _configure(self):
        """Mark the provider configured when an API key is present"""
        if self._configured:
            return

        if not settings.LLM_API_KEY:
            logger.warning("LLM_API_KEY not configured")
            return
        self._configured = True
        logger.info(f"LLM API configured with model: {self.model_name}")

    @property
    def is_configured(self) -> bool:
        if not self._configured:
            self._configure()
        return self._configured

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Generate a response from the LLM

        Args:
            prompt: User prompt/message
            system_prompt: System instructions
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum response tokens

        Returns:
            Generated text response

        Raises:
            RuntimeError: if the provider is not configured or returns an error
        """
        if not self.is_configured:
            raise RuntimeError("LLM is not configured. Set LLM_API_KEY.")

        headers = {
            "Authorization": f"Bearer {settings.LLM_API_KEY}",
            "Content-Type": "application/json",
        }

        # Models receive the current time with every call
        now_utc = datetime.utcnow()
        time_context = f"Time Context:\n- UTC: {now_utc.isoformat()}Z\n"
        system_prompt = f"{system_prompt}\n\n{time_context}" if system_prompt else time_context

        payload = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.max_tokens,
        }

        try:
            resp = await asyncio.get_event_loop().run_in_executor(
                None,
                lambda: requests.post(
                    f"{settings.LLM_BASE_URL}/chat/completions",
                    headers=headers,
                    json=payload,
                    timeout=self.timeout,
                ),
            )

            if resp.status_code != 200:
                logger.error("LLM API error %s: %s", resp.status_code, resp.text)
                raise RuntimeError(f"LLM API error: {resp.status_code}")

            data = resp.json()
            choices = data.get("choices") or []
            if not choices:
                return ""
            text = (choices[0].get("message") or {}).get("content") or ""

            usage = data.get("usage") or {}
            self._total_tokens_used += usage.get("total_tokens", 0)
            self._request_count += 1

            return text
        except Exception as e:
            logger.error("LLM generation error: %s", e)
            raise

    def _extract_json(self, response: Optional[str], pattern: str) -> Any:
        """Parse JSON from raw, fenced or prose-wrapped text; None on failure"""
        if not response:
            return None

        response = response.strip()

        try:
            return json.loads(response)
        except json.JSONDecodeError:
            pass

        candidates = []
        fenced = re.search(r'```(?:json)?\s*([\s\S]*?)\s*```', response)
        if fenced:
            candidates.append(fenced.group(1))
        bare = re.search(pattern, response)
        if bare:
            candidates.append(bare.group(0))

        for candidate in candidates:
            try:
                return json.loads(candidate.strip())
            except json.JSONDecodeError:
                continue

        logger.warning(f"Failed to parse JSON from response: {response[:200]}...")
        return None

    def parse_json_array(self, response: Optional[str]) -> Optional[List[Any]]:
        """Parse a JSON array out of an LLM response, or None"""
        parsed = self._extract_json(response, r'\[[\s\S]*\]')
        return parsed if isinstance(parsed, list) else None

    def parse_json_object(self, response: Optional[str]) -> Optional[Dict[str, Any]]:
        """Parse a JSON object out of an LLM response, or None"""
        parsed = self._extract_json(response, r'\{[\s\S]*\}')
        return parsed if isinstance(parsed, dict) else None

    @staticmethod
    def validate_insights(items: Sequence[Any]) -> List[Dict[str, Any]]:
        """
        Normalize insight objects returned by the model

        Raises:
            ValueError: if any item is not a well-formed insight
        """
        insights = []
        for item in items:
            if not isinstance(item, dict):
                raise ValueError(f"Insight is not an object: {item!r}")
            message = item.get("message")
            if not isinstance(message, str) or not message.strip():
                raise ValueError("Insight has no message")
            suggested = item.get("suggestedAction", item.get("suggested_action"))
            insights.append({
                "severity": InsightSeverity(str(item.get("severity", "")).lower()),
                "message": message.strip(),
                "suggested_action": suggested if isinstance(suggested, str) else None,
            })
        return insights

    def build_insights_prompt(
        self,
        resident: Any,
        medications: Sequence[Any],
        dose_events: Sequence[Any]
    ) -> str:
        """Render the insight prompt for one resident"""
        med_lines = "\n".join(
            prompts.MEDICATION_LINE.format(
                name=_field(m, "name"),
                strength=_field(m, "strength") or "",
                dose=_field(m, "dose") or "",
                frequency=_field(m, "frequency"),
                times=", ".join(_field(m, "times") or []),
                food=_enum_value(_field(m, "food")),
                notes=_field(m, "notes") or "None",
            )
            for m in medications
        ) or "No medications."

        event_lines = "\n".join(
            prompts.DOSE_EVENT_LINE.format(
                medication_id=_field(e, "medication_id"),
                scheduled=_as_iso(_field(e, "scheduled_time")),
                recorded=_as_iso(_field(e, "recorded_time")),
                status=_enum_value(_field(e, "status")),
                note=_field(e, "note") or "None",
            )
            for e in dose_events
        ) or "No recent dose events."

        return prompts.RESIDENT_INSIGHTS_PROMPT.format(
            resident_id=_field(resident, "id"),
            full_name=f"{_field(resident, 'first_name')} {_field(resident, 'last_name')}",
            age=_field(resident, "age"),
            allergies=", ".join(_field(resident, "allergies") or []) or "None",
            conditions=", ".join(_field(resident, "conditions") or []) or "None",
            physician=_field(resident, "physician") or "N/A",
            medications=med_lines,
            dose_events=event_lines,
            window_days=care_config.ADHERENCE_WINDOW_DAYS,
        )

    async def generate_resident_insights(
        self,
        resident: Any,
        medications: Sequence[Any],
        dose_events: Sequence[Any]
    ) -> List[Dict[str, Any]]:
        """
        Ask the model for additional insights about a resident

        Args:
            resident: Resident profile
            medications: All of the resident's medications
            dose_events: Dose events recorded in the recent window

        Returns:
            Validated insight dicts; empty on any failure or malformed output
        """
        if not self.is_configured:
            return []

        try:
            text = await self.generate(
                prompt=self.build_insights_prompt(resident, medications, dose_events),
                system_prompt=prompts.INSIGHTS_SYSTEM_PROMPT,
            )
            items = self.parse_json_array(text)
            if items is None:
                return []
            return self.validate_insights(items)
        except Exception as e:
            logger.warning(f"Discarding AI insights for {_field(resident, 'id')}: {e}")
            return []

    def _parse_action(self, raw: Any) -> Optional[AssistantAction]:
        if not isinstance(raw, dict):
            return None
        action_type = raw.get("type")
        if action_type not in ACTION_TYPES:
            return None
        data = raw.get("data")
        return AssistantAction(type=action_type, data=data if isinstance(data, dict) else {})

    async def process_command(
        self,
        command: str,
        residents: Sequence[Any],
        context: Optional[str] = None
    ) -> AssistantReply:
        """
        Interpret a caregiver's chat command

        Returns:
            Free-text advice, or a confirmation message with a structured
            action. Never raises; failures produce a fallback message.
        """
        if not self.is_configured:
            return AssistantReply(response=prompts.UNAVAILABLE_RESPONSE)

        roster = ", ".join(
            f"{_field(r, 'first_name')} {_field(r, 'last_name')} (ID: {_field(r, 'id')})"
            for r in residents
        ) or "None"

        prompt = prompts.COMMAND_PROMPT.format(residents=roster, command=command)
        if context:
            prompt = f"Additional context: {context}\n\n{prompt}"

        try:
            text = await self.generate(
                prompt=prompt,
                system_prompt=prompts.ASSISTANT_SYSTEM_PROMPT,
            )
        except Exception as e:
            logger.error(f"Error processing AI command: {e}")
            return AssistantReply(response=prompts.FAILURE_RESPONSE)

        parsed = self.parse_json_object(text) if "{" in (text or "") else None
        if parsed is None:
            return AssistantReply(response=text)

        action = self._parse_action(parsed.get("action"))
        response = parsed.get("response")
        return AssistantReply(
            response=response if isinstance(response, str) and response else text,
            actions=[action] if action else []
        )

    def get_usage_stats(self) -> Dict[str, Any]:
        """Get usage statistics"""
        return {
            "total_tokens": self._total_tokens_used,
            "request_count": self._request_count,
            "model": self.model_name
        }


# Singleton instance
llm_service = LLMService()
