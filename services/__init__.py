"""
Services Module
Record store and business logic layer for the Medlas application

The schedule and assistant services depend on the insights engine and are
imported from their own modules.
"""

from services.llm_service import LLMService, llm_service
from services.resident_service import ResidentService, resident_service
from services.medication_service import MedicationService, medication_service
from services.dose_service import DoseService, dose_service
from services.insight_service import InsightService, insight_service
from services.adherence_service import AdherenceService, adherence_service


__all__ = [
    # Service classes
    "LLMService",
    "ResidentService",
    "MedicationService",
    "DoseService",
    "InsightService",
    "AdherenceService",
    # Singleton instances
    "llm_service",
    "resident_service",
    "medication_service",
    "dose_service",
    "insight_service",
    "adherence_service",
]
