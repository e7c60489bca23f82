"""
Drug Interaction Checker Tool
Looks up named drug pairs in a configurable interaction table
"""

import logging
from typing import Iterable, List, Optional, Sequence
from dataclasses import dataclass

from models import InsightSeverity


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InteractionRule:
    """A known interaction between two named drugs"""
    drug1: str
    drug2: str
    severity: InsightSeverity
    message: str

    def matches(self, drug_a: str, drug_b: str) -> bool:
        a = _normalize_drug_name(drug_a)
        b = _normalize_drug_name(drug_b)
        d1 = _normalize_drug_name(self.drug1)
        d2 = _normalize_drug_name(self.drug2)
        return (a == d1 and b == d2) or (a == d2 and b == d1)


def _normalize_drug_name(name: str) -> str:
    return (name or "").strip().lower()


# Placeholder table; not a clinical database
DEFAULT_INTERACTION_RULES: List[InteractionRule] = [
    InteractionRule(
        drug1="aspirin",
        drug2="warfarin",
        severity=InsightSeverity.CRITICAL,
        message=(
            "Aspirin and Warfarin taken together increase bleeding risk. "
            "Proceed only if instructed by a clinician."
        ),
    ),
    InteractionRule(
        drug1="lisinopril",
        drug2="potassium",
        severity=InsightSeverity.CRITICAL,
        message="Lisinopril and Potassium taken together may cause dangerous potassium levels.",
    ),
]


class InteractionChecker:
    """
    Drug interaction lookup over an injectable rule table
    """

    def __init__(self, rules: Optional[Iterable[InteractionRule]] = None):
        self.rules: List[InteractionRule] = list(
            DEFAULT_INTERACTION_RULES if rules is None else rules
        )

    def find_interaction(self, drug1: str, drug2: str) -> Optional[InteractionRule]:
        """
        Find the rule for a drug pair

        Matching is case-insensitive and independent of argument order.

        Returns:
            The first matching InteractionRule, or None
        """
        for rule in self.rules:
            if rule.matches(drug1, drug2):
                return rule
        return None

    def check_all_interactions(self, medications: Sequence[str]) -> List[InteractionRule]:
        """
        Check every unordered pair of a medication list

        Args:
            medications: List of medication names

        Returns:
            Matching rules in pair enumeration order
        """
        found = []
        for i in range(len(medications)):
            for j in range(i + 1, len(medications)):
                rule = self.find_interaction(medications[i], medications[j])
                if rule:
                    found.append(rule)
        return found

    def add_rule(self, rule: InteractionRule):
        """Add a rule to the table"""
        self.rules.append(rule)
        logger.info(f"Added interaction rule: {rule.drug1} + {rule.drug2} ({rule.severity.value})")


# Singleton instance
interaction_checker = InteractionChecker()


def check_interactions(medications: Sequence[str]) -> List[InteractionRule]:
    """Convenience function to check interactions"""
    return interaction_checker.check_all_interactions(medications)
