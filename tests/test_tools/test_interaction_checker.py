"""
Tests for Drug Interaction Checker Tool
"""

import pytest

from tools.interaction_checker import (
    DEFAULT_INTERACTION_RULES,
    InteractionChecker,
    InteractionRule,
    check_interactions,
)
from models import InsightSeverity


@pytest.fixture
def checker():
    """Checker over the default table"""
    return InteractionChecker()


class TestFindInteraction:
    """Tests for pair lookups"""

    @pytest.mark.unit
    def test_default_table_has_two_critical_rules(self):
        assert len(DEFAULT_INTERACTION_RULES) == 2
        assert all(r.severity == InsightSeverity.CRITICAL for r in DEFAULT_INTERACTION_RULES)

    @pytest.mark.unit
    @pytest.mark.parametrize("a,b", [
        ("aspirin", "warfarin"),
        ("Warfarin", "ASPIRIN"),
        ("  aspirin ", "warfarin"),
    ])
    def test_aspirin_warfarin(self, checker, a, b):
        rule = checker.find_interaction(a, b)
        assert rule is not None
        assert rule.message == (
            "Aspirin and Warfarin taken together increase bleeding risk. "
            "Proceed only if instructed by a clinician."
        )

    @pytest.mark.unit
    def test_lisinopril_potassium(self, checker):
        rule = checker.find_interaction("Potassium", "Lisinopril")
        assert rule.message == "Lisinopril and Potassium taken together may cause dangerous potassium levels."

    @pytest.mark.unit
    def test_unknown_pair(self, checker):
        assert checker.find_interaction("metformin", "aspirin") is None

    @pytest.mark.unit
    def test_partial_names_do_not_match(self, checker):
        assert checker.find_interaction("aspirin 81mg", "warfarin") is None


class TestCheckAllInteractions:
    """Tests for checking whole medication lists"""

    @pytest.mark.unit
    def test_every_pair_is_checked(self, checker):
        rules = checker.check_all_interactions(["potassium", "metformin", "aspirin", "lisinopril", "warfarin"])
        assert [(r.drug1, r.drug2) for r in rules] == [
            ("lisinopril", "potassium"),
            ("aspirin", "warfarin"),
        ]

    @pytest.mark.unit
    def test_convenience_function(self):
        assert len(check_interactions(["aspirin", "warfarin"])) == 1

    @pytest.mark.unit
    def test_add_rule_does_not_touch_default_table(self):
        checker = InteractionChecker()
        checker.add_rule(InteractionRule("a", "b", InsightSeverity.INFO, "a+b"))

        assert checker.find_interaction("B", "A").message == "a+b"
        assert len(DEFAULT_INTERACTION_RULES) == 2
        assert InteractionChecker().find_interaction("a", "b") is None

    @pytest.mark.unit
    def test_empty_table(self):
        assert InteractionChecker(rules=[]).check_all_interactions(["aspirin", "warfarin"]) == []
