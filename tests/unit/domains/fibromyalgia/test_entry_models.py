"""Unit tests for fibromyalgia entry parsing and default rules."""

from __future__ import annotations

import math

from fibrotrack.domains.fibromyalgia.domain_logic.entry_models import (
    WPI_REGIONS,
    FibroEntry,
    Interventions,
    SymptomSeverity,
    Triggers,
)


class TestFibroEntryFromDict:
    def test_minimal_dict_defaults_everything(self):
        entry = FibroEntry.from_dict({"id": 7})
        assert entry.id == 7
        assert entry.timestamp == ""
        assert entry.wpi == dict.fromkeys(WPI_REGIONS, False)
        assert entry.sss == SymptomSeverity()
        assert entry.impact.functional_ability == 0
        assert entry.triggers == Triggers()
        assert entry.interventions == Interventions()
        assert entry.notes == ""

    def test_wpi_has_eighteen_regions(self):
        assert len(WPI_REGIONS) == 18

    def test_wpi_counts_only_true_known_regions(self, entry_factory):
        entry = FibroEntry.from_dict(entry_factory(
            wpi={"neck": True, "jaw": "yes", "chest": 1, "tail": True},
        ))
        assert entry.wpi_score == 1
        assert entry.affected_regions == ["neck"]

    def test_non_numeric_scores_default_to_zero(self):
        entry = FibroEntry.from_dict({
            "sss": {"fatigue": "3", "waking_unrefreshed": True, "cognitive_symptoms": 2},
            "impact": {"functionalAbility": None},
        })
        assert entry.sss.fatigue == 0
        assert entry.sss.waking_unrefreshed == 0
        assert entry.sss.cognitive_symptoms == 2
        assert entry.sss.total() == 2
        assert entry.impact.functional_ability == 0

    def test_nan_survives_parsing(self):
        entry = FibroEntry.from_dict({"impact": {"functionalAbility": float("nan")}})
        assert math.isnan(entry.impact.functional_ability)

    def test_non_mapping_sub_fields_are_ignored(self):
        entry = FibroEntry.from_dict({"wpi": "all", "triggers": ["stress"], "interventions": None})
        assert entry.wpi_score == 0
        assert entry.triggers.buckets() == []
        assert entry.interventions.identifiers() == []

    def test_non_string_timestamp_becomes_empty(self):
        assert FibroEntry.from_dict({"timestamp": 1735725600}).timestamp == ""


class TestTriggers:
    def test_bucket_keys(self):
        triggers = Triggers.from_dict({
            "weather": "rain",
            "foodSensitivity": [" gluten ", "", None, "dairy"],
            "stress": True,
            "poorSleep": False,
            "noise": "loud",
        })
        assert triggers.buckets() == ["weather:rain", "food:gluten", "food:dairy", "stress"]

    def test_empty_weather_is_absent(self):
        assert Triggers.from_dict({"weather": ""}).weather is None

    def test_non_array_food_is_empty(self):
        assert Triggers.from_dict({"foodSensitivity": "gluten"}).food_sensitivity == []


class TestInterventions:
    def test_identifiers(self):
        interventions = Interventions.from_dict({
            "heatTherapy": True,
            "meditation": False,
            "medication": [" pregabalin ", 5, "  "],
            "supplements": ["magnesium"],
        })
        assert interventions.identifiers() == [
            "heatTherapy",
            "medication:pregabalin",
            "supplement:magnesium",
        ]

    def test_list_keys_never_count_as_flags(self):
        interventions = Interventions.from_dict({"medication": True, "supplements": True})
        assert interventions.identifiers() == []
