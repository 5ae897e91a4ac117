"""Fibromyalgia log entry models.

Entries arrive from the store as loosely typed dicts (camelCase keys, optional
sub-fields, free-form arrays). ``FibroEntry.from_dict`` applies the default
rules once so the analytics code can rely on concrete fields:

* missing boolean flags are absent (``False``)
* missing or non-array lists are empty; non-string and blank items are dropped
* missing or non-numeric scores are ``0``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


WPI_REGIONS = (
    "leftShoulder",
    "rightShoulder",
    "leftUpperArm",
    "rightUpperArm",
    "leftLowerArm",
    "rightLowerArm",
    "leftHip",
    "rightHip",
    "leftUpperLeg",
    "rightUpperLeg",
    "leftLowerLeg",
    "rightLowerLeg",
    "jaw",
    "chest",
    "abdomen",
    "upperBack",
    "lowerBack",
    "neck",
)

SSS_SUBSCALES = (
    "fatigue",
    "waking_unrefreshed",
    "cognitive_symptoms",
    "somatic_symptoms",
)

# Keys with non-boolean payloads; never counted as flags.
_TRIGGER_VALUE_KEYS = frozenset({"weather", "foodSensitivity"})
_INTERVENTION_LIST_KEYS = frozenset({"medication", "supplements"})


def _mapping(val: Any) -> Mapping[str, Any]:
    return val if isinstance(val, Mapping) else {}


def _score(val: Any) -> int | float:
    """Numeric value as given (ints stay ints, NaN passes through), or 0 for
    None, booleans and non-numbers."""
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return 0
    return val


def _clean_strings(val: Any) -> list[str]:
    """Trimmed non-blank strings from a list; anything else yields []."""
    if not isinstance(val, (list, tuple)):
        return []
    return [v.strip() for v in val if isinstance(v, str) and v.strip()]


def _true_flags(data: Mapping[str, Any], exclude: frozenset[str]) -> list[str]:
    return [k for k, v in data.items() if k not in exclude and v is True]


@dataclass
class SymptomSeverity:
    """SSS subscales, each 0-3."""

    fatigue: int | float = 0
    waking_unrefreshed: int | float = 0
    cognitive_symptoms: int | float = 0
    somatic_symptoms: int | float = 0

    @classmethod
    def from_dict(cls, data: Any) -> SymptomSeverity:
        data = _mapping(data)
        return cls(**{name: _score(data.get(name)) for name in SSS_SUBSCALES})

    def total(self) -> int | float:
        return (
            self.fatigue
            + self.waking_unrefreshed
            + self.cognitive_symptoms
            + self.somatic_symptoms
        )


@dataclass
class FunctionalImpact:
    """Daily impact ratings, each 0-5. ``functional_ability`` 5 = bedridden."""

    sleep_quality: int | float = 0
    mood_rating: int | float = 0
    anxiety_level: int | float = 0
    functional_ability: int | float = 0

    @classmethod
    def from_dict(cls, data: Any) -> FunctionalImpact:
        data = _mapping(data)
        return cls(
            sleep_quality=_score(data.get("sleepQuality")),
            mood_rating=_score(data.get("moodRating")),
            anxiety_level=_score(data.get("anxietyLevel")),
            functional_ability=_score(data.get("functionalAbility")),
        )


@dataclass
class Triggers:
    weather: str | None = None
    food_sensitivity: list[str] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Triggers:
        data = _mapping(data)
        weather = data.get("weather")
        return cls(
            weather=weather if isinstance(weather, str) and weather else None,
            food_sensitivity=_clean_strings(data.get("foodSensitivity")),
            flags=_true_flags(data, _TRIGGER_VALUE_KEYS),
        )

    def buckets(self) -> list[str]:
        """Frequency-map keys this entry contributes to the trigger ranking."""
        out: list[str] = []
        if self.weather is not None:
            out.append(f"weather:{self.weather}")
        out.extend(f"food:{food}" for food in self.food_sensitivity)
        out.extend(self.flags)
        return out


@dataclass
class Interventions:
    flags: list[str] = field(default_factory=list)
    medication: list[str] = field(default_factory=list)
    supplements: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Interventions:
        data = _mapping(data)
        return cls(
            flags=_true_flags(data, _INTERVENTION_LIST_KEYS),
            medication=_clean_strings(data.get("medication")),
            supplements=_clean_strings(data.get("supplements")),
        )

    def identifiers(self) -> list[str]:
        """Intervention identifiers used for with/without correlation."""
        return (
            list(self.flags)
            + [f"medication:{m}" for m in self.medication]
            + [f"supplement:{s}" for s in self.supplements]
        )


@dataclass
class FibroEntry:
    """A single logged fibromyalgia observation."""

    id: Any = None
    timestamp: str = ""  # ISO 8601, may be empty or malformed
    wpi: dict[str, bool] = field(default_factory=lambda: dict.fromkeys(WPI_REGIONS, False))
    sss: SymptomSeverity = field(default_factory=SymptomSeverity)
    symptoms: dict[str, bool] = field(default_factory=dict)
    triggers: Triggers = field(default_factory=Triggers)
    impact: FunctionalImpact = field(default_factory=FunctionalImpact)
    activity: dict[str, Any] = field(default_factory=dict)
    interventions: Interventions = field(default_factory=Interventions)
    notes: str = ""
    user_id: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FibroEntry:
        """Build an entry from a store/JSON dict, defaulting every optional field."""
        wpi = _mapping(data.get("wpi"))
        timestamp = data.get("timestamp")
        return cls(
            id=data.get("id"),
            timestamp=timestamp if isinstance(timestamp, str) else "",
            wpi={region: wpi.get(region) is True for region in WPI_REGIONS},
            sss=SymptomSeverity.from_dict(data.get("sss")),
            symptoms={k: v is True for k, v in _mapping(data.get("symptoms")).items()},
            triggers=Triggers.from_dict(data.get("triggers")),
            impact=FunctionalImpact.from_dict(data.get("impact")),
            activity=dict(_mapping(data.get("activity"))),
            interventions=Interventions.from_dict(data.get("interventions")),
            notes=data.get("notes") or "",
            user_id=data.get("userId"),
        )

    @property
    def wpi_score(self) -> int:
        return sum(1 for present in self.wpi.values() if present)

    @property
    def affected_regions(self) -> list[str]:
        return [region for region, present in self.wpi.items() if present]
