"""Fibromyalgia analytics result models and scoring constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


# ---------------------------------------------------------------------------
# Diagnostic thresholds (ACR 2010/2011 WPI + SSS rule, not tunable)
# ---------------------------------------------------------------------------

WPI_HIGH_MIN = 7          # WPI >= 7 ...
WPI_HIGH_SSS_MIN = 5      # ... with SSS >= 5
WPI_MID_MIN = 4           # or 4 <= WPI <= 6 ...
WPI_MID_MAX = 6
WPI_MID_SSS_MIN = 9       # ... with SSS >= 9

# ---------------------------------------------------------------------------
# Trend / ranking
# ---------------------------------------------------------------------------

TREND_WINDOW_SIZE = 14          # most recent entries considered for trends
TREND_CHANGE_THRESHOLD = 1      # |last - first| must exceed this to leave "stable"
TOP_N = 5                       # cap for every ranked list

# ---------------------------------------------------------------------------
# Flare detection
# ---------------------------------------------------------------------------

FLARE_SSS_THRESHOLD = 2         # fatigue or unrefreshed waking at/above this
FLARE_FUNCTION_THRESHOLD = 4    # functionalAbility at/above this
SEVERE_SSS_VALUE = 3
BEDRIDDEN_FUNCTION_VALUE = 5
DAYS_PER_MONTH = 30

# ---------------------------------------------------------------------------
# Functional capacity / interventions
# ---------------------------------------------------------------------------

GOOD_DAY_MAX_FUNCTION = 2
BAD_DAY_MIN_FUNCTION = 4
CORRELATION_NOISE_FLOOR = 0.05  # |delta| at or below this is treated as noise

TrendDirection = Literal["improving", "stable", "worsening"]
FlareIntensity = Literal["mild", "moderate", "severe"]
EpisodeSeverity = Literal["moderate", "severe"]


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class RegionFrequency:
    region: str
    frequency: int
    percentage: float


@dataclass
class TriggerFrequency:
    trigger: str
    frequency: int


@dataclass
class SymptomTrend:
    """Recent-window summary of one SSS subscale."""

    current: float = 0
    trend: TrendDirection = "stable"
    average: float = 0


@dataclass
class FunctionalCapacity:
    """Functional impairment over the trend window (0 = none, 5 = bedridden)."""

    average: float = 0
    good_days: int = 0
    bad_days: int = 0
    bedridden: int = 0


@dataclass
class InterventionEffect:
    """Positive correlation means lower impairment when the intervention is used."""

    intervention: str
    correlation_with_improvement: float


@dataclass
class FlareEpisode:
    """A maximal run of consecutive flare days (day keys are YYYY-MM-DD)."""

    start_day: str
    end_day: str
    duration_days: int
    max_severity: EpisodeSeverity

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDay": self.start_day,
            "endDay": self.end_day,
            "durationDays": self.duration_days,
            "maxSeverity": self.max_severity,
        }


@dataclass
class DiagnosticScore:
    wpi_score: int
    sss_score: int | float
    meets_diagnostic_criteria: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "wpiScore": self.wpi_score,
            "sssScore": self.sss_score,
            "meetsDiagnosticCriteria": self.meets_diagnostic_criteria,
        }


@dataclass
class FibroAnalytics:
    """Clinical-style summary of a fibromyalgia symptom log.

    The default-constructed instance is the record returned for an empty log.
    """

    wpi_score: int = 0
    sss_score: int | float = 0
    meets_diagnostic_criteria: bool = False
    most_affected_regions: list[RegionFrequency] = field(default_factory=list)
    common_triggers: list[TriggerFrequency] = field(default_factory=list)
    symptom_trends: dict[str, SymptomTrend] = field(
        default_factory=lambda: {
            "fatigue": SymptomTrend(),
            "cognition": SymptomTrend(),
            "sleep": SymptomTrend(),
        }
    )
    flare_frequency: float = 0
    average_flare_duration: float = 0
    flare_intensity: FlareIntensity = "mild"
    functional_capacity: FunctionalCapacity = field(default_factory=FunctionalCapacity)
    effective_interventions: list[InterventionEffect] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase record consumed by dashboards and exports."""
        return {
            "wpiScore": self.wpi_score,
            "sssScore": self.sss_score,
            "meetsDiagnosticCriteria": self.meets_diagnostic_criteria,
            "mostAffectedRegions": [
                {"region": r.region, "frequency": r.frequency, "percentage": r.percentage}
                for r in self.most_affected_regions
            ],
            "commonTriggers": [
                {"trigger": t.trigger, "frequency": t.frequency}
                for t in self.common_triggers
            ],
            "symptomTrends": {
                name: {"current": t.current, "trend": t.trend, "average": t.average}
                for name, t in self.symptom_trends.items()
            },
            "flareFrequency": self.flare_frequency,
            "averageFlareDuration": self.average_flare_duration,
            "flareIntensity": self.flare_intensity,
            "functionalCapacity": {
                "average": self.functional_capacity.average,
                "goodDays": self.functional_capacity.good_days,
                "badDays": self.functional_capacity.bad_days,
                "bedridden": self.functional_capacity.bedridden,
            },
            "effectiveInterventions": [
                {
                    "intervention": i.intervention,
                    "correlationWithImprovement": i.correlation_with_improvement,
                }
                for i in self.effective_interventions
            ],
        }
