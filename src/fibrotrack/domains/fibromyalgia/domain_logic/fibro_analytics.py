"""Fibromyalgia symptom analytics.

Turns a log of symptom entries into a clinical-style summary: WPI/SSS
diagnostic scores, most affected regions, common triggers, recent symptom
trends, flare episodes, functional capacity and intervention effectiveness.

Everything here is a pure function of its input. Entries are sorted into a
local copy; the caller's list is never modified.

Usage::

    analytics = compute_analytics(entries)
    analytics.to_dict()["flareIntensity"]
"""

from __future__ import annotations

import logging
import math
import statistics
from collections import Counter
from datetime import date, datetime, tzinfo
from typing import Any, Iterable, Mapping

from fibrotrack.domains.fibromyalgia.domain_logic.analytics_models import (
    BAD_DAY_MIN_FUNCTION,
    BEDRIDDEN_FUNCTION_VALUE,
    CORRELATION_NOISE_FLOOR,
    DAYS_PER_MONTH,
    FLARE_FUNCTION_THRESHOLD,
    FLARE_SSS_THRESHOLD,
    GOOD_DAY_MAX_FUNCTION,
    SEVERE_SSS_VALUE,
    TOP_N,
    TREND_CHANGE_THRESHOLD,
    TREND_WINDOW_SIZE,
    WPI_HIGH_MIN,
    WPI_HIGH_SSS_MIN,
    WPI_MID_MAX,
    WPI_MID_MIN,
    WPI_MID_SSS_MIN,
    DiagnosticScore,
    FibroAnalytics,
    FlareEpisode,
    FlareIntensity,
    FunctionalCapacity,
    InterventionEffect,
    RegionFrequency,
    SymptomTrend,
    TrendDirection,
    TriggerFrequency,
)
from fibrotrack.domains.fibromyalgia.domain_logic.entry_models import FibroEntry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def _parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None for empty or malformed input."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _local_day(entry: FibroEntry, tz: tzinfo | None) -> date | None:
    """Calendar day of the entry in local time (``tz``, or the process zone).

    Naive timestamps are already wall-clock local time and are taken as is.
    """
    parsed = _parse_timestamp(entry.timestamp)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.date()
    try:
        return parsed.astimezone(tz).date()
    except (OverflowError, OSError, ValueError):
        # Shifting into the local zone can leave the year 1-9999 range.
        return None


def _sort_key(entry: FibroEntry, tz: tzinfo | None) -> tuple[bool, float, str, str]:
    # Undated entries rank before every dated one. Equal instants fall back to
    # the entry id, then its full content, so input order never matters.
    tiebreak = (str(entry.id), repr(entry))
    parsed = _parse_timestamp(entry.timestamp)
    if parsed is None:
        return (False, 0.0, *tiebreak)
    if parsed.tzinfo is None and tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    try:
        return (True, parsed.timestamp(), *tiebreak)
    except (OverflowError, OSError, ValueError):
        return (False, 0.0, *tiebreak)


def _normalize(entries: Iterable[FibroEntry | Mapping[str, Any]]) -> list[FibroEntry]:
    return [e if isinstance(e, FibroEntry) else FibroEntry.from_dict(e) for e in entries]


def _sorted_entries(
    entries: Iterable[FibroEntry | Mapping[str, Any]], tz: tzinfo | None
) -> list[FibroEntry]:
    return sorted(_normalize(entries), key=lambda e: _sort_key(e, tz))


# ---------------------------------------------------------------------------
# Diagnostic scoring
# ---------------------------------------------------------------------------

def assess_diagnostic_criteria(wpi_score: int, sss_score: int | float) -> bool:
    """ACR fibromyalgia rule: WPI >= 7 and SSS >= 5, or WPI 4-6 and SSS >= 9."""
    return (wpi_score >= WPI_HIGH_MIN and sss_score >= WPI_HIGH_SSS_MIN) or (
        WPI_MID_MIN <= wpi_score <= WPI_MID_MAX and sss_score >= WPI_MID_SSS_MIN
    )


def score_entry(entry: FibroEntry | Mapping[str, Any]) -> DiagnosticScore:
    """WPI, SSS and the diagnostic verdict for a single entry."""
    if not isinstance(entry, FibroEntry):
        entry = FibroEntry.from_dict(entry)
    wpi = entry.wpi_score
    sss = entry.sss.total()
    return DiagnosticScore(
        wpi_score=wpi,
        sss_score=sss,
        meets_diagnostic_criteria=assess_diagnostic_criteria(wpi, sss),
    )


# ---------------------------------------------------------------------------
# Frequency analysis
# ---------------------------------------------------------------------------

def _most_affected_regions(entries: list[FibroEntry]) -> list[RegionFrequency]:
    counts: Counter[str] = Counter()
    for entry in entries:
        counts.update(entry.affected_regions)
    total = len(entries)
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:TOP_N]
    return [
        RegionFrequency(region=region, frequency=count, percentage=count / total * 100)
        for region, count in ranked
    ]


def _common_triggers(entries: list[FibroEntry]) -> list[TriggerFrequency]:
    counts: Counter[str] = Counter()
    for entry in entries:
        counts.update(entry.triggers.buckets())
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:TOP_N]
    return [TriggerFrequency(trigger=trigger, frequency=count) for trigger, count in ranked]


# ---------------------------------------------------------------------------
# Trend analysis
# ---------------------------------------------------------------------------

def _direction(values: list[float]) -> TrendDirection:
    """Endpoint comparison only; a change of exactly +/-1 is still stable."""
    if len(values) < 2:
        return "stable"
    diff = values[-1] - values[0]
    if diff > TREND_CHANGE_THRESHOLD:
        return "worsening"
    if diff < -TREND_CHANGE_THRESHOLD:
        return "improving"
    return "stable"


def _symptom_trend(values: list[float]) -> SymptomTrend:
    return SymptomTrend(
        current=values[-1],
        trend=_direction(values),
        average=statistics.fmean(values),
    )


def _functional_capacity(window: list[FibroEntry]) -> FunctionalCapacity:
    values = [e.impact.functional_ability for e in window]
    return FunctionalCapacity(
        average=statistics.fmean(values),
        good_days=sum(1 for v in values if v <= GOOD_DAY_MAX_FUNCTION),
        bad_days=sum(1 for v in values if v >= BAD_DAY_MIN_FUNCTION),
        bedridden=sum(1 for v in values if v == BEDRIDDEN_FUNCTION_VALUE),
    )


# ---------------------------------------------------------------------------
# Flare episodes
# ---------------------------------------------------------------------------

def _day_burden(entry: FibroEntry) -> float:
    return (
        entry.sss.fatigue
        + entry.sss.waking_unrefreshed
        + entry.sss.cognitive_symptoms
        + entry.impact.functional_ability
    )


def _is_flare_day(entry: FibroEntry) -> bool:
    return (
        entry.sss.fatigue >= FLARE_SSS_THRESHOLD
        or entry.sss.waking_unrefreshed >= FLARE_SSS_THRESHOLD
        or entry.impact.functional_ability >= FLARE_FUNCTION_THRESHOLD
    )


def _is_severe_day(entry: FibroEntry) -> bool:
    return (
        entry.sss.fatigue == SEVERE_SSS_VALUE
        or entry.sss.cognitive_symptoms == SEVERE_SSS_VALUE
        or entry.sss.waking_unrefreshed == SEVERE_SSS_VALUE
        or entry.impact.functional_ability == BEDRIDDEN_FUNCTION_VALUE
    )


def _worst_entry_per_day(
    entries: list[FibroEntry], tz: tzinfo | None
) -> dict[date, FibroEntry]:
    """Keep the highest-burden entry for each local day; earlier entry wins ties."""
    worst: dict[date, FibroEntry] = {}
    undated = 0
    for entry in entries:
        day = _local_day(entry, tz)
        if day is None:
            undated += 1
            continue
        current = worst.get(day)
        if current is None or _day_burden(entry) > _day_burden(current):
            worst[day] = entry
    if undated:
        logger.debug("Skipped %d undated entries during day bucketing", undated)
    return worst


def _group_episodes(days: dict[date, FibroEntry]) -> list[FlareEpisode]:
    episodes: list[FlareEpisode] = []
    last_day: date | None = None
    for day in sorted(days):
        entry = days[day]
        if not _is_flare_day(entry):
            continue
        severe = _is_severe_day(entry)
        if last_day is not None and (day - last_day).days == 1:
            episode = episodes[-1]
            episode.end_day = day.isoformat()
            episode.duration_days += 1
            if severe:
                episode.max_severity = "severe"
        else:
            episodes.append(FlareEpisode(
                start_day=day.isoformat(),
                end_day=day.isoformat(),
                duration_days=1,
                max_severity="severe" if severe else "moderate",
            ))
        last_day = day
    return episodes


def _observed_months(entries: list[FibroEntry], tz: tzinfo | None) -> float:
    # Span between the earliest and latest dated entries; entry count only
    # when no entry has a usable calendar day.
    days = [d for d in (_local_day(e, tz) for e in entries) if d is not None]
    if days:
        span_days = (max(days) - min(days)).days + 1
    else:
        span_days = len(entries)
    return max(1.0, span_days / DAYS_PER_MONTH)


def _flare_intensity(episodes: list[FlareEpisode]) -> FlareIntensity:
    if not episodes:
        return "mild"
    if any(e.max_severity == "severe" for e in episodes):
        return "severe"
    return "moderate"


def detect_flare_episodes(
    entries: Iterable[FibroEntry | Mapping[str, Any]],
    *,
    tz: tzinfo | None = None,
) -> list[FlareEpisode]:
    """Group flare days into episodes of consecutive local calendar days.

    Args:
        entries: Log entries in any order.
        tz: Zone used to derive calendar days; None means the process zone.

    Returns:
        Episodes in chronological order.
    """
    return _group_episodes(_worst_entry_per_day(_sorted_entries(entries, tz), tz))


# ---------------------------------------------------------------------------
# Intervention correlation
# ---------------------------------------------------------------------------

def _effective_interventions(entries: list[FibroEntry]) -> list[InterventionEffect]:
    identifiers = [e.interventions.identifiers() for e in entries]
    used_per_entry = [set(ids) for ids in identifiers]
    # Insertion-ordered so equal deltas rank in first-seen order.
    universe = dict.fromkeys(i for ids in identifiers for i in ids)
    if not universe:
        return []

    overall = statistics.fmean(e.impact.functional_ability for e in entries)

    effects: list[InterventionEffect] = []
    for intervention in universe:
        with_values: list[float] = []
        without_values: list[float] = []
        for entry, used in zip(entries, used_per_entry):
            bucket = with_values if intervention in used else without_values
            bucket.append(entry.impact.functional_ability)

        with_avg = statistics.fmean(with_values) if with_values else overall
        without_avg = statistics.fmean(without_values) if without_values else overall
        # Lower functionalAbility is better, so positive means improvement.
        delta = without_avg - with_avg
        if not math.isfinite(delta) or abs(delta) <= CORRELATION_NOISE_FLOOR:
            continue
        effects.append(InterventionEffect(
            intervention=intervention,
            correlation_with_improvement=delta,
        ))

    effects.sort(key=lambda e: e.correlation_with_improvement, reverse=True)
    return effects[:TOP_N]


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def compute_analytics(
    entries: Iterable[FibroEntry | Mapping[str, Any]],
    *,
    tz: tzinfo | None = None,
) -> FibroAnalytics:
    """Compute the full analytics summary for a symptom log.

    Args:
        entries: ``FibroEntry`` objects or raw entry dicts, in any order.
        tz: Zone used for local calendar days; None means the process zone.

    Returns:
        FibroAnalytics. An empty log yields the all-defaults record.
    """
    ordered = _sorted_entries(entries, tz)
    if not ordered:
        return FibroAnalytics()

    diagnostic = score_entry(ordered[-1])

    window = ordered[-TREND_WINDOW_SIZE:]
    episodes = _group_episodes(_worst_entry_per_day(ordered, tz))
    durations = [e.duration_days for e in episodes]

    logger.debug(
        "Computed fibromyalgia analytics: %d entries, %d flare episodes",
        len(ordered),
        len(episodes),
    )

    return FibroAnalytics(
        wpi_score=diagnostic.wpi_score,
        sss_score=diagnostic.sss_score,
        meets_diagnostic_criteria=diagnostic.meets_diagnostic_criteria,
        most_affected_regions=_most_affected_regions(ordered),
        common_triggers=_common_triggers(ordered),
        symptom_trends={
            "fatigue": _symptom_trend([e.sss.fatigue for e in window]),
            "cognition": _symptom_trend([e.sss.cognitive_symptoms for e in window]),
            "sleep": _symptom_trend([e.sss.waking_unrefreshed for e in window]),
        },
        flare_frequency=len(episodes) / _observed_months(ordered, tz),
        average_flare_duration=statistics.fmean(durations) if durations else 0,
        flare_intensity=_flare_intensity(episodes),
        functional_capacity=_functional_capacity(window),
        effective_interventions=_effective_interventions(ordered),
    )
