"""MCP tools for fibromyalgia symptom analytics.

The caller supplies the entry list (the store lives outside this server);
every tool is a thin JSON wrapper around the pure analytics functions.
"""

from __future__ import annotations

import json
import logging
from datetime import tzinfo
from typing import Any

from fastmcp import FastMCP

from fibrotrack.domains.fibromyalgia.domain_logic.entry_models import (
    WPI_REGIONS,
    FibroEntry,
    SymptomSeverity,
)
from fibrotrack.domains.fibromyalgia.domain_logic.fibro_analytics import (
    compute_analytics,
    detect_flare_episodes,
    score_entry,
)

logger = logging.getLogger(__name__)

_SSS_MAX = 3


def _clamp_subscale(value: int) -> int:
    return max(0, min(_SSS_MAX, value))


def register_fibro_analytics_tools(mcp: FastMCP, *, tz: tzinfo | None = None) -> None:
    """Register fibromyalgia analytics tools on the MCP server.

    Args:
        mcp: Server to register on.
        tz: Zone used for calendar-day bucketing; None means the process zone.
    """

    @mcp.tool
    async def fibromyalgia_analytics(entries: list[dict[str, Any]]) -> str:
        """Summarize a fibromyalgia symptom log.

        Returns WPI/SSS scores for the latest entry, whether the ACR diagnostic
        criteria are met, most affected body regions, common triggers, recent
        symptom trends, flare frequency/duration/intensity, functional capacity
        and interventions associated with lower impairment.

        Args:
            entries: Logged entries (timestamp, wpi, sss, triggers, impact,
                interventions, ...) in any order.
        """
        logger.debug("fibromyalgia_analytics called with %d entries", len(entries))
        analytics = compute_analytics(entries, tz=tz)
        return json.dumps(analytics.to_dict(), indent=2)

    @mcp.tool
    async def fibromyalgia_flare_episodes(entries: list[dict[str, Any]]) -> str:
        """List flare episodes (runs of consecutive flare days) in a symptom log.

        Args:
            entries: Logged entries in any order.
        """
        logger.debug("fibromyalgia_flare_episodes called with %d entries", len(entries))
        episodes = detect_flare_episodes(entries, tz=tz)
        return json.dumps({
            "episodeCount": len(episodes),
            "episodes": [e.to_dict() for e in episodes],
        }, indent=2)

    @mcp.tool
    async def fibromyalgia_diagnostic_check(
        wpi_regions: list[str],
        fatigue: int = 0,
        waking_unrefreshed: int = 0,
        cognitive_symptoms: int = 0,
        somatic_symptoms: int = 0,
    ) -> str:
        """Score a single assessment against the ACR fibromyalgia criteria.

        Args:
            wpi_regions: Painful body regions (e.g. 'leftShoulder', 'neck').
            fatigue: Fatigue severity, 0-3.
            waking_unrefreshed: Waking unrefreshed severity, 0-3.
            cognitive_symptoms: Cognitive symptom severity, 0-3.
            somatic_symptoms: Somatic symptom severity, 0-3.
        """
        selected = set(wpi_regions)
        unknown = sorted(selected.difference(WPI_REGIONS))
        entry = FibroEntry(
            wpi={region: region in selected for region in WPI_REGIONS},
            sss=SymptomSeverity(
                fatigue=_clamp_subscale(fatigue),
                waking_unrefreshed=_clamp_subscale(waking_unrefreshed),
                cognitive_symptoms=_clamp_subscale(cognitive_symptoms),
                somatic_symptoms=_clamp_subscale(somatic_symptoms),
            ),
        )
        result = score_entry(entry).to_dict()
        result["unknownRegions"] = unknown
        return json.dumps(result, indent=2)
