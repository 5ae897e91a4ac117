"""Fibrotrack MCP Server: application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastmcp import FastMCP

from fibrotrack.core.config.settings import get_settings
from fibrotrack.domains.fibromyalgia.tools.fibro_analytics_tools import (
    register_fibro_analytics_tools,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "Fibrotrack"
SERVER_VERSION = "0.1.0"


def resolve_timezone(name: str) -> tzinfo | None:
    """Resolve an IANA zone name; empty or unknown names mean process local time."""
    if not name:
        return None
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown ANALYTICS_TIMEZONE %r; using process local time", name)
        return None


def create_app(*, tz_override: tzinfo | None = None) -> FastMCP:
    """Create and configure the Fibrotrack MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Resolves the timezone used for calendar-day bucketing
    3. Registers the health check and fibromyalgia analytics tools
    """
    settings = get_settings()

    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Fibromyalgia symptom analytics server. "
            "Computes WPI/SSS diagnostic scores, flare episodes, symptom trends, "
            "trigger rankings and intervention effectiveness from a symptom log "
            "supplied by the caller."
        ),
    )

    tz = tz_override if tz_override is not None else resolve_timezone(settings.analytics_timezone)
    tz_label = str(tz) if tz is not None else "local"
    logger.info("Calendar-day bucketing uses timezone: %s", tz_label)

    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "analytics_timezone": tz_label,
        }

    register_fibro_analytics_tools(server, tz=tz)
    logger.info("Fibromyalgia analytics tools registered")

    return server


# Module-level instance for FastMCP discovery ("...app.py:mcp").
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
