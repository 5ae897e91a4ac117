"""Fibrotrack server entry point: ``python -m fibrotrack.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from fibrotrack.core.config.settings import get_settings
from fibrotrack.core.server.app import create_app, resolve_timezone


def _is_loopback_host(host: str) -> bool:
    if host in {"localhost"}:
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def run() -> None:
    """Start the Fibrotrack MCP server with Streamable HTTP transport."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.fibro_log_level.upper(), logging.INFO))

    logger = logging.getLogger(__name__)
    if not settings.fibro_allow_insecure_bind and not _is_loopback_host(settings.fibro_host):
        raise RuntimeError(
            "Refusing to bind Fibrotrack server to a non-loopback host without an auth layer. "
            "Set FIBRO_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    tz = resolve_timezone(settings.analytics_timezone)
    logger.info(
        "Starting Fibrotrack server on %s:%d (calendar days in %s)",
        settings.fibro_host,
        settings.fibro_port,
        tz if tz is not None else "local time",
    )

    mcp = create_app(tz_override=tz)
    mcp.run(
        transport="streamable-http",
        host=settings.fibro_host,
        port=settings.fibro_port,
    )


if __name__ == "__main__":
    run()
