"""Shared test fixtures for Fibrotrack tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANALYTICS_TIMEZONE", "UTC")
    monkeypatch.setenv("FIBRO_LOG_LEVEL", "info")
    monkeypatch.delenv("FIBRO_HOST", raising=False)
    monkeypatch.delenv("FIBRO_ALLOW_INSECURE_BIND", raising=False)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))


# ---------------------------------------------------------------------------
# Entry factory
# ---------------------------------------------------------------------------

def make_entry(
    id: int = 1,
    timestamp: str = "2025-01-01T10:00:00.000Z",
    *,
    wpi: dict[str, Any] | None = None,
    sss: dict[str, Any] | None = None,
    triggers: dict[str, Any] | None = None,
    impact: dict[str, Any] | None = None,
    interventions: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create a raw entry dict as the store would supply it.

    Impact ratings default to 2 (a middling, non-flare day).
    """
    return {
        "id": id,
        "timestamp": timestamp,
        "wpi": dict(wpi or {}),
        "sss": {
            "fatigue": 0,
            "waking_unrefreshed": 0,
            "cognitive_symptoms": 0,
            "somatic_symptoms": 0,
            **(sss or {}),
        },
        "symptoms": {"headache": False, "brainfog": False},
        "triggers": dict(triggers or {}),
        "impact": {
            "sleepQuality": 2,
            "moodRating": 2,
            "anxietyLevel": 2,
            "functionalAbility": 2,
            **(impact or {}),
        },
        "activity": {"activityLevel": "moderate", "restPeriods": 0},
        "interventions": dict(interventions or {}),
        "notes": "",
    }


@pytest.fixture
def entry_factory():
    """Return the raw entry factory."""
    return make_entry
