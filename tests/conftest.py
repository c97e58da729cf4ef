"""
Shared pytest fixtures for the fourth-down dashboard test suite.

Provides:
  - ``sample_raw_form``: the default 4th-and-2 form snapshot as raw text.
  - ``sample_game_state``: the same situation, already coerced.
  - ``sample_payload`` / ``sample_recommendation``: a decision service
    response as wire JSON and as a parsed model.
  - ``recording_transport``: an ``httpx.MockTransport`` factory that records
    every request it serves.
"""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from fourth_down.models.game_state import GameState
from fourth_down.models.recommendation import Recommendation


# ── Request side ──────────────────────────────────────────────────────────────

@pytest.fixture
def sample_raw_form() -> dict[str, str]:
    """Raw form values exactly as the dashboard harvests them."""
    return {
        "down": "4",
        "ydstogo": "2",
        "yardline_100": "48",
        "time_remaining": "900",
        "qtr": "2",
        "score_diff": "-3",
        "offense_timeouts": "3",
        "defense_timeouts": "3",
        "home": "true",
    }


@pytest.fixture
def sample_game_state() -> GameState:
    """4th-and-2 at the opponent 48, down 3, home team."""
    return GameState(
        down=4,
        yards_to_go=2,
        yardline_100=48,
        time_remaining_seconds=900,
        quarter=2,
        score_differential=-3,
        offense_timeouts=3,
        defense_timeouts=3,
        is_home_team=True,
    )


# ── Response side ─────────────────────────────────────────────────────────────

@pytest.fixture
def sample_payload() -> dict:
    """A valid ``/v1/recommend`` JSON body."""
    return {
        "recommendation": "GO",
        "delta_wp": 0.034,
        "delta_ep": 1.2,
        "alternatives": [{"action": "PUNT", "wp": 0.51, "ep": 0.3}],
        "rationale": ["short yardage"],
        "uncertainty": {"std": 0.02, "method": "bootstrap"},
        "version": "v1",
    }


@pytest.fixture
def sample_recommendation(sample_payload: dict) -> Recommendation:
    """``sample_payload`` parsed into a ``Recommendation``."""
    return Recommendation.model_validate(sample_payload)


# ── HTTP ──────────────────────────────────────────────────────────────────────

@pytest.fixture
def recording_transport() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """Return a factory building a MockTransport plus the list it records into.

    Usage::

        transport, seen = recording_transport(lambda req: httpx.Response(200, json=...))
    """

    def _factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        return httpx.MockTransport(_record), seen

    return _factory
