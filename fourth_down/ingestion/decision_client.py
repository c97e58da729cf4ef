"""
Decision service client — ``GET /v1/recommend``.

Request::

    GET {base_url}/v1/recommend
        ?down=4&ydstogo=2&yardline_100=48&time_remaining=900&qtr=2
        &score_diff=-3&offense_timeouts=3&defense_timeouts=3&home=true

Integers go out as base-10 text, the home flag as ``true``/``false`` and a
coercion failure as ``NaN``.  The JSON body is parsed into a
``Recommendation``.

Failure policy
--------------
Everything that can go wrong — connection refused, transport timeout,
non-2xx status, a body that is not JSON or does not match the schema —
surfaces as a single ``RequestFailure`` with a human-readable message.

The client performs no retries and sets no timeout of its own
(``timeout=None``).  Each call opens its own ``httpx.AsyncClient`` so
concurrent calls are fully independent: nothing is cancelled, nothing is
deduplicated.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import httpx
from pydantic import ValidationError

from fourth_down.models.game_state import (
    HOME_PARAM,
    NUMERIC_FIELD_PARAMS,
    GameState,
    Numeric,
)
from fourth_down.models.recommendation import Recommendation

logger = logging.getLogger(__name__)

RECOMMEND_PATH = "/v1/recommend"
FALLBACK_ERROR_MESSAGE = "Failed to fetch"


class RequestFailure(Exception):
    """The decision service could not be reached or returned an unusable body."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ── Request construction ──────────────────────────────────────────────────────


def _format_number(value: Numeric) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        return repr(value)
    return str(int(value))


def build_query_params(state: GameState) -> list[tuple[str, str]]:
    """Serialise a ``GameState`` into ordered query parameters.

    Args:
        state: The situation to send.

    Returns:
        ``(name, value)`` pairs — the eight numeric fields in wire order,
        then ``home``.
    """
    params = [
        (param, _format_number(getattr(state, field_name)))
        for field_name, param in NUMERIC_FIELD_PARAMS.items()
    ]
    params.append((HOME_PARAM, "true" if state.is_home_team else "false"))
    return params


def build_request_url(base_url: str, state: GameState) -> str:
    """Return the full request URL that ``fetch_recommendation`` would use."""
    url = httpx.URL(base_url.rstrip("/") + RECOMMEND_PATH, params=build_query_params(state))
    return str(url)


def _failure_message(exc: Exception) -> str:
    return str(exc) or FALLBACK_ERROR_MESSAGE


# ── Client ────────────────────────────────────────────────────────────────────


class RecommendationClient:
    """Async client for the fourth-down decision service.

    Usage::

        client = RecommendationClient(config.decision_api.base_url)
        rec = await client.fetch_recommendation(state)

    Attributes:
        base_url: Service origin, e.g. ``"http://localhost:8008"``.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Service origin; a trailing slash is ignored.
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
        """
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return self.base_url + RECOMMEND_PATH

    async def fetch_recommendation(self, state: GameState) -> Recommendation:
        """Send ``state`` to the service and parse the response.

        Args:
            state: The situation to evaluate.

        Returns:
            The parsed ``Recommendation``.

        Raises:
            RequestFailure: On any transport, status or parse failure.
        """
        params = build_query_params(state)
        logger.debug("Requesting recommendation from %s", self.endpoint)
        logger.debug("Query params: %s", params)

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                resp = await client.get(self.endpoint, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Decision API transport error: %s", exc)
            raise RequestFailure(_failure_message(exc)) from exc

        if not resp.is_success:
            logger.warning("Decision API returned HTTP %d", resp.status_code)
            raise RequestFailure(f"Decision API error {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.warning("Decision API returned a non-JSON body: %s", exc)
            raise RequestFailure(_failure_message(exc)) from exc

        try:
            rec = Recommendation.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Decision API response failed validation: %s", exc)
            raise RequestFailure(
                f"Malformed recommendation response: {exc.error_count()} invalid field(s)"
            ) from exc

        logger.debug(
            "Recommendation received: %s (version %s)",
            rec.recommended_action, rec.version,
        )
        return rec
