"""
Tests for the decision service client.

What we test
------------
1. Query construction: parameter names, order, integer/boolean/NaN text.
2. Full URL for the 4th-and-2 example, sign of score_diff preserved.
3. Successful fetch parses into ``Recommendation``.
4. Every failure mode (connect error, non-2xx, non-JSON, bad schema)
   becomes ``RequestFailure`` with a non-empty message.
5. No dedup: identical calls produce independent requests.
6. No client-side timeout.
"""

from __future__ import annotations

import asyncio
import math

import httpx
import pytest

from fourth_down.ingestion.decision_client import (
    FALLBACK_ERROR_MESSAGE,
    RecommendationClient,
    RequestFailure,
    build_query_params,
    build_request_url,
)
from fourth_down.models.recommendation import Recommendation

_BASE = "http://localhost:8008"


# ── Request construction ──────────────────────────────────────────────────────


class TestBuildQueryParams:
    def test_example_situation(self, sample_game_state):
        assert build_query_params(sample_game_state) == [
            ("down", "4"),
            ("ydstogo", "2"),
            ("yardline_100", "48"),
            ("time_remaining", "900"),
            ("qtr", "2"),
            ("score_diff", "-3"),
            ("offense_timeouts", "3"),
            ("defense_timeouts", "3"),
            ("home", "true"),
        ]

    def test_home_false(self, sample_game_state):
        state = sample_game_state.model_copy(update={"is_home_team": False})
        assert ("home", "false") in build_query_params(state)

    def test_nan_serialised_as_text(self, sample_game_state):
        state = sample_game_state.model_copy(update={"yards_to_go": math.nan})
        assert ("ydstogo", "NaN") in build_query_params(state)

    def test_fractional_value_kept(self, sample_game_state):
        state = sample_game_state.model_copy(update={"yards_to_go": 2.5})
        assert ("ydstogo", "2.5") in build_query_params(state)


class TestBuildRequestUrl:
    def test_example_url(self, sample_game_state):
        url = build_request_url(_BASE, sample_game_state)
        assert url == (
            "http://localhost:8008/v1/recommend?down=4&ydstogo=2&yardline_100=48"
            "&time_remaining=900&qtr=2&score_diff=-3&offense_timeouts=3"
            "&defense_timeouts=3&home=true"
        )

    def test_trailing_slash_ignored(self, sample_game_state):
        assert build_request_url(_BASE + "/", sample_game_state) == build_request_url(
            _BASE, sample_game_state
        )

    def test_exactly_nine_params(self, sample_game_state):
        url = httpx.URL(build_request_url(_BASE, sample_game_state))
        assert len(url.params.multi_items()) == 9
        assert url.params["score_diff"] == "-3"


# ── fetch_recommendation ──────────────────────────────────────────────────────


def _fetch(client: RecommendationClient, state) -> Recommendation:
    return asyncio.run(client.fetch_recommendation(state))


class TestFetchSuccess:
    def test_parses_response(self, recording_transport, sample_game_state, sample_payload):
        transport, seen = recording_transport(lambda req: httpx.Response(200, json=sample_payload))
        client = RecommendationClient(_BASE, transport=transport)

        rec = _fetch(client, sample_game_state)

        assert rec.recommended_action == "GO"
        assert rec.delta_win_probability == pytest.approx(0.034)
        assert rec.alternatives[0].action == "PUNT"
        assert rec.uncertainty.method == "bootstrap"

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/v1/recommend"
        assert request.url.params["home"] == "true"
        assert request.url.params["yardline_100"] == "48"

    def test_no_client_timeout(self, recording_transport, sample_game_state, sample_payload):
        transport, seen = recording_transport(lambda req: httpx.Response(200, json=sample_payload))
        _fetch(RecommendationClient(_BASE, transport=transport), sample_game_state)
        assert all(v is None for v in seen[0].extensions["timeout"].values())

    def test_identical_calls_are_not_deduplicated(
        self, recording_transport, sample_game_state, sample_payload
    ):
        transport, seen = recording_transport(lambda req: httpx.Response(200, json=sample_payload))
        client = RecommendationClient(_BASE, transport=transport)

        _fetch(client, sample_game_state)
        _fetch(client, sample_game_state)

        assert len(seen) == 2
        assert seen[0].url == seen[1].url


class TestFetchFailure:
    def test_non_success_status(self, recording_transport, sample_game_state):
        transport, _ = recording_transport(lambda req: httpx.Response(503))
        with pytest.raises(RequestFailure, match="Decision API error 503"):
            _fetch(RecommendationClient(_BASE, transport=transport), sample_game_state)

    def test_connection_refused_uses_transport_message(self, sample_game_state):
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = RecommendationClient(_BASE, transport=httpx.MockTransport(_refuse))
        with pytest.raises(RequestFailure) as exc_info:
            _fetch(client, sample_game_state)
        assert exc_info.value.message == "Connection refused"

    def test_empty_transport_message_falls_back(self, sample_game_state):
        def _timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("", request=request)

        client = RecommendationClient(_BASE, transport=httpx.MockTransport(_timeout))
        with pytest.raises(RequestFailure) as exc_info:
            _fetch(client, sample_game_state)
        assert exc_info.value.message == FALLBACK_ERROR_MESSAGE

    def test_non_json_body(self, recording_transport, sample_game_state):
        transport, _ = recording_transport(
            lambda req: httpx.Response(200, text="<html>gateway</html>")
        )
        with pytest.raises(RequestFailure) as exc_info:
            _fetch(RecommendationClient(_BASE, transport=transport), sample_game_state)
        assert exc_info.value.message

    def test_schema_mismatch(self, recording_transport, sample_game_state, sample_payload):
        bad = {**sample_payload, "recommendation": "KNEEL"}
        transport, _ = recording_transport(lambda req: httpx.Response(200, json=bad))
        with pytest.raises(RequestFailure, match="Malformed recommendation response"):
            _fetch(RecommendationClient(_BASE, transport=transport), sample_game_state)

    def test_request_failure_is_an_exception_with_message(self):
        err = RequestFailure("boom")
        assert isinstance(err, Exception)
        assert str(err) == "boom"
        assert err.message == "boom"
