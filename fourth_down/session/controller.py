"""
Submission controller — the boundary where a form submit becomes a request
and the request's outcome becomes dashboard state.

``submit()`` is a coroutine.  The HTTP call is its only suspension point, so
several submits may be pending at once.  By default there is no sequence
tracking: whichever response resolves *last* writes the state, even when it
belongs to an older submit.  Setting ``discard_stale_responses=True`` tags
each submit with an increasing sequence number and drops any outcome older
than one already applied.

``RequestFailure`` is caught here and nowhere else; it only ever reaches the
UI as ``DashboardState.last_error``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from fourth_down.ingestion.decision_client import RecommendationClient, RequestFailure
from fourth_down.ingestion.form_coercion import (
    CoercionAnomaly,
    coerce_game_state,
    find_coercion_anomalies,
)
from fourth_down.models.game_state import GameState
from fourth_down.models.recommendation import Recommendation
from fourth_down.session.state import DashboardState

logger = logging.getLogger(__name__)


@dataclass
class SubmissionOutcome:
    """What happened to one submit.

    Attributes:
        sequence: 1-based submit counter for this controller.
        game_state: The payload that was sent.
        anomalies: Numeric fields that were sent as NaN.
        recommendation: Parsed response, or ``None`` on failure.
        error: Failure message, or ``None`` on success.
        applied: ``False`` only when the outcome was dropped as stale.
    """

    sequence: int
    game_state: GameState
    anomalies: list[CoercionAnomaly] = field(default_factory=list)
    recommendation: Optional[Recommendation] = None
    error: Optional[str] = None
    applied: bool = True

    @property
    def succeeded(self) -> bool:
        return self.recommendation is not None


class SubmissionController:
    """Wires form coercion, the decision client and ``DashboardState`` together."""

    def __init__(
        self,
        client: RecommendationClient,
        state: Optional[DashboardState] = None,
        discard_stale_responses: bool = False,
    ) -> None:
        self.client = client
        self.state = state if state is not None else DashboardState()
        self.discard_stale_responses = discard_stale_responses
        self._issued = 0
        self._latest_applied = 0

    def _accept(self, sequence: int) -> bool:
        if not self.discard_stale_responses:
            return True
        if sequence < self._latest_applied:
            logger.info(
                "Dropping outcome of submit #%d; #%d already applied.",
                sequence, self._latest_applied,
            )
            return False
        self._latest_applied = sequence
        return True

    async def submit(self, raw_form: Mapping[str, str]) -> SubmissionOutcome:
        """Handle one form submission end to end.

        Args:
            raw_form: Snapshot of the form's raw string values.

        Returns:
            A ``SubmissionOutcome``.  Never raises ``RequestFailure``.
        """
        anomalies = find_coercion_anomalies(raw_form)
        game_state = coerce_game_state(raw_form)

        self._issued += 1
        outcome = SubmissionOutcome(
            sequence=self._issued, game_state=game_state, anomalies=anomalies
        )
        self.state.begin_submit()

        try:
            rec = await self.client.fetch_recommendation(game_state)
        except RequestFailure as exc:
            outcome.error = exc.message
            outcome.applied = self._accept(outcome.sequence)
            if outcome.applied:
                self.state.apply_failure(exc.message)
            return outcome

        outcome.recommendation = rec
        outcome.applied = self._accept(outcome.sequence)
        if outcome.applied:
            self.state.apply_success(rec)
        return outcome
