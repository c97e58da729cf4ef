"""
Dashboard UI state.

Three independently settable fields rather than one tagged state, so the UI
can show a previous recommendation *and* a new error (or a spinner) at the
same time:

  last_result — the current ``Recommendation``, or ``None`` before the first
                success.  Only a newer success replaces it; submits and
                failures never clear it.
  in_flight   — a request is pending; the submit button is disabled.
  last_error  — message of the most recent failure; cleared on each submit.

There is no terminal state: submit → success/failure → submit … repeats
indefinitely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fourth_down.models.recommendation import Recommendation

logger = logging.getLogger(__name__)


@dataclass
class DashboardState:
    """Mutable UI state shared by the form, the banner and the result card."""

    last_result: Optional[Recommendation] = None
    in_flight: bool = False
    last_error: Optional[str] = None

    @property
    def submit_enabled(self) -> bool:
        return not self.in_flight

    def begin_submit(self) -> None:
        """Mark a request as pending and clear the error (but not the result)."""
        self.in_flight = True
        self.last_error = None
        logger.debug("State: submit started")

    def apply_success(self, rec: Recommendation) -> None:
        """Replace the current recommendation wholesale."""
        self.last_result = rec
        self.in_flight = False
        logger.debug("State: result replaced (%s)", rec.recommended_action)

    def apply_failure(self, message: str) -> None:
        """Record a failure; the previous recommendation stays visible."""
        self.last_error = message
        self.in_flight = False
        logger.debug("State: failure recorded (%s)", message)
