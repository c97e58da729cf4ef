"""
Decision service response models.

Field names on the wire are terse snake_case (``delta_wp``, ``wp``, ``std``);
the models expose descriptive names and read the wire names via aliases::

    {
      "recommendation": "GO",
      "delta_wp": 0.034,
      "delta_ep": 1.2,
      "alternatives": [{"action": "PUNT", "wp": 0.51, "ep": 0.3}],
      "rationale": ["short yardage"],
      "uncertainty": {"std": 0.02, "method": "bootstrap"},
      "version": "v1"
    }

All models are frozen.  A new response replaces the current recommendation
wholesale; there is no field-level merge.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

RecommendedAction = Literal["GO", "PUNT", "FG"]


class Alternative(BaseModel):
    """One candidate action with its projected outcome."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action: str
    win_probability: float = Field(alias="wp")
    expected_points: float = Field(alias="ep")


class Uncertainty(BaseModel):
    """Spread of the recommendation estimate.

    Kept for forward compatibility; the dashboard does not display it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    standard_deviation: float = Field(alias="std")
    method: str


class Recommendation(BaseModel):
    """Parsed ``/v1/recommend`` response.

    Attributes:
        recommended_action: ``"GO"``, ``"PUNT"`` or ``"FG"``.
        delta_win_probability: WP gain of the recommended action as a
            fraction (``0.034`` = 3.4 points of win probability).
        delta_expected_points: EP gain of the recommended action.
        alternatives: Every candidate action, in the order the service sent.
        rationale: Free-text reasons, in the order the service sent.
        uncertainty: Estimate spread, or ``None`` when the service omits it
            (not rendered).
        version: Opaque model/service version string.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    recommended_action: RecommendedAction = Field(alias="recommendation")
    delta_win_probability: float = Field(alias="delta_wp")
    delta_expected_points: float = Field(alias="delta_ep")
    alternatives: tuple[Alternative, ...] = ()
    rationale: tuple[str, ...] = ()
    uncertainty: Optional[Uncertainty] = None
    version: str
