"""
Game situation model — the payload sent to the decision service.

A ``GameState`` is built fresh from the form on every submission and is
frozen once constructed; it is never merged with a previous state.

Numeric fields hold an ``int`` when the form value parsed cleanly.  When it
did not, they hold ``float("nan")`` — the request is still sent, so the
model deliberately accepts the sentinel instead of rejecting it.  Range
hints below are documentation only; nothing here enforces them.
"""

from __future__ import annotations

import math
from typing import Union

from pydantic import BaseModel, ConfigDict

Numeric = Union[int, float]

# Model field → form / query-string name, in wire order.
NUMERIC_FIELD_PARAMS: dict[str, str] = {
    "down": "down",
    "yards_to_go": "ydstogo",
    "yardline_100": "yardline_100",
    "time_remaining_seconds": "time_remaining",
    "quarter": "qtr",
    "score_differential": "score_diff",
    "offense_timeouts": "offense_timeouts",
    "defense_timeouts": "defense_timeouts",
}
HOME_PARAM = "home"


class GameState(BaseModel):
    """A fourth-down situation as described by the user.

    Attributes:
        down: Current down, hint [1, 4].
        yards_to_go: Yards needed for a first down, hint [1, 100].
        yardline_100: Distance to the opponent's goal line, hint [1, 99].
        time_remaining_seconds: Seconds left in the game.
        quarter: Quarter, hint [1, 5] (5 = overtime).
        score_differential: Offense score minus defense score.
        offense_timeouts: Offense timeouts left, hint [0, 3].
        defense_timeouts: Defense timeouts left, hint [0, 3].
        is_home_team: Whether the offense is the home team.
    """

    model_config = ConfigDict(frozen=True)

    down: Numeric
    yards_to_go: Numeric
    yardline_100: Numeric
    time_remaining_seconds: Numeric
    quarter: Numeric
    score_differential: Numeric
    offense_timeouts: Numeric
    defense_timeouts: Numeric
    is_home_team: bool

    def anomalous_fields(self) -> list[str]:
        """Return the model field names that hold the NaN sentinel."""
        return [
            name
            for name in NUMERIC_FIELD_PARAMS
            if _is_nan(getattr(self, name))
        ]


def _is_nan(value: Numeric) -> bool:
    return isinstance(value, float) and math.isnan(value)
