"""
Form coercion: raw dashboard/CLI text values → typed ``GameState``.

The form hands over one string per field, keyed by the same names the
decision service expects on the query string (``down``, ``ydstogo``,
``yardline_100``, ``time_remaining``, ``qtr``, ``score_diff``,
``offense_timeouts``, ``defense_timeouts``, ``home``).

Rules
-----
- Numeric fields are parsed as numbers.  Integral text (``"4"``, ``" 4 "``,
  ``"4.0"``) becomes an ``int``; other finite numbers (``"2.5"``) stay
  ``float``.
- Empty, missing or non-numeric text becomes ``float("nan")``.  This is a
  *coercion anomaly*: it is logged and reported by
  ``find_coercion_anomalies()`` but never rejected — the request is still
  sent with ``NaN`` in that slot.
- No range checks.  Widget min/max values are browser hints only.
- ``home`` is ``True`` only for the exact string ``"true"``.

Pure apart from logging; no I/O.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Optional

from fourth_down.models.game_state import (
    HOME_PARAM,
    NUMERIC_FIELD_PARAMS,
    GameState,
    Numeric,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoercionAnomaly:
    """A numeric form field that did not parse and was sent as NaN."""

    param: str                  # form / query-string name, e.g. "ydstogo"
    raw_value: Optional[str]    # None when the key was missing entirely


def parse_numeric(raw: Optional[str]) -> Numeric:
    """Parse one raw form value.

    Args:
        raw: Text from the form, or ``None`` if the field was absent.

    Returns:
        ``int`` for integral values, ``float`` for other finite values,
        ``float("nan")`` for anything that is not a finite number.
    """
    if raw is None:
        return math.nan
    text = raw.strip()
    # int() and float() accept digit-group underscores; form input does not.
    if not text or "_" in text:
        return math.nan

    try:
        return int(text, 10)
    except ValueError:
        pass

    try:
        value = float(text)
    except ValueError:
        return math.nan

    if not math.isfinite(value):
        return math.nan
    if value.is_integer():
        return int(value)
    return value


def coerce_home(raw: Optional[str]) -> bool:
    """``True`` iff ``raw`` is exactly ``"true"`` (case-sensitive)."""
    return raw == "true"


def find_coercion_anomalies(raw: Mapping[str, str]) -> list[CoercionAnomaly]:
    """List the numeric fields of ``raw`` that would be sent as NaN."""
    anomalies: list[CoercionAnomaly] = []
    for param in NUMERIC_FIELD_PARAMS.values():
        value = raw.get(param)
        parsed = parse_numeric(value)
        if isinstance(parsed, float) and math.isnan(parsed):
            anomalies.append(CoercionAnomaly(param=param, raw_value=value))
    return anomalies


def coerce_game_state(raw: Mapping[str, str]) -> GameState:
    """Build a ``GameState`` from a snapshot of raw form values.

    Args:
        raw: Form field name → raw string value.  Unknown keys are ignored.

    Returns:
        A fully-populated ``GameState``; fields that failed to parse hold NaN.
    """
    values: dict[str, object] = {
        field_name: parse_numeric(raw.get(param))
        for field_name, param in NUMERIC_FIELD_PARAMS.items()
    }
    values["is_home_team"] = coerce_home(raw.get(HOME_PARAM))

    for anomaly in find_coercion_anomalies(raw):
        logger.warning(
            "Form field %r is not numeric (%r); sending NaN.",
            anomaly.param, anomaly.raw_value,
        )

    return GameState(**values)
