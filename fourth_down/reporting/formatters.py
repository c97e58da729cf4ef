"""
Display formatting for a ``Recommendation``.

``render_recommendation()`` turns the typed response into the exact strings
the dashboard card and the CLI print.  It looks only at the recommendation
itself — never at the in-flight flag or the last error — so a stale result
renders identically while a new request is pending or after one failed.

Formats
-------
  Recommendation: GO
  Delta WP: 3.4%                        value × 100, one decimal
  Delta EP: 1.20                        two decimals, no unit
  PUNT: WP 51.0% · EP 0.30              one line per alternative, server order
  Version: v1

``uncertainty`` is part of the model but is deliberately not rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fourth_down.models.recommendation import Alternative, Recommendation


# ── Value formatters ─────────────────────────────────────────────────────────


def format_probability_pct(value: float) -> str:
    """``0.034`` → ``"3.4%"``."""
    return f"{value * 100:.1f}%"


def format_points(value: float) -> str:
    """``1.2`` → ``"1.20"``."""
    return f"{value:.2f}"


def format_alternative(alt: Alternative) -> str:
    """``"<action>: WP <wp>% · EP <ep>"``."""
    return (
        f"{alt.action}: WP {format_probability_pct(alt.win_probability)}"
        f" · EP {format_points(alt.expected_points)}"
    )


# ── Rendered card ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RenderedRecommendation:
    """Display-ready strings for one recommendation."""

    action: str
    headline: str
    delta_wp: str
    delta_ep: str
    alternatives: tuple[str, ...]
    rationale: tuple[str, ...]
    version: str


def render_recommendation(rec: Optional[Recommendation]) -> Optional[RenderedRecommendation]:
    """Map the current recommendation to display strings.

    Args:
        rec: ``DashboardState.last_result``; ``None`` before the first success.

    Returns:
        ``RenderedRecommendation``, or ``None`` when there is nothing to show.
    """
    if rec is None:
        return None
    return RenderedRecommendation(
        action=rec.recommended_action,
        headline=f"Recommendation: {rec.recommended_action}",
        delta_wp=f"Delta WP: {format_probability_pct(rec.delta_win_probability)}",
        delta_ep=f"Delta EP: {format_points(rec.delta_expected_points)}",
        alternatives=tuple(format_alternative(a) for a in rec.alternatives),
        rationale=tuple(rec.rationale),
        version=f"Version: {rec.version}",
    )


# ── ASCII report (CLI) ───────────────────────────────────────────────────────


def format_recommendation_report(
    rendered: RenderedRecommendation,
    base_url: str = "",
) -> str:
    """Format a rendered recommendation as a multi-line block for ``typer.echo()``.

    Example::

        === Recommendation: GO ===
          Delta WP: 3.4%
          Delta EP: 1.20

          Alternatives
            - PUNT: WP 51.0% · EP 0.30

          Rationale
            1. short yardage

          Version: v1
          Source:  http://localhost:8008
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {rendered.headline} ===")
    lines.append(f"  {rendered.delta_wp}")
    lines.append(f"  {rendered.delta_ep}")

    lines.append("")
    lines.append("  Alternatives")
    if rendered.alternatives:
        for alt in rendered.alternatives:
            lines.append(f"    - {alt}")
    else:
        lines.append("    (none)")

    lines.append("")
    lines.append("  Rationale")
    if rendered.rationale:
        for i, reason in enumerate(rendered.rationale, start=1):
            lines.append(f"    {i}. {reason}")
    else:
        lines.append("    (none)")

    lines.append("")
    lines.append(f"  {rendered.version}")
    if base_url:
        lines.append(f"  Source:  {base_url}")
    return "\n".join(lines)
