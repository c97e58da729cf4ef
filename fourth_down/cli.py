"""
Fourth-down decision dashboard — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Coerce raw option values exactly as the dashboard form does.
  4. Execute action (send request, print URL, print config).
  5. Report result to stdout.

Install and run::

    pip install -e .
    fourth-down --help
    fourth-down validate-config
    fourth-down show-request --down 4 --ydstogo 2
    fourth-down recommend --down 4 --ydstogo 2 --yardline-100 48 --score-diff=-3
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="fourth-down",
    help="Fourth-down decision dashboard — ask the decision service GO / PUNT / FG.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from fourth_down.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from fourth_down.utils.logging import configure_logging
    configure_logging(config.logging)


def _raw_form(config, **overrides: Optional[str]) -> dict[str, str]:
    """Merge CLI option values over the configured form defaults."""
    raw = config.dashboard.form_defaults.model_dump()
    for key, val in overrides.items():
        if val is not None:
            raw[key] = val
    return raw


# Shared option declarations; values stay raw text until coerced.
_DOWN = typer.Option(None, "--down", help="Down (hint 1-4).")
_YDSTOGO = typer.Option(None, "--ydstogo", help="Yards to go (hint 1-100).")
_YARDLINE = typer.Option(None, "--yardline-100", help="Yards from opponent goal (hint 1-99).")
_TIME = typer.Option(None, "--time-remaining", help="Seconds remaining in the game.")
_QTR = typer.Option(None, "--qtr", help="Quarter (hint 1-5).")
_SCORE = typer.Option(None, "--score-diff", help="Offense minus defense score, e.g. --score-diff=-3.")
_OFF_TO = typer.Option(None, "--offense-timeouts", help="Offense timeouts (hint 0-3).")
_DEF_TO = typer.Option(None, "--defense-timeouts", help="Defense timeouts (hint 0-3).")
_HOME = typer.Option(None, "--home", help="'true' if the offense is at home; anything else is false.")
_CONFIG = typer.Option(None, "--config", help="Path to TOML config file.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("recommend")
def recommend(
    down: Optional[str] = _DOWN,
    ydstogo: Optional[str] = _YDSTOGO,
    yardline_100: Optional[str] = _YARDLINE,
    time_remaining: Optional[str] = _TIME,
    qtr: Optional[str] = _QTR,
    score_diff: Optional[str] = _SCORE,
    offense_timeouts: Optional[str] = _OFF_TO,
    defense_timeouts: Optional[str] = _DEF_TO,
    home: Optional[str] = _HOME,
    api_url: Optional[str] = typer.Option(
        None,
        "--api-url",
        help="Override the decision service origin for this call.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the parsed recommendation as JSON instead of a report.",
    ),
    config_path: Optional[str] = _CONFIG,
) -> None:
    """Ask the decision service for a fourth-down recommendation.

    Omitted options fall back to the dashboard form defaults in config.
    Non-numeric values are sent as NaN, exactly as the dashboard does.
    Exits with code 1 if the request fails.
    """
    from fourth_down.ingestion.decision_client import RecommendationClient
    from fourth_down.reporting.formatters import (
        format_recommendation_report,
        render_recommendation,
    )
    from fourth_down.session.controller import SubmissionController

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    base_url = (api_url or config.decision_api.base_url).rstrip("/")
    raw = _raw_form(
        config,
        down=down, ydstogo=ydstogo, yardline_100=yardline_100,
        time_remaining=time_remaining, qtr=qtr, score_diff=score_diff,
        offense_timeouts=offense_timeouts, defense_timeouts=defense_timeouts,
        home=home,
    )

    controller = SubmissionController(RecommendationClient(base_url))
    outcome = asyncio.run(controller.submit(raw))

    for anomaly in outcome.anomalies:
        typer.echo(
            f"[WARN] {anomaly.param}={anomaly.raw_value!r} is not numeric; sent as NaN.",
            err=True,
        )

    if outcome.error is not None:
        typer.echo(f"[ERROR] {outcome.error}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(outcome.recommendation.model_dump(by_alias=True), indent=2))
        return

    rendered = render_recommendation(controller.state.last_result)
    typer.echo(format_recommendation_report(rendered, base_url=base_url))


@app.command("show-request")
def show_request(
    down: Optional[str] = _DOWN,
    ydstogo: Optional[str] = _YDSTOGO,
    yardline_100: Optional[str] = _YARDLINE,
    time_remaining: Optional[str] = _TIME,
    qtr: Optional[str] = _QTR,
    score_diff: Optional[str] = _SCORE,
    offense_timeouts: Optional[str] = _OFF_TO,
    defense_timeouts: Optional[str] = _DEF_TO,
    home: Optional[str] = _HOME,
    config_path: Optional[str] = _CONFIG,
) -> None:
    """Print the request URL that `recommend` would send, without sending it."""
    from fourth_down.ingestion.decision_client import build_request_url
    from fourth_down.ingestion.form_coercion import coerce_game_state

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    raw = _raw_form(
        config,
        down=down, ydstogo=ydstogo, yardline_100=yardline_100,
        time_remaining=time_remaining, qtr=qtr, score_diff=score_diff,
        offense_timeouts=offense_timeouts, defense_timeouts=defense_timeouts,
        home=home,
    )
    state = coerce_game_state(raw)
    typer.echo(build_request_url(config.decision_api.base_url, state))


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Decision API:     {config.decision_api.base_url}")
    typer.echo(f"  Dashboard title:  {config.dashboard.title}")
    typer.echo(f"  Drop stale resp.: {config.dashboard.discard_stale_responses}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


if __name__ == "__main__":
    app()
