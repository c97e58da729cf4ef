"""
Fourth-Down Decision Dashboard — Streamlit app
===============================================

Describe a fourth-down situation, submit, and see whether the decision
service recommends going for it, punting or kicking a field goal.

The app holds no football logic of its own.  It:
  1. harvests the raw form text,
  2. hands it to ``SubmissionController`` (coerce → GET /v1/recommend),
  3. renders ``DashboardState`` — error banner and result card are
     independent, so a previous answer stays on screen next to a new error.

State surfacing
---------------
  - Submit button disabled (label "Calculating…") while a request is pending.
  - Error banner  — message of the last failed request; cleared on submit.
  - Result card   — last successful recommendation; only replaced by a
                    newer success.
  - Field warning — a numeric field that did not parse is still sent (as
                    NaN); the dashboard says so instead of blocking.

Usage
-----
    pip install -e ".[dashboard]"
    streamlit run dashboard/app.py

    # Point at another decision service:
    FOURTH_DOWN_API_URL=http://decision.internal:8008 streamlit run dashboard/app.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# ── Ensure project root is importable ────────────────────────────────────────
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from fourth_down.config import AppConfig, load_config
from fourth_down.ingestion.decision_client import RecommendationClient
from fourth_down.ingestion.form_coercion import coerce_home
from fourth_down.reporting.formatters import render_recommendation
from fourth_down.session.controller import SubmissionController
from fourth_down.utils.logging import configure_logging


@st.cache_resource(show_spinner=False)
def _app_config() -> AppConfig:
    """Read config (and the decision service origin) once per server process."""
    config = load_config()
    configure_logging(config.logging)
    return config


config = _app_config()

# ── Must be the first rendering Streamlit call ───────────────────────────────
st.set_page_config(page_title=config.dashboard.title, layout="wide")

import pandas as pd

# ── Session state ─────────────────────────────────────────────────────────────

if "controller" not in st.session_state:
    st.session_state["controller"] = SubmissionController(
        RecommendationClient(config.decision_api.base_url),
        discard_stale_responses=config.dashboard.discard_stale_responses,
    )

controller: SubmissionController = st.session_state["controller"]
state = controller.state
defaults = config.dashboard.form_defaults


# ── Sidebar ───────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("Decision service")
    st.code(config.decision_api.base_url)
    st.caption("Override with FOURTH_DOWN_API_URL or config/local.toml.")


# ── Form ──────────────────────────────────────────────────────────────────────

st.header(config.dashboard.title)

# (form name, label, help); help text carries the widget range hints.
_NUMERIC_INPUTS = [
    ("down",             "Down",               "1–4"),
    ("ydstogo",          "Yds To Go",          "1–100"),
    ("yardline_100",     "Yardline_100",       "1–99, distance to opponent goal"),
    ("time_remaining",   "Time Remaining (s)", "≥ 0"),
    ("qtr",              "Quarter",            "1–5"),
    ("score_diff",       "Score Diff",         "offense minus defense"),
    ("offense_timeouts", "Off TOs",            "0–3"),
    ("defense_timeouts", "Def TOs",            "0–3"),
]

_PENDING_KEY = "pending_form"
_ANOMALIES_KEY = "last_anomalies"


def _queue_submit() -> None:
    """Snapshot the form and mark a request pending before the rerun draws."""
    pending = {name: st.session_state[f"field_{name}"] for name, _, _ in _NUMERIC_INPUTS}
    pending["home"] = st.session_state["field_home"]
    st.session_state[_PENDING_KEY] = pending
    st.session_state[_ANOMALIES_KEY] = []
    st.session_state["controller"].state.begin_submit()


with st.form("decision-form"):
    cols = st.columns(4)
    for i, (name, label, hint) in enumerate(_NUMERIC_INPUTS):
        with cols[i % 4]:
            st.text_input(label, value=getattr(defaults, name), help=hint, key=f"field_{name}")

    with cols[0]:
        # Anything but "true" coerces to false, so an unknown default selects "false".
        st.selectbox(
            "Home",
            options=["true", "false"],
            index=0 if coerce_home(defaults.home) else 1,
            format_func=str.title,
            key="field_home",
        )

    st.form_submit_button(
        "Calculating…" if state.in_flight else "Get Recommendation",
        disabled=not state.submit_enabled,
        on_click=_queue_submit,
        key="submit",
    )

for anomaly in st.session_state.get(_ANOMALIES_KEY, []):
    st.warning(
        f"`{anomaly.param}` = {anomaly.raw_value!r} is not a number; "
        "it was sent to the decision service as NaN."
    )


# ── Error banner ──────────────────────────────────────────────────────────────

if state.last_error:
    st.error(state.last_error)


# ── Result card ───────────────────────────────────────────────────────────────

rendered = render_recommendation(state.last_result)

if rendered is not None:
    with st.container(border=True):
        st.subheader(rendered.headline)
        st.write(rendered.delta_wp)
        st.write(rendered.delta_ep)

        st.markdown("#### Alternatives")
        st.markdown("\n".join(f"- {line}" for line in rendered.alternatives) or "_none_")

        with st.expander("Alternatives table", expanded=False):
            df_alt = pd.DataFrame(
                [
                    {
                        "action": a.action,
                        "wp_pct": a.win_probability * 100,
                        "ep": a.expected_points,
                    }
                    for a in state.last_result.alternatives
                ],
                columns=["action", "wp_pct", "ep"],
            )
            st.dataframe(df_alt, width="stretch", hide_index=True)

        st.markdown("#### Rationale")
        st.markdown(
            "\n".join(f"{n}. {r}" for n, r in enumerate(rendered.rationale, start=1))
            or "_none_"
        )

        st.caption(rendered.version)


# ── Pending request ───────────────────────────────────────────────────────────
# Runs after the page is drawn, so the disabled button and the previous
# result stay visible while the service answers.

pending = st.session_state.pop(_PENDING_KEY, None)
if pending is not None:
    with st.spinner("Calculating…"):
        outcome = asyncio.run(controller.submit(pending))
    st.session_state[_ANOMALIES_KEY] = outcome.anomalies
    st.rerun()
