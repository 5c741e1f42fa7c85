"""Streamlit app — Ad Performance Dashboard.

Single page:
  date-range buttons (7 / 30 / 90 days) · ten metric cards · dual-axis trend chart.
Clicking a card toggles it into the chart; at most two stay selected.
"""

from __future__ import annotations

from typing import List

import streamlit as st

from adboard.config import AppConfig, configure_logging, load_config
from adboard.dashboard import DashboardView, build_dashboard, build_figure, card_color
from adboard.fetcher import load_datapoints
from adboard.selection import toggle_metric

CARDS_PER_ROW = 5

# ─────────────────────────────────────────────────────────────────────────────
# Session state
# ─────────────────────────────────────────────────────────────────────────────


def _init_state(cfg: AppConfig) -> None:
    if "date_range" not in st.session_state:
        st.session_state.date_range = cfg.dashboard.default_date_range
    if "selected_metrics" not in st.session_state:
        st.session_state.selected_metrics = []
    # One fetch per session; reruns reuse the loaded rows.
    if "data" not in st.session_state:
        with st.spinner("Loading sheet…"):
            st.session_state.data = load_datapoints(cfg.sheet)


def _on_card_click(metric: str, max_selected: int) -> None:
    st.session_state.selected_metrics = toggle_metric(
        st.session_state.selected_metrics, metric, max_selected
    )


def _on_range_click(days: int) -> None:
    st.session_state.date_range = days


# ─────────────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────────────


def _render_header(cfg: AppConfig) -> None:
    col_title, col_ranges = st.columns([3, 2])
    col_title.title("📊 Analytics Dashboard")

    with col_ranges:
        cols = st.columns(len(cfg.dashboard.date_ranges))
        for col, days in zip(cols, cfg.dashboard.date_ranges):
            col.button(
                f"Last {days} Days",
                key=f"range_{days}",
                type="primary" if st.session_state.date_range == days else "secondary",
                on_click=_on_range_click,
                args=(days,),
                use_container_width=True,
            )


def _render_cards(view: DashboardView, max_selected: int) -> None:
    for start in range(0, len(view.cards), CARDS_PER_ROW):
        row = view.cards[start:start + CARDS_PER_ROW]
        cols = st.columns(CARDS_PER_ROW)
        for col, card in zip(cols, row):
            with col.container(border=True):
                badge = ""
                if card.is_second_selected:
                    badge = " 🟣"
                elif card.is_selected:
                    badge = " 🔵"
                st.markdown(
                    f"<span style='color:{card_color(card.metric)}'>●</span> "
                    f"**{card.title}**{badge}",
                    unsafe_allow_html=True,
                )
                st.markdown(f"### {card.value}")
                st.button(
                    "Hide" if card.is_selected else "Chart",
                    key=f"card_{card.metric}",
                    on_click=_on_card_click,
                    args=(card.metric, max_selected),
                    use_container_width=True,
                )


def _render_chart(view: DashboardView) -> None:
    with st.container(border=True):
        st.plotly_chart(build_figure(view), use_container_width=True)


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────


def main() -> None:
    st.set_page_config(
        page_title="Analytics Dashboard",
        page_icon="📊",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    cfg = load_config()
    configure_logging(cfg.logging.level)
    _init_state(cfg)

    _render_header(cfg)

    data = st.session_state.data
    selected: List[str] = st.session_state.selected_metrics
    view = build_dashboard(data, st.session_state.date_range, selected)

    if not data:
        st.info("No data loaded from the sheet yet.")

    _render_cards(view, cfg.dashboard.max_selected_metrics)
    st.divider()
    _render_chart(view)


if __name__ == "__main__":
    main()
