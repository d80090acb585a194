import logging
from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from homicides.data import DatasetLoadError, load_dashboard_data
from homicides.events import GEO, SEX, TREND, Dashboard, apply_trend_click
from homicides.filters import Selection
from homicides.metrics_trend import YEAR_PICK

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin: 6px 0 12px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(selection: Selection) -> str:
    year = selection.year if selection.year is not None else "N/A"
    chips = [f"City: {selection.city}", f"Race: {selection.race}", f"Year: {year}"]
    return "".join(f"<span class='chip'>{txt}</span>" for txt in chips)


def export_button(label: str, df: Optional[pd.DataFrame], file_name: str, key: str):
    if df is None or df.empty:
        return
    st.download_button(
        label,
        data=df.to_csv(index=False).encode("utf-8"),
        file_name=file_name,
        mime="text/csv",
        key=key,
    )


# ---------- UI setup ----------
st.set_page_config(page_title="Homicide Explorer", layout="wide")
inject_base_styles()
st.title("Homicides in U.S. Cities")
st.caption("Pick a city and victim race; click a point on the trend line to focus on a year.")

try:
    data_ctx = load_dashboard_data()
except DatasetLoadError as exc:
    logger.exception("dataset load failed")
    st.error(f"Could not load the homicide dataset: {exc}")
    st.stop()

records: pd.DataFrame = data_ctx["records"]
dims = data_ctx["dimensions"]
if records.empty or not dims.cities or not dims.races:
    st.error("The homicide dataset has no usable rows.")
    st.stop()

if st.session_state.get("dashboard_source") != data_ctx["path"] or "dashboard" not in st.session_state:
    dashboard = Dashboard(records, dims)
    dashboard.render_all()
    st.session_state["dashboard"] = dashboard
    st.session_state["dashboard_source"] = data_ctx["path"]
    st.session_state["city"] = dashboard.selection.city
    st.session_state["race"] = dashboard.selection.race
    st.session_state["last_click"] = None
dashboard: Dashboard = st.session_state["dashboard"]


# ---------- Event wiring ----------
def _on_city_change():
    dashboard.on_city_change(st.session_state["city"])
    st.session_state["last_click"] = None


def _on_race_change():
    dashboard.on_race_change(st.session_state["race"])


with st.sidebar:
    st.markdown("### Filters")
    st.selectbox("City", options=dims.cities, key="city", on_change=_on_city_change)
    st.selectbox("Victim Race", options=dims.races, key="race", on_change=_on_race_change)
    st.caption(f"{len(records):,} records loaded from {data_ctx['path']}")

chips = st.empty()
selection = dashboard.selection
trend_col, sex_col, geo_col = st.columns(3)

with trend_col:
    trend_surface = dashboard.surfaces[TREND]
    with card("Yearly trend"):
        if dashboard.series(TREND) is None:
            # placeholder only, nothing to click
            st.altair_chart(trend_surface.chart(), key=f"trend-{selection.city}")
        else:
            event = st.altair_chart(
                trend_surface.chart(),
                on_select="rerun",
                selection_mode=[YEAR_PICK],
                key=f"trend-{selection.city}",
            )
            st.session_state["last_click"] = apply_trend_click(dashboard, event, st.session_state.get("last_click"))
            selection = dashboard.selection
        export_button("Export CSV", dashboard.series(TREND), "homicides_by_year.csv", key="export-trend")

chips.markdown(f"<div class='chip-row'>{format_filter_summary(selection)}</div>", unsafe_allow_html=True)

with sex_col:
    sex_surface = dashboard.surfaces[SEX]
    with card("Victims by sex"):
        st.altair_chart(sex_surface.chart())
        export_button("Export CSV", dashboard.series(SEX), "homicides_by_sex.csv", key="export-sex")

with geo_col:
    geo_surface = dashboard.surfaces[GEO]
    with card("Locations"):
        st.altair_chart(geo_surface.chart())
        export_button("Export CSV", dashboard.series(GEO), "homicide_locations.csv", key="export-geo")
