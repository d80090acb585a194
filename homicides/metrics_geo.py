from __future__ import annotations

from typing import Optional

import altair as alt
import pandas as pd

from homicides.charts import POINT_COLOR, ChartSurface, draw_placeholder, extent
from homicides.filters import Selection


NO_DATA = "No coordinate data for these filters."


def geo_title(selection: Selection) -> str:
    return f"Spatial Distribution of Homicides in {selection.city} ({selection.year})"


def aggregate_geo(records: pd.DataFrame, selection: Selection) -> Optional[pd.DataFrame]:
    if records.empty or selection.year is None:
        return None
    mask = (
        (records["city"] == selection.city) & (records["year"] == selection.year)
    ).fillna(False) & records["lat"].notna() & records["lon"].notna()
    points = records.loc[mask, ["city", "lon", "lat"]]
    if points.empty:
        return None
    return points.astype({"lon": float, "lat": float}).reset_index(drop=True)


def render_geo(surface: ChartSurface, series: Optional[pd.DataFrame], selection: Selection) -> None:
    surface.clear()
    surface.title = geo_title(selection)

    if series is None or series.empty:
        draw_placeholder(surface, NO_DATA, offset=80)
        return

    data = series.assign(year=selection.year, city=series["city"].astype(str))
    dots = (
        alt.Chart(data)
        .mark_circle(size=50, color=POINT_COLOR, opacity=0.75)
        .encode(
            x=alt.X(
                "lon:Q",
                title="Longitude",
                scale=alt.Scale(domain=extent(data["lon"]), zero=False, nice=False),
                axis=alt.Axis(tickCount=5, labelAngle=-45, labelAlign="right"),
            ),
            y=alt.Y(
                "lat:Q",
                title="Latitude",
                scale=alt.Scale(domain=extent(data["lat"]), zero=False, nice=False),
                axis=alt.Axis(tickCount=5),
            ),
            tooltip=[
                alt.Tooltip("city:N", title="City"),
                alt.Tooltip("year:Q", title="Year", format="d"),
                alt.Tooltip("lon:Q", title="Longitude", format=".2f"),
                alt.Tooltip("lat:Q", title="Latitude", format=".2f"),
            ],
        )
    )
    surface.draw(dots)
