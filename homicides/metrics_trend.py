from __future__ import annotations

from typing import Optional

import altair as alt
import pandas as pd

from homicides.charts import HINT_TEXT, POINT_COLOR, ChartSurface, draw_placeholder, extent, text_mark
from homicides.filters import Selection


YEAR_PICK = "year_pick"
CLICK_HINT = "(Click a point to explore that year's data)"
NO_DATA = "No homicide data found."


def trend_title(selection: Selection) -> str:
    return f"Total Homicides in {selection.city}"


def aggregate_trend(records: pd.DataFrame, selection: Selection) -> Optional[pd.DataFrame]:
    """Homicide counts per year for the selected city, or None when there are none."""
    if records.empty:
        return None
    matched = records[(records["city"] == selection.city).fillna(False) & records["year"].notna()]
    if matched.empty:
        return None
    return (
        matched.groupby("year")
        .size()
        .reset_index(name="count")
        .astype({"year": int, "count": int})
        .sort_values("year")
        .reset_index(drop=True)
    )


def render_trend(surface: ChartSurface, series: Optional[pd.DataFrame], selection: Selection) -> None:
    surface.clear()
    surface.title = trend_title(selection)
    g = surface.geometry
    surface.draw(text_mark(CLICK_HINT, g.width / 2, -20, color=HINT_TEXT, align="center"))

    if series is None or series.empty:
        draw_placeholder(surface, NO_DATA)
        return

    data = series.assign(city=selection.city)
    x = alt.X(
        "year:Q",
        title="Year",
        scale=alt.Scale(domain=extent(data["year"]), nice=False),
        axis=alt.Axis(format="d", labelAngle=-45, labelAlign="right", tickMinStep=1),
    )
    y = alt.Y("count:Q", title="Total Homicides", scale=alt.Scale(domain=[0, int(data["count"].max())]))

    line = alt.Chart(data).mark_line(color=POINT_COLOR, strokeWidth=2.5).encode(x=x, y=y)

    pick = alt.selection_point(name=YEAR_PICK, fields=["year"], on="click", empty=False)
    points = (
        alt.Chart(data)
        .mark_circle(size=50, color=POINT_COLOR, opacity=1, cursor="pointer")
        .encode(
            x=x,
            y=y,
            tooltip=[
                alt.Tooltip("city:N", title="City"),
                alt.Tooltip("year:Q", title="Year", format="d"),
                alt.Tooltip("count:Q", title="Homicides"),
            ],
        )
        .add_params(pick)
    )
    surface.draw(line)
    surface.draw(points)
