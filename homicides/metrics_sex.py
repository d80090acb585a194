from __future__ import annotations

from typing import Optional

import altair as alt
import pandas as pd

from homicides.charts import BAR_COLOR, ChartSurface, draw_placeholder
from homicides.filters import Selection


NO_DATA = "No data for selected filters."


def sex_title(selection: Selection) -> str:
    return f"Race-Based Homicides by Sex in {selection.city} ({selection.year})"


def aggregate_sex(records: pd.DataFrame, selection: Selection) -> Optional[pd.DataFrame]:
    """Counts by victim sex for the selected city, year and race.

    Sorted by count descending; equal counts are ordered by the sex label so
    the bar order does not depend on row order in the file.
    """
    if records.empty or selection.year is None:
        return None
    mask = (
        (records["city"] == selection.city)
        & (records["year"] == selection.year)
        & (records["victim_race"] == selection.race)
    ).fillna(False) & records["victim_sex"].notna()
    matched = records[mask]
    if matched.empty:
        return None
    counts = (
        matched.groupby("victim_sex")
        .size()
        .reset_index(name="count")
        .rename(columns={"victim_sex": "sex"})
        .astype({"sex": str, "count": int})
    )
    return counts.sort_values(["count", "sex"], ascending=[False, True]).reset_index(drop=True)


def render_sex(surface: ChartSurface, series: Optional[pd.DataFrame], selection: Selection) -> None:
    surface.clear()
    surface.title = sex_title(selection)

    if series is None or series.empty:
        draw_placeholder(surface, NO_DATA)
        return

    data = series.assign(city=selection.city, year=selection.year)
    bars = (
        alt.Chart(data)
        .mark_bar(color=BAR_COLOR)
        .encode(
            x=alt.X(
                "sex:N",
                title="Victim Sex",
                sort=list(data["sex"]),
                scale=alt.Scale(paddingInner=0.1, paddingOuter=0.1),
                axis=alt.Axis(labelAngle=0),
            ),
            y=alt.Y("count:Q", title="Homicide Count", scale=alt.Scale(domain=[0, int(data["count"].max())])),
            tooltip=[
                alt.Tooltip("city:N", title="City"),
                alt.Tooltip("year:Q", title="Year", format="d"),
                alt.Tooltip("sex:N", title="Gender"),
                alt.Tooltip("count:Q", title="Homicides"),
            ],
        )
    )
    surface.draw(bars)
