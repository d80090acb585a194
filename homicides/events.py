"""Event wiring: the single owner of the selection.

Each trigger mutates the selection, then re-runs the aggregator/renderer
pair of every chart listed for it in ``AFFECTED_CHARTS``. Charts not listed
keep whatever their surface last drew.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from homicides.charts import ChartGeometry, ChartSurface
from homicides.filters import (
    Dimensions,
    InvalidSelectionError,
    Selection,
    default_year,
    initial_selection,
    validate_selection,
)
from homicides.metrics_geo import aggregate_geo, render_geo
from homicides.metrics_sex import aggregate_sex, render_sex
from homicides.metrics_trend import YEAR_PICK, aggregate_trend, render_trend


logger = logging.getLogger(__name__)

TREND = "trend"
SEX = "sex"
GEO = "geo"

CITY_CHANGED = "city"
RACE_CHANGED = "race"
YEAR_CLICKED = "year"

AFFECTED_CHARTS: Dict[str, Tuple[str, ...]] = {
    CITY_CHANGED: (TREND, SEX, GEO),
    RACE_CHANGED: (SEX,),
    YEAR_CLICKED: (SEX, GEO),
}

Aggregator = Callable[[pd.DataFrame, Selection], Optional[pd.DataFrame]]
Renderer = Callable[[ChartSurface, Optional[pd.DataFrame], Selection], None]
Listener = Callable[[str, Tuple[str, ...]], None]


@dataclass(frozen=True)
class ChartBinding:
    name: str
    aggregate: Aggregator
    render: Renderer


DEFAULT_BINDINGS: Tuple[ChartBinding, ...] = (
    ChartBinding(TREND, aggregate_trend, render_trend),
    ChartBinding(SEX, aggregate_sex, render_sex),
    ChartBinding(GEO, aggregate_geo, render_geo),
)


class Dashboard:
    def __init__(
        self,
        records: pd.DataFrame,
        dims: Dimensions,
        *,
        bindings: Iterable[ChartBinding] = DEFAULT_BINDINGS,
        affected: Mapping[str, Tuple[str, ...]] = AFFECTED_CHARTS,
        geometry: Optional[ChartGeometry] = None,
        selection: Optional[Selection] = None,
    ) -> None:
        self.records = records
        self.dims = dims
        self.bindings: Dict[str, ChartBinding] = {b.name: b for b in bindings}
        self.affected = dict(affected)
        geometry = geometry or ChartGeometry()
        self.surfaces: Dict[str, ChartSurface] = {
            name: ChartSurface(name=name, geometry=geometry) for name in self.bindings
        }
        self._series: Dict[str, Optional[pd.DataFrame]] = {}
        self._listeners: Dict[str, List[Listener]] = {}
        if selection is None:
            selection = initial_selection(records, dims)
        self._selection = validate_selection(selection, dims)

    @property
    def selection(self) -> Selection:
        """A copy; mutate through the ``on_*`` triggers only."""
        return replace(self._selection)

    def subscribe(self, trigger: str, listener: Listener) -> None:
        self._listeners.setdefault(trigger, []).append(listener)

    def series(self, name: str) -> Optional[pd.DataFrame]:
        """The aggregate behind the chart's current drawing."""
        return self._series.get(name)

    def redraw(self, names: Iterable[str]) -> Tuple[str, ...]:
        drawn = []
        for name in names:
            binding = self.bindings.get(name)
            if binding is None:
                continue
            series = binding.aggregate(self.records, self._selection)
            self._series[name] = series
            binding.render(self.surfaces[name], series, self._selection)
            drawn.append(name)
        return tuple(drawn)

    def render_all(self) -> Tuple[str, ...]:
        return self.redraw(self.bindings)

    def _fire(self, trigger: str) -> Tuple[str, ...]:
        drawn = self.redraw(self.affected.get(trigger, ()))
        logger.debug("%s -> %s redrawn for %s", trigger, ", ".join(drawn) or "nothing", self._selection)
        for listener in self._listeners.get(trigger, []):
            listener(trigger, drawn)
        return drawn

    def on_city_change(self, city: str) -> Tuple[str, ...]:
        if city not in self.dims.cities:
            raise InvalidSelectionError(f"unknown city: {city!r}")
        self._selection.city = city
        self._selection.year = default_year(self.records, city, self._selection.race)
        return self._fire(CITY_CHANGED)

    def on_race_change(self, race: str) -> Tuple[str, ...]:
        if race not in self.dims.races:
            raise InvalidSelectionError(f"unknown victim race: {race!r}")
        self._selection.race = race
        return self._fire(RACE_CHANGED)

    def on_year_click(self, year: int) -> Tuple[str, ...]:
        if year not in self.dims.years:
            raise InvalidSelectionError(f"unknown year: {year!r}")
        self._selection.year = int(year)
        return self._fire(YEAR_CLICKED)


def clicked_year(event: Any) -> Optional[int]:
    """Year of the clicked trend point in a Streamlit chart selection event."""
    if not event:
        return None
    selection = event.get("selection") if hasattr(event, "get") else None
    points = (selection or {}).get(YEAR_PICK) or []
    if isinstance(points, dict):
        points = [points]
    for point in points:
        value = point.get("year") if hasattr(point, "get") else None
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None


def apply_trend_click(dashboard: Dashboard, event: Any, last_click: Optional[int]) -> Optional[int]:
    """Forward a trend click to the dashboard once; returns the click to remember.

    Streamlit reports the same selection on every rerun until the user clicks
    elsewhere, so a click equal to ``last_click`` is ignored.
    """
    year = clicked_year(event)
    if year is None or year == last_click:
        return last_click
    if year != dashboard.selection.year:
        dashboard.on_year_click(year)
    return year
