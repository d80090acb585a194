from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

POINT_COLOR = "#4c9aff"
BAR_COLOR = "#b44fc2"
MUTED_TEXT = "#666"
HINT_TEXT = "#777"


@dataclass(frozen=True)
class ChartGeometry:
    outer_width: int = 400
    outer_height: int = 400
    margin_top: int = 40
    margin_right: int = 30
    margin_bottom: int = 60
    margin_left: int = 70

    @property
    def width(self) -> int:
        return self.outer_width - self.margin_left - self.margin_right

    @property
    def height(self) -> int:
        return self.outer_height - self.margin_top - self.margin_bottom

    @property
    def padding(self) -> Dict[str, int]:
        return {
            "top": self.margin_top,
            "right": self.margin_right,
            "bottom": self.margin_bottom,
            "left": self.margin_left,
        }


@dataclass
class ChartSurface:
    """Fixed-size drawing surface holding the layers of the last render."""

    name: str
    geometry: ChartGeometry = field(default_factory=ChartGeometry)
    title: str = ""
    elements: List[alt.Chart] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.elements)

    def clear(self) -> None:
        self.elements = []
        self.title = ""

    def draw(self, element: alt.Chart) -> None:
        self.elements.append(element)

    def chart(self) -> Optional[alt.LayerChart]:
        if not self.elements:
            return None
        return alt.layer(*self.elements).properties(
            width=self.geometry.width,
            height=self.geometry.height,
            title=self.title,
            padding=self.geometry.padding,
        )

    def to_spec(self) -> Dict[str, Any]:
        chart = self.chart()
        return to_vega_spec(chart) if chart is not None else {}


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def text_mark(text: str, x: float, y: float, *, color: str = MUTED_TEXT, size: int = 13, align: str = "left") -> alt.Chart:
    return (
        alt.Chart(pd.DataFrame({"text": [text]}))
        .mark_text(align=align, baseline="middle", color=color, fontSize=size)
        .encode(text="text:N", x=alt.value(x), y=alt.value(y))
    )


def draw_placeholder(surface: ChartSurface, message: str, *, offset: int = 60) -> None:
    g = surface.geometry
    surface.draw(text_mark(message, g.width / 2 - offset, g.height / 2))


def extent(series: pd.Series) -> List[float]:
    values = pd.to_numeric(series, errors="coerce").dropna()
    return [float(values.min()), float(values.max())]
