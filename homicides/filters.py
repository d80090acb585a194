from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd


DEFAULT_CITY = "Albuquerque"
DEFAULT_RACE = "White"


class InvalidSelectionError(ValueError):
    """Raised when a selection value is not one the dataset offers."""


@dataclass(frozen=True)
class Dimensions:
    years: List[int] = field(default_factory=list)
    cities: List[str] = field(default_factory=list)
    races: List[str] = field(default_factory=list)


@dataclass
class Selection:
    city: str
    race: str
    year: Optional[int] = None


def _years(series: pd.Series) -> List[int]:
    return sorted(int(y) for y in series.dropna().unique())


def valid_years_for(records: pd.DataFrame, city: str, race: str) -> List[int]:
    """Ascending years with at least one record for both `city` and `race`."""
    if records.empty:
        return []
    mask = (records["city"] == city) & (records["victim_race"] == race)
    return _years(records.loc[mask.fillna(False), "year"])


def default_year(records: pd.DataFrame, city: str, race: str) -> Optional[int]:
    valid = valid_years_for(records, city, race)
    if valid:
        return valid[0]
    all_years = _years(records["year"]) if not records.empty else []
    return all_years[0] if all_years else None


def _pick(preferred: str, options: List[str]) -> Optional[str]:
    if preferred in options:
        return preferred
    return options[0] if options else None


def initial_selection(records: pd.DataFrame, dims: Dimensions) -> Selection:
    city = _pick(DEFAULT_CITY, dims.cities)
    race = _pick(DEFAULT_RACE, dims.races)
    if city is None or race is None:
        raise InvalidSelectionError("dataset has no cities or no victim races to select from")
    return Selection(city=city, race=race, year=default_year(records, city, race))


def validate_selection(selection: Selection, dims: Dimensions) -> Selection:
    if selection.city not in dims.cities:
        raise InvalidSelectionError(f"unknown city: {selection.city!r}")
    if selection.race not in dims.races:
        raise InvalidSelectionError(f"unknown victim race: {selection.race!r}")
    if selection.year is None:
        if dims.years:
            raise InvalidSelectionError("year is required when the dataset has years")
    elif selection.year not in dims.years:
        raise InvalidSelectionError(f"unknown year: {selection.year!r}")
    return selection
