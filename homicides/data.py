from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import pandas as pd

from homicides.filters import Dimensions


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1]
DATA_FILE = "homicide-data.csv"
DATA_PATH_ENV = "HOMICIDE_DATA_PATH"

STRING_COLUMNS = ["city", "victim_race", "victim_sex", "reported_date"]
COORD_COLUMNS = ["lat", "lon"]
REQUIRED_COLUMNS = STRING_COLUMNS + COORD_COLUMNS
NULL_TOKENS = {"nan": pd.NA, "None": pd.NA, "NA": pd.NA, "": pd.NA}


class DatasetLoadError(RuntimeError):
    """The homicide CSV is missing or does not have the expected columns."""


def get_data_path() -> Path:
    override = os.environ.get(DATA_PATH_ENV)
    return Path(override) if override else DATA_DIR / DATA_FILE


def file_signature(path: Path) -> Tuple[str, float]:
    try:
        mtime = path.stat().st_mtime
    except FileNotFoundError as exc:
        raise DatasetLoadError(f"data file not found: {path}") from exc
    return (str(path), mtime)


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            df[col] = series.replace(NULL_TOKENS)
    return df


def parse_year(value: object) -> Optional[int]:
    """Leading four characters of a reported date like 20100504 -> 2010."""
    if value is None or pd.isna(value):
        return None
    head = str(value).strip()[:4]
    if len(head) < 4 or not head.isdigit():
        return None
    year = int(head)
    return year if year > 0 else None


def _read_csv(path: Path) -> pd.DataFrame:
    try:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    except UnicodeDecodeError:
        # The published homicide dataset ships latin-1 encoded city names.
        return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="latin-1")


def load_records(path: Path) -> pd.DataFrame:
    path = Path(path)
    file_signature(path)
    try:
        raw = _read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DatasetLoadError(f"could not parse {path}: {exc}") from exc

    raw.columns = [str(c).strip() for c in raw.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise DatasetLoadError(f"{path.name} is missing columns: {', '.join(missing)}")

    df = coerce_str_safe(raw.copy(), STRING_COLUMNS)
    df = numericize(df, COORD_COLUMNS)
    df["year"] = pd.array([parse_year(v) for v in df["reported_date"]], dtype="Int64")

    logger.info(
        "loaded %d homicide records from %s (%d without a year)",
        len(df),
        path,
        int(df["year"].isna().sum()),
    )
    return df


def extract_dimensions(records: pd.DataFrame) -> Dimensions:
    if records.empty:
        return Dimensions()
    years = sorted(int(y) for y in records["year"].dropna().unique())
    cities = sorted(str(c) for c in records["city"].dropna().unique())
    races = sorted(str(r) for r in records["victim_race"].dropna().unique())
    return Dimensions(years=years, cities=cities, races=races)


# ---------------- Public API ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(signature: Tuple[str, float]) -> Dict[str, object]:
    path = Path(signature[0])
    records = load_records(path)
    return {
        "path": str(path),
        "records": records,
        "dimensions": extract_dimensions(records),
    }


def load_dashboard_data(path: Optional[Path] = None) -> Dict[str, object]:
    path = Path(path) if path is not None else get_data_path()
    return _load_dashboard_data_cached(file_signature(path))
