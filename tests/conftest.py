"""
Shared fixtures: small in-memory record sets built the same way the CSV
loader builds them (nullable string columns, Int64 year, float coords).
"""
import pandas as pd
import pytest

from homicides.data import extract_dimensions


def make_records(rows):
    df = pd.DataFrame(rows, columns=["city", "victim_race", "victim_sex", "year", "lat", "lon"])
    for col in ["city", "victim_race", "victim_sex"]:
        df[col] = df[col].astype("string")
    df["year"] = df["year"].astype("Int64")
    df["lat"] = pd.to_numeric(df["lat"], errors="coerce")
    df["lon"] = pd.to_numeric(df["lon"], errors="coerce")
    return df


@pytest.fixture
def scenario_records():
    return make_records([
        ("A", "White", "M", 2019, 35.1, -106.6),
        ("A", "White", "M", 2019, 35.2, -106.5),
        ("A", "White", "F", 2020, None, -106.4),
    ])


@pytest.fixture
def records():
    return make_records([
        ("Albuquerque", "White", "Male", 2010, 35.08, -106.62),
        ("Albuquerque", "White", "Female", 2010, 35.10, -106.55),
        ("Albuquerque", "White", "Female", 2011, None, -106.60),
        ("Albuquerque", "Hispanic", "Male", 2011, 35.05, None),
        ("Albuquerque", "Hispanic", "Male", 2012, 35.12, -106.70),
        ("Albuquerque", "Black", None, 2012, 35.11, -106.65),
        ("Albuquerque", "White", "Male", None, 35.09, -106.61),
        ("Atlanta", "Black", "Male", 2013, 33.75, -84.39),
        ("Atlanta", "Black", "Female", 2013, 33.76, -84.40),
        ("Atlanta", "Black", "Male", 2014, 33.70, -84.41),
        ("Atlanta", "Hispanic", "Male", 2014, None, None),
        ("Boston", "White", "Male", None, 42.36, -71.06),
    ])


@pytest.fixture
def dims(records):
    return extract_dimensions(records)
