"""
Tests for homicides/data.py

Verifies CSV loading (year derivation, null handling, failures), dimension
extraction and the cached dashboard bundle.
"""
import pandas as pd
import pytest

from homicides.data import (
    DATA_PATH_ENV,
    DatasetLoadError,
    extract_dimensions,
    get_data_path,
    load_dashboard_data,
    load_records,
    parse_year,
)

CSV = """uid,reported_date,victim_last,victim_race,victim_age,victim_sex,city,state,lat,lon,disposition
Alb-000001,20100504,GARCIA,Hispanic,78,Male,Albuquerque,NM,35.0957885,-106.5385549,Closed without arrest
Alb-000002,20100216,MONTOYA,Hispanic,17,Male,Albuquerque,NM,35.0568104,-106.7151528,Closed by arrest
Alb-000003,201511105,SATTERFIELD,White,15,Female,Albuquerque,NM,,,Closed without arrest
Atl-000001,unknown,SMITH,Black,30,Unknown,Atlanta,GA,33.7,-84.4,Open/No arrest
Atl-000002,20140101,JONES, Black ,41,,Atlanta,GA,NA,-84.3,Open/No arrest
"""


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "homicide-data.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


# ── parse_year ────────────────────────────────────────────────────────────────

class TestParseYear:
    def test_leading_four_digits(self):
        assert parse_year("20100504") == 2010

    def test_overlong_date_still_uses_prefix(self):
        assert parse_year("201511105") == 2015

    def test_numeric_input(self):
        assert parse_year(20170112) == 2017

    def test_zero_year_is_missing(self):
        assert parse_year("00000101") is None

    def test_unparseable(self):
        assert parse_year("unknown") is None
        assert parse_year("20a1") is None
        assert parse_year("") is None

    def test_missing(self):
        assert parse_year(None) is None
        assert parse_year(pd.NA) is None


# ── load_records ──────────────────────────────────────────────────────────────

class TestLoadRecords:
    def test_derives_year(self, csv_path):
        df = load_records(csv_path)
        assert len(df) == 5
        assert df["year"].tolist()[:3] == [2010, 2010, 2015]
        assert pd.isna(df["year"].iloc[3])

    def test_blank_and_na_coordinates_are_missing(self, csv_path):
        df = load_records(csv_path)
        assert df["lat"].isna().tolist() == [False, False, True, False, True]
        assert df["lon"].isna().tolist() == [False, False, True, False, False]
        assert df["lat"].iloc[0] == pytest.approx(35.0957885)

    def test_strings_are_stripped_and_blanks_are_missing(self, csv_path):
        df = load_records(csv_path)
        assert df["victim_race"].iloc[4] == "Black"
        assert pd.isna(df["victim_sex"].iloc[4])

    def test_latin1_fallback(self, tmp_path):
        path = tmp_path / "latin.csv"
        path.write_bytes(
            "city,victim_race,victim_sex,reported_date,lat,lon\nSão Paulo,White,Male,20150101,1.0,2.0\n".encode("latin-1")
        )
        df = load_records(path)
        assert df["city"].iloc[0] == "São Paulo"

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetLoadError, match="not found"):
            load_records(tmp_path / "nope.csv")

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("city,victim_race\nA,White\n", encoding="utf-8")
        with pytest.raises(DatasetLoadError, match="victim_sex"):
            load_records(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(DatasetLoadError):
            load_records(path)


# ── extract_dimensions ────────────────────────────────────────────────────────

class TestExtractDimensions:
    def test_sorted_distinct_without_nulls(self, csv_path):
        dims = extract_dimensions(load_records(csv_path))
        assert dims.years == [2010, 2014, 2015]
        assert dims.cities == ["Albuquerque", "Atlanta"]
        assert dims.races == ["Black", "Hispanic", "White"]

    def test_years_are_numeric_order(self, records):
        dims = extract_dimensions(records)
        assert dims.years == sorted(dims.years)
        assert all(isinstance(y, int) for y in dims.years)

    def test_empty_input(self):
        empty = pd.DataFrame(columns=["city", "victim_race", "victim_sex", "year", "lat", "lon"])
        dims = extract_dimensions(empty)
        assert dims.years == [] and dims.cities == [] and dims.races == []


# ── load_dashboard_data ───────────────────────────────────────────────────────

class TestLoadDashboardData:
    def test_missing_file_message_matches_loader(self, tmp_path):
        missing = tmp_path / "missing.csv"
        with pytest.raises(DatasetLoadError, match="not found") as direct:
            load_records(missing)
        with pytest.raises(DatasetLoadError, match="not found") as bundled:
            load_dashboard_data(missing)
        assert str(direct.value) == str(bundled.value)

    def test_env_override(self, csv_path, monkeypatch):
        monkeypatch.setenv(DATA_PATH_ENV, str(csv_path))
        assert get_data_path() == csv_path
        ctx = load_dashboard_data()
        assert ctx["path"] == str(csv_path)
        assert ctx["dimensions"].cities == ["Albuquerque", "Atlanta"]

    def test_cached_between_calls(self, csv_path):
        first = load_dashboard_data(csv_path)
        second = load_dashboard_data(csv_path)
        assert first["records"] is second["records"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetLoadError):
            load_dashboard_data(tmp_path / "missing.csv")
