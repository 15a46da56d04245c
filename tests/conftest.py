"""
Shared fixtures: small raw incident tables with the source dataset's headers.
"""

import matplotlib
import pandas as pd
import pytest

matplotlib.use("Agg")

BOROUGHS = ["BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND"]

DEFAULTS = {
    "OCCUR_DATE": "01/15/2019",
    "OCCUR_TIME": "12:00:00",
    "BORO": "BRONX",
    "LOC_OF_OCCUR_DESC": None,
    "PRECINCT": 40,
    "JURISDICTION_CODE": 0.0,
    "LOC_CLASSFCTN_DESC": None,
    "LOCATION_DESC": None,
    "STATISTICAL_MURDER_FLAG": False,
    "PERP_AGE_GROUP": None,
    "PERP_SEX": None,
    "PERP_RACE": None,
    "VIC_AGE_GROUP": "25-44",
    "VIC_SEX": "M",
    "VIC_RACE": "BLACK",
    "X_COORD_CD": 1009000.0,
    "Y_COORD_CD": 234000.0,
    "Latitude": 40.8,
    "Longitude": -73.9,
    "Lon_Lat": "POINT (-73.9 40.8)",
}


def make_raw(records):
    """Build a raw table; keys not given in a record take DEFAULTS."""
    rows = []
    for i, rec in enumerate(records):
        row = {"INCIDENT_KEY": 100000 + i, **DEFAULTS, **rec}
        rows.append(row)
    df = pd.DataFrame(rows)
    for c in ["JURISDICTION_CODE", "Latitude", "Longitude"]:
        df[c] = df[c].astype(float)
    return df


@pytest.fixture
def raw_three():
    """Two Bronx incidents and one Brooklyn incident, two with unknown perpetrator."""
    return make_raw([
        {"BORO": "BRONX", "PERP_RACE": None, "Latitude": None, "OCCUR_DATE": "01/01/2019"},
        {"BORO": "BRONX", "PERP_RACE": "BLACK", "Latitude": 40.8, "OCCUR_DATE": "06/01/2019"},
        {"BORO": "BROOKLYN", "PERP_RACE": None, "Latitude": None, "OCCUR_DATE": "01/01/2020"},
    ])


@pytest.fixture
def raw_yearly():
    """Ten years of incidents across all five boroughs, with a downward drift."""
    records = []
    for i, boro in enumerate(BOROUGHS):
        for year in range(2010, 2020):
            n = 2 + (5 - i) + (2019 - year) // 2 + (year + i) % 3
            records += [{"OCCUR_DATE": f"06/15/{year}", "BORO": boro,
                         "VIC_RACE": "WHITE HISPANIC" if year % 2 else "BLACK"}
                        for _ in range(n)]
    return make_raw(records)
