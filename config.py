"""
Configuration constants for the data source, report output and charts.
"""

from pathlib import Path

# ---------- Data source ----------
# NYPD Shooting Incident Data (Historic), NYC Open Data
DATA_URL = (
    "https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv?accessType=DOWNLOAD"
)
REQUEST_TIMEOUT = 60  # seconds

# ---------- Columns ----------
OCCUR_DATE = "OCCUR_DATE"
DATE_FORMAT = "%m/%d/%Y"

# Location descriptors removed by the cleaner
DROP_COLS = ["LOC_OF_OCCUR_DESC", "LOC_CLASSFCTN_DESC", "LOCATION_DESC", "Lon_Lat"]

# Nullable columns and the sentinel each group is filled with
TEXT_FILL_COLS = ["PERP_AGE_GROUP", "PERP_SEX", "PERP_RACE"]
TEXT_SENTINEL = "N/A"
NUMERIC_FILL_COLS = ["JURISDICTION_CODE", "Latitude", "Longitude"]
NUMERIC_SENTINEL = -9999

# Aggregation dimensions -> source column ("year" is derived from OCCUR_DATE)
DIMENSIONS = {
    "borough": "BORO",
    "year": OCCUR_DATE,
    "victim_race": "VIC_RACE",
    "perp_race": "PERP_RACE",
}

# ---------- Report ----------
REPORTS_DIR = Path("reports")
PREVIEW_ROWS = 10
PNG_DPI = 180

# ---------- Charts ----------
TEMPLATE = "plotly_white"
ORANGE = "#F4A261"
BLACK = "#000000"
