# load_clean.py
# Usage:
#   from load_clean import load_and_clean
#   df = load_and_clean()                # fetches DATA_URL
#   df = clean_incidents(raw_df)         # clean an already-loaded table

import io
import logging

import pandas as pd
import requests

from config import (DATA_URL, REQUEST_TIMEOUT, OCCUR_DATE, DATE_FORMAT, DROP_COLS,
                    TEXT_FILL_COLS, TEXT_SENTINEL, NUMERIC_FILL_COLS, NUMERIC_SENTINEL)
from errors import FetchError, ParseError, SchemaError

logger = logging.getLogger(__name__)


def parse_incidents(text: str) -> pd.DataFrame:
    """
    Parse CSV text into a DataFrame. Numbers are inferred, dates stay text.
    Perpetrator fields are always read as text so values like "18" keep their form.
    """
    try:
        header = pd.read_csv(io.StringIO(text), nrows=0).columns
        dtype = {c: "string" for c in TEXT_FILL_COLS if c in header}
        df = pd.read_csv(io.StringIO(text), dtype=dtype)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ParseError(f"Malformed CSV content: {e}") from e
    return df


def fetch_incidents(url: str = DATA_URL, timeout: float = REQUEST_TIMEOUT) -> pd.DataFrame:
    """
    Download the incident CSV with a single GET and parse it.
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        code = e.response.status_code if e.response is not None else "unknown"
        raise FetchError(f"HTTP {code} while fetching {url}") from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f"Unable to reach {url}: {e}") from e

    # Decode as UTF-8, fall back to latin-1 if needed
    try:
        text = response.content.decode("utf-8")
    except UnicodeDecodeError:
        text = response.content.decode("latin1")

    df = parse_incidents(text)
    logger.info("Fetched %d rows x %d columns from %s", len(df), df.shape[1], url)
    return df


def _require(df: pd.DataFrame, cols, what: str):
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing {what}: {missing}. Found: {df.columns.tolist()}")


def clean_incidents(df: pd.DataFrame) -> pd.DataFrame:
    """
    Drop the location descriptors, parse OCCUR_DATE and fill the two nullable
    column groups with their sentinels. Returns a new frame with the same rows.
    """
    _require(df, DROP_COLS, "columns to drop")
    _require(df, [OCCUR_DATE] + TEXT_FILL_COLS + NUMERIC_FILL_COLS, "required columns")

    not_numeric = [c for c in NUMERIC_FILL_COLS if not pd.api.types.is_numeric_dtype(df[c])]
    if not_numeric:
        raise SchemaError(f"Expected numeric columns, got text in: {not_numeric}")

    out = df.drop(columns=DROP_COLS)

    # 'MM/DD/YYYY'; anything else becomes NaT
    out[OCCUR_DATE] = pd.to_datetime(out[OCCUR_DATE], format=DATE_FORMAT, errors="coerce")
    undated = int(out[OCCUR_DATE].isna().sum())
    if undated:
        logger.warning("%d rows have an unparseable %s", undated, OCCUR_DATE)

    # Nullable dtypes first so every cell is either a value or pd.NA
    for c in TEXT_FILL_COLS:
        col = out[c].astype("string")
        logger.info("Filling %d missing values in %s with %r", col.isna().sum(), c, TEXT_SENTINEL)
        out[c] = col.fillna(TEXT_SENTINEL)
    for c in NUMERIC_FILL_COLS:
        col = out[c].astype("Float64")
        logger.info("Filling %d missing values in %s with %r", col.isna().sum(), c, NUMERIC_SENTINEL)
        out[c] = col.fillna(NUMERIC_SENTINEL)

    return out


def count_missing(df: pd.DataFrame) -> int:
    """Null cells outside OCCUR_DATE (undated rows are counted separately)."""
    return int(df.drop(columns=[OCCUR_DATE], errors="ignore").isna().sum().sum())


def count_undated(df: pd.DataFrame) -> int:
    return int(df[OCCUR_DATE].isna().sum())


def load_and_clean(url: str = DATA_URL) -> pd.DataFrame:
    return clean_incidents(fetch_incidents(url))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    cleaned = load_and_clean()
    print(cleaned.head(10))
    print(f"\nRows: {len(cleaned)} | Missing cells: {count_missing(cleaned)} | "
          f"Undated rows: {count_undated(cleaned)}")
