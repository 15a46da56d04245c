# analysis.py
# Grouped incident counts and the two OLS trend models:
# 1) count ~ year
# 2) count ~ year + C(borough)

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from config import DIMENSIONS
from errors import SchemaError, ModelFitError

logger = logging.getLogger(__name__)

TREND_FORMULA = "count ~ year"
BOROUGH_FORMULA = "count ~ year + C(borough)"


# ---------- Aggregation ----------
def _dimension(df: pd.DataFrame, name: str) -> pd.Series:
    col = DIMENSIONS.get(name, name)
    if col not in df.columns:
        raise SchemaError(f"Cannot group by {name!r}: column {col!r} not found", stage="aggregate")
    if name == "year":
        if not pd.api.types.is_datetime64_any_dtype(df[col]):
            raise SchemaError(f"Cannot derive year: {col!r} is not a date column", stage="aggregate")
        return df[col].dt.year
    return df[col]


def count_by(df: pd.DataFrame, *dimensions: str) -> pd.DataFrame:
    """
    Count rows per distinct combination of one or two dimensions.

    Dimensions are the keys of ``config.DIMENSIONS`` ("borough", "year",
    "victim_race", "perp_race") or raw column names. Rows with a null key
    (including an unparsed date for "year") are left out and logged.
    """
    if not 1 <= len(dimensions) <= 2 or len(set(dimensions)) != len(dimensions):
        raise ValueError(f"Expected one or two distinct dimensions, got {dimensions}")

    keys = pd.DataFrame({name: _dimension(df, name) for name in dimensions})
    for name in dimensions:
        missing = int(keys[name].isna().sum())
        if missing:
            what = "undated" if name == "year" else f"null-{name}"
            logger.warning("Excluding %d %s rows from %s counts", missing, what, name)
    keys = keys.dropna()
    if "year" in keys.columns:
        keys["year"] = keys["year"].astype(int)

    names = list(dimensions)
    return (keys.groupby(names)
                .size()
                .reset_index(name="count")
                .sort_values(names)
                .reset_index(drop=True))


# ---------- Models ----------
@dataclass
class FitSummary:
    formula: str
    coefficients: pd.DataFrame
    r_squared: float
    adj_r_squared: float
    f_statistic: float
    f_pvalue: float
    nobs: int
    text: str


def _fit_ols(formula: str, table: pd.DataFrame, required, n_params: int):
    missing = [c for c in required if c not in table.columns]
    if missing:
        raise SchemaError(f"Count table lacks {missing} for {formula!r}", stage="model")
    if len(table) < n_params:
        raise ModelFitError(
            f"{formula!r} needs at least {n_params} rows, got {len(table)}")
    try:
        result = smf.ols(formula, data=table).fit()
    except (ValueError, np.linalg.LinAlgError) as e:
        raise ModelFitError(f"OLS fit failed for {formula!r}: {e}") from e
    exog = result.model.exog
    if np.linalg.matrix_rank(exog) < exog.shape[1]:
        raise ModelFitError(
            f"{formula!r} is not identifiable: design matrix has rank "
            f"{np.linalg.matrix_rank(exog)} for {exog.shape[1]} terms")
    if not np.all(np.isfinite(result.params)):
        raise ModelFitError(f"Non-finite estimates for {formula!r}")
    logger.info("Fitted %s on %d rows (R^2=%.3f)", formula, len(table), result.rsquared)
    return result


def fit_trend(year_counts: pd.DataFrame):
    """OLS of count on year over a year -> count table."""
    return _fit_ols(TREND_FORMULA, year_counts, ["year", "count"], n_params=2)


def fit_trend_by_borough(year_borough_counts: pd.DataFrame):
    """OLS of count on year plus a reference-coded borough term."""
    n_boroughs = year_borough_counts["borough"].nunique() if "borough" in year_borough_counts else 1
    return _fit_ols(BOROUGH_FORMULA, year_borough_counts, ["year", "borough", "count"],
                    n_params=1 + n_boroughs)


def summarize_fit(result) -> FitSummary:
    coefs = pd.DataFrame({
        "estimate": result.params,
        "std_err": result.bse,
        "t": result.tvalues,
        "p_value": result.pvalues,
    })
    coefs.index.name = "term"
    return FitSummary(
        formula=result.model.formula,
        coefficients=coefs,
        r_squared=float(result.rsquared),
        adj_r_squared=float(result.rsquared_adj),
        f_statistic=float(result.fvalue),
        f_pvalue=float(result.f_pvalue),
        nobs=int(result.nobs),
        text=result.summary().as_text(),
    )


def fitted_line(result, years) -> pd.DataFrame:
    """Predictions of a ``count ~ year`` fit at the given years."""
    frame = pd.DataFrame({"year": sorted(years)})
    frame["fitted"] = np.asarray(result.predict(frame))
    return frame


if __name__ == "__main__":
    from load_clean import load_and_clean

    logging.basicConfig(level=logging.INFO)
    df = load_and_clean()
    for result in (fit_trend(count_by(df, "year")),
                   fit_trend_by_borough(count_by(df, "year", "borough"))):
        print(summarize_fit(result).text)
