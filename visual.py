# visual.py
# Streamlit page for the NYPD shooting incident report
# Run:  streamlit run visual.py

import logging

import streamlit as st

from charts import to_plotly
from errors import ReportError
from run import build_report

logging.basicConfig(level=logging.INFO)

# ---------------- Config ----------------
st.set_page_config(page_title="NYPD Shooting Incidents", layout="wide")

st.markdown("""
<style>
.kpi-card { background:#fff; border:1px solid #eee; border-radius:16px; padding:16px 18px; box-shadow:0 2px 12px rgba(0,0,0,.06); }
.kpi-label { font-size:.85rem; color:#666; margin-bottom:6px; }
.kpi-value { font-size:1.6rem; font-weight:700; margin-bottom:0; }
.kpi-sub { font-size:.8rem; color:#888; }
</style>
""", unsafe_allow_html=True)


def kpi(col, label: str, value, sub: str):
    col.markdown(f'<div class="kpi-card"><div class="kpi-label">{label}</div>'
                 f'<div class="kpi-value">{value}</div><div class="kpi-sub">{sub}</div></div>',
                 unsafe_allow_html=True)


# -------------- Build report --------------
try:
    report = build_report()
except ReportError as e:
    st.error(f"Report generation halted at stage '{e.stage}': {e}")
    st.stop()

# -------------- Header --------------
st.title("NYPD Shooting Incidents")
st.caption("Source: NYC Open Data, NYPD Shooting Incident Data (Historic).")

k1, k2, k3 = st.columns(3)
kpi(k1, "Incidents", f"{report.rows:,}", "Rows after cleaning")
kpi(k2, "Missing cells", report.missing_cells, "Expected 0")
kpi(k3, "Undated rows", report.undated_rows, "Left out of yearly counts")

# -------------- Cleaned data --------------
st.subheader("Cleaned data")
st.dataframe(report.preview, use_container_width=True)

st.markdown("---")

# -------------- Breakdowns --------------
for chart in report.charts.values():
    st.plotly_chart(to_plotly(chart), use_container_width=True)

st.markdown("---")

# -------------- Trend models --------------
st.subheader("Trend Models")
for fit in report.fits.values():
    st.markdown(f"**`{fit.formula}`**: R² = {fit.r_squared:.3f}, "
                f"F = {fit.f_statistic:.2f} (p = {fit.f_pvalue:.3g}), n = {fit.nobs}")
    st.dataframe(fit.coefficients, use_container_width=True)
    with st.expander("Full OLS summary"):
        st.text(fit.text)

st.plotly_chart(to_plotly(report.overlay), use_container_width=True)
st.caption("Points are yearly incident counts; the line is the `count ~ year` fit.")
