import html
from contextlib import contextmanager

import pandas as pd
import streamlit as st

from csv_chart.charts import build_overlay_chart
from csv_chart.data import EXPECTED_FORMAT
from csv_chart.options import normalize_options
from csv_chart.payload import compute_tables, export_csv
from csv_chart.session import DatasetCollection, UploadSession

NORMALIZATION_LABELS = {
    "Scale by max (zero stays at zero)": "max",
    "Min-max (0 to 1)": "minmax",
}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-subtitle {color: #6b7280;font-size: 1.0rem;margin-top: -10px;margin-bottom: 12px;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .file-item {border-left: 4px solid #e5e7eb;padding: 4px 10px;margin-bottom: 6px;background: #f9fafb;}
        .empty-state {text-align: center;color: #6b7280;padding: 40px 0;}
        .empty-state-icon {font-size: 3rem;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{html.escape(title)}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def init_session_state():
    if "upload_session" not in st.session_state:
        st.session_state["upload_session"] = UploadSession()


def clear_all():
    st.session_state["upload_session"].clear()


def render_files_list(collection: DatasetCollection):
    with card("Uploaded Files"):
        for item in collection.summary():
            note = f", {item['skipped_rows']} rows skipped" if item["skipped_rows"] else ""
            st.markdown(
                f"<div class='file-item' style='border-left-color: {item['color']}'>"
                f"{html.escape(item['label'])} ({item['points']} points{note})</div>",
                unsafe_allow_html=True,
            )


def render_raw_tables(collection: DatasetCollection):
    st.markdown("### Raw Data")
    for table in compute_tables(collection):
        display = pd.DataFrame(table["rows"], columns=["date", "value"])
        display.columns = table["headers"]
        with card(table["label"]):
            st.dataframe(display, use_container_width=True, hide_index=True, height=min(400, 38 + 35 * len(display)))


def render_empty_state():
    st.markdown(
        f"""
        <div class="empty-state">
          <div class="empty-state-icon">📊</div>
          <p>Upload a CSV file to see your data plotted on the chart.</p>
          <p>{EXPECTED_FORMAT}</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


# ---------- UI setup ----------
st.set_page_config(page_title="Simple CSV Chart", page_icon="📊", layout="wide")
inject_base_styles()
init_session_state()
st.title("Simple CSV Chart")
st.markdown("<div class='app-subtitle'>Upload CSV files to visualize correlations</div>", unsafe_allow_html=True)

with st.sidebar:
    st.markdown("### Chart settings")
    normalization_label = st.radio("Normalization", list(NORMALIZATION_LABELS), index=0)
    show_points = st.checkbox("Show points", value=True)
    point_radius = st.slider("Point radius", min_value=1, max_value=12, value=4, disabled=not show_points)

options = normalize_options(
    {
        "normalization": NORMALIZATION_LABELS[normalization_label],
        "show_points": show_points,
        "point_radius": point_radius,
    }
)

session: UploadSession = st.session_state["upload_session"]

upload_cols = st.columns([6, 1])
with upload_cols[0]:
    uploaded = st.file_uploader(
        "Choose CSV Files",
        type=["csv"],
        accept_multiple_files=True,
        key=session.widget_key,
        help=EXPECTED_FORMAT,
    )
with upload_cols[1]:
    st.button("Clear All", on_click=clear_all, use_container_width=True)

session.ingest(uploaded)

if session.last_error:
    st.error(session.last_error)

collection = session.collection
if collection.is_empty:
    render_empty_state()
    st.stop()

render_files_list(collection)

chart = build_overlay_chart(collection, options)
if chart is not None:
    with card("Chart"):
        st.altair_chart(chart, use_container_width=True)
        st.download_button(
            "Export CSV",
            data=export_csv(collection),
            file_name="aligned.csv",
            mime="text/csv",
            help="Original values aligned on a continuous daily date axis.",
        )

render_raw_tables(collection)
