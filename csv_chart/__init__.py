"""Core (UI-agnostic) CSV chart logic.

This package contains:
- CSV ingestion and validation (text -> pandas)
- date union / densification and per-series normalization
- the uploaded-dataset collection shared by the Streamlit page and the API
- chart helpers (Altair -> Vega-Lite spec dict) and JSON payloads
"""
