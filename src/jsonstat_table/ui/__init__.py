"""
Streamlit viewer.

This package contains:
- app: pick a dataset, tune the layout options and download the table
"""
