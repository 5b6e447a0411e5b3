"""Thin UI layer.

This package contains the Streamlit pages that:
- collect patient inputs and the retraining dataset
- start predict/retrain submissions through the sessions
- render progress and results

Business logic lives in hfclient.core, hfclient.jobs and hfclient.session.
"""
