"""Streamlit UI entrypoint.

Sets up the page and delegates each tab to a page module. Run with::

    streamlit run hfclient/ui/app.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Ensure repo root is on sys.path for imports.
repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

import streamlit as st

from hfclient.config import LOGGING
from hfclient.logger import setup_logging
from hfclient.ui.page_modules.about_page import render_about_tab
from hfclient.ui.page_modules.predict_page import render_predict_tab
from hfclient.ui.page_modules.retrain_page import render_retrain_tab
from hfclient.ui.state import get_prediction_session, get_retrain_session

setup_logging(LOGGING.level)

st.set_page_config(page_title="Heart Failure Prediction", layout="centered")
st.title("Heart Failure Prediction")

tab_about, tab_predict, tab_retrain = st.tabs(["About", "Predict", "Retrain"])

with tab_about:
    render_about_tab(st=st)

with tab_predict:
    render_predict_tab(st=st, asyncio=asyncio, session=get_prediction_session())

with tab_retrain:
    render_retrain_tab(st=st, asyncio=asyncio, session=get_retrain_session())
