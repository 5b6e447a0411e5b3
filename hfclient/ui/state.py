"""Session-state access for the Streamlit app.

Each browser session gets its own ``PredictionSession`` and
``RetrainSession``; nothing is shared between sessions or persisted.
"""

from __future__ import annotations

import streamlit as st

from hfclient.config import load_config
from hfclient.session import PredictionSession, RetrainSession

_PREDICTION_KEY = "prediction_session"
_RETRAIN_KEY = "retrain_session"


def get_prediction_session() -> PredictionSession:
    if _PREDICTION_KEY not in st.session_state:
        st.session_state[_PREDICTION_KEY] = PredictionSession(config=load_config())
    return st.session_state[_PREDICTION_KEY]


def get_retrain_session() -> RetrainSession:
    if _RETRAIN_KEY not in st.session_state:
        st.session_state[_RETRAIN_KEY] = RetrainSession(config=load_config())
    return st.session_state[_RETRAIN_KEY]
