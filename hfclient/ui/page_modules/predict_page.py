from __future__ import annotations

from typing import Any

from hfclient.core.contracts import EJECTION_FRACTION_MAX, EJECTION_FRACTION_MIN
from hfclient.jobs.types import JobStatus
from hfclient.ui.formatting import format_prediction, yes_no

TEXT_INPUTS: tuple[tuple[str, str], ...] = (
    ("age", "Age"),
    ("creatinine_phosphokinase", "Creatinine Phosphokinase"),
    ("platelets", "Platelets"),
    ("serum_creatinine", "Serum Creatinine"),
    ("serum_sodium", "Serum Sodium"),
    ("time", "Time"),
)

FLAG_INPUTS: tuple[tuple[str, str], ...] = (
    ("sex", "Male"),
    ("anaemia", "Anaemia"),
    ("diabetes", "Diabetes"),
    ("high_blood_pressure", "High Blood Pressure"),
    ("smoking", "Smoking"),
)

_KEY_PREFIX = "pred_"


def _widget_key(name: str) -> str:
    return f"{_KEY_PREFIX}{name}"


def _widget_keys() -> list[str]:
    names = [n for n, _ in TEXT_INPUTS] + [n for n, _ in FLAG_INPUTS] + ["ejection_fraction"]
    return [_widget_key(n) for n in names]


def _apply_form_values(session, values: dict[str, Any]) -> None:
    """Push widget values into the session, touching only fields that changed."""
    record = session.record
    for name, value in values.items():
        if name == "ejection_fraction":
            if int(value) != record.ejection_fraction:
                session.set_ejection_fraction(value)
        elif getattr(record, name) != value:
            session.set_field(name, value)


def _status_messages(status: JobStatus) -> list[tuple[str, str]]:
    """Return (streamlit method, text) pairs describing a finished run."""
    if status.state == "SUCCEEDED" and status.result is not None:
        return [("success", "Prediction Result"), ("info", format_prediction(status.result))]
    if status.state == "FAILED":
        return [("error", status.error or "Failed to get prediction. Please try again.")]
    return []


def render_predict_tab(*, st, asyncio, session) -> None:
    st.subheader("Heart Failure Prediction")
    st.caption("Enter patient data to predict heart failure risk")

    record = session.record
    values: dict[str, Any] = {}

    c_left, c_right = st.columns(2)
    for i, (name, label) in enumerate(TEXT_INPUTS):
        col = c_left if i % 2 == 0 else c_right
        values[name] = col.text_input(label, value=getattr(record, name), key=_widget_key(name))

    flag_cols = st.columns(len(FLAG_INPUTS))
    for col, (name, label) in zip(flag_cols, FLAG_INPUTS):
        checked = col.toggle(label, value=bool(getattr(record, name)), key=_widget_key(name))
        values[name] = 1 if checked else 0
        col.caption(f"{label}: {yes_no(values[name])}")

    values["ejection_fraction"] = st.slider(
        "Ejection Fraction",
        min_value=EJECTION_FRACTION_MIN,
        max_value=EJECTION_FRACTION_MAX,
        value=record.ejection_fraction,
        key=_widget_key("ejection_fraction"),
    )

    _apply_form_values(session, values)

    if st.button("Predict", type="primary", disabled=session.status.is_running):
        with st.spinner("Making prediction..."):
            asyncio.run(session.predict())

    for method, text in _status_messages(session.status):
        getattr(st, method)(text)

    if session.status.is_terminal:
        c_clear, c_new = st.columns(2)
        if c_clear.button("Clear", key="pred_clear"):
            session.dismiss()
            st.rerun()
        if c_new.button("New patient", key="pred_new"):
            session.reset()
            for key in _widget_keys():
                st.session_state.pop(key, None)
            st.rerun()
