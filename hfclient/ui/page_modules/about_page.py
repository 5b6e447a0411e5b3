from __future__ import annotations

ABOUT_TEXT = (
    "Cardiovascular diseases are the leading cause of death globally, with heart "
    "failure being a common and serious condition. This application sends "
    "clinical data to a machine-learning service that estimates the risk of "
    "death from heart failure, and lets you retrain that service on new patient data."
)

FEATURES = (
    ("Early Detection", "Identify potential risks before they become critical."),
    ("Data-Driven Insights", "Utilize machine learning for accurate predictions."),
)


def render_about_tab(*, st) -> None:
    st.subheader("About Heart Failure Prediction")
    st.write(ABOUT_TEXT)

    cols = st.columns(len(FEATURES))
    for col, (title, text) in zip(cols, FEATURES):
        col.markdown(f"**{title}**")
        col.caption(text)
