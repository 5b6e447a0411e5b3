from __future__ import annotations

from typing import Any

from hfclient.core.contracts import RetrainJob
from hfclient.ui.formatting import format_progress, format_retrain_result

DESCRIPTION = (
    "Improve the heart failure prediction model by uploading new patient data. "
    "The CSV must contain the twelve clinical columns plus DEATH_EVENT."
)


def _is_new_upload(job: RetrainJob, uploaded: Any) -> bool:
    """True when the uploader holds a file different from the selected one."""
    if uploaded is None:
        return False
    current = job.selected_file
    if current is None:
        return True
    return current.name != uploaded.name or current.size != uploaded.size


def _result_lines(job: RetrainJob) -> list[str]:
    if job.status != "succeeded" or job.result is None:
        return []
    accuracy, loss = format_retrain_result(job.result)
    return [f"Model Accuracy: {accuracy}", f"Loss: {loss}"]


def render_retrain_tab(*, st, asyncio, session) -> None:
    st.subheader("Retrain AI Model")
    st.write(DESCRIPTION)

    job = session.job
    uploaded = st.file_uploader("Choose file to upload", type=["csv"], key="retrain_file")
    if _is_new_upload(job, uploaded):
        session.select_file(uploaded)
    if job.selected_file is not None:
        st.caption(f"Selected: {job.selected_file.name} ({job.selected_file.size} bytes)")

    bar = st.progress(job.progress_percent, text=format_progress(job.progress_percent))
    unsubscribe = session.subscribe(
        lambda j: bar.progress(j.progress_percent, text=format_progress(j.progress_percent))
    )
    try:
        if st.button("Start Retraining", type="primary", disabled=job.status == "uploading"):
            asyncio.run(session.retrain())
    finally:
        unsubscribe()

    for line in _result_lines(job):
        st.success(line)
    if job.status == "failed":
        st.error(job.error or "Failed to retrain model. Please try again.")

    if job.status in {"succeeded", "failed"} and st.button("Dismiss", key="retrain_dismiss"):
        session.dismiss()
        st.rerun()
