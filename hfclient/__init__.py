"""Heart-failure prediction client.

Collects patient data, validates it, submits it to a remote prediction /
retraining service and tracks each submission through a small job state
machine so a UI (Streamlit or CLI) can render progress and outcomes.

Packages:
- core: contracts, validation and the error taxonomy (no UI imports)
- jobs: single-flight async job runner and the predict/retrain handlers
- ui: Streamlit presentation layer
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
