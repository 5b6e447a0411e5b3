"""Core (pure) library layer.

This package is UI-agnostic and safe to import from:
- jobs handlers
- the CLI entrypoint
- tests

It does not import Streamlit or perform network I/O at import time.
"""
