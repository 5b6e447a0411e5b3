"""Single-flight async job runner.

Purpose:
- Run one predict or retrain submission at a time per action.
- Expose state and progress snapshots to the presentation layer.

Handlers under ``jobs.handlers`` hold the per-action logic; the runner only
knows about states, progress and the error taxonomy.
"""
