"""Unified worker runner for the channel platform's Temporal components.

Every worker process runs the same image with a different CLI argument to
select which component's workflows/activities it exposes.
"""
