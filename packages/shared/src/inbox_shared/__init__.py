"""Shared infrastructure for the Inbox Hub channel platform.

Provides the Temporal client connection factory, task queue constants,
service configuration, and the Pydantic boundary models used across all
components.
"""
