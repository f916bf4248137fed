"""Verify task queue constants are consistent and unique."""

from inbox_shared.task_queues import (
    CHANNEL_ACCESS_QUEUE,
    CHANNEL_MANAGER_QUEUE,
    RECONCILIATION_ENGINE_QUEUE,
)

QUEUES = [CHANNEL_MANAGER_QUEUE, RECONCILIATION_ENGINE_QUEUE, CHANNEL_ACCESS_QUEUE]


def test_all_queues_are_unique() -> None:
    """No two components should share a queue — that would defeat isolation."""
    assert len(QUEUES) == len(set(QUEUES)), "Duplicate task queue names found"


def test_queue_naming_convention() -> None:
    """All queues should follow the pattern: <component>-queue."""
    for queue in QUEUES:
        assert queue.endswith("-queue"), f"Queue '{queue}' doesn't end with '-queue'"
