"""Tests for the Reconciliation Engine activities.

These are pure: the request carries both source lists, so no mocking is needed.
"""

from inbox_reconciliation_engine.activities import (
    partition_channel_names,
    reconcile_channel_lists,
)
from inbox_shared.channel_models import (
    ChannelRecord,
    InstanceRecord,
    PlatformCategory,
    ReconcileRequest,
    SourceFailure,
)


def _request(**kwargs) -> ReconcileRequest:
    kwargs.setdefault("channels", [ChannelRecord(id=1, name="Vendas", account_id=1)])
    return ReconcileRequest(
        instances=[
            InstanceRecord(name="vendas", connection_status="open"),
            InstanceRecord(name="Teste"),
        ],
        **kwargs,
    )


async def test_reconcile_channel_lists() -> None:
    result = await reconcile_channel_lists(_request())

    assert result.success
    assert [i.platform_category for i in result.items] == [
        PlatformCategory.DIGITAL_PLATFORM,
        PlatformCategory.MATURATION,
    ]
    assert result.stats.maturation_count == 1


async def test_reconcile_carries_source_failures() -> None:
    failure = SourceFailure(source="channels", message="Channel fetch failed: 401")
    result = await reconcile_channel_lists(
        ReconcileRequest(instances=[InstanceRecord(name="Teste")], source_failures=[failure])
    )

    assert result.success
    assert result.partial_failure
    assert result.source_failures == [failure]


async def test_partition_channel_names() -> None:
    report = await partition_channel_names(
        _request(channels=[ChannelRecord(id=1, name="Teste", account_id=1)])
    )

    assert report.already_linked == ["Teste"]
    assert report.newly_discovered == ["vendas"]
