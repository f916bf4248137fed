"""Aggregate statistics over a reconciled channel list.

Pure counting, no network access. The three status buckets (open, close,
connecting) exclude unknown: an item with no gateway linkage has
no connection to be up or down, so

    connected + disconnected + connecting <= total

with equality exactly when no item is unknown.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from inbox_shared.channel_models import (
    ChannelStats,
    ConnectionStatus,
    PlatformCategory,
    ReconciledItem,
)


def classify(
    items: Sequence[ReconciledItem],
    channel_source_count: int | None = None,
    instance_source_count: int | None = None,
) -> ChannelStats:
    """Count items by category and status.

    Source totals default to what the items imply: one channel per
    channel-origin item, one instance per item with gateway detail. Pass the
    real source list lengths when several channels share one instance.
    """
    categories = Counter(item.platform_category for item in items)
    statuses = Counter(item.connection_status for item in items)
    with_detail = sum(1 for item in items if item.gateway_detail is not None)

    if channel_source_count is None:
        channel_source_count = sum(1 for item in items if not item.gateway_origin)
    if instance_source_count is None:
        instance_source_count = with_detail

    return ChannelStats(
        total=len(items),
        digital_platform_count=categories[PlatformCategory.DIGITAL_PLATFORM],
        maturation_count=categories[PlatformCategory.MATURATION],
        connected_count=statuses[ConnectionStatus.OPEN],
        disconnected_count=statuses[ConnectionStatus.CLOSE],
        connecting_count=statuses[ConnectionStatus.CONNECTING],
        with_gateway_detail_count=with_detail,
        without_gateway_detail_count=len(items) - with_detail,
        channel_source_count=channel_source_count,
        instance_source_count=instance_source_count,
    )
