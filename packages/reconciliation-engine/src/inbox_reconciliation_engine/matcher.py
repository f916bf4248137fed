"""Reconciliation — pair registered channels with gateway instances.

An instance matches a channel when either key normalizes to the channel name:

  1. the instance's own gateway name, or
  2. the channel name the gateway believes it is linked to
     (linked_channel_info.linked_channel_name).

The second key matters because gateway-side display names drift from the
canonical Chatwoot name while the linkage metadata stays authoritative.

Output order is fixed: one item per channel in channel order, then one
maturation item per unconsumed instance in instance order. Maturation items get
keys -1, -2, ... which are unique within this call and meaningless outside it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from inbox_shared.channel_models import (
    GATEWAY_CHANNEL_TYPE,
    ChannelRecord,
    ConnectionStatus,
    GatewayDetail,
    InstanceRecord,
    PlatformCategory,
    ReconciledItem,
)

from inbox_reconciliation_engine.normalize import normalize_name

logger = logging.getLogger(__name__)


def _instance_keys(instance: InstanceRecord) -> frozenset[str]:
    keys = {normalize_name(instance.name), normalize_name(instance.linked_channel_name)}
    keys.discard("")
    return frozenset(keys)


def _candidate_indexes(
    channel: ChannelRecord, instance_keys: Sequence[frozenset[str]]
) -> list[int]:
    key = normalize_name(channel.name)
    if not key:
        return []
    return [index for index, keys in enumerate(instance_keys) if key in keys]


def find_matching_instance(
    channel: ChannelRecord, instances: Sequence[InstanceRecord]
) -> InstanceRecord | None:
    """Return the first instance whose name or linked alias matches the channel."""
    indexes = _candidate_indexes(channel, [_instance_keys(i) for i in instances])
    return instances[indexes[0]] if indexes else None


def build_gateway_detail(instance: InstanceRecord) -> GatewayDetail:
    linked = instance.linked_channel_info
    return GatewayDetail(
        instance_name=instance.name,
        connection_status=ConnectionStatus.from_gateway(instance.connection_status),
        owner_identifier=instance.owner_identifier,
        phone_number=instance.phone_number,
        profile_display_name=instance.profile_display_name,
        integration_kind=instance.integration_kind,
        linked_enabled=linked.enabled if linked is not None else False,
        linked_channel_name=instance.linked_channel_name,
        message_count=instance.message_count,
        contact_count=instance.contact_count,
        created_at=instance.created_at,
        updated_at=instance.updated_at,
    )


def reconcile(
    channels: Sequence[ChannelRecord],
    instances: Sequence[InstanceRecord],
) -> list[ReconciledItem]:
    """Merge both source lists into one list of ReconciledItem.

    Every channel yields exactly one digital_platform item (status unknown when
    nothing matched). Every instance that was not selected as some channel's
    match yields exactly one maturation item. Pure: no I/O and no state.
    """
    instance_keys = [_instance_keys(i) for i in instances]
    consumed: set[int] = set()
    items: list[ReconciledItem] = []

    for channel in channels:
        candidates = _candidate_indexes(channel, instance_keys)
        if len(candidates) > 1:
            # Two gateway instances claiming one channel is an operational
            # problem; the losers stay visible as maturation items.
            logger.warning(
                f"Channel '{channel.name}' (id={channel.id}) matches "
                f"{len(candidates)} gateway instances: "
                f"{[instances[i].name for i in candidates]}; using the first"
            )

        if not candidates:
            items.append(
                ReconciledItem(
                    identity_key=channel.id,
                    display_name=channel.name,
                    channel_type=channel.channel_type,
                    platform_category=PlatformCategory.DIGITAL_PLATFORM,
                )
            )
            continue

        match_index = candidates[0]
        if match_index in consumed:
            logger.warning(
                f"Gateway instance '{instances[match_index].name}' already backs another "
                f"channel; channel '{channel.name}' (id={channel.id}) shares it"
            )
        consumed.add(match_index)
        detail = build_gateway_detail(instances[match_index])
        items.append(
            ReconciledItem(
                identity_key=channel.id,
                display_name=channel.name,
                channel_type=channel.channel_type,
                platform_category=PlatformCategory.DIGITAL_PLATFORM,
                connection_status=detail.connection_status,
                gateway_detail=detail,
            )
        )

    synthetic_key = 0
    for index, instance in enumerate(instances):
        if index in consumed:
            continue
        synthetic_key -= 1
        detail = build_gateway_detail(instance)
        items.append(
            ReconciledItem(
                identity_key=synthetic_key,
                display_name=instance.name,
                channel_type=GATEWAY_CHANNEL_TYPE,
                platform_category=PlatformCategory.MATURATION,
                gateway_origin=True,
                connection_status=detail.connection_status,
                gateway_detail=detail,
            )
        )

    logger.debug(
        f"Reconciled {len(channels)} channels and {len(instances)} instances "
        f"into {len(items)} items ({len(instances) - len(consumed)} maturation)"
    )
    return items
