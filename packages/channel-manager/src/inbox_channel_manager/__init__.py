"""Channel Manager: Temporal Workflow definitions.

Orchestrates the channel platform through four workflows:
- SyncChannelsWorkflow: Channel Access (both lists, concurrently) → Reconciliation Engine
- DiscoverInstancesWorkflow: Channel Access → Reconciliation Engine (name-set diff)
- ConnectChannelWorkflow: one pairing request through Channel Access
- DeleteMaturationInstanceWorkflow: one gateway deletion through Channel Access

client.py holds the caller-side helpers that start them with the right ids
and queue.
"""
