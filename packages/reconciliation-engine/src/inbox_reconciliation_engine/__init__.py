"""Reconciliation Engine: merges Chatwoot channels with gateway instances.

Entry points for callers:
  - reconcile(channels, instances)   pure merge into ReconciledItem list
  - classify(items)                  pure aggregate stats
  - SyncOrchestrator.sync()          name-set diff over a fresh fetch
  - ConnectionWorkflow.request_connection(item)
  - ConnectionWorkflow.delete_maturation_instance(item)
"""

from inbox_reconciliation_engine.classifier import classify
from inbox_reconciliation_engine.connection import ConnectionWorkflow
from inbox_reconciliation_engine.matcher import find_matching_instance, reconcile
from inbox_reconciliation_engine.normalize import names_match, normalize_name
from inbox_reconciliation_engine.sync import SyncOrchestrator, partition_names

__all__ = [
    "ConnectionWorkflow",
    "SyncOrchestrator",
    "classify",
    "find_matching_instance",
    "names_match",
    "normalize_name",
    "partition_names",
    "reconcile",
]
