"""Task queue name constants for each component.

Every component runs on its own Temporal worker with a dedicated task queue,
so the HTTP-bound Channel Access workers can scale independently of the
CPU-only Reconciliation Engine.

These constants are the single source of truth for queue names. Both the worker
runner (which starts workers listening on the right queue) and the workflow
definitions (which dispatch activities to the right queue) reference these.
"""

# Manager: runs workflows that orchestrate activities across other queues
CHANNEL_MANAGER_QUEUE = "channel-manager-queue"

# Engine: pure reconciliation and classification
RECONCILIATION_ENGINE_QUEUE = "reconciliation-engine-queue"

# Resource Access: Chatwoot, Evolution gateway, n8n webhook
CHANNEL_ACCESS_QUEUE = "channel-access-queue"
