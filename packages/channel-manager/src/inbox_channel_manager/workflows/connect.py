"""ConnectChannelWorkflow: one pairing request through Channel Access.

Runs on channel-manager-queue and dispatches a single request_pairing_code
activity to channel-access-queue. The answer is folded into the pairing state
machine (awaiting_scan | failed | timed_out) by the reconciliation engine's
outcome_from_pairing, so the in-process and the Temporal paths agree.

Start it with connect_workflow_id(instance_name) as the workflow id. Temporal
refuses a second running workflow with the same id, which keeps at most one
pairing request in flight per instance across every caller.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.exceptions import ActivityError, ApplicationError
from temporalio.exceptions import TimeoutError as ActivityTimeoutError

with workflow.unsafe.imports_passed_through():
    from inbox_channel_access.activities import request_pairing_code
    from inbox_reconciliation_engine.connection import (
        outcome_from_pairing,
        require_gateway_detail,
    )
    from inbox_reconciliation_engine.normalize import normalize_name
    from inbox_shared.access_models import InstanceActionRequest, PairingResult
    from inbox_shared.connection_models import ConnectChannelRequest, ConnectionOutcome
    from inbox_shared.models import ErrorKind, PreconditionViolation
    from inbox_shared.task_queues import CHANNEL_ACCESS_QUEUE

    from inbox_channel_manager.workflows import SINGLE_ATTEMPT

# Headroom over the webhook budget for worker pickup and connector setup.
DISPATCH_MARGIN = timedelta(seconds=5)


def connect_workflow_id(instance_name: str) -> str:
    return f"connect-{normalize_name(instance_name) or instance_name}"


@workflow.defn
class ConnectChannelWorkflow:
    """Requests a pairing QR code for one reconciled item's gateway instance."""

    @workflow.run
    async def run(self, request: ConnectChannelRequest) -> ConnectionOutcome:
        try:
            detail = require_gateway_detail(request.item)
        except PreconditionViolation as e:
            raise ApplicationError(str(e), type="PreconditionViolation", non_retryable=True)

        name = detail.instance_name
        budget = timedelta(seconds=request.timeout_seconds)
        workflow.logger.info(f"Requesting pairing code for '{name}' (budget {budget})")

        try:
            result: PairingResult = await workflow.execute_activity(
                request_pairing_code,
                InstanceActionRequest(
                    config=request.webhook,
                    instance_name=name,
                    timeout_seconds=request.timeout_seconds,
                ),
                task_queue=CHANNEL_ACCESS_QUEUE,
                start_to_close_timeout=budget + DISPATCH_MARGIN,
                retry_policy=SINGLE_ATTEMPT,
            )
        except ActivityError as e:
            if isinstance(e.cause, ActivityTimeoutError):
                workflow.logger.warning(f"Pairing '{name}' timed out after {budget}")
                result = PairingResult(
                    success=False,
                    message=f"No answer from the pairing webhook within {request.timeout_seconds}s",
                    error_kind=ErrorKind.TIMEOUT,
                    instance_name=name,
                )
            else:
                workflow.logger.error(f"Pairing '{name}' failed: {e.cause or e}")
                result = PairingResult(
                    success=False,
                    message=f"Pairing request failed: {e.cause or e}",
                    error_kind=ErrorKind.FAILED,
                    instance_name=name,
                )

        return outcome_from_pairing(request.item, result)
