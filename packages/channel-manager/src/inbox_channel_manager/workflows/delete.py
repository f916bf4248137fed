"""DeleteMaturationInstanceWorkflow: one gateway deletion through Channel Access.

Only maturation items (gateway instances with no platform channel) may be
deleted; anything else fails the workflow with a non-retryable
PreconditionViolation before a request goes out.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.exceptions import ActivityError, ApplicationError

with workflow.unsafe.imports_passed_through():
    from inbox_channel_access.activities import delete_instance
    from inbox_reconciliation_engine.connection import (
        outcome_from_deletion,
        require_maturation,
    )
    from inbox_shared.access_models import GatewayActionResult, InstanceActionRequest
    from inbox_shared.connection_models import DeleteInstanceRequest, DeletionOutcome
    from inbox_shared.models import ErrorKind, PreconditionViolation
    from inbox_shared.task_queues import CHANNEL_ACCESS_QUEUE

    from inbox_channel_manager.workflows import SINGLE_ATTEMPT

GATEWAY_ACTION_TIMEOUT = timedelta(seconds=60)


@workflow.defn
class DeleteMaturationInstanceWorkflow:
    """Deletes a gateway-only instance. Single attempt, failure is reported."""

    @workflow.run
    async def run(self, request: DeleteInstanceRequest) -> DeletionOutcome:
        try:
            detail = require_maturation(request.item)
        except PreconditionViolation as e:
            raise ApplicationError(str(e), type="PreconditionViolation", non_retryable=True)

        name = detail.instance_name
        workflow.logger.info(f"Deleting maturation instance '{name}'")
        try:
            result: GatewayActionResult = await workflow.execute_activity(
                delete_instance,
                InstanceActionRequest(
                    config=request.gateway,
                    instance_name=name,
                ),
                task_queue=CHANNEL_ACCESS_QUEUE,
                start_to_close_timeout=GATEWAY_ACTION_TIMEOUT,
                retry_policy=SINGLE_ATTEMPT,
            )
        except ActivityError as e:
            workflow.logger.error(f"Deleting '{name}' failed: {e.cause or e}")
            result = GatewayActionResult(
                success=False,
                message=f"Instance delete failed: {e.cause or e}",
                error_kind=ErrorKind.FAILED,
                instance_name=name,
                action="delete",
            )

        return outcome_from_deletion(request.item, result)
