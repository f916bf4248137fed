"""Workflow definitions and the retry policy they share."""

from temporalio.common import RetryPolicy

# Nothing in the channel platform is auto-retried: a failure goes back to the
# operator, who decides whether to try again.
SINGLE_ATTEMPT = RetryPolicy(maximum_attempts=1)
