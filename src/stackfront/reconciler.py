"""Create or update the frontend stack and wait for it to settle."""

import json
import logging
import time
from pathlib import Path

from botocore.exceptions import ClientError

from stackfront.aws.client import CloudFormationClient, is_no_updates_error
from stackfront.models import (
    BucketDescriptor,
    ReconcileResult,
    ReconcileState,
    StackDescriptor,
    StackOutput,
    StackStatus,
    is_complete_status,
    is_failed_status,
)

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_PATH = Path(__file__).parent / "templates" / "default.json"


class StackFailedError(Exception):
    """A stack reached a FAILED or ROLLBACK status."""

    def __init__(self, stack_name: str, status: str, reason: str | None):
        self.stack_name = stack_name
        self.status = status
        self.reason = reason
        super().__init__(
            f"stackfront stack: {stack_name} failed with a status of {status} due to: {reason}"
        )


class StackTimeoutError(Exception):
    """The stack did not reach a terminal status within max_poll_attempts."""


def load_template_body(path: Path = DEFAULT_TEMPLATE_PATH) -> str:
    """Read a JSON template and return it re-serialized as a compact string."""
    return json.dumps(json.loads(path.read_text()))


class StackReconciler:
    """Drives a stack from its current state to CREATE/UPDATE_COMPLETE.

    Submits a create or update, then polls every ``poll_interval`` seconds
    with no attempt limit unless ``max_poll_attempts`` is given. Ends in
    COMPLETE, SKIPPED for externally managed buckets, or raises
    :class:`StackFailedError`.
    """

    def __init__(
        self,
        client: CloudFormationClient,
        poll_interval: float = 3.0,
        max_poll_attempts: int | None = None,
    ):
        self._client = client
        self._poll_interval = poll_interval
        self._max_poll_attempts = max_poll_attempts

    def reconcile(self, stack: StackDescriptor, bucket: BucketDescriptor) -> ReconcileResult:
        """Create the stack if absent, update it otherwise, then wait."""
        if bucket.existing:
            logger.info("Bucket %s is managed externally, skipping stack %s", bucket.name, stack.name)
            return ReconcileResult(stack_name=stack.name, state=ReconcileState.SKIPPED)

        if self._client.stack_exists(stack.name):
            operation = "update"
            logger.info("Updating stack %s", stack.name)
            try:
                self._client.update_stack(stack)
            except ClientError as e:
                if not is_no_updates_error(e):
                    raise
                logger.info("No updates to be performed on %s", stack.name)
        else:
            operation = "create"
            logger.info("Creating stack %s", stack.name)
            self._client.create_stack(stack)

        outputs, poll_count = self._wait_for_complete(stack.name)

        return ReconcileResult(
            stack_name=stack.name,
            state=ReconcileState.COMPLETE,
            operation=operation,
            outputs=outputs,
            poll_count=poll_count,
        )

    def _wait_for_complete(self, stack_name: str) -> tuple[list[StackOutput], int]:
        attempts = 0
        while True:
            attempts += 1
            info = self._client.describe_stack(stack_name)
            if info is None:
                raise StackFailedError(stack_name, StackStatus.DOES_NOT_EXIST, "stack disappeared")

            logger.info("%s status: %s", stack_name, info.status)

            if is_failed_status(info.status):
                raise StackFailedError(stack_name, info.status, info.status_reason)
            if is_complete_status(info.status):
                return info.outputs, attempts

            if self._max_poll_attempts is not None and attempts >= self._max_poll_attempts:
                raise StackTimeoutError(
                    f"Stack {stack_name} still {info.status} after {attempts} polls"
                )

            if self._poll_interval > 0:
                time.sleep(self._poll_interval)

    def outputs(self, stack_name: str) -> list[StackOutput]:
        info = self._client.describe_stack(stack_name)
        return info.outputs if info else []

    def delete(self, stack_name: str) -> bool:
        """Delete the stack if it exists. Returns whether a delete was issued."""
        if not self._client.stack_exists(stack_name):
            logger.info("Stack %s does not exist, nothing to delete", stack_name)
            return False

        logger.info("Initiating deleteStack() for %s", stack_name)
        self._client.delete_stack(stack_name)
        return True
