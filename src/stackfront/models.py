"""Core data models for frontend stack deployment."""

from dataclasses import dataclass, field
from enum import StrEnum

INDEX_CACHE_MAX_AGE = 300
ASSET_CACHE_MAX_AGE = 86400


class StackStatus(StrEnum):
    """CloudFormation stack status values seen while reconciling."""

    CREATE_IN_PROGRESS = "CREATE_IN_PROGRESS"
    CREATE_COMPLETE = "CREATE_COMPLETE"
    CREATE_FAILED = "CREATE_FAILED"
    UPDATE_IN_PROGRESS = "UPDATE_IN_PROGRESS"
    UPDATE_COMPLETE_CLEANUP_IN_PROGRESS = "UPDATE_COMPLETE_CLEANUP_IN_PROGRESS"
    UPDATE_COMPLETE = "UPDATE_COMPLETE"
    UPDATE_FAILED = "UPDATE_FAILED"
    UPDATE_ROLLBACK_IN_PROGRESS = "UPDATE_ROLLBACK_IN_PROGRESS"
    UPDATE_ROLLBACK_COMPLETE = "UPDATE_ROLLBACK_COMPLETE"
    UPDATE_ROLLBACK_FAILED = "UPDATE_ROLLBACK_FAILED"
    ROLLBACK_IN_PROGRESS = "ROLLBACK_IN_PROGRESS"
    ROLLBACK_COMPLETE = "ROLLBACK_COMPLETE"
    ROLLBACK_FAILED = "ROLLBACK_FAILED"
    DELETE_IN_PROGRESS = "DELETE_IN_PROGRESS"
    DELETE_COMPLETE = "DELETE_COMPLETE"
    DELETE_FAILED = "DELETE_FAILED"
    DOES_NOT_EXIST = "DOES_NOT_EXIST"


def is_failed_status(status: str) -> bool:
    """True for any FAILED or ROLLBACK status, including *_ROLLBACK_COMPLETE."""
    return "FAILED" in status or "ROLLBACK" in status


def is_complete_status(status: str) -> bool:
    """True for a successful terminal status. Check is_failed_status first."""
    return "COMPLETE" in status and not is_failed_status(status)


class ReconcileState(StrEnum):
    """Where a stack reconciliation ended up."""

    COMPLETE = "COMPLETE"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class StackDescriptor:
    """A stack to create or update: name, template and ordered parameters."""

    name: str
    template_body: str
    parameters: list[tuple[str, str]] = field(default_factory=list)

    def as_cfn_parameters(self) -> list[dict[str, str]]:
        return [{"ParameterKey": k, "ParameterValue": v} for k, v in self.parameters]


@dataclass(frozen=True)
class StackOutput:
    """A single Outputs entry published by the template."""

    key: str
    value: str
    description: str | None = None


@dataclass(frozen=True)
class StackInfo:
    """Snapshot of a stack as returned by DescribeStacks."""

    name: str
    stack_id: str
    status: str
    status_reason: str | None = None
    outputs: list[StackOutput] = field(default_factory=list)


@dataclass(frozen=True)
class BucketDescriptor:
    """The hosting bucket. existing=True means its lifecycle is managed elsewhere."""

    name: str
    index_document: str = "index.html"
    error_document: str = "index.html"
    existing: bool = False


@dataclass(frozen=True)
class AssetRecord:
    """A local build artifact and where it lands in the bucket."""

    local_path: str
    remote_key: str
    cache_max_age: int

    @property
    def cache_control(self) -> str:
        return f"max-age={self.cache_max_age}"


@dataclass(frozen=True)
class ObjectPage:
    """One page of a bucket listing."""

    keys: list[str]
    next_marker: str | None
    is_truncated: bool


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of reconciling a stack against its template."""

    stack_name: str
    state: ReconcileState
    operation: str | None = None
    outputs: list[StackOutput] = field(default_factory=list)
    poll_count: int = 0


@dataclass(frozen=True)
class DeployReport:
    """Everything a deploy did, for reporting."""

    stack_name: str
    bucket_name: str
    reconcile_state: ReconcileState
    uploaded: list[AssetRecord]
    outputs: list[StackOutput]
