"""Sequences build, deploy and remove for a frontend stack."""

import json
import logging
from collections.abc import Callable

from stackfront.aws.client import CloudFormationClient, S3Client
from stackfront.build import run_build
from stackfront.config import ResolvedConfig
from stackfront.formatter import outputs_to_dicts
from stackfront.models import DeployReport, ReconcileState, StackDescriptor
from stackfront.reconciler import StackReconciler, load_template_body
from stackfront.synchronizer import BucketSynchronizer

logger = logging.getLogger(__name__)


class LifecycleOrchestrator:
    """Runs the package, deploy and remove phases in order."""

    def __init__(
        self,
        config: ResolvedConfig,
        reconciler: StackReconciler,
        synchronizer: BucketSynchronizer,
        storage: S3Client,
        build_runner: Callable[[list[str], str], None] = run_build,
        template_body: str | None = None,
    ):
        self._config = config
        self._reconciler = reconciler
        self._synchronizer = synchronizer
        self._storage = storage
        self._build_runner = build_runner
        self._template_body = template_body

    @classmethod
    def from_config(
        cls,
        config: ResolvedConfig,
        poll_interval: float = 3.0,
        max_poll_attempts: int | None = None,
        max_concurrent: int | None = None,
    ) -> "LifecycleOrchestrator":
        """Build an orchestrator backed by real boto3 clients for config.region."""
        cfn = CloudFormationClient(region=config.region)
        s3 = S3Client(region=config.region)
        return cls(
            config,
            StackReconciler(cfn, poll_interval=poll_interval, max_poll_attempts=max_poll_attempts),
            BucketSynchronizer(s3, max_concurrent=max_concurrent),
            s3,
        )

    def stack_descriptor(self) -> StackDescriptor:
        return StackDescriptor(
            name=self._config.stack_name,
            template_body=self._template_body or load_template_body(),
            parameters=self._config.stack_parameters(),
        )

    def package(self) -> None:
        logger.info("Checking for frontend build commands...")
        self._build_runner(self._config.build_command, self._config.build_cwd)

    def deploy(self) -> DeployReport:
        config = self._config
        result = self._reconciler.reconcile(self.stack_descriptor(), config.bucket)

        uploaded = self._synchronizer.upload(config.bucket.name, config.dist_dir)

        logger.info("frontend stack name: %s finished deploying.", config.stack_name)
        if result.state == ReconcileState.COMPLETE:
            outputs = result.outputs
        else:
            outputs = self._reconciler.outputs(config.stack_name)
        logger.info(json.dumps(outputs_to_dicts(outputs), indent=2))

        return DeployReport(
            stack_name=config.stack_name,
            bucket_name=config.bucket.name,
            reconcile_state=result.state,
            uploaded=uploaded,
            outputs=outputs,
        )

    def remove(self) -> None:
        bucket = self._config.bucket.name
        if self._storage.bucket_exists(bucket):
            self._synchronizer.delete_all(bucket)
        else:
            logger.info("Bucket %s does not exist, skipping object removal", bucket)

        self._reconciler.delete(self._config.stack_name)
