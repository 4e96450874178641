"""Thin boto3 wrappers for the CloudFormation and S3 calls stackfront makes."""

import boto3
from botocore.exceptions import ClientError

from stackfront.models import ObjectPage, StackDescriptor, StackInfo, StackOutput

# Fixed for every uploaded object; kept for compatibility with existing buckets.
CONTENT_DISPOSITION = "text/html"

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _error_message(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Message", "")


def is_stack_missing_error(error: ClientError) -> bool:
    """True when DescribeStacks failed because the stack does not exist."""
    return _error_code(error) == "ValidationError" and "does not exist" in _error_message(error)


def is_no_updates_error(error: ClientError) -> bool:
    """True when UpdateStack was rejected because nothing would change."""
    return _error_code(error) == "ValidationError" and (
        "No updates are to be performed" in _error_message(error)
    )


def _region_kwargs(region: str | None) -> dict[str, str]:
    return {"region_name": region} if region else {}


class CloudFormationClient:
    """Wraps boto3 CloudFormation calls and returns stackfront dataclasses."""

    def __init__(self, region: str | None = None):
        self._client = boto3.client("cloudformation", **_region_kwargs(region))

    def create_stack(self, stack: StackDescriptor) -> str:
        """Submit a CreateStack call. Returns the new stack id."""
        resp = self._client.create_stack(
            StackName=stack.name,
            TemplateBody=stack.template_body,
            Parameters=stack.as_cfn_parameters(),
        )
        return resp["StackId"]

    def update_stack(self, stack: StackDescriptor) -> str:
        """Submit an UpdateStack call. Returns the stack id."""
        resp = self._client.update_stack(
            StackName=stack.name,
            TemplateBody=stack.template_body,
            Parameters=stack.as_cfn_parameters(),
        )
        return resp["StackId"]

    def describe_stack(self, stack_name: str) -> StackInfo | None:
        """Describe the most recently created stack with this name.

        Returns None if the stack does not exist; any other error propagates.
        """
        try:
            resp = self._client.describe_stacks(StackName=stack_name)
        except ClientError as e:
            if is_stack_missing_error(e):
                return None
            raise

        stacks = resp.get("Stacks", [])
        if not stacks:
            return None
        stack = stacks[-1]

        return StackInfo(
            name=stack["StackName"],
            stack_id=stack["StackId"],
            status=stack["StackStatus"],
            status_reason=stack.get("StackStatusReason"),
            outputs=[
                StackOutput(
                    key=o["OutputKey"],
                    value=o["OutputValue"],
                    description=o.get("Description"),
                )
                for o in stack.get("Outputs", [])
            ],
        )

    def stack_exists(self, stack_name: str) -> bool:
        return self.describe_stack(stack_name) is not None

    def delete_stack(self, stack_name: str) -> None:
        self._client.delete_stack(StackName=stack_name)


class S3Client:
    """Wraps boto3 S3 calls used to sync a hosting bucket."""

    def __init__(self, region: str | None = None):
        self._client = boto3.client("s3", **_region_kwargs(region))

    def bucket_exists(self, bucket: str) -> bool:
        """HeadBucket existence check. Only a not-found answer counts as absent."""
        try:
            self._client.head_bucket(Bucket=bucket)
        except ClientError as e:
            if _error_code(e) in _MISSING_BUCKET_CODES:
                return False
            raise
        return True

    def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        cache_control: str,
        content_type: str | None = None,
    ) -> None:
        kwargs: dict = {
            "Bucket": bucket,
            "Key": key,
            "Body": body,
            "ContentDisposition": CONTENT_DISPOSITION,
            "CacheControl": cache_control,
        }
        if content_type:
            kwargs["ContentType"] = content_type
        self._client.put_object(**kwargs)

    def list_objects(self, bucket: str, marker: str | None = None) -> ObjectPage:
        """Fetch one page of keys, optionally resuming after ``marker``."""
        kwargs: dict = {"Bucket": bucket}
        if marker:
            kwargs["Marker"] = marker

        resp = self._client.list_objects(**kwargs)

        return ObjectPage(
            keys=[item["Key"] for item in resp.get("Contents", [])],
            next_marker=resp.get("NextMarker"),
            is_truncated=bool(resp.get("IsTruncated", False)),
        )

    def delete_object(self, bucket: str, key: str) -> None:
        self._client.delete_object(Bucket=bucket, Key=key)
