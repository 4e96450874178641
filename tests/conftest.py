"""Shared test fixtures."""

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws


@pytest.fixture
def aws_credentials(monkeypatch):
    """Set dummy AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_client(aws_credentials):
    """Create a moto-mocked S3 boto3 client."""
    with mock_aws():
        yield boto3.client("s3", region_name="us-east-1")


@pytest.fixture
def dist_dir(tmp_path):
    """A small build output tree with one nested asset."""
    out = tmp_path / "out"
    (out / "static").mkdir(parents=True)
    (out / "index.html").write_text("<html></html>")
    (out / "app.js").write_text("console.log('hi');")
    (out / "static" / "logo.svg").write_text("<svg/>")
    return out


def client_error(code, message, operation="Operation"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


SIMPLE_TEMPLATE = """{
    "AWSTemplateFormatVersion": "2010-09-09",
    "Parameters": {
        "BucketName": {"Type": "String"}
    },
    "Resources": {
        "FrontendBucket": {
            "Type": "AWS::S3::Bucket",
            "Properties": {"BucketName": {"Ref": "BucketName"}}
        }
    },
    "Outputs": {
        "BucketName": {
            "Description": "Bucket holding the built frontend",
            "Value": {"Ref": "FrontendBucket"}
        }
    }
}"""
