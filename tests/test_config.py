"""Tests for config resolution and host config loading."""

import json

import pytest

from stackfront.config import (
    DEFAULT_BUILD_COMMAND,
    ConfigError,
    HostContext,
    load_host_config,
    resolve_config,
    resolve_region,
)


@pytest.fixture
def context():
    return HostContext(service="app", stage="prod", region="us-east-1")


def test_empty_overlay_uses_all_defaults(context):
    config = resolve_config({}, context)

    assert config.stack_name == "app-prod-frontend"
    assert config.bucket.name == "app-prod-us-east-1"
    assert config.bucket.index_document == "index.html"
    assert config.bucket.error_document == "index.html"
    assert config.bucket.existing is False
    assert config.build_command == DEFAULT_BUILD_COMMAND
    assert config.build_cwd == "client"
    assert config.dist_dir == "frontend/dist"


def test_none_overlay_and_empty_sections(context):
    assert resolve_config(None, context).bucket.name == "app-prod-us-east-1"
    config = resolve_config({"build": None, "bucket": {}}, context)
    assert config.build_command == ["echo", "no", "command"]


def test_bucket_name_without_stage():
    config = resolve_config({}, HostContext(service="app", stage="", region="eu-west-1"))
    assert config.bucket.name == "app-eu-west-1"


def test_stack_name_keeps_empty_stage_segment():
    config = resolve_config({}, HostContext(service="app", stage="", region="us-east-1"))
    assert config.stack_name == "app--frontend"
    assert resolve_config({}, HostContext(service="app", region="us-east-1")).stack_name == (
        "app--frontend"
    )


def test_overrides_win(context):
    overlay = {
        "bucket": {
            "name": "my-site",
            "indexDocument": "main.html",
            "errorDocument": "404.html",
            "existing": True,
        },
        "build": {"cwdDir": "web", "command": ["npm", "run", "build"]},
        "distDir": "web/build",
    }
    ctx = HostContext(service="app", stage="prod", region="us-east-1", stack_name="custom-stack")

    config = resolve_config(overlay, ctx)

    assert config.stack_name == "custom-stack"
    assert config.bucket.name == "my-site"
    assert config.bucket.index_document == "main.html"
    assert config.bucket.error_document == "404.html"
    assert config.bucket.existing is True
    assert config.build_command == ["npm", "run", "build"]
    assert config.build_cwd == "web"
    assert config.dist_dir == "web/build"


def test_build_command_is_copied(context):
    command = ["npm", "run", "build"]
    config = resolve_config({"build": {"command": command}}, context)
    config.build_command.append("--prod")
    assert command == ["npm", "run", "build"]


def test_region_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "ap-southeast-2")

    config = resolve_config({}, HostContext(service="app", stage="dev"))

    assert config.region == "ap-southeast-2"
    assert config.bucket.name == "app-dev-ap-southeast-2"


def test_explicit_region_beats_environment(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "ap-southeast-2")
    assert resolve_region("us-west-2") == "us-west-2"


def test_stack_parameters_order(context):
    config = resolve_config({}, context)

    assert config.stack_parameters() == [
        ("Stage", "prod"),
        ("ServiceName", "app"),
        ("BucketName", "app-prod-us-east-1"),
        ("IndexDocument", "index.html"),
        ("ErrorDocument", "index.html"),
    ]


def test_load_host_config(tmp_path):
    path = tmp_path / "service.json"
    path.write_text(
        json.dumps(
            {
                "service": "app",
                "provider": {"stage": "prod", "region": "us-east-1", "stackName": "s"},
                "custom": {"stackfront": {"distDir": "out"}},
            }
        )
    )

    overlay, context = load_host_config(path)

    assert overlay == {"distDir": "out"}
    assert context == HostContext(service="app", stage="prod", region="us-east-1", stack_name="s")


def test_load_host_config_without_plugin_section(tmp_path):
    path = tmp_path / "service.json"
    path.write_text(json.dumps({"service": "app"}))

    overlay, context = load_host_config(path)

    assert overlay == {}
    assert context.stage is None


def test_load_host_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read config file"):
        load_host_config(tmp_path / "nope.json")


def test_load_host_config_invalid_json(tmp_path):
    path = tmp_path / "service.json"
    path.write_text("{not json")

    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_host_config(path)


def test_load_host_config_rejects_non_object(tmp_path):
    path = tmp_path / "service.json"
    path.write_text("[1, 2]")

    with pytest.raises(ConfigError, match="must contain a JSON object"):
        load_host_config(path)
