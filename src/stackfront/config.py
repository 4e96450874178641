"""Resolve effective names and options from a sparse plugin config."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stackfront.models import BucketDescriptor

PLUGIN_NAMESPACE = "stackfront"

DEFAULT_DOCUMENT = "index.html"
DEFAULT_BUILD_COMMAND = ["echo", "no", "command"]
DEFAULT_BUILD_CWD = "client"
DEFAULT_DIST_DIR = "frontend/dist"


class ConfigError(Exception):
    """Raised when the host config document cannot be read."""


@dataclass(frozen=True)
class HostContext:
    """Values the host tool knows about the service being deployed."""

    service: str
    stage: str | None = None
    region: str | None = None
    stack_name: str | None = None


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully populated settings for one deployment."""

    service: str
    stage: str | None
    region: str | None
    stack_name: str
    bucket: BucketDescriptor
    build_command: list[str] = field(default_factory=lambda: list(DEFAULT_BUILD_COMMAND))
    build_cwd: str = DEFAULT_BUILD_CWD
    dist_dir: str = DEFAULT_DIST_DIR

    def stack_parameters(self) -> list[tuple[str, str]]:
        """The five template parameters, in submission order."""
        return [
            ("Stage", self.stage or ""),
            ("ServiceName", self.service),
            ("BucketName", self.bucket.name),
            ("IndexDocument", self.bucket.index_document),
            ("ErrorDocument", self.bucket.error_document),
        ]


def resolve_region(region: str | None) -> str | None:
    """Explicit provider region, else AWS_REGION from the environment."""
    return region or os.environ.get("AWS_REGION")


def stack_name_for(context: HostContext) -> str:
    if context.stack_name:
        return context.stack_name
    return f"{context.service}-{context.stage or ''}-frontend"


def bucket_name_for(context: HostContext, region: str | None, override: str | None = None) -> str:
    """Override, else ``{service}[-{stage}]-{region}``; the stage segment is dropped when empty."""
    if override:
        return override
    stage_segment = f"-{context.stage}" if context.stage else ""
    return f"{context.service}{stage_segment}-{region}"


def resolve_config(overlay: dict[str, Any] | None, context: HostContext) -> ResolvedConfig:
    """Fill in every setting the overlay leaves out.

    Pure defaulting: never raises for missing or empty sections.
    """
    overlay = overlay or {}
    build = overlay.get("build") or {}
    bucket = overlay.get("bucket") or {}

    region = resolve_region(context.region)
    command = list(build.get("command") or DEFAULT_BUILD_COMMAND)

    return ResolvedConfig(
        service=context.service,
        stage=context.stage,
        region=region,
        stack_name=stack_name_for(context),
        bucket=BucketDescriptor(
            name=bucket_name_for(context, region, bucket.get("name")),
            index_document=bucket.get("indexDocument") or DEFAULT_DOCUMENT,
            error_document=bucket.get("errorDocument") or DEFAULT_DOCUMENT,
            existing=bool(bucket.get("existing", False)),
        ),
        build_command=command,
        build_cwd=build.get("cwdDir") or DEFAULT_BUILD_CWD,
        dist_dir=overlay.get("distDir") or DEFAULT_DIST_DIR,
    )


def load_host_config(path: str | Path) -> tuple[dict[str, Any], HostContext]:
    """Read a host service document and split it into overlay and context.

    Expected shape::

        {
          "service": "app",
          "provider": {"stage": "prod", "region": "us-east-1", "stackName": null},
          "custom": {"stackfront": {...}}
        }
    """
    try:
        raw = json.loads(Path(path).read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read config file {str(path)!r}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {str(path)!r}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {str(path)!r} must contain a JSON object")

    provider = raw.get("provider") or {}
    overlay = (raw.get("custom") or {}).get(PLUGIN_NAMESPACE) or {}
    context = HostContext(
        service=raw.get("service", ""),
        stage=provider.get("stage"),
        region=provider.get("region"),
        stack_name=provider.get("stackName"),
    )
    return overlay, context
