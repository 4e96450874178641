"""CLI entrypoint for stackfront."""

import logging
import os
import sys

import click
from botocore.exceptions import BotoCoreError, ClientError
from rich.logging import RichHandler

from stackfront.build import BuildError
from stackfront.config import ConfigError, HostContext, load_host_config, resolve_config
from stackfront.formatter import format_json, format_markdown, format_table
from stackfront.integrations.slack import post_deploy_report
from stackfront.orchestrator import LifecycleOrchestrator
from stackfront.reconciler import StackFailedError, StackTimeoutError

DEPLOY_ERRORS = (StackFailedError, StackTimeoutError, BuildError, ClientError, BotoCoreError)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, markup=False)],
        force=True,
    )
    if not verbose:
        for noisy in ("boto3", "botocore", "urllib3", "s3transfer"):
            logging.getLogger(noisy).setLevel(logging.WARNING)


def _fail(message: str, code: int) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def _build_orchestrator(params: dict) -> LifecycleOrchestrator:
    overlay: dict = {}
    context = HostContext(service="")
    if params["config_path"]:
        try:
            overlay, context = load_host_config(params["config_path"])
        except ConfigError as e:
            _fail(str(e), 2)

    context = HostContext(
        service=params["service"] or context.service,
        stage=params["stage"] or context.stage,
        region=params["region"] or context.region,
        stack_name=params["stack_name"] or context.stack_name,
    )
    if not context.service:
        _fail("a service name is required (--service or \"service\" in --config).", 2)

    config = resolve_config(overlay, context)
    bucket_override = (overlay.get("bucket") or {}).get("name")
    if not config.region and not bucket_override:
        _fail("an AWS region is required (--region, provider.region or AWS_REGION).", 2)

    return LifecycleOrchestrator.from_config(
        config,
        poll_interval=params["poll_interval"],
        max_poll_attempts=params["max_poll_attempts"],
        max_concurrent=params["max_concurrent"],
    )


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Host service config (JSON) with service, provider and custom.stackfront.",
)
@click.option("--service", default=None, help="Service name.")
@click.option("--stage", default=None, help="Deployment stage.")
@click.option("--region", default=None, help="AWS region (falls back to AWS_REGION).")
@click.option("--stack-name", default=None, help="Override the frontend stack name.")
@click.option("--poll-interval", type=float, default=3.0, help="Seconds between stack polls.")
@click.option(
    "--max-poll-attempts",
    type=click.IntRange(min=1),
    default=None,
    help="Give up after this many polls (default: poll until done).",
)
@click.option(
    "--max-concurrent",
    type=click.IntRange(min=1),
    default=None,
    help="Max concurrent uploads/deletes (default: unlimited).",
)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.pass_context
def main(ctx, verbose, **params):
    """Build, deploy and remove a static frontend on S3 + CloudFront."""
    _setup_logging(verbose)
    ctx.obj = params


@main.command()
@click.pass_obj
def package(params):
    """Run the frontend build command."""
    orchestrator = _build_orchestrator(params)
    try:
        orchestrator.package()
    except BuildError as e:
        _fail(str(e), 1)


@main.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "markdown"]),
    default="table",
    help="Report format.",
)
@click.option("--post-slack", is_flag=True, help="Post report to Slack webhook.")
@click.pass_obj
def deploy(params, output_format, post_slack):
    """Create or update the stack and upload the build output."""
    webhook_url = None
    if post_slack:
        webhook_url = os.environ.get("STACKFRONT_SLACK_WEBHOOK")
        if not webhook_url:
            _fail("STACKFRONT_SLACK_WEBHOOK env var not set.", 2)

    orchestrator = _build_orchestrator(params)
    try:
        report = orchestrator.deploy()
    except (*DEPLOY_ERRORS, FileNotFoundError) as e:
        _fail(str(e), 1)

    formatters = {
        "table": format_table,
        "json": format_json,
        "markdown": format_markdown,
    }
    click.echo(formatters[output_format](report))

    if webhook_url:
        post_deploy_report(report=format_markdown(report), webhook_url=webhook_url)


@main.command()
@click.pass_obj
def remove(params):
    """Empty the bucket and delete the stack."""
    orchestrator = _build_orchestrator(params)
    try:
        orchestrator.remove()
    except DEPLOY_ERRORS as e:
        _fail(str(e), 1)
