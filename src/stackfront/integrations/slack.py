"""Announce frontend deploys in Slack via incoming webhook."""

from urllib.parse import urlparse

import requests

ALLOWED_SLACK_HOSTS = {"hooks.slack.com", "hooks.slack-gov.com"}


def validate_webhook_url(webhook_url: str) -> None:
    parsed = urlparse(webhook_url)
    if parsed.scheme != "https":
        raise ValueError("Slack webhook URL must use HTTPS")
    if parsed.hostname not in ALLOWED_SLACK_HOSTS:
        raise ValueError(
            f"Invalid Slack webhook host {parsed.hostname!r}: "
            f"must be one of {sorted(ALLOWED_SLACK_HOSTS)}"
        )


def post_deploy_report(report: str, webhook_url: str, timeout: int = 30) -> None:
    """Post a Markdown deploy report to a Slack incoming webhook."""
    validate_webhook_url(webhook_url)
    response = requests.post(
        webhook_url,
        json={"text": report, "mrkdwn": True},
        timeout=timeout,
    )
    response.raise_for_status()
