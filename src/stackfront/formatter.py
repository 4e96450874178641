"""Output formatters for deploy reports."""

import json

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from stackfront.models import DeployReport, ReconcileState, StackOutput

STATE_COLORS = {
    ReconcileState.COMPLETE: "green",
    ReconcileState.SKIPPED: "yellow",
}


def _escape_md_cell(value: str) -> str:
    """Escape characters that break markdown table cells."""
    return value.replace("|", "\\|").replace("\n", " ")


def outputs_to_dicts(outputs: list[StackOutput]) -> list[dict[str, str]]:
    """Stack outputs in the shape DescribeStacks returns them."""
    rendered = []
    for o in outputs:
        item = {"OutputKey": o.key, "OutputValue": o.value}
        if o.description:
            item["Description"] = o.description
        rendered.append(item)
    return rendered


def format_json(report: DeployReport) -> str:
    """Format a deploy report as JSON."""
    return json.dumps(
        {
            "stack_name": report.stack_name,
            "bucket_name": report.bucket_name,
            "stack_state": report.reconcile_state.value,
            "uploaded": [
                {
                    "key": a.remote_key,
                    "source": a.local_path,
                    "cache_control": a.cache_control,
                }
                for a in report.uploaded
            ],
            "outputs": {o.key: o.value for o in report.outputs},
        },
        indent=2,
    )


def format_markdown(report: DeployReport) -> str:
    """Format a deploy report as Markdown."""
    lines = [
        f"## Frontend deploy: {_escape_md_cell(report.stack_name)}",
        "",
        f"Bucket `{report.bucket_name}`, stack {report.reconcile_state.value}, "
        f"{len(report.uploaded)} files uploaded.",
        "",
    ]

    if report.outputs:
        lines.append("| Output | Value |")
        lines.append("|--------|-------|")
        for o in report.outputs:
            lines.append(f"| {_escape_md_cell(o.key)} | `{_escape_md_cell(o.value)}` |")
        lines.append("")

    return "\n".join(lines)


def format_table(report: DeployReport) -> str:
    """Format a deploy report as a Rich tree and table, returned as a string."""
    console = Console(record=True, width=120)

    color = STATE_COLORS.get(report.reconcile_state, "dim")
    tree = Tree(
        Text.from_markup(
            f"[bold]{report.stack_name}[/bold] — [{color}]{report.reconcile_state.value}[/{color}]"
        )
    )
    files = tree.add(f"{report.bucket_name} ({len(report.uploaded)} files)")
    for a in report.uploaded:
        files.add(f"{a.remote_key} [dim]{a.cache_control}[/dim]")
    console.print(tree)

    if report.outputs:
        table = Table(title="Stack outputs")
        table.add_column("Output", style="bold")
        table.add_column("Value")
        for o in report.outputs:
            table.add_row(o.key, o.value)
        console.print(table)

    return console.export_text()
