"""CLI: snag-report configure|error|warning|info"""

import json
from typing import Any, Optional

import click
from rich.console import Console
from rich.table import Table

from snag_report.config import Severity

console = Console()


def _load_config(strict: bool = True) -> dict:
    from snag_report.cli.main import _load_config
    return _load_config(strict)


def _validate_config(cfg: dict):
    from snag_report.cli.main import _validate_config
    return _validate_config(cfg)


def _save_config(cfg: dict) -> None:
    from snag_report.cli.main import _save_config
    _save_config(cfg)


def _get_notifier(context: Optional[str] = None):
    from snag_report.cli.main import _get_notifier
    return _get_notifier(context)


def _run(coro):
    from snag_report.cli.main import _run
    return _run(coro)


def _parse_meta(pairs: tuple[str, ...]) -> dict[str, Any]:
    """key=value pairs; values that parse as JSON are decoded, others kept as strings."""
    metadata: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--meta")
        try:
            metadata[key] = json.loads(value)
        except json.JSONDecodeError:
            metadata[key] = value
    return metadata


@click.command("configure")
@click.option("--access-token", prompt=True, hide_input=True, help="Notifier API key")
@click.option("--code-version", prompt=True, help="Deployed build, e.g. a commit hash")
@click.option("--context", prompt=True, help="Default report context")
@click.option("--release-stage", prompt=True, default="production", show_default=True)
@click.option("--enabled-stage", "enabled_stages", multiple=True, help="Repeat for each stage that reports")
@click.option("--schema-variant", type=click.Choice(["A", "B"]), default=None)
def configure(access_token, code_version, context, release_stage, enabled_stages, schema_variant):
    """Save notifier settings to ~/.snag-report/config.json."""
    cfg = _load_config(strict=False)
    cfg.update({
        "access_token": access_token,
        "code_version": code_version,
        "context": context,
        "release_stage": release_stage,
        "enabled_release_stages": list(enabled_stages),
    })
    if schema_variant:
        cfg["schema_variant"] = schema_variant
    _validate_config(cfg)
    _save_config(cfg)
    console.print("[green]Configuration saved.[/green]")


def _submit(severity: Severity, message: str, meta: tuple[str, ...], context: Optional[str], json_output: bool):
    metadata = _parse_meta(meta)
    notifier = _get_notifier(context)

    async def _send():
        async with notifier:
            return await notifier.report(severity, message, metadata)

    result = _run(_send())
    if json_output:
        click.echo(json.dumps({
            "ok": result.ok,
            "identifier": result.identifier,
            "status_code": result.status_code,
            "attempts": result.attempts,
            "error": str(result.error) if result.error else None,
        }, indent=2))
    else:
        table = Table(title=f"{severity.value} report")
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("Delivered", "[green]yes[/green]" if result.ok else "[red]no[/red]")
        table.add_row("Identifier", result.identifier or "-")
        table.add_row("Attempts", str(result.attempts))
        if result.error:
            table.add_row("Error", str(result.error))
        console.print(table)
    if not result.ok:
        raise SystemExit(1)


def _report_command(severity: Severity):
    @click.command(severity.value)
    @click.argument("message")
    @click.option("--meta", multiple=True, help="Metadata as key=value; repeatable")
    @click.option("--context", default=None, help="Override the configured context")
    @click.option("--json-output", "--json", is_flag=True)
    def cmd(message, meta, context, json_output):
        _submit(severity, message, meta, context, json_output)

    cmd.help = f"Submit a {severity.value} report."
    return cmd


error_cmd = _report_command(Severity.ERROR)
warning_cmd = _report_command(Severity.WARNING)
info_cmd = _report_command(Severity.INFO)
