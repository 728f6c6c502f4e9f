"""
snag-report CLI — `snag-report` command.

Commands:
  snag-report configure             Save token, code version, context, stage
  snag-report error <message>       Submit an error report
  snag-report warning <message>     Submit a warning report
  snag-report info <message>        Submit an info report
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install snag-report[cli]")

from snag_report import __version__
from snag_report.client import AsyncNotifier
from snag_report.config import ClientConfig
from snag_report.errors import ConfigurationError

console = Console()
CONFIG_FILE = Path.home() / ".snag-report" / "config.json"


def _load_config(strict: bool = True) -> dict:
    """Read the config file. A corrupt file is an error unless strict is False."""
    try:
        data = json.loads(CONFIG_FILE.read_text())
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        if not strict:
            return {}
        console.print(f"[red]{CONFIG_FILE} is not valid JSON: {e}[/red]")
        raise SystemExit(1)
    if not isinstance(data, dict):
        if not strict:
            return {}
        console.print(f"[red]{CONFIG_FILE} must contain a JSON object.[/red]")
        raise SystemExit(1)
    return data


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _validate_config(cfg: dict) -> ClientConfig:
    try:
        return ClientConfig(**cfg)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red] (check {CONFIG_FILE})")
        raise SystemExit(1)


def _get_notifier(context: Optional[str] = None) -> AsyncNotifier:
    cfg = _load_config()
    if not cfg.get("access_token"):
        console.print("[red]Not configured. Run `snag-report configure` first.[/red]")
        raise SystemExit(1)
    if context:
        cfg["context"] = context
    return AsyncNotifier(_validate_config(cfg))


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
def main():
    """snag-report CLI — send error, warning and info reports."""


# Register subcommands from separate modules
from snag_report.cli.report import configure, error_cmd, info_cmd, warning_cmd

main.add_command(configure)
main.add_command(error_cmd)
main.add_command(warning_cmd)
main.add_command(info_cmd)


if __name__ == "__main__":
    main()
