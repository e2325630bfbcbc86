"""Command-line entry points: push, invoke and facts."""

from __future__ import annotations

import click

from fleetcmd import __version__
from fleetcmd.exceptions import FleetError
from fleetcmd.models.credential import build_credential
from fleetcmd.services.facts import gather_facts, show_facts
from fleetcmd.services.inventory import read_targets
from fleetcmd.services.orchestrator import FleetOrchestrator
from fleetcmd.services.pipeline import invoke, resolve_command
from fleetcmd.services.reporter import Reporter
from fleetcmd.services.transport import transport
from fleetcmd.utils.logging import setup_logging

_file = click.Path(dir_okay=False)


def _confirm(question: str) -> bool:
    return click.confirm(question, default=False)


@click.group()
@click.version_option(__version__, prog_name="fleetcmd")
def cli() -> None:
    """Run commands and gather facts across a fleet of Junos devices."""
    setup_logging()


@cli.command()
@click.argument("template", type=_file)
@click.argument("inventory", type=_file)
@click.option("--log", "log_path", type=_file, help="Write output to this file instead of the terminal.")
def push(template: str, inventory: str, log_path: str | None) -> None:
    """Render TEMPLATE for every row of the INVENTORY CSV and run it.

    INVENTORY columns are device,user,password followed by one column per
    positional placeholder ({0}, {1}, ...) used in TEMPLATE.
    """
    reporter = Reporter(log_path, confirm=_confirm)
    try:
        FleetOrchestrator(transport, reporter).run(template, inventory)
    except (FleetError, OSError) as exc:
        raise click.ClickException(str(exc))


@cli.command("invoke")
@click.option("--device", "-d", help="Single device hostname or address.")
@click.option("--targets", "-t", type=_file, help="File with one device per line.")
@click.option("--command", "-c", help="Command to run.")
@click.option("--command-file", "-f", type=_file, help="File with one command per line.")
@click.option("--username", "-u", required=True)
@click.option("--password", "-p", prompt=True, hide_input=True)
@click.option("--log", "log_path", type=_file, help="Write output to this file instead of the terminal.")
def invoke_command(
    device: str | None,
    targets: str | None,
    command: str | None,
    command_file: str | None,
    username: str,
    password: str,
    log_path: str | None,
) -> None:
    """Run ad-hoc commands on one device or a list of devices."""
    if bool(device) == bool(targets):
        raise click.UsageError("Give exactly one of --device or --targets.")
    if not command and not command_file:
        raise click.UsageError("Give --command or --command-file.")

    try:
        credential = build_credential(username, password)
        cmd = resolve_command(command, command_file)
        devices = read_targets(targets) if targets else [device]
        invoke(transport, devices, credential, cmd, Reporter(log_path, confirm=_confirm))
    except (FleetError, OSError) as exc:
        raise click.ClickException(str(exc))


@cli.command()
@click.argument("host")
@click.option("--username", "-u", required=True)
@click.option("--password", "-p", prompt=True, hide_input=True)
@click.option("--brief", is_flag=True, help="Only query the version document.")
@click.option("--json", "as_json", is_flag=True, help="Print the fact record as JSON.")
def facts(host: str, username: str, password: str, brief: bool, as_json: bool) -> None:
    """Show normalized facts for HOST."""
    try:
        credential = build_credential(username, password)
    except FleetError as exc:
        raise click.ClickException(str(exc))

    if not as_json:
        show_facts(transport, host, credential, Reporter(), full=not brief)
        return

    reporter = Reporter(stream=click.get_text_stream("stderr"))
    result = gather_facts(transport, host, credential, reporter, full=not brief)
    if result is not None:
        click.echo(result.model_dump_json(indent=2))
