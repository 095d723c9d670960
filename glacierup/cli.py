import logging
import os
import sys

import click

from . import __version__
from .actions import Command, run
from .config import Config
from .exceptions import ConfigDirectoryError, LogWriteError
from .logwriter import CSV, ERRORS, TEXT, XML, YAML, LogWriter, log_file
from .regions import REGIONS, by_index
from .state import AppState
from .tasks import Worker
from .utils import human_size


@click.group()
@click.option(
    "--properties-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding SAGU.properties and the logs",
)
@click.option("-v", "--verbose", is_flag=True, default=False)
@click.pass_context
def main(ctx, properties_dir, verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="  %(message)s",
        handlers=[logging.StreamHandler()],
    )
    try:
        ctx.obj = Config(directory=properties_dir)
    except ConfigDirectoryError as e:
        raise click.ClickException(str(e))


@main.command()
@click.pass_obj
def info(config):
    """
    Displays configuration information
    """
    state = AppState.from_config(config)
    click.echo(f"glacierup version {__version__}")
    click.echo(f"  Properties file: {config.path}")
    try:
        click.echo(f"  Upload log: {LogWriter(state.directory, state.log_type).path}")
    except ValueError:
        click.secho(f"  Upload log: invalid log type {state.log_type}", fg="red")
    click.echo(f"  Access key: {state.access_key or '(not set)'}")
    click.echo(f"  Vault: {state.vault or '(not set)'}")
    try:
        click.echo(f"  Region: {state.region.title}")
    except IndexError:
        click.secho(f"  Region: invalid index {state.region_index}", fg="red")


@main.command()
def regions():
    """
    Lists the regions and their endpoints
    """
    output_format = "%-5s %-32s %s"
    click.secho(output_format % ("INDEX", "TITLE", "ENDPOINT"), fg="cyan")
    for region in REGIONS:
        click.echo(output_format % (region.index, region.title, region.glacier_endpoint))


@main.command()
@click.option("--access-key", default=None)
@click.option("--secret-key", default=None)
@click.option("--vault", default=None)
@click.option("--region", type=int, default=None, help="Region index, see 'regions'")
@click.option(
    "--log-type",
    type=click.Choice([str(i) for i in (TEXT, CSV, YAML, XML)]),
    default=None,
    help="0 text, 1 CSV, 2 YAML, 3 XML",
)
@click.pass_obj
def configure(config, access_key, secret_key, vault, region, log_type):
    """
    Sets and saves credentials and selections
    """
    changed = False
    if access_key is not None:
        changed |= config.set_access_key(access_key)
    if secret_key is not None:
        changed |= config.set_secret_key(secret_key)
    if vault is not None:
        changed |= config.set_vault_key(vault)
    if region is not None:
        try:
            by_index(region)
        except IndexError as e:
            raise click.BadParameter(str(e), param_hint="--region")
        changed |= config.set_location_index(region)
    if log_type is not None:
        changed |= config.set_log_type_index(int(log_type))
    if not changed:
        click.secho("Nothing changed", fg="yellow")
        return
    if not config.save():
        raise click.ClickException(f"Could not save {config.path}")
    click.secho(f"Saved {config.path}", fg="green")


## Vault commands


@main.command()
@click.pass_obj
def vaults(config):
    """
    Lists the vaults in the selected region
    """
    names = perform(Command.LIST_VAULTS, AppState.from_config(config))
    click.secho("VAULT", fg="cyan")
    for name in names:
        click.echo(name)


@main.command("create-vault")
@click.argument("name")
@click.pass_obj
def create_vault(config, name):
    """
    Creates a vault in the selected region
    """
    perform(Command.CREATE_VAULT, AppState.from_config(config), name)
    click.secho(f"Added vault {name}", fg="green")


@main.command("delete-archive")
@click.option("-y", "--yes", is_flag=True, default=False)
@click.argument("archive_id")
@click.pass_obj
def delete_archive(config, archive_id, yes):
    """
    Deletes an archive from the selected vault
    """
    state = AppState.from_config(config)
    if not yes:
        if not click.confirm(f"Delete archive from vault {state.vault}?"):
            return
    perform(Command.DELETE_ARCHIVE, state, archive_id)
    click.secho("Deleted archive successfully.", fg="green")


## Transfer commands


@main.command()
@click.option("--no-log", is_flag=True, default=False, help="Do not log uploads")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True))
@click.pass_obj
def upload(config, files, no_log):
    """
    Uploads one or more files to the selected vault
    """
    state = AppState.from_config(config, logging_enabled=not no_log)
    total = sum(os.path.getsize(f) for f in files if os.path.isfile(f))
    click.echo("%s files, %s" % (len(files), human_size(total)))
    worker = Worker("upload")
    worker.start(run, Command.UPLOAD, state, files)
    with click.progressbar(length=total, label="Uploading") as bar:
        for event in worker.events():
            if event.kind == "bytes":
                bar.update(event.amount)
            elif event.kind == "file":
                bar.label = f"Uploaded {event.percent}%"
    report = finish(worker)
    click.echo(report.summary())
    if report.failed:
        sys.exit(1)


@main.command()
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, exists=True),
    default=None,
    help="Where to write the inventory (default: current directory)",
)
@click.option("--max-failures", type=int, default=None, help="Give up after this many failed status checks in a row")
@click.pass_obj
def inventory(config, output_dir, max_failures):
    """
    Requests the selected vault's inventory and saves it when ready
    """
    state = AppState.from_config(config)
    click.echo(f"Requesting inventory of {state.vault}; this takes around four hours")
    worker = Worker("inventory")
    worker.start(run, Command.INVENTORY, state, output_dir, max_failures=max_failures)
    path = finish(worker)
    click.secho(f"Successfully exported {state.vault} inventory to {path}", fg="green")


@main.command()
@click.option("--max-failures", type=int, default=None, help="Give up after this many failed status checks in a row")
@click.argument("archive_id")
@click.argument("destination", type=click.Path(dir_okay=False))
@click.pass_obj
def retrieve(config, archive_id, destination, max_failures):
    """
    Requests an archive and saves it when ready
    """
    state = AppState.from_config(config)
    click.echo(f"Requesting archive from {state.vault}; this takes around four hours")
    worker = Worker("retrieve")
    worker.start(
        run,
        Command.RETRIEVE,
        state,
        archive_id,
        os.path.abspath(destination),
        max_failures=max_failures,
    )
    path = finish(worker)
    click.secho(f"Successfully downloaded {path}", fg="green")


## Log commands


@main.command("export-log")
@click.argument("destination", type=click.Path(dir_okay=False), default="Glacier.txt")
@click.pass_obj
def export_log(config, destination):
    """
    Exports the text upload log
    """
    count = perform(Command.EXPORT_LOG, AppState.from_config(config), destination)
    click.echo(f"Successfully exported {count} archive records to {destination}")


@main.command("log-path")
@click.option("--errors", is_flag=True, default=False, help="Show the error log instead")
@click.pass_obj
def log_path(config, errors):
    """
    Prints the path of the current upload log
    """
    if errors:
        path = log_file(ERRORS, config.directory)
    else:
        try:
            path = LogWriter(config.directory, config.log_type_index).path
        except ValueError:
            raise click.ClickException(f"Invalid log type {config.log_type_index}")
    if not os.path.exists(path):
        raise click.ClickException(f"Log file {os.path.basename(path)} does not exist.")
    click.echo(path)


# Utilities


def perform(command: Command, state: AppState, *args):
    """
    Runs a quick action in the foreground and returns its result.
    """
    return handle(lambda: run(command, state, *args))


def finish(worker: Worker):
    """
    Waits for a worker's action and returns its result.
    """
    for _ in worker.events():
        pass
    return handle(worker.result)


def handle(call):
    try:
        notification = call()
    except LogWriteError as e:
        logging.critical("%s", e)
        logging.critical("Stopping: uploads can not be recorded")
        sys.exit(2)
    if not notification.ok:
        raise click.ClickException(notification.message)
    return notification.result
