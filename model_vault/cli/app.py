"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import json
import logging
import time

import typer
from rich.console import Console
from rich.logging import RichHandler

from model_vault import __version__
from model_vault.core import ModelVault
from model_vault.exceptions import ModelVaultError
from model_vault.storage.config_manager import ConfigManager
from model_vault.storage.location import get_config_dir
from model_vault.utils.formatting import format_duration, format_size

from .formatters import format_error_with_suggestions, print_catalog_table, print_config
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("model_vault")

app = typer.Typer(
    name="model-vault",
    help=(
        "Download GGUF models and manage the local model library. Use 'model-vault"
        " <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _load_vault() -> ModelVault:
    config = ConfigManager(CONFIG_FILE).load_config()
    return ModelVault(config)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Model Vault CLI"""
    if version:
        console.print(f"[bold]model-vault[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("model_vault").setLevel(log_level)

    if show_config:
        try:
            config = ConfigManager(CONFIG_FILE).load_config()
        except ModelVaultError as e:
            console.print(format_error_with_suggestions(e))
            raise typer.Exit(code=1) from e
        config_data = config.model_dump(exclude={"config_path"})
        print_config(CONFIG_FILE, config_data)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    root: str | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Store models in this directory instead of the default.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing configuration without asking.",
    ),
):
    """Write a configuration file with default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {"artifact_root": root} if root else {}
    try:
        ConfigManager(CONFIG_FILE).save_new_config(settings)
    except ModelVaultError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    console.print(
        f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]"
    )


@app.command()
def where():
    """Print the directory that holds the models."""
    vault = _load_vault()
    console.print(str(vault.root), soft_wrap=True)


@app.command(name="list")
def list_command(
    as_json: bool = typer.Option(False, "--json", help="Print the catalog as JSON."),
):
    """List the models stored on this machine."""
    vault = _load_vault()
    records = asyncio.run(vault.load())
    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in records], indent=2))
    else:
        print_catalog_table(records, vault.root)


@app.command(name="download")
def download_command(
    url: str | None = typer.Argument(
        None, help="URL of a .gguf file. Defaults to the configured default model."
    ),
    name: str | None = typer.Option(
        None,
        "--name",
        "-n",
        help="Name to store the model under. Defaults to the file name in the URL.",
    ),
):
    """Download a model into the local library."""
    vault = _load_vault()
    if url is None:
        url = vault.config.default_url
        name = name or vault.config.default_name

    async def _download_async():
        async with vault:
            await vault.load()
            start_time = time.monotonic()
            description = name or "Downloading"
            with ProgressManager(console, description=description) as progress:
                record = await vault.download(url, name, progress.update)
            return record, time.monotonic() - start_time

    try:
        record, duration = asyncio.run(_download_async())
    except ModelVaultError as e:
        console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e

    console.print(
        f"[bold green]✓ Downloaded {record.name}[/bold green] "
        f"({format_size(record.size_bytes)} in {format_duration(duration)})"
    )


@app.command()
def delete(
    key: str = typer.Argument(..., help="Name, ID or path of the model to delete."),
    force: bool = typer.Option(
        False, "--force", "-f", help="Bypass the confirmation prompt."
    ),
):
    """Delete a model from the local library."""
    vault = _load_vault()
    asyncio.run(vault.load())

    record = vault.store.find(key)
    if record is None:
        console.print(f"[red]✗ No model matching '{key}'.[/red]")
        raise typer.Exit(code=1)

    if not force and not typer.confirm(
        f"Delete '{record.name}' ({format_size(record.size_bytes)})?"
    ):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    try:
        deleted = asyncio.run(vault.delete(record.id))
    except ModelVaultError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    if deleted:
        console.print(f"[green]✓ Deleted {record.name}.[/green]")
    else:
        console.print(
            f"[yellow]⚠️  {record.name} was already gone from disk; "
            "removed it from the catalog.[/yellow]"
        )
