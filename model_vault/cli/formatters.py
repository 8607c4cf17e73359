"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from model_vault.models.artifact import ArtifactRecord
from model_vault.utils.formatting import format_size, format_timestamp


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "InvalidInputError": [
            "• The URL must start with http:// or https:// and end with the "
            "artifact extension (e.g. '.gguf').",
            "• Run `model-vault list` to see the names known to the catalog.",
        ],
        "NameCollisionError": [
            "• Choose a different name with --name.",
            "• Or delete the existing artifact with `model-vault delete <name>`.",
        ],
        "DownloadFailedError": [
            "• Check your internet connection.",
            "• The server may have rejected the request; check the URL in a browser.",
            "• Raise `read_timeout` in the configuration for slow connections.",
        ],
        "DeleteFailedError": [
            "• Check the permissions of the artifact directory.",
            "• Make sure no other program has the file open.",
        ],
        "ConfigurationError": [
            "• Run `model-vault --show-config` to inspect your settings.",
            "• Run `model-vault init --force` to write a fresh configuration.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        if key == "artifact_root" and not value:
            value = "[dim](platform default)[/dim]"
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_catalog_table(records: list[ArtifactRecord], root: Path):
    """Displays the artifacts currently in the catalog."""
    console = Console()
    if not records:
        console.print(f"[yellow]No models found in[/yellow] [dim]{root}[/dim]")
        return

    table = Table(title=f"Models in {root}", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right", style="green")
    table.add_column("Listed", style="dim")
    table.add_column("ID", style="dim")

    for record in records:
        table.add_row(
            record.name,
            format_size(record.size_bytes),
            format_timestamp(record.acquired_at),
            record.id[:8],
        )

    total = sum(r.size_bytes for r in records)
    console.print(table)
    console.print(
        f"[bold]{len(records)}[/bold] model(s), [green]{format_size(total)}[/green]"
        " on disk."
    )
