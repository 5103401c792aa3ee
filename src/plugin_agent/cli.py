"""Command-line interface for the plugin agent."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .agent import Agent
from .binding import AgentConfig, ForbiddenError
from .collectors import SystemPlugin
from .collectors.system import DEFAULT_GUID
from .config import Settings
from .utils import get_logger, setup_logging

app = typer.Typer(
    name="plugin-agent",
    help="Metrics reporting agent for the platform plugin API",
    add_completion=False,
)

console = Console()
logger = get_logger("cli")


def load_config(settings: Settings, config_path: Optional[Path]) -> AgentConfig:
    """Load the agent config file and apply environment overrides."""
    path = config_path or settings.config_path
    return AgentConfig.from_env(AgentConfig.load(str(path)))


@app.command()
def run(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Agent config file"),
    license_key: Optional[str] = typer.Option(None, "--license-key", "-k", help="Platform license key"),
    guid: str = typer.Option(DEFAULT_GUID, "--guid", help="Component GUID"),
    name: str = typer.Option("System", "--name", "-n", help="Component name"),
):
    """Run the bundled system metrics plugin."""
    settings = Settings()
    config = load_config(settings, config_path)
    setup_logging(settings.log_level, settings.log_file, config.log_config)

    key = license_key or settings.license_key
    if not key:
        console.print("[red]No license key. Pass --license-key or set PLUGIN_AGENT_LICENSE_KEY[/red]")
        raise typer.Exit(1)

    agent = Agent(key, settings.version, settings.host, settings.pid, config=config)
    plugin = SystemPlugin(guid=guid)
    plugin.register(agent, name=name)

    console.print(f"[bold]Starting plugin agent on {settings.host}[/bold]")
    console.print(f"Endpoint: {config.endpoint}")

    try:
        agent.run(plugin)
    except KeyboardInterrupt:
        console.print("Stopped")
    except ForbiddenError as e:
        logger.critical(str(e))
        console.print(Panel(str(e), title="License key rejected", style="red"))
        raise typer.Exit(1)
    finally:
        agent.close()


@app.command("config")
def show_config(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Agent config file"),
):
    """Show the effective agent configuration."""
    settings = Settings()
    config = load_config(settings, config_path)

    table = Table(title="Agent Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("endpoint", config.endpoint)
    table.add_row("log_config", str(config.log_config))
    table.add_row("deliver_cycle", str(config.deliver_cycle))
    table.add_row("poll_cycle", str(config.poll_cycle))
    table.add_row("timeout", str(config.timeout))
    table.add_row("license_key", "set" if settings.license_key else "not set")

    console.print(table)


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path("config.yml"), help="Where to write the config"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
):
    """Write a config file with default values."""
    if path.exists() and not force:
        console.print(f"[red]{path} already exists. Use --force to overwrite[/red]")
        raise typer.Exit(1)

    AgentConfig().to_yaml(str(path))
    console.print(f"[green]Config saved to: {path}[/green]")


if __name__ == "__main__":
    app()
