"""Main entry point for the Slack relay."""

from rich.console import Console

from slack_relay.config import load_settings
from slack_relay.models import create_db_engine, init_db
from slack_relay.service import RelayService

console = Console()


def main():
    """Prepare the database and report whether the relay can serve requests."""
    console.print("[bold green]🚀 Starting Slack relay...[/bold green]")

    settings = load_settings().validate()

    engine = create_db_engine(settings.database_url)
    init_db(engine)
    console.print("[green]✓[/green] Database initialized")

    service = RelayService.from_settings(settings, engine=engine)
    console.print(f"[green]✓[/green] Owner mode: {settings.owner_mode}")

    outcome = service.health()
    if not outcome.ok:
        console.print(f"[bold red]✗ Relay unhealthy:[/bold red] {outcome.error.message}")
        raise SystemExit(1)

    workspaces = service.list_workspaces().unwrap()
    console.print(f"[bold green]✓ Relay ready with {len(workspaces)} active workspace(s).[/bold green]")


if __name__ == "__main__":
    main()
