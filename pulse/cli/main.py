import json

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from pulse.config.settings import get_settings
from pulse.db.database import get_engine, init_db
from pulse.services.retrieval import ItemRepository, get_items
from pulse.tools.logging_setup import setup_logging
from pulse.workflows.run_ingest import run_ingest

app = typer.Typer(help="Multi-source headline ingestion and retrieval")


@app.callback()
def main():
    setup_logging()


@app.command()
def doctor():
    """Check config + DB connectivity."""
    s = get_settings()
    print("[bold green]Config loaded[/bold green]")
    print("Sources:", s.source_names, "| Top N:", s.top_n)
    try:
        init_db()
    except Exception as e:
        print(f"[bold red]DB check failed[/bold red]: {e}")
        raise SystemExit(1)
    print("[bold green]DB OK[/bold green]")


@app.command()
def ingest():
    """Run one ingestion pass over every configured source."""
    try:
        summary = run_ingest()
    except Exception as e:
        print(f"[bold red]Run failed[/bold red]: {e}")
        raise SystemExit(1)
    print("[bold green]Run complete[/bold green]")
    print(summary.model_dump())


@app.command()
def items(
    limit: str = typer.Option(None, "--limit", "-n", help="Max items (clamped to 1..50, default 20)"),
    source: str = typer.Option(None, "--source", "-s", help="Only items from this source"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show the most recent items."""
    try:
        repo = ItemRepository(get_engine())
    except Exception as e:
        print(f"[bold red]Config error[/bold red]: {e}")
        raise SystemExit(1)

    status, body = get_items({"limit": limit, "source": source}, repo)
    if status != 200:
        print(json.dumps(body))
        raise SystemExit(1)

    if as_json:
        typer.echo(json.dumps(body, ensure_ascii=False))
        return

    table = Table(title="PULSE - The Latest")
    table.add_column("Source")
    table.add_column("Title")
    table.add_column("URL", overflow="fold")
    for it in body:
        table.add_row(it["source"], it["title"], it["url"] or "-")
    Console().print(table)


if __name__ == "__main__":
    app()
