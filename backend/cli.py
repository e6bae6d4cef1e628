"""
POS Core CLI.

Command-line interface for database setup, owner tokens and order exports.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

from shared.config.constants import QuickFilter
from shared.config.settings import settings

app = typer.Typer(
    name="pos-core",
    help="Restaurant POS Core CLI",
    add_completion=False,
)
console = Console()

DATE_FORMATS = ["%Y-%m-%d"]


def _open_store(database_url: Optional[str]):
    from shared.infrastructure.db import create_db_engine, create_session_factory
    from rest_api.repositories import SqlDocumentStore

    engine = create_db_engine(database_url or settings.database_url)
    return engine, SqlDocumentStore(create_session_factory(engine))


# =============================================================================
# Database Commands
# =============================================================================


@app.command()
def init_db(
    database_url: Optional[str] = typer.Option(None, help="Overrides DATABASE_URL"),
):
    """Create the document store tables."""
    from sqlalchemy.exc import SQLAlchemyError
    from rest_api.models import Base
    from shared.infrastructure.db import create_db_engine

    engine = create_db_engine(database_url or settings.database_url)
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Could not create tables: {e}[/red]")
        raise typer.Exit(1)
    finally:
        engine.dispose()
    console.print("[green]✓ Tables created/verified[/green]")


# =============================================================================
# Auth Commands
# =============================================================================


@app.command()
def issue_token(
    user_id: str = typer.Argument(..., help="Owner user id (also the restaurant id)"),
    email: Optional[str] = typer.Option(None, help="Owner email, used for the default restaurant name"),
    ttl_minutes: int = typer.Option(
        settings.jwt_access_token_expire_minutes, help="Token lifetime in minutes"
    ),
):
    """Issue an owner access token (local development)."""
    from shared.security.auth import issue_owner_token

    if settings.environment == "production":
        console.print("[red]Refusing to issue tokens in production[/red]")
        raise typer.Exit(1)

    token = issue_owner_token(user_id, email=email, ttl_seconds=ttl_minutes * 60)
    typer.echo(token)


# =============================================================================
# Order Commands
# =============================================================================


def _load_orders(database_url: Optional[str], restaurant_id: str):
    from rest_api.services.domain import OrderService
    from shared.utils.exceptions import AppException

    engine, store = _open_store(database_url)
    try:
        return OrderService(store, restaurant_id).list_orders()
    except AppException as e:
        console.print(f"[red]✗ {e.detail}[/red]")
        raise typer.Exit(1)
    finally:
        engine.dispose()


@app.command()
def export_orders(
    restaurant_id: str = typer.Argument(..., help="Restaurant id"),
    start: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="First day (inclusive)"),
    end: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Last day (inclusive)"),
    filter: str = typer.Option(QuickFilter.ALL, help="all, pending, paid or completed"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File or directory to write"),
    database_url: Optional[str] = typer.Option(None, help="Overrides DATABASE_URL"),
):
    """Export a restaurant's orders to CSV (stdout unless --output is given)."""
    from rest_api.services.analytics import (
        export_filename,
        export_rows,
        filter_orders,
        orders_in_window,
        to_csv,
    )

    if filter not in QuickFilter.CHOICES:
        console.print(f"[red]Unknown filter: {filter}[/red]")
        raise typer.Exit(2)

    tz = settings.local_timezone
    orders = filter_orders(_load_orders(database_url, restaurant_id), filter)
    if start or end:
        orders = orders_in_window(
            orders, start.date() if start else None, end.date() if end else None, tz
        )

    content = to_csv(export_rows(orders, tz))
    if output is None:
        typer.echo(content, nl=False)
        return

    if output.is_dir():
        output = output / export_filename(datetime.now(tz).date())
    output.write_text(content, encoding="utf-8")
    console.print(f"[green]✓ Exported {len(orders)} orders to {output}[/green]")


@app.command()
def summary(
    restaurant_id: str = typer.Argument(..., help="Restaurant id"),
    database_url: Optional[str] = typer.Option(None, help="Overrides DATABASE_URL"),
):
    """Show revenue figures and order recency for a restaurant."""
    from rest_api.services.analytics import (
        group_by_recency,
        status_counts,
        summarize,
        today_revenue,
        total_revenue,
    )
    from shared.utils.validators import round_money

    orders = _load_orders(database_url, restaurant_id)
    now = datetime.now(timezone.utc)
    overall = summarize(orders)

    table = Table(title=f"Restaurant {restaurant_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Orders", str(overall.order_count))
    table.add_row("Total revenue", str(overall.total))
    table.add_row("Paid revenue", str(overall.paid))
    table.add_row("Average order", str(round_money(overall.average_order_value)))
    table.add_row("Today", str(today_revenue(orders, now, settings.local_timezone)))
    for status, count in status_counts(orders).items():
        table.add_row(f"Status: {status}", str(count))
    console.print(table)

    recency = Table(title="By recency")
    recency.add_column("Bucket", style="cyan")
    recency.add_column("Orders", justify="right")
    recency.add_column("Revenue", justify="right")
    for bucket, bucket_orders in group_by_recency(orders, now).items():
        recency.add_row(bucket, str(len(bucket_orders)), str(total_revenue(bucket_orders)))
    console.print(recency)


if __name__ == "__main__":
    app()
