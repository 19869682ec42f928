"""Typer CLI for quota-gate."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="quota-gate", help="quota-gate: tiered content access with lifetime quotas")
console = Console()


async def _open_db():
    from quota_gate.common.database import DatabaseManager
    from quota_gate.common.config import get_settings

    db = DatabaseManager(get_settings())
    await db.init()
    await db.create_all()
    return db


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(3001, help="Bind port"),
):
    """Start the quota-gate API server."""
    import uvicorn
    from quota_gate.app import create_app

    console.print(f"[bold green]Starting quota-gate on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command()
def health(
    url: str = typer.Option("http://localhost:3001", help="Server URL"),
):
    """Check quota-gate server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] v{data['version']}")
    except (httpx.HTTPError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def seed():
    """Insert demo users and content (idempotent)."""
    from quota_gate.seed import seed_demo_data

    async def _run():
        db = await _open_db()
        try:
            async with db.get_session() as session:
                return await seed_demo_data(session)
        finally:
            await db.close()

    created = asyncio.run(_run())
    console.print(
        f"[bold green]Seeded[/bold green] {created['users']} users, "
        f"{created['articles']} articles, {created['videos']} videos"
    )


@app.command()
def token(
    email: str = typer.Argument(..., help="Email of an existing user"),
):
    """Print a signed session token for a user."""
    from quota_gate.common.security import create_session_token
    from quota_gate.users.service import UserService

    async def _run():
        db = await _open_db()
        try:
            async with db.get_session() as session:
                return await UserService().get_by_email(session, email)
        finally:
            await db.close()

    user = asyncio.run(_run())
    if user is None:
        console.print(f"[bold red]No user[/bold red] {email}")
        raise typer.Exit(1)
    typer.echo(create_session_token(user.id))


@app.command()
def usage(
    email: str = typer.Argument(..., help="Email of an existing user"),
):
    """Show a user's lifetime usage against their tier limits."""
    from quota_gate.deps import get_content_service
    from quota_gate.users.service import UserService

    async def _run():
        db = await _open_db()
        try:
            async with db.get_session() as session:
                user = await UserService().get_by_email(session, email)
                if user is None:
                    return None
                return await get_content_service().usage_stats(session, user)
        finally:
            await db.close()

    stats = asyncio.run(_run())
    if stats is None:
        console.print(f"[bold red]No user[/bold red] {email}")
        raise typer.Exit(1)

    table = Table(title=f"{email} ({stats.membership_name}, tier {stats.membership_type})")
    table.add_column("Content")
    table.add_column("Used", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Remaining", justify="right")
    for kind, row in (("articles", stats.articles), ("videos", stats.videos)):
        table.add_row(
            kind,
            str(row.count),
            "unlimited" if row.unlimited else str(row.limit),
            "unlimited" if row.unlimited else str(row.remaining),
        )
    console.print(table)


if __name__ == "__main__":
    app()
