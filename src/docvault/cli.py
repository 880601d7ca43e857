from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from alembic import command
from alembic.config import Config

from docvault.db import DBEngine
from docvault.db.settings import DBSettings

app = typer.Typer(no_args_is_help=True, add_completion=False, help="docvault service commands")
db_app = typer.Typer(no_args_is_help=True, add_completion=False, help="Database migrations")
app.add_typer(db_app, name="db")

ALEMBIC_DIR = "migrations"
ALEMBIC_INI = "alembic.ini"


def _load_config(project_root: Path, database_url: Optional[str]) -> Config:
    cfg = Config(str(project_root / ALEMBIC_INI))
    if database_url:
        cfg.set_main_option("sqlalchemy.url", DBSettings(database_url=database_url).resolved_database_url)
    cfg.set_main_option("script_location", str(project_root / ALEMBIC_DIR))
    return cfg


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes (local only)"),
):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("docvault.api.fastapi:create_app", factory=True, host=host, port=port, reload=reload)


@app.command("check-config")
def check_config():
    """Report which settings are missing; exits 1 if the app would refuse to start."""
    from docvault.auth import IdentitySettings
    from docvault.storage import StorageSettings

    identity = IdentitySettings()
    problems = identity.missing()
    try:
        url = DBSettings().resolved_database_url
        typer.echo(f"database: {url.split('://', 1)[0]}")
    except ValueError as exc:
        problems.append(str(exc))
    storage = StorageSettings()
    typer.echo(f"storage backend: {storage.backend or 'auto'}")

    if problems:
        for p in problems:
            typer.echo(f"missing: {p}", err=True)
        raise typer.Exit(code=1)
    typer.echo("ok")


@db_app.command()
def upgrade(
    revision: str = typer.Argument("head"),
    project_root: Path = typer.Option(Path.cwd(), help="Directory holding alembic.ini"),
    database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
):
    """Apply migrations up to REVISION."""
    command.upgrade(_load_config(project_root.resolve(), database_url), revision)


@db_app.command()
def downgrade(
    revision: str = typer.Argument("-1"),
    project_root: Path = typer.Option(Path.cwd(), help="Directory holding alembic.ini"),
    database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
):
    """Revert migrations down to REVISION."""
    command.downgrade(_load_config(project_root.resolve(), database_url), revision)


@db_app.command("create-tables")
def create_tables(
    database_url: Optional[str] = typer.Option(None, help="Override DB_DATABASE_URL / DATABASE_URL"),
):
    """Create tables straight from the models (local development, no migrations)."""
    import docvault.documents.models  # noqa: F401

    settings = DBSettings(database_url=database_url) if database_url else DBSettings()

    async def _run() -> None:
        engine = DBEngine(settings)
        try:
            await engine.create_all()
        finally:
            await engine.dispose()

    asyncio.run(_run())
    typer.echo("tables created")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
