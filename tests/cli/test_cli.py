"""docvault CLI."""

from typer.testing import CliRunner

from docvault.cli import app

runner = CliRunner()


def test_check_config_reports_missing_identity(monkeypatch):
    monkeypatch.delenv("IDENTITY_URL", raising=False)
    monkeypatch.delenv("IDENTITY_PUBLIC_KEY", raising=False)
    monkeypatch.setenv("DB_DATABASE_URL", "sqlite:///:memory:")
    result = runner.invoke(app, ["check-config"])
    assert result.exit_code == 1
    assert "IDENTITY_URL" in result.output


def test_check_config_ok(monkeypatch):
    monkeypatch.setenv("IDENTITY_URL", "https://idp.test")
    monkeypatch.setenv("IDENTITY_PUBLIC_KEY", "anon")
    monkeypatch.setenv("DB_DATABASE_URL", "sqlite:///:memory:")
    result = runner.invoke(app, ["check-config"])
    assert result.exit_code == 0, result.output
    assert "database: sqlite+aiosqlite" in result.output
    assert result.output.strip().endswith("ok")


def test_create_tables(tmp_path):
    db_file = tmp_path / "docs.db"
    result = runner.invoke(app, ["db", "create-tables", "--database-url", f"sqlite:///{db_file}"])
    assert result.exit_code == 0, result.output
    assert db_file.exists()


def test_upgrade_runs_migrations(tmp_path, monkeypatch):
    import sqlite3
    from pathlib import Path

    monkeypatch.setenv("ALEMBIC_USE_APP_LOGGING", "0")
    project_root = Path(__file__).resolve().parents[2]
    db_file = tmp_path / "migrated.db"
    result = runner.invoke(
        app,
        ["db", "upgrade", "--project-root", str(project_root), "--database-url", f"sqlite:///{db_file}"],
    )
    assert result.exit_code == 0, result.output
    tables = {r[0] for r in sqlite3.connect(db_file).execute("select name from sqlite_master where type='table'")}
    assert "documents" in tables


def test_serve_invokes_uvicorn(mocker):
    run = mocker.patch("uvicorn.run")
    result = runner.invoke(app, ["serve", "--port", "9000"])
    assert result.exit_code == 0, result.output
    run.assert_called_once_with(
        "docvault.api.fastapi:create_app", factory=True, host="127.0.0.1", port=9000, reload=False
    )
