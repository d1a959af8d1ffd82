#!/usr/bin/env python3
"""Command line entry point for D1 Manager."""
import json
import os
from typing import Optional

import typer
from pydantic import SecretStr
from typing_extensions import Annotated

from d1_manager.api.container import Container
from d1_manager.backends import RequestCredentials
from d1_manager.backends.normalizer import discover_columns, project_rows
from d1_manager.common.errors import D1ManagerError
from d1_manager.common.settings import settings
from d1_manager.console import console, print_error, print_success, render_rows

app = typer.Typer(
    name="d1-manager",
    help="Browse and edit local or remote D1 databases.",
    no_args_is_help=True,
    add_completion=False,
)

LocalDatabaseOption = Annotated[
    Optional[str], typer.Option("--local-database", help="Path to the local SQLite database")
]
AccountOption = Annotated[
    Optional[str], typer.Option("--account-id", envvar="CF_ACCOUNT_ID", help="Cloudflare account id")
]
TokenOption = Annotated[
    Optional[str], typer.Option("--api-token", envvar="CF_API_TOKEN", help="Cloudflare API token")
]
DatabaseOption = Annotated[
    Optional[str], typer.Option("--database-id", envvar="CF_DATABASE_ID", help="Remote D1 database id")
]


@app.callback()
def global_callback(
    env: Annotated[Optional[str], typer.Option("--env", "-e", help="Environment name, loads .env.<name>")] = None,
):
    """
    D1 Manager CLI Entry Point.
    """
    if env:
        settings.configure_env(env)


def _container(local_database: Optional[str]) -> Container:
    if local_database:
        settings.local_database = local_database
    return Container(settings)


def _credentials(account_id, api_token, database_id) -> RequestCredentials:
    return RequestCredentials(
        account_id=account_id,
        api_token=SecretStr(api_token) if api_token else None,
        database_id=database_id,
    )


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option(help="Host to bind to")] = None,
    port: Annotated[Optional[int], typer.Option(help="Port to bind to")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Enable auto-reload (development)")] = False,
    local_database: LocalDatabaseOption = None,
):
    """
    Start the HTTP API.
    """
    import uvicorn

    if local_database:
        # Reload workers re-read settings from the environment.
        settings.local_database = local_database
        os.environ["D1_LOCAL_DATABASE"] = local_database

    uvicorn.run(
        "d1_manager.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def query(
    sql: Annotated[str, typer.Argument(help="SQL statement to run")],
    local_database: LocalDatabaseOption = None,
    account_id: AccountOption = None,
    api_token: TokenOption = None,
    database_id: DatabaseOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the canonical result as JSON")] = False,
):
    """
    Run one statement against the remote database if credentials are given, else the local one.
    """
    container = _container(local_database)
    try:
        result = container.database.run_query(
            _credentials(account_id, api_token, database_id), sql
        )
    except D1ManagerError as e:
        print_error(e.message)
        raise typer.Exit(code=1)
    finally:
        container.close()

    if as_json:
        console.print_json(json.dumps(result.model_dump(), default=str))
        return
    if result.columns:
        console.print(render_rows(result.columns, result.rows))
    else:
        print_success("Statement executed")


@app.command()
def tables(
    local_database: LocalDatabaseOption = None,
    account_id: AccountOption = None,
    api_token: TokenOption = None,
    database_id: DatabaseOption = None,
):
    """
    List the tables of the selected database.
    """
    container = _container(local_database)
    try:
        rows = container.database.list_tables(
            _credentials(account_id, api_token, database_id)
        )
    except D1ManagerError as e:
        print_error(e.message)
        raise typer.Exit(code=1)
    finally:
        container.close()

    columns = discover_columns(rows)
    console.print(render_rows(columns, project_rows(rows, columns), title="Tables"))


if __name__ == "__main__":
    app()
