#!/usr/bin/env python3
"""
Main CLI entry point for Eventbook.
"""

import asyncio
import json
import os
import sys

import click
import uvicorn

from eventbook import __version__
from eventbook.logging import configure_logging, get_logger

logger = get_logger(__name__)

CREATE_USER_MUTATION = """
mutation CreateUser($userInput: UserInput!) {
  createUser(userInput: $userInput) {
    id
    email
  }
}
"""


@click.group()
@click.version_option(version=__version__, prog_name="eventbook")
def cli() -> None:
    """Eventbook CLI - run the server and manage users."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=3000, type=int, help="Port to bind to (default: 3000)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the Eventbook API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info("Starting Eventbook API server", host=host, port=port, reload=reload)

    # Settings are read at import time by the app module
    if log_level == "debug":
        os.environ["EVENTBOOK_DEBUG"] = "true"
        os.environ["EVENTBOOK_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("EVENTBOOK_DEBUG", "false")
        os.environ.setdefault("EVENTBOOK_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "eventbook.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command()
def schema() -> None:
    """Print the GraphQL schema (SDL)."""
    from eventbook.graphql.schema import print_schema

    click.echo(print_schema())


@cli.command("create-user")
@click.option("--email", required=True, help="Email address of the new user")
@click.password_option(help="Password of the new user")
def create_user(email: str, password: str) -> None:
    """Register a user, e.g. the default event owner."""
    from eventbook.graphql.schema import execute

    configure_logging()

    result = asyncio.run(
        execute(
            CREATE_USER_MUTATION,
            variables={"userInput": {"email": email, "password": password}},
        )
    )

    if result.get("errors"):
        for error in result["errors"]:
            click.echo(f"✗ {error['message']}", err=True)
        sys.exit(1)

    click.echo(json.dumps(result["data"]["createUser"], indent=2))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
