from logging import Logger
from typing import Literal

import click
from fastmcp import FastMCP
from fastmcp.server.middleware.logging import LoggingMiddleware
from fastmcp.utilities.logging import get_logger

from git_conventions.errors import ConfigurationError
from git_conventions.servers.conventions import ConventionsServer
from git_conventions.utilities.policy import build_validator
from git_conventions.validators.conventions import ConventionValidator

logger: Logger = get_logger(name=__name__)


def new_mcp_server(validator: ConventionValidator | None = None) -> FastMCP[None]:
    conventions_server: ConventionsServer = ConventionsServer(validator=validator or build_validator(), logger=logger)

    mcp: FastMCP[None] = FastMCP[None](
        name="Git Conventions MCP",
        middleware=[LoggingMiddleware(include_payloads=True, logger=logger)],
    )

    _ = conventions_server.register_tools(fastmcp=mcp)

    return mcp


@click.command()
@click.option(
    "--mcp-transport",
    type=click.Choice(["stdio", "streamable-http"]),
    default="stdio",
    help="The transport to run the MCP server on",
)
def run_mcp(mcp_transport: Literal["stdio", "streamable-http"]):
    try:
        mcp: FastMCP[None] = new_mcp_server()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    mcp.run(transport=mcp_transport)


if __name__ == "__main__":
    run_mcp()
