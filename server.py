#!/usr/bin/env python3
"""YNAB MCP Server - Provides access to YNAB budget data via MCP protocol."""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import ServerCapabilities, TextContent, Tool

from arguments import normalize_arguments
from config import SERVER_NAME, SERVER_VERSION, Settings, configure_logging, load_settings
from summaries import should_summarize
from tools import TOOL_BINDINGS, TOOLS_BY_NAME
from ynab_client import YnabClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Settings], YnabClient]


def default_client_factory(settings: Settings) -> YnabClient:
    return YnabClient(
        settings.api_token,
        base_url=settings.base_url,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )


def _text(payload: Any) -> List[TextContent]:
    if isinstance(payload, str):
        return [TextContent(type="text", text=payload)]
    return [TextContent(type="text", text=json.dumps(payload, indent=2))]


class Dispatcher:
    """Route tool calls to YNAB and shape the results.

    The dispatcher owns the YNAB client. It is created lazily on the
    first tool call so the server can start and list tools without a
    token configured.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: ClientFactory = default_client_factory,
    ):
        self.settings = settings
        self.client_factory = client_factory
        self.client: Optional[YnabClient] = None
        self.init_error: Optional[str] = None

    def ensure_client(self) -> Optional[str]:
        """Build the client if needed and return an error message if unavailable."""
        if self.client is not None:
            return None

        if not self.settings.api_token:
            self.init_error = (
                "YNAB_API_TOKEN environment variable is required. "
                "Get a personal access token from https://app.ynab.com/settings/developer"
            )
            return self.init_error

        try:
            self.client = self.client_factory(self.settings)
            self.init_error = None
        except Exception as e:
            self.client = None
            self.init_error = str(e)

        return self.init_error

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        """Execute a tool and return the results."""
        binding = TOOLS_BY_NAME.get(name)
        if binding is None:
            return _text(f"Error: Unknown tool '{name}'")

        init_error = self.ensure_client()
        if init_error or self.client is None:
            return _text(
                "Error: YNAB client not initialized. "
                f"Configuration failed: {init_error or 'unknown error'}"
            )

        try:
            args = normalize_arguments(
                arguments or {},
                required=binding.required,
                default_budget_id=self.settings.default_budget_id,
            )
            logger.debug("Executing tool %s with %s", name, args)

            data = await binding.call(self.client, args)

            if binding.summarize is not None:
                logger.debug(
                    "Summarizing %s response (over threshold: %s)",
                    name, should_summarize(data),
                )
                return _text(binding.summarize(data, args))

            if should_summarize(data):
                logger.warning("%s returned a large unsummarized payload", name)
            return _text(data)

        except Exception as e:
            logger.error("Tool execution failed: %s: %s", name, e)
            return _text(f"Error executing {name}: {e}")


def create_server(dispatcher: Dispatcher) -> Server:
    """Build the MCP server and register the tool handlers on it."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        """List all available tools."""
        return [binding.tool for binding in TOOL_BINDINGS]

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        return await dispatcher.dispatch(name, arguments)

    return server


async def main():
    """Main entry point for the server."""
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Using YNAB API base URL: %s", settings.base_url)

    dispatcher = Dispatcher(settings)
    server = create_server(dispatcher)

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=SERVER_VERSION,
                    capabilities=ServerCapabilities(
                        tools={}
                    )
                )
            )
    finally:
        await dispatcher.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
