"""
Image Lookup Server - serve random image URLs per category as an MCP tool.

Usage:
    GITHUB_FILE_URL=https://raw.githubusercontent.com/<owner>/<repo>/<branch>/image_links.json \\
        python app/lookup_server.py

The manifest is loaded once at startup. The server speaks MCP over stdio and
exposes a single tool, get_image_link. Console output goes to stderr.
"""
from __future__ import annotations

import asyncio
import sys
from typing import Any, Dict, List

import mcp.types as types
from dotenv import load_dotenv
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from config.constants import SERVER_NAME, SERVER_VERSION
from config.exceptions import ToolCallError
from config.settings import LookupConfig
from services import ImageStore, RetrievalService
from utils.console import Console
from utils.logging import get_logger, init_logging

init_logging("lookup")
logger = get_logger(__name__)
console = Console(stream=sys.stderr)


def build_server(service: RetrievalService) -> Server:
    """Register the retrieval service's tools on an MCP server."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [types.Tool(**tool) for tool in service.list_tools()]

    # Argument coercion (num defaults to 1) happens in the service
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        result = service.call_tool(name, arguments)
        texts = [item["text"] for item in result["content"]]
        if result["isError"]:
            # The server turns a raised error into an isError result carrying its message
            raise ToolCallError("\n".join(texts))
        return [types.TextContent(type="text", text=text) for text in texts]

    return server


def build_service(cfg: LookupConfig) -> RetrievalService:
    """Load the manifest and wrap it; an unloadable manifest still yields a service."""
    console.start("Image Lookup Server", f"Fetching manifest from {cfg.manifest_url}")
    store = ImageStore.from_config(cfg)
    if store.load():
        console.store_loaded(store.categories, store.total_images)
    else:
        console.warning(
            "No data was loaded",
            store.last_error or "Check GITHUB_FILE_URL and the manifest format",
        )
    return RetrievalService(store)


async def serve(server: Server) -> None:
    """Run the server on stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> int:
    try:
        load_dotenv()
        server = build_server(build_service(LookupConfig.from_env()))
        console.info("Lookup server running on stdio")
        asyncio.run(serve(server))
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception("Fatal error running server: %s", e)
        console.error("Fatal error running server", str(e))
        return 1


if __name__ == "__main__":
    exit(main())
