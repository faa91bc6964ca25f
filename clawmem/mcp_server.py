"""
ClawMem MCP Server.

Transport: stdio (launched by the host's plugin system).

Expected MCP Tool Return Format:
{
    "ok": bool,
    "text": str,             # Short human-readable summary
    "details": dict          # Counts, ids, or {"error": ...}
}
"""

import argparse
import logging
import os
import signal
from typing import Annotated, Any, Dict, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from .common.config import load_config
from .plugin import MemoryPlugin

logger = logging.getLogger("clawmem.mcp")


class MCPServerApp:
    """
    Exposes the plugin's direct actions as MCP tools.
    """

    def __init__(self, plugin: MemoryPlugin, mcp_server_name: str = "clawmem") -> None:
        """
        Args:
            plugin (MemoryPlugin): Plugin whose actions back the tools.
            mcp_server_name (str): The name of the MCP server.
        """
        self.plugin = plugin
        self.mcp = FastMCP(name=mcp_server_name)

        # ---------- MCP Tools: Search ---------- #
        @self.mcp.tool(
            name="memory_search",
            description=(
                "Search through persistent memories. Use when you need context about "
                "past work, decisions, or observations."
            ),
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False),
        )
        async def tool_memory_search(
            query: Annotated[str, Field(description="Search query")],
            limit: Annotated[int, Field(description="Max results (default: 10)", ge=1, le=100)] = 10,
        ) -> Dict[str, Any]:
            return (await self.plugin.memory_search(query, limit)).to_dict()

        # ---------- MCP Tools: Store ---------- #
        @self.mcp.tool(
            name="memory_store",
            description="Save important information in persistent memory.",
            annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False),
        )
        async def tool_memory_store(
            text: Annotated[str, Field(description="Information to remember")],
            type: Annotated[Optional[str], Field(
                description="Type: bugfix, decision, architecture, preference, code_change, observation"
            )] = None,
            importance: Annotated[int, Field(description="Importance 1-10 (default: 5)", ge=1, le=10)] = 5,
            session_key: Annotated[Optional[str], Field(description="Session to file the memory under")] = None,
        ) -> Dict[str, Any]:
            result = await self.plugin.memory_store(
                text, type=type, importance=importance, session_key=session_key
            )
            return result.to_dict()

        # ---------- MCP Tools: Get ---------- #
        @self.mcp.tool(
            name="memory_get",
            description="Get a specific memory by ID.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False),
        )
        async def tool_memory_get(
            id: Annotated[int, Field(description="Memory ID")],
        ) -> Dict[str, Any]:
            return (await self.plugin.memory_get(id)).to_dict()

        # ---------- MCP Tools: Delete ---------- #
        @self.mcp.tool(
            name="memory_delete",
            description="Delete a specific memory by ID. Use with caution.",
            annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True),
        )
        async def tool_memory_delete(
            id: Annotated[int, Field(description="Memory ID to delete")],
        ) -> Dict[str, Any]:
            return (await self.plugin.memory_delete(id)).to_dict()

        # ---------- MCP Tools: Status ---------- #
        @self.mcp.tool(
            name="memory_status",
            description="Check memory worker health and storage statistics.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False),
        )
        async def tool_memory_status() -> Dict[str, Any]:
            return (await self.plugin.memory_status()).to_dict()

    def run(self) -> None:
        """Runs the MCP server using stdio transport."""
        self.mcp.run(transport="stdio")


def main(argv=None) -> None:
    load_dotenv()
    config = load_config()

    parser = argparse.ArgumentParser(description="Run the ClawMem MCP server (stdio).")
    parser.add_argument(
        "--server-name",
        default=os.getenv("MCP_SERVER_NAME", config.server.mcp_server_name),
        help="Advertised MCP server name.",
    )
    parser.add_argument(
        "--worker-url",
        default=None,
        help="Memory worker URL (overrides config).",
    )
    args = parser.parse_args(argv)

    if args.worker_url:
        config.worker.url = args.worker_url

    logger.info("Using memory worker at %s", config.worker.url)
    app = MCPServerApp(MemoryPlugin.from_config(config), mcp_server_name=args.server_name)

    def _handle_shutdown(signum, frame):
        raise SystemExit(0)
    for sig in (signal.SIGINT, getattr(signal, "SIGTERM", None)):
        if sig is not None:
            signal.signal(sig, _handle_shutdown)

    app.run()


if __name__ == "__main__":
    main()
