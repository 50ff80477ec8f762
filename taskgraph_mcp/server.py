"""FastMCP server initialization for the task graph engine."""

from mcp.server.fastmcp import FastMCP

from taskgraph_mcp.utils.logs import setup_logging

# Initialize the MCP server
mcp = FastMCP("taskgraph_mcp")


def run() -> None:
    """Run the MCP server over stdio."""
    setup_logging()
    mcp.run()
