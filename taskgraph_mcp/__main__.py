"""Entry point for ``python -m taskgraph_mcp``."""

from taskgraph_mcp.server import run

run()
