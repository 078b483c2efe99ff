"""Shared FastMCP instance for the BusFinder server.

Tool modules register on `mcp` from here rather than from server.py, so
`python -m busfinder_mcp` does not import server.py twice.
"""

from mcp.server.fastmcp import FastMCP

mcp = FastMCP(
    "BusFinder Transit",
    instructions=(
        "City bus route finder - direct and connecting routes between stops, "
        "journey plans, and stop name autocomplete"
    ),
)
