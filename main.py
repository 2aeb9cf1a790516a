#!/usr/bin/env python3
"""Main entry point for Watch History Stats MCP Server

Supports multiple transport modes:
- stdio: For local Claude Desktop usage
- streamable-http: For remote access

`python main.py report <watch-history.json>` prints a text report instead.
"""

import asyncio
import sys
import os

from watchstats.fastmcp_server import HOST, PORT, mcp, render_report


def run_server(transport: str) -> None:
    print(f"Starting Watch History Stats MCP Server with {transport} transport...", file=sys.stderr)

    if transport == "stdio":
        mcp.run(transport=transport)
    else:
        mcp.run(transport=transport, host=HOST, port=PORT)


if __name__ == "__main__":
    if len(sys.argv) > 2 and sys.argv[1] == "report":
        print(asyncio.run(render_report(sys.argv[2])))
        sys.exit(0)

    # Get transport mode from environment or command line
    transport = os.getenv("MCP_TRANSPORT", "stdio")

    if len(sys.argv) > 1:
        transport = sys.argv[1]

    run_server(transport)
