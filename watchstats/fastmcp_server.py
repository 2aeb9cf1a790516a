"""Watch History Stats MCP Server - FastMCP Implementation

Analyzes a YouTube watch history export: totals, watch time, top channels and
viewing-habit distributions. Supports both stdio and Streamable HTTP transports.
"""

import asyncio
import json
import logging
import os
from typing import Optional

from fastmcp import FastMCP

from .config import config
from .exceptions import CredentialError, FormatError, TakeoutError
from .normalizer import load_history_file
from .pipeline import AnalysisResult, analyze_history, enrichment_for
from .report import format_report
from .takeout import TakeoutDownloader
from .youtube_client import TRANSPORT_ERRORS

# Configure logging
logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Get configuration from environment
PORT = int(os.getenv("PORT", "8080"))
HOST = os.getenv("HOST", "0.0.0.0")

# Create FastMCP server
mcp = FastMCP(name=config.mcp_server_name)


def _log_progress(fraction: float) -> None:
    logger.info(f"Metadata: {fraction:.0%}")


async def analyze_file(path: str, enrich: bool = True) -> AnalysisResult:
    """Load an export file and run the analysis pipeline over it"""
    raw = load_history_file(path)
    fetcher, skip_reason = enrichment_for(enrich)
    return await analyze_history(raw, fetcher, _log_progress, skip_reason)


async def download_and_analyze(access_token: Optional[str] = None, enrich: bool = True) -> AnalysisResult:
    """Download history through Data Portability and run the analysis pipeline over it"""
    loop = asyncio.get_running_loop()
    # Building the discovery client does network I/O
    downloader = await loop.run_in_executor(None, TakeoutDownloader, access_token)
    raw = await downloader.download_history()
    fetcher, skip_reason = enrichment_for(enrich)
    return await analyze_history(raw, fetcher, _log_progress, skip_reason)


async def download_json(access_token: Optional[str] = None, enrich: bool = True) -> str:
    try:
        result = await download_and_analyze(access_token, enrich)
    except (CredentialError, TakeoutError, FormatError, *TRANSPORT_ERRORS) as e:
        logger.error(f"Download failed: {e}")
        return json.dumps({"error": f"Download failed: {e}"})

    return json.dumps(result.to_dict(), indent=2)


async def render_report(path: str, enrich: bool = True) -> str:
    """Text report for an export file, with the enrichment advisory appended"""
    result = await analyze_file(path, enrich)
    report = format_report(result.bundle)
    if result.advisory:
        report += f"\n\nNote: {result.advisory}"
    return report


@mcp.tool()
async def analyze_watch_history(path: str, enrich: bool = True) -> str:
    """Compute statistics for a YouTube watch history export file.

    Produces:
    - Total, YouTube and YouTube Music counts
    - Watch time split between regular videos and Shorts (needs YOUTUBE_API_KEY)
    - Top 10 channels for regular videos and for Shorts
    - Last 7 active days, hourly and weekday distributions, busiest time of day

    Args:
        path: Path to the watch-history.json file from Google Takeout
        enrich: Look up durations and channel details on YouTube (default: true)

    Returns:
        JSON string with the statistics bundle and any enrichment advisory
    """
    logger.info(f"Analyzing watch history: {path}")

    try:
        result = await analyze_file(path, enrich)
    except (FileNotFoundError, FormatError) as e:
        return json.dumps({"error": str(e)})

    return json.dumps(result.to_dict(), indent=2)


@mcp.tool()
async def download_watch_history(access_token: Optional[str] = None, enrich: bool = True) -> str:
    """Download watch history through Google Data Portability and analyze it.

    Starts an export job for YouTube activity, waits for it to finish, then
    runs the same analysis as analyze_watch_history. Available in regions
    where the Data Portability API is offered.

    Args:
        access_token: OAuth token with the dataportability.myactivity.youtube
            scope (default: GOOGLE_ACCESS_TOKEN)
        enrich: Look up durations and channel details on YouTube (default: true)

    Returns:
        JSON string with the statistics bundle and any enrichment advisory
    """
    return await download_json(access_token, enrich)


@mcp.tool()
async def watch_history_report(path: str, enrich: bool = True) -> str:
    """Summarize a YouTube watch history export as a readable text report.

    Args:
        path: Path to the watch-history.json file from Google Takeout
        enrich: Look up durations and channel details on YouTube (default: true)

    Returns:
        Plain-text report, followed by the enrichment advisory if any
    """
    try:
        return await render_report(path, enrich)
    except (FileNotFoundError, FormatError) as e:
        return f"Error: {e}"


# Startup message
logger.info("Watch History Stats MCP Server initialized")
logger.info(f"Server name: {config.mcp_server_name}")
missing_keys = config.validate_keys()
if missing_keys:
    logger.warning(f"Not configured: {', '.join(missing_keys)}; related features are disabled")
