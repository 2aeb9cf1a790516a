"""Turn raw history exports into validated HistoryEntry records"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from .exceptions import FormatError
from .models import HistoryEntry

logger = logging.getLogger(__name__)

# Location of the watch history array inside a downloaded activity archive
TAKEOUT_HISTORY_PATH = ("YouTube", "My Activity", "YouTube History")


def normalize(raw: Any) -> list[HistoryEntry]:
    """
    Validate a raw history export

    Args:
        raw: Decoded JSON; must be an array

    Returns:
        One HistoryEntry per object in the array. Missing or malformed fields
        become absent values; non-object elements are dropped.

    Raises:
        FormatError: if the top level is not an array
    """
    if not isinstance(raw, list):
        raise FormatError("Invalid JSON format. Expected an array of YouTube entries.")

    entries = []
    skipped = 0
    for item in raw:
        if not isinstance(item, dict):
            skipped += 1
            continue
        try:
            entries.append(HistoryEntry.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping unreadable history entry: {e}")
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} history elements that were not entry objects")
    logger.info(f"Loaded {len(entries)} entries")
    return entries


def load_history_file(path: Union[str, Path]) -> list:
    """
    Read a watch history JSON export from disk

    Raises:
        FileNotFoundError: if the file does not exist
        FormatError: if the file is not JSON or not an array
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FormatError(f"Failed to parse JSON file: {e}") from e

    if not isinstance(data, list):
        raise FormatError("Invalid JSON format. Expected an array of YouTube entries.")

    logger.info(f"Loaded {len(data)} entries from {path.name}")
    return data


def extract_takeout_history(archive: Any) -> list:
    """Pull the watch history array out of a decoded activity archive"""
    node = archive
    for key in TAKEOUT_HISTORY_PATH:
        if not isinstance(node, dict):
            return []
        node = node.get(key)
    return node if isinstance(node, list) else []
