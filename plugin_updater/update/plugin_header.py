"""
Plugin header parser for extracting metadata from a plugin's main file
"""

import logging
import re
from pathlib import Path
from typing import Optional

from plugin_updater.update.models import PluginData

logger = logging.getLogger(__name__)

# Headers are only read from the start of the file
HEADER_READ_BYTES = 8192

HEADER_FIELDS = {
    "name": "Plugin Name",
    "plugin_uri": "Plugin URI",
    "version": "Version",
    "description": "Description",
    "author": "Author",
    "author_uri": "Author URI",
    "tested_up_to": "Tested up to",
    "requires_wp": "Requires at least",
}


def _header_value(text: str, header: str) -> str:
    pattern = re.compile(
        rf"^(?:[ \t]*<\?php)?[ \t/*#@]*{re.escape(header)}:(.*)$",
        re.MULTILINE | re.IGNORECASE,
    )
    match = pattern.search(text)
    if not match:
        return ""
    # Drop a trailing comment close ("*/") and surrounding whitespace
    value = re.sub(r"\s*(?:\*/|\?>).*$", "", match.group(1))
    return value.strip()


def parse_plugin_header(text: str) -> PluginData:
    """
    Parse plugin header fields from file contents

    Args:
        text: Start of the plugin file

    Returns:
        PluginData with every header that was found
    """
    return PluginData(**{field: _header_value(text, header) for field, header in HEADER_FIELDS.items()})


def read_plugin_data(file_path: str | Path) -> Optional[PluginData]:
    """
    Read plugin header metadata from a plugin's main file

    Args:
        file_path: Path to the plugin's main file

    Returns:
        PluginData if successful, None if the file cannot be read or has no name header
    """
    path = Path(file_path)

    if not path.is_file():
        logger.error(f"Plugin file not found: {file_path}")
        return None

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read(HEADER_READ_BYTES)
    except OSError as e:
        logger.error(f"Failed to read plugin file {file_path}: {e}")
        return None

    data = parse_plugin_header(text)
    if not data.name:
        logger.error(f"Missing 'Plugin Name' header in {file_path}")
        return None

    return data
