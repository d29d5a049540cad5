"""Library source loader for DocDesk.

Loads the library-name to documentation-URL mapping from a YAML file.
"""

import yaml
from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import urlparse
import logging

logger = logging.getLogger(__name__)

DEFAULT_SOURCES_FILE = Path(__file__).parent / "libraries.yaml"


def is_valid_source_url(url: str) -> bool:
    """Check that a source URL is absolute http(s)."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_library_sources(path: Optional[Union[str, Path]] = None) -> Dict[str, str]:
    """Load library sources from a YAML file.

    The file holds a ``libraries`` mapping of library name to URL. Entries
    with a non-http(s) URL are skipped.

    Args:
        path: YAML file to read. Defaults to ``libraries.yaml`` next to this module.

    Returns:
        Dictionary mapping library names (as written) to URLs
    """
    yaml_file = Path(path) if path else DEFAULT_SOURCES_FILE

    if not yaml_file.exists():
        logger.warning(f"Library sources file not found: {yaml_file}")
        return {}

    try:
        with open(yaml_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML file {yaml_file}: {e}")
        return {}

    if not isinstance(data, dict) or not isinstance(data.get('libraries'), dict):
        logger.error(f"Empty or invalid library sources file: {yaml_file}")
        return {}

    sources = {}
    for name, url in data['libraries'].items():
        if not isinstance(url, str) or not is_valid_source_url(url):
            logger.warning(f"Skipping library {name!r} in {yaml_file}: invalid URL {url!r}")
            continue
        sources[str(name)] = url

    logger.info(f"Loaded {len(sources)} library sources from {yaml_file}")
    return sources
