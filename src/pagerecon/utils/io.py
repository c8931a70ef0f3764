"""
I/O utilities for the page reconstruction pipeline.

Handles:
- Loading source bytes from disk or over HTTP
- File type detection
- JSON serialization
- Directory management
"""

import json
import logging
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Union, Any

import numpy as np

from ..exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)


# ============================================================================
# Source Loading
# ============================================================================

def load_bytes(path: Union[str, Path]) -> bytes:
    """
    Read a source document from disk.

    Raises:
        SourceUnavailableError: If the file is missing or unreadable
    """
    path = Path(path)
    if not path.is_file():
        raise SourceUnavailableError(f"File not found: {path}")

    try:
        data = path.read_bytes()
    except OSError as e:
        raise SourceUnavailableError(f"Could not read {path}: {e}") from e

    logger.debug(f"Loaded {len(data)} bytes from {path}")
    return data


def fetch_bytes(
    url: str,
    timeout: float = 30.0,
    user_agent: str = "pagerecon/1.0"
) -> bytes:
    """
    Fetch a source document over HTTP(S).

    Args:
        url: Document URL
        timeout: Request timeout in seconds
        user_agent: User-Agent header value

    Returns:
        Response body

    Raises:
        SourceUnavailableError: On network failure or non-success status
    """
    import requests

    logger.info(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": user_agent})
    except requests.RequestException as e:
        raise SourceUnavailableError(f"Failed to fetch {url}: {e}") from e

    if not response.ok:
        raise SourceUnavailableError(f"HTTP error {response.status_code}")

    logger.debug(f"Fetched {len(response.content)} bytes from {url}")
    return response.content


def is_url(source: Union[str, Path]) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


# ============================================================================
# JSON Serialization
# ============================================================================

class EnhancedJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy scalars, enums and dataclasses."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, Enum):
            return obj.value
        if hasattr(obj, '__dataclass_fields__'):
            return asdict(obj)
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def to_json(data: Any, indent: int = 2, ensure_ascii: bool = False) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=ensure_ascii, cls=EnhancedJSONEncoder)


def save_json(
    data: Any,
    output_path: Union[str, Path],
    indent: int = 2,
    ensure_ascii: bool = False
) -> Path:
    """
    Save data to a JSON file.

    Args:
        data: Data to serialize (dict, list, dataclass, etc.)
        output_path: Path to save the JSON file
        indent: Indentation level for pretty printing
        ensure_ascii: If True, escape non-ASCII characters

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii, cls=EnhancedJSONEncoder)

    logger.debug(f"Saved JSON: {output_path}")
    return output_path


# ============================================================================
# Directory Management
# ============================================================================

def ensure_dir(path: Union[str, Path]) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


# ============================================================================
# File Type Detection
# ============================================================================

def detect_input_type(source: Union[str, Path]) -> str:
    """
    Detect the document type from a path or URL suffix.

    Returns:
        One of: 'pdf', 'docx', 'unknown'
    """
    name = str(source).split("?", 1)[0].split("#", 1)[0]
    suffix = Path(name).suffix.lower()
    if suffix == '.pdf':
        return 'pdf'
    elif suffix == '.docx':
        return 'docx'
    return 'unknown'
