from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization and JSON document persistence shared by the
locale store, the snapshot cache and the confidence repository.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def safe_mkdir(path: str) -> None:
    """Create a directory hierarchy if it does not already exist."""
    if path and not os.path.isdir(path):
        os.makedirs(path, exist_ok=True)

# -----------------------------------------------------------------------------
# JSON DOCUMENT API
# -----------------------------------------------------------------------------

def read_json_object(path: str) -> Dict[str, Any]:
    """
    Load a JSON object from disk.

    A missing file is an empty document. A corrupt file, or one whose root is
    not an object, is logged and also treated as empty.

    Args:
        path: Document location.

    Returns:
        Dict[str, Any]: Parsed object, or an empty dict.
    """
    if not os.path.exists(path):
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"FS: Unreadable JSON document '{path}', treating as empty: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"FS: JSON document '{path}' root is not an object, treating as empty.")
        return {}
    return data


def write_json_object(path: str, data: Dict[str, Any], *, trailing_newline: bool = True) -> None:
    """
    Persist a JSON object as pretty-printed UTF-8, replacing the whole file.

    The document is written to a sibling temporary file first and then moved
    into place, so readers never observe a half-written file.

    Args:
        path: Destination file.
        data: Object to serialize.
        trailing_newline: Append a final newline after the closing brace.
    """
    safe_mkdir(os.path.dirname(os.path.abspath(path)))
    payload = json.dumps(data, ensure_ascii=False, indent=2)
    if trailing_newline:
        payload += "\n"

    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(payload)
    os.replace(tmp_path, path)
    logger.debug(f"FS: Wrote {len(data)} top-level entries to {path}")
