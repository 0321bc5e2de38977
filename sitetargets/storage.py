"""
Persistence helpers for targets.

Targets are stored as JSON documents holding a single serialized
SiteTarget. The display_host field is written byte for byte since
older combined targets depend on it to recover their member sites.
"""

import logging

from sitetargets.models import SiteTarget
from sitetargets.utils import read_json_file, write_json_file

logger = logging.getLogger(__name__)


def save_target(target: SiteTarget, file_path: str) -> None:
    """
    Write a target to a JSON file.

    Raises:
        IOError: If the file cannot be written
    """
    write_json_file(target.to_dict(), file_path)
    logger.debug(f"Saved target {target.display_host} to {file_path}")


def load_target(file_path: str) -> SiteTarget:
    """
    Read a target from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file contains invalid JSON
        ValueError: If the document is not a target
    """
    data = read_json_file(file_path)
    if not isinstance(data, dict):
        raise ValueError(f"Target file {file_path} must contain a JSON object")
    return SiteTarget.from_dict(data)
