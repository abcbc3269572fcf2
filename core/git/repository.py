"""
Git repository discovery helpers.
"""
import os
from pathlib import Path
from typing import Optional

from utils.logger import get_logger

logger = get_logger(__name__)

GIT_MARKER = ".git"


def find_git_root(start_path: Optional[str] = None) -> str:
    """
    Find the Git repository root directory

    Args:
        start_path: Path to start searching from (defaults to current working directory)

    Returns:
        The repository root, or the current working directory if none is found
    """
    current = Path(start_path if start_path is not None else os.getcwd()).resolve()

    while current != current.parent:
        if (current / GIT_MARKER).exists():
            return str(current)
        current = current.parent

    logger.debug(f"No Git repository found above {start_path}, using working directory")
    return os.getcwd()


def is_git_repository(path: str) -> bool:
    """Check whether a .git marker exists directly under path."""
    return (Path(path) / GIT_MARKER).exists()
