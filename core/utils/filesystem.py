"""
Filesystem helpers for saving transform results.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from core.constants import ErrorMessages, OutputDefaults
from core.exceptions import OutputPathError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def ensure_parent_dirs(
    path: Optional[PathLike], mode: int = OutputDefaults.DIRECTORY_MODE
) -> None:
    """
    Create the parent directories of an output path.

    An empty path means "no output file" and is a no-op.

    Raises:
        OutputPathError: If the directories cannot be created
    """
    if not path:
        return

    parent = Path(path).parent
    if parent.exists():
        return

    try:
        parent.mkdir(mode=mode, parents=True, exist_ok=True)
        logger.debug(f"Created output directory {parent}")
    except OSError as e:
        raise OutputPathError(ErrorMessages.OUTPUT_PATH_FAILED.format(path=parent, error=e)) from e


def apply_permissions(path: PathLike, mode: Optional[int]) -> bool:
    """
    Apply permission bits to a written file.

    Best effort: a failure is logged and reported through the return value,
    the file itself stays valid.

    Returns:
        True if the mode was applied (or nothing was requested)
    """
    if mode is None:
        return True

    try:
        os.chmod(path, mode)
        return True
    except OSError as e:
        logger.warning(f"Failed to apply permissions {oct(mode)} to {path}: {e}")
        return False
