"""Recursive file enumeration for directory uploads."""

import logging
import os
from pathlib import Path
from typing import List, Set, Union

logger = logging.getLogger(__name__)


def _walk(directory: str, files: List[str], visited: Set[str]) -> None:
    """Depth-first walk appending regular files to ``files``."""
    real = os.path.realpath(directory)
    if real in visited:
        logger.debug("Skipping %s: already walked as %s", directory, real)
        return
    visited.add(real)

    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        if entry.is_dir():
            _walk(entry.path, files, visited)
        else:
            logger.debug("Found file: %s", entry.path)
            files.append(entry.path)


def list_files(root: Union[str, Path]) -> List[str]:
    """Recursively collect the files under ``root``.

    Directories are descended into but never returned. Entries of each
    directory are visited in lexical name order, depth first, so a
    subdirectory's files come right where the subdirectory sorts. Paths are
    joined onto ``root`` as given (a relative root yields relative paths).

    Symlinks to directories are followed and their files listed under the
    link's path. A directory whose real path was already walked is skipped,
    which stops symlink cycles.

    A root that is itself a file is returned as a one-element list.

    Args:
        root: Directory to walk

    Returns:
        Ordered list of file paths

    Raises:
        FileNotFoundError: If ``root`` does not exist
        OSError: If any directory cannot be read; the walk is aborted and
            no partial result is returned
    """
    root = os.fspath(root)
    if not os.path.lexists(root):
        raise FileNotFoundError(f"No such file or directory: {root}")
    if not os.path.isdir(root):
        logger.debug("Found file: %s", root)
        return [root]

    files: List[str] = []
    _walk(root, files, set())
    return files
