#!/usr/bin/env python3
"""
Recursive name search.

Walks a directory tree depth-first, pre-order, and yields every path whose
final component contains a literal substring. Unreadable subdirectories
are skipped; symlinked directories are followed at most once each.
"""

import logging
import os
from typing import Iterator, Set, Tuple

from .errors import translate_os_error

logger = logging.getLogger(__name__)


def _dir_identity(path: str) -> Tuple[int, int]:
    info = os.stat(path)
    return (info.st_dev, info.st_ino)


def _children(path: str):
    with os.scandir(path) as it:
        return sorted(it, key=lambda entry: entry.name)


def find(root: str, pattern: str) -> Iterator[str]:
    """Lazily yield paths under ``root`` whose name contains ``pattern``.

    Matching is case-sensitive with no wildcard characters. ``root``
    itself is never yielded. A ShellError is raised if ``root`` cannot be
    read; failures below it are logged and skipped.
    """
    try:
        visited: Set[Tuple[int, int]] = {_dir_identity(root)}
        stack = list(reversed(_children(root)))
    except OSError as e:
        raise translate_os_error(e, root) from e

    while stack:
        entry = stack.pop()
        if pattern in entry.name:
            yield os.path.abspath(entry.path)

        try:
            if not entry.is_dir():
                continue
            identity = _dir_identity(entry.path)
        except OSError as e:
            logger.debug("find: skipping %s: %s", entry.path, e)
            continue

        if identity in visited:
            logger.debug("find: already visited %s", entry.path)
            continue
        visited.add(identity)

        try:
            children = _children(entry.path)
        except OSError as e:
            logger.debug("find: cannot read %s: %s", entry.path, e)
            continue
        # Reversed so the first child is popped next
        stack.extend(reversed(children))
