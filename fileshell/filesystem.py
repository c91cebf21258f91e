#!/usr/bin/env python3
"""
fileshell filesystem service - the local directory tree as seen by the shell.

Core philosophy:
- Every call goes straight to the OS; nothing is cached between commands
- Failures surface as ShellError subclasses, never as raw OSError
- Directory listings are snapshots, produced fresh on every request
"""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import List, Optional

from .errors import (
    IsADirectory, NotADirectory, NotFound, UnknownError, translate_os_error
)
from .permissions import PermissionBackend, get_permission_backend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryEntry:
    """One child of a listed directory."""
    name: str
    is_dir: bool
    size: int = 0  # always 0 for directories


@dataclass(frozen=True)
class FileInfo:
    """Metadata of a single entry, symlinks resolved."""
    path: str
    is_dir: bool
    size: int
    mode: int
    uid: Optional[int] = None
    gid: Optional[int] = None

    def size_text(self) -> str:
        return '<DIR>' if self.is_dir else str(self.size)


class LocalFileSystem:
    """
    Filesystem service backed by the host OS.

    Paths passed in are used as given; resolving them against a working
    directory is the caller's job.
    """

    def __init__(self, permissions: Optional[PermissionBackend] = None):
        self.permissions = permissions or get_permission_backend()

    # Queries

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def canonicalize(self, path: str) -> str:
        """Absolute path with symlinks, ``.`` and ``..`` resolved."""
        return os.path.realpath(path)

    def stat(self, path: str) -> FileInfo:
        """Return metadata for ``path``, following symlinks."""
        try:
            info = os.stat(path)
        except OSError as e:
            raise translate_os_error(e, path) from e

        is_dir = os.path.isdir(path)
        return FileInfo(
            path=path,
            is_dir=is_dir,
            size=0 if is_dir else info.st_size,
            mode=info.st_mode,
            uid=info.st_uid,
            gid=info.st_gid,
        )

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        """List the immediate children of ``path``, sorted by name.

        Symlinks are reported as whatever they point to. An entry whose
        size cannot be read is still listed, with size 0. If the directory
        itself cannot be read nothing is returned and a ShellError is
        raised instead.
        """
        entries = []
        try:
            with os.scandir(path) as it:
                for entry in it:
                    entries.append(self._make_entry(entry))
        except OSError as e:
            raise translate_os_error(e, path) from e

        entries.sort(key=lambda e: e.name)
        return entries

    def _make_entry(self, entry: os.DirEntry) -> DirectoryEntry:
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False

        size = 0
        if not is_dir:
            try:
                size = entry.stat().st_size
            except OSError as e:
                logger.debug("size unavailable for %s: %s", entry.path, e)

        return DirectoryEntry(name=entry.name, is_dir=is_dir, size=size)

    # Mutations

    def create_empty_file(self, path: str) -> None:
        """Create an empty regular file; an existing file is left untouched."""
        if os.path.isdir(path):
            raise IsADirectory(path)
        try:
            with open(path, 'a'):
                pass
        except OSError as e:
            raise translate_os_error(e, path) from e

    def make_directory(self, path: str) -> None:
        try:
            os.mkdir(path)
        except OSError as e:
            raise translate_os_error(e, path) from e

    def copy_file(self, src: str, dst: str) -> None:
        """Copy the content and mode of regular file ``src`` onto ``dst``.

        An existing ``dst`` is overwritten.
        """
        if not os.path.exists(src):
            raise NotFound(src)
        if os.path.isdir(src):
            raise IsADirectory(src)
        try:
            shutil.copyfile(src, dst)
            shutil.copymode(src, dst)
        except shutil.SameFileError as e:
            raise UnknownError(dst, 'Source and destination are the same file') from e
        except OSError as e:
            raise translate_os_error(e, dst) from e

    def rename(self, src: str, dst: str) -> None:
        try:
            os.rename(src, dst)
        except OSError as e:
            raise translate_os_error(e, src) from e

    def remove(self, path: str) -> None:
        """Remove a single non-directory entry."""
        try:
            os.remove(path)
        except OSError as e:
            raise translate_os_error(e, path) from e

    def remove_tree(self, path: str) -> None:
        """Remove directory ``path`` and everything below it.

        Uses an explicit stack so deep trees do not exhaust the call stack.
        Symlinks are unlinked, never descended into.
        """
        if os.path.islink(path) or not os.path.isdir(path):
            raise NotADirectory(path)

        stack = [(path, False)]
        while stack:
            current, emptied = stack.pop()
            try:
                if emptied:
                    os.rmdir(current)
                elif os.path.islink(current) or not os.path.isdir(current):
                    os.remove(current)
                else:
                    # Children are pushed above their parent, so they go first
                    stack.append((current, True))
                    with os.scandir(current) as it:
                        stack.extend((entry.path, False) for entry in it)
            except OSError as e:
                raise translate_os_error(e, current) from e

    def set_permissions(self, path: str, mode: int) -> None:
        self.permissions.apply(path, mode)

    def get_permissions(self, path: str) -> int:
        return self.permissions.read(path)
