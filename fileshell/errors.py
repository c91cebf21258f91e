#!/usr/bin/env python3
"""
Error taxonomy for fileshell.

Filesystem services raise these; the shell turns them into one line of
output and keeps running.
"""

import errno
from typing import Optional


class ShellError(Exception):
    """Base class for every failure a command can report."""

    reason = 'Operation failed'

    def __init__(self, path: Optional[str] = None, reason: Optional[str] = None):
        self.path = path
        if reason is not None:
            self.reason = reason
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.path:
            return f"{self.reason}: {self.path}"
        return self.reason


class NotFound(ShellError):
    reason = 'No such file or directory'


class NotADirectory(ShellError):
    reason = 'Not a directory'


class IsADirectory(ShellError):
    reason = 'Is a directory'


class PermissionDenied(ShellError):
    reason = 'Permission denied'


class AlreadyExists(ShellError):
    reason = 'File exists'


class InvalidArgument(ShellError):
    reason = 'Invalid argument'


class UnsupportedOperation(ShellError):
    reason = 'Operation not supported on this platform'


class UnknownError(ShellError):
    pass


# errno -> taxonomy, used when the OSError subclass alone is not specific
_ERRNO_MAP = {
    errno.ENOENT: NotFound,
    errno.ENOTDIR: NotADirectory,
    errno.EISDIR: IsADirectory,
    errno.EACCES: PermissionDenied,
    errno.EPERM: PermissionDenied,
    errno.EEXIST: AlreadyExists,
    errno.EINVAL: InvalidArgument,
    errno.ENOTSUP: UnsupportedOperation,
}


def translate_os_error(exc: OSError, path: Optional[str] = None) -> ShellError:
    """Map an OSError raised by the OS onto the shell's error taxonomy."""
    target = path or exc.filename
    if isinstance(exc, FileNotFoundError):
        return NotFound(target)
    if isinstance(exc, NotADirectoryError):
        return NotADirectory(target)
    if isinstance(exc, IsADirectoryError):
        return IsADirectory(target)
    if isinstance(exc, PermissionError):
        return PermissionDenied(target)
    if isinstance(exc, FileExistsError):
        return AlreadyExists(target)

    error_class = _ERRNO_MAP.get(exc.errno)
    if error_class is not None:
        return error_class(target)
    return UnknownError(target, exc.strerror or str(exc))
