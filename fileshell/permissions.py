#!/usr/bin/env python3
"""
Permission codec for fileshell.

Translates between the 9-bit permission set (owner/group/other x
read/write/execute), its symbolic ``rwxr-xr-x`` form and its octal form,
and applies permission changes through a per-platform backend.

Design Principles:
- The codec functions are pure and platform neutral
- Mutation goes through a backend object chosen for the platform
- A platform without a permission model reports an error instead of
  pretending to succeed
"""

import os
import re
from enum import IntEnum

from .errors import InvalidArgument, UnsupportedOperation, translate_os_error


class Mode(IntEnum):
    """Unix-style permission bits."""
    IRUSR = 0o400  # owner read
    IWUSR = 0o200  # owner write
    IXUSR = 0o100  # owner execute
    IRGRP = 0o040  # group read
    IWGRP = 0o020  # group write
    IXGRP = 0o010  # group execute
    IROTH = 0o004  # other read
    IWOTH = 0o002  # other write
    IXOTH = 0o001  # other execute

    # Masks
    PERMISSIONS = 0o777
    ALL = 0o7777  # includes setuid, setgid and sticky


# Fixed rendering order of the symbolic form
_SYMBOLIC_ORDER = (
    (Mode.IRUSR, 'r'), (Mode.IWUSR, 'w'), (Mode.IXUSR, 'x'),
    (Mode.IRGRP, 'r'), (Mode.IWGRP, 'w'), (Mode.IXGRP, 'x'),
    (Mode.IROTH, 'r'), (Mode.IWOTH, 'w'), (Mode.IXOTH, 'x'),
)

_OCTAL_PATTERN = re.compile(r'[0-7]{1,4}')

UNREADABLE_PERMISSIONS = '-' * len(_SYMBOLIC_ORDER)


def format_permissions(mode: int) -> str:
    """Render the permission bits of ``mode`` as a 9-character string.

    Bits outside the 9 permission bits (file type, setuid, ...) are ignored.

    Examples:
        format_permissions(0o755)  -> 'rwxr-xr-x'
        format_permissions(0o100640) -> 'rw-r-----'
    """
    return ''.join(letter if mode & bit else '-' for bit, letter in _SYMBOLIC_ORDER)


def parse_octal(text: str) -> int:
    """Parse an octal mode such as ``644`` or ``0755``.

    Surrounding whitespace is ignored; anything else that is not one to
    four octal digits raises InvalidArgument.
    """
    candidate = text.strip() if text else ''
    if not _OCTAL_PATTERN.fullmatch(candidate):
        raise InvalidArgument(reason=f"Invalid octal mode '{text}'. Use like 644 or 755")
    return int(candidate, 8)


def to_octal(mode: int) -> str:
    """Format the permission bits of ``mode`` as a 3-digit octal string."""
    return format(mode & Mode.PERMISSIONS, '03o')


class PermissionBackend:
    """Capability interface for reading and changing permission bits."""

    supported = False

    def read(self, path: str) -> int:
        """Return the permission bits of ``path``, following symlinks."""
        try:
            return os.stat(path).st_mode & Mode.ALL
        except OSError as e:
            raise translate_os_error(e, path) from e

    def apply(self, path: str, mode: int) -> None:
        raise NotImplementedError


class PosixPermissions(PermissionBackend):
    """Backend for platforms with a POSIX permission model."""

    supported = True

    def apply(self, path: str, mode: int) -> None:
        """Set the permission bits of ``path`` to exactly ``mode``."""
        try:
            os.chmod(path, mode)
        except OSError as e:
            raise translate_os_error(e, path) from e


class UnsupportedPermissions(PermissionBackend):
    """Backend for platforms without a permission model."""

    def apply(self, path: str, mode: int) -> None:
        raise UnsupportedOperation(reason='Permission changes not supported on this platform')


def get_permission_backend(platform_name: str = os.name) -> PermissionBackend:
    """Pick the permission backend for ``platform_name`` (an ``os.name`` value)."""
    if platform_name == 'posix':
        return PosixPermissions()
    return UnsupportedPermissions()
