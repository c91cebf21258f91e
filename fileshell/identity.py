#!/usr/bin/env python3
"""
Owner and group name lookup.

Best effort: a platform without a user database, or an id with no
registered name, yields the placeholder ``?`` instead of an error.
"""

import os
from dataclasses import dataclass
from typing import Optional

try:
    import grp
    import pwd
except ImportError:  # no user database on this platform
    grp = None
    pwd = None

from .errors import translate_os_error

UNKNOWN = '?'


@dataclass(frozen=True)
class Ownership:
    """Display names of an entry's owner and group."""
    owner: str = UNKNOWN
    group: str = UNKNOWN

    def __str__(self) -> str:
        return f"{self.owner}:{self.group}"


def owner_name(uid: Optional[int]) -> str:
    """Safely get a user name from a uid."""
    if pwd is None or uid is None:
        return UNKNOWN
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return UNKNOWN


def group_name(gid: Optional[int]) -> str:
    """Safely get a group name from a gid."""
    if grp is None or gid is None:
        return UNKNOWN
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return UNKNOWN


def resolve_owner(path: str) -> Ownership:
    """Look up the owner and group names of ``path``.

    Raises a ShellError only when the entry itself cannot be stat'ed;
    unresolvable ids become ``?``.
    """
    try:
        info = os.stat(path)
    except OSError as e:
        raise translate_os_error(e, path) from e
    return Ownership(owner=owner_name(info.st_uid), group=group_name(info.st_gid))
