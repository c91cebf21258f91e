"""
fileshell - An interactive shell for exploring the local filesystem

This package provides a stateful command shell with a working-directory
cursor, directory listing, file and directory manipulation, recursive name
search, output redirection, and permission inspection and modification.
"""

__version__ = "0.1.0"

from .errors import (
    ShellError,
    NotFound,
    NotADirectory,
    IsADirectory,
    PermissionDenied,
    AlreadyExists,
    InvalidArgument,
    UnsupportedOperation,
    UnknownError,
)

from .filesystem import (
    LocalFileSystem,
    DirectoryEntry,
    FileInfo,
)

from .permissions import (
    Mode,
    format_permissions,
    parse_octal,
    get_permission_backend,
    PosixPermissions,
    UnsupportedPermissions,
)

from .identity import (
    Ownership,
    resolve_owner,
)

from .search import find

from .command_parser import (
    Command,
    CommandParser,
    ParsedCommand,
    RedirectType,
)

from .shell import (
    FileShell,
    CommandResult,
)

from .terminal import (
    TerminalSession,
    TerminalConfig,
    CommandExecutor,
    main,
)

__all__ = [
    # Errors
    "ShellError",
    "NotFound",
    "NotADirectory",
    "IsADirectory",
    "PermissionDenied",
    "AlreadyExists",
    "InvalidArgument",
    "UnsupportedOperation",
    "UnknownError",

    # Filesystem service
    "LocalFileSystem",
    "DirectoryEntry",
    "FileInfo",

    # Permissions and ownership
    "Mode",
    "format_permissions",
    "parse_octal",
    "get_permission_backend",
    "PosixPermissions",
    "UnsupportedPermissions",
    "Ownership",
    "resolve_owner",

    # Search
    "find",

    # Command parser
    "Command",
    "CommandParser",
    "ParsedCommand",
    "RedirectType",

    # Shell and terminal
    "FileShell",
    "CommandResult",
    "TerminalSession",
    "TerminalConfig",
    "CommandExecutor",
    "main",

    # Version info
    "__version__",
]
