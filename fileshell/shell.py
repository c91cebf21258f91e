#!/usr/bin/env python3
"""
Stateful shell core for fileshell.

FileShell owns the working directory and implements every command as a
method returning a CommandResult. Methods never raise for ordinary
filesystem failures; they return a result with a non-zero exit code and a
one-line message instead, so the REPL keeps running.

Core Design Principles:
- The working directory lives on the session object, not in the process
- Every command re-validates paths against the live filesystem
- Output is plain text; the caller decides where it goes
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, List, Optional

from .errors import ShellError, InvalidArgument, NotFound
from .filesystem import LocalFileSystem
from .identity import resolve_owner
from .permissions import UNREADABLE_PERMISSIONS, format_permissions, parse_octal
from .search import find as find_paths

logger = logging.getLogger(__name__)

LS_HEADER = f"{'PERMS':<11}{'SIZE':<10}NAME"
LS_RULE = '-' * 39


def printable(text: str) -> str:
    """Make text safe for a UTF-8 screen.

    Names that are not valid UTF-8 come back from the OS with surrogate
    escapes; those bytes are shown as U+FFFD instead.
    """
    return text.encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')


@dataclass
class CommandResult:
    """
    Represents the result of a command execution.

    ``text`` is what the command prints; ``data`` is the same result as a
    Python object for programmatic callers.
    """
    data: Any = None
    text: str = ''
    exit_code: int = 0
    _shell: Optional['FileShell'] = None

    def __str__(self) -> str:
        return self.text

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def _render(self) -> str:
        return self.text + '\n' if self.text else ''

    def _target(self, path: str) -> str:
        if self._shell is not None:
            return self._shell.resolve(path)
        return os.path.abspath(path)

    def out(self, path: str) -> str:
        """Write the output to ``path``, truncating it. Returns the absolute path."""
        target = self._target(path)
        with open(target, 'w', errors='surrogateescape') as f:
            f.write(self._render())
        return target

    def append(self, path: str) -> str:
        """Append the output to ``path``. Returns the absolute path."""
        target = self._target(path)
        with open(target, 'a', errors='surrogateescape') as f:
            f.write(self._render())
        return target


class FileShell:
    """
    Shell session over the local filesystem.

    The only state is the working directory, which always holds a
    canonical absolute path and changes only through ``cd``.
    """

    # Method names reachable as shell commands
    COMMANDS = ('pwd', 'ls', 'cd', 'back', 'touch', 'mkdir', 'cp', 'mv', 'rm',
                'find', 'perms', 'perm')

    def __init__(self, cwd: Optional[str] = None,
                 fs: Optional[LocalFileSystem] = None):
        """Initialize the shell at ``cwd`` (default: the process directory)."""
        self.fs = fs or LocalFileSystem()
        start = self.fs.canonicalize(cwd or os.getcwd())
        if not self.fs.is_dir(start):
            raise ValueError(f"Not a directory: {start}")
        self._cwd = start

    @property
    def cwd(self) -> str:
        return self._cwd

    def resolve(self, path: str) -> str:
        """Join ``path`` onto the working directory; absolute paths win."""
        return os.path.join(self._cwd, path)

    def _make_result(self, data: Any = None, text: str = '', exit_code: int = 0) -> CommandResult:
        """Create a CommandResult with shell context."""
        return CommandResult(data=data, text=text, exit_code=exit_code, _shell=self)

    def _error(self, text: str, exit_code: int = 1, exc: Optional[Exception] = None) -> CommandResult:
        if exc is not None:
            logger.debug("%s (%r)", text, exc)
        return self._make_result(data=None, text=text, exit_code=exit_code)

    def _usage(self, usage: str) -> CommandResult:
        return self._error(f"Usage: {usage}", exit_code=2)

    def _check_not_working_directory(self, path: str):
        """Raise InvalidArgument if ``path`` is the working directory or holds it."""
        if self.fs.is_dir(path) and not os.path.islink(path):
            canonical = self.fs.canonicalize(path)
            if os.path.commonpath([canonical, self._cwd]) == canonical:
                raise InvalidArgument(path, 'Cannot remove or move the working directory or its parents')

    # State inspection

    def pwd(self) -> CommandResult:
        """Print working directory.

        Usage:
            pwd

        Examples:
            pwd                    # Show current directory

        Returns:
            The absolute path of the current working directory.
        """
        return self._make_result(data=self._cwd, text=self._cwd)

    def ls(self, path: Optional[str] = None) -> CommandResult:
        """List directory contents.

        Usage:
            ls [DIRECTORY]

        Options:
            DIRECTORY              Directory to list (default: current)

        Examples:
            ls                     # List current directory
            ls /tmp                # List /tmp

        Returns:
            One line per entry: permissions, size or <DIR>, name.
        """
        target = self.resolve(path) if path else self._cwd
        try:
            entries = self.fs.list_directory(target)
        except ShellError as e:
            return self._error(f"ls: {e}", exc=e)

        lines = [LS_HEADER, LS_RULE]
        for entry in entries:
            try:
                perms = format_permissions(self.fs.get_permissions(os.path.join(target, entry.name)))
            except ShellError:
                perms = UNREADABLE_PERMISSIONS
            size = '<DIR>' if entry.is_dir else str(entry.size)
            lines.append(f"{perms:<11}{size:<10}{entry.name}")

        return self._make_result(data=entries, text='\n'.join(lines))

    # Navigation

    def cd(self, path: Optional[str] = None) -> CommandResult:
        """Change the current directory.

        Usage:
            cd DIRECTORY

        Options:
            DIRECTORY              Directory to change to; ".." for the parent

        Examples:
            cd projects            # Enter projects
            cd ..                  # Go to parent directory
            cd "My Folder"         # Names with spaces
            cd /usr/bin            # Absolute path

        Returns:
            Nothing on success.
        """
        if not path:
            return self._usage('cd <dir>')

        if path == '..':
            target = os.path.dirname(self._cwd)
        else:
            target = self.resolve(path)

        if not self.fs.is_dir(target):
            return self._error(f"No such directory: {path}")

        self._cwd = self.fs.canonicalize(target)
        return self._make_result(data=self._cwd)

    def back(self) -> CommandResult:
        """Go to the parent directory (same as cd ..).

        Usage:
            back

        Returns:
            Nothing on success.
        """
        return self.cd('..')

    # File operations

    def touch(self, name: Optional[str] = None) -> CommandResult:
        """Create an empty file.

        Usage:
            touch FILE

        Options:
            FILE                   File to create; left untouched if it exists

        Examples:
            touch notes.txt        # Create empty file

        Returns:
            Nothing on success.
        """
        if not name:
            return self._usage('touch <file>')
        try:
            self.fs.create_empty_file(self.resolve(name))
        except ShellError as e:
            return self._error(f"touch: cannot create '{name}': {e.reason}", exc=e)
        return self._make_result()

    def mkdir(self, name: Optional[str] = None) -> CommandResult:
        """Create a directory.

        Usage:
            mkdir DIRECTORY

        Examples:
            mkdir build            # Create directory
            mkdir "New Folder"     # Name with spaces

        Returns:
            Nothing on success.
        """
        if not name:
            return self._usage('mkdir <dir>')
        try:
            self.fs.make_directory(self.resolve(name))
        except ShellError as e:
            return self._error(f"mkdir: cannot create directory '{name}': {e.reason}", exc=e)
        return self._make_result()

    def cp(self, src: Optional[str] = None, dst: Optional[str] = None) -> CommandResult:
        """Copy a file.

        Usage:
            cp SOURCE DEST

        Options:
            SOURCE                 Regular file to copy
            DEST                   Destination file, overwritten if present

        Examples:
            cp a.txt b.txt         # Copy file

        Returns:
            Nothing on success.
        """
        if not src or not dst:
            return self._usage('cp <src> <dst>')
        try:
            self.fs.copy_file(self.resolve(src), self.resolve(dst))
        except ShellError as e:
            return self._error(f"Copy failed: {e}", exc=e)
        return self._make_result()

    def mv(self, src: Optional[str] = None, dst: Optional[str] = None) -> CommandResult:
        """Move or rename a file or directory.

        Usage:
            mv SOURCE DEST

        Examples:
            mv old.txt new.txt     # Rename file
            mv dir1 dir2           # Rename directory

        Returns:
            Nothing on success.
        """
        if not src or not dst:
            return self._usage('mv <src> <dst>')
        try:
            self._check_not_working_directory(self.resolve(src))
            self.fs.rename(self.resolve(src), self.resolve(dst))
        except ShellError as e:
            return self._error(f"Move failed: {e}", exc=e)
        return self._make_result()

    def rm(self, target: Optional[str] = None) -> CommandResult:
        """Remove a file, or a directory with everything inside it.

        Usage:
            rm TARGET

        Examples:
            rm notes.txt           # Remove a file
            rm build               # Remove directory recursively

        Returns:
            Nothing on success.
        """
        if not target:
            return self._usage('rm <target>')

        path = self.resolve(target)
        try:
            if self.fs.is_dir(path) and not os.path.islink(path):
                self._check_not_working_directory(path)
                self.fs.remove_tree(path)
            else:
                self.fs.remove(path)
        except ShellError as e:
            return self._error(f"Remove failed: {e}", exc=e)
        return self._make_result()

    # Search

    def find(self, pattern: Optional[str] = None) -> CommandResult:
        """Search for files and directories by name.

        Usage:
            find TEXT

        Options:
            TEXT                   Literal, case-sensitive part of the name

        Examples:
            find .txt              # Everything with .txt in its name
            find report            # Every entry named like *report*

        Returns:
            Absolute paths below the current directory, one per line.
        """
        if not pattern:
            return self._usage('find <substring>')
        try:
            found: List[str] = list(find_paths(self._cwd, pattern))
        except ShellError as e:
            return self._error(f"Find error: {e}", exc=e)
        return self._make_result(data=found, text='\n'.join(found))

    # Permissions

    def perms(self, name: Optional[str] = None) -> CommandResult:
        """Show permissions, owner and size of an entry.

        Usage:
            perms FILE

        Examples:
            perms notes.txt        # rw-r--r--  alice:staff  12  notes.txt

        Returns:
            Permission string, owner:group, size or <DIR>, and name.
        """
        if not name:
            return self._usage('perms <file>')

        path = self.resolve(name)
        try:
            info = self.fs.stat(path)
            ownership = resolve_owner(path)
        except NotFound as e:
            return self._error(f"No such file or directory: {name}", exc=e)
        except ShellError as e:
            return self._error(str(e), exc=e)

        text = (f"{format_permissions(info.mode)}  {ownership}  "
                f"{info.size_text()}  {os.path.basename(os.path.normpath(path))}")
        return self._make_result(data={'info': info, 'owner': ownership}, text=text)

    def perm(self, name: Optional[str] = None, mode: Optional[str] = None) -> CommandResult:
        """Change file mode bits.

        Usage:
            perm FILE MODE

        Options:
            FILE                   File or directory to modify
            MODE                   Octal mode, e.g. 644 or 755

        Examples:
            perm script.sh 755     # Set rwxr-xr-x
            perm notes.txt 600     # Set rw-------

        Returns:
            Confirmation line.
        """
        if not name or not mode:
            return self._usage('perm <file> <octal_mode>')

        path = self.resolve(name)
        if not self.fs.exists(path):
            return self._error(f"File not found: {name}")

        try:
            bits = parse_octal(mode)
        except InvalidArgument as e:
            return self._error(str(e), exit_code=2, exc=e)

        try:
            self.fs.set_permissions(path, bits)
        except ShellError as e:
            return self._error(f"chmod failed: {e.reason}", exc=e)

        return self._make_result(data=bits, text=f"Permissions changed for {name} to {mode}")
