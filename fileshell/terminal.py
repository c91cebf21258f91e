#!/usr/bin/env python3
"""
Terminal front end for fileshell.

This module provides the REPL: it reads lines, hands them to the parser,
dispatches the resulting commands to a FileShell and sends the output
either to the screen or to a redirection target.

Design Principles:
- All filesystem work goes through FileShell
- Clean separation between parsing and execution
- No error ends the loop; only exit or end of input does
"""

import argparse
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, List

from .command_parser import CommandParser, Command, ParsedCommand, RedirectType
from .shell import FileShell, CommandResult, printable

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ('exit', 'quit')


@dataclass
class TerminalConfig:
    """Configuration for terminal session."""
    initial_dir: str = field(default_factory=os.getcwd)
    prompt_format: str = '{cwd} $ '
    enable_readline: bool = True
    log_level: int = logging.WARNING


class CommandExecutor:
    """
    Executes parsed commands by calling the matching FileShell method.

    Also owns the help system and output redirection, since both sit
    around a command rather than inside one.
    """

    def __init__(self, shell: FileShell, parser: Optional[CommandParser] = None):
        """Initialize with a FileShell instance."""
        self.shell = shell
        self.parser = parser or CommandParser()

    def execute(self, parsed: ParsedCommand) -> CommandResult:
        """Execute a parsed line and apply its redirection."""
        if parsed.redirected and not parsed.target_filename:
            return CommandResult(data=None, text='Redirect failed: missing file name', exit_code=2)

        command = self.parser.tokenize(parsed.command_text)
        if command is None:
            result = CommandResult(data=None, text='', exit_code=0, _shell=self.shell)
        else:
            result = self._execute_command(command)

        if parsed.redirected:
            return self._apply_redirection(result, parsed)
        return result

    def _execute_command(self, command: Command) -> CommandResult:
        """Execute a single command by calling the appropriate shell method."""
        method = self._get_shell_method(command.name)

        if method is None:
            return CommandResult(
                data=None,
                text="Unknown command. Type 'help' for a list.",
                exit_code=127
            )

        try:
            return method(*command.args)
        except Exception as e:
            logger.debug("command %s raised", command, exc_info=True)
            return CommandResult(
                data=None,
                text=f"{command.name}: {e}",
                exit_code=1
            )

    def _get_shell_method(self, command_name: str):
        """Get the shell method for a command name."""
        if command_name in FileShell.COMMANDS:
            return getattr(self.shell, command_name)

        aliases = {
            'help': lambda *args: self._show_help(args[0] if args else None),
            '?': lambda *args: self._show_help(args[0] if args else None),
        }
        return aliases.get(command_name)

    def _apply_redirection(self, result: CommandResult, parsed: ParsedCommand) -> CommandResult:
        """Send the result to the redirect target instead of the screen."""
        target = self.shell.resolve(parsed.target_filename)
        try:
            if parsed.redirect is RedirectType.APPEND:
                result.append(target)
            else:
                result.out(target)
        except (OSError, UnicodeError) as e:
            logger.debug("redirect to %s failed", parsed.target_filename, exc_info=True)
            reason = getattr(e, 'strerror', None) or e
            return CommandResult(data=None, text=f"Redirect failed: {reason}", exit_code=1)

        return CommandResult(
            data=target,
            text=f"Output redirected to {target}",
            exit_code=result.exit_code
        )

    # Help system

    def _show_help(self, command: Optional[str] = None) -> CommandResult:
        """Show help information for commands."""
        if command:
            return self._show_command_help(command)
        return self._show_all_commands_help()

    def _extract_docstring_sections(self, docstring: str) -> dict:
        """Extract structured sections from a docstring."""
        if not docstring:
            return {}

        lines = docstring.strip().split('\n')
        sections = {
            'description': lines[0].strip(),
            'usage': '',
            'options': [],
            'examples': []
        }

        current_section = None
        for line in lines[1:]:
            line = line.strip()
            if line.startswith('Usage:'):
                current_section = 'usage'
            elif line.startswith('Options:'):
                current_section = 'options'
            elif line.startswith('Examples:'):
                current_section = 'examples'
            elif line.startswith('Returns:'):
                current_section = 'returns'
            elif line and current_section:
                if current_section == 'usage':
                    sections['usage'] = line
                elif current_section in ('options', 'examples'):
                    sections[current_section].append(line)

        return sections

    def _show_command_help(self, command: str) -> CommandResult:
        """Show detailed help for a specific command."""
        if command in ('help', '?'):
            help_text = """help - Show this help system

Usage:
    help [COMMAND]

Examples:
    help                   # Show all commands
    help ls                # Show help for ls"""
            return CommandResult(data=help_text, text=help_text, exit_code=0)
        if command in EXIT_COMMANDS:
            help_text = """exit/quit - Exit the shell

Usage:
    exit"""
            return CommandResult(data=help_text, text=help_text, exit_code=0)
        if command not in FileShell.COMMANDS:
            return CommandResult(
                data=None,
                text=f"help: no help available for '{command}'",
                exit_code=1
            )

        sections = self._extract_docstring_sections(getattr(self.shell, command).__doc__)

        help_lines = [f"{command} - {sections['description']}", ""]
        if sections['usage']:
            help_lines.append("Usage:")
            help_lines.append(f"    {sections['usage']}")
            help_lines.append("")
        if sections['options']:
            help_lines.append("Options:")
            help_lines.extend(f"    {opt}" for opt in sections['options'])
            help_lines.append("")
        if sections['examples']:
            help_lines.append("Examples:")
            help_lines.extend(f"    {ex}" for ex in sections['examples'])

        help_text = '\n'.join(help_lines).rstrip()
        return CommandResult(data=help_text, text=help_text, exit_code=0)

    def _show_all_commands_help(self) -> CommandResult:
        """Show the static command summary."""
        help_text = """Available commands:
  ls                 - List files
  cd <dir>           - Change directory
  pwd                - Print working directory
  touch <file>       - Create empty file
  mkdir <dir>        - Create directory
  cp <src> <dst>     - Copy file
  mv <src> <dst>     - Move or rename
  rm <target>        - Remove file or directory (recursive)
  find <text>        - Search names below the current directory
  perms <file>       - View file permissions
  perm <f> <octal>   - Change file permissions
  help [command]     - Show help
  exit               - Exit program

Redirection:
  command > file     - Write output to file
  command >> file    - Append output to file"""
        return CommandResult(data=help_text, text=help_text, exit_code=0)


class TerminalSession:
    """
    Main terminal session manager.

    Provides the REPL loop plus non-interactive entry points for running
    single commands or scripts.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 shell: Optional[FileShell] = None):
        """Initialize terminal session."""
        self.config = config or TerminalConfig()
        self.shell = shell or FileShell(cwd=self.config.initial_dir)
        self.parser = CommandParser()
        self.executor = CommandExecutor(self.shell, self.parser)
        self.running = False

    def get_prompt(self) -> str:
        """Generate the command prompt."""
        return printable(self.config.prompt_format.format(cwd=self.shell.cwd))

    def execute_command(self, command_line: str) -> Optional[str]:
        """
        Execute a command line and return the output.

        Returns None for exit commands.
        """
        if not command_line or command_line.strip() == '':
            return ''

        parsed = self.parser.parse(command_line)
        command = self.parser.tokenize(parsed.command_text)
        if command is not None and command.name in EXIT_COMMANDS:
            return None

        result = self.executor.execute(parsed)
        return result.text

    def _enable_line_editing(self):
        try:
            import readline  # noqa: F401  (installs line editing for input())
        except ImportError:
            logger.debug("readline not available; using plain input")

    def run_interactive(self):
        """Run the interactive REPL loop."""
        self.running = True
        if self.config.enable_readline:
            self._enable_line_editing()
        logger.info("session started in %s", self.shell.cwd)

        while self.running:
            try:
                command_line = input(self.get_prompt())
            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print()
                break

            try:
                output = self.execute_command(command_line)
            except KeyboardInterrupt:
                print("^C")
                continue
            if output is None:
                break
            if output:
                print(printable(output))

        self.running = False
        logger.info("session ended in %s", self.shell.cwd)

    def run_command(self, command_line: str) -> str:
        """
        Run a single command and return output.

        This method is useful for non-interactive use.
        """
        output = self.execute_command(command_line)
        return output if output is not None else ''

    def run_script(self, script_lines: List[str]) -> List[str]:
        """
        Run a script (list of command lines) and return outputs.
        """
        outputs = []
        for line in script_lines:
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            output = self.execute_command(line)
            if output is None:  # Exit command
                break
            outputs.append(output)

        return outputs


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the fileshell terminal."""
    parser = argparse.ArgumentParser(description='Interactive file explorer shell')
    parser.add_argument('-c', '--command', help='Execute command and exit')
    parser.add_argument('-d', '--directory', help='Set initial directory', default=os.getcwd())
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug details to stderr')
    parser.add_argument('--no-readline', action='store_true', help='Disable line editing')
    args = parser.parse_args(argv)

    config = TerminalConfig(
        initial_dir=args.directory,
        enable_readline=not args.no_readline,
        log_level=logging.DEBUG if args.verbose else logging.WARNING
    )
    logging.basicConfig(level=config.log_level, format='%(levelname)s %(name)s: %(message)s')

    try:
        session = TerminalSession(config=config)
    except ValueError as e:
        logger.warning("%s; starting in %s", e, os.getcwd())
        config.initial_dir = os.getcwd()
        session = TerminalSession(config=config)

    if args.command:
        output = session.run_command(args.command)
        if output:
            print(printable(output))
    else:
        session.run_interactive()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
