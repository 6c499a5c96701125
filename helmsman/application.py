"""
Helmsman application: command registry and dispatch.

Registry
- add(command) registers a Command instance; register(name, callback) builds an
  ad-hoc command and lets `callback(command)` configure it. Both go through add().
- Names and aliases are unique across the registry. Disabled commands are
  skipped silently. Registration order is kept.
- The built-in "help" command is always resolvable, but a registered command
  named "help" takes precedence and it never shows up in `commands`.

Dispatch (run(tokens) / execute(tokens))
  1. bind argv against the application definition, swallowing validation
     errors (only the command name and the global flags matter here);
  2. --version / -v: print name and version, then return without exiting;
  3. resolve the command name (first positional, else the default command);
  4. --help / -h, or nothing to run: hand the command to the help command;
  5. otherwise command.handle(argv);
  6. terminate(): exit 0, or render the error report and exit 1.

Example:
    application = Application("Console", "1.0.0")
    application.add(Greet())
    application.run()
"""
import asyncio
import difflib
import logging
import sys
from collections import defaultdict
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .arguments import *
from .commands import Command
from .definitions import InputDefinition
from .faults import (
    CommandNotRegisteredError,
    DuplicateCommandError,
    FaultReport,
    InvalidDefaultCommandError,
    MissingCommandNameError,
    ValidationError,
)
from .help import HelpCommand
from .inputs import ArgvInput
from .utils import *

logger = logging.getLogger(__name__)


class Application:
    """
    Console application: a named, versioned registry of commands.

    Parameters
    - name: program name shown by --version and in help.
    - version: version string (Unset when the program has none).
    - colorful: style output (help, version, error reports).
    - fancy: wrap help and error reports in panels.
    """

    def __init__(self, name="", version=Unset, /, *, colorful=True, fancy=False):
        self._name = ""
        self._version = Unset
        self._commands = {}
        self._default_command = Unset
        self._definition = InputDefinition([
            InputArgument("command", "The command to execute"),
            InputOption("help", "Display help for the given command", default=False, shortcuts="h"),
            InputOption("version", "Display this application version", default=False, shortcuts="v"),
        ])
        self._console = Console()
        self._errors = Console(stderr=True)
        self._help = HelpCommand().set_application(self)
        self.colorful = colorful
        self.fancy = fancy
        self.set_name(name)
        if version is not Unset:
            self.set_version(version)

    def __repr__(self):
        return "application(name=%r, version=%r, commands=%r)" % (self._name, self._version, tuple(self._commands))

    @property
    def name(self):
        return self._name

    @property
    def version(self):
        return self._version

    @property
    def definition(self):
        return self._definition

    @property
    def commands(self):
        return MappingProxyType(self._commands)

    @property
    def default_command(self):
        return coalesce(self._default_command)

    @property
    def console(self):
        return self._console

    @property
    def errors(self):
        return self._errors

    def set_name(self, name, /):
        if not isinstance(name, str):
            raise TypeError("application name must be a string")
        self._name = name.strip()
        return self

    def set_version(self, version, /):
        if not isinstance(version, str):
            raise TypeError("application version must be a string")
        self._version = version.strip() or Unset
        return self

    def with_output(self, console, errors=Unset, /):
        """
        Replace the output consoles (stdout, and stderr when given).
        """
        self._console = console
        self._errors = coalesce(errors, console)
        return self

    def use_default_command(self, command, /):
        """
        Command to run when no command name is given: a registered name or a Command.

        A Command instance that is not registered yet gets registered.
        """
        if isinstance(command, Command):
            if self._commands.get(command.name) is not command:
                self.add(command)
            name = command.name
        elif isinstance(command, str) and command.strip():
            name = command.strip()
            if self.is_missing(name):
                raise InvalidDefaultCommandError(
                    "default command %r is not registered" % name,
                    hint="register the command before using it as the default",
                    name=name,
                )
        else:
            raise InvalidDefaultCommandError(
                "default command must be a command name or a command, not %r" % type(command).__name__,
                hint="pass a registered command name or a Command instance",
            )
        self._default_command = name
        logger.debug("default command is %r", name)
        return self

    def register(self, name, callback=None, /):
        """
        Register an ad-hoc command named `name`.

        `callback(command)` configures it before registration, typically
        setting a description, declaring input and attaching a handler.
        """
        command = Command(name)
        if callback is not None:
            callback(command)
        return self.add(command)

    def add(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("add() argument must be a command")
        if not command.name:
            raise MissingCommandNameError(
                "cannot add a command without a name",
                hint="call set_name() in the command's configure()",
                command=command,
            )
        if not command.is_enabled():
            logger.debug("skipped disabled command %r", command.name)
            return self

        taken = {}
        for registered in self._commands.values():
            for label in (registered.name, *registered.aliases):
                taken[label] = registered.name
        for label in (command.name, *command.aliases):
            if label in taken:
                raise DuplicateCommandError(
                    "%r is already used by command %r" % (label, taken[label]),
                    hint="command names and aliases must be unique",
                    name=label,
                    command=command.name,
                )

        command.set_application(self)
        self._commands[command.name] = command
        logger.debug("registered command %r", command.name)
        return self

    def add_commands(self, commands, /):
        if not isinstance(commands, Iterable):
            raise TypeError("add_commands() argument must be an iterable of commands")
        for command in commands:
            self.add(command)
        return self

    def get(self, name, /):
        """
        Resolve a command by name or alias.
        """
        if name in self._commands:
            return self._commands[name]
        for command in self._commands.values():
            if name in command.aliases:
                return command
        if name == self._help.name:
            return self._help

        suggestions = difflib.get_close_matches(name, self._commands.keys(), 5)
        try:
            hint = "did you mean %r? run with --help to see all commands" % suggestions[0]
        except IndexError:
            hint = "run with --help to see all commands"
        raise CommandNotRegisteredError(
            "command %r is not registered" % name,
            hint=hint,
            name=name,
            suggestions=suggestions,
        )

    def has(self, name, /):
        try:
            self.get(name)
        except CommandNotRegisteredError:
            return False
        return True

    def is_missing(self, name, /):
        return not self.has(name)

    def namespaces(self):
        """
        Distinct prefixes (text before the first ":") in order of appearance.
        """
        namespaces = []
        for name in self._commands:
            prefix, separator, _ = name.partition(":")
            if separator and prefix not in namespaces:
                namespaces.append(prefix)
        return namespaces

    def name_and_version(self):
        """
        "name version", or whichever half is set, as styled text.
        """
        styles = defaultdict(str, {
            "program-name": "bold #FF4D94",  # magenta-pink brand pop
            "program-version": "bold #22C55E",  # green version
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style):
            return Text(fragment, styles[style] if self.colorful else "")

        parts = []
        if self._name:
            parts.append(text(self._name, "program-name"))
        if self._version:
            parts.append(text(self._version, "program-version"))
        return Text(" ").join(parts)

    def output_name_and_version(self):
        if heading := self.name_and_version():
            self._console.print(heading)

    async def execute(self, tokens=Unset, /):
        """
        Run one invocation end to end. Always ends in terminate(), except
        for --version.
        """
        input = ArgvInput(tokens)

        try:
            input.bind(self._definition)
        except ValidationError as error:
            logger.debug("application input rejected, resolving the command anyway: %s", error)

        if input.has_raw_option("version", "v"):
            self.output_name_and_version()
            return

        try:
            name = input.first_argument() or self.default_command
            command = self.get(str(name)) if name else None

            if command is None or input.has_raw_option("help", "h"):
                logger.debug("showing help for %r", command.name if command else self._name)
                await self._help.for_command(command).handle(input)
            else:
                await command.handle(input)
        except Exception as error:
            logger.debug("command failed: %r", error)
            self.terminate(error)

        self.terminate()

    def run(self, tokens=Unset, /):
        """
        Synchronous entry point; `tokens` defaults to sys.argv[1:].
        """
        asyncio.run(self.execute(tokens))

    def terminate(self, error=None, /):
        """
        End the process: exit 0, or print the error report and exit 1.
        """
        if error is None:
            logger.debug("terminating with status 0")
            sys.exit(0)

        self._errors.print()
        self._errors.print(FaultReport(error, program=self._name, colorful=self.colorful, fancy=self.fancy))
        self._errors.print()
        logger.debug("terminating with status 1")
        sys.exit(1)


__all__ = (
    "Application",
)
