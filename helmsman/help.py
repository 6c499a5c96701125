"""
Helmsman help: usage text for a single command or for the whole application.

Command help
    Description
      <description>

    Usage
      <name> <required> [optional?]

    Arguments
      <name>   <description>

    Options
      -s, --name   <description>

Application help
    <name> <version>

    Available commands
      <root commands>

     <namespace>
      <namespace:commands>

    Options
      -v, --version   ...

Grouping
- A command named "db:seed" belongs to the "db" namespace; names without ":"
  belong to the "root" bucket.
- "root" always comes first, other buckets follow alphabetically and commands
  inside a bucket are sorted by full name.

Palette keys
- section-title, command-name, argument-name, option-name, description,
  usage, panel-title. Override any of them through __main__.__styles__.
"""
from collections import defaultdict, namedtuple

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .commands import Command

ROOT = "root"

CommandGroup = namedtuple("CommandGroup", (
    "name",
    "commands",
))


def namespace(name, /):
    """
    Namespace of a command name: the text before the first ":", else "root".
    """
    prefix, separator, _ = name.partition(":")
    return prefix if separator else ROOT


class HelpCommand(Command):
    """
    Built-in "help" command.

    With a target (for_command() or the "command" argument) it renders that
    command's help, otherwise the application's. The target set through
    for_command() is used for a single run.
    """

    def __init__(self):
        self._command = None
        super().__init__()

    def configure(self):
        self.set_name("help").set_description("Show help for the application or a given command")
        self.ignore_validation_errors()
        self.add_argument("command").description("The command to show help for")

    def for_command(self, command=None, /):
        self._command = command
        return self

    def has_command(self):
        return self._command is not None

    def run(self):
        command = self._command
        try:
            if command is None and (name := self.argument("command")):
                command = self.application.get(str(name))
            if command is None:
                self.show_application_help()
            else:
                self.show_command_help(command)
        finally:
            self._command = None

    def group_commands(self):
        """
        Map each namespace to its commands, in registration order.
        """
        groups = {}
        for command in self.application.commands.values():
            groups.setdefault(namespace(command.name), []).append(command)
        return groups

    @staticmethod
    def sort_groups(names, /):
        """
        "root" first, then the remaining names alphabetically.
        """
        return sorted(names, key=lambda name: (name != ROOT, name))

    def sort_commands(self, groups, /):
        return [
            CommandGroup(name, sorted(groups[name], key=lambda command: command.name))
            for name in self.sort_groups(groups)
        ]

    def _palette(self):
        application = self.application
        styles = defaultdict(str, {
            "section-title": "bold #FF4D94",  # magenta headings
            "command-name": "bold #FFD600",  # amber names
            "argument-name": "bold #FFD600",
            "option-name": "bold #FFD600",
            "description": "#9CA3AF",  # muted gray
            "usage": "dim",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if application.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not application.colorful:
                return Text(str(fragment))
            return Text(str(fragment), styler(style))

        return text

    def _print(self, renders, title):
        text = self._palette()
        renderable = Group(*renders)
        if self.application.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", text(title.upper(), "panel-title"), " ]"),
                title_align="left",
            )
        self.console.print(renderable)

    def _rows(self, rows, style):
        """
        Two aligned columns: styled names, then dimmed descriptions.
        """
        text = self._palette()
        width = max((len(name) for name, _ in rows), default=0)
        for name, description in rows:
            row = Text.assemble(
                "  ",
                text(name, style),
                " " * (width - len(name)),
                "   ",
                text(description, "description"),
            )
            row.rstrip()
            yield row

    def _options(self, options):
        rows = [
            ("".join("-%s, " % shortcut for shortcut in option.shortcuts) + "--" + option.name, option.description)
            for option in options
        ]
        return [self._palette()("Options", "section-title"), *self._rows(rows, "option-name")]

    def show_command_help(self, command, /):
        text = self._palette()
        sections = []

        if command.has_description():
            sections.append([text("Description", "section-title"), Text.assemble("  ", command.description)])

        name, _, synopsis = command.usage().partition(" ")
        sections.append([
            text("Usage", "section-title"),
            Text.assemble("  ", text(name, "command-name"), " " if synopsis else "", text(synopsis, "usage")),
        ])

        if arguments := command.definition.arguments:
            rows = [(argument.name, argument.description) for argument in arguments]
            sections.append([text("Arguments", "section-title"), *self._rows(rows, "argument-name")])

        if options := command.definition.options:
            sections.append(self._options(options))

        self._print(self._join(sections), command.name + " help")

    def show_application_help(self):
        application = self.application
        text = self._palette()
        sections = []

        if heading := application.name_and_version():
            sections.append([heading])

        if not application.commands:
            sections.append([text("No commands available.", "section-title")])
        else:
            width = max(len(name) for name in application.commands)
            for group in self.sort_commands(self.group_commands()):
                title = "Available commands" if group.name == ROOT else " " + group.name
                rows = [(command.name.ljust(width), command.description) for command in group.commands]
                sections.append([text(title, "section-title"), *self._rows(rows, "command-name")])

        if options := application.definition.options:
            sections.append(self._options(options))

        self._print(self._join(sections), (application.name or "application") + " help")

    @staticmethod
    def _join(sections):
        renders = []
        for index, section in enumerate(sections):
            if index:
                renders.append(Text(""))
            renders.extend(section)
        return renders


__all__ = (
    "HelpCommand",
    "CommandGroup",
    "namespace",
)
