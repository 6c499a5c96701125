"""
Helmsman input definitions (the declared schema of a command).

An InputDefinition owns
- an ordered sequence of InputArgument (order = positional binding order),
- a set of InputOption keyed by name, with a secondary index by shortcut.

Invariants (enforced when entries are added, never at bind time)
- no two arguments share a name;
- no two options share a name or a shortcut;
- a required argument never follows an optional one.

Lookups
- argument()/option()/option_by_shortcut() raise NotRegisteredError for
  undeclared names; has_*/is_missing_* never raise.

Quick example:
    >>> definition = InputDefinition([
    ...     InputArgument("name", required=True),
    ...     InputOption("force", shortcuts="f", default=False),
    ... ])
    >>> definition.argument_names()
    ('name',)
    >>> definition.option_by_shortcut("f").name
    'force'
"""
import logging

from .arguments import EntryKind, _sanitize_shortcuts
from .faults import (
    DuplicateArgumentError,
    DuplicateOptionError,
    DuplicateShortcutError,
    NotRegisteredError,
    OrderingError,
)
from .utils import *

logger = logging.getLogger(__name__)


class InputDefinition:
    """
    Declared arguments and options of a command or an application.
    """

    def __init__(self, entries=(), /):
        self._arguments = {}
        self._options = {}
        self._shortcuts = {}
        self.set_definition(entries)

    def __len__(self):
        return len(self._arguments) + len(self._options)

    def __bool__(self):
        return True

    def __repr__(self):
        return "input-definition(arguments=%r, options=%r)" % (
            self.argument_names(),
            tuple(self._options),
        )

    @property
    def arguments(self):
        return tuple(self._arguments.values())

    @property
    def options(self):
        return tuple(self._options.values())

    def set_definition(self, entries, /):
        """
        Add a mixed iterable of arguments and options, in order.

        Each entry is dispatched on its `kind` tag; anything without a known
        tag is rejected with TypeError.
        """
        for entry in entries:
            match getattr(entry, "kind", None):
                case EntryKind.ARGUMENT:
                    self.add_argument(entry)
                case EntryKind.OPTION:
                    self.add_option(entry)
                case _:
                    raise TypeError("definition entries must be input arguments or input options, not %r" % type(entry).__name__)
        return self

    def add_argument(self, argument, /):
        if argument.name in self._arguments:
            raise DuplicateArgumentError(
                "an argument named %r is already registered" % argument.name,
                hint="argument names must be unique within a command",
                name=argument.name,
            )
        if argument.required and self._arguments and not self.arguments[-1].required:
            raise OrderingError(
                "cannot add required argument %r after optional argument %r" % (argument.name, self.arguments[-1].name),
                hint="declare required arguments before optional ones",
                name=argument.name,
            )
        self._arguments[argument.name] = argument
        logger.debug("registered argument %r", argument.name)
        return self

    def add_option(self, option, /):
        if option.name in self._options:
            raise DuplicateOptionError(
                "an option named %r is already registered" % option.name,
                hint="option names must be unique within a command",
                name=option.name,
            )
        self._check_shortcuts(option.name, option.shortcuts)
        self._options[option.name] = option
        for shortcut in option.shortcuts:
            self._shortcuts[shortcut] = option.name
        logger.debug("registered option %r (shortcuts: %r)", option.name, option.shortcuts)
        return self

    def _check_shortcuts(self, name, shortcuts):
        for shortcut in shortcuts:
            if (owner := self._shortcuts.get(shortcut, name)) != name:
                raise DuplicateShortcutError(
                    "shortcut %r of option %r is already used by option %r" % (shortcut, name, owner),
                    hint="pick another shortcut for %r" % name,
                    name=name,
                    shortcut=shortcut,
                    owner=owner,
                )

    def add_shortcuts(self, name, /, *shortcuts):
        """
        Attach more shortcuts to a registered option, collision-checked.
        """
        option = self.option(name)
        candidate = tuple(dict.fromkeys(_sanitize_shortcuts(shortcuts)))
        self._check_shortcuts(name, candidate)
        option.add_shortcuts(candidate)
        for shortcut in candidate:
            self._shortcuts[shortcut] = name
        return self

    def mark_required(self, name, /):
        """
        Mark a registered argument as required.

        Only legal when every argument declared before it is required too.
        """
        argument = self.argument(name)
        names = tuple(self._arguments)
        for previous in self.arguments[:names.index(argument.name)]:
            if not previous.required:
                raise OrderingError(
                    "cannot make argument %r required after optional argument %r" % (argument.name, previous.name),
                    hint="declare required arguments before optional ones",
                    name=argument.name,
                )
        argument.mark_as_required()
        return self

    def mark_optional(self, name, /):
        """
        Mark a registered argument as optional.

        Only legal when no argument declared after it is required.
        """
        argument = self.argument(name)
        names = tuple(self._arguments)
        for following in self.arguments[names.index(argument.name) + 1:]:
            if following.required:
                raise OrderingError(
                    "cannot make argument %r optional before required argument %r" % (argument.name, following.name),
                    hint="declare required arguments before optional ones",
                    name=argument.name,
                )
        argument.mark_as_optional()
        return self

    def argument(self, name_or_index, /):
        """
        Return the argument declared under a name or at a position.
        """
        if isinstance(name_or_index, int) and not isinstance(name_or_index, bool):
            if 0 <= name_or_index < len(self._arguments):
                return self.arguments[name_or_index]
            raise NotRegisteredError(
                "no argument is declared at position %d" % name_or_index,
                hint="this definition declares %d %s" % (len(self._arguments), counted(len(self._arguments), "argument")),
                index=name_or_index,
            )
        try:
            return self._arguments[name_or_index]
        except KeyError:
            raise NotRegisteredError(
                "no argument named %r is declared" % name_or_index,
                hint="declared arguments: %s" % (", ".join(self._arguments) or "none"),
                name=name_or_index,
            ) from None

    def option(self, name, /):
        try:
            return self._options[name]
        except KeyError:
            raise NotRegisteredError(
                "no option named %r is declared" % name,
                hint="declared options: %s" % (", ".join(self._options) or "none"),
                name=name,
            ) from None

    def option_by_shortcut(self, shortcut, /):
        try:
            return self._options[self._shortcuts[shortcut]]
        except KeyError:
            raise NotRegisteredError(
                "no option uses the shortcut %r" % shortcut,
                hint="declared shortcuts: %s" % (", ".join(self._shortcuts) or "none"),
                shortcut=shortcut,
            ) from None

    def has_argument(self, name_or_index, /):
        if isinstance(name_or_index, int) and not isinstance(name_or_index, bool):
            return 0 <= name_or_index < len(self._arguments)
        return name_or_index in self._arguments

    def has_option(self, name, /):
        return name in self._options

    def has_option_shortcut(self, shortcut, /):
        return shortcut in self._shortcuts

    def is_missing_argument(self, name_or_index, /):
        return not self.has_argument(name_or_index)

    def is_missing_option(self, name, /):
        return not self.has_option(name)

    def argument_names(self):
        return tuple(self._arguments)

    def required_arguments(self):
        return tuple(argument for argument in self._arguments.values() if argument.required)

    def required_options(self):
        return tuple(option for option in self._options.values() if option.required)

    def flags(self):
        """
        Names and shortcuts of every boolean option.

        The argv tokenizer never lets these consume the following token.
        """
        flags = set()
        for option in self._options.values():
            if option.flag:
                flags.add(option.name)
                flags.update(option.shortcuts)
        return frozenset(flags)


__all__ = (
    "InputDefinition",
)
