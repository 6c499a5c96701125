r"""
Helmsman input entries: positional arguments, named options and their builders.

Overview
- Entries
  • InputArgument: positional value bound by declaration order.
  • InputOption: named value (--name / -n), optionally with single-letter shortcuts.
  Both carry a class-level `kind` tag (EntryKind) so containers can dispatch on
  what an entry is without runtime type tests.

- Builders
  • ArgumentBuilder / OptionBuilder: fluent wrappers handed out by
    Command.add_argument()/Command.add_option(). Every method mutates the wrapped
    entry and returns the builder itself, so calls chain:

        command.add_option("dry-run").shortcuts("d").default(False).description("...")

  When a builder is attached to a definition, toggling `required`/`optional` and
  adding shortcuts go through that definition so its invariants keep holding
  after registration.

- Introspection & representation
  • EntryType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- name: non-empty string, trimmed.
- description: string, trimmed (defaults to "").
- default: any value, None included (returned as-is, never copied).
- required: bool.
- shortcuts (options only): ordered, de-duplicated, trimmed, leading dashes removed.

Quick example:
    >>> option = InputOption("random", shortcuts="r", default=False)
    >>> option.shortcuts
    ('r',)
    >>> option.flag
    True
"""
import functools
import operator
from enum import Enum

from .faults import InvalidShortcutError, MissingArgumentNameError, MissingOptionNameError
from .utils import *


class EntryKind(Enum):
    """
    Tag carried by every definition entry.
    """
    ARGUMENT = "argument"
    OPTION = "option"


class EntryType(type):
    """
    Metaclass that turns entries into introspectable value objects.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and reprs.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": typename(name),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ()) if field not in namespace
            },
        )

        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - input-option(name='random', description='', default=False, ...)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, fault, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} name must be a string")
    elif not (name := name.strip()):
        raise fault(f"{cls.__typename__} name cannot be empty", hint="pass a non-empty name")
    return name


def _sanitize_shortcuts(shortcuts, /):
    """
    Flatten strings and iterables of strings into clean shortcut labels.

    "r" → ["r"]; ["-r", " R "] → ["r", "R"]; empty labels are dropped.
    A shortcut is a single character, since "-ab" reads as "-a -b".
    """
    for shortcut in shortcuts:
        if isinstance(shortcut, str):
            if shortcut := shortcut.strip().lstrip("-"):
                if len(shortcut) > 1:
                    raise InvalidShortcutError(
                        "shortcut %r must be a single character" % shortcut,
                        hint="use a long option name for %r instead" % shortcut,
                        shortcut=shortcut,
                    )
                yield shortcut
        elif shortcut is not None:
            yield from _sanitize_shortcuts(shortcut)


class InputArgument(metaclass=EntryType):
    """
    Positional input entry.

    Arguments are bound by position, so a definition keeps them in declaration
    order and rejects a required argument declared after an optional one.
    """
    __introspectable__ = (
        "name",
        "description",
        "default",
        "required",
    )

    kind = EntryKind.ARGUMENT

    def __init__(self, name, /, description="", default=None, required=False):
        self._name = _sanitize_name(type(self), name, MissingArgumentNameError)
        self._description = ""
        self._default = default
        self._required = bool(required)
        self.set_description(description)

    @property
    def default(self):
        return self._default

    @property
    def optional(self):
        return not self._required

    def set_description(self, description, /):
        self._description = str(description if description is not None else "").strip()
        return self

    def set_default(self, default, /):
        self._default = default
        return self

    def mark_as_required(self):
        self._required = True
        return self

    def mark_as_optional(self):
        self._required = False
        return self


class InputOption(metaclass=EntryType):
    """
    Named input entry.

    An option is addressed by its name (--name) or by any of its shortcuts
    (-n). Options whose default is a bool are flags: they never consume the
    token that follows them on the command line.
    """
    __introspectable__ = (
        "name",
        "description",
        "default",
        "required",
        "shortcuts",
    )

    kind = EntryKind.OPTION

    def __init__(self, name, /, description="", default=None, required=False, shortcuts=()):
        self._name = _sanitize_name(type(self), name, MissingOptionNameError)
        self._description = ""
        self._default = default
        self._required = bool(required)
        self._shortcuts = []
        self.set_description(description)
        self.add_shortcuts(shortcuts)

    @property
    def default(self):
        return self._default

    @property
    def optional(self):
        return not self._required

    @property
    def flag(self):
        return isinstance(self._default, bool)

    def set_description(self, description, /):
        self._description = str(description if description is not None else "").strip()
        return self

    def set_default(self, default, /):
        self._default = default
        return self

    def add_shortcuts(self, *shortcuts):
        for shortcut in tuple(_sanitize_shortcuts(shortcuts)):
            if shortcut not in self._shortcuts:
                self._shortcuts.append(shortcut)
        return self

    def mark_as_required(self):
        self._required = True
        return self

    def mark_as_optional(self):
        self._required = False
        return self


class ArgumentBuilder:
    """
    Fluent builder around an InputArgument.

    The builder never owns the argument: the definition (if any) holds it.
    """

    def __init__(self, argument, definition=Unset, /):
        if getattr(argument, "kind", None) is not EntryKind.ARGUMENT:
            raise TypeError("ArgumentBuilder() argument must be an input argument")
        self._argument = argument
        self._definition = definition

    @property
    def argument(self):
        return self._argument

    def description(self, description, /):
        self._argument.set_description(description)
        return self

    def default(self, default, /):
        self._argument.set_default(default)
        return self

    def required(self):
        if self._definition is not Unset:
            self._definition.mark_required(self._argument.name)
        else:
            self._argument.mark_as_required()
        return self

    def optional(self):
        if self._definition is not Unset:
            self._definition.mark_optional(self._argument.name)
        else:
            self._argument.mark_as_optional()
        return self


class OptionBuilder:
    """
    Fluent builder around an InputOption.
    """

    def __init__(self, option, definition=Unset, /):
        if getattr(option, "kind", None) is not EntryKind.OPTION:
            raise TypeError("OptionBuilder() argument must be an input option")
        self._option = option
        self._definition = definition

    @property
    def option(self):
        return self._option

    def shortcut(self, shortcut, /):
        return self.shortcuts(shortcut)

    def shortcuts(self, *shortcuts):
        if self._definition is not Unset:
            self._definition.add_shortcuts(self._option.name, *shortcuts)
        else:
            self._option.add_shortcuts(*shortcuts)
        return self

    def description(self, description, /):
        self._option.set_description(description)
        return self

    def default(self, default, /):
        self._option.set_default(default)
        return self

    def required(self):
        self._option.mark_as_required()
        return self

    def optional(self):
        self._option.mark_as_optional()
        return self


__all__ = (
    "EntryKind",
    "InputArgument",
    "InputOption",
    "ArgumentBuilder",
    "OptionBuilder",
)

# The metaclass is an implementation detail of the entry classes.
del EntryType
