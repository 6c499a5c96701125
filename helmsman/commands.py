"""
Helmsman commands: the unit of work an application dispatches to.

Overview
- A Command owns an InputDefinition, populated once by the configure() hook
  that runs inside the constructor:

      class Greet(Command):
          def configure(self):
              self.set_name("greet").set_description("Say hello")
              self.add_argument("name").required().description("Who to greet")
              self.add_option("shout").shortcuts("s").default(False)

          def run(self):
              text = "hello %s" % self.argument("name")
              self.console.print(text.upper() if self.option("shout") else text)

- add_argument()/add_option() hand out a builder; with a callback they pass the
  builder to it and return the command instead. Both forms end in the same state.
- handle(input) binds the input against the definition, then runs the command.
  run() may be a plain method or a coroutine function; its awaitable result is
  awaited. Validation errors propagate unless ignore_validation_errors() was set.
- run_command(name, parameters) invokes a sibling command of the same
  application through an ObjectInput, reusing the whole binding pipeline.

Application link
- The application is held through a weak reference; asking for it before the
  command was registered raises MissingApplicationError.
"""
import functools
import inspect
import logging
import operator
import weakref

from rich.console import Console

from .arguments import *
from .definitions import InputDefinition
from .faults import MissingApplicationError, UnknownFieldError, ValidationError
from .inputs import ObjectInput
from .utils import *

logger = logging.getLogger(__name__)


class CommandType(type):
    """
    Metaclass giving commands a stable representation.

    Responsibilities
    - Derive __typename__ from the class name ("DbSeed" → "db-seed"); it is the
      default command name.
    - Expose the fields listed in __introspectable__ through mirror() unless
      the class defines them itself.
    - Provide __repr__/__rich_repr__ for diagnostics and pretty printing.
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
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


class Command(metaclass=CommandType):
    """
    Base class of every command.

    Subclasses override configure() to declare their input and run() to do
    their work. The command name defaults to the hyphenated class name.
    """
    __introspectable__ = (
        "name",
        "description",
        "aliases",
    )

    def __init__(self, name=Unset, /):
        self._name = ""
        self._description = ""
        self._aliases = []
        self._definition = InputDefinition()
        self._input = Unset
        self._application = Unset
        self._console = Unset
        self._ignore_validation_errors = False
        self._handler = Unset
        self.set_name(coalesce(name, type(self).__typename__))
        self.configure()

    def configure(self):
        """
        Declare the command's name, description, arguments and options.

        Runs once, from the constructor.
        """

    def run(self):
        """
        Do the command's work. Plain method or coroutine function.

        The base implementation calls the handler set through set_handler().
        """
        if self._handler is not Unset:
            return self._handler(self)
        raise NotImplementedError("command %r does not implement run()" % self._name)

    @property
    def definition(self):
        return self._definition

    @property
    def input(self):
        return coalesce(self._input)

    @property
    def application(self):
        if self._application is Unset or (application := self._application()) is None:
            raise MissingApplicationError(
                "command %r is not registered with an application" % self._name,
                hint="add the command to an application before running it",
                command=self._name,
            )
        return application

    @property
    def console(self):
        """
        Output console: the application's when registered, a private one otherwise.
        """
        if self._application is not Unset and (application := self._application()) is not None:
            return application.console
        if self._console is Unset:
            self._console = Console()
        return self._console

    def set_name(self, name, /):
        if not isinstance(name, str):
            raise TypeError("command name must be a string")
        self._name = name.strip()
        return self

    def set_description(self, description, /):
        self._description = str(description if description is not None else "").strip()
        return self

    def set_handler(self, handler, /):
        """
        Use `handler(command)` as the body of run() (ad-hoc commands).
        """
        if not callable(handler):
            raise TypeError("command handler must be callable")
        self._handler = handler
        return self

    def has_description(self):
        return bool(self._description)

    def add_alias(self, *aliases):
        for alias in aliases:
            if not isinstance(alias, str):
                raise TypeError("command aliases must be strings")
            if (alias := alias.strip()) and alias not in self._aliases:
                self._aliases.append(alias)
        return self

    def set_application(self, application, /):
        self._application = weakref.ref(application)
        return self

    def ignore_validation_errors(self):
        self._ignore_validation_errors = True
        return self

    def should_ignore_validation_errors(self):
        return self._ignore_validation_errors

    def is_enabled(self):
        return True

    def add_argument(self, name, callback=None, /):
        """
        Declare a positional argument.

        Returns an ArgumentBuilder, or the command when a callback is given
        (the callback receives the builder).
        """
        argument = InputArgument(name)
        self._definition.add_argument(argument)
        builder = ArgumentBuilder(argument, self._definition)
        if callback is None:
            return builder
        callback(builder)
        return self

    def add_option(self, name, callback=None, /):
        """
        Declare a named option.

        Returns an OptionBuilder, or the command when a callback is given
        (the callback receives the builder).
        """
        option = InputOption(name)
        self._definition.add_option(option)
        builder = OptionBuilder(option, self._definition)
        if callback is None:
            return builder
        callback(builder)
        return self

    def _field(self, name, kind):
        if kind == "argument":
            declared = self._definition.has_argument(name)
        else:
            declared = self._definition.has_option(name)
        if declared:
            return
        raise UnknownFieldError(
            "command %r does not declare %s %r" % (self._name, kind, name),
            hint="declare it in configure() before reading it",
            command=self._name,
            name=name,
        )

    def argument(self, name, /):
        """
        Value of an argument for the current input, or its declared default.
        """
        self._field(name, "argument")
        if self._input is not Unset and self._input.definition is self._definition:
            return self._input.argument(name)
        return self._definition.argument(name).default

    def option(self, name, /):
        """
        Value of an option for the current input, or its declared default.
        """
        self._field(name, "option")
        if self._input is not Unset and self._input.definition is self._definition:
            return self._input.option(name)
        return self._definition.option(name).default

    def with_input(self, input, /):
        """
        Bind an input against this command's definition and keep it.

        Validation errors are swallowed when the command ignores them; the
        command then keeps whatever was assignable.
        """
        self._input = input
        try:
            input.bind(self._definition)
        except ValidationError as error:
            if not self._ignore_validation_errors:
                raise
            logger.debug("command %r ignored validation error: %s", self._name, error)
        return self

    async def handle(self, input, /):
        logger.debug("handling command %r", self._name)
        self.with_input(input)
        result = self.run()
        if inspect.isawaitable(result):
            result = await result
        return result

    async def run_command(self, name, parameters=None, /):
        """
        Run a sibling command with in-memory parameters.

        `parameters` is a mapping with optional "arguments" and "options"
        mappings, validated exactly like command-line input.
        """
        command = self.application.get(name)
        logger.debug("command %r runs command %r", self._name, command.name)
        return await command.handle(ObjectInput(command.name, parameters))

    def usage(self):
        """
        One-line synopsis: name, then <required> and [optional?] arguments.
        """
        return " ".join([self._name] + [
            "<%s>" % argument.name if argument.required else "[%s?]" % argument.name
            for argument in self._definition.arguments
        ])


__all__ = (
    "Command",
)

# The metaclass is an implementation detail of Command.
del CommandType
