r"""
Helmsman inputs: binding raw input against an InputDefinition.

Lifecycle (one input per invocation)

    UNBOUND ──bind()──▶ PARSING ──▶ VALIDATING ──▶ BOUND
                           │             │
                           └─────────────┴──▶ REJECTED (the error propagates)

- bind(definition) = with_definition(definition).parse().validate()
- with_definition() resets every bound value, so an input can be bound again
  against another definition (the application binds argv against its own
  definition first, then the resolved command binds the same input).

Sources
- ArgvInput: argv-style tokens, tokenized getopt-style:
    --name=value   --name value   --name   --no-name
    -x   -x value   -x=value   -abc   -n5   --   (rest is positional)
  Repeated options collect into a list; numeric values become int/float when
  the conversion is lossless ("42" → 42, "007" stays "007"). The first
  positional token is the command name and is never bound to an argument.
- ObjectInput: an in-memory {"arguments": {...}, "options": {...}} mapping,
  used for programmatic invocation. It goes through the same assignment and
  validation rules as ArgvInput.

Assignment rules (shared)
- positional values bind by declaration order; extras raise TooManyArgumentsError.
- option keys resolve through shortcuts first, then names; unknown keys raise
  UnexpectedOptionError; a required option with a blank value raises
  MissingOptionValueError.
- validate() raises MissingArgumentsError, then MissingOptionsError.

Quick example:
    >>> definition = InputDefinition([InputArgument("a", required=True), InputOption("flag")])
    >>> input = ArgvInput(["cmd", "v1", "--flag=v2"]).bind(definition)
    >>> input.argument("a"), input.option("flag")
    ('v1', 'v2')
"""
import logging
import math
import shlex
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType

from .faults import (
    MissingArgumentsError,
    MissingOptionsError,
    MissingOptionValueError,
    TooManyArgumentsError,
    UnexpectedOptionError,
    UnknownFieldError,
    ValidationError,
)
from .utils import *

logger = logging.getLogger(__name__)


class InputState(Enum):
    UNBOUND = "unbound"
    PARSING = "parsing"
    VALIDATING = "validating"
    BOUND = "bound"
    REJECTED = "rejected"


def _blank(value):
    """
    Whether an option value counts as "no value" for a required option.

    Anything falsy is blank: None, False, 0, "" and empty collections.
    """
    return not value


def _coerce(token):
    """
    Turn a numeric token into an int or a float when nothing is lost.

    "42" → 42, "-1.5" → -1.5, "007" → "007", "1e3" → "1e3", "nan" → "nan".
    """
    for type in (int, float):
        try:
            value = type(token)
        except ValueError:
            continue
        if str(value) == token and (type is int or math.isfinite(value)):
            return value
    return token


def _numeric(token):
    return _coerce(token) is not token


def _optionlike(token):
    return token.startswith("-") and token != "-" and not _numeric(token)


def _store(options, key, value):
    if key in options:
        if isinstance(options[key], list):
            options[key].append(value)
        else:
            options[key] = [options[key], value]
    else:
        options[key] = value


def tokenize(tokens, flags=frozenset(), /):
    """
    Split argv-style tokens into positionals and raw options.

    Parameters
    - tokens: sequence of strings.
    - flags: option names/shortcuts that never consume the following token.

    Returns
    - (positionals, options): a list of positional values and a dict mapping
      each raw key (long name or shortcut, dashes stripped) to its value.
      An option given without any value maps to Unset; --no-name maps to False.
    """
    positionals = []
    options = {}
    tokens = list(tokens)
    index = 0

    def follower(key):
        # Value for an option given without '=': consume the next token when allowed.
        nonlocal index
        if key not in flags and index < len(tokens) and not _optionlike(tokens[index]):
            index += 1
            return _coerce(tokens[index - 1])
        return Unset

    while index < len(tokens):
        token = tokens[index]
        index += 1

        if token == "--":
            positionals.extend(tokens[index:])
            break

        if token.startswith("--"):
            body = token[2:]
            if "=" in body:
                key, _, value = body.partition("=")
                _store(options, key, _coerce(value))
            elif body.startswith("no-") and len(body) > 3:
                _store(options, body[3:], False)
            else:
                _store(options, body, follower(body))
        elif _optionlike(token):
            body = token[1:]
            if "=" in body:
                letters, _, value = body.partition("=")
                if not letters:
                    positionals.append(token)
                    continue
                for letter in letters[:-1]:
                    _store(options, letter, Unset)
                _store(options, letters[-1], _coerce(value))
                continue
            for position, letter in enumerate(body):
                rest = body[position + 1:]
                if rest and _numeric(rest):
                    _store(options, letter, _coerce(rest))
                    break
                if not rest:
                    _store(options, letter, follower(letter))
                else:
                    _store(options, letter, Unset)
        else:
            # the first positional is a command name, never a number
            positionals.append(_coerce(token) if positionals else token)

    return positionals, options


class Input(ABC):
    """
    Abstract input source bound against an InputDefinition.

    Subclasses implement parse(), consuming their raw source through
    _assign_arguments(), _assign_argument() and _assign_option(). Validation,
    state handling and accessors are shared.
    """

    def __init__(self):
        self._definition = Unset
        self._arguments = {}
        self._options = {}
        self._state = InputState.UNBOUND

    @property
    def definition(self):
        return coalesce(self._definition)

    @property
    def state(self):
        return self._state

    @property
    def arguments(self):
        return MappingProxyType(self._arguments)

    @property
    def options(self):
        return MappingProxyType(self._options)

    @property
    def bound(self):
        return self._state is InputState.BOUND

    def with_definition(self, definition, /):
        self._definition = definition
        self._arguments = {}
        self._options = {}
        self._state = InputState.UNBOUND
        return self

    @abstractmethod
    def parse(self):
        """
        Consume the raw source and assign values against the definition.
        """
        raise NotImplementedError

    @abstractmethod
    def first_argument(self):
        """
        Name of the command this input addresses ("" when there is none).
        """
        raise NotImplementedError

    def bind(self, definition, /):
        self.with_definition(definition)
        try:
            self._state = InputState.PARSING
            self.parse()
            self._state = InputState.VALIDATING
            self.validate()
        except Exception:
            self._state = InputState.REJECTED
            raise
        self._state = InputState.BOUND
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("bound %s for %r (arguments: %r, options: %r)", type(self).__name__, self.first_argument(), self._arguments, self._options)
        return self

    def validate(self):
        definition = self._definition

        if missing := [argument.name for argument in definition.required_arguments() if argument.name not in self._arguments]:
            raise MissingArgumentsError(
                "not enough arguments provided, missing %s: %s" % (counted(len(missing), "argument"), ", ".join(missing)),
                hint="provide a value for every required argument",
                command=self.first_argument(),
                missing=tuple(missing),
            )

        if missing := [option.name for option in definition.required_options() if option.name not in self._options]:
            raise MissingOptionsError(
                "missing required %s: %s" % (counted(len(missing), "option"), ", ".join("--" + name for name in missing)),
                hint="provide a value for every required option",
                command=self.first_argument(),
                missing=tuple(missing),
            )

        return self

    def _too_many_arguments(self, value):
        command = self.first_argument()
        expected = self._definition.argument_names()
        if not expected:
            return TooManyArgumentsError(
                "no arguments expected for command %r" % command,
                hint="remove %r from the command line" % (value,),
                command=command,
                value=value,
            )
        return TooManyArgumentsError(
            "too many arguments, expected %s: %s" % (counted(len(expected), "argument"), ", ".join(expected)),
            hint="remove %r from the command line" % (value,),
            command=command,
            expected=expected,
            value=value,
        )

    def _assign_all(self, assignments, /):
        """
        Run every (assign, *params) step, then raise the first validation
        error met, if any.

        A failing step does not stop the others, so an input whose errors
        get ignored still holds everything that was assignable.
        """
        failure = None
        for assign, *params in assignments:
            try:
                assign(*params)
            except ValidationError as error:
                if failure is None:
                    failure = error
        if failure is not None:
            raise failure

    def _assign_arguments(self, values, /):
        """
        Bind positional values in declaration order.
        """
        expected = self._definition.argument_names()
        for index, value in enumerate(values):
            if index >= len(expected):
                raise self._too_many_arguments(value)
            self._arguments[expected[index]] = value

    def _assign_argument(self, name, value, /):
        """
        Bind a value to a declared argument by name.
        """
        if self._definition.is_missing_argument(name):
            raise self._too_many_arguments(name)
        self._arguments[name] = value

    def _assign_option(self, key, value, /):
        """
        Bind a value to the option addressed by a shortcut or a name.

        A bare option (value Unset) becomes True, except for required
        non-flag options which become "" and so fail the value check.
        """
        definition = self._definition

        if definition.has_option_shortcut(key):
            option = definition.option_by_shortcut(key)
        elif definition.has_option(key):
            option = definition.option(key)
        else:
            raise UnexpectedOptionError(
                "unexpected option %r" % (("-" if len(key) == 1 else "--") + key),
                hint="run '%s --help' to see the available options" % self.first_argument() if self.first_argument() else "run with --help to see the available options",
                command=self.first_argument(),
                option=key,
            )

        if value is Unset:
            value = "" if option.required and not option.flag else True

        if option.required and _blank(value):
            raise MissingOptionValueError(
                "option %r requires a value" % ("--" + option.name),
                hint="pass it as --%s=<value>" % option.name,
                command=self.first_argument(),
                option=option.name,
            )

        self._options[option.name] = value

    def _field(self, name, kind):
        definition = self._definition
        declared = definition is not Unset and (
            definition.has_argument(name) if kind == "argument" else definition.has_option(name)
        )
        if not declared:
            raise UnknownFieldError(
                "%s %r is not declared" % (kind, name),
                hint="declare it in configure() before reading it",
                name=name,
            )

    def argument(self, name, /):
        """
        Bound value of an argument, or its declared default.
        """
        self._field(name, "argument")
        if name in self._arguments:
            return self._arguments[name]
        return self._definition.argument(name).default

    def option(self, name, /):
        """
        Bound value of an option, or its declared default.
        """
        self._field(name, "option")
        if name in self._options:
            return self._options[name]
        return self._definition.option(name).default

    def has_argument(self, name, /):
        return name in self._arguments

    def has_option(self, name, /):
        return name in self._options

    def is_missing_argument(self, name, /):
        return not self.has_argument(name)

    def is_missing_option(self, name, /):
        return not self.has_option(name)


class ArgvInput(Input):
    """
    Input read from argv-style tokens.

    Parameters
    - tokens:
      • Unset: read sys.argv[1:].
      • str: shell-like string, split with shlex.split.
      • Iterable[str]: pre-tokenized sequence.
    """

    def __init__(self, tokens=Unset, /):
        super().__init__()
        if tokens is Unset:
            tokens = sys.argv[1:]
        elif isinstance(tokens, str):
            tokens = shlex.split(tokens)
        elif not isinstance(tokens, Iterable):
            raise TypeError("ArgvInput() argument must be a string or an iterable of strings")
        self._tokens = tuple(tokens)
        if not all(isinstance(token, str) for token in self._tokens):
            raise TypeError("ArgvInput() argument must be a string or an iterable of strings")

    @property
    def tokens(self):
        return self._tokens

    def _tokenized(self):
        flags = self._definition.flags() if self._definition is not Unset else frozenset()
        return tokenize(self._tokens, flags)

    def first_argument(self):
        positionals, _ = self._tokenized()
        return positionals[0] if positionals else ""

    def has_raw_option(self, *names):
        """
        Whether any of the given names (long names or shortcuts) was passed.

        Looks at the tokens only, so it answers even when binding failed.
        """
        _, options = self._tokenized()
        return any(options.get(name, False) is not False for name in names)

    def parse(self):
        positionals, options = self._tokenized()
        self._assign_all([
            (self._assign_arguments, positionals[1:]),
            *((self._assign_option, key, value) for key, value in options.items()),
        ])
        return self


class ObjectInput(Input):
    """
    Input read from an in-memory parameter mapping.

    `parameters` may hold an "arguments" and an "options" mapping; both are
    optional. Option keys may be names or shortcuts.
    """

    def __init__(self, command_name, parameters=None, /):
        super().__init__()
        if not isinstance(command_name, str):
            raise TypeError("ObjectInput() command name must be a string")
        parameters = coalesce(parameters) or {}
        if not isinstance(parameters, Mapping):
            raise TypeError("ObjectInput() parameters must be a mapping")
        self._command_name = command_name
        self._parameters = {
            "arguments": dict(parameters.get("arguments") or {}),
            "options": dict(parameters.get("options") or {}),
        }

    @property
    def parameters(self):
        return MappingProxyType(self._parameters)

    def first_argument(self):
        return self._command_name

    def parse(self):
        self._assign_all([
            *((self._assign_argument, name, value) for name, value in self._parameters["arguments"].items()),
            *((self._assign_option, key, value) for key, value in self._parameters["options"].items()),
        ])
        return self


__all__ = (
    "InputState",
    "Input",
    "ArgvInput",
    "ObjectInput",
    "tokenize",
)
