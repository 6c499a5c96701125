"""
Helmsman faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every error kind. Codes are
  grouped by domain to keep copy consistent and make logs/searches predictable.
- Fault: shared base that carries message + options (title, code, hint, context).
- DefinitionError family: programmer errors raised while a command or an
  application is being configured. They are never caught inside the package.
- CommandException family: user-input and dispatch errors raised while binding
  input or resolving a command. They know their title, code and hint.
- FaultReport: rich renderable for any exception (header, message, hint and the
  stack trace, one dimmed frame per line), used by Application.terminate().

Host configuration (read from __main__ when present)
- __styles__: palette overrides (e.g. {"code": "bold red"}).
- __codes__: FaultCode → label remapping.
- __prog__: program label used in report headers.
"""
import traceback
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text


class FaultCode(IntEnum):
    """
    canonical fault codes used across the framework (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • COMMAND_NOT_REGISTERED
    - options (1111x)
      • UNEXPECTED_OPTION, MISSING_OPTION_VALUE, MISSING_OPTIONS
    - arguments (1112x)
      • TOO_MANY_ARGUMENTS, MISSING_ARGUMENTS
    - access (1113x)
      • UNKNOWN_FIELD
    - runtime (1114x)
      • RUNTIME_ERROR, NOT_IMPLEMENTED
    - definitions (21xxx)
      • duplicates, shortcuts, ordering, missing names, lookups, wiring

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors (11xxx) ---
    COMMAND_NOT_REGISTERED      = 11101

    # --- option errors (11xxx) ---
    UNEXPECTED_OPTION           = 11111
    MISSING_OPTION_VALUE        = 11112
    MISSING_OPTIONS             = 11113

    # --- argument errors (11xxx) ---
    TOO_MANY_ARGUMENTS          = 11121
    MISSING_ARGUMENTS           = 11122

    # --- access errors (11xxx) ---
    UNKNOWN_FIELD               = 11131

    # --- runtime errors (11xxx) ---
    RUNTIME_ERROR               = 11141
    NOT_IMPLEMENTED             = 11142

    # --- definition errors (21xxx) ---
    DUPLICATE_ARGUMENT          = 21101
    DUPLICATE_OPTION            = 21102
    DUPLICATE_SHORTCUT          = 21103
    DUPLICATE_COMMAND           = 21104
    INVALID_SHORTCUT            = 21105
    REQUIRED_AFTER_OPTIONAL     = 21111
    MISSING_COMMAND_NAME        = 21121
    MISSING_ARGUMENT_NAME       = 21122
    MISSING_OPTION_NAME         = 21123
    NOT_REGISTERED              = 21131
    MISSING_APPLICATION         = 21141
    INVALID_DEFAULT_COMMAND     = 21142

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Fault:
    """
    Shared base for every helmsman error.

    A fault carries its message plus a read-only mapping of options. The
    options "code", "title" and "hint" override the class defaults; any
    other key is free-form context (names, tokens, the offending command).
    """
    code = FaultCode.RUNTIME_ERROR
    title = "unexpected error"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        if "code" in options:
            self.code = options["code"]
        if "title" in options:
            self.title = options["title"]

    @property
    def hint(self):
        return self.options.get("hint")


class DefinitionError(Fault, ValueError):
    title = "invalid definition"


class DuplicateNameError(DefinitionError):
    title = "duplicate name"


class DuplicateArgumentError(DuplicateNameError):
    code = FaultCode.DUPLICATE_ARGUMENT
    title = "duplicate argument"


class DuplicateOptionError(DuplicateNameError):
    code = FaultCode.DUPLICATE_OPTION
    title = "duplicate option"


class DuplicateShortcutError(DuplicateNameError):
    code = FaultCode.DUPLICATE_SHORTCUT
    title = "duplicate shortcut"


class DuplicateCommandError(DuplicateNameError):
    code = FaultCode.DUPLICATE_COMMAND
    title = "duplicate command"


class InvalidShortcutError(DefinitionError):
    code = FaultCode.INVALID_SHORTCUT
    title = "invalid shortcut"


class OrderingError(DefinitionError):
    code = FaultCode.REQUIRED_AFTER_OPTIONAL
    title = "required argument after optional"


class MissingNameError(DefinitionError):
    title = "missing name"


class MissingCommandNameError(MissingNameError):
    code = FaultCode.MISSING_COMMAND_NAME
    title = "missing command name"


class MissingArgumentNameError(MissingNameError):
    code = FaultCode.MISSING_ARGUMENT_NAME
    title = "missing argument name"


class MissingOptionNameError(MissingNameError):
    code = FaultCode.MISSING_OPTION_NAME
    title = "missing option name"


class NotRegisteredError(DefinitionError, LookupError):
    code = FaultCode.NOT_REGISTERED
    title = "not registered"


class MissingApplicationError(DefinitionError):
    code = FaultCode.MISSING_APPLICATION
    title = "missing application"


class InvalidDefaultCommandError(DefinitionError):
    code = FaultCode.INVALID_DEFAULT_COMMAND
    title = "invalid default command"


class CommandException(Fault, Exception):
    title = "command error"


class ValidationError(CommandException):
    title = "invalid input"


class TooManyArgumentsError(ValidationError):
    code = FaultCode.TOO_MANY_ARGUMENTS
    title = "too many arguments"


class UnexpectedOptionError(ValidationError):
    code = FaultCode.UNEXPECTED_OPTION
    title = "unexpected option"


class MissingArgumentsError(ValidationError):
    code = FaultCode.MISSING_ARGUMENTS
    title = "missing arguments"


class MissingOptionsError(ValidationError):
    code = FaultCode.MISSING_OPTIONS
    title = "missing options"


class MissingOptionValueError(ValidationError):
    code = FaultCode.MISSING_OPTION_VALUE
    title = "missing option value"


class UnknownFieldError(CommandException):
    code = FaultCode.UNKNOWN_FIELD
    title = "unknown field"


class CommandNotRegisteredError(CommandException):
    code = FaultCode.COMMAND_NOT_REGISTERED
    title = "unknown command"


class FaultReport:
    """
    Rich renderable describing a failed invocation.

    Layout
    - header: "[ <program> | <code> | <Title> ]"
    - message: the error message (or the exception type when empty)
    - hint: " → <hint>" for faults that carry one
    - trace: one dimmed line per stack frame, innermost last

    When fancy is set, message, hint and trace are wrapped in a Panel that
    carries the header as its title. When colorful is unset, every style is
    dropped so the report stays plain text.
    """

    def __init__(self, error, /, *, program="", colorful=True, fancy=False, trace=True):
        if not isinstance(error, BaseException):
            raise TypeError("FaultReport() argument must be an exception")
        self.error = error
        self.program = program
        self.colorful = colorful
        self.fancy = fancy
        self.trace = trace

    @property
    def code(self):
        if isinstance(self.error, Fault):
            return self.error.code
        if isinstance(self.error, NotImplementedError):
            return FaultCode.NOT_IMPLEMENTED
        return FaultCode.RUNTIME_ERROR

    @property
    def title(self):
        if isinstance(self.error, Fault):
            return self.error.title
        return "not implemented" if isinstance(self.error, NotImplementedError) else "runtime error"

    def frames(self):
        """
        Yield one "at <function> (<file>:<line>)" string per traceback frame.
        """
        for frame in traceback.extract_tb(self.error.__traceback__):
            yield "at %s (%s:%s)" % (frame.name, frame.filename, frame.lineno)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "frame": "dim",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        program = getattr(main, "__prog__", self.program) or "error"

        header = Text.assemble(
            "[ ",
            text(program, styler("prog-name")),
            " | ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        renders = [text(str(self.error) or type(self.error).__name__, styler("error-message"))]

        if hint := getattr(self.error, "hint", None):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.trace:
            renders.extend(text("    " + frame, styler("frame")) for frame in self.frames())

        if self.fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)


__all__ = (
    "FaultCode",
    "Fault",
    "DefinitionError",
    "DuplicateNameError",
    "DuplicateArgumentError",
    "DuplicateOptionError",
    "DuplicateShortcutError",
    "DuplicateCommandError",
    "InvalidShortcutError",
    "OrderingError",
    "MissingNameError",
    "MissingCommandNameError",
    "MissingArgumentNameError",
    "MissingOptionNameError",
    "NotRegisteredError",
    "MissingApplicationError",
    "InvalidDefaultCommandError",
    "CommandException",
    "ValidationError",
    "TooManyArgumentsError",
    "UnexpectedOptionError",
    "MissingArgumentsError",
    "MissingOptionsError",
    "MissingOptionValueError",
    "UnknownFieldError",
    "CommandNotRegisteredError",
    "FaultReport",
)
