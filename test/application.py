"""
Application behavioral tests (registry, dispatch, termination).

Scope
- Validate registration rules (names, aliases, disabled commands, defaults).
- Validate the dispatch state machine: --version, --help, default command,
  unknown commands and exit codes.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured through rich consoles writing to StringIO buffers.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from helmsman import Application, Command
from helmsman.faults import (
    CommandNotRegisteredError,
    DuplicateCommandError,
    InvalidDefaultCommandError,
    MissingCommandNameError,
)


class Recorder(Command):
    """Command remembering every run."""

    def __init__(self, name, /):
        self.calls = []
        super().__init__(name)

    def run(self):
        self.calls.append(dict(self.input.arguments) | dict(self.input.options))


class Disabled(Command):

    def is_enabled(self):
        return False


class Failing(Command):

    def run(self):
        raise RuntimeError("this does not work")


def application(name="App", version="1.0.0"):
    app = Application(name, version, colorful=False)
    app.with_output(
        Console(file=io.StringIO(), color_system=None, width=100),
        Console(file=io.StringIO(), color_system=None, width=200),
    )
    return app


def output(app):
    return app.console.file.getvalue()


def errors(app):
    return app.errors.file.getvalue()


class TestRegistry(TestCase):
    """Behavioral tests for command registration and lookup."""

    def testAddAndGet(self):
        app = application()
        command = Recorder("list")
        app.add(command)
        self.assertIs(app.get("list"), command)
        self.assertIs(command.application, app)
        self.assertTrue(app.has("list"))
        self.assertTrue(app.is_missing("nope"))

    def testInsertionOrderIsKept(self):
        app = application().add_commands([Recorder("b"), Recorder("a"), Recorder("c")])
        self.assertEqual(list(app.commands), ["b", "a", "c"])

    def testEmptyNameRaises(self):
        with self.assertRaises(MissingCommandNameError):
            application().add(Command(""))

    def testDisabledCommandsAreSkipped(self):
        app = application().add(Disabled("hidden"))
        self.assertTrue(app.is_missing("hidden"))
        self.assertEqual(len(app.commands), 0)

    def testDuplicateNameRaises(self):
        app = application().add(Recorder("list"))
        with self.assertRaises(DuplicateCommandError):
            app.add(Recorder("list"))

    def testDuplicateAliasRaises(self):
        app = application().add(Recorder("list").add_alias("ls"))
        with self.assertRaises(DuplicateCommandError):
            app.add(Recorder("ls"))

    def testAliasResolves(self):
        command = Recorder("list").add_alias("ls")
        app = application().add(command)
        self.assertIs(app.get("ls"), command)

    def testUnknownCommandRaises(self):
        app = application().add(Recorder("list"))
        with self.assertRaises(CommandNotRegisteredError) as context:
            app.get("lsit")
        self.assertIn("lsit", str(context.exception))
        self.assertIn("list", context.exception.hint)

    def testBuiltInHelpIsResolvable(self):
        app = application()
        self.assertEqual(app.get("help").name, "help")
        self.assertNotIn("help", app.commands)

    def testRegisterConfiguresAdHocCommand(self):
        app = application()
        app.register("inspire", lambda command: command.set_description("Print an inspiring message"))
        self.assertEqual(app.get("inspire").description, "Print an inspiring message")

    def testNamespaces(self):
        app = application()
        for name in ("db:seed", "list", "db:fake", "migrations:run", "test"):
            app.add(Recorder(name))
        self.assertEqual(app.namespaces(), ["db", "migrations"])

    def testDefaultCommandByName(self):
        app = application().add(Recorder("list"))
        app.use_default_command("list")
        self.assertEqual(app.default_command, "list")

    def testDefaultCommandInstanceIsRegistered(self):
        command = Recorder("serve")
        app = application().use_default_command(command)
        self.assertIs(app.get("serve"), command)

    def testInvalidDefaultCommandRaises(self):
        with self.assertRaises(InvalidDefaultCommandError):
            application().use_default_command("missing")
        with self.assertRaises(InvalidDefaultCommandError):
            application().use_default_command(42)


class TestDispatch(TestCase):
    """Behavioral tests for Application.run()."""

    def testVersionPrintsNameAndVersion(self):
        app = application()
        command = Recorder("list")
        app.add(command)
        app.run(["-v"])
        self.assertIn("App", output(app))
        self.assertIn("1.0.0", output(app))
        self.assertEqual(command.calls, [])

    def testVersionWithOnlyAName(self):
        app = Application("App", colorful=False)
        app.with_output(Console(file=io.StringIO(), color_system=None))
        app.run(["--version"])
        self.assertEqual(output(app).strip(), "App")

    def testDispatchExitsWithZero(self):
        app = application()
        command = Recorder("greet")
        command.add_argument("name").required()
        app.add(command)
        with self.assertRaises(SystemExit) as context:
            app.run(["greet", "ada"])
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(command.calls, [{"name": "ada"}])

    def testUnknownCommandExitsWithOne(self):
        app = application()
        with self.assertRaises(SystemExit) as context:
            app.run(["nope"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("nope", errors(app))

    def testFailingCommandReportsError(self):
        app = application().add(Failing("work"))
        with self.assertRaises(SystemExit) as context:
            app.run(["work"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("this does not work", errors(app))
        self.assertIn("at run", errors(app))

    def testValidationErrorExitsWithOne(self):
        app = application()
        command = Recorder("greet")
        command.add_argument("name").required()
        app.add(command)
        with self.assertRaises(SystemExit) as context:
            app.run(["greet"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("name", errors(app))
        self.assertEqual(command.calls, [])

    def testIgnoredValidationErrorsExitWithZero(self):
        app = application()
        command = Recorder("greet").ignore_validation_errors()
        command.add_argument("name").required()
        app.add(command)
        with self.assertRaises(SystemExit) as context:
            app.run(["greet"])
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(command.calls, [{}])

    def testDefaultCommandRunsWithoutName(self):
        app = application()
        command = Recorder("serve")
        app.use_default_command(command)
        with self.assertRaises(SystemExit) as context:
            app.run([])
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(len(command.calls), 1)

    def testNoCommandShowsApplicationHelp(self):
        app = application().add(Recorder("list"))
        with self.assertRaises(SystemExit) as context:
            app.run([])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Available commands", output(app))

    def testHelpFlagShowsCommandHelp(self):
        app = application()
        command = Recorder("greet").set_description("Say hello")
        command.add_argument("name").required()
        app.add(command)
        with self.assertRaises(SystemExit) as context:
            app.run(["greet", "--help"])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Say hello", output(app))
        self.assertIn("greet <name>", output(app))
        self.assertEqual(command.calls, [])

    def testHelpCommandWithTarget(self):
        app = application()
        app.add(Recorder("greet").set_description("Say hello"))
        with self.assertRaises(SystemExit) as context:
            app.run(["help", "greet"])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Say hello", output(app))

    def testHelpForUnknownCommandExitsWithOne(self):
        app = application()
        with self.assertRaises(SystemExit) as context:
            app.run(["nope", "--help"])
        self.assertEqual(context.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
