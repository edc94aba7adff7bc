"""
Application behavioral tests (line dispatch and the read-eval-print loop).

Scope
- Validate dispatch(): trimming, exit, suffix-based help, resolution to a
  handler, and parse errors turned into output lines.
- Validate run(): init output, prompts, exit, end of input and Ctrl-C.

Conventions
- Test method names follow CamelCase per project convention.
- Streams are in-memory (io.StringIO / io.BytesIO); nothing touches the terminal.
"""
import io
import unittest
from unittest import TestCase, mock

from dialect import App, Registry, describe_argument, describe_command, describe_grammar, loads

GRAMMAR = """
prompt: "> "
exitCmd: exit
helpCmd: help
initFunc: greet
exitFunc: farewell
commands:
  - label: show
    arguments:
      - label: ""
        help: show every task
        execFunc: showTasks
        options:
          - label: readOnly
            short: -r
            long: --read-only
            help: only read tasks
      - label: daily-tasks
        help: show the tasks of the day
        execFunc: showDailyTasks
        options:
          - label: readOnly
            short: -r
            help: only read tasks
            variable:
              label: var4
              required: true
              default: das
  - label: add
    arguments:
      - label: task
        execFunc: addTask
        options:
          - label: name
            long: --name
            variable:
              label: title
              default: untitled
"""


def registry():
    registry = Registry()

    @registry.register
    def greet(flags):
        return b"hello\n"

    @registry.register
    def farewell(flags):
        return b"bye\n"

    @registry.register
    def showTasks(flags):
        return b"all read-only\n" if flags.isset("readOnly") else b"all\n"

    @registry.register
    def showDailyTasks(flags):
        value, hasvar = flags.getvar("readOnly")
        return b"daily %s %s\n" % (value.encode(), b"set" if hasvar else b"unset")

    @registry.register
    def addTask(flags):
        value, _ = flags.getvar("name")
        return "added %s\n" % value

    return registry


class TestDispatch(TestCase):

    def setUp(self):
        self.grammar = loads(GRAMMAR)
        self.show, self.add = self.grammar.commands
        self.app = App(self.grammar, registry(), stdin=io.StringIO(), stdout=io.BytesIO())

    def testShortSwitchOnEmptyLabelArgument(self):
        self.assertEqual(self.app.dispatch("show -r"), b"all read-only\n")

    def testEmptyLabelArgumentWithoutOptions(self):
        self.assertEqual(self.app.dispatch("show"), b"all\n")

    def testShortValueOnLabelledArgument(self):
        self.assertEqual(self.app.dispatch("show daily-tasks -r extra"), b"daily extra set\n")

    def testRequiredVariableMissing(self):
        self.assertEqual(
            self.app.dispatch("show daily-tasks -r"),
            b'missing variable "var4" for option "readOnly"\n',
        )

    def testUnknownCommand(self):
        self.assertEqual(self.app.dispatch("unknown"), b'unable to find command "unknown"\n')

    def testUnknownArgument(self):
        self.assertEqual(
            self.app.dispatch("add --name=x"),
            b'invalid use of the "add" command, no valid argument provided\n',
        )

    def testInvalidText(self):
        self.assertEqual(self.app.dispatch("show extra"), b'invalid text "extra" detected\n')

    def testStringOutputIsEncoded(self):
        self.assertEqual(self.app.dispatch("add task --name=groceries"), b"added groceries\n")

    def testLineIsTrimmed(self):
        self.assertEqual(self.app.dispatch(" \t show -r \r\n"), b"all read-only\n")

    def testEmptyLine(self):
        self.assertEqual(self.app.dispatch(""), b"")
        self.assertEqual(self.app.dispatch(" \t\r\n"), b"")
        self.assertTrue(self.app.active)

    def testExit(self):
        self.assertEqual(self.app.dispatch("exit\n"), b"bye\n")
        self.assertFalse(self.app.active)

    def testParseErrorsKeepTheLoopActive(self):
        self.app.dispatch("unknown")
        self.assertTrue(self.app.active)

    def testHandlerReturningOtherTypes(self):
        registry = Registry({"greet": lambda flags: None, "farewell": lambda flags: b""})
        for name in ("showTasks", "showDailyTasks", "addTask"):
            registry.register(lambda flags: 42, name=name)
        app = App(self.grammar, registry, stdin=io.StringIO(), stdout=io.BytesIO())
        with self.assertRaises(TypeError):
            app.dispatch("show")


class TestHelp(TestCase):

    def setUp(self):
        self.grammar = loads(GRAMMAR)
        self.show, self.add = self.grammar.commands
        self.app = App(self.grammar, registry(), stdin=io.StringIO(), stdout=io.BytesIO())

    def testGlobalHelp(self):
        self.assertEqual(self.app.dispatch("help"), describe_grammar(self.grammar).encode())

    def testCommandWithEmptyLabelArgument(self):
        self.assertEqual(
            self.app.dispatch("show help"),
            describe_argument(self.show, self.show.arguments[0]).encode(),
        )

    def testCommandWithoutEmptyLabelArgument(self):
        self.assertEqual(self.app.dispatch("add help"), describe_command(self.add).encode())

    def testArgumentHelp(self):
        self.assertEqual(
            self.app.dispatch("show daily-tasks help"),
            describe_argument(self.show, self.show.arguments[1]).encode(),
        )

    def testHelpIgnoresOptions(self):
        self.assertEqual(
            self.app.dispatch("show daily-tasks -r help"),
            describe_argument(self.show, self.show.arguments[1]).encode(),
        )

    def testHelpForUnknownCommand(self):
        self.assertEqual(self.app.dispatch("unknown help"), b'unable to find command "unknown"\n')

    def testHelpForUnknownArgument(self):
        self.assertEqual(
            self.app.dispatch("add nothing help"),
            b'invalid use of the "add" command, no valid argument provided\n',
        )

    def testHelpIsMatchedBySuffix(self):
        self.assertEqual(self.app.dispatch("show   help  "), self.app.dispatch("show help"))


class TestRun(TestCase):

    def run_app(self, stdin):
        stdout = io.BytesIO()
        app = App(loads(GRAMMAR), registry(), stdin=stdin, stdout=stdout)
        app.run()
        return app, stdout.getvalue()

    def testSessionUntilExit(self):
        app, output = self.run_app(io.StringIO("show -r\n\nexit\nshow\n"))
        self.assertEqual(output, b"hello\n> all read-only\n> > bye\n")
        self.assertFalse(app.active)

    def testEndOfInput(self):
        app, output = self.run_app(io.StringIO("show daily-tasks -r x\n"))
        self.assertEqual(output, b"hello\n> daily x set\n> ")
        self.assertTrue(app.active)

    def testBinaryInput(self):
        _, output = self.run_app(io.BytesIO(b"show\nexit\n"))
        self.assertEqual(output, b"hello\n> all\n> bye\n")

    def testInvalidUtf8Input(self):
        app, output = self.run_app(io.BytesIO(b"\xff\xfe\nshow\n"))
        self.assertEqual(
            output,
            b"hello\n> " + "unable to find command \"\ufffd\ufffd\"\n".encode() + b"> all\n> ",
        )
        self.assertTrue(app.active)

    def testInterrupt(self):
        stdin = mock.Mock()
        stdin.readline.side_effect = ["show\n", KeyboardInterrupt]
        _, output = self.run_app(stdin)
        self.assertEqual(output, b"hello\n> all\n> ")

    def testOutputIsFlushed(self):
        stdout = mock.Mock()
        app = App(loads(GRAMMAR), registry(), stdin=io.StringIO("exit\n"), stdout=stdout)
        app.run()
        self.assertEqual(stdout.write.call_count, stdout.flush.call_count)
        stdout.write.assert_any_call(b"bye\n")

    def testDefaultPlaceholders(self):
        stdout = io.BytesIO()
        app = App(loads(GRAMMAR), stdin=io.StringIO("show\n"), stdout=stdout)
        app.run()
        self.assertEqual(stdout.getvalue(), b'> "showTasks" is not configured\n> ')


if __name__ == "__main__":
    unittest.main()
