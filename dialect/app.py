"""
Dialect application: the read-eval-print loop around the resolvers.

Per line (App.dispatch)
- surrounding whitespace is trimmed; an empty line produces no output.
- the exit command ends the loop after the exit handler's output is returned.
- a line ending with the help command produces help instead of dispatching:
  • nothing before it: help for every command;
  • a command only: help for the command's empty-label argument when it has
    one, otherwise help for the whole command;
  • a command and an argument: help for that argument.
- anything else is resolved (command, argument, flags) and handed to the
  handler bound to the argument.
- parse errors become one line of output; the loop goes on.

The loop (App.run)
- writes the init handler's output, then prompts, reads and writes until the
  exit command, end of input, or Ctrl-C.
- output is written as bytes and flushed after every write.
"""
import sys

from loguru import logger

from .faults import ParseError
from .handlers import bind
from .resolvers import Flags, resolve_argument, resolve_command, resolve_flags
from .utils import CHARSET


class App:
    """
    A line dispatcher bound to one grammar.

    parameters
    - grammar: Grammar
    - registry: Registry | None
      handlers looked up by name; see dialect.handlers.bind.
    - stdin: text (or binary) stream read line by line; defaults to sys.stdin.
    - stdout: binary stream; defaults to sys.stdout.buffer.
    - charset: Charset used to trim lines and remainders.
    """

    def __init__(self, grammar, registry=None, /, *, stdin=None, stdout=None, charset=CHARSET):
        self._bindings = bind(grammar, registry)
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout.buffer
        self._charset = charset
        self._active = True

    @property
    def grammar(self):
        return self._bindings.grammar

    @property
    def bindings(self):
        return self._bindings

    @property
    def active(self):
        """
        False once the exit command has been dispatched.
        """
        return self._active

    def dispatch(self, line, /):
        """
        resolve one line and return the bytes to write for it.
        """
        grammar = self.grammar
        line = line.strip(self._charset.whitespace)
        if not line:
            return b""

        if line == grammar.exit_cmd:
            logger.debug("exit command received")
            self._active = False
            return self._output(self._bindings.exit(Flags()))

        if line.endswith(grammar.help_cmd):
            return self._help(line[:-len(grammar.help_cmd)].rstrip(self._charset.whitespace))

        try:
            command, remainder = resolve_command(line, grammar, charset=self._charset)
            argument, text = resolve_argument(remainder, command)
            flags = resolve_flags(text, argument)
        except ParseError as error:
            logger.debug("rejected {!r}: {}", line, error)
            return b"%s\n" % error.message.encode()

        logger.debug("dispatching {!r} to {!r} with {!r}", line, argument, flags)
        return self._output(self._bindings.executable(command, argument)(flags))

    def _help(self, line):
        if not line:
            return self._bindings.help()

        try:
            command, remainder = resolve_command(line, self.grammar, charset=self._charset)
            if not remainder and all(argument.label for argument in command.arguments):
                return self._bindings.help(command)
            argument, _ = resolve_argument(remainder, command)
        except ParseError as error:
            logger.debug("rejected help request {!r}: {}", line, error)
            return b"%s\n" % error.message.encode()

        return self._bindings.help(command, argument)

    @staticmethod
    def _output(result):
        if isinstance(result, (bytes, bytearray)):
            return bytes(result)
        if isinstance(result, str):
            return result.encode()
        raise TypeError(f"handlers must return bytes, not {type(result).__name__}")

    def _write(self, data):
        self._stdout.write(data)
        self._stdout.flush()

    def _read(self):
        line = self._stdin.readline()
        if isinstance(line, (bytes, bytearray)):
            # undecodable bytes must not end the session
            return line.decode(errors="replace")
        return line

    def run(self):
        """
        run the loop until exit, end of input or Ctrl-C.
        """
        grammar = self.grammar
        self._write(self._output(self._bindings.init(Flags())))

        try:
            while self._active:
                self._write(grammar.prompt.encode())
                if not (line := self._read()):
                    logger.debug("end of input")
                    break
                self._write(self.dispatch(line))
        except KeyboardInterrupt:
            logger.debug("interrupted")


__all__ = (
    "App",
)
