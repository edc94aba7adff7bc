"""
Dialect faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the package
  reports. Codes are grouped by phase (parsing, grammar loading, binding) so
  logs and searches stay predictable.
- DialectError: base type that carries message + options and knows how to
  render itself with rich.
- GrammarError / BindingError: load-time faults. Fatal to startup.
- ParseError: per-line faults. Recoverable; the surrounding loop continues.
- trigger(): central entry point to surface any fault (raise or render).

Integration
- The validator and the loader raise GrammarError subclasses.
- bind() raises BindingError subclasses.
- The resolvers raise ParseError subclasses; the app turns them into output text.
- Hosts that want a rendered, fatal report instead of a traceback call
  trigger(fault, shell=True).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the package (stable identifiers).

    grouping (by phase)
    - parsing (111xx)
      • UNKNOWN_COMMAND, UNKNOWN_ARGUMENT, MISSING_VARIABLE, INVALID_TEXT
    - grammar (211xx)
      • EMPTY_LABEL, INVALID_LABEL, DUPLICATED_LABEL, MALFORMED_SWITCH,
        MISSING_ENTRIES, RESERVED_LABEL, MALFORMED_SCHEMA
    - binding (221xx)
      • UNKNOWN_HANDLER, INVALID_HANDLER

    normalize() lets the host remap codes to friendlier labels while keeping
    the numeric identity stable.
    """
    # --- parse errors (111xx) ---
    UNKNOWN_COMMAND             = 11101
    UNKNOWN_ARGUMENT            = 11102
    MISSING_VARIABLE            = 11111
    INVALID_TEXT                = 11112

    # --- grammar errors (211xx) ---
    EMPTY_LABEL                 = 21101
    INVALID_LABEL               = 21102
    DUPLICATED_LABEL            = 21103
    MALFORMED_SWITCH            = 21111
    MISSING_ENTRIES             = 21121
    RESERVED_LABEL              = 21122
    MALFORMED_SCHEMA            = 21131

    # --- binding errors (221xx) ---
    UNKNOWN_HANDLER             = 22101
    INVALID_HANDLER             = 22102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class DialectError(Exception):
    """
    base fault: a one-line message plus read-only rendering options.

    options
    - code: FaultCode shown in the rendered header.
    - title: short headline (defaults to the class-level __title__).
    - hint: optional next step for the operator.
    - colorful / fancy: rendering switches for __rich__.
    - anything else is kept as context (label, scope, token...).
    """
    __title__ = "error"
    __fatal__ = True
    __fault__ = Unset

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": coalesce(type(self).__fault__),
            "title": type(self).__title__,
            "hint": None,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    def __str__(self):
        return self.message

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
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", "dialect"), styler("prog-name"))
        code = self.code.normalize() if self.code else "-"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if self.options["hint"]:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if type(self).__fatal__:
            sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class GrammarError(DialectError):
    __title__ = "malformed grammar"


class EmptyLabelError(GrammarError):
    __title__ = "empty label"
    __fault__ = FaultCode.EMPTY_LABEL


class InvalidLabelError(GrammarError):
    __title__ = "invalid label"
    __fault__ = FaultCode.INVALID_LABEL


class DuplicatedLabelError(GrammarError):
    __title__ = "duplicated label"
    __fault__ = FaultCode.DUPLICATED_LABEL


class MalformedSwitchError(GrammarError):
    __title__ = "malformed option switch"
    __fault__ = FaultCode.MALFORMED_SWITCH


class MissingEntriesError(GrammarError):
    __title__ = "missing entries"
    __fault__ = FaultCode.MISSING_ENTRIES


class ReservedLabelError(GrammarError):
    __title__ = "reserved label"
    __fault__ = FaultCode.RESERVED_LABEL


class MalformedSchemaError(GrammarError):
    __title__ = "malformed schema"
    __fault__ = FaultCode.MALFORMED_SCHEMA


class BindingError(DialectError):
    __title__ = "binding failure"


class UnknownHandlerError(BindingError):
    __title__ = "unknown handler"
    __fault__ = FaultCode.UNKNOWN_HANDLER


class InvalidHandlerError(BindingError):
    __title__ = "invalid handler"
    __fault__ = FaultCode.INVALID_HANDLER


class ParseError(DialectError):
    __title__ = "invalid input"
    __fatal__ = False


class UnknownCommandError(ParseError):
    __title__ = "unknown command"
    __fault__ = FaultCode.UNKNOWN_COMMAND


class UnknownArgumentError(ParseError):
    __title__ = "unknown argument"
    __fault__ = FaultCode.UNKNOWN_ARGUMENT


class MissingVariableError(ParseError):
    __title__ = "missing variable"
    __fault__ = FaultCode.MISSING_VARIABLE


class InvalidTextError(ParseError):
    __title__ = "invalid text"
    __fault__ = FaultCode.INVALID_TEXT


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see DialectError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - shell=False (default): the fault is raised.
    - shell=True: the fault is rendered to stderr with rich; fatal faults
      (grammar and binding) then exit with status 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "DialectError",
    "GrammarError",
    "EmptyLabelError",
    "InvalidLabelError",
    "DuplicatedLabelError",
    "MalformedSwitchError",
    "MissingEntriesError",
    "ReservedLabelError",
    "MalformedSchemaError",
    "BindingError",
    "UnknownHandlerError",
    "InvalidHandlerError",
    "ParseError",
    "UnknownCommandError",
    "UnknownArgumentError",
    "MissingVariableError",
    "InvalidTextError",
    "trigger",
)
