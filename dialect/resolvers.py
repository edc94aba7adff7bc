"""
Dialect resolvers: from one line of text to a command, an argument and flags.

Pipeline
- resolve_command(input, grammar)
  • the text before the first space names the command; the rest (left-trimmed)
    is the remainder.
- resolve_argument(remainder, command)
  • an argument label may appear anywhere in the remainder; it is cut out and
    what is left becomes the options text. The empty-label argument is the
    fallback when no labelled sibling is found.
- resolve_flags(text, argument)
  • scans the options text token by token and reports, for every option of
    the argument, whether it was set and which value it carries.

Properties
- Every resolver is a pure function of its inputs: no I/O, no state kept
  between calls, the grammar is never modified.
- Failures raise ParseError subclasses (UnknownCommandError,
  UnknownArgumentError, MissingVariableError, InvalidTextError). They are
  recoverable: the caller reports the message and moves on to the next line.
- A dash-prefixed token that matches no option is ignored, unlike a stray
  bare token which is an error.
"""
from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from .faults import *
from .utils import CHARSET


class FlagState(NamedTuple):
    """
    resolution of one option: set or not, and the value it carries.
    """
    isset: bool = False
    hasvar: bool = False
    value: str = ""


class Flags(Mapping):
    """
    Read-only mapping from option label to FlagState, built once per line.

    Besides the Mapping protocol, the helpers handlers usually need:
    - exists(label): the argument declares this option.
    - isset(label): the option appeared on the line.
    - getvar(label): (value, True) when the option was set with a variable,
      ("", False) otherwise.
    """
    __slots__ = ("_mapping",)

    def __init__(self, mapping=(), /):
        self._mapping = MappingProxyType(dict(mapping))

    def __getitem__(self, label, /):
        return self._mapping[label]

    def __iter__(self):
        return iter(self._mapping)

    def __len__(self):
        return len(self._mapping)

    def __repr__(self):
        return f"flags({dict(self._mapping)!r})"

    def __rich_repr__(self):
        yield from self._mapping.items()

    def exists(self, label, /):
        return label in self._mapping

    def isset(self, label, /):
        try:
            return self._mapping[label].isset
        except KeyError:
            return False

    def getvar(self, label, /):
        state = self._mapping.get(label)
        if state is None or not state.isset or not state.hasvar:
            return "", False
        return state.value, True


def resolve_command(input, grammar, /, *, charset=CHARSET):
    """
    isolate the leading command token and match it against the grammar.

    parameters
    - input: str
      a whole line, already trimmed by the caller.
    - grammar: Grammar
      the validated grammar to match against.
    - charset: Charset (keyword-only)
      whitespace set trimmed off the front of the remainder.

    returns
    - tuple[Command, str]: the command and the remainder of the line.

    raises
    - UnknownCommandError: no command carries that label.
    """
    label, _, remainder = input.partition(" ")
    remainder = remainder.lstrip(charset.whitespace)

    for command in grammar.commands:
        if command.label == label:
            return command, remainder

    raise UnknownCommandError(
        'unable to find command "%s"' % label,
        label=label,
        hint="type '%s' to list the available commands" % grammar.help_cmd if grammar.help_cmd else None,
    )


def _locate(remainder, label):
    """
    index of the first occurrence of label that ends at a token boundary, or -1.
    """
    index = remainder.find(label)
    while index != -1:
        after = index + len(label)
        if after == len(remainder) or remainder[after] == " ":
            return index
        index = remainder.find(label, index + 1)
    return -1


def resolve_argument(remainder, command, /):
    """
    find the argument whose label appears in the remainder of the line.

    policy
    - arguments are tried in declared order.
    - the empty-label argument is a tentative match: the whole remainder becomes
      the options text, and scanning goes on.
    - a labelled argument matches when its label occurs in the remainder and is
      followed by a space or by the end of the line. The label is replaced by a
      single space, scanning stops, and the match overrides any tentative one.

    returns
    - tuple[Argument, str]: the argument and the options text.

    raises
    - UnknownArgumentError: nothing matched and there is no empty-label argument.
    """
    found = None
    text = ""

    for argument in command.arguments:
        if not argument.label:
            found, text = argument, remainder
            continue

        if (index := _locate(remainder, argument.label)) == -1:
            continue

        found = argument
        text = remainder[:index] + " " + remainder[index + len(argument.label):]
        break

    if found is None:
        raise UnknownArgumentError(
            'invalid use of the "%s" command, no valid argument provided' % command.label,
            label=command.label,
            hint="valid arguments: %s" % ", ".join(argument.label for argument in command.arguments),
        )

    return found, text


def resolve_flags(text, argument, /):
    """
    scan the options text and report the state of every option of the argument.

    rules
    - every option starts as FlagState(isset=False, hasvar=False, value="").
    - tokens are separated by spaces; empty tokens are skipped.
    - a dash-prefixed token is matched, in declared order, against each option's
      short form (whole token) or long form (token up to an optional '=').
      • no variable: the option is set, without a value.
      • short form with a variable: the value is the next token, which is then
        consumed; with no next token the default is used, unless the variable
        is required.
      • long form with a variable: the value is what follows '='; without '='
        the default is used, unless the variable is required.
      • no option matches: the token is ignored.
    - any other token that was not consumed as a value is invalid.

    returns
    - Flags: a fresh, read-only mapping of option label → FlagState.

    raises
    - MissingVariableError: a required variable has no value on the line.
    - InvalidTextError: a bare token that is neither a switch nor a value.
    """
    states = {option.label: FlagState() for option in argument.options}
    tokens = [token for token in text.split(" ") if token]
    consumed = False

    for index, token in enumerate(tokens):
        if consumed:
            consumed = False
            continue

        if not token.startswith("-"):
            raise InvalidTextError('invalid text "%s" detected' % token, token=token)

        name, separator, inline = token.partition("=")

        for option in argument.options:
            short = bool(option.short) and option.short == token
            if not short and not (option.long and option.long == name):
                continue

            if (variable := option.variable) is None:
                states[option.label] = FlagState(isset=True)
                break

            if short:
                if index + 1 < len(tokens):
                    value = tokens[index + 1]
                    consumed = True
                elif variable.required:
                    raise MissingVariableError(
                        'missing variable "%s" for option "%s"' % (variable.label, option.label),
                        label=option.label,
                        variable=variable.label,
                        hint="pass it after a space (for example: %s <%s>)" % (option.short, variable.label),
                    )
                else:
                    value = variable.default
            elif separator:
                value = inline
            elif variable.required:
                raise MissingVariableError(
                    'missing variable "%s" for option "%s"' % (variable.label, option.label),
                    label=option.label,
                    variable=variable.label,
                    hint="pass it after '=' (for example: %s=<%s>)" % (option.long, variable.label),
                )
            else:
                value = variable.default

            states[option.label] = FlagState(isset=True, hasvar=True, value=value)
            break

    return Flags(states)


__all__ = (
    "FlagState",
    "Flags",
    "resolve_command",
    "resolve_argument",
    "resolve_flags",
)
