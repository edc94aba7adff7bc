"""
Dialect grammar validation.

validate(grammar) walks the grammar top-down (grammar → commands → arguments →
options → variables) and raises on the first violated invariant. It never
mutates anything, so running it twice on a valid grammar is a no-op both times.

Invariants
- Every label is non-empty, except a single empty argument label per command.
- No label, short or long repeats within its enclosing scope.
- A short is a dash plus one character outside the reserved set; a long is two
  dashes plus at least one more character, free of special whitespace and
  reserved characters.
- Every command has at least one argument, and the grammar at least one command.
- The exit and help commands are set and never collide with a command label.

Messages
- Each message is prefixed with its scope chain so the operator can find the
  offending entry, e.g.:
    command "show", argument "daily-tasks", multiple occurrences of the option label "readOnly"
"""
from .faults import *
from .grammar import Grammar
from .utils import CHARSET


def _fault(kind, scope, message, /, **context):
    """
    build a grammar fault whose message is prefixed by the scope chain.
    """
    return kind(", ".join((*scope, message)), scope=scope, **context)


def _validate_variable(variable, scope, charset):
    if not variable.label:
        raise _fault(EmptyLabelError, scope, "empty variable label detected")
    if charset.contains(variable.label, "special"):
        raise _fault(InvalidLabelError, scope,
            'invalid variable label "%s", invalid whitespace characters detected' % variable.label,
            label=variable.label,
        )


def _validate_option(option, scope, charset):
    if not option.label:
        raise _fault(EmptyLabelError, scope, "empty option label detected")
    if charset.contains(option.label, "special"):
        raise _fault(InvalidLabelError, scope,
            'invalid option label "%s", invalid whitespace characters detected' % option.label,
            label=option.label,
        )

    if not option.short and not option.long:
        raise _fault(MalformedSwitchError, (*scope, 'option "%s"' % option.label),
            "at least one of option short or option long must be provided",
            label=option.label,
        )

    # short: a single dash followed by a single, non-reserved character
    if short := option.short:
        if not short.startswith("-"):
            raise _fault(MalformedSwitchError, scope,
                'invalid option short "%s", must start with a single dash (-)' % short, switch=short
            )
        if len(short) != 2:
            raise _fault(MalformedSwitchError, scope,
                'invalid option short "%s", must be a single dash (-) followed by a single character' % short,
                switch=short,
            )
        if charset.contains(short[1:], "whitespace"):
            raise _fault(MalformedSwitchError, scope,
                'invalid option short "%s", whitespace characters detected' % short, switch=short
            )
        if charset.contains(short[1:], "short"):
            raise _fault(MalformedSwitchError, scope,
                'invalid option short "%s", invalid characters detected' % short, switch=short
            )

    # long: a double dash followed by a descriptive name
    if long := option.long:
        if not long.startswith("--"):
            raise _fault(MalformedSwitchError, scope,
                'invalid option long "%s", must start with a double dash (--)' % long, switch=long
            )
        if len(long) == 2:
            raise _fault(MalformedSwitchError, scope,
                'invalid option long "%s", must be longer than two characters' % long, switch=long
            )
        if charset.contains(long, "special"):
            raise _fault(MalformedSwitchError, scope,
                'invalid option long "%s", special whitespace characters detected' % long, switch=long
            )
        if charset.contains(long, "long"):
            raise _fault(MalformedSwitchError, scope,
                'invalid option long "%s", invalid characters detected' % long, switch=long
            )

    if option.variable is not None:
        _validate_variable(option.variable, (*scope, 'option "%s"' % option.label), charset)


def _validate_argument(argument, scope, charset):
    label = argument.label

    if charset.contains(label, "special"):
        raise _fault(InvalidLabelError, scope,
            'invalid argument label "%s", invalid special whitespace characters detected' % label, label=label
        )
    if label.lstrip(" ") != label:
        raise _fault(InvalidLabelError, scope,
            'invalid argument label "%s", spaces detected at start' % label, label=label
        )
    if label.rstrip(" ") != label:
        raise _fault(InvalidLabelError, scope,
            'invalid argument label "%s", spaces detected at end' % label, label=label
        )

    scope = (*scope, 'argument "%s"' % label)
    labels = set()
    shorts = set()
    longs = set()

    for option in argument.options:
        _validate_option(option, scope, charset)

        if option.label in labels:
            raise _fault(DuplicatedLabelError, scope,
                'multiple occurrences of the option label "%s"' % option.label, label=option.label
            )
        labels.add(option.label)

        if option.short:
            if option.short in shorts:
                raise _fault(DuplicatedLabelError, scope,
                    'multiple occurrences of the option short "%s"' % option.short, label=option.short
                )
            shorts.add(option.short)

        if option.long:
            if option.long in longs:
                raise _fault(DuplicatedLabelError, scope,
                    'multiple occurrences of the option long "%s"' % option.long, label=option.long
                )
            longs.add(option.long)


def _validate_command(command, scope, charset):
    if not (label := command.label):
        raise _fault(EmptyLabelError, scope, "empty command label detected")
    if charset.contains(label, "whitespace"):
        raise _fault(InvalidLabelError, scope,
            'invalid command label "%s", invalid whitespace characters detected' % label, label=label
        )
    if not command.arguments:
        raise _fault(MissingEntriesError, scope,
            'command "%s" requires at least one argument' % label, label=label
        )

    scope = (*scope, 'command "%s"' % label)
    labels = set()

    for argument in command.arguments:
        _validate_argument(argument, scope, charset)

        if argument.label in labels:
            if not argument.label:
                raise _fault(DuplicatedLabelError, scope,
                    "multiple occurrences of the empty argument label", label=""
                )
            raise _fault(DuplicatedLabelError, scope,
                'multiple occurrences of the argument label "%s"' % argument.label, label=argument.label
            )
        labels.add(argument.label)


def validate(grammar, /, *, charset=CHARSET):
    """
    check a grammar for structural well-formedness.

    parameters
    - grammar: Grammar
      the grammar to inspect; it is never modified.
    - charset: Charset (keyword-only)
      character classes used for whitespace and reserved-character checks.

    returns
    - None when every invariant holds.

    raises
    - TypeError: when the argument is not a Grammar.
    - GrammarError subclasses, on the first violated invariant:
      EmptyLabelError, InvalidLabelError, DuplicatedLabelError,
      MalformedSwitchError, MissingEntriesError, ReservedLabelError.
    """
    if not isinstance(grammar, Grammar):
        raise TypeError("validate() argument must be a grammar")

    scope = ()

    if not grammar.exit_cmd:
        raise _fault(EmptyLabelError, scope, 'missing/empty exit command "exitCmd"')
    if not grammar.help_cmd:
        raise _fault(EmptyLabelError, scope, 'missing/empty help command "helpCmd"')
    if not grammar.commands:
        raise _fault(MissingEntriesError, scope, 'missing/empty commands "commands"')

    labels = set()
    for command in grammar.commands:
        if command.label == grammar.exit_cmd:
            raise _fault(ReservedLabelError, scope,
                'command cannot share same label as exit command "%s"' % grammar.exit_cmd, label=command.label
            )
        if command.label == grammar.help_cmd:
            raise _fault(ReservedLabelError, scope,
                'command cannot share same label as help command "%s"' % grammar.help_cmd, label=command.label
            )

        _validate_command(command, scope, charset)

        if command.label in labels:
            raise _fault(DuplicatedLabelError, scope,
                'multiple occurrences of the command label "%s"' % command.label, label=command.label
            )
        labels.add(command.label)


__all__ = (
    "validate",
)
