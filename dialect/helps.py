"""
Dialect help rendering: usage text derived from the grammar alone.

Granularities
- describe_grammar(grammar): every command's help, concatenated.
- describe_command(command): usage line, argument synopsis with one row per
  argument, then the option synopsis of each argument.
- describe_argument(command, argument): usage line, option synopsis with one
  row per option.

Conventions
- Arguments are joined by '|'. When the command accepts an empty-label
  argument the whole list is bracketed, since giving an argument is optional;
  the empty label itself renders as "(no arguments)".
- Options are grouped as: required shorts ("-s VAR"), required longs
  ("--long=VAR"), optional shorts clustered behind one dash ("[-abc]"),
  optional longs ("[--long]" or "[--long=VAR]"). Every optional group is
  bracketed.
- Rows are tab-indented; the widest sibling label (or long switch) sets the
  column width for the whole listing.

All functions are pure: they read the grammar and return a new string.
"""

PLACEHOLDER = "(no arguments)"


def friendly(argument, /):
    """
    the argument label, or the placeholder when the label is empty.
    """
    return argument.label or PLACEHOLDER


def _synopsis(options):
    required_shorts = []
    required_longs = []
    cluster = ""
    optional_longs = []

    for option in options:
        variable = option.variable
        if variable is not None and variable.required:
            if option.short:
                required_shorts.append("%s %s" % (option.short, variable.label))
            else:
                required_longs.append("%s=%s" % (option.long, variable.label))
        elif option.short:
            cluster += option.short[1:]
        elif variable is not None:
            optional_longs.append("[%s=%s]" % (option.long, variable.label))
        else:
            optional_longs.append("[%s]" % option.long)

    groups = (
        " ".join(required_shorts),
        " ".join(required_longs),
        "[-%s]" % cluster if cluster else "",
        " ".join(optional_longs),
    )
    return " ".join(group for group in groups if group)


def _describe_options(options):
    lines = []
    width = max((len(option.long) for option in options), default=0)

    for option in options:
        columns = [option.short.ljust(2)]
        if width:
            columns.append(option.long.ljust(width))
        columns.append(option.help)
        lines.append(("\t" + " ".join(columns)).rstrip())

    return "".join(line + "\n" for line in lines)


def _describe_arguments(arguments):
    synopsis = "|".join(argument.label for argument in arguments if argument.label)
    if any(not argument.label for argument in arguments):
        synopsis = "[%s]" % synopsis

    width = max((len(friendly(argument)) for argument in arguments), default=0)
    rows = "".join(
        ("\t%s %s" % (friendly(argument).ljust(width), argument.help)).rstrip() + "\n"
        for argument in arguments
    )
    return synopsis, rows


def _describe_usage(command, argument):
    synopsis = _synopsis(argument.options)
    line = " ".join(part for part in (command.label, friendly(argument), synopsis) if part)
    return line + "\n" + _describe_options(argument.options)


def describe_argument(command, argument, /):
    """
    usage of one argument of a command.

    example
        Usage: show daily-tasks

        show daily-tasks -r var4
        \t-r --read-only  only read tasks
    """
    return "\nUsage: %s %s\n\n%s" % (command.label, friendly(argument), _describe_usage(command, argument))


def describe_command(command, /):
    """
    usage of a command: its arguments, then each argument's options.
    """
    synopsis, rows = _describe_arguments(command.arguments)
    text = "\nUsage: %s\n\n%s %s\n%s" % (command.label, command.label, synopsis, rows)
    for argument in command.arguments:
        text += "\n" + _describe_usage(command, argument)
    return text


def describe_grammar(grammar, /):
    """
    usage of every command of the grammar, in declared order.
    """
    return "".join(map(describe_command, grammar.commands))


__all__ = (
    "PLACEHOLDER",
    "friendly",
    "describe_argument",
    "describe_command",
    "describe_grammar",
)
