"""
Dialect grammar loader: YAML documents to validated Grammar objects.

Schema (camelCase keys, as written in grammar files)
    prompt: "> "
    exitCmd: exit
    helpCmd: help
    initFunc: greet          # optional handler names
    exitFunc: farewell
    commands:
      - label: show
        arguments:
          - label: daily-tasks
            help: show the tasks of the day
            execFunc: showDailyTasks
            options:
              - label: readOnly
                short: -r
                long: --read-only
                help: only read tasks
                variable:
                  label: var4
                  required: true
                  default: das

Rules
- Unknown keys are ignored (and logged), so files can carry extra metadata.
- Scalars given where a string is expected (numbers) are converted with str();
  null reads as an empty string.
- Any other shape mismatch raises MalformedSchemaError naming the offending
  path, e.g. commands[0].arguments[1].options.
- The resulting grammar is validated before it is returned.
"""
import yaml
from loguru import logger

from .faults import *
from .grammar import *
from .validator import validate


def _malformed(path, message, /, **context):
    return MalformedSchemaError("%s: %s" % (path or "<root>", message), path=path, **context)


def _mapping(node, path, fields):
    if not isinstance(node, dict):
        raise _malformed(path, "expected a mapping, got %s" % type(node).__name__)
    for key in node.keys() - fields:
        logger.warning("ignoring unknown key {!r} at {}", key, path or "<root>")
    return node


def _string(node, key, path):
    value = node.get(key)
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise _malformed(f"{path}.{key}" if path else key, "expected a string, got %s" % type(value).__name__)
    return str(value)


def _boolean(node, key, path):
    value = node.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise _malformed(f"{path}.{key}" if path else key, "expected a boolean, got %s" % type(value).__name__)
    return value


def _sequence(node, key, path):
    value = node.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise _malformed(f"{path}.{key}" if path else key, "expected a list, got %s" % type(value).__name__)
    return value


def _variable(node, path):
    node = _mapping(node, path, {"label", "required", "default"})
    return Variable(
        _string(node, "label", path),
        required=_boolean(node, "required", path),
        default=_string(node, "default", path),
    )


def _option(node, path):
    node = _mapping(node, path, {"label", "short", "long", "help", "variable"})
    variable = node.get("variable")
    return Option(
        _string(node, "label", path),
        short=_string(node, "short", path),
        long=_string(node, "long", path),
        variable=None if variable is None else _variable(variable, f"{path}.variable"),
        help=_string(node, "help", path),
    )


def _argument(node, path):
    node = _mapping(node, path, {"label", "help", "execFunc", "options"})
    return Argument(
        _string(node, "label", path),
        options=[
            _option(option, f"{path}.options[{index}]")
            for index, option in enumerate(_sequence(node, "options", path))
        ],
        exec_func=_string(node, "execFunc", path),
        help=_string(node, "help", path),
    )


def _command(node, path):
    node = _mapping(node, path, {"label", "arguments"})
    return Command(
        _string(node, "label", path),
        arguments=[
            _argument(argument, f"{path}.arguments[{index}]")
            for index, argument in enumerate(_sequence(node, "arguments", path))
        ],
    )


def build(document, /):
    """
    build and validate a grammar from an already-decoded document.

    parameters
    - document: dict
      the decoded YAML (or JSON) mapping, using the camelCase schema keys.

    returns
    - Grammar: a validated grammar.

    raises
    - MalformedSchemaError: the document does not follow the schema.
    - GrammarError subclasses from validate().
    """
    node = _mapping(document, "", {"prompt", "exitCmd", "helpCmd", "initFunc", "exitFunc", "commands"})
    grammar = Grammar(
        [_command(command, f"commands[{index}]") for index, command in enumerate(_sequence(node, "commands", ""))],
        prompt=_string(node, "prompt", ""),
        exit_cmd=_string(node, "exitCmd", ""),
        help_cmd=_string(node, "helpCmd", ""),
        init_func=_string(node, "initFunc", ""),
        exit_func=_string(node, "exitFunc", ""),
    )
    validate(grammar)
    return grammar


def loads(text, /):
    """
    parse a YAML grammar from a string (or bytes).
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise _malformed("", "invalid YAML (%s)" % error) from error
    if document is None:
        raise _malformed("", "empty document")
    grammar = build(document)
    logger.debug("loaded grammar with {} command(s)", len(grammar.commands))
    return grammar


def load(path, /):
    """
    read and parse a YAML grammar file.

    OSError from opening the file propagates unchanged.
    """
    with open(path, encoding="utf-8") as stream:
        text = stream.read()
    logger.debug("reading grammar file {}", path)
    return loads(text)


__all__ = (
    "build",
    "loads",
    "load",
)
