r"""
Dialect grammar model: the immutable description of what a line may say.

Overview
- Entities (leaf-first)
  • Variable: a named value an option may carry (label, required, default).
  • Option: a switch of an argument, in short (-x) and/or long (--name) form.
  • Argument: the token (or implicit empty slot) following a command; selects a handler.
  • Command: the leading verb of a line, with its ordered arguments.
  • Grammar: the whole configuration (prompt, commands, exit/help commands, init/exit handlers).

- Construction rules
  • Constructors only check field types (TypeError). Structural invariants such as
    label uniqueness or switch syntax are the validator's job (see dialect.validator).
  • Every field is written once, inside the build phase of __new__, and exposed
    afterwards through read-only properties; sequences are exposed as tuples.
  • Handler names (exec_func, init_func, exit_func) are plain strings here; they are
    resolved against a registry at bind time (see dialect.handlers).

- Introspection & representation
  • GrammarType metaclass provides stable __repr__/__rich_repr__ and mirrors the
    fields declared in __introspectable__ as read-only properties.

Quick example:
    >>> from dialect.grammar import Grammar, Command, Argument, Option, Variable
    >>> grammar = Grammar(
    ...     [Command("show", [
    ...         Argument("", [Option("readOnly", short="-r", long="--read-only")]),
    ...         Argument("daily-tasks", [Option("readOnly", short="-r", variable=Variable("var4", required=True, default="das"))]),
    ...     ])],
    ...     prompt="> ", exit_cmd="exit", help_cmd="help",
    ... )
"""
import functools
import operator
import re
from collections.abc import Iterable
from contextlib import contextmanager

from .utils import *


class GrammarType(type):
    """
    Metaclass that turns grammar entities into introspectable, read-only records.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property backed
      by the private "_{name}" field (see utils.mirror).
    - Provide stable, readable __repr__/__rich_repr__ implementations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with every field.

            Example
            - variable(label='var4', required=True, default='das')
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Entity(metaclass=GrammarType):
    """
    Internal base: fields can be written only during the build phase.

    build phase
    - this class provides a context-managed __new__ so entities can write their
      backing fields safely:
        with super().__new__(cls) as self:
            self._label = label
        # after the 'with' block every attribute is read-only.
    """

    @contextmanager
    def __new__(cls):
        self = object.__new__(cls)
        object.__setattr__(self, "_Entity__building", True)
        try:
            yield self
        finally:
            object.__setattr__(self, "_Entity__building", False)

    def __setattr__(self, name, value, /):
        if not object.__getattribute__(self, "_Entity__building"):
            raise AttributeError(f"{type(self).__typename__} is read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__typename__} is read-only")


def _check_string(cls, name, object):
    if not isinstance(object, str):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string")
    return object


def _check_members(cls, name, object, kind):
    if isinstance(object, str) or not isinstance(object, Iterable):
        raise TypeError(f"{cls.__typename__} {name!r} must be an iterable of {kind.__typename__}s")
    members = tuple(object)
    for member in members:
        if not isinstance(member, kind):
            raise TypeError(f"{cls.__typename__} {name!r} must be an iterable of {kind.__typename__}s")
    return members


class Variable(Entity):
    """
    A named value carried by an option.

    The label doubles as the placeholder shown in help (e.g. "-r var4").
    A required variable must be supplied on the line; an optional one falls
    back to its default.
    """
    __introspectable__ = (
        "label",
        "required",
        "default",
    )

    def __new__(cls, label, /, required=False, default=""):
        with super().__new__(cls) as self:
            self._label = _check_string(cls, "label", label)
            self._required = bool(required)
            self._default = _check_string(cls, "default", default)
        return self


class Option(Entity):
    """
    A switch of an argument, given in short (-x) and/or long (--name) form.

    The label is the key under which the resolved flag is reported to the
    handler; the short/long strings are what the user types.
    """
    __introspectable__ = (
        "label",
        "short",
        "long",
        "variable",
        "help",
    )

    def __new__(cls, label, /, short="", long="", variable=None, help=""):
        with super().__new__(cls) as self:
            self._label = _check_string(cls, "label", label)
            self._short = _check_string(cls, "short", short)
            self._long = _check_string(cls, "long", long)
            if variable is not None and not isinstance(variable, Variable):
                raise TypeError(f"{cls.__typename__} 'variable' must be a variable")
            self._variable = variable
            self._help = _check_string(cls, "help", help)
        return self


class Argument(Entity):
    """
    The token, or implicit empty slot, that follows a command.

    An empty label is the "no arguments" placeholder: it matches whenever no
    labelled sibling is found on the line.
    """
    __introspectable__ = (
        "label",
        "options",
        "exec_func",
        "help",
    )

    def __new__(cls, label="", /, options=(), exec_func="", help=""):
        with super().__new__(cls) as self:
            self._label = _check_string(cls, "label", label)
            self._options = _check_members(cls, "options", options, Option)
            self._exec_func = _check_string(cls, "exec_func", exec_func)
            self._help = _check_string(cls, "help", help)
        return self


class Command(Entity):
    """
    The leading verb of a line and the arguments it accepts.
    """
    __introspectable__ = (
        "label",
        "arguments",
    )

    def __new__(cls, label, /, arguments=()):
        with super().__new__(cls) as self:
            self._label = _check_string(cls, "label", label)
            self._arguments = _check_members(cls, "arguments", arguments, Argument)
        return self


class Grammar(Entity):
    """
    The complete description of every command a line may hold.

    Fields
    - commands: ordered commands; labels are unique and never reserved.
    - prompt: text written before each line is read.
    - exit_cmd: a line equal to it ends the loop.
    - help_cmd: a line ending with it prints help instead of dispatching.
    - init_func / exit_func: handler names run when the loop starts / ends.
    """
    __introspectable__ = (
        "commands",
        "prompt",
        "exit_cmd",
        "help_cmd",
        "init_func",
        "exit_func",
    )

    def __new__(cls, commands=(), /, prompt="", exit_cmd="", help_cmd="", init_func="", exit_func=""):
        with super().__new__(cls) as self:
            self._commands = _check_members(cls, "commands", commands, Command)
            self._prompt = _check_string(cls, "prompt", prompt)
            self._exit_cmd = _check_string(cls, "exit_cmd", exit_cmd)
            self._help_cmd = _check_string(cls, "help_cmd", help_cmd)
            self._init_func = _check_string(cls, "init_func", init_func)
            self._exit_func = _check_string(cls, "exit_func", exit_func)
        return self


__all__ = (
    "Variable",
    "Option",
    "Argument",
    "Command",
    "Grammar",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del GrammarType
