"""
Dialect handler registry and binding table.

What this module provides
- Registry: an explicit mapping from handler names (as written in the grammar's
  exec_func / init_func / exit_func fields) to callables. A handler receives the
  resolved Flags of a line and returns the output bytes for it.
- bind(grammar, registry): resolves every handler name once, at startup, and
  builds a read-only Bindings table keyed by (command, argument) identity. The
  table also carries the help renderers for every command and argument.

Rules
- Unknown names are a checked error at bind time (UnknownHandlerError), never a
  best-effort lookup per line.
- A handler must be callable with a single positional argument (the flags);
  anything else is rejected at bind time (InvalidHandlerError).
- Arguments without an exec_func, or every argument when no registry is given,
  get a placeholder that reports the argument as not configured.
- Empty init/exit names bind to a no-op that writes nothing.

Quick example
    >>> registry = Registry()
    >>> @registry.register
    ... def show(flags):
    ...     return b"read-only\\n" if flags.isset("readOnly") else b"read-write\\n"
    ...
    >>> bindings = bind(grammar, registry)
    >>> bindings.executable(command, argument)(flags)
"""
import functools
import inspect
from types import MappingProxyType

from loguru import logger

from .faults import *
from .helps import describe_argument, describe_command, describe_grammar, friendly
from .resolvers import Flags
from .utils import Unset, coalesce, rename
from .validator import validate


def _noop(flags, /):
    return b""


def _placeholder(name):
    """
    build the executable used for arguments with no bound handler.
    """
    @rename("placeholder")
    def placeholder(flags, /):
        return b'"%s" is not configured\n' % name.encode()
    return placeholder


class Registry:
    """
    Explicit name → handler mapping, populated before binding.

    Registration
    - register(callable): register under callable.__name__ (decorator-friendly).
    - register(name="x"): return a decorator registering under "x".
    - register(callable, name="x"): register under "x".
    A name can be registered only once.
    """
    __slots__ = ("_handlers",)

    def __init__(self, handlers=(), /):
        self._handlers = {}
        for name, handler in dict(handlers).items():
            self.register(handler, name=name)

    def __contains__(self, name, /):
        return name in self._handlers

    def __len__(self):
        return len(self._handlers)

    def __iter__(self):
        return iter(self._handlers)

    def __repr__(self):
        return f"registry({", ".join(map(repr, self._handlers))})"

    def register(self, source=Unset, /, *, name=Unset):
        """
        register a handler, or return a decorator that will do so.

        raises
        - TypeError: the handler is not callable or the name is not a string.
        - ValueError: the name is empty or already in use.
        """
        @rename("register")
        def wrapper(handler, /):
            if not callable(handler):
                raise TypeError("register() handler must be callable")
            if not isinstance(label := coalesce(name, getattr(handler, "__name__", Unset)), str):
                raise TypeError("register() name must be a string")
            if not label:
                raise ValueError("register() name cannot be empty")
            if self._handlers.setdefault(label, handler) is not handler:
                raise ValueError(f"handler name {label!r} is already in use")
            return handler

        return wrapper(source) if source is not Unset else wrapper

    def resolve(self, name, /):
        """
        return the handler registered under name.

        raises
        - UnknownHandlerError: nothing is registered under that name.
        """
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownHandlerError(
                'unable to find handler "%s"' % name,
                label=name,
                hint="register it before binding (for example: @registry.register)",
            ) from None


def _check_signature(name, handler):
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        # builtins and some C callables carry no signature; trust them
        return handler
    try:
        signature.bind(Flags())
    except TypeError:
        raise InvalidHandlerError(
            'handler "%s" must accept the flags as its only positional argument' % name,
            label=name,
            hint="declare it as: def %s(flags): ..." % name,
        ) from None
    return handler


class Bindings:
    """
    Read-only lookup table built once by bind().

    lookups
    - executable(command, argument): the handler for that pair.
    - init / exit: handlers run when the loop starts and ends.
    - help(): global help; help(command): command help;
      help(command, argument): argument help. All return bytes.

    Keys are entity identities, so only the grammar the table was built from
    can be used to look things up.
    """
    __slots__ = ("_grammar", "_executables", "_helps", "_init", "_exit")

    def __init__(self, grammar, executables, helps, init, exit, /):
        self._grammar = grammar
        self._executables = MappingProxyType(executables)
        self._helps = MappingProxyType(helps)
        self._init = init
        self._exit = exit

    @property
    def grammar(self):
        return self._grammar

    @property
    def init(self):
        return self._init

    @property
    def exit(self):
        return self._exit

    def executable(self, command, argument, /):
        try:
            return self._executables[command, argument]
        except KeyError:
            raise LookupError(f"{command!r} / {argument!r} is not bound") from None

    def help(self, command=None, argument=None, /):
        try:
            return self._helps[command, argument]().encode()
        except KeyError:
            raise LookupError(f"{command!r} / {argument!r} has no help") from None


def bind(grammar, registry=None, /):
    """
    validate the grammar and resolve every handler name it mentions.

    parameters
    - grammar: Grammar
    - registry: Registry | None
      when None, every argument gets a placeholder and init/exit are no-ops.

    returns
    - Bindings: the read-only executable/help table.

    raises
    - GrammarError subclasses from validate().
    - UnknownHandlerError / InvalidHandlerError for a bad handler name.
    """
    if registry is not None and not isinstance(registry, Registry):
        raise TypeError("bind() registry must be a registry")
    validate(grammar)

    def lookup(name, default):
        if registry is None or not name:
            return default
        handler = _check_signature(name, registry.resolve(name))
        logger.debug("bound handler {!r} to {!r}", name, getattr(handler, "__qualname__", handler))
        return handler

    executables = {}
    helps = {(None, None): functools.partial(describe_grammar, grammar)}

    for command in grammar.commands:
        helps[command, None] = functools.partial(describe_command, command)
        for argument in command.arguments:
            name = argument.exec_func or friendly(argument)
            executables[command, argument] = lookup(argument.exec_func, _placeholder(name))
            helps[command, argument] = functools.partial(describe_argument, command, argument)

    init = lookup(grammar.init_func, _noop)
    exit = lookup(grammar.exit_func, _noop)

    logger.debug("bound {} executable(s) over {} command(s)", len(executables), len(grammar.commands))
    return Bindings(grammar, executables, helps, init, exit)


__all__ = (
    "Registry",
    "Bindings",
    "bind",
)
