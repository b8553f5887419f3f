"""
Argstow argument parser: registration, dispatch and CLI glue.

Parsing happens in two passes over one token cursor:
1) dispatch: every token is classified in order.
   - "--": every remaining token becomes positional; the scan stops.
   - "--name" / "--name=value": long option; the inline value is pushed back
     onto the cursor so the arity resolver treats it as the next token.
   - "-abc": short cluster; each character is an option resolved in turn, each
     one consuming its own values from the following tokens.
   - anything else is buffered as positional.
2) re-pass: the buffered positionals are walked once against the positional
   descriptors in declaration order, with the same arity rules.

parse_args() raises faults and never prints. parse() is the CLI glue: it renders
faults through rich and exits (status 2 for a bad command line, 0 for help).

Quick example:
    >>> from dataclasses import dataclass, field
    >>> from argstow import ArgumentParser, Append, StoreConst
    >>> @dataclass
    ... class Record:
    ...     verbose: bool = False
    ...     by: str = ""
    ...     files: list[str] = field(default_factory=list)
    >>> parser = ArgumentParser("copy things around")
    >>> _ = parser.option("-v", "--verbose", action=StoreConst(True), dest="verbose")
    >>> _ = parser.option("-b", "--by", dest="by")
    >>> _ = parser.argument("files", nargs="+")
    >>> record = Record()
    >>> parser.parse_args(record, ["-v", "--by=pouet", "a", "b"])
    ()
    >>> record
    Record(verbose=True, by='pouet', files=['a', 'b'])
"""
import logging
import os
import re
import sys

from rich.console import Console
from rich.text import Text

from . import arity
from .actions import ShowHelp
from .arguments import Option, Positional
from .cursor import TokenCursor
from .destinations import bind
from .faults import *
from .formatting import usage
from .utils import *

logger = logging.getLogger(__name__)

END_OF_OPTIONS = "--"

_NEGATIVE_NUMBER = re.compile(r"-(\d[\d_]*(\.\d*)?|\.\d+)([eE][+-]?\d+)?|-inf(inity)?|-nan", re.IGNORECASE)


class ArgumentParser:
    """
    registry of option and positional descriptors plus the parsing engine.

    parameters
    - descr: short program description shown in help.
    - prog: program name (defaults to __prog__ in __main__, then argv[0]).
    - width: column budget for usage/help rendering.
    - helper: register -h/--help automatically.
    - strict: reject positional tokens no descriptor consumed.
    - colorful: style faults and help with the palette (see __styles__).
    """
    __introspectable__ = (
        "descr",
        "prog",
        "width",
        "helper",
        "strict",
        "colorful",
        "options",
        "positionals",
    )

    descr = mirror("descr")
    width = mirror("width")
    helper = mirror("helper")
    strict = mirror("strict")
    colorful = mirror("colorful")
    options = mirror("options")
    positionals = mirror("positionals")

    def __init__(self, descr=Unset, /, prog=Unset, width=80, *, helper=True, strict=False, colorful=False):
        if not isinstance(descr, str | Text | Unset):
            raise TypeError("argument-parser 'descr' must be a string")
        if not isinstance(prog, str | Unset):
            raise TypeError("argument-parser 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError("argument-parser 'prog' cannot be empty")
        if isinstance(width, bool) or not isinstance(width, int):
            raise TypeError("argument-parser 'width' must be an integer")
        elif width < 20:
            raise ValueError("argument-parser 'width' must be at least 20 columns")

        self._descr = coalesce(descr)
        self._prog = prog
        self._width = width
        self._helper = bool(helper)
        self._strict = bool(strict)
        self._colorful = bool(colorful)
        self._options = []
        self._positionals = []

        if self._helper:
            self.option("-h", "--help", action=ShowHelp(), descr="show this help message and exit")

    @property
    def prog(self):
        if self._prog is not Unset:
            return self._prog
        return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) or "argstow")

    # registration

    def add(self, descriptor, /):
        """
        register an Option or Positional descriptor and return it.

        raises ConfigurationError when an option name is already taken.
        """
        match descriptor:
            case Option():
                for name in descriptor.names:
                    for option in self._options:
                        if name in option.names:
                            raise ConfigurationError(
                                "option name %r is already registered" % name,
                                option=name,
                                hint="pick another spelling for %r" % name,
                            )
                self._options.append(descriptor)
            case Positional():
                self._positionals.append(descriptor)
            case _:
                raise TypeError("add() argument must be an option or a positional")
        return descriptor

    def option(self, *names, **metadata):
        return self.add(Option(*names, **metadata))

    def argument(self, dest=Unset, /, **metadata):
        return self.add(Positional(dest, **metadata))

    # parsing

    def parse_args(self, record, tokens=Unset):
        """
        populate record from tokens (sys.argv[1:] when omitted).

        returns the tuple of positional tokens left over once every positional
        descriptor was satisfied (always empty in strict mode).

        raises
        - CommandLineError subclasses for bad input.
        - HelpRequested when the help option is given.
        - ConfigurationError for mistakes in the descriptors or the record.
        """
        if isinstance(tokens, str):
            raise TypeError("parse_args() tokens must be a sequence of strings, not a string")
        tokens = tuple(coalesce(tokens, sys.argv[1:]))
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse_args() tokens must be strings")

        # every destination resolves before the first token is read
        destinations = {descriptor: bind(record, descriptor.dest) for descriptor in (*self._options, *self._positionals)}
        for descriptor, destination in destinations.items():
            if check := getattr(descriptor.action, "check", None):
                check(descriptor.nargs, destination)

        cursor = TokenCursor(tokens)
        positionals = []

        while not cursor.exhausted:
            position = cursor.position + 1
            token = cursor.next()

            if token == END_OF_OPTIONS:
                positionals.extend(cursor.remaining())
                logger.debug("end of options at %s position, %d positional(s) follow", ordinal(position), len(tokens) - position)
                break

            if not arity.looks_like_option(token):
                positionals.append(token)
                continue

            if token[1] == "-":
                self._long(token, cursor, destinations, position)
            else:
                for name in token[1:]:
                    self._short(name, token, cursor, destinations, position)

        logger.debug("dispatch done, re-passing %d positional(s)", len(positionals))

        cursor = TokenCursor(positionals)
        for positional in self._positionals:
            self._invoke(positional, cursor, destinations[positional], positional.label, None)

        if leftovers := tuple(cursor.remaining()):
            logger.debug("unconsumed positional(s): %r", leftovers)
            if self._strict:
                raise UnparsedTokensError(
                    "unrecognized argument%s: %s" % ("s" if len(leftovers) > 1 else "", " ".join(leftovers)),
                    tokens=leftovers,
                    hint="remove the extra argument%s" % ("s" if len(leftovers) > 1 else ""),
                )
        return leftovers

    def _long(self, token, cursor, destinations, position):
        name, separator, value = token[2:].partition("=")
        for option in self._options:
            if option.long == name:
                break
        else:
            raise UnknownOptionError(
                "unknown option %r at %s position" % ("--" + name, ordinal(position)),
                option="--" + name,
                token=token,
                position=position,
                hint="check the spelling, or pass it after '--' to use it as a positional",
            )

        if separator:
            cursor.push(value)
        logger.debug("long option %r matched %r at %s position", token, option.label, ordinal(position))
        self._invoke(option, cursor, destinations[option], "--" + name, position)

        if separator and cursor.pushed:
            raise UnexpectedValueError(
                "option %r takes no value (got %r at %s position)" % ("--" + name, cursor.next(), ordinal(position)),
                option="--" + name,
                token=token,
                position=position,
                hint="use '--%s' without '=%s'" % (name, value),
            )

    def _short(self, name, token, cursor, destinations, position):
        for option in self._options:
            if option.short == name:
                break
        else:
            if _NEGATIVE_NUMBER.fullmatch(token):
                hint = "negative numbers go inline ('--name=%s') or after '--'" % token
            else:
                hint = "check the spelling, or pass it after '--' to use it as a positional"
            raise UnknownOptionError(
                "unknown option %r at %s position" % ("-" + name, ordinal(position)),
                option="-" + name,
                token=token,
                position=position,
                hint=hint,
            )

        logger.debug("short option %r matched %r at %s position", "-" + name, option.label, ordinal(position))
        self._invoke(option, cursor, destinations[option], "-" + name, position)

    def _invoke(self, descriptor, cursor, destination, label, position):
        try:
            values = arity.consume(descriptor.nargs, cursor)
        except ExhaustedInputError as fault:
            where = " at %s position" % ordinal(position) if position is not None else ""
            raise ExhaustedInputError(
                "not enough arguments for %r%s: expected %s" % (label, where, arity.describe(descriptor.nargs)),
                **(fault.options | {"option": label}),
            ) from None

        try:
            descriptor.action(descriptor.nargs, values, destination)
        except ValueFormatError as fault:
            raise type(fault)(
                "%s for %r" % (fault.message, label),
                **(fault.options | {"option": label}),
            ) from None

    # cli glue

    def parse(self, record, tokens=Unset):
        """
        parse_args() for command-line programs.

        - bad command line: usage and the fault go to stderr, exit status 2.
        - help requested: help goes to stdout, exit status 0.
        - ConfigurationError propagates (it is a bug in the program, not in the input).
        """
        options = {"parser": self, "prog": self.prog, "width": self._width, "colorful": self._colorful}
        try:
            return self.parse_args(record, tokens)
        except HelpRequested as fault:
            trigger(fault, **options)
        except CommandLineError as fault:
            console = Console(stderr=True, width=self._width)
            console.print(usage(self))
            if self._helper:
                console.print(Text("try '%s --help' for help" % self.prog))
            console.print()
            trigger(fault, **options)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "argument-parser(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "END_OF_OPTIONS",
    "ArgumentParser",
)
