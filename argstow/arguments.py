r"""
Argstow argument descriptors.

Overview
- Descriptors
  • Option: named argument with a short (-x) and/or long (--name) spelling.
  • Positional: unnamed argument matched against leftover tokens in declaration order.

- Introspection & representation
  • DescriptorType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- Shared
  • nargs: Unset | "?" | "+" | "*" | int (>= 0). Unset defaults to 1 for actions
    that consume tokens and to 0 for constant actions (StoreConst, AppendConst, ShowHelp).
  • action: a callable action(nargs, values, destination) (see argstow.actions).
  • dest: Unset | str, the record field written by the action. Unset means "no data".
  • metavar: Unset | str, label in usage/help. Defaults to the upper-cased dest
    (options that consume nothing show no metavar).
  • descr: Unset | str | Text, short help text.
- Option only
  • names: one short "-x" and/or one long "--name", at least one of them.

Descriptors are immutable once built; the parser keeps them in registration order.

Quick example:
    >>> from argstow.arguments import Option, Positional
    >>> from argstow.actions import Append, StoreConst
    >>> Option("-v", "--verbose", action=StoreConst(True), dest="verbose")
    option(names=('-v', '--verbose'), short='v', long='verbose', nargs=0, action=store-const(value=True), dest='verbose', metavar=None, descr=None)
    >>> Positional("files", nargs="+", action=Append())
    positional(nargs='+', action=append(), dest='files', metavar='FILES', descr=None)
"""
import functools
import operator
import re

from rich.text import Text

from . import arity
from .actions import Store
from .utils import *


class DescriptorType(type):
    """
    Metaclass that turns descriptor classes into introspectable, read-only records.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and help output.
    - every name in __introspectable__ becomes a mirror() property over "_name".
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
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the metadata shared by every descriptor.

    Responsibilities
    - action: must be callable.
    - nargs: validated by arity.validate(); Unset resolves from action.consumes.
    - dest: Unset or a valid identifier.
    - metavar: Unset or a non-empty string after trimming; defaults from dest.
    - descr: Unset or a non-empty string/Text; Unset becomes None.

    Side effects
    - Mutates the provided metadata dict in place.
    """
    if not callable(action := metadata["action"]):
        raise TypeError(f"{cls.__typename__} 'action' must be callable")

    if (nargs := metadata["nargs"]) is Unset:
        nargs = 1 if getattr(action, "consumes", True) else 0
    try:
        metadata["nargs"] = arity.validate(nargs)
    except (TypeError, ValueError) as exception:
        raise type(exception)(f"{cls.__typename__} {exception}") from None

    if not isinstance(dest := metadata["dest"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'dest' must be a string")
    elif isinstance(dest, str) and not dest.isidentifier():
        raise ValueError(f"{cls.__typename__} 'dest' must be a valid field name")
    metadata["dest"] = coalesce(dest)

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate option names.

    - "-x": short name, a single letter or digit.
    - "--name", "--long-name": long name, segments separated by single hyphens.
    At least one name, at most one of each form; names are kept short-first.
    """
    short = long = None
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"-[^\W_]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} accepts a single short name (got {short!r} and {name!r})")
            short = name
        elif re.fullmatch(r"--[^\W_](-?[^\W_]+)*", name):
            if long is not None:
                raise ValueError(f"{cls.__typename__} accepts a single long name (got {long!r} and {name!r})")
            long = name
        else:
            raise ValueError(f"{cls.__typename__} names must look like '-x' or '--name' (got {name!r})")

    metadata["names"] = tuple(name for name in (short, long) if name is not None)
    metadata["short"] = short[1:] if short is not None else None
    metadata["long"] = long[2:] if long is not None else None


class Option(metaclass=DescriptorType):
    """
    Named argument descriptor.

    Properties
    - names: tuple of the declared spellings, short first ("-b", "--by").
    - short: the short name without its dash ("b"), or None.
    - long: the long name without its dashes ("by"), or None.
    - nargs, action, dest, metavar, descr: see module documentation.
    """
    __introspectable__ = (
        "names",
        "short",
        "long",
        "nargs",
        "action",
        "dest",
        "metavar",
        "descr",
    )

    def __init__(self, *names, nargs=Unset, action=Store(), dest=Unset, metavar=Unset, descr=Unset):
        metadata = {
            "names": names,
            "nargs": nargs,
            "action": action,
            "dest": dest,
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_named_metadata(type(self), metadata)
        _sanitize_metadata(type(self), metadata)

        if metadata["metavar"] is None and metadata["nargs"] != 0 and metadata["dest"] is not None:
            metadata["metavar"] = metadata["dest"].upper()

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def label(self):
        """
        display spelling used in messages: the long name when there is one.
        """
        return self._names[-1]

    def __setattr__(self, name, value):
        if not name.startswith("_"):
            raise AttributeError(f"{type(self).__typename__} is read-only")
        super().__setattr__(name, value)


class Positional(metaclass=DescriptorType):
    """
    Positional argument descriptor.

    Properties
    - nargs, action, dest, metavar, descr: see module documentation.
      metavar defaults to the upper-cased dest, or "ARG" without a dest.
    """
    __introspectable__ = (
        "nargs",
        "action",
        "dest",
        "metavar",
        "descr",
    )

    def __init__(self, dest=Unset, /, nargs=Unset, action=Store(), metavar=Unset, descr=Unset):
        metadata = {
            "nargs": nargs,
            "action": action,
            "dest": dest,
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)

        if metadata["metavar"] is None:
            metadata["metavar"] = metadata["dest"].upper() if metadata["dest"] is not None else "ARG"

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def label(self):
        return self._metavar

    def __setattr__(self, name, value):
        if not name.startswith("_"):
            raise AttributeError(f"{type(self).__typename__} is read-only")
        super().__setattr__(name, value)


__all__ = (
    "Option",
    "Positional",
)

del DescriptorType
