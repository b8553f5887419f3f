"""
Argstow actions: what happens once an argument's tokens have been consumed.

An action is a callable invoked as action(nargs, values, destination):
- nargs: the declared arity of the descriptor ("?", "+", "*", or int).
- values: the list of strings the arity resolver consumed.
- destination: a Destination handle, or Absent (writes become no-ops).

Built-ins
- Store: coerce and write one value (arity 1 / "?"), or a whole list (other arities).
- Append: coerce and append every value to a list field.
- StoreConst(value) / AppendConst(value): ignore the tokens, write/append a constant.
- Choice(action, *choices): reject tokens outside a fixed set, then delegate.
- ShowHelp: raise HelpRequested (the CLI glue prints help and exits 0).

Custom actions subclass Action and implement __call__; set consumes = False when
the action ignores its tokens, so descriptors default to arity 0. Override check()
to reject arity and field shapes the action cannot write; the parser runs it for
every descriptor before the first token is read.
"""
import functools
import operator
import re

from . import arity
from .coercion import coerce
from .faults import ConfigurationError, InvalidChoiceError, HelpRequested
from .utils import rename


class Action:
    """
    base class of all actions.

    attributes
    - consumes: True when the action uses its tokens; drives the default arity
      of descriptors built with this action (1 when True, 0 otherwise).
    """
    __typename__ = "action"
    consumes = True

    def __call__(self, nargs, values, destination, /):
        raise NotImplementedError

    def check(self, nargs, destination, /):
        """
        raise ConfigurationError when the arity and the destination field do not fit
        this action. the parser calls it once per descriptor, before reading tokens.
        """

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        cls.__typename__ = re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__).lower()

    def __rich_repr__(self):
        yield from ()

    def __repr__(self):
        return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    def __hash__(self):
        return hash((type(self), tuple(self.__rich_repr__())))


def _scalar(destination, action):
    if destination and destination.sequence:
        raise ConfigurationError(
            "%s of a single value into list field %r" % (action, destination.name),
            field=destination.name,
            hint="use nargs '+', '*' or N > 1, or the append action",
        )


def _sequence(destination, action):
    if destination and not destination.sequence:
        raise ConfigurationError(
            "%s needs a list field, but %r holds a single %s" % (action, destination.name, destination.kind.value),
            field=destination.name,
            hint="annotate %r as a list" % destination.name,
        )


class Store(Action):
    """
    coerce and store the consumed value(s).

    - nargs 1, or "?" with one token: a single value.
    - nargs "?" with no token: the destination is left untouched.
    - any other arity: the field must be a list; the whole list is written at once.
    """

    def check(self, nargs, destination, /):
        if nargs == 1 or nargs == "?":
            _scalar(destination, "store")
        else:
            _sequence(destination, "store of %s" % arity.describe(nargs))

    def __call__(self, nargs, values, destination, /):
        self.check(nargs, destination)
        if nargs == 1 or nargs == "?":
            if values:
                destination.set(coerce(values[0], destination.kind))
            return

        destination.set([coerce(value, destination.kind) for value in values])


class Append(Action):
    """
    coerce every consumed value and append it to a list field, keeping what is there.
    """

    def check(self, nargs, destination, /):
        _sequence(destination, "append")

    def __call__(self, nargs, values, destination, /):
        self.check(nargs, destination)
        for value in values:
            destination.append(coerce(value, destination.kind))


class StoreConst(Action):
    consumes = False

    def __init__(self, value, /):
        self.value = value

    def __call__(self, nargs, values, destination, /):
        destination.set(self.value)

    def __rich_repr__(self):
        yield "value", self.value


class AppendConst(Action):
    consumes = False

    def __init__(self, value, /):
        self.value = value

    def check(self, nargs, destination, /):
        _sequence(destination, "append-const")

    def __call__(self, nargs, values, destination, /):
        self.check(nargs, destination)
        destination.append(self.value)

    def __rich_repr__(self):
        yield "value", self.value


class Choice(Action):
    """
    validate every consumed token against a fixed set before delegating.

    choices are strings compared to the raw tokens (before coercion); order is
    kept for messages and help output.
    """

    def __init__(self, action, /, *choices):
        if not callable(action):
            raise TypeError("choice() first argument must be an action")
        if not choices:
            raise TypeError("choice() requires at least one choice")
        sanitized = []
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError("choice() choices must be strings")
            if choice in sanitized:
                raise ValueError("choice() choices cannot contain duplicates")
            sanitized.append(choice)
        self.action = action
        self.choices = tuple(sanitized)

    @property
    def consumes(self):
        return getattr(self.action, "consumes", True)

    def check(self, nargs, destination, /):
        if check := getattr(self.action, "check", None):
            check(nargs, destination)

    def __call__(self, nargs, values, destination, /):
        for value in values:
            if value not in self.choices:
                raise InvalidChoiceError(
                    "invalid choice %r: expected one of %s" % (value, ", ".join(self.choices)),
                    token=value,
                    choices=self.choices,
                    hint="use one of: %s" % " · ".join(self.choices),
                )
        return self.action(nargs, values, destination)

    def __rich_repr__(self):
        yield "action", self.action
        yield "choices", self.choices


class ShowHelp(Action):
    """
    signal a help request; parsing stops and the CLI glue renders the help.
    """
    consumes = False

    def __call__(self, nargs, values, destination, /):
        raise HelpRequested("help requested")


@rename("choice")
def choice(action, /, *choices):
    """
    functional spelling of Choice(action, *choices).
    """
    return Choice(action, *choices)


__all__ = (
    "Action",
    "Store",
    "Append",
    "StoreConst",
    "AppendConst",
    "Choice",
    "ShowHelp",
    "choice",
)
