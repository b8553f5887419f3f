"""
Destination handles: typed, writable references to fields of a caller's record.

A record is any object whose class annotates the fields the parser writes to
(a dataclass, a plain annotated class, ...). Fields are resolved once per parse
by name; the resulting handle carries the field's kind and whether it holds a
sequence, so actions never inspect types again.

Unannotated attributes fall back to the type of their current value
(lists are taken as lists of strings unless they already hold typed items).
"""
import logging
import typing

from .coercion import Kind, kindof
from .faults import ConfigurationError
from .utils import Unset, mirror

logger = logging.getLogger(__name__)


class Destination:
    """
    writable reference to one field of a record.

    properties
    - name: field name on the record.
    - kind: Kind of a single value (element kind for sequences).
    - sequence: True when the field holds a list.
    """
    __introspectable__ = ("name", "kind", "sequence")

    name = mirror("name")
    kind = mirror("kind")
    sequence = mirror("sequence")

    def __init__(self, record, name, kind, sequence=False):
        self._record = record
        self._name = name
        self._kind = kind
        self._sequence = bool(sequence)

    def get(self):
        return getattr(self._record, self._name, None)

    def set(self, value):
        setattr(self._record, self._name, value)

    def append(self, value):
        # never in place: the current list may be a shared default
        current = self.get()
        self.set([*(current or ()), value])

    def __bool__(self):
        return True

    def __repr__(self):
        return "destination(%s)" % ", ".join("%s=%r" % (name, getattr(self, name)) for name in self.__introspectable__)


class AbsentType:
    """
    handle for descriptors that carry no data (e.g. the help flag).

    falsy; every write is a no-op; reads return None.
    """
    __slots__ = ()

    name = None
    kind = Kind.STR
    sequence = True

    def get(self):
        return None

    def set(self, value):
        pass

    def append(self, value):
        pass

    def __bool__(self):
        return False

    def __repr__(self):
        return "absent"


Absent = AbsentType()


def _hints(record):
    try:
        return typing.get_type_hints(type(record), include_extras=True)
    except (NameError, TypeError) as exception:
        raise ConfigurationError(
            "cannot resolve field annotations of %s: %s" % (type(record).__qualname__, exception),
            record=record,
        ) from None


def _infer(record, field):
    value = getattr(record, field)
    if isinstance(value, list):
        element = type(value[0]) if value else str
        return kindof(list[element])
    return kindof(type(value))


def bind(record, field, /):
    """
    resolve a field name on a record into a Destination.

    parameters
    - record: the caller's record instance.
    - field: field name, or Unset/None for "no destination" (returns Absent).

    raises ConfigurationError when the field does not exist or its type is not
    a supported primitive (or list of primitives).
    """
    if field is Unset or field is None:
        return Absent

    if not isinstance(field, str):
        raise ConfigurationError("destination field must be a string, not %r" % (field,), field=field)

    hints = _hints(record)
    if field not in hints and getattr(record, field, None) is None:
        raise ConfigurationError(
            "invalid destination field %r on %s" % (field, type(record).__qualname__),
            field=field,
            hint="declare %r on the record (an annotated attribute)" % field,
        )

    try:
        kind, sequence = kindof(hints[field]) if field in hints else _infer(record, field)
    except ConfigurationError as exception:
        raise ConfigurationError("destination field %r: %s" % (field, exception.message), field=field) from None

    logger.debug("bound field %r of %s as %s%s", field, type(record).__qualname__, kind.value, "[]" * sequence)
    return Destination(record, field, kind, sequence)


__all__ = (
    "Destination",
    "AbsentType",
    "Absent",
    "bind",
)
