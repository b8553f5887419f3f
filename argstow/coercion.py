"""
Value coercion: turn a command-line token into a typed value.

Kinds
- BOOL: 1 t T TRUE true True / 0 f F FALSE false False
- INT, INT8..INT64: optional sign, then 0x/0o/0b prefixed, leading-0 octal, or decimal.
  INT is an unbounded Python int; the sized kinds are range-checked.
- UINT, UINT8..UINT64: same literals without a sign; UINT is 64-bit.
- FLOAT32, FLOAT64: decimal/exponent notation, hex floats, inf/infinity/nan.
  FLOAT32 values are rounded to single precision.
- STR: passthrough.

Record fields declare their kind through annotations: bool, int, float, str,
list[...] of those, or one of the Annotated aliases exported here (Int8, UInt16,
Float32, ...).
"""
import math
import re
import struct
import types
import typing
from enum import Enum
from typing import Annotated

from .faults import ValueFormatError, ConfigurationError


class Kind(Enum):
    """
    primitive destination kinds understood by coerce().

    the value is the human-readable name used in messages.
    """
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STR = "str"

    def __repr__(self):
        return "kind(%s)" % self.value


Int8 = Annotated[int, Kind.INT8]
Int16 = Annotated[int, Kind.INT16]
Int32 = Annotated[int, Kind.INT32]
Int64 = Annotated[int, Kind.INT64]
UInt = Annotated[int, Kind.UINT]
UInt8 = Annotated[int, Kind.UINT8]
UInt16 = Annotated[int, Kind.UINT16]
UInt32 = Annotated[int, Kind.UINT32]
UInt64 = Annotated[int, Kind.UINT64]
Float32 = Annotated[float, Kind.FLOAT32]
Float64 = Annotated[float, Kind.FLOAT64]

# (signed, bits); bits=None means unbounded
_INTEGERS = {
    Kind.INT: (True, None),
    Kind.INT8: (True, 8),
    Kind.INT16: (True, 16),
    Kind.INT32: (True, 32),
    Kind.INT64: (True, 64),
    Kind.UINT: (False, 64),
    Kind.UINT8: (False, 8),
    Kind.UINT16: (False, 16),
    Kind.UINT32: (False, 32),
    Kind.UINT64: (False, 64),
}

_BOOLEANS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}

_NATIVE = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT64,
    str: Kind.STR,
}


def _invalid(token, kind, reason=None):
    message = "invalid %s value %r" % (kind.value, token)
    if reason:
        message += " (%s)" % reason
    return ValueFormatError(message, token=token, kind=kind, hint="use a valid %s" % kind.value)


def _integer(token, kind):
    signed, bits = _INTEGERS[kind]
    body = token
    negative = False

    if body.startswith(("+", "-")):
        if not signed:
            raise _invalid(token, kind, "unsigned values take no sign")
        negative, body = body[0] == "-", body[1:]

    # only ascii digits, letters (for prefixes/hex) and separators; no spaces, no second sign
    if not re.fullmatch(r"[0-9][0-9A-Za-z_]*", body):
        raise _invalid(token, kind)

    try:
        if len(body) > 1 and body[0] == "0" and body[1] in "01234567_":
            value = int(body, 8)
        else:
            value = int(body, 0)
    except ValueError:
        raise _invalid(token, kind) from None

    value = -value if negative else value

    if bits is not None:
        low, high = (-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1)
        if not low <= value <= high:
            raise _invalid(token, kind, "out of range [%d, %d]" % (low, high))
    return value


def _float(token, kind):
    if not token or token != token.strip():
        raise _invalid(token, kind)
    try:
        value = float(token)
    except ValueError:
        if "0x" not in token.lower():
            raise _invalid(token, kind) from None
        try:
            value = float.fromhex(token)
        except (ValueError, OverflowError):
            raise _invalid(token, kind) from None

    if math.isinf(value) and "inf" not in token.lower():
        raise _invalid(token, kind, "out of range")

    if kind is Kind.FLOAT32:
        try:
            value, = struct.unpack("f", struct.pack("f", value))
        except OverflowError:
            raise _invalid(token, kind, "out of range") from None
    return value


def coerce(token, kind, /):
    """
    convert a token into a value of the given kind.

    raises
    - ValueFormatError: the token is not a valid literal for the kind.
    - ConfigurationError: kind is not a Kind.
    """
    if not isinstance(token, str):
        raise TypeError("coerce() first argument must be a string")

    match kind:
        case Kind.STR:
            return token
        case Kind.BOOL:
            try:
                return _BOOLEANS[token]
            except KeyError:
                raise _invalid(token, kind) from None
        case Kind.FLOAT32 | Kind.FLOAT64:
            return _float(token, kind)
        case Kind() if kind in _INTEGERS:
            return _integer(token, kind)

    raise ConfigurationError("unsupported destination kind %r" % (kind,), kind=kind)


def kindof(annotation, /):
    """
    resolve a field annotation into (kind, sequence).

    accepted
    - bool, int, float, str
    - Annotated[..., Kind.X] (the aliases exported by this module)
    - list[X] / list (sequence of X / of str)
    - X | None (unwrapped to X)

    raises ConfigurationError for anything else (nested records, mappings, ...).
    """
    origin = typing.get_origin(annotation)

    if origin is Annotated:
        base, *metadata = typing.get_args(annotation)
        for item in metadata:
            if isinstance(item, Kind):
                return item, False
        return kindof(base)

    if origin in (typing.Union, types.UnionType):
        members = [member for member in typing.get_args(annotation) if member is not type(None)]
        if len(members) == 1:
            return kindof(members[0])
        raise ConfigurationError("unsupported destination type %r (ambiguous union)" % (annotation,), annotation=annotation)

    if annotation is list or origin is list:
        element, = typing.get_args(annotation) or (str,)
        kind, sequence = kindof(element)
        if sequence:
            raise ConfigurationError("unsupported destination type %r (nested sequence)" % (annotation,), annotation=annotation)
        return kind, True

    try:
        return _NATIVE[annotation], False
    except (KeyError, TypeError):
        raise ConfigurationError("unsupported destination type %r" % (annotation,), annotation=annotation) from None


__all__ = (
    "Kind",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    "coerce",
    "kindof",
)
