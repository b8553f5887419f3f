"""
Arity ("nargs") resolution: decide which following tokens belong to an argument.

Spellings
- int N (N >= 0): exactly N tokens, taken unconditionally.
- "?" (OPTIONAL): zero or one token.
- "+" (ONE_OR_MORE): one mandatory token, then as many as fit.
- "*" (ZERO_OR_MORE): as many as fit, possibly none.

A variable run ends at the end of input or at the first token that looks like
an option (see looks_like_option). The same rule applies to option values during
the dispatch pass and to positionals during the positional re-pass.

A token sitting in the cursor's pushback slot is the right-hand side of an
inline '--name=value' and always counts as a value.
"""
from types import MappingProxyType

OPTIONAL = "?"
ONE_OR_MORE = "+"
ZERO_OR_MORE = "*"

VARIABLE = MappingProxyType({
    OPTIONAL: "optional",
    ONE_OR_MORE: "one-or-more",
    ZERO_OR_MORE: "zero-or-more",
})


def looks_like_option(token, /):
    """
    true for tokens that start a short or long option: '-x', '--name', '-abc'.

    a lone '-' is a value (conventionally stdin), and so is the empty string.
    negative numbers ('-5') do look like options; pass them inline
    ('--count=-5') or after '--'.
    """
    return len(token) >= 2 and token[0] == "-"


def validate(nargs, /):
    """
    return nargs unchanged when it is a valid arity, raise otherwise.
    """
    if isinstance(nargs, bool):
        raise TypeError("nargs must be an integer or one of '?', '+', '*'")
    if isinstance(nargs, int):
        if nargs < 0:
            raise ValueError("nargs must be a non-negative integer")
        return nargs
    if isinstance(nargs, str):
        if nargs not in VARIABLE:
            raise ValueError("nargs must be one of '?', '+', or '*'")
        return nargs
    raise TypeError("nargs must be an integer or one of '?', '+', '*'")


def _available(cursor):
    if cursor.exhausted:
        return False
    return cursor.pushed or not looks_like_option(cursor.peek())


def consume(nargs, cursor, /):
    """
    pull the tokens an argument of the given arity owns from the cursor.

    returns the list of consumed strings in order.

    raises ExhaustedInputError (from the cursor) when an exact count or the
    mandatory first token of "+" is not available.
    """
    match nargs:
        case "?":
            return [cursor.next()] if _available(cursor) else []

        case "+":
            values = [cursor.next()]
            while _available(cursor):
                values.append(cursor.next())
            return values

        case "*":
            values = []
            while _available(cursor):
                values.append(cursor.next())
            return values

        case int() if nargs >= 0:
            return [cursor.next() for _ in range(nargs)]

    raise ValueError("invalid nargs %r" % (nargs,))


def describe(nargs, /):
    """
    short human label for an arity, used in messages ("2 values", "one-or-more").
    """
    if isinstance(nargs, int):
        return "%d value%s" % (nargs, "" if nargs == 1 else "s")
    return VARIABLE[nargs]


__all__ = (
    "OPTIONAL",
    "ONE_OR_MORE",
    "ZERO_OR_MORE",
    "looks_like_option",
    "validate",
    "consume",
    "describe",
)
