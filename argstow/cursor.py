"""
Token cursor: a one-token-lookahead, one-token-pushback stream over argv-like tokens.

The pushback slot lets the parser re-inject the right-hand side of
'--name=value' as an ordinary token, so the arity resolver never needs a
separate code path for inline values.
"""
from .faults import ExhaustedInputError
from .utils import Unset, ordinal


class TokenCursor:
    """
    stream over an immutable tuple of tokens.

    invariants
    - a pushed-back token is always returned before the read position advances.
    - at most one token is pushed back at a time (push overwrites).
    - an empty string is a legitimate pushback value (the slot uses Unset).
    """
    __slots__ = ("_tokens", "_position", "_pushed")

    def __init__(self, tokens=(), /):
        self._tokens = tuple(tokens)
        self._position = 0
        self._pushed = Unset

    @property
    def position(self):
        return self._position

    @property
    def pushed(self):
        """
        true when the next token comes from the pushback slot.
        """
        return self._pushed is not Unset

    @property
    def exhausted(self):
        return self._pushed is Unset and self._position >= len(self._tokens)

    def next(self):
        """
        consume and return the next token.

        raises ExhaustedInputError when no pushback is set and no token remains.
        """
        if self._pushed is not Unset:
            token, self._pushed = self._pushed, Unset
            return token

        if self._position >= len(self._tokens):
            raise ExhaustedInputError(
                "not enough arguments: expected a value at %s position" % ordinal(self._position + 1),
                hint="add the missing value",
                position=self._position + 1,
            )

        token = self._tokens[self._position]
        self._position += 1
        return token

    def peek(self):
        """
        return the next token without consuming it ("" when nothing remains).
        """
        if self._pushed is not Unset:
            return self._pushed
        if self._position >= len(self._tokens):
            return ""
        return self._tokens[self._position]

    def push(self, token, /):
        if not isinstance(token, str):
            raise TypeError("push() argument must be a string")
        self._pushed = token

    def back_up(self):
        """
        undo the last consume from the underlying tokens (not the pushback slot).
        """
        if self._position <= 0:
            raise ValueError("back_up() cannot move before the first token")
        self._position -= 1

    def remaining(self):
        """
        drain and return every token left, pushback first.
        """
        tokens = []
        while not self.exhausted:
            tokens.append(self.next())
        return tokens

    def __iter__(self):
        while not self.exhausted:
            yield self.next()

    def __repr__(self):
        return "token-cursor(tokens=%r, position=%d, pushed=%r)" % (self._tokens, self._position, self._pushed)


__all__ = (
    "TokenCursor",
)
