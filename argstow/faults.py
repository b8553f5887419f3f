"""
Argstow faults (parse errors and signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain to keep copy consistent and make logs/searches predictable.
- ParseFault: base type that carries a message + read-only options and knows
  how to render itself in a friendly, lowercased, and actionable way.
- CommandLineError: the user-input kinds (exhausted input, unknown option,
  value format, unparsed tokens). A host may recover from these by printing
  usage; ConfigurationError is the caller-setup kind and is never a
  CommandLineError.
- HelpRequested: not an error; the signal raised by the help action.
- trigger(): central entry point to surface a fault (render + exit status).

UX goals
- Position-first messages where a position is known ("at third position").
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The parsing core raises faults and never prints.
- The CLI glue (ArgumentParser.parse) calls trigger(fault, parser=..., ...) which
  renders through rich and terminates with the fault's exit status.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - options (1111x)
      • UNKNOWN_OPTION, UNEXPECTED_VALUE
    - values (1112x)
      • EXHAUSTED_INPUT, VALUE_FORMAT, INVALID_CHOICE
    - positionals (1114x)
      • UNPARSED_TOKENS
    - setup (1310x)
      • CONFIGURATION
    - signals (1410x)
      • HELP_REQUESTED

    normalize() lets the host remap codes to custom labels while keeping
    the numeric values stable.
    """
    # --- option errors (111xx) ---
    UNKNOWN_OPTION              = 11112
    UNEXPECTED_VALUE            = 11113

    # --- value errors (112xx) ---
    EXHAUSTED_INPUT             = 11122
    VALUE_FORMAT                = 11123
    INVALID_CHOICE              = 11124

    # --- positional errors (114xx) ---
    UNPARSED_TOKENS             = 11141

    # --- caller setup errors (13xxx) ---
    CONFIGURATION               = 13101

    # --- signals (14xxx) ---
    HELP_REQUESTED              = 14101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(base):
    # host overrides come from __styles__ in __main__
    return defaultdict(str, base | getattr(__import__("__main__"), "__styles__", {}))


class ParseFault(Exception):
    """
    base fault: a message plus read-only context options.

    class attributes
    - __title__: short title used in the rendered header.
    - __code__: FaultCode identifying the fault.
    - status: exit status used by __trigger__ in the CLI glue.

    common options
    - hint: one actionable sentence shown after the message.
    - prog: program name shown in the header (falls back to __prog__ in __main__).
    - colorful: bool, enables the style palette.
    - fancy: bool, wraps the message in a panel.
    """
    __title__ = "parse fault"
    __code__ = None
    status = 2

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __getattr__(self, name):
        # context options (token, kind, option, choices, ...) read as attributes
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)

        styles = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = self.options.get("prog", getattr(main, "__prog__", "argstow"))
        code = self.code.normalize() if self.code is not None else "-"

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code, "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        if not self.hint:
            body = Group(message)
        else:
            body = Group(message, Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(body, title=header, title_align="left")
        return Group(header, body)

    def __trigger__(self):
        """
        render the fault and terminate with its exit status.
        """
        console = Console(stderr=self.status != 0, width=self.options.get("width"))
        console.print(self)
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CommandLineError(ParseFault):
    """
    base for faults caused by the command line itself (user input).
    """
    __title__ = "bad command line"


class ExhaustedInputError(CommandLineError):
    __title__ = "not enough arguments"
    __code__ = FaultCode.EXHAUSTED_INPUT


class UnknownOptionError(CommandLineError):
    __title__ = "unknown option"
    __code__ = FaultCode.UNKNOWN_OPTION


class ValueFormatError(CommandLineError):
    __title__ = "bad value"
    __code__ = FaultCode.VALUE_FORMAT


class InvalidChoiceError(ValueFormatError):
    __title__ = "invalid choice"
    __code__ = FaultCode.INVALID_CHOICE


class UnexpectedValueError(ValueFormatError):
    __title__ = "option takes no value"
    __code__ = FaultCode.UNEXPECTED_VALUE


class UnparsedTokensError(CommandLineError):
    __title__ = "unparsed input"
    __code__ = FaultCode.UNPARSED_TOKENS


class ConfigurationError(ParseFault, TypeError):
    """
    raised for mistakes in the caller's setup (unknown destination field,
    unsupported field type, clashing option names). never caused by input.
    """
    __title__ = "bad parser configuration"
    __code__ = FaultCode.CONFIGURATION
    status = 1


class HelpRequested(ParseFault):
    """
    signal raised by the help action; rendered as the parser's help text.

    options
    - parser: the ArgumentParser whose help should be rendered.
    """
    __title__ = "help"
    __code__ = FaultCode.HELP_REQUESTED
    status = 0

    def __rich__(self):
        from .formatting import helptext
        return helptext(self.options["parser"])


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseFault).
    - options are merged into the fault via __replace__(**options) before triggering.

    typical options
    - parser, prog, width, colorful, fancy, and any other context the renderer
      may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ParseFault",
    "CommandLineError",
    "ExhaustedInputError",
    "UnknownOptionError",
    "ValueFormatError",
    "InvalidChoiceError",
    "UnexpectedValueError",
    "UnparsedTokensError",
    "ConfigurationError",
    "HelpRequested",
    "trigger",
)
