"""
Usage and help rendering.

Both functions return rich renderables; the CLI glue prints them on a Console
sized to the parser's width.

Layout
    usage: PROG (options) FILE DEST? ITEM ITEM... REST...

    PROG - description, wrapped with a hanging indent

    Positional arguments:
      FILE   help text, wrapped with a hanging indent

    Options:
      -h, --help     show this help message and exit
      -b BY, --by=BY help text

Positional forms
- "?": M?   "+": M M...   "*": M...   N: M repeated N times.
"""
from rich.console import Group
from rich.constrain import Constrain
from rich.padding import Padding
from rich.table import Table
from rich.text import Text

from .faults import _palette


def _styles():
    return _palette({
        "usage": "bold #E6E6F0",
        "prog-name": "bold #00E5FF",
        "metavar": "#FFB86C",
        "section": "bold #FF4DA6",
        "option": "#9CE19C",
        "descr": "#C8C8D0",
    })


def argspec(nargs, metavar, /):
    """
    display form of a positional: "M?", "M M...", "M...", or M repeated N times.
    """
    match nargs:
        case "?":
            return metavar + "?"
        case "+":
            return metavar + " " + metavar + "..."
        case "*":
            return metavar + "..."
        case int():
            return " ".join([metavar] * nargs)
    raise ValueError("invalid nargs %r" % (nargs,))


def optspec(option, /):
    """
    display form of an option: "-b BY, --by=BY", "-v, --verbose", "--dry-run".
    """
    forms = []
    if option.short is not None:
        forms.append("-%s %s" % (option.short, option.metavar) if option.metavar else "-" + option.short)
    if option.long is not None:
        forms.append("--%s=%s" % (option.long, option.metavar) if option.metavar else "--" + option.long)
    return ", ".join(forms)


def usage(parser, /):
    """
    one-line usage: "usage: PROG (options) ARGS...".
    """
    styles = _styles()
    style = (lambda name: styles[name]) if parser.colorful else (lambda name: "")

    text = Text.assemble(("usage: ", style("usage")), (parser.prog, style("prog-name")))
    if parser.options:
        text.append(" (options)", style("option"))
    for positional in parser.positionals:
        if form := argspec(positional.nargs, positional.metavar):
            text.append(" ")
            text.append(form, style("metavar"))
    return text


def _text(object):
    return Text(object) if isinstance(object, str) else object


def _section(rows, style):
    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True, style=style("option"))
    table.add_column(style=style("descr"), overflow="fold")
    for left, right in rows:
        table.add_row(_text(left), _text(right or ""))
    return Padding(table, (0, 0, 0, 2))


def helptext(parser, /):
    """
    full help: usage, description, positional arguments and options.
    """
    styles = _styles()
    style = (lambda name: styles[name]) if parser.colorful else (lambda name: "")

    parts = [usage(parser)]

    if parser.descr:
        description = Table.grid(padding=0)
        description.add_column(no_wrap=True)
        description.add_column(overflow="fold")
        description.add_row(Text(parser.prog + " - ", style("prog-name")), _text(parser.descr))
        parts += [Text(""), description]

    if parser.positionals:
        parts += [
            Text(""),
            Text("Positional arguments:", style("section")),
            _section(((argspec(positional.nargs, positional.metavar), positional.descr) for positional in parser.positionals), style),
        ]

    if parser.options:
        parts += [
            Text(""),
            Text("Options:", style("section")),
            _section(((optspec(option), option.descr) for option in parser.options), style),
        ]

    return Constrain(Group(*parts), width=parser.width)


__all__ = (
    "argspec",
    "optspec",
    "usage",
    "helptext",
)
