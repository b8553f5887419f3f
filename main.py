from dataclasses import dataclass, field

from rich.pretty import pprint

from argstow import *

__prog__ = "stow"


@dataclass
class Record:
    verbose: bool = False
    by: str = "mtime"
    depth: Int8 = 1
    tags: list[str] = field(default_factory=list)
    target: str = ""
    sources: list[str] = field(default_factory=list)


parser = ArgumentParser("copy sources into a target directory, sorted on the way", colorful=True)
parser.option("-v", "--verbose", action=StoreConst(True), dest="verbose", descr="print every copied file")
parser.option("-b", "--by", action=Choice(Store(), "mtime", "name", "size"), dest="by", descr="sort key")
parser.option("-d", "--depth", dest="depth", descr="how many directory levels to descend")
parser.option("-t", "--tag", action=Append(), dest="tags", metavar="TAG", descr="label attached to the copy (repeatable)")
parser.argument("target", descr="destination directory")
parser.argument("sources", nargs="+", descr="files or directories to copy")


if __name__ == '__main__':
    record = Record()
    parser.parse(record)
    pprint(record)
