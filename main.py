import sys

from rich.pretty import pprint

from argwright import *

__prog__ = "demo"

settings = {"verbose": False, "include": []}

cmdline = Cmdline("demo", "argwright playground")
cmdline.add("v|verbose|no-verbose", "print more", flag(settings, "verbose"), occurrence=Occurrence.ZERO_OR_MORE)
cmdline.add(
    "I|include", "add a directory to the include path", push_back(settings["include"]),
    argument=Argument.REQUIRED, join=Join.OPTIONAL, occurrence=Occurrence.ZERO_OR_MORE, comma=True,
)
cmdline.add("j|jobs", "parallel jobs", assign(settings, "jobs", uint8, in_range(1, 64)), argument=Argument.REQUIRED)
cmdline.add("input", "source file", assign(settings, "input"), positional=True, occurrence=Occurrence.REQUIRED)


if __name__ == '__main__':
    if not cmdline.parse():
        cmdline.print_diagnostics()
        sys.exit(2)
    pprint(settings)
