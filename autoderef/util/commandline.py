"""Report borrows and dereferences the compiler would insert or remove by itself."""

from argparse import SUPPRESS, ArgumentParser, ArgumentTypeError
from enum import Enum
from os import isatty
from os.path import isfile
from sys import stdout

from autoderef.diagnostics.diagnostic import Applicability
from autoderef.logger import configure_logging
from autoderef.util.decoration import DecoratedDiagnostics
from autoderef.util.options import Options

VERBOSITY_TO_LOG_LEVEL = {0: "ERROR", 1: "WARNING", 2: "INFO", 3: "DEBUG"}


class Colorize(str, Enum):
    """When to highlight findings. Deriving from str lets json.dumps write a choice as its plain value."""

    ALWAYS = "always"
    NEVER = "never"
    AUTO = "auto"

    def __str__(self):
        """Show the bare value, so --help lists the choices as {always,never,auto}."""
        return self.value


def parse_commandline(argv=None):
    """Read the crate, the items to lint and all expert options from the given arguments or sys.argv."""

    def _crate_file(path: str) -> str:
        if not isfile(path):
            raise ArgumentTypeError(f"no crate description found at {path}")
        return path

    parser = ArgumentParser(description=__doc__, epilog="", argument_default=SUPPRESS, add_help=False)
    # arguments only known to the command line
    parser.add_argument("crate", type=_crate_file, help="path to the JSON description of a type checked crate")
    parser.add_argument("item", nargs="*", help="items to lint, all items if none are named", default=None)
    parser.add_argument("--help", "-h", action="help", help="show this help message and exit")
    parser.add_argument(
        "--verbose", "-v", dest="verbose", action="count", help="log more, repeat up to -vvv for debug output", default=0
    )
    parser.add_argument("--color", type=Colorize, choices=list(Colorize), help="highlight findings, auto only does on a terminal", default=Colorize.AUTO)
    parser.add_argument("--output", "-o", dest="outfile", help="write the findings to this file instead of stdout", default=None)
    parser.add_argument("--all", "-a", dest="all", action="store_true", help="lint every item, even if items are named", default=False)
    parser.add_argument("--print-config", dest="print", action="store_true", help="print the resulting options as JSON and exit", default=False)
    parser.usage = parser.format_usage().lstrip("usage: ")  # expert options stay out of the usage line
    Options.register_defaults_in_argument_parser(parser)
    return parser.parse_args(argv)


def main(interface: "Linter", argv=None) -> int:
    """Lint the requested items of a crate and print the findings. Returns 1 if any item could not be linted."""
    args = parse_commandline(argv)
    configure_logging(level=VERBOSITY_TO_LOG_LEVEL[min(3, args.verbose)])

    options = Options.from_cli(args)
    if args.print:
        print(options)
        return 0

    linter = interface.from_path(args.crate, options)
    if args.outfile is None:
        output_stream = None
        color = args.color == Colorize.ALWAYS or (args.color != Colorize.NEVER and isatty(stdout.fileno()))
    else:
        output_stream = open(args.outfile, "w", encoding="utf-8")
        color = False
    try:
        item_names = None if args.all or not args.item else args.item
        result = linter.lint_all(item_names, options)
        DecoratedDiagnostics.print_findings(
            result.diagnostics,
            linter.source_map,
            output_stream,
            color,
            min_applicability=Applicability.from_name(options.getstring("diagnostics.min_applicability", fallback="unspecified")),
            style=options.getstring("diagnostics.style", fallback="paraiso-dark"),
        )
    finally:
        if output_stream is not None:
            output_stream.close()
    return 1 if any(task.failed for task in result.tasks) else 0
