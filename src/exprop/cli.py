import argparse
import json
import os
import sys

from loguru import logger

from . import __version__
from .analysis.check_driver import CheckDriver
from .config import CheckOptions, Coverage, load_options
from .diagnostics import format_diagnostic
from .errors import ExpropError
from .utils import postprocessor


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="exprop",
        description="Check that exception propagation annotations sit exactly where code may throw.",
    )
    parser.add_argument("files", nargs="+", help="C++ source files to check")
    parser.add_argument("--config", help="JSON file with check options")
    parser.add_argument("--annotation", help="annotation name (default: maybe_unhandled)")
    parser.add_argument(
        "--coverage",
        choices=[c.value for c in Coverage],
        help="how far an annotated statement covers the statements below it",
    )
    parser.add_argument(
        "--unresolved-throw",
        action="store_const",
        const=True,
        default=None,
        help="treat calls without a visible declaration as throwing",
    )
    parser.add_argument("--format", choices=["text", "json"], default="text")
    parser.add_argument("--output", help="write diagnostics here instead of stdout")
    parser.add_argument("--dump-tree", metavar="DIR", help="write each lowered tree as json and dot into DIR")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose=False, quiet=False):
    logger.remove()
    level = "DEBUG" if verbose else "ERROR" if quiet else "WARNING"
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {message}")


def resolve_options(args):
    options = load_options(args.config) if args.config else CheckOptions()
    return options.merged({
        "annotation": args.annotation,
        "coverage": args.coverage,
        "unresolved_callees_throw": args.unresolved_throw,
    })


def check_file(path, options, dump_tree=None):
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        src_code = f.read()
    driver = CheckDriver(options.language, src_code, properties=options, file_name=path)
    if dump_tree:
        os.makedirs(dump_tree, exist_ok=True)
        driver.write_tree(os.path.join(dump_tree, os.path.basename(path)), graph_format="all")
    return driver.diagnostics


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        options = resolve_options(args)
    except (ExpropError, OSError) as e:
        logger.error("{}", e)
        return 2

    diagnostics = []
    failed = False
    for path in args.files:
        try:
            diagnostics.extend(check_file(path, options, args.dump_tree))
        except (ExpropError, OSError) as e:
            logger.error("{}: {}", path, e)
            failed = True

    if args.format == "json":
        report = json.dumps(postprocessor.diagnostics_to_json(diagnostics), indent=2)
    else:
        report = "\n".join(format_diagnostic(d) for d in diagnostics)

    if args.output:
        with open(args.output, "w") as f:
            f.write(report + "\n" if report else report)
    elif report:
        print(report)

    if failed:
        return 2
    return 1 if diagnostics else 0


if __name__ == "__main__":
    sys.exit(main())
