"""
Command line front end.

    echo "file1.txt or file2.txt"  | setdiff     lines of both files
    echo "file1.txt and file2.txt" | setdiff     lines found in both files
    echo "file1.txt not file2.txt" | setdiff     lines of file1.txt missing from file2.txt

The expression may also be given as arguments:

    setdiff -f c0,c1 -l c0,c1 -m c2 -- m1.lst and m2.lst

Exit status: 0 on success, 1 when an operand cannot be read, 2 for a
syntax, usage or configuration error, 3 for an internal error.
"""

import argparse
import logging
import sys
import warnings
from typing import List, Optional, TextIO

from setdiff import __version__
from setdiff.config import Configuration, ConfigurationError, load_config_file, parse_columns
from setdiff.diagnostics import Diagnostics, EmptyOperandWarning
from setdiff.emitter import emit, result_to_json, result_to_yaml
from setdiff.expressions import ExpressionSyntaxError
from setdiff.evaluator import evaluate_expression
from setdiff.lineset import OperandReadError
from setdiff.operators import UnknownOperatorError

PROG = "setdiff"

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_SYNTAX_ERROR = 2
EXIT_INTERNAL_ERROR = 3

EPILOG = """\
examples:
  echo "file1.lst and file2.lst" | setdiff -f c2,c3,c4
      lines of file1.lst whose whole text equals columns 2, 3 and 4
      (if present) of a line in file2.lst
  echo "m1.lst and m2.lst" | setdiff -l c0,c1 -f c0,c1 -m c2
      match on the first two columns and append column 2 of the
      matching m2.lst line to the m1.lst line

Operators are applied strictly left to right: 'a or b not c' is
(a OR b) NOT c. Columns are 0-based and '|' delimited.
"""


def _column_list(text: str):
    try:
        return parse_columns(text)
    except ConfigurationError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Combine the lines of text files with the set operators 'and', 'or' and 'not'.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-x", action="help", help="show this help message and exit")
    parser.add_argument("-d", "--debug", action="store_true", default=None,
                        help="print debug information to stderr")
    parser.add_argument("-i", "--ignore-case", dest="normalize", action="store_true", default=None,
                        help="compare keys ignoring letter case and all whitespace")
    parser.add_argument("-t", "--trailing-delimiter", dest="force_trailing_delimiter",
                        action="store_true", default=None,
                        help="end column-selected keys with a trailing '|'")
    parser.add_argument("-o", "--ordered", dest="sort_output", action="store_const", const=True,
                        default=None, help="print results sorted by key (the default)")
    parser.add_argument("--insertion-order", dest="sort_output", action="store_const", const=False,
                        help="print results in the order they were first read")
    parser.add_argument("-l", "--lhs-columns", dest="columns_lhs", type=_column_list, metavar="COLS",
                        help="columns of the first file used for comparison, e.g. c0,c1")
    parser.add_argument("-f", "--columns", dest="columns_rhs", type=_column_list, metavar="COLS",
                        help="columns of the following files used for comparison, e.g. c2,c3")
    parser.add_argument("-m", "--merge-columns", dest="merge_columns", type=_column_list, metavar="COLS",
                        help="on 'and', append these columns of the matching right hand line")
    parser.add_argument("--config", metavar="FILE", help="YAML or JSON file with default options")
    parser.add_argument("--format", choices=("text", "json", "yaml"), default="text",
                        help="output format (default: text)")
    parser.add_argument("-C", "--directory", metavar="DIR",
                        help="resolve file names relative to DIR")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("expression", nargs="*",
                        help="expression such as 'a.txt and b.txt'; read from stdin if omitted")
    return parser


def resolve_config(args: argparse.Namespace) -> Configuration:
    """Defaults, then the config file, then command-line flags."""
    config = Configuration()
    if args.config:
        config = load_config_file(args.config, base=config)
    return config.with_overrides(
        columns_lhs=args.columns_lhs,
        columns_rhs=args.columns_rhs,
        merge_columns=args.merge_columns,
        normalize=args.normalize,
        force_trailing_delimiter=args.force_trailing_delimiter,
        debug=args.debug,
        sort_output=args.sort_output,
    )


def configure_logging(debug: bool, stream: TextIO) -> None:
    """
    Send the 'setdiff' loggers to ``stream``.

    Replaces the handler installed by an earlier call, so every run logs
    to its own stream whatever the root logger is configured with.
    """
    logger = logging.getLogger("setdiff")
    for handler in list(logger.handlers):
        if getattr(handler, "setdiff_cli", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(name)s: %(levelname)s: %(message)s"))
    handler.setdiff_cli = True
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    # Diagnostics already logs these; the warning itself would repeat it.
    warnings.filterwarnings("ignore", category=EmptyOperandWarning)


def _fail(stderr: TextIO, message: str, code: int) -> int:
    print(f"{PROG}: error: {message}", file=stderr)
    return code


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except ConfigurationError as exc:
        return _fail(stderr, str(exc), EXIT_SYNTAX_ERROR)

    configure_logging(config.debug, stderr)
    log = logging.getLogger(__name__)
    log.debug("configuration: %s", config)

    if args.expression:
        expression = " ".join(args.expression)
    else:
        expression = stdin.readline().strip()
    if not expression:
        return _fail(stderr, "no expression given", EXIT_SYNTAX_ERROR)

    try:
        result = evaluate_expression(
            expression,
            config=config,
            base_dir=args.directory,
            diagnostics=Diagnostics(),
        )
    except ExpressionSyntaxError as exc:
        return _fail(stderr, f"syntax error: {exc}", EXIT_SYNTAX_ERROR)
    except OperandReadError as exc:
        return _fail(stderr, str(exc), EXIT_IO_ERROR)
    except UnknownOperatorError as exc:
        return _fail(stderr, f"internal error: {exc}", EXIT_INTERNAL_ERROR)

    if args.format == "json":
        stdout.write(result_to_json(result, expression, config.sort_output) + "\n")
    elif args.format == "yaml":
        stdout.write(result_to_yaml(result, expression, config.sort_output))
    else:
        count = emit(result, stdout, sort_output=config.sort_output)
        log.debug("%d lines written", count)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
