"""
prsly CLI Entrypoint.

Runs one of the sample grammars against a file or an inline string and reports
whether the input matched, printing the parsed value.

Features:
    - Read input from a file or, with `-s`, from the command line.
    - Require a full match (default) or accept a prefix with `--partial`.
    - Print the value as a Python repr or, with `--json`, as JSON.
    - Launch an interactive REPL with `--repl`.

Example usage:
    prsly datetime -s "August 17, 2014 12:12:12"
    prsly message template.txt --json
    prsly parens --repl

Exit status:
    0 when the input matched, 1 when it did not (or was nested too deeply to
    parse), 2 on usage errors.

Configuration:
    PRSLY_LOG_LEVEL: Logging level used when `--verbose` is not given
        (default: WARNING).
"""

import argparse
import json
import logging
import os
import sys
from typing import Any

from prsly.prsly_combinators import ParseError, parse, parse_all
from prsly.prsly_grammars import GRAMMARS, describe, get_grammar
from prsly.prsly_stream import NO_MATCH, NO_VALUE

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Sets up root logging from `--verbose` or the PRSLY_LOG_LEVEL variable.

    An unknown PRSLY_LOG_LEVEL falls back to WARNING and is reported once logging
    is set up.
    """
    unknown = None
    if verbose:
        level: int | str = logging.DEBUG
    else:
        level = os.environ.get("PRSLY_LOG_LEVEL", "WARNING").upper()
        if not isinstance(logging.getLevelName(level), int):
            unknown, level = level, "WARNING"
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s", force=True
    )
    if unknown is not None:
        logger.warning("Unknown PRSLY_LOG_LEVEL %r, using WARNING", unknown)


def format_value(value: Any, as_json: bool = False) -> str:
    """Renders a parsed value for display."""
    if value is NO_VALUE:
        return "null" if as_json else "(no value)"
    if as_json:
        return json.dumps(describe(value), default=repr, ensure_ascii=False)
    if isinstance(value, str):
        return value
    return repr(value)


def run_prsly(
    grammar: str,
    source: str,
    is_string: bool = False,
    partial: bool = False,
    as_json: bool = False,
) -> int:
    """
    Parse `source` with the named grammar and print the result.

    Args:
        grammar (str): Name of a registered grammar (see `prsly_grammars.GRAMMARS`).
        source (str): Path of the input file, or the input itself with `is_string`.
        is_string (bool): Treat `source` as the input text. Defaults to False.
        partial (bool): Accept a match that leaves input unconsumed. Defaults to False.
        as_json (bool): Print the value as JSON. Defaults to False.

    Returns:
        int: 0 if the input matched, 1 otherwise (including input nested deeper
            than the interpreter's recursion limit).

    Raises:
        KeyError: If the grammar is unknown.
        OSError: If the input file cannot be read.
    """
    parser = get_grammar(grammar)
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()
    logger.debug("Parsing %d character(s) with grammar %r", len(source), grammar)

    try:
        if partial:
            rest, value = parse(parser, source)
        else:
            value = parse_all(parser, source)
    except ParseError as e:
        print(f"{e.reason}: {e}", file=sys.stderr)
        return 1
    except RecursionError:
        print("input nested too deeply", file=sys.stderr)
        return 1

    if partial:
        if rest is NO_MATCH:
            print("no match", file=sys.stderr)
            return 1
        left = rest.remaining()
        if left:
            print(f"matched a prefix, {len(left)} character(s) left", file=sys.stderr)
    print(format_value(value, as_json))
    return 0


def main() -> None:
    """
    Entry point for the prsly CLI.

    Parses command-line arguments, configures logging and either starts the REPL
    or runs the grammar once, exiting with the status `run_prsly` returns.
    """
    parser = argparse.ArgumentParser(
        prog="prsly", description="Run a sample prsly grammar against some input."
    )
    parser.add_argument("grammar", choices=sorted(GRAMMARS), help="Grammar to use")
    parser.add_argument("source", nargs="?", help="Input file, or raw input (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal input"
    )
    parser.add_argument(
        "--partial", action="store_true", help="Accept a match of a prefix of the input"
    )
    parser.add_argument("--json", action="store_true", help="Print the value as JSON")
    parser.add_argument(
        "--repl", action="store_true", help="Launch an interactive REPL"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    configure_logging(args.verbose)

    if args.repl:
        from prsly.prsly_repl import start_repl

        start_repl(grammar=args.grammar, verbose=args.verbose)
        return
    if args.source is None:
        parser.error("source is required unless --repl is given")

    sys.exit(
        run_prsly(
            grammar=args.grammar,
            source=args.source,
            is_string=args.string,
            partial=args.partial,
            as_json=args.json,
        )
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
