import logging

from prsly.prsly_cli import configure_logging, format_value
from prsly.prsly_combinators import Parser, parse
from prsly.prsly_grammars import get_grammar
from prsly.prsly_stream import NO_MATCH

logger = logging.getLogger(__name__)


def evaluate_line(parser: Parser, line: str) -> str:
    """Parses one line and returns what the REPL should print for it."""
    try:
        rest, value = parse(parser, line)
    except RecursionError:
        return "[too deeply nested]"
    if rest is NO_MATCH:
        return "[no match]"
    left = rest.remaining()
    if left:
        rest_text = "".join(map(str, left))
        return f"[incomplete] >>> {format_value(value)} (left: {rest_text!r})"
    return format_value(value)


def start_repl(grammar: str = "message", verbose: bool = False) -> None:
    parser = get_grammar(grammar)
    print(f"prsly REPL [grammar={grammar}]. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            line = input(">>> ")
            if line.strip() in ("exit", "quit"):
                print("Exiting prsly REPL.")
                return
            if not line.strip():
                continue
            if line.strip() == "verbose-mode":
                verbose = not verbose
                logging.getLogger("prsly").setLevel(
                    logging.DEBUG if verbose else logging.NOTSET
                )
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            if verbose:
                logger.debug("Input tokens: %r", list(line))
            print(evaluate_line(parser, line))
        except (KeyboardInterrupt, EOFError):
            print("\nExiting prsly REPL.")
            break


def main(verbose: bool = False) -> None:
    configure_logging(verbose)
    start_repl(verbose=verbose)


if __name__ == "__main__":
    main()
