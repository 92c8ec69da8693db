"""
Gibbon REPL.

Interactive read-parse-print loop for the Gibbon front end.

Each line read at the ``>> `` prompt is parsed by a fresh Lexer/Parser pair,
so no state carries over between lines. A clean parse prints the canonical
rendering of the Program (nothing for a line with no statements). A failed
parse prints a ``parser errors:`` header line followed by one tab-indented
message per error, and no program.

Commands:
    - ``verbose-mode``: toggle a ``[token] >>>`` dump of each line's tokens.
    - ``exit`` / ``quit``: leave the loop. End of input and Ctrl-C also exit.

Unexpected exceptions (e.g. ``RecursionError`` on very deep input) are
reported under ``[error] >>>`` with a traceback and the loop keeps running.
"""

import io
import traceback

from gibbon.gibbon_lexer import CharacterStream, Lexer
from gibbon.gibbon_parser import Parser

PROMPT = ">> "


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def print_parser_errors(errors: list[str]) -> None:
    print("parser errors:")
    for msg in errors:
        print(f"\t{msg}")


def print_tokens(src: str) -> None:
    for tok in Lexer(CharacterStream(src)):
        print(f"[token] >>> {tok!r}")


def eval_line(src: str, verbose: bool = False) -> None:
    """Parse one line with a fresh lexer/parser pair and print the outcome."""
    if verbose:
        print_tokens(src)

    parser = Parser(Lexer(CharacterStream(src)))
    program = parser.parse_program()

    if parser.errors:
        print_parser_errors(parser.errors)
        return
    if program.statements:
        print(program)


def start_repl(verbose: bool = False) -> None:
    print("This is Gibbon!")
    print("Begin typing commands. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            line = input(PROMPT)
            src = line.strip()
            if not src:
                continue
            if src in ("exit", "quit"):
                print("Exiting Gibbon REPL.")
                return
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue

            try:
                eval_line(src, verbose=verbose)
            except Exception:
                # includes RecursionError from pathologically deep nesting
                print_traceback()

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Gibbon REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
