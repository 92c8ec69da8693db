"""
Gibbon CLI Entrypoint.

This module provides the command-line interface for the Gibbon front end.
It tokenizes and parses source text and prints the result, or starts the
interactive REPL.

Features:
    - Read source from `.gibbon` files or inline strings.
    - Print the token stream, the AST as JSON, or the canonical rendering.
    - Report parse errors on stderr, one per line, and exit with status 1.
    - Launch an interactive REPL with optional verbosity.

Example usage:
    gibbon program.gibbon
    gibbon -s "let x = 1 + 2 * 3;"
    gibbon -s "fn(x) { x }" --ast
    gibbon --repl --verbose

Functions:
    run_gibbon(source: str, is_string: bool = False, tokens: bool = False,
               ast: bool = False) -> int:
        Executes the pipeline (lex → parse → output) and returns an exit status.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or pipeline).
"""

import argparse
import json
import sys

from gibbon.gibbon_lexer import CharacterStream, Lexer
from gibbon.gibbon_parser import Parser


def run_gibbon(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    ast: bool = False,
) -> int:
    """
    Run the Gibbon front end over a file or a literal string.

    Args:
        source (str): The Gibbon source code or path to a `.gibbon` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): If True, prints the token stream before parsing.
        ast (bool): If True, prints the parsed Program as JSON instead of its rendering.

    Returns:
        int: 0 on success, 1 if the parser reported errors.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.gibbon'.
    """
    if not is_string and not source.endswith(".gibbon"):
        raise ValueError("Only .gibbon files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing (dump only, the parser drives its own lexer)
    if tokens:
        for tok in Lexer(CharacterStream(source)):
            print(repr(tok))

    # 3. Parsing
    parser = Parser(Lexer(CharacterStream(source)))
    program = parser.parse_program()

    if parser.errors:
        print("parser errors:", file=sys.stderr)
        for msg in parser.errors:
            print(f"\t{msg}", file=sys.stderr)
        return 1

    # 4. Output result
    if ast:
        print(json.dumps(program.to_dict(), indent=2))
    else:
        print(program)
    return 0


def main() -> None:
    """
    Entry point for the Gibbon CLI.

    Launches the REPL if no arguments are passed or `--repl` is specified,
    otherwise runs the pipeline and exits with its status.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print the token stream.
        - `--ast`: Print the AST as JSON.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Echo tokens for every REPL line.
    """
    if len(sys.argv) == 1:
        from gibbon.gibbon_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="gibbon")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("--tokens", action="store_true", help="Print the token stream")
    parser.add_argument("--ast", action="store_true", help="Print the AST as JSON")
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from gibbon.gibbon_repl import start_repl

        start_repl(verbose=args.verbose)
    else:
        try:
            status = run_gibbon(
                source=args.source,
                is_string=args.string,
                tokens=args.tokens,
                ast=args.ast,
            )
        except (ValueError, OSError) as e:
            print(f"[error] >>> {e}", file=sys.stderr)
            status = 2
        sys.exit(status)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
