"""
Croak File Runner
=================
Execute .croak source files from the command line.

Usage:
    python run.py <filename.croak>
    python run.py <filename.croak> --check-only
    python run.py <filename.croak> --no-check --env -vv
"""
import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from termcolor import colored

from croak.session import Session


def setup_logging(verbosity: int) -> None:
    """Route library logging to stderr; -v shows INFO, -vv shows DEBUG."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(format="{levelname}:{name}: {message}", style="{", level=level)


def format_error(error) -> str:
    """Render a language error for the terminal."""
    return colored(f"⚠ {error.kind}: ", "red", attrs=["bold"]) + str(error)


def run_file(filepath: str, check: bool = True, execute: bool = True, show_env: bool = False) -> int:
    """
    Execute a .croak source file.

    Args:
        filepath: Path to the .croak file
        check: If False, skip the static type checker
        execute: If False, stop after type checking
        show_env: Print the final global environment

    Returns:
        0 on success, 1 on error
    """
    if not os.path.exists(filepath):
        print(f"Error: File not found: {filepath}", file=sys.stderr)
        return 1

    with open(filepath, "r", encoding="utf-8") as f:
        source = f.read()

    session = Session(output_fn=print, check=check)
    result = session.run(source, execute=execute)

    if result.error is not None:
        print(format_error(result.error), file=sys.stderr)
        return 1

    if not execute:
        print(colored("✔ type check passed", "green"))

    if show_env:
        for name, value in result.environment.items():
            print(f"{name} = {value}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Croak language interpreter")
    parser.add_argument("program", help="Croak program file (.croak) to execute")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="increase logging verbosity (can be repeated)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--no-check", action="store_true",
                      help="skip the static type checker")
    mode.add_argument("--check-only", action="store_true",
                      help="lex, parse and type check without executing")
    parser.add_argument("--env", action="store_true",
                        help="print the final global environment")
    return parser


def main(argv: list[str] | None = None):
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.verbose)
    exit_code = run_file(
        args.program,
        check=not args.no_check,
        execute=not args.check_only,
        show_env=args.env,
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
