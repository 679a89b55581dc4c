"""
Croak REPL
==========
Interactive Read-Eval-Print Loop for Croak.
Each line is lexed, parsed, type checked and executed against a
session that remembers earlier variables and functions.
"""
import argparse
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from termcolor import colored

from croak.session import Session


BANNER = """
  Croak interactive interpreter
  Type 'help' for a language reference, 'exit' or Ctrl+D to quit
"""

HELP_TEXT = """
  let x = 1;              declare (type inferred)
  let y: bool = true;     declare with an explicit type (number | bool)
  x = x + 1;              assign
  croak x * 2;            print
  while x < 10 { ... }    loop
  if x == 3 { ... } else { ... }
  func add(a: number, b: number): number { return a + b; }
  add(1, 2);              call as a statement

Operators:  + - * /   > <   ==
Commands:   help, env, clear, exit
"""


def run_repl(check: bool = True):
    """Run the interactive Croak REPL."""
    print(BANNER)

    session = Session(output_fn=lambda s: print(f"  {s}"), check=check)

    while True:
        try:
            line = input("croak> ")
        except (EOFError, KeyboardInterrupt):
            print("\n  Goodbye.")
            break

        line = line.strip()
        if not line:
            continue

        # Special commands
        command = line.lower()
        if command in ("exit", "quit"):
            print("  Goodbye.")
            break

        if command == "help":
            print(HELP_TEXT)
            continue

        if command == "env":
            if session.environment:
                print("  ─── Bindings ───")
                for name, value in session.environment.items():
                    print(f"    {name} = {value}")
            else:
                print("  (no bindings)")
            continue

        if command == "clear":
            session.reset()
            print("  State cleared.")
            continue

        result = session.run(line)
        if result.error is not None:
            print(colored(f"  ⚠ {result.error.kind}: ", "red", attrs=["bold"]) + str(result.error))


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Croak interactive interpreter")
    parser.add_argument("--no-check", action="store_true", help="skip the static type checker")
    args = parser.parse_args(argv)
    run_repl(check=not args.no_check)


if __name__ == "__main__":
    main()
