"""Command-line entry point for the lox interpreter: runs a script file, or an interactive prompt if no file is given.
"""

import argparse
import sys

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


class ArgumentParser(argparse.ArgumentParser):
    """argparse, but bad usage exits with EX_USAGE instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(Session.EX_USAGE, f"{self.prog}: error: {message}\n")


def main(argv=None):
    """Runs lox interpreter and returns its exit code. Called from the lox console script."""
    parser = ArgumentParser(prog="lox")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--ast", action="store_true", help="display the syntax tree of each statement before running it")
    parser.add_argument("--no-color", action="store_true", help="do not color error messages")
    args = parser.parse_args(argv)

    error_handler = ErrorHandler(color=not args.no_color)
    sess = Session(error_handler, show_ast=args.ast)

    with error_handler:
        if args.file is None:
            Shell(sess).cmdloop()
            return Session.EX_OK
        return sess.run_file(args.file)

    return Session.EX_SOFTWARE  # only reached if error_handler suppressed an error
