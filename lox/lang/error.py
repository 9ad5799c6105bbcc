"""Error handling for the lox language. Two disjoint kinds of LoxError are raised while running a program:

- LoxSyntaxError: raised by the scanner and the parser. Both recover from it locally and keep going, so one source can
  produce several of them.
- LoxRuntimeError: raised by the evaluator. It is never recovered: it unwinds out of Interpreter.interpret, which stops
  the run and reports it once.

Any other exception that makes it all the way to ErrorHandler is assumed to be an internal issue.
"""

import sys

from termcolor import colored

from lox.core.tokens import TokenType


class LoxError(Exception):
    """Base class for every error a lox program can produce. line is 1-based, 0 if unknown."""

    def __init__(self, msg, line=0, where="", token=None, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.token = token
        self.line = token.line if token is not None else line
        self.where = where
        self.internal = internal


class LoxSyntaxError(LoxError):
    """Syntax error located either at a token (parser) or only at a line (scanner)."""

    def __init__(self, msg, token=None, line=0):
        if token is None:
            where = ""
        elif token.kind is TokenType.EOF:
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"
        super().__init__(msg, line, where, token)

    def __str__(self):
        return f"[line {self.line}] Error{self.where}: {self.msg}"


class LoxRuntimeError(LoxError):
    """Runtime error raised at the operator/name token that triggered it."""

    def __init__(self, token, msg):
        super().__init__(msg, token=token)

    def __str__(self):
        return f"{self.msg}\n[line {self.line}]"


class ErrorHandler:
    """Diagnostic sink for lox errors. Can also be used as a context manager that reports lox errors escaping its body
    and converts stray Python errors into lox errors.

    had_error and had_runtime_error replace global flags: the driver reads them to pick exit codes and resets had_error
    between interactive lines.
    """
    ERROR = "red"

    def __init__(self, color=True):
        self.color = color
        self.had_error = False
        self.had_runtime_error = False
        self.lines = []  # source lines of the current run, used for diagnosis

    def register_source(self, source):
        """Registers source as the text currently being run. Should be called before scanning it."""
        self.lines = source.splitlines()

    def reset(self):
        """Clears the syntax error flag. The runtime flag is left alone: it belongs to the whole session."""
        self.had_error = False

    def _colored(self, text, color=None, attrs=None):
        return colored(text, color, attrs=attrs, no_color=True if not self.color else None)

    def diagnose(self, error):
        """Returns the source line of error with its offending lexeme highlighted and underlined, or None if the lexeme
        can't be located in the registered source. Tokens without a column (built by hand) fall back to the first
        occurrence of the lexeme on the line.
        """
        token = error.token
        if token is None or not token.lexeme or not 0 < error.line <= len(self.lines):
            return None

        line = self.lines[error.line - 1]
        if token.lexeme not in line:
            return None  # multi-line strings span several source lines

        start = token.column
        if start is None or line[start:start + len(token.lexeme)] != token.lexeme:
            start = line.index(token.lexeme)
        end = start + len(token.lexeme)

        diagnosis = "  " + line[:start]
        diagnosis += self._colored(line[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += self._colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def report(self, error):
        """Prints error to stderr and sets the matching flag. error must be a LoxError."""
        if isinstance(error, LoxSyntaxError):
            self.had_error = True
            error_msg = f"[line {error.line}] " + self._colored("Error", ErrorHandler.ERROR, attrs=["bold"])
            error_msg += f"{error.where}: {error.msg}"
        else:
            if isinstance(error, LoxRuntimeError):
                self.had_runtime_error = True
            error_msg = self._colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
            if error.line:
                error_msg += f"\n[line {error.line}]"

        if error.internal:
            error_msg = self._colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"]) + error_msg

        print(error_msg, file=sys.stderr)

        diagnosis = self.diagnose(error)
        if diagnosis:
            print(diagnosis, file=sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False
        elif issubclass(exc_type, KeyboardInterrupt):
            self.report(LoxError("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.report(LoxError("maximum nesting depth exceeded"))
            self.had_runtime_error = True
        elif issubclass(exc_type, LoxError):
            self.report(exc_val)
        else:
            self.report(LoxError(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
