"""Session control for the lox language: runs source text through the scanner, parser and evaluator, either a whole
file at a time or one interactive input at a time.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from lox.core.evaluator import Interpreter
from lox.core.parser import Parser
from lox.core.tokens import TokenType
from lox.lang.error import LoxError, LoxRuntimeError, LoxSyntaxError
from lox.lang.scanner import Scanner


@dataclass
class RunResult:
    """Outcome of running one piece of source. statements is empty if nothing parsed."""
    statements: list = field(default_factory=list)
    syntax_errors: List[LoxSyntaxError] = field(default_factory=list)
    runtime_error: Optional[LoxRuntimeError] = None

    @property
    def ok(self):
        return not self.syntax_errors and self.runtime_error is None


class Session:
    """Governs a lox session. Globals defined by one run stay visible to the next, as in an interactive prompt."""
    # exit codes, from sysexits.h
    EX_OK = 0
    EX_USAGE = 64
    EX_DATAERR = 65
    EX_NOINPUT = 66
    EX_SOFTWARE = 70

    def __init__(self, error_handler, out=None, show_ast=False):
        self.error_handler = error_handler
        self.out = out            # print sink, stdout if None
        self.show_ast = show_ast  # whether to display syntax trees before running them

        self.interpreter = Interpreter(error_handler, out)

    @staticmethod
    def is_incomplete(source):
        """Whether source has an unclosed block, meaning more input lines are needed before it can be run. Braces in
        strings and comments don't count. Scanner errors are left for run to report.
        """
        kinds = [token.kind for token in Scanner(source).scan_tokens()]
        return kinds.count(TokenType.LEFT_BRACE) > kinds.count(TokenType.RIGHT_BRACE)

    def run(self, source):
        """Scans, parses and runs source. Nothing is executed if there was any syntax error."""
        self.error_handler.register_source(source)

        scanner = Scanner(source, self.error_handler)
        parser = Parser(scanner.scan_tokens(), self.error_handler)
        statements = parser.parse()

        result = RunResult(statements, scanner.errors + parser.errors)
        if result.syntax_errors:
            return result

        if self.show_ast:
            for statement in statements:
                print(statement.display(), file=self.out)

        result.runtime_error = self.interpreter.interpret(statements)
        return result

    def run_file(self, path):
        """Runs the file at path and returns the process exit code for it."""
        try:
            with open(path, "r") as file:
                source = file.read()
        except OSError:
            self.error_handler.report(LoxError(f"'{path}' could not be opened"))
            return Session.EX_NOINPUT

        return Session.exit_code(self.run(source))

    @staticmethod
    def exit_code(result):
        if result.syntax_errors:
            return Session.EX_DATAERR
        if result.runtime_error is not None:
            return Session.EX_SOFTWARE
        return Session.EX_OK
