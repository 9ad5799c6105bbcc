import contextlib
import io
import unittest

from lox.core.tokens import Token, TokenType
from lox.lang.error import ErrorHandler, LoxError, LoxRuntimeError, LoxSyntaxError
from lox.lang.scanner import Scanner


class LoxErrorTestCase(unittest.TestCase):

    def test_syntax_error_where(self):
        cases = {
            LoxSyntaxError("Expect expression.", Token(TokenType.SEMICOLON, ";", None, 3)):
                "[line 3] Error at ';': Expect expression.",
            LoxSyntaxError("Expect ';' after value.", Token(TokenType.EOF, "", None, 1)):
                "[line 1] Error at end: Expect ';' after value.",
            LoxSyntaxError("Unexpected character.", line=2):
                "[line 2] Error: Unexpected character.",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(case))

    def test_runtime_error(self):
        error = LoxRuntimeError(Token(TokenType.MINUS, "-", None, 7), "Operand must be a number.")
        self.assertEqual("Operand must be a number.\n[line 7]", str(error))
        self.assertEqual(7, error.line)


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.handler = ErrorHandler(color=False)
        self.stderr = io.StringIO()

    def report(self, error):
        with contextlib.redirect_stderr(self.stderr):
            self.handler.report(error)
        return self.stderr.getvalue()

    def test_report_syntax_error(self):
        output = self.report(LoxSyntaxError("Expect expression.", Token(TokenType.SEMICOLON, ";", None, 1)))

        self.assertIn("[line 1] Error at ';': Expect expression.", output)
        self.assertTrue(self.handler.had_error)
        self.assertFalse(self.handler.had_runtime_error)

        self.handler.reset()
        self.assertFalse(self.handler.had_error)

    def test_report_runtime_error(self):
        output = self.report(LoxRuntimeError(Token(TokenType.SLASH, "/", None, 2), "Cannot divide by zero."))

        self.assertIn("error: Cannot divide by zero.\n[line 2]", output)
        self.assertFalse(self.handler.had_error)
        self.assertTrue(self.handler.had_runtime_error)

        self.handler.reset()
        self.assertTrue(self.handler.had_runtime_error)

    def test_diagnose(self):
        self.handler.register_source("var a = 1;\nprint a + nil;")

        error = LoxRuntimeError(Token(TokenType.PLUS, "+", None, 2), "Operands must be two numbers or two strings.")
        self.assertEqual("  print a + nil;\n          ^", self.handler.diagnose(error))
        self.assertIn("  print a + nil;\n          ^", self.report(error))

        error = LoxSyntaxError("Expect ';' after variable declaration.", Token(TokenType.IDENTIFIER, "abc", None, 1))
        self.assertIsNone(self.handler.diagnose(error))  # lexeme isn't on that line

        self.handler.register_source("print \"a+\" + nil;")
        plus = Scanner("print \"a+\" + nil;").scan_tokens()[2]
        error = LoxRuntimeError(plus, "Operands must be two numbers or two strings.")
        self.assertEqual("  print \"a+\" + nil;\n             ^", self.handler.diagnose(error))

        should_fail = [
            LoxSyntaxError("Unexpected character.", line=1),
            LoxSyntaxError("Expect expression.", Token(TokenType.EOF, "", None, 2)),
            LoxRuntimeError(Token(TokenType.PLUS, "+", None, 9), "Operands must be numbers."),
        ]
        for case in should_fail:
            self.assertIsNone(self.handler.diagnose(case), case)

    def test_context_manager_reports_lox_errors(self):
        with contextlib.redirect_stderr(self.stderr):
            with self.handler:
                raise LoxRuntimeError(Token(TokenType.MINUS, "-", None, 1), "Operand must be a number.")

        self.assertIn("Operand must be a number.", self.stderr.getvalue())
        self.assertTrue(self.handler.had_runtime_error)

    def test_context_manager_recursion(self):
        with contextlib.redirect_stderr(self.stderr):
            with self.handler:
                raise RecursionError("maximum recursion depth exceeded")

        self.assertIn("maximum nesting depth exceeded", self.stderr.getvalue())
        self.assertTrue(self.handler.had_runtime_error)

    def test_context_manager_internal_errors_propagate(self):
        with contextlib.redirect_stderr(self.stderr):
            with self.assertRaises(ValueError):
                with self.handler:
                    raise ValueError("boom")

        self.assertIn("[internal] error: unknown error: 'ValueError: boom'", self.stderr.getvalue())

    def test_context_manager_lets_exit_through(self):
        with self.assertRaises(SystemExit):
            with self.handler:
                raise SystemExit(3)

    def test_generic_error_sets_no_flag(self):
        output = self.report(LoxError("'x.lox' could not be opened"))
        self.assertIn("error: 'x.lox' could not be opened", output)
        self.assertFalse(self.handler.had_error)
        self.assertFalse(self.handler.had_runtime_error)


if __name__ == '__main__':
    unittest.main()
