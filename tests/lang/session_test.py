import contextlib
import io
import os
import tempfile
import unittest

from lox.lang.error import ErrorHandler
from lox.lang.session import RunResult, Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.stderr = io.StringIO()
        self.handler = ErrorHandler(color=False)
        self.sess = Session(self.handler, self.out)

    def run_source(self, source):
        with contextlib.redirect_stderr(self.stderr):
            return self.sess.run(source)

    def test_run(self):
        result = self.run_source("var a = 1;\nprint a + 1;")
        self.assertTrue(result.ok)
        self.assertEqual(2, len(result.statements))
        self.assertEqual("2\n", self.out.getvalue())
        self.assertEqual("", self.stderr.getvalue())

    def test_syntax_errors_prevent_execution(self):
        result = self.run_source("print 1\nprint 2;")

        self.assertEqual(1, len(result.syntax_errors))
        self.assertIsNone(result.runtime_error)
        self.assertEqual(1, len(result.statements))  # the second statement still parsed
        self.assertEqual("", self.out.getvalue())
        self.assertIn("[line 2] Error at 'print': Expect ';' after value.", self.stderr.getvalue())
        self.assertTrue(self.handler.had_error)

    def test_scanner_errors_prevent_execution(self):
        result = self.run_source("print 1; @")
        self.assertEqual(["Unexpected character."], [error.msg for error in result.syntax_errors])
        self.assertEqual("", self.out.getvalue())

    def test_all_syntax_errors_reported(self):
        result = self.run_source("print ;\nvar 1;\nprint 3;")
        self.assertEqual(2, len(result.syntax_errors))
        self.assertEqual(2, self.stderr.getvalue().count("Error"))

    def test_runtime_error(self):
        result = self.run_source("print \"before\";\nprint 1 / 0;\nprint \"after\";")

        self.assertFalse(result.ok)
        self.assertEqual("Cannot divide by zero.", result.runtime_error.msg)
        self.assertEqual("before\n", self.out.getvalue())
        self.assertEqual(1, self.stderr.getvalue().count("Cannot divide by zero."))
        self.assertIn("[line 2]", self.stderr.getvalue())
        self.assertTrue(self.handler.had_runtime_error)

    def test_globals_persist_between_runs(self):
        self.run_source("var count = 1;")
        self.run_source("count = count + 1;")
        self.run_source("print count;")
        self.assertEqual("2\n", self.out.getvalue())

    def test_show_ast(self):
        self.sess.show_ast = True
        self.run_source("print 1;")
        self.assertEqual("Print(nodes=[\n    Literal(value=1.0)\n])\n1\n", self.out.getvalue())

    def test_is_incomplete(self):
        should_pass = ["{", "if (a) {\n print a;", "{ { }"]
        for case in should_pass:
            self.assertTrue(Session.is_incomplete(case), case)

        should_fail = ["print 1;", "{ }", "}", "print \"{\";", "// {", "print \"}\"; {}", "\"{"]
        for case in should_fail:
            self.assertFalse(Session.is_incomplete(case), case)

    def test_exit_code(self):
        cases = {
            "print 1;": Session.EX_OK,
            "print 1": Session.EX_DATAERR,
            "print -nil;": Session.EX_SOFTWARE,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.exit_code(self.run_source(case)), case)
        self.assertEqual(Session.EX_OK, Session.exit_code(RunResult()))


class RunFileTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.out = io.StringIO()
        self.stderr = io.StringIO()
        self.sess = Session(ErrorHandler(color=False), self.out)

    def run_file(self, source):
        path = os.path.join(self.tmp.name, "script.lox")
        with open(path, "w") as file:
            file.write(source)
        with contextlib.redirect_stderr(self.stderr):
            return self.sess.run_file(path)

    def test_ok(self):
        self.assertEqual(Session.EX_OK, self.run_file("for (var i = 0; i < 2; i = i + 1) print i;\n"))
        self.assertEqual("0\n1\n", self.out.getvalue())

    def test_syntax_error(self):
        self.assertEqual(Session.EX_DATAERR, self.run_file("var = 1;"))

    def test_runtime_error(self):
        self.assertEqual(Session.EX_SOFTWARE, self.run_file("print 1; print nope;"))
        self.assertEqual("1\n", self.out.getvalue())

    def test_missing_file(self):
        with contextlib.redirect_stderr(self.stderr):
            code = self.sess.run_file(os.path.join(self.tmp.name, "missing.lox"))
        self.assertEqual(Session.EX_NOINPUT, code)
        self.assertIn("could not be opened", self.stderr.getvalue())


if __name__ == '__main__':
    unittest.main()
