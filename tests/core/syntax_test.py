import dataclasses
import unittest

from lox.core.syntax import Binary, Block, Expression, If, Literal, Print, Var, Variable
from lox.core.tokens import Token, TokenType


PLUS = Token(TokenType.PLUS, "+", None, 1)
A = Token(TokenType.IDENTIFIER, "a", None, 1)


class NodeTestCase(unittest.TestCase):

    def test_nodes(self):
        cases = [
            (Literal(1.0), []),
            (Binary(Literal(1.0), PLUS, Variable(A)), [Literal(1.0), Variable(A)]),
            (Var(A), []),
            (Var(A, Literal(1.0)), [Literal(1.0)]),
            (If(Literal(True), Print(Literal(1.0))), [Literal(True), Print(Literal(1.0))]),
            (Block((Print(Literal(1.0)), Var(A))), [Print(Literal(1.0)), Var(A)]),
        ]
        for case, expected in cases:
            self.assertEqual(expected, case.nodes, case)

    def test_immutable(self):
        node = Binary(Literal(1.0), PLUS, Literal(2.0))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            node.left = Literal(3.0)

    def test_structural_equality(self):
        self.assertEqual(Block((Var(A, Literal(1.0)),)), Block((Var(A, Literal(1.0)),)))
        self.assertNotEqual(Var(A, Literal(1.0)), Var(A, Literal(2.0)))

    def test_literal_equality_checks_type(self):
        should_fail = [(True, 1.0), (False, 0.0), (None, False), ("1", 1.0)]
        for left, right in should_fail:
            self.assertNotEqual(Literal(left), Literal(right), (left, right))
            self.assertNotEqual(Print(Literal(left)), Print(Literal(right)), (left, right))

        self.assertEqual(Literal(1.0), Literal(1.0))
        self.assertEqual(hash(Literal("a")), hash(Literal("a")))
        self.assertEqual(1, len({Literal(True), Literal(True)}))

    def test_display(self):
        cases = {
            Literal(None): "Literal(value=None)",
            Variable(A): "Variable(name='a')",
            Expression(Binary(Literal(1.0), PLUS, Literal(2.0))): (
                "Expression(nodes=[\n"
                "    Binary(operator='+', nodes=[\n"
                "        Literal(value=1.0),\n"
                "        Literal(value=2.0)\n"
                "    ])\n"
                "])"
            ),
            Var(A, Literal("x")): (
                "Var(name='a', nodes=[\n"
                "    Literal(value='x')\n"
                "])"
            ),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, case.display(), case)


if __name__ == '__main__':
    unittest.main()
