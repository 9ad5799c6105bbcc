"""Tree-walking evaluator for lox. Executes statements from core.parser against a chain of Environments.

Runtime values are plain Python objects from a closed set:

```
<value> ::= float   ; Number
          | str     ; String
          | bool    ; Boolean
          | None    ; nil
```

Note that bool is a subclass of int, never of float, so isinstance(value, float) is enough to tell Numbers apart from
Booleans.
"""

from lox.core.environment import Environment
from lox.core.syntax import (Assign, Binary, Block, Expression, Grouping, If, Literal, Logical, Print, Unary, Var,
                             Variable, While)
from lox.core.tokens import TokenType
from lox.lang.error import LoxError, LoxRuntimeError


def is_truthy(value):
    """nil and false are falsy, everything else (0 and "" included) is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Structural equality that never fails. Values of different types are never equal, so true != 1."""
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    return type(left) is type(right) and left == right


def stringify(value):
    """Text form of a value, as written by print: whole numbers lose their trailing ".0"."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = str(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return value


def _check_number_operand(operator, operand):
    if not isinstance(operand, float):
        raise LoxRuntimeError(operator, "Operand must be a number.")


def _check_number_operands(operator, left, right):
    if not isinstance(left, float) or not isinstance(right, float):
        raise LoxRuntimeError(operator, "Operands must be numbers.")


class Interpreter:
    """Executes lox statements. Globals persist between calls to interpret, so one Interpreter can serve a whole
    interactive session. Output of print statements goes to out (stdout if None).
    """

    def __init__(self, error_handler=None, out=None):
        self.error_handler = error_handler
        self.out = out

        self.globals = Environment()
        self.environment = self.globals

    def interpret(self, statements):
        """Executes statements in order. Stops at the first runtime error, reports it and returns it. Returns None if
        every statement ran.
        """
        try:
            for statement in statements:
                self.execute(statement)
        except LoxRuntimeError as error:
            if self.error_handler is not None:
                self.error_handler.report(error)
            return error
        return None

    # ==================== STATEMENTS ====================

    def execute(self, stmt):
        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, Print):
            print(stringify(self.evaluate(stmt.expression)), file=self.out)

        elif isinstance(stmt, Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, Block):
            self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, If):
            if is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                self.execute(stmt.else_branch)

        elif isinstance(stmt, While):
            while is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.body)

        else:
            raise LoxError(f"cannot execute '{type(stmt).__name__}'", internal=True)

    def execute_block(self, statements, environment):
        """Executes statements with environment as the current scope, restoring the previous scope however the block
        is left.
        """
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                self.execute(statement)
        finally:
            self.environment = previous

    # ==================== EXPRESSIONS ====================

    def evaluate(self, expr):
        if isinstance(expr, Literal):
            return expr.value

        elif isinstance(expr, Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, Variable):
            return self.environment.get(expr.name)

        elif isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value

        elif isinstance(expr, Unary):
            return self._unary(expr)

        elif isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.operator.kind is TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        elif isinstance(expr, Binary):
            return self._binary(expr)

        raise LoxError(f"cannot evaluate '{type(expr).__name__}'", internal=True)

    def _unary(self, expr):
        right = self.evaluate(expr.right)
        kind = expr.operator.kind

        if kind is TokenType.BANG:
            return not is_truthy(right)
        elif kind is TokenType.MINUS:
            _check_number_operand(expr.operator, right)
            return -right

        raise LoxError(f"unknown unary operator '{expr.operator.lexeme}'", internal=True)

    def _binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        kind = operator.kind

        if kind is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        elif kind is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        elif kind is TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            if isinstance(left, (str, float)) and isinstance(right, (str, float)):  # one string, one number
                return stringify(left) + stringify(right)
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        _check_number_operands(operator, left, right)

        if kind is TokenType.GREATER:
            return left > right
        elif kind is TokenType.GREATER_EQUAL:
            return left >= right
        elif kind is TokenType.LESS:
            return left < right
        elif kind is TokenType.LESS_EQUAL:
            return left <= right
        elif kind is TokenType.MINUS:
            return left - right
        elif kind is TokenType.STAR:
            return left * right
        elif kind is TokenType.SLASH:
            if right == 0:
                raise LoxRuntimeError(operator, "Cannot divide by zero.")
            return left / right

        raise LoxError(f"unknown binary operator '{operator.lexeme}'", internal=True)
