"""Syntax trees produced by core.parser and walked by core.evaluator.

Expressions produce values, statements produce effects:

```
<expr> ::= Literal(value)                   ; number, string, true, false or nil
         | Grouping(expression)             ; "(" <expr> ")"
         | Unary(operator, right)           ; "!" or "-"
         | Binary(left, operator, right)    ; arithmetic, comparison, equality
         | Logical(left, operator, right)   ; "and" / "or", short-circuiting
         | Variable(name)
         | Assign(name, value)

<stmt> ::= Expression(expression)           ; evaluated, result discarded
         | Print(expression)
         | Var(name, initializer?)
         | Block(statements)
         | If(condition, then_branch, else_branch?)
         | While(condition, body)
```

Every node is a frozen dataclass, so trees are immutable once built and compare structurally. There is no `For` node:
for loops are rewritten into `While` by the parser.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from lox.core.tokens import Token


class Node:
    """Superclass of every syntax tree node."""

    @property
    def nodes(self):
        """Child nodes, in source order."""
        return []

    def label(self):
        """Short description of this node's non-node fields, used by display."""
        return ""

    def display(self, indents=0):
        """Recursively displays the tree rooted at this node in a readable format.

        Format:
        <Node>(<label>, nodes=[
            <Node>(<label>, nodes=[
                ...
                <Node>(<label>)  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}({self.label()}"
        if self.nodes:
            result += ", nodes=[" if self.label() else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


class Expr(Node):
    """Superclass of value-producing nodes."""


class Stmt(Node):
    """Superclass of effect-producing nodes."""


# ==================== EXPRESSIONS ====================

@dataclass(frozen=True, eq=False)
class Literal(Expr):
    """Compares by value type as well as value, since true == 1 and false == 0 in Python."""
    value: object

    def __eq__(self, other):
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self):
        return hash((type(self.value), self.value))

    def label(self):
        return f"value={self.value!r}"


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr

    @property
    def nodes(self):
        return [self.expression]


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr

    @property
    def nodes(self):
        return [self.right]

    def label(self):
        return f"operator='{self.operator.lexeme}'"


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

    @property
    def nodes(self):
        return [self.left, self.right]

    def label(self):
        return f"operator='{self.operator.lexeme}'"


@dataclass(frozen=True)
class Logical(Expr):
    """Like Binary, but only ever with an "and"/"or" operator, whose right operand may never be evaluated."""
    left: Expr
    operator: Token
    right: Expr

    @property
    def nodes(self):
        return [self.left, self.right]

    def label(self):
        return f"operator='{self.operator.lexeme}'"


@dataclass(frozen=True)
class Variable(Expr):
    name: Token

    def label(self):
        return f"name='{self.name.lexeme}'"


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr

    @property
    def nodes(self):
        return [self.value]

    def label(self):
        return f"name='{self.name.lexeme}'"


# ==================== STATEMENTS ====================

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr

    @property
    def nodes(self):
        return [self.expression]


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr

    @property
    def nodes(self):
        return [self.expression]


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None

    @property
    def nodes(self):
        return [self.initializer] if self.initializer is not None else []

    def label(self):
        return f"name='{self.name.lexeme}'"


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]

    @property
    def nodes(self):
        return list(self.statements)


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None

    @property
    def nodes(self):
        nodes = [self.condition, self.then_branch]
        if self.else_branch is not None:
            nodes.append(self.else_branch)
        return nodes


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt

    @property
    def nodes(self):
        return [self.condition, self.body]
