"""Recursive-descent parser for lox. Turns a token list (terminated by one EOF token) into a list of statements.

Grammar, one production per precedence level, lowest to highest binding:

```
<program>     ::= <declaration>* EOF
<declaration> ::= "var" IDENTIFIER ( "=" <expression> )? ";"
                | <statement>
<statement>   ::= <expression> ";"
                | "print" <expression> ";"
                | "if" "(" <expression> ")" <statement> ( "else" <statement> )?
                | "while" "(" <expression> ")" <statement>
                | "for" "(" ( <var_decl> | <expr_stmt> | ";" ) <expression>? ";" <expression>? ")" <statement>
                | "{" <declaration>* "}"

<expression>  ::= <assignment>
<assignment>  ::= IDENTIFIER "=" <assignment> | <logic_or>     ; right-associative
<logic_or>    ::= <logic_and> ( "or" <logic_and> )*
<logic_and>   ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <primary>
<primary>     ::= NUMBER | STRING | "true" | "false" | "nil" | IDENTIFIER | "(" <expression> ")"
```

Syntax errors never escape parse: each one is recorded, reported once, and the parser skips ahead to the next statement
boundary (panic-mode recovery) before carrying on.
"""

from lox.core.syntax import (Assign, Binary, Block, Expression, Grouping, If, Literal, Logical, Print, Unary, Var,
                             Variable, While)
from lox.core.tokens import TokenType
from lox.lang.error import LoxSyntaxError


# tokens that can start a new declaration/statement, i.e. safe places to resume after an error
BOUNDARIES = {
    TokenType.CLASS, TokenType.FOR, TokenType.FUN, TokenType.IF,
    TokenType.PRINT, TokenType.RETURN, TokenType.VAR, TokenType.WHILE,
}


class Parser:
    """Single-use parser over a fixed token list. Owns one forward cursor."""

    def __init__(self, tokens, error_handler=None):
        self.tokens = tokens
        self.error_handler = error_handler
        self.errors = []  # every LoxSyntaxError encountered, in order
        self._current = 0

    def parse(self):
        """Returns the list of statements that parsed successfully. Check self.errors to see if any didn't."""
        statements = []
        while not self._is_at_end():
            statement = self._declaration()
            if statement is not None:
                statements.append(statement)
        return statements

    # ==================== STATEMENTS ====================

    def _declaration(self):
        """Parses a single declaration, or returns None after recovering from a syntax error."""
        start = self._current
        try:
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except LoxSyntaxError:
            self._synchronize(start)
            return None

    def _var_declaration(self):
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def _statement(self):
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.LEFT_BRACE):
            return Block(tuple(self._block()))
        return self._expression_statement()

    def _for_statement(self):
        """Desugars a for loop into an equivalent while loop:

        for (init; cond; incr) body  -->  { init; while (cond) { body; incr; } }

        A missing condition becomes `true`; the outer block is only added when there is an initializer.
        """
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()

        if increment is not None:
            body = Block((body, Expression(increment)))
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)

        if initializer is not None:
            body = Block((initializer, body))
        return body

    def _if_statement(self):
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = None
        if self._match(TokenType.ELSE):  # dangling else binds to the nearest if
            else_branch = self._statement()

        return If(condition, then_branch, else_branch)

    def _print_statement(self):
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def _while_statement(self):
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return While(condition, self._statement())

    def _block(self):
        """Parses the declarations of a block whose "{" has already been consumed."""
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            statement = self._declaration()
            if statement is not None:
                statements.append(statement)

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self):
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # ==================== EXPRESSIONS ====================

    def _expression(self):
        return self._assignment()

    def _assignment(self):
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)

            # reported, but not raised: the surrounding statement is still well-formed
            self._error(equals, "Invalid assignment target.")

        return expr

    def _or(self):
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            expr = Logical(expr, operator, self._and())
        return expr

    def _and(self):
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            expr = Logical(expr, operator, self._equality())
        return expr

    def _binary(self, operand, *kinds):
        """Parses a left-associative chain of operand separated by operators of the given kinds."""
        expr = operand()
        while self._match(*kinds):
            operator = self._previous()
            expr = Binary(expr, operator, operand())
        return expr

    def _equality(self):
        return self._binary(self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self):
        kinds = (TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL)
        return self._binary(self._term, *kinds)

    def _term(self):
        return self._binary(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self):
        return self._binary(self._unary, TokenType.SLASH, TokenType.STAR)

    def _unary(self):
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return Unary(operator, self._unary())
        return self._primary()

    def _primary(self):
        if self._match(TokenType.FALSE):
            return Literal(False)
        if self._match(TokenType.TRUE):
            return Literal(True)
        if self._match(TokenType.NIL):
            return Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self._previous().literal)

        if self._match(TokenType.IDENTIFIER):
            return Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self._error(self._peek(), "Expect expression.")

    # ==================== CURSOR ====================

    def _match(self, *kinds):
        """Consumes the current token if it is of any of the given kinds."""
        for kind in kinds:
            if self._check(kind):
                self._advance()
                return True
        return False

    def _consume(self, kind, msg):
        if self._check(kind):
            return self._advance()
        raise self._error(self._peek(), msg)

    def _check(self, kind):
        if self._is_at_end():
            return False
        return self._peek().kind is kind

    def _advance(self):
        if not self._is_at_end():
            self._current += 1
        return self._previous()

    def _is_at_end(self):
        return self._peek().kind is TokenType.EOF

    def _peek(self):
        return self.tokens[self._current]

    def _previous(self):
        return self.tokens[self._current - 1]

    # ==================== ERRORS ====================

    def _error(self, token, msg):
        """Records and reports a syntax error at token. Returns it so that callers can decide whether to raise it."""
        error = LoxSyntaxError(msg, token)
        self.errors.append(error)
        if self.error_handler is not None:
            self.error_handler.report(error)
        return error

    def _synchronize(self, start):
        """Discards tokens until a statement boundary: just past a ";", or right before a token that starts a new
        statement. start is the position the failed declaration began at. The offending token is skipped unless it
        already starts a new statement after some progress, so it is never reported twice.
        """
        if self._current == start or self._peek().kind not in BOUNDARIES:
            self._advance()

        while not self._is_at_end():
            if self._previous().kind is TokenType.SEMICOLON:
                return
            if self._peek().kind in BOUNDARIES:
                return
            self._advance()
