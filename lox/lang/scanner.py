"""Lexical analysis for lox: turns source text into the token list consumed by core.parser.

```
<number>     ::= <digit>+ ( "." <digit>+ )?       ; always a float, "1." is NUMBER DOT
<string>     ::= '"' <char>* '"'                  ; may span lines, no escapes
<identifier> ::= ( <alpha> | "_" ) ( <alpha> | <digit> | "_" )*
<comment>    ::= "//" <char>*                     ; up to the end of the line
```
"""

from lox.core.tokens import KEYWORDS, Token, TokenType
from lox.lang.error import LoxSyntaxError


SINGLE = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# char: (kind if followed by "=", kind otherwise)
DOUBLE = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_digit(char):
    return "0" <= char <= "9"


class Scanner:
    """Single-use scanner over source. Errors are recorded (and reported, if there is an error handler) and scanning
    carries on past them.
    """

    def __init__(self, source, error_handler=None):
        self.source = source
        self.error_handler = error_handler
        self.tokens = []
        self.errors = []

        self._start = 0
        self._current = 0
        self._line = 1
        self._line_start = 0  # index of the first character of the current line

    def scan_tokens(self):
        """Returns every token in source, terminated by one EOF token."""
        while not self._is_at_end():
            self._start = self._current
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self._line, self._current - self._line_start))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in SINGLE:
            self._add_token(SINGLE[char])

        elif char in DOUBLE:
            if_equal, otherwise = DOUBLE[char]
            self._add_token(if_equal if self._match("=") else otherwise)

        elif char == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)

        elif char in " \r\t":
            pass
        elif char == "\n":
            self._line += 1
            self._line_start = self._current

        elif char == "\"":
            self._string()
        elif is_digit(char):
            self._number()
        elif is_alpha(char):
            self._identifier()

        else:
            self._error("Unexpected character.")

    def _string(self):
        while self._peek() != "\"" and not self._is_at_end():
            if self._peek() == "\n":
                self._line += 1
                self._line_start = self._current + 1
            self._advance()

        if self._is_at_end():
            self._error("Unterminated string.")
            return

        self._advance()  # closing "
        self._add_token(TokenType.STRING, self.source[self._start + 1:self._current - 1])

    def _number(self):
        while is_digit(self._peek()):
            self._advance()

        if self._peek() == "." and is_digit(self._peek_next()):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self._start:self._current]))

    def _identifier(self):
        while is_alpha(self._peek()) or is_digit(self._peek()):
            self._advance()

        text = self.source[self._start:self._current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _match(self, expected):
        if self._is_at_end() or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _peek(self):
        return "\0" if self._is_at_end() else self.source[self._current]

    def _peek_next(self):
        return "\0" if self._current + 1 >= len(self.source) else self.source[self._current + 1]

    def _advance(self):
        self._current += 1
        return self.source[self._current - 1]

    def _is_at_end(self):
        return self._current >= len(self.source)

    def _add_token(self, kind, literal=None):
        column = self._start - self._line_start
        if column < 0:
            column = None  # multi-line string, started on an earlier line
        self.tokens.append(Token(kind, self.source[self._start:self._current], literal, self._line, column))

    def _error(self, msg):
        error = LoxSyntaxError(msg, line=self._line)
        self.errors.append(error)
        if self.error_handler is not None:
            self.error_handler.report(error)
