"""Chained lexical scopes. The evaluator creates one global Environment per session and one child Environment per
Block execution; a child only references its enclosing scope for as long as the block runs.
"""

from lox.lang.error import LoxRuntimeError


class Environment:
    """Mapping of variable name to value, plus an optional enclosing Environment."""

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this scope. Shadows any binding of name in an enclosing scope and overwrites one in this
        scope.
        """
        self.values[name] = value

    def get(self, name):
        """Returns the value bound to the name token in the nearest scope defining it."""
        return self._resolve(name).values[name.lexeme]

    def assign(self, name, value):
        """Rebinds the name token in the nearest scope defining it. Never creates a new binding."""
        self._resolve(name).values[name.lexeme] = value

    def _resolve(self, name):
        """Walks outward from this scope to the first one defining name.lexeme."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment
            environment = environment.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def __contains__(self, name):
        return name in self.values

    def __repr__(self):
        return f"Environment(values={self.values!r}, enclosing={self.enclosing!r})"
