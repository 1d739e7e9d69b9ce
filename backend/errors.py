"""
Error model shared by every stage of the pipeline.

Lexing is exhaustive (LexError carries every invalid token), parsing is
fail-fast (ParseError carries one message) and code generation collects a
batch of CompilationError values (SemanticError carries all of them).
"""


class Location:
    def __init__(self, line, column):
        self.line = line
        self.column = column

    def __eq__(self, other):
        return isinstance(other, Location) and (self.line, self.column) == (other.line, other.column)

    def __repr__(self):
        return f"Location({self.line}, {self.column})"


def _at(location):
    if location is None:
        return ""
    return f" at line {location.line}, column {location.column}"


class LexError(Exception):
    def __init__(self, invalid_tokens):
        self.invalid_tokens = list(invalid_tokens)
        chars = ", ".join(repr(t.value) for t in self.invalid_tokens)
        super().__init__(f"invalid tokens: {chars}")


class ParseError(Exception):
    # location is never filled in by the parser yet
    def __init__(self, message, location=None):
        self.message = message
        self.location = location
        super().__init__(message + _at(location))


# =====================================================
# SEMANTIC ERRORS
# =====================================================
class CompilationError(Exception):
    def __init__(self, location=None):
        self.location = location
        super().__init__(str(self))

    def _fields(self):
        return ()

    def __eq__(self, other):
        return type(self) is type(other) and self._fields() == other._fields() \
            and self.location == other.location

    def __hash__(self):
        return hash((type(self).__name__,) + self._fields())

    def __repr__(self):
        args = ", ".join(repr(f) for f in self._fields())
        return f"{type(self).__name__}({args})"


class UndeclaredVariable(CompilationError):
    def __init__(self, name, location=None):
        self.name = name
        super().__init__(location)

    def _fields(self):
        return (self.name,)

    def __str__(self):
        return f"Undeclared variable '{self.name}'" + _at(self.location)


class DuplicateDeclaration(CompilationError):
    def __init__(self, name, location=None):
        self.name = name
        super().__init__(location)

    def _fields(self):
        return (self.name,)

    def __str__(self):
        return f"Duplicate declaration of variable '{self.name}'" + _at(self.location)


class TypeMismatch(CompilationError):
    def __init__(self, expected, found, location=None):
        self.expected = expected
        self.found = found
        super().__init__(location)

    def _fields(self):
        return (self.expected, self.found)

    def __str__(self):
        return f"Type mismatch: expected {self.expected}, found {self.found}" + _at(self.location)


class GenericSemanticError(CompilationError):
    def __init__(self, message, location=None):
        self.message = message
        super().__init__(location)

    def _fields(self):
        return (self.message,)

    def __str__(self):
        return f"Semantic error: {self.message}" + _at(self.location)


class SemanticError(Exception):
    """Every CompilationError found during one generation pass."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))


class ExecutionError(Exception):
    pass
