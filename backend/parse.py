"""
Recursive-descent parser (one token of lookahead, no backtracking).

The first unexpected token aborts the whole parse with a ParseError; no
partial tree is returned.
"""

import logging

from ast_nodes import (
    Function, Block, Return, If, While, Assign, Declare,
    IntLiteral, Variable, BinaryOp,
)
from errors import ParseError
from lexer import TokenKind, EOF_TOKEN

log = logging.getLogger(__name__)

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

# blocks and parentheses share one nesting budget
MAX_NESTING = 100
# binary operators allowed in the expressions of one statement
MAX_OPERATORS = 256

_SPELLING = {
    TokenKind.LPAREN: "'('",
    TokenKind.RPAREN: "')'",
    TokenKind.LBRACE: "'{'",
    TokenKind.RBRACE: "'}'",
    TokenKind.END: "';'",
    TokenKind.ASSIGN: "'='",
}


class Parser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0
        self.nesting = 0
        self.operators = 0

    def peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return EOF_TOKEN

    def advance(self):
        tok = self.peek()
        self.pos += 1
        return tok

    def expect(self, kind, msg=None):
        tok = self.peek()
        if tok.kind == kind:
            return self.advance()
        raise ParseError(msg or f"Unexpected token: expected {_SPELLING.get(kind, kind.name)}")

    def nest(self):
        self.nesting += 1
        if self.nesting > MAX_NESTING:
            raise ParseError("Nesting too deep")

    def unnest(self):
        self.nesting -= 1

    def binary(self, op, left, right):
        self.operators += 1
        if self.operators > MAX_OPERATORS:
            raise ParseError("Expression too long")
        return BinaryOp(op, left, right)

    def parse(self):
        func = self.function()
        log.debug("parsed function %r with %d statements", func.name, len(func.body.statements))
        return func

    def function(self):
        if self.peek().kind != TokenKind.INT:
            raise ParseError("Expected return type (int)")
        self.advance()
        name = self.expect(TokenKind.IDENT, "Expected function name").value
        # no parameters are supported
        self.expect(TokenKind.LPAREN)
        self.expect(TokenKind.RPAREN)
        body = self.block()
        return Function('int', name, body)

    def block(self):
        self.expect(TokenKind.LBRACE)
        self.nest()
        stmts = []
        while self.peek().kind != TokenKind.RBRACE:
            stmts.append(self.statement())
        self.unnest()
        self.expect(TokenKind.RBRACE)
        return Block(stmts)

    def statement(self):
        self.operators = 0
        kind = self.peek().kind
        if kind == TokenKind.RETURN:
            return self.return_statement()
        if kind == TokenKind.IF:
            return self.if_statement()
        if kind == TokenKind.WHILE:
            return self.while_statement()
        if kind == TokenKind.INT:
            return self.declaration()
        if kind == TokenKind.IDENT:
            return self.assignment()
        raise ParseError("Invalid statement")

    def return_statement(self):
        self.advance()  # RETURN
        expr = self.expression()
        self.expect(TokenKind.END)
        return Return(expr)

    def if_statement(self):
        self.advance()  # IF
        self.expect(TokenKind.LPAREN)
        cond = self.expression()
        self.expect(TokenKind.RPAREN)
        then_block = self.block()
        else_block = None
        if self.peek().kind == TokenKind.ELSE:
            self.advance()
            else_block = self.block()
        return If(cond, then_block, else_block)

    def while_statement(self):
        self.advance()  # WHILE
        self.expect(TokenKind.LPAREN)
        cond = self.expression()
        self.expect(TokenKind.RPAREN)
        body = self.block()
        return While(cond, body)

    def declaration(self):
        self.advance()  # INT
        name = self.expect(TokenKind.IDENT, "Expected identifier after int").value
        init = None
        if self.peek().kind == TokenKind.ASSIGN:
            self.advance()
            init = self.expression()
        self.expect(TokenKind.END)
        return Declare('int', name, init)

    def assignment(self):
        target = self.expect(TokenKind.IDENT, "Expected identifier in assignment").value
        self.expect(TokenKind.ASSIGN)
        value = self.expression()
        self.expect(TokenKind.END)
        return Assign(target, value)

    # Expressions: precedence climbing via separate functions
    def expression(self):
        return self.relation()

    def relation(self):
        node = self.additive()
        while self.peek().kind == TokenKind.GT:
            op = self.advance().value
            right = self.additive()
            node = self.binary(op, node, right)
        return node

    def additive(self):
        node = self.multiplicative()
        while self.peek().kind in (TokenKind.PLUS, TokenKind.MINUS):
            op = self.advance().value
            right = self.multiplicative()
            node = self.binary(op, node, right)
        return node

    def multiplicative(self):
        node = self.primary()
        while self.peek().kind == TokenKind.TIMES:
            op = self.advance().value
            right = self.primary()
            node = self.binary(op, node, right)
        return node

    def primary(self):
        tok = self.peek()
        if tok.kind == TokenKind.NUMBER:
            # longer digit strings are out of range and too big for int()
            if len(tok.value.lstrip('0')) > 10:
                raise ParseError("Invalid integer")
            value = int(tok.value)
            if not INT_MIN <= value <= INT_MAX:
                raise ParseError("Invalid integer")
            self.advance()
            return IntLiteral(value)
        if tok.kind == TokenKind.IDENT:
            self.advance()
            return Variable(tok.value)
        if tok.kind == TokenKind.LPAREN:
            self.advance()
            self.nest()
            node = self.expression()
            self.expect(TokenKind.RPAREN)
            self.unnest()
            return node
        raise ParseError("Expected expression")


def parse(tokens):
    return Parser(tokens).parse()
