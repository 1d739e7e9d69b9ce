"""
Quadruple generation with scope-checked names and backpatched jumps.

Jump targets are 1-indexed positions in the quadruple list. A jump is first
emitted with the placeholder target "0" and patched once the construct it
belongs to has been generated.
"""

import logging

from ast_nodes import (
    Return, If, While, Assign, Declare,
    IntLiteral, Variable, BinaryOp,
)
from errors import CompilationError, UndeclaredVariable, GenericSemanticError, SemanticError
from symbols import SymbolTable, SymbolType, DataType

log = logging.getLogger(__name__)

PLACEHOLDER = '0'

# Conditional jumps fire when their relation holds: `if` jumps into the
# then-block on the condition, `while` jumps out of the loop on its negation.
# A condition that is not a comparison is tested with nz (non-zero).

# relation that holds exactly when the given one does not
NEGATED = {
    '>': '<=', '<=': '>',
    '<': '>=', '>=': '<',
    '==': '!=', '!=': '==',
    'z': 'nz', 'nz': 'z',
}
RELATIONAL = ('>', '<', '>=', '<=', '==', '!=')


class Quadruple:
    def __init__(self, op, arg1='', arg2='', result=''):
        self.op = op
        self.arg1 = arg1
        self.arg2 = arg2
        self.result = result

    def as_tuple(self):
        return (self.op, self.arg1, self.arg2, self.result)

    def is_jump(self):
        return self.op.startswith('j')

    def __eq__(self, other):
        if isinstance(other, Quadruple):
            return self.as_tuple() == other.as_tuple()
        if isinstance(other, tuple):
            return self.as_tuple() == other
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return f"({self.op}, {self.arg1}, {self.arg2}, {self.result})"


class CodeGenerator:
    def __init__(self):
        self.reset()

    def reset(self):
        self.symbol_table = SymbolTable()
        self.quadruples = []
        self.temp_count = 0
        self.errors = []

    def generate(self, func):
        """Translate a Function into quadruples.

        Returns the quadruple list. If any undeclared or duplicate names were
        found, raises SemanticError with all of them once the whole body has
        been walked; quadruples and symbol_table stay readable either way.
        """
        self.reset()
        # function scope, then the body block opens its own
        self.symbol_table.enter_scope()
        self.gen_block(func.body)
        self.symbol_table.exit_scope()
        log.debug("generated %d quadruples for %r, %d errors",
                  len(self.quadruples), func.name, len(self.errors))
        if self.errors:
            raise SemanticError(self.errors)
        return self.quadruples

    # -------------------------------------------------
    # helpers
    # -------------------------------------------------
    def emit(self, op, arg1='', arg2='', result=''):
        self.quadruples.append(Quadruple(op, arg1, arg2, result))
        return len(self.quadruples) - 1

    def next_address(self):
        return len(self.quadruples) + 1

    def backpatch(self, index, address):
        self.quadruples[index].result = str(address)

    def new_temp(self):
        self.temp_count += 1
        return f"t{self.temp_count}"

    def error(self, err):
        log.debug("semantic error: %s", err)
        self.errors.append(err)

    # -------------------------------------------------
    # statements
    # -------------------------------------------------
    def gen_block(self, block):
        self.symbol_table.enter_scope()
        for stmt in block.statements:
            self.gen_stmt(stmt)
        self.symbol_table.exit_scope()

    def gen_stmt(self, stmt):
        if isinstance(stmt, Return):
            value = self.gen_expr(stmt.expr)
            self.emit('return', value)
        elif isinstance(stmt, If):
            self.gen_if(stmt)
        elif isinstance(stmt, While):
            self.gen_while(stmt)
        elif isinstance(stmt, Assign):
            self.gen_assign(stmt)
        elif isinstance(stmt, Declare):
            self.gen_declare(stmt)
        else:
            self.error(GenericSemanticError(f"unsupported statement {type(stmt).__name__}"))

    def gen_if(self, stmt):
        op, lhs, rhs = self.condition(stmt.cond)
        cond_jump = self.emit('j' + op, lhs, rhs, PLACEHOLDER)
        else_jump = self.emit('j', '', '', PLACEHOLDER)

        then_start = self.next_address()
        self.gen_block(stmt.then_block)

        after_else_jump = None
        if stmt.else_block is not None:
            after_else_jump = self.emit('j', '', '', PLACEHOLDER)

        else_start = self.next_address()
        if stmt.else_block is not None:
            self.gen_block(stmt.else_block)
        after_if = self.next_address()

        self.backpatch(cond_jump, then_start)
        self.backpatch(else_jump, else_start if stmt.else_block is not None else after_if)
        if after_else_jump is not None:
            self.backpatch(after_else_jump, after_if)

    def gen_while(self, stmt):
        loop_start = self.next_address()
        op, lhs, rhs = self.condition(stmt.cond)
        # leaves the loop, so it tests the negated condition
        cond_jump = self.emit('j' + NEGATED[op], lhs, rhs, PLACEHOLDER)

        self.gen_block(stmt.body)
        back_jump = self.emit('j', '', '', PLACEHOLDER)
        loop_end = self.next_address()

        self.backpatch(cond_jump, loop_end)
        self.backpatch(back_jump, loop_start)

    def condition(self, expr):
        """Return (relation, lhs, rhs) that holds when expr is true."""
        if isinstance(expr, BinaryOp) and expr.op in RELATIONAL:
            left = self.gen_expr(expr.left)
            right = self.gen_expr(expr.right)
            return expr.op, left, right
        # any other value is true when it is non-zero
        value = self.gen_expr(expr)
        return 'nz', value, '0'

    def gen_assign(self, stmt):
        if self.symbol_table.lookup(stmt.target) is None:
            # the whole statement is dropped
            self.error(UndeclaredVariable(stmt.target))
            return
        value = self.gen_expr(stmt.value)
        self.emit('=', value, '', stmt.target)

    def gen_declare(self, stmt):
        try:
            self.symbol_table.declare(stmt.name, SymbolType.VARIABLE, DataType.INT)
        except CompilationError as err:
            self.error(err)
        if stmt.init is not None:
            value = self.gen_expr(stmt.init)
            self.emit('=', value, '', stmt.name)

    # -------------------------------------------------
    # expressions
    # -------------------------------------------------
    def gen_expr(self, expr):
        if isinstance(expr, IntLiteral):
            return str(expr.value)
        if isinstance(expr, Variable):
            if self.symbol_table.lookup(expr.name) is None:
                self.error(UndeclaredVariable(expr.name))
                return '0'
            return expr.name
        if isinstance(expr, BinaryOp):
            left = self.gen_expr(expr.left)
            right = self.gen_expr(expr.right)
            temp = self.new_temp()
            self.emit(expr.op, left, right, temp)
            return temp
        self.error(GenericSemanticError(f"unsupported expression {type(expr).__name__}"))
        return '0'


def generate(func):
    gen = CodeGenerator()
    return gen.generate(func), gen.symbol_table
