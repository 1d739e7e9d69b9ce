# =====================================================
# AST NODES
# =====================================================
# Plain data holders built by the parser and walked by the code generator.
# Children are owned by their parent; the tree never shares or cycles.


class Node:
    def __eq__(self, other):
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"{type(self).__name__}({fields})"


class Function(Node):
    def __init__(self, return_type, name, body):
        self.return_type = return_type  # only 'int'
        self.name = name
        self.body = body


class Block(Node):
    def __init__(self, statements):
        self.statements = statements


# statements

class Return(Node):
    def __init__(self, expr):
        self.expr = expr


class If(Node):
    def __init__(self, cond, then_block, else_block=None):
        self.cond = cond
        self.then_block = then_block
        self.else_block = else_block


class While(Node):
    def __init__(self, cond, body):
        self.cond = cond
        self.body = body


class Assign(Node):
    def __init__(self, target, value):
        self.target = target
        self.value = value


class Declare(Node):
    def __init__(self, ident_type, name, init=None):
        self.ident_type = ident_type  # only 'int'
        self.name = name
        self.init = init


# expressions

class IntLiteral(Node):
    def __init__(self, value):
        self.value = value


class Variable(Node):
    def __init__(self, name):
        self.name = name


class BinaryOp(Node):
    def __init__(self, op, left, right):
        self.op = op
        self.left = left
        self.right = right
