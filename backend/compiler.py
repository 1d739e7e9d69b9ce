#!/usr/bin/env python3
"""
compiler.py
Driver for the mini compiler pipeline (lexer → LL(1) parser → scope-checked
quadruple generation), plus a small quadruple interpreter and the text
formatters used by the command line and the web front end.
"""

import argparse
import logging
import re
import sys
from collections import namedtuple
from pathlib import Path

from ast_nodes import Node, Block
from codegen import CodeGenerator
from errors import LexError, ParseError, SemanticError, ExecutionError
from lexer import Lexer, TokenKind
from parse import Parser

log = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10000

# =====================================================
# QUADRUPLE INTERPRETER
# =====================================================
Execution = namedtuple('Execution', ['value', 'trace', 'memory'])

ARITHMETIC = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
}

RELATIONS = {
    '>': lambda a, b: a > b,
    '<': lambda a, b: a < b,
    '>=': lambda a, b: a >= b,
    '<=': lambda a, b: a <= b,
    '==': lambda a, b: a == b,
    '!=': lambda a, b: a != b,
    'z': lambda a, b: a == 0,
    'nz': lambda a, b: a != 0,
}


def execute_quadruples(quads, max_steps=DEFAULT_MAX_STEPS):
    """Run quads from address 1 and return an Execution.

    trace lists every executed address in order. value is the returned
    operand, or None when control falls off the end of the list.
    """
    mem = {}
    trace = []

    def get_val(x):
        if re.fullmatch(r'-?\d+', x):
            return int(x)
        return mem.get(x, 0)

    def target(instr):
        addr = int(instr.result)
        if not 1 <= addr <= len(quads) + 1:
            raise ExecutionError(f"jump target {addr} out of range in {instr!r}")
        return addr

    pc = 1
    while pc <= len(quads):
        if len(trace) >= max_steps:
            raise ExecutionError(f"step limit of {max_steps} exceeded")
        trace.append(pc)
        instr = quads[pc - 1]
        if instr.op == '=':
            mem[instr.result] = get_val(instr.arg1)
            pc += 1; continue
        if instr.op in ARITHMETIC:
            mem[instr.result] = ARITHMETIC[instr.op](get_val(instr.arg1), get_val(instr.arg2))
            pc += 1; continue
        if instr.op in RELATIONS:
            # comparison used as a value
            mem[instr.result] = int(RELATIONS[instr.op](get_val(instr.arg1), get_val(instr.arg2)))
            pc += 1; continue
        if instr.op == 'return':
            return Execution(get_val(instr.arg1), trace, mem)
        if instr.op == 'j':
            pc = target(instr)
            continue
        if instr.op.startswith('j') and instr.op[1:] in RELATIONS:
            holds = RELATIONS[instr.op[1:]](get_val(instr.arg1), get_val(instr.arg2))
            pc = target(instr) if holds else pc + 1
            continue
        raise ExecutionError(f"unknown operator {instr.op!r} at {pc}")
    return Execution(None, trace, mem)


# =====================================================
# FORMATTERS
# =====================================================
def format_tokens(tokens):
    lines = []
    for i, tok in enumerate(t for t in tokens if t.kind != TokenKind.EOF):
        lines.append(f"({i})\t({tok.id}, {tok.content()})")
    return "\n".join(lines)


def format_quadruples(quads):
    return "\n".join(
        f"{i}: ({q.op}, {q.arg1}, {q.arg2}, {q.result})" for i, q in enumerate(quads, 1)
    )


def format_symbol_table(symbols):
    return "\n".join(
        f"{s.name}: {s.symbol_type.value} {s.data_type.value} scope {s.scope_level}" for s in symbols
    )


def format_ast(node, indent=0):
    pad = "  " * indent
    if isinstance(node, Block):
        lines = [f"{pad}Block"]
        lines.extend(format_ast(s, indent + 1) for s in node.statements)
        return "\n".join(lines)
    if isinstance(node, Node):
        lines = [f"{pad}{type(node).__name__}"]
        for key, value in node.__dict__.items():
            if isinstance(value, Node):
                lines.append(f"{pad}  {key}:")
                lines.append(format_ast(value, indent + 2))
            elif value is not None:
                lines.append(f"{pad}  {key}: {value}")
        return "\n".join(lines)
    return f"{pad}{node!r}"


# =====================================================
# COMPILER DRIVER
# =====================================================
def compile_source(code, run=True, max_steps=DEFAULT_MAX_STEPS):
    result = {
        'tokens': [],
        'ast': None,
        'quadruples': [],
        'symbol_table': [],
        'errors': [],
        'output': None,
        'trace': [],
    }

    lex = Lexer(code)
    result['tokens'] = lex.tokens
    try:
        tokens = lex.to_tokens()
    except LexError as e:
        result['errors'] = [f"Lexical error: invalid character {t.value!r}" for t in e.invalid_tokens]
        log.info("lexing failed with %d invalid characters", len(e.invalid_tokens))
        return result

    try:
        ast = Parser(tokens).parse()
    except ParseError as e:
        result['errors'] = [f"Syntax error: {e}"]
        log.info("parsing failed: %s", e)
        return result
    result['ast'] = ast

    gen = CodeGenerator()
    try:
        quads = gen.generate(ast)
    except SemanticError as e:
        result['quadruples'] = gen.quadruples
        result['symbol_table'] = gen.symbol_table.history
        result['errors'] = [f"Semantic error: {err}" for err in e.errors]
        log.info("code generation failed with %d errors", len(e.errors))
        return result
    result['quadruples'] = quads
    result['symbol_table'] = gen.symbol_table.history

    if run:
        try:
            execution = execute_quadruples(quads, max_steps)
        except ExecutionError as e:
            result['errors'] = [f"Runtime error: {e}"]
            return result
        result['output'] = execution.value
        result['trace'] = execution.trace
    return result


# =====================================================
# COMMAND LINE
# =====================================================
def main(argv=None):
    argparser = argparse.ArgumentParser(description='Compile a mini-language source file to quadruples.')
    argparser.add_argument('input', help='input file')
    argparser.add_argument('--no-run', dest='run', help='do not execute the generated quadruples',
                           action='store_false')
    argparser.add_argument('--max-steps', type=int, default=DEFAULT_MAX_STEPS,
                           help='instruction limit when executing')
    argparser.add_argument('-v', '--verbose', help='debug logging', action='store_true')
    args = argparser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s:%(name)s:%(lineno)d: %(message)s')

    path = Path(args.input)
    if not path.is_file():
        print(f"file {args.input} not found", file=sys.stderr)
        return 1

    result = compile_source(path.read_text(encoding='utf-8'), run=args.run, max_steps=args.max_steps)
    if result['errors']:
        for err in result['errors']:
            print(err, file=sys.stderr)
        return 1

    print("=== Tokens ===")
    print(format_tokens(result['tokens']))
    print("\n=== Quadruples ===")
    print(format_quadruples(result['quadruples']))
    print("\n=== Symbol Table ===")
    print(format_symbol_table(result['symbol_table']))
    if args.run:
        print("\n=== Output ===")
        print(result['output'])
    return 0


if __name__ == '__main__':
    sys.exit(main())
