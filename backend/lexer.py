"""
Lexer for the mini language.

Scanning never stops early: characters that start no token become INVALID
tokens and the scan carries on, so one pass reports every bad character.
"""

import logging
import re
from collections import namedtuple
from enum import Enum

from errors import LexError

log = logging.getLogger(__name__)


class TokenKind(Enum):
    # values are the numeric token ids printed as (id, content)
    EOF = 0
    INT = 1
    IF = 2
    ELSE = 3
    WHILE = 4
    RETURN = 5
    IDENT = 6
    NUMBER = 7
    PLUS = 8
    MINUS = 9
    TIMES = 10
    LPAREN = 11
    RPAREN = 12
    LBRACE = 13
    RBRACE = 14
    EQUAL = 15
    GT = 16
    LT = 17
    END = 18
    COMMA = 19
    ASSIGN = 20
    GE = 21
    LE = 22
    NE = 23
    INVALID = -1


KEYWORDS = {
    'int': TokenKind.INT,
    'if': TokenKind.IF,
    'else': TokenKind.ELSE,
    'while': TokenKind.WHILE,
    'return': TokenKind.RETURN,
}

PLACEHOLDER = '-'


class Token(namedtuple('Token', ['kind', 'value'])):
    """An immutable token; value is the source lexeme ('' for EOF)."""
    __slots__ = ()

    @property
    def id(self):
        return self.kind.value

    def content(self):
        if self.kind in (TokenKind.IDENT, TokenKind.NUMBER):
            return self.value
        return PLACEHOLDER

    def __repr__(self):
        if self.kind in (TokenKind.IDENT, TokenKind.NUMBER, TokenKind.INVALID):
            return f"{self.kind.name}({self.value!r})"
        return self.kind.name


EOF_TOKEN = Token(TokenKind.EOF, '')


class Lexer:
    # longer operators come before their one-character prefixes
    token_specification = [
        ("SKIP",      r'\s+'),
        ("NUMBER",    r'[0-9]+'),
        ("ID",        r'[^\W\d_]\w*'),
        ("GE",        r'>='),
        ("LE",        r'<='),
        ("EQUAL",     r'=='),
        ("NE",        r'!='),
        ("GT",        r'>'),
        ("LT",        r'<'),
        ("ASSIGN",    r'='),
        ("PLUS",      r'\+'),
        ("MINUS",     r'-'),
        ("TIMES",     r'\*'),
        ("LPAREN",    r'\('),
        ("RPAREN",    r'\)'),
        ("LBRACE",    r'\{'),
        ("RBRACE",    r'\}'),
        ("END",       r';'),
        ("COMMA",     r','),
        ("MISMATCH",  r'.'),
    ]
    tok_regex = '|'.join(f'(?P<{n}>{p})' for n, p in token_specification)
    master_re = re.compile(tok_regex, re.DOTALL)

    def __init__(self, code):
        self.code = code
        self.tokens = []
        self.invalid_tokens = []
        self._tokenize()

    def _tokenize(self):
        for mo in self.master_re.finditer(self.code):
            kind = mo.lastgroup
            val = mo.group()
            if kind == "SKIP":
                continue
            if kind == "ID":
                self._word(val)
            elif kind == "MISMATCH":
                self.invalid_tokens.append(Token(TokenKind.INVALID, val))
            else:
                self.tokens.append(Token(TokenKind[kind], val))
        self.tokens.append(EOF_TOKEN)
        log.debug("scanned %d tokens, %d invalid", len(self.tokens), len(self.invalid_tokens))

    def _word(self, val):
        # \w also covers marks and numerals like '²'; only a letter starts an identifier
        pos = 0
        while pos < len(val):
            ch = val[pos]
            if ch.isalpha():
                word = val[pos:]
                self.tokens.append(Token(KEYWORDS.get(word, TokenKind.IDENT), word))
                return
            if ch in '0123456789':
                end = pos
                while end < len(val) and val[end] in '0123456789':
                    end += 1
                self.tokens.append(Token(TokenKind.NUMBER, val[pos:end]))
                pos = end
            else:
                self.invalid_tokens.append(Token(TokenKind.INVALID, ch))
                pos += 1

    def to_tokens(self):
        if self.invalid_tokens:
            raise LexError(self.invalid_tokens)
        return list(self.tokens)


def tokenize(code):
    return Lexer(code).to_tokens()
