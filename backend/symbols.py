# =====================================================
# SYMBOL TABLE
# =====================================================
# Symbols are kept in declaration order. Each entered scope remembers how
# many symbols existed at entry; leaving the scope truncates back to that
# count. Lookup walks backwards, so the innermost declaration wins.

from collections import namedtuple
from enum import Enum

from errors import DuplicateDeclaration


class SymbolType(Enum):
    VARIABLE = 'Variable'


class DataType(Enum):
    INT = 'Int'


Symbol = namedtuple('Symbol', ['name', 'symbol_type', 'data_type', 'scope_level'])


class SymbolTable:
    def __init__(self):
        self.symbols = []
        self.scopes = []
        self.current_scope = 0
        # every symbol ever declared, untouched by exit_scope
        self.history = []

    def enter_scope(self):
        self.scopes.append(len(self.symbols))
        self.current_scope += 1

    def exit_scope(self):
        if not self.scopes:
            return
        boundary = self.scopes.pop()
        del self.symbols[boundary:]
        self.current_scope -= 1

    def declare(self, name, symbol_type=SymbolType.VARIABLE, data_type=DataType.INT):
        for symbol in reversed(self.symbols):
            if symbol.scope_level < self.current_scope:
                break
            if symbol.name == name and symbol.scope_level == self.current_scope:
                raise DuplicateDeclaration(name)
        symbol = Symbol(name, symbol_type, data_type, self.current_scope)
        self.symbols.append(symbol)
        self.history.append(symbol)
        return symbol

    def lookup(self, name):
        for symbol in reversed(self.symbols):
            if symbol.name == name and symbol.scope_level <= self.current_scope:
                return symbol
        return None

    def __iter__(self):
        return iter(self.symbols)

    def __len__(self):
        return len(self.symbols)

    def __contains__(self, name):
        return self.lookup(name) is not None
