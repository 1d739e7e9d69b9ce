"""Shared fixtures for the compiler test suite."""

import pytest

from lexer import tokenize
from parse import Parser

# token stream of this program is the fixture used by the lexer printers
EXAMPLE = """int main() {
    int x = 1;
    if (x > 0) {
        int y = 2;
    }
    int y = 0;
    x = x + y * 2 - 5;
    int a = 10;
    while (a > 0) {
        a = a - 1;
    }
    return 0;
}
"""


def parse_source(code):
    return Parser(tokenize(code)).parse()


@pytest.fixture
def example_source():
    return EXAMPLE


@pytest.fixture
def client():
    from app import app
    app.config.update(TESTING=True)
    with app.test_client() as c:
        yield c
