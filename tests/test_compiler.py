"""Driver, interpreter and command line tests."""

import pytest

from codegen import Quadruple
from compiler import compile_source, execute_quadruples, format_ast, format_symbol_table, main
from errors import ExecutionError
from lexer import TokenKind

SCENARIO = "int main ( ) { int x = 1 ; if ( x > 0 ) { x = x + 1 ; } return x ; }"


def test_compile_scenario():
    result = compile_source(SCENARIO)
    assert result['errors'] == []
    assert [q.as_tuple() for q in result['quadruples']][:2] == [('=', '1', '', 'x'), ('j>', 'x', '0', '4')]
    assert result['output'] == 2
    assert result['trace'] == [1, 2, 4, 5, 6]
    assert [s.name for s in result['symbol_table']] == ['x']


def test_compile_without_running():
    result = compile_source(SCENARIO, run=False)
    assert result['output'] is None
    assert result['trace'] == []
    assert len(result['quadruples']) == 6


def test_lexical_errors_stop_the_pipeline():
    result = compile_source("int main ( ) { return 1 # 2 @ ; }")
    assert result['errors'] == [
        "Lexical error: invalid character '#'",
        "Lexical error: invalid character '@'",
    ]
    assert result['ast'] is None
    assert result['quadruples'] == []
    assert result['tokens'][-1].kind == TokenKind.EOF


def test_syntax_error_is_reported_once():
    result = compile_source("int main ( ) { return 1 }")
    assert result['errors'] == ["Syntax error: Unexpected token: expected ';'"]
    assert result['ast'] is None


def test_semantic_errors_are_batched():
    result = compile_source("int main ( ) { y = 3 ; int x ; int x ; return z ; }")
    assert result['errors'] == [
        "Semantic error: Undeclared variable 'y'",
        "Semantic error: Duplicate declaration of variable 'x'",
        "Semantic error: Undeclared variable 'z'",
    ]
    assert result['output'] is None
    assert [q.as_tuple() for q in result['quadruples']] == [('return', '0', '', '')]


def test_runaway_loop_is_reported():
    result = compile_source("int main ( ) { int a = 1 ; while ( a > 0 ) { a = a + 1 ; } }", max_steps=50)
    assert result['errors'] == ["Runtime error: step limit of 50 exceeded"]


def test_execute_falls_off_end():
    execution = execute_quadruples([Quadruple('=', '5', '', 'x')])
    assert execution.value is None
    assert execution.memory == {'x': 5}
    assert execution.trace == [1]


def test_execute_comparison_value():
    quads = [Quadruple('>', '3', '1', 't1'), Quadruple('return', 't1')]
    assert execute_quadruples(quads).value == 1


def test_execute_rejects_bad_target():
    with pytest.raises(ExecutionError, match="out of range"):
        execute_quadruples([Quadruple('j', '', '', '0')])


def test_execute_rejects_unknown_operator():
    with pytest.raises(ExecutionError, match="unknown operator"):
        execute_quadruples([Quadruple('call', 'f')])


def test_format_symbol_table():
    result = compile_source("int main ( ) { int a ; if ( a ) { int b ; } }")
    assert format_symbol_table(result['symbol_table']) == "a: Variable Int scope 2\nb: Variable Int scope 3"


def test_format_ast():
    result = compile_source("int main ( ) { return 1 + x ; }", run=False)
    text = format_ast(result['ast'])
    assert text.splitlines()[0] == "Function"
    assert "  name: main" in text
    assert "op: +" in text


def test_cli_prints_sections(tmp_path, capsys):
    src = tmp_path / "prog.c"
    src.write_text(SCENARIO)
    assert main([str(src)]) == 0
    out = capsys.readouterr().out
    assert "=== Tokens ===" in out
    assert "2: (j>, x, 0, 4)" in out
    assert "x: Variable Int scope 2" in out
    assert out.rstrip().endswith("2")


def test_cli_reports_errors(tmp_path, capsys):
    src = tmp_path / "bad.c"
    src.write_text("int main ( ) { y = 3 ; }")
    assert main([str(src), "--no-run"]) == 1
    assert "Undeclared variable 'y'" in capsys.readouterr().err


def test_cli_missing_file(tmp_path, capsys):
    missing = tmp_path / "nope.c"
    assert main([str(missing)]) == 1
    assert "not found" in capsys.readouterr().err


def test_oversized_literal_is_a_syntax_error():
    result = compile_source("int main ( ) { return " + "9" * 5000 + " ; }")
    assert result['errors'] == ["Syntax error: Invalid integer"]


def test_deep_nesting_is_a_syntax_error():
    result = compile_source("int main ( ) { return " + "(" * 2000 + "1" + ")" * 2000 + " ; }")
    assert result['errors'] == ["Syntax error: Nesting too deep"]


def test_longest_accepted_expression_compiles():
    chain = " + ".join(["1"] * 257)
    result = compile_source(f"int main ( ) {{ return {chain} ; }}")
    assert result['errors'] == []
    assert result['output'] == 257
