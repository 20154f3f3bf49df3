"""The compiled artifact, run on the reference machine, prints exactly
what the interpreter prints for programs inside the compilable subset."""

import io
from pathlib import Path

import pytest

from microjathon.codegen import compile_program
from microjathon.errors import DivisionByZero
from microjathon.interpreter import run_program
from microjathon.parser import parse_program

import riscv_machine

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def interpret(source: str) -> str:
    out = io.StringIO()
    run_program(source, out=out)
    return out.getvalue()


def execute(source: str) -> str:
    return riscv_machine.run(compile_program(parse_program(source)))


@pytest.mark.parametrize('name', ['program_3.mj', 'program_4.mj', 'program_5.mj', 'program_8.mj'])
def test_example_programs_agree(name):
    with open(EXAMPLES / name, 'r', encoding='utf-8') as f:
        source = f.read()
    assert execute(source) == interpret(source)


@pytest.mark.parametrize('source', [
    'print(0); print(-1); print(1000000); print(-907);',
    'print(3 == 3); print(3 != 3); print(2 <= 1); print(2 >= 2); print(1 > 0);',
    'print(1 && 2); print(0 || 0); print(!7); print(!0 && 1);',
    'a = 6; b = 7; print(a * b - (a + b) * 2);',
    'print(missing); missing = 5; print(missing);',
])
def test_integer_snippets_agree(source):
    assert execute(source) == interpret(source)


def test_string_variable_prints_exact_literal():
    source = 's = "Hello, world!"; print(s); print(s);'
    assert execute(source) == 'Hello, world!\nHello, world!\n'


def test_string_assigned_later_in_a_loop():
    source = 'i = 0; while (i < 2) { if (i == 1) { print(msg); } msg = "late"; i = i + 1; }'
    # the first iteration assigns msg before the second one prints it
    assert execute(source) == 'late\n'


def test_string_print_before_assignment():
    source = 'print(msg); msg = "later"; print(msg);'
    assert execute(source) == interpret(source) == '0\nlater\n'


def test_exact_division_agrees():
    source = 'print(12 / 4); print(-7 / 7); print(0 / 5); a = 42; print(a / -6);'
    assert execute(source) == interpret(source)


def test_division_by_zero_halts_with_the_same_error():
    source = 'print(1); x = 0; print(4 / x); print(2);'
    out = io.StringIO()
    with pytest.raises(DivisionByZero) as err:
        run_program(source, out=out)
    assert out.getvalue() == '1\n'
    assert execute(source) == '1\n' + err.value.kind + ': division by zero\n'


def test_division_with_a_remainder_halts():
    # the machine has no floats, so the quotient 2.5 cannot be produced
    assert interpret('print(5 / 2);') == '2.5\n'
    assert execute('print(1); print(5 / 2); print(3);') == (
        '1\nUnsupportedFeature: division with a remainder needs a Float\n')
