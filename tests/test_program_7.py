from pathlib import Path
from microjathon.interpreter import Interpreter
from microjathon.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_logical_operators(capsys):
    with open(EXAMPLES / 'program_7.mj', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['0', '1', '1', '0', '0', '1', '1', '0']
