from pathlib import Path
from microjathon.interpreter import Interpreter
from microjathon.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_6_floats_and_round(capsys):
    """Division promotes to Float only when the result is not whole; round() rounds halves up."""
    with open(EXAMPLES / 'program_6.mj', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['2.5', '2', '3', '3', '7', '-2', '-1.5', '6']
