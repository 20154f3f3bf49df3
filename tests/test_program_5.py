from pathlib import Path
from microjathon.interpreter import Interpreter
from microjathon.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_5_gcd(capsys):
    """String variables print unquoted; the loop terminates at the GCD."""
    with open(EXAMPLES / 'program_5.mj', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['GCD of 1071 and 462:', '21']
