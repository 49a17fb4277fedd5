from pathlib import Path
from fern.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_grades_else_if_chain(capsys):
    source = (EXAMPLES / 'grades.fern').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['A', 'B', 'C', 'F']
