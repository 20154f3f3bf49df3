"""CLI entry point for the MicroJathon toolchain.

Usage:
    python -m microjathon [-v|-vv|-vvv|-vvvv] [program_file]
    python -m microjathon [-v...] --emit-ast <program_file>
    python -m microjathon [-v...] --ast <ast_json_file>
    python -m microjathon [-v...] -S program.s [--no-run] <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Also write the parsed tree as `<program_file>.ast.json`
  --ast         Execute a previously emitted AST JSON file
  -S, --asm     Compile the program and write the assembly to the given path
  --no-run      Do not run the interpreter (useful together with -S)
  --target      Instruction set for -S (default: riscv)

When no program file is given a built-in sample program is used; `-`
reads the program from standard input. Debug information is appended to
`debug.txt` in the current directory when verbosity is greater than zero.
Artifacts are only written after the pass producing them has succeeded.
"""

import argparse
import json
import sys
from pathlib import Path

from lark.exceptions import LarkError

from .artifacts import write_assembly, write_ast
from .ast_json import ast_from_obj
from .codegen import CodeGenerator
from .errors import JathonError
from .interpreter import Interpreter
from .parser import parse_program
from .target import TARGETS, get_target

DEFAULT_PROGRAM = """\
print("if without else");
a = 5;
b = 10;
if (a < b) {
    print(1);
}

print("if with else");
c = 15;
if (c < 10) {
    print(0);
} else {
    print(2);
}

print("while loop");
i = 0;
while (i < 3) {
    print(i);
    i = i + 1;
}
"""


def fail(prefix: str, err: Exception) -> None:
    print(f"{prefix}: {err}", file=sys.stderr)
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="MicroJathon interpreter and compiler")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--emit-ast', action='store_true', help='write the parsed AST as JSON next to the program')
    parser.add_argument('--ast', metavar='AST_JSON_FILE', help='load the program from an AST JSON file')
    parser.add_argument('-S', '--asm', metavar='ASM_FILE', help='compile to assembly and write it to ASM_FILE')
    parser.add_argument('--target', default='riscv', choices=sorted(TARGETS), help='assembly target instruction set')
    parser.add_argument('--no-run', action='store_true', help='skip running the interpreter')
    parser.add_argument('program', nargs='?', help="program file (.mj), or '-' for standard input")
    args = parser.parse_args(argv)

    if args.ast and (args.program or args.emit_ast):
        parser.error('--ast cannot be combined with a program file or --emit-ast')

    # Load from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            ast_program = ast_from_obj(json.load(f))
    else:
        if args.program == '-':
            source = sys.stdin.read()
            program_file = Path('stdin.mj')
        elif args.program:
            program_file = Path(args.program)
            if not program_file.exists():
                print(f"Error: file {program_file} not found", file=sys.stderr)
                sys.exit(1)
            with open(program_file, 'r', encoding='utf-8') as f:
                source = f.read()
        else:
            source = DEFAULT_PROGRAM
            program_file = Path('sample.mj')
        try:
            ast_program = parse_program(source)
        except LarkError as e:
            fail('Syntax error', e)
        if args.emit_ast:
            out_path = program_file.with_name(program_file.name + '.ast.json')
            write_ast(out_path, ast_program)
            print(str(out_path))

    if not args.no_run:
        interpreter = Interpreter(debug_level=args.v)
        try:
            interpreter.run(ast_program)
        except JathonError as e:
            fail('Runtime error', e)

    if args.asm:
        generator = CodeGenerator(get_target(args.target), debug_level=args.v)
        try:
            lines = generator.compile(ast_program)
        except JathonError as e:
            fail('Compile error', e)
        write_assembly(args.asm, lines)
        print(f"{args.target} assembly written to {args.asm}")


if __name__ == '__main__':
    main()
