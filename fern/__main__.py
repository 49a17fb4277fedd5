"""CLI entry point for the Fern interpreter.

Usage:
    python -m fern [-v|-vv|-vvv] <program_file>
    python -m fern [-v...] --emit-ast <program_file>
    python -m fern [-v...] --ast <ast_json_file>
    python -m fern [-v...]

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .fern file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive shell is started. Each line is run
as one unit against a session-wide global scope; `vars` lists the global
bindings and `exit` (or end of input) leaves the shell.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast_json import ast_to_obj, ast_from_obj
from .errors import ErrorVal, FernError
from .interpreter import Interpreter
from .parser import parse_program
from .types import UnitVal, repr_value


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(program, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        result = interpreter.run(program)
    except FernError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        print("Fatal: maximum recursion depth exceeded", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()
    if not isinstance(result, UnitVal):
        print(repr_value(result))


def shell(debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        while True:
            try:
                line = input('  > ')
            except EOFError:
                break
            line = line.strip()
            if line == 'exit':
                break
            if line == 'vars':
                bindings = ', '.join(f"{name}: {repr_value(value)}"
                                     for name, value in interpreter.global_env.values.items())
                print('{' + bindings + '}')
                continue
            if not line:
                continue
            try:
                result = interpreter.interpret(line)
            except RecursionError:
                print("  Fatal: maximum recursion depth exceeded")
                continue
            if isinstance(result, ErrorVal):
                print(f"  {result}")
            elif not isinstance(result, UnitVal):
                print(f"  {repr_value(result)}")
    finally:
        interpreter.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Fern language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='FERN_FILE', help='emit AST JSON for the given .fern file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Fern program file (.fern) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            ast_program = parse_program(source)
        except FernError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        data = json.loads(read_source(ast_path))
        execute(ast_from_obj(data), args.v)
        return

    if not args.program:
        shell(args.v)
        return
    source = read_source(Path(args.program))
    try:
        ast_program = parse_program(source)
    except FernError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        sys.exit(1)
    execute(ast_program, args.v)


if __name__ == '__main__':
    main()
