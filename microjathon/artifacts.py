"""Persisting compiler and interpreter artifacts.

Artifacts are always produced completely in memory first; these helpers
only ever write text that came out of a successful pass. Each file is
written to a temporary sibling and moved into place so a failed write
never leaves a truncated artifact behind.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Union

from .ast import Program
from .ast_json import ast_to_obj

PathLike = Union[str, Path]


def write_text(path: PathLike, text: str) -> Path:
    path = Path(path)
    tmp = path.with_name(path.name + '.tmp')
    with open(tmp, 'w', encoding='utf-8') as out:
        out.write(text)
    os.replace(tmp, path)
    return path


def write_assembly(path: PathLike, lines: List[str]) -> Path:
    """Write generated instruction lines, one per line."""
    return write_text(path, '\n'.join(lines) + '\n')


def dump_ast(program: Program) -> str:
    return json.dumps(ast_to_obj(program), ensure_ascii=False, indent=2)


def write_ast(path: PathLike, program: Program) -> Path:
    """Write the JSON tree dump of a parsed program."""
    return write_text(path, dump_ast(program) + '\n')
