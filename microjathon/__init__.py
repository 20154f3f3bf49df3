# MicroJathon language package
# This package provides a tree-walking interpreter and a RISC-V style
# assembly code generator for the MicroJathon language.
from .interpreter import run_program, Interpreter
from .codegen import compile_program, CodeGenerator
from .parser import parse_program
from .errors import JathonError

__all__ = [
    'run_program',
    'compile_program',
    'parse_program',
    'Interpreter',
    'CodeGenerator',
    'JathonError',
]
