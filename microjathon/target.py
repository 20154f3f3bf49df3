"""Target instruction set abstraction for the code generator.

`TargetISA` is the emission interface the code generator talks to: every
method returns the list of text lines implementing one primitive
operation. Expression results always live in the target's scratch
register; the left operand of a binary operator is parked on the machine
stack while the right operand is computed and comes back in the secondary
register.

`RiscVTarget` is the one instantiation: a word-addressed RISC-V style
register machine with an `ewrite` output instruction, `data` directives
and `ebreak` to halt.

Division is exact only: a zero divisor or a nonzero remainder jumps to a
trap routine that writes an error line and halts.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .errors import UnsupportedOperator


class TargetISA:
    """Interface every backend implements. See module docstring."""
    name = 'abstract'
    scratch = ''

    def prologue(self) -> List[str]:
        raise NotImplementedError

    def epilogue(self) -> List[str]:
        raise NotImplementedError

    def label(self, name: str) -> List[str]:
        return [f"{name}:"]

    def load_immediate(self, value: int) -> List[str]:
        raise NotImplementedError

    def load_variable(self, slot: str) -> List[str]:
        raise NotImplementedError

    def store_variable(self, slot: str) -> List[str]:
        raise NotImplementedError

    def store_reference(self, slot: str, label: str) -> List[str]:
        raise NotImplementedError

    def save_scratch(self) -> List[str]:
        raise NotImplementedError

    def restore_saved(self) -> List[str]:
        raise NotImplementedError

    def binary(self, op: str) -> List[str]:
        raise NotImplementedError

    def unary(self, op: str) -> List[str]:
        raise NotImplementedError

    def branch_if_false(self, target: str) -> List[str]:
        raise NotImplementedError

    def jump(self, target: str) -> List[str]:
        raise NotImplementedError

    def write_char(self, code: int) -> List[str]:
        raise NotImplementedError

    def write_newline(self) -> List[str]:
        return self.write_char(ord('\n'))

    def call_print_int(self) -> List[str]:
        raise NotImplementedError

    def print_string(self, slot: str, loop: str, zero: str, end: str) -> List[str]:
        raise NotImplementedError

    def print_int_routine(self) -> List[str]:
        raise NotImplementedError

    def traps_for(self, op: str) -> Tuple[str, ...]:
        """Trap routines the lowering of `op` may jump to."""
        return ()

    def trap_routine(self, name: str) -> List[str]:
        raise NotImplementedError

    def literal_data(self, label: str, text: str) -> List[str]:
        raise NotImplementedError

    def variable_data(self, slot: str) -> List[str]:
        raise NotImplementedError

    def runtime_data(self, stack_words: int) -> List[str]:
        raise NotImplementedError


class RiscVTarget(TargetISA):
    """RISC-V style backend.

    Register usage:
      x5   scratch / expression result
      x6   secondary (restored left operand), store address
      x7   address temporary, division remainder
      x2   expression stack pointer, grows down from `stack_top`
      x10  argument to `print_int` and to `ewrite`
      x1   return address
    `print_int` clobbers x5-x13 and is only called between statements.
    """
    name = 'riscv'
    scratch = 'x5'
    secondary = 'x6'
    address = 'x7'
    stack_pointer = 'x2'
    argument = 'x10'
    return_address = 'x1'
    buffer_words = 12

    BINARY: Dict[str, List[str]] = {
        '+': ['add x5, x6, x5'],
        '-': ['sub x5, x6, x5'],
        '*': ['mul x5, x6, x5'],
        # exact quotients only; a zero divisor or a remainder jumps to a trap
        '/': [
            'beq x5, x0, trap_div_zero',
            'rem x7, x6, x5',
            'bne x7, x0, trap_div_inexact',
            'div x5, x6, x5',
        ],
        '==': ['seq x5, x6, x5'],
        '!=': ['sne x5, x6, x5'],
        '<': ['slt x5, x6, x5'],
        '>': ['slt x5, x5, x6'],
        '<=': ['sge x5, x5, x6'],
        '>=': ['sge x5, x6, x5'],
        # boolean and/or: normalise both sides to 0/1 first
        '&&': ['sne x6, x6, x0', 'sne x5, x5, x0', 'and x5, x6, x5'],
        '||': ['sne x6, x6, x0', 'sne x5, x5, x0', 'or x5, x6, x5'],
    }

    UNARY: Dict[str, List[str]] = {
        '!': ['seq x5, x5, x0'],
        '-': ['sub x5, x0, x5'],
    }

    # runtime traps: label -> message written before halting
    TRAPS: Dict[str, str] = {
        'trap_div_zero': 'DivisionByZero: division by zero',
        'trap_div_inexact': 'UnsupportedFeature: division with a remainder needs a Float',
    }
    OP_TRAPS: Dict[str, Tuple[str, ...]] = {
        '/': ('trap_div_zero', 'trap_div_inexact'),
    }

    def prologue(self) -> List[str]:
        return ['main:', f'li {self.stack_pointer}, stack_top']

    def epilogue(self) -> List[str]:
        return ['ebreak']

    def load_immediate(self, value: int) -> List[str]:
        return [f'li {self.scratch}, {value}']

    def load_variable(self, slot: str) -> List[str]:
        return [f'li {self.address}, {slot}', f'lw {self.scratch}, {self.address}, 0']

    def store_variable(self, slot: str) -> List[str]:
        return [f'li {self.secondary}, {slot}', f'sw {self.secondary}, 0, {self.scratch}']

    def store_reference(self, slot: str, label: str) -> List[str]:
        return [
            f'li {self.address}, {label}',
            f'li {self.secondary}, {slot}',
            f'sw {self.secondary}, 0, {self.address}',
        ]

    def save_scratch(self) -> List[str]:
        sp = self.stack_pointer
        return [f'addi {sp}, {sp}, -1', f'sw {sp}, 0, {self.scratch}']

    def restore_saved(self) -> List[str]:
        sp = self.stack_pointer
        return [f'lw {self.secondary}, {sp}, 0', f'addi {sp}, {sp}, 1']

    def binary(self, op: str) -> List[str]:
        if op not in self.BINARY:
            raise UnsupportedOperator(f'no {self.name} lowering for operator {op}')
        return list(self.BINARY[op])

    def unary(self, op: str) -> List[str]:
        if op not in self.UNARY:
            raise UnsupportedOperator(f'no {self.name} lowering for unary operator {op}')
        return list(self.UNARY[op])

    def branch_if_false(self, target: str) -> List[str]:
        return [f'beq {self.scratch}, x0, {target}']

    def jump(self, target: str) -> List[str]:
        return [f'jal x0, {target}']

    def write_char(self, code: int) -> List[str]:
        return [f'li {self.argument}, {code}', f'ewrite {self.argument}']

    def call_print_int(self) -> List[str]:
        return [f'addi {self.argument}, {self.scratch}, 0', f'jal {self.return_address}, print_int']

    def print_string(self, slot: str, loop: str, zero: str, end: str) -> List[str]:
        # x10 walks the pooled bytes until the 0 terminator; a 0 slot prints the number 0
        return [
            f'li x6, {slot}',
            'lw x10, x6, 0',
            f'beq x10, x0, {zero}',
            f'{loop}:',
            'lw x11, x10, 0',
            f'beq x11, x0, {end}',
            'ewrite x11',
            'addi x10, x10, 1',
            f'jal x0, {loop}',
            f'{zero}:',
            f'jal {self.return_address}, print_int',
            f'{end}:',
        ]

    def print_int_routine(self) -> List[str]:
        return [
            'print_int:',
            'beq x10, x0, print_int_zero',
            'blt x10, x0, print_int_neg',
            'addi x5, x10, 0',
            'li x6, 0',
            'li x7, 10',
            'print_div_loop:',
            'div x8, x5, x7',
            'rem x9, x5, x7',
            'addi x5, x8, 0',
            'li x11, buf',
            'add x11, x11, x6',
            'sw x11, 0, x9',
            'addi x6, x6, 1',
            'bne x5, x0, print_div_loop',
            'print_print_loop:',
            'addi x6, x6, -1',
            'li x11, 48',
            'li x13, buf',
            'add x13, x13, x6',
            'lw x9, x13, 0',
            'add x11, x11, x9',
            'ewrite x11',
            'bne x6, x0, print_print_loop',
            'jalr x0, x1, 0',
            'print_int_zero:',
            'li x11, 48',
            'ewrite x11',
            'jalr x0, x1, 0',
            'print_int_neg:',
            'li x11, 45',
            'ewrite x11',
            'sub x5, x0, x10',
            'addi x10, x5, 0',
            'jal x0, print_int',
        ]

    def traps_for(self, op: str) -> Tuple[str, ...]:
        return self.OP_TRAPS.get(op, ())

    def trap_routine(self, name: str) -> List[str]:
        lines = [f'{name}:']
        for c in self.TRAPS[name] + '\n':
            lines.extend(self.write_char(ord(c)))
        lines.extend(self.epilogue())
        return lines

    def literal_data(self, label: str, text: str) -> List[str]:
        lines = [f'{label}:']
        lines.extend(f'data {ord(c)} * 1' for c in text)
        lines.append('data 0 * 1')  # terminator
        return lines

    def variable_data(self, slot: str) -> List[str]:
        return [f'{slot}:', 'data 0 * 1']

    def runtime_data(self, stack_words: int) -> List[str]:
        return [
            'buf:',
            f'data 0 * {self.buffer_words}',
            'stack:',
            f'data 0 * {max(stack_words, 1)}',
            'stack_top:',
            'data 0 * 1',
        ]


TARGETS: Dict[str, type] = {
    RiscVTarget.name: RiscVTarget,
}


def get_target(name: str) -> TargetISA:
    if name not in TARGETS:
        raise KeyError(f'unknown target {name!r}; available: {", ".join(sorted(TARGETS))}')
    return TARGETS[name]()
