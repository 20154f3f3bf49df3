"""Reference machine for the RISC-V style assembly emitted by the compiler.

Only used by the test-suite: it assembles the text artifact (one word of
memory per instruction, `data V * N` reserving N words), then executes
from `main` until `ebreak`, collecting everything written with `ewrite`.
"""

from typing import Dict, List, Tuple


class MachineError(Exception):
    pass


def _reg(name: str) -> int:
    if not name.startswith('x'):
        raise MachineError(f'bad register {name!r}')
    return int(name[1:])


def _trunc_div(a: int, b: int) -> int:
    if b == 0:
        return -1
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def assemble(text: str) -> Tuple[Dict[int, Tuple[str, List[str]]], Dict[int, int], Dict[str, int]]:
    labels: Dict[str, int] = {}
    program: Dict[int, Tuple[str, List[str]]] = {}
    memory: Dict[int, int] = {}
    lines = [line.strip() for line in text.splitlines()]
    addr = 0
    for line in lines:
        if not line:
            continue
        if line.endswith(':'):
            name = line[:-1]
            if name in labels:
                raise MachineError(f'duplicate label {name}')
            labels[name] = addr
        elif line.startswith('data '):
            value, count = line[len('data '):].split('*')
            for _ in range(int(count)):
                memory[addr] = int(value)
                addr += 1
        else:
            op, _, rest = line.partition(' ')
            program[addr] = (op, [a.strip() for a in rest.split(',')] if rest else [])
            addr += 1
    return program, memory, labels


def run(text: str, max_steps: int = 1_000_000) -> str:
    """Execute an assembly artifact and return what it wrote."""
    program, memory, labels = assemble(text)
    regs = [0] * 32
    out: List[str] = []

    def imm(token: str) -> int:
        if token in labels:
            return labels[token]
        try:
            return int(token)
        except ValueError:
            raise MachineError(f'undefined label {token!r}')

    def target(token: str) -> int:
        if token not in labels:
            raise MachineError(f'undefined branch target {token!r}')
        return labels[token]

    def setreg(name: str, value: int):
        r = _reg(name)
        if r != 0:
            regs[r] = value

    alu = {
        'add': lambda a, b: a + b,
        'sub': lambda a, b: a - b,
        'mul': lambda a, b: a * b,
        'div': _trunc_div,
        'rem': lambda a, b: a - _trunc_div(a, b) * b if b else a,
        'and': lambda a, b: a & b,
        'or': lambda a, b: a | b,
        'slt': lambda a, b: 1 if a < b else 0,
        'seq': lambda a, b: 1 if a == b else 0,
        'sne': lambda a, b: 1 if a != b else 0,
        'sge': lambda a, b: 1 if a >= b else 0,
    }
    branches = {
        'beq': lambda a, b: a == b,
        'bne': lambda a, b: a != b,
        'blt': lambda a, b: a < b,
    }

    pc = target('main')
    for _ in range(max_steps):
        if pc not in program:
            raise MachineError(f'pc {pc} is not an instruction')
        op, args = program[pc]
        next_pc = pc + 1
        if op == 'ebreak':
            return ''.join(out)
        if op == 'li':
            setreg(args[0], imm(args[1]))
        elif op == 'addi':
            setreg(args[0], regs[_reg(args[1])] + int(args[2]))
        elif op in alu:
            setreg(args[0], alu[op](regs[_reg(args[1])], regs[_reg(args[2])]))
        elif op == 'lw':
            setreg(args[0], memory.get(regs[_reg(args[1])] + int(args[2]), 0))
        elif op == 'sw':
            memory[regs[_reg(args[0])] + int(args[1])] = regs[_reg(args[2])]
        elif op in branches:
            if branches[op](regs[_reg(args[0])], regs[_reg(args[1])]):
                next_pc = target(args[2])
        elif op == 'jal':
            setreg(args[0], pc + 1)
            next_pc = target(args[1])
        elif op == 'jalr':
            next_pc = regs[_reg(args[1])] + int(args[2])
            setreg(args[0], pc + 1)
        elif op == 'ewrite':
            out.append(chr(regs[_reg(args[0])]))
        else:
            raise MachineError(f'unknown instruction {op}')
        pc = next_pc
    raise MachineError('step limit exceeded')
