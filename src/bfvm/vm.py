from __future__ import annotations

import logging
from typing import Optional

from numba import njit

from .errors import make_input_error, make_underflow_error
from .ops import (
    OP_ADD, OP_INPUT, OP_JNZ, OP_JZ, OP_LEFT, OP_OUTPUT, OP_RIGHT, OP_SUB,
    Add, Input, JumpIfNonZero, JumpIfZero, MoveLeft, MoveRight, Output, Program, Sub,
)
from .state import MachineState, Status, Tape, VMConfig
from .streams import BufferOutput, as_input

log = logging.getLogger(__name__)

# Reasons the JIT loop hands control back to Python.
STOP_HALT = 0
STOP_OUTPUT = 1
STOP_INPUT = 2
STOP_GROW = 3
STOP_UNDERFLOW = 4


@njit(cache=True)
def jit_run(codes, args, memory, pc, head, length, mask):
    """
    Execute the encoded program until it halts or needs Python.

    Stops *before* executing any Input/Output instruction, a MoveRight that
    would leave the allocated buffer, or a MoveLeft that would underflow, so
    the caller can service that instruction and resume.

    Returns (pc, head, length, steps, stop_reason).
    """
    prog_len = len(codes)
    capacity = len(memory)
    steps = 0
    stop = STOP_HALT

    while pc < prog_len:
        op = codes[pc]
        n = args[pc]

        if op == OP_ADD:
            memory[head] = (memory[head] + n) & mask
        elif op == OP_SUB:
            memory[head] = (memory[head] - n) & mask
        elif op == OP_RIGHT:
            if head + n >= capacity:
                stop = STOP_GROW
                break
            head += n
            if head >= length:
                length = head + 1
        elif op == OP_LEFT:
            if head < n:
                stop = STOP_UNDERFLOW
                break
            head -= n
        elif op == OP_JZ:
            if memory[head] == 0:
                pc = n
                steps += 1
                continue
        elif op == OP_JNZ:
            if memory[head] != 0:
                pc = n
                steps += 1
                continue
        elif op == OP_OUTPUT:
            stop = STOP_OUTPUT
            break
        elif op == OP_INPUT:
            stop = STOP_INPUT
            break

        pc += 1
        steps += 1

    return pc, head, length, steps, stop


class VirtualMachine:
    """
    Tape machine executing a resolved Program.

    ``step()`` runs one instruction in Python. ``run()`` runs to completion,
    using the numba loop when ``config.jit`` is set and dropping back to
    ``step()`` for the instructions the loop cannot service itself.
    """

    def __init__(self, program: Program, config: Optional[VMConfig] = None, stdin=None, output=None):
        self.program = program
        self.config = config if config is not None else VMConfig()
        self.stdin = as_input(stdin)
        self.output = output if output is not None else BufferOutput()
        self._codes, self._args = program.encode()
        self.reset()

    def reset(self) -> None:
        tape = Tape(dtype=self.config.dtype, capacity=self.config.initial_capacity)
        self.state = MachineState(tape=tape)

    @property
    def halted(self) -> bool:
        return self.state.status is Status.HALTED

    def _fault(self, err):
        self.state.status = Status.FAULTED
        log.debug("faulted at pc=%d head=%d: %s", self.state.pc, self.state.head, err.message)
        return err

    def step(self) -> bool:
        """Execute one instruction. Returns False once the machine has stopped."""
        st = self.state
        if st.status is not Status.RUNNING:
            return False
        if st.pc >= len(self.program):
            st.status = Status.HALTED
            return False

        ins = self.program[st.pc]
        tape = st.tape
        mask = self.config.mask
        next_pc = st.pc + 1

        if isinstance(ins, Add):
            tape.memory[st.head] = (int(tape.memory[st.head]) + ins.count) & mask
        elif isinstance(ins, Sub):
            tape.memory[st.head] = (int(tape.memory[st.head]) - ins.count) & mask
        elif isinstance(ins, MoveRight):
            new_head = st.head + ins.count
            if new_head >= tape.capacity:
                log.debug("growing tape to reach cell %d", new_head)
            tape.ensure(new_head)
            st.head = new_head
        elif isinstance(ins, MoveLeft):
            if st.head < ins.count:
                raise self._fault(make_underflow_error(pc=st.pc, head=st.head, count=ins.count))
            st.head -= ins.count
        elif isinstance(ins, JumpIfZero):
            if tape.memory[st.head] == 0:
                next_pc = ins.target
        elif isinstance(ins, JumpIfNonZero):
            if tape.memory[st.head] != 0:
                next_pc = ins.target
        elif isinstance(ins, Output):
            value = int(tape.memory[st.head]) & 0xFF
            for _ in range(ins.count):
                self.output.write_byte(value)
            st.output_count += ins.count
        elif isinstance(ins, Input):
            for _ in range(ins.count):
                value = self.stdin.read_byte()
                if value is None:
                    raise self._fault(make_input_error(pc=st.pc))
                tape.memory[st.head] = value & mask
                st.input_count += 1
        else:
            raise TypeError(f"Unknown instruction: {ins!r}")

        st.pc = next_pc
        st.steps += 1
        if st.pc >= len(self.program):
            st.status = Status.HALTED
            return False
        return True

    def _run_jit(self) -> None:
        st = self.state
        mask = self.config.mask
        while st.status is Status.RUNNING:
            pc, head, length, steps, stop = jit_run(
                self._codes, self._args, st.tape.memory,
                st.pc, st.head, st.tape.length, mask,
            )
            st.pc = int(pc)
            st.head = int(head)
            st.tape.length = int(length)
            st.steps += int(steps)

            if stop == STOP_HALT:
                st.status = Status.HALTED
                break
            # Output, input, tape growth and underflow are handled in Python.
            self.step()

    def run(self) -> MachineState:
        """Run until the program halts. Faults propagate as exceptions."""
        if self.config.jit:
            self._run_jit()
        else:
            while self.step():
                pass
        log.debug(
            "halted after %d steps, tape length %d, %d byte(s) written",
            self.state.steps, len(self.state.tape), self.state.output_count,
        )
        return self.state


def execute(program: Program, config: Optional[VMConfig] = None, stdin=None, output=None) -> MachineState:
    return VirtualMachine(program, config=config, stdin=stdin, output=output).run()
