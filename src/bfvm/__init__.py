from .api import RunOptions, RunResult, compile_file, compile_string, run_file, run_string
from .compiler import compile_program, matching_brackets
from .errors import BFVMConfigError, BFVMError, InputExhausted, MemoryUnderflow, SourceLoadError, UnbalancedLoop
from .lexer import Lexer, tokenize
from .ops import (
    Add, Input, JumpIfNonZero, JumpIfZero, MoveLeft, MoveRight, Output, Program, Sub,
)
from .render import render_program, to_source
from .state import MachineState, Status, Tape, VMConfig
from .streams import NO_INPUT, BufferOutput, BytesInput, StreamInput, StreamOutput, TeeOutput
from .vm import VirtualMachine, execute

__all__ = [
    'Add',
    'Sub',
    'MoveLeft',
    'MoveRight',
    'Input',
    'Output',
    'JumpIfZero',
    'JumpIfNonZero',
    'Program',
    'Lexer',
    'tokenize',
    'compile_program',
    'matching_brackets',
    'VirtualMachine',
    'execute',
    'VMConfig',
    'Tape',
    'MachineState',
    'Status',
    'BytesInput',
    'StreamInput',
    'BufferOutput',
    'StreamOutput',
    'TeeOutput',
    'NO_INPUT',
    'render_program',
    'to_source',
    'BFVMError',
    'UnbalancedLoop',
    'MemoryUnderflow',
    'InputExhausted',
    'BFVMConfigError',
    'SourceLoadError',
    'RunOptions',
    'RunResult',
    'compile_string',
    'compile_file',
    'run_string',
    'run_file',
]
