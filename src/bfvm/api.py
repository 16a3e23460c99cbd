from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .compiler import compile_program
from .errors import BFVMError, SourceLoadError
from .ops import Program
from .state import MachineState, VMConfig
from .streams import BufferOutput, TeeOutput
from .vm import VirtualMachine


@dataclass(frozen=True)
class RunOptions:
    cell_bits: int = 8
    jit: bool = True

    def to_config(self) -> VMConfig:
        return VMConfig(cell_bits=self.cell_bits, jit=self.jit)


@dataclass(frozen=True)
class RunResult:
    output: bytes
    state: MachineState

    @property
    def text(self) -> str:
        return self.output.decode('latin-1')


def read_source(path: str | Path, *, encoding: str = "utf-8") -> str:
    p = Path(path)
    try:
        return p.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(message=f"SourceLoadError: cannot read {p}: {e}", path=str(p)) from e


def compile_string(source: str) -> Program:
    return compile_program(source)


def compile_file(path: str | Path, *, encoding: str = "utf-8") -> Program:
    return compile_program(read_source(path, encoding=encoding))


def run_program(program: Program, *, stdin=b"", output=None, options: Optional[RunOptions] = None) -> RunResult:
    """
    Run ``program`` and collect what it writes.

    Bytes also go to ``output`` when one is given. If the run faults, the
    bytes written so far are attached to the error as ``output``.
    """
    opts = options if options is not None else RunOptions()
    buffer = BufferOutput()
    sink = buffer if output is None else TeeOutput(buffer, output)
    vm = VirtualMachine(program, config=opts.to_config(), stdin=stdin, output=sink)
    try:
        state = vm.run()
    except BFVMError as e:
        e.output = buffer.getvalue()
        raise
    return RunResult(output=buffer.getvalue(), state=state)


def run_string(source: str, *, stdin=b"", output=None, options: Optional[RunOptions] = None) -> RunResult:
    return run_program(compile_program(source), stdin=stdin, output=output, options=options)


def run_file(path: str | Path, *, stdin=b"", output=None, options: Optional[RunOptions] = None,
             encoding: str = "utf-8") -> RunResult:
    return run_program(compile_file(path, encoding=encoding), stdin=stdin, output=output, options=options)
