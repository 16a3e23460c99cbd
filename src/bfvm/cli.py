from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from .api import compile_file
from .errors import BFVMError
from .render import render_program
from .state import CELL_WIDTHS, VMConfig
from .streams import StreamInput, StreamOutput
from .vm import VirtualMachine

log = logging.getLogger("bfvm")


def _setup_logging(verbose: bool) -> None:
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)
    log.setLevel(logging.DEBUG if verbose else logging.INFO)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bfvm",
        description="Compile a Brainfuck program to run-length instructions and run it.",
    )
    parser.add_argument("file", help="Brainfuck source file")
    parser.add_argument("--cell-bits", type=int, choices=CELL_WIDTHS, default=8,
                        help="Cell width in bits (default 8)")
    parser.add_argument("--no-jit", action="store_true", help="Run with the pure Python stepper")
    parser.add_argument("--dump", action="store_true", help="Print the compiled program instead of running it")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    try:
        start = time.time()
        program = compile_file(args.file)
        log.debug("compilation took %.2f ms", (time.time() - start) * 1000)

        if args.dump:
            print(render_program(program))
            return 0

        config = VMConfig(cell_bits=args.cell_bits, jit=not args.no_jit)
        vm = VirtualMachine(
            program,
            config=config,
            stdin=StreamInput(sys.stdin.buffer),
            output=StreamOutput(sys.stdout.buffer),
        )
        start = time.time()
        state = vm.run()
        log.debug("execution took %.2f ms (%d steps)", (time.time() - start) * 1000, state.steps)
    except BFVMError as e:
        sys.stdout.flush()
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
