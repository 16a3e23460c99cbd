#!/usr/bin/env python3
"""
Facade and command line tests: compile/run helpers, file loading, CLI exit codes.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import io

import pytest

from bfvm import (
    BufferOutput, InputExhausted, MemoryUnderflow, RunOptions, SourceLoadError, Status, StreamOutput,
    UnbalancedLoop, compile_file, compile_string, run_file, run_string,
)
from bfvm.cli import main
from bfvm.ops import Add

MULTIPLY = "++++++++[>++++++++<-]>."


def test_compile_string():
    assert compile_string("+++") == [Add(3)]


def test_run_string_default_options():
    result = run_string(MULTIPLY)
    assert result.output == b"@"
    assert result.text == "@"
    assert result.state.status is Status.HALTED


def test_run_string_with_text_input():
    result = run_string(",+.", stdin="a")
    assert result.output == b"b"


def test_run_string_without_jit():
    result = run_string(MULTIPLY, options=RunOptions(jit=False))
    assert result.output == b"@"


def test_run_string_cell_width():
    result = run_string("-", options=RunOptions(cell_bits=16))
    assert result.state.cell == 65535


def test_run_string_errors_propagate():
    with pytest.raises(UnbalancedLoop):
        run_string("[")
    with pytest.raises(MemoryUnderflow):
        run_string("<")
    with pytest.raises(InputExhausted):
        run_string(",", stdin=b"")


def test_output_before_input_exhausted_is_kept():
    with pytest.raises(InputExhausted) as exc:
        run_string(",.,.", stdin=b"x")
    assert exc.value.output == b"x"


def test_output_before_underflow_is_kept():
    with pytest.raises(MemoryUnderflow) as exc:
        run_string("+" * 65 + ".<.", options=RunOptions(jit=False))
    assert exc.value.output == b"A"


def test_run_string_writes_to_caller_sink():
    sink = BufferOutput()
    with pytest.raises(InputExhausted):
        run_string("+" * 66 + "..,", output=sink)
    assert sink.getvalue() == b"BB"

    sink = BufferOutput()
    result = run_string(MULTIPLY, output=sink)
    assert result.output == b"@"
    assert sink.getvalue() == b"@"


def test_run_file_writes_to_caller_stream(tmp_path):
    path = tmp_path / "hi.bf"
    path.write_text("+" * 72 + ".+.")
    stream = io.BytesIO()
    result = run_file(path, output=StreamOutput(stream))
    assert stream.getvalue() == b"HI"
    assert result.output == b"HI"


def test_run_string_rejects_bad_input_type():
    with pytest.raises(TypeError):
        run_string(",", stdin=42)


def test_compile_and_run_file(tmp_path):
    path = tmp_path / "mul.bf"
    path.write_text("multiply 8 by 8\n" + MULTIPLY + "\n")
    assert len(compile_file(path)) == 9
    assert run_file(str(path)).output == b"@"


def test_missing_file(tmp_path):
    with pytest.raises(SourceLoadError) as exc:
        compile_file(tmp_path / "nope.bf")
    assert exc.value.path.endswith("nope.bf")


def test_cli_runs_program(tmp_path, monkeypatch, capsysbinary):
    path = tmp_path / "echo.bf"
    path.write_text(MULTIPLY + ",.")
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"z")))
    assert main([str(path)]) == 0
    assert capsysbinary.readouterr().out == b"@z"


def test_cli_cell_bits_option(tmp_path, monkeypatch, capsysbinary):
    path = tmp_path / "wide.bf"
    # 16 * 16 == 256, which is 0 in 8-bit cells and 256 in 16-bit cells.
    path.write_text("+" * 16 + "[>" + "+" * 16 + "<-]>[[-]" + "+" * 49 + ".[-]]")
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"")))
    assert main([str(path), "--cell-bits", "16", "--no-jit"]) == 0
    assert capsysbinary.readouterr().out == b"1"
    assert main([str(path), "--cell-bits", "8"]) == 0
    assert capsysbinary.readouterr().out == b""


def test_cli_dump(tmp_path, capsys):
    path = tmp_path / "loop.bf"
    path.write_text("++[-]")
    assert main([str(path), "--dump"]) == 0
    out = capsys.readouterr().out
    assert "0001  [  -> 4" in out


def test_cli_reports_compile_error(tmp_path, capsys):
    path = tmp_path / "bad.bf"
    path.write_text("+]")
    assert main([str(path)]) == 1
    assert "UnbalancedLoop" in capsys.readouterr().err


def test_cli_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.bf")]) == 1
    assert "SourceLoadError" in capsys.readouterr().err


def test_cli_reports_input_exhausted(tmp_path, monkeypatch, capsys):
    path = tmp_path / "read.bf"
    path.write_text(",.")
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"")))
    assert main([str(path)]) == 1
    assert "InputExhausted" in capsys.readouterr().err


def test_cli_rejects_bad_cell_width(tmp_path):
    path = tmp_path / "x.bf"
    path.write_text("+")
    with pytest.raises(SystemExit):
        main([str(path), "--cell-bits", "12"])
