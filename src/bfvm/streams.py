from __future__ import annotations

from typing import BinaryIO, Optional, Union


class BytesInput:
    """Input capability over an in-memory buffer."""

    def __init__(self, data: Union[bytes, bytearray, str] = b""):
        if isinstance(data, str):
            data = data.encode('latin-1')
        self._data = bytes(data)
        self._pos = 0

    def read_byte(self) -> Optional[int]:
        if self._pos >= len(self._data):
            return None
        value = self._data[self._pos]
        self._pos += 1
        return value


class StreamInput:
    """Input capability reading one byte at a time from a binary stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def read_byte(self) -> Optional[int]:
        chunk = self._stream.read(1)
        if not chunk:
            return None
        return chunk[0]


class _NoInput:
    def read_byte(self) -> Optional[int]:
        return None


NO_INPUT = _NoInput()


class BufferOutput:
    """Output sink collecting bytes in memory."""

    def __init__(self):
        self._buf = bytearray()

    def write_byte(self, value: int) -> None:
        self._buf.append(value & 0xFF)

    def getvalue(self) -> bytes:
        return bytes(self._buf)


class TeeOutput:
    """Output sink forwarding each byte to several sinks in order."""

    def __init__(self, *sinks):
        self._sinks = sinks

    def write_byte(self, value: int) -> None:
        for sink in self._sinks:
            sink.write_byte(value)


class StreamOutput:
    """Output sink writing to a binary stream, flushed per byte by default."""

    def __init__(self, stream: BinaryIO, flush: bool = True):
        self._stream = stream
        self._flush = flush

    def write_byte(self, value: int) -> None:
        self._stream.write(bytes((value & 0xFF,)))
        if self._flush:
            self._stream.flush()


def as_input(source) -> object:
    """Wrap bytes/str in BytesInput; pass capability objects through; None -> NO_INPUT."""
    if source is None:
        return NO_INPUT
    if isinstance(source, (bytes, bytearray, str)):
        return BytesInput(source)
    if not hasattr(source, 'read_byte'):
        raise TypeError(f"input must be bytes, str or have read_byte(), got {type(source).__name__}")
    return source
