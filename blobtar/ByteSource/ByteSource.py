from typing import Union
import os


class ByteSource:
    """
    A sized, sliceable source of bytes.

    Subclasses implement size and _read(start, end). Reads are blocking; a
    remote source may wait on the network.
    """
    size: int

    def slice(self, start: int = 0, end: Union[int, None] = None) -> bytes:
        if end is None or end > self.size:
            end = self.size
        if start < 0:
            start = 0
        if start >= end:
            return b""
        return self._read(start, end)

    def _read(self, start: int, end: int) -> bytes:
        raise NotImplementedError()

    def __len__(self):
        return self.size


class BytesByteSource(ByteSource):
    """A byte source backed by an in-memory buffer."""
    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self._data = bytes(data)
        self.size = len(self._data)

    def _read(self, start: int, end: int) -> bytes:
        return self._data[start:end]


class LocalFileByteSource(ByteSource):
    """
    A byte source backed by a local file. The file is opened for each read so
    no descriptor is held between reads.
    """
    def __init__(self, path: str):
        if not os.path.isfile(path):
            raise FileNotFoundError(f"File {path} not found")
        self.path = path
        self.size = os.path.getsize(path)

    def _read(self, start: int, end: int) -> bytes:
        with open(self.path, "rb") as f:
            f.seek(start)
            return f.read(end - start)


def as_byte_source(source) -> ByteSource:
    if isinstance(source, ByteSource):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return BytesByteSource(source)
    raise TypeError(f"Cannot use {type(source)} as a byte source")
