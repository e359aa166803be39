from typing import Union
import time
from .ByteSource import ByteSource, BytesByteSource


class TarContent:
    """
    The content of a regular file entry: a byte range of a ByteSource plus the
    path and modification time it was archived under.
    """
    def __init__(
        self,
        source: ByteSource,
        *,
        start: int = 0,
        end: Union[int, None] = None,
        name: str = "",
        last_modified: Union[float, None] = None
    ):
        """
        Parameters
        ----------
        source : ByteSource
            The source holding the bytes.
        start : int
            Offset of the first byte in the source.
        end : int, optional
            Offset just past the last byte. Defaults to the end of the source.
        name : str
            The path of the entry.
        last_modified : float, optional
            Modification time in milliseconds since the epoch. Defaults to now.
        """
        if end is None:
            end = source.size
        if start < 0 or end < start or end > source.size:
            raise ValueError(f"Invalid byte range {start}-{end} for source of size {source.size}")
        self._source = source
        self._start = start
        self._end = end
        self.name = name
        self.last_modified = last_modified if last_modified is not None else time.time() * 1000

    @staticmethod
    def from_bytes(data: Union[bytes, bytearray, memoryview], *, name: str = "", last_modified: Union[float, None] = None) -> "TarContent":
        return TarContent(BytesByteSource(data), name=name, last_modified=last_modified)

    @property
    def size(self) -> int:
        return self._end - self._start

    def slice(self, start: int = 0, end: Union[int, None] = None) -> bytes:
        if end is None or end > self.size:
            end = self.size
        if start < 0:
            start = 0
        if start >= end:
            return b""
        return self._source.slice(self._start + start, self._start + end)

    def read(self) -> bytes:
        return self.slice(0, self.size)

    def __len__(self):
        return self.size

    def __repr__(self):
        return f"TarContent(name={self.name!r}, size={self.size})"
