from typing import List, Union
import bisect
from ..constants import TAR_MEDIA_TYPE
from ..ByteSource.ByteSource import ByteSource
from ..ByteSource.TarContent import TarContent


BlobPart = Union[bytes, TarContent]


class TarBlob(ByteSource):
    """
    The serialized form of an archive: an ordered list of parts that are either
    bytes or entry contents. Content bytes are not copied until the blob is read.

    A TarBlob is itself a ByteSource, so it can be parsed back into an archive.
    """
    def __init__(self, parts: List[BlobPart], *, type: str = TAR_MEDIA_TYPE):
        self._parts = list(parts)
        self.type = type
        self._part_offsets = []
        offset = 0
        for part in self._parts:
            self._part_offsets.append(offset)
            offset += len(part)
        self.size = offset

    @property
    def parts(self) -> List[BlobPart]:
        return list(self._parts)

    def _read(self, start: int, end: int) -> bytes:
        pieces = []
        first = max(bisect.bisect_right(self._part_offsets, start) - 1, 0)
        for i in range(first, len(self._parts)):
            part = self._parts[i]
            part_offset = self._part_offsets[i]
            part_end = part_offset + len(part)
            if part_end <= start:
                continue
            if part_offset >= end:
                break
            a = max(start - part_offset, 0)
            b = min(end, part_end) - part_offset
            if isinstance(part, TarContent):
                pieces.append(part.slice(a, b))
            else:
                pieces.append(part[a:b])
        return b"".join(pieces)

    def iter_chunks(self):
        for part in self._parts:
            if isinstance(part, TarContent):
                yield part.read()
            else:
                yield part

    def to_bytes(self) -> bytes:
        return b"".join(self.iter_chunks())

    def write_to(self, f) -> int:
        """Write the blob to a binary file object. Returns the number of bytes written."""
        num_bytes = 0
        for chunk in self.iter_chunks():
            f.write(chunk)
            num_bytes += len(chunk)
        return num_bytes

    def save(self, path: str) -> None:
        with open(path, "wb") as f:
            self.write_to(f)
