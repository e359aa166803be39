from typing import Union
from enum import Enum
from ..constants import BLOCK_SIZE, TarEntryType
from ..conversion.checksum import is_zeroed
from ..ByteSource.ByteSource import ByteSource
from ..ByteSource.TarContent import TarContent
from ..TarHeader.TarHeader import TarHeader, read_header
from .TarEntry import TarEntry


class MalformedArchiveError(Exception):
    pass


class TarReaderState(Enum):
    AWAIT_HEADER = "await_header"
    HEADER_PARSED = "header_parsed"
    AWAIT_CONTENT = "await_content"
    CONTENT_CONSUMED = "content_consumed"
    END_OF_ARCHIVE = "end_of_archive"


class TarBlockReader:
    """
    Sequential, single-pass reader of the entries of a tar byte source.

    The cursor counts 512-byte blocks. Blocks past the end of the source read
    as zeros, and a short final block is zero-padded.
    """
    def __init__(self, source: ByteSource):
        self._source = source
        self.block_index = 0
        self.state = TarReaderState.AWAIT_HEADER

    def peek_block(self) -> bytes:
        start = self.block_index * BLOCK_SIZE
        data = self._source.slice(start, start + BLOCK_SIZE)
        if len(data) < BLOCK_SIZE:
            data = data + b"\x00" * (BLOCK_SIZE - len(data))
        return data

    def next_block(self) -> bytes:
        block = self.peek_block()
        if self.block_index * BLOCK_SIZE < self._source.size:
            self.block_index += 1
        return block

    def read_header(self) -> Union[TarHeader, None]:
        """Read the next header, or None at the end of the archive."""
        if self.state != TarReaderState.AWAIT_HEADER:
            raise Exception(f"Unexpected reader state: {self.state}")
        while True:
            block = self.next_block()
            if not is_zeroed(block):
                break
            if is_zeroed(self.peek_block()):
                self.state = TarReaderState.END_OF_ARCHIVE
                return None
            # a lone zero block is not an end marker
        self.state = TarReaderState.HEADER_PARSED
        return read_header(block)

    def read_content(self, header: TarHeader) -> TarContent:
        if self.state != TarReaderState.HEADER_PARSED:
            raise Exception(f"Unexpected reader state: {self.state}")
        self.state = TarReaderState.AWAIT_CONTENT
        start = self.block_index * BLOCK_SIZE
        end = start + header.size
        if self._source.size < end:
            raise MalformedArchiveError(
                f"Malformed archive: Expected size {end}, got size {self._source.size}"
            )
        content = TarContent(
            self._source,
            start=start,
            end=end,
            name=header.path,
            last_modified=header.last_modified * 1000
        )
        # padding after the content is skipped, not validated
        self.block_index += header.num_content_blocks
        self.state = TarReaderState.CONTENT_CONSUMED
        return content

    def read_entry(self) -> Union[TarEntry, None]:
        header = self.read_header()
        if header is None:
            return None
        if header.typeflag not in (TarEntryType.CHARDEV, TarEntryType.BLOCKDEV):
            header.devmajor = None
            header.devminor = None
        content = self.read_content(header)
        self.state = TarReaderState.AWAIT_HEADER
        return TarEntry(header=header, content=content)

    def __iter__(self):
        while True:
            entry = self.read_entry()
            if entry is None:
                return
            yield entry
